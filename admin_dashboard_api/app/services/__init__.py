"""
Service layer.

Services hold the rules that sit between the routes and the record
stores (unique emails, password hashing, derived statistics, image
uploads) plus the stateless list-query helpers in ``query``.  They are
constructed per request from the stores on ``app.state``.
"""
