"""
Endpoint subpackage for API v1.

Each module defines an APIRouter for one domain (auth, users,
products, dashboard, health).  The routers are aggregated in
``router.py`` at the package level.
"""
