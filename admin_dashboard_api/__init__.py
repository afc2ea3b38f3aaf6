"""
Top-level package for the Admin Dashboard API.

All functionality lives in submodules under ``app``; import the ASGI
application as ``admin_dashboard_api.app.main:app``.
"""

__all__ = []
