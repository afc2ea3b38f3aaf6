"""
Application package initializer.

This package contains the main entrypoint for the API and its
submodules: ``core`` (configuration, logging, persistence backends,
tokens and the auth gate), ``stores`` (one record store per
collection), ``services`` (business logic and list queries),
``schemas`` (request validation) and ``api`` (versioned routers).
"""

from .main import app  # noqa: F401
