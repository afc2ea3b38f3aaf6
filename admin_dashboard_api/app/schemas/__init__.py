"""Pydantic models validating request bodies."""
