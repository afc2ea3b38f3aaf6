"""Configuration, logging, persistence backends, tokens and the auth gate."""
