"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables, with defaults provided for all fields.  Paths
(data directory, upload directory, log file) may be given relative to
the project root; use :meth:`Settings.resolve` to turn them into
absolute paths.  Tests construct their own ``Settings`` instance and
pass it to ``create_app`` instead of touching the environment.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import List

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent.parent


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "Admin Dashboard API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    debug: bool = os.getenv("DEBUG", "false").lower() in {"1", "true", "yes"}
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: str = os.getenv("LOG_FILE", "")

    secret_key: str = os.getenv("SECRET_KEY", "change_me")
    access_token_expire_minutes: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(60 * 24 * 7)))

    # One JSON document per collection lives in this directory
    # (users.json, products.json, logs.json).
    data_dir: str = os.getenv("DATA_DIR", "data")
    upload_dir: str = os.getenv("UPLOAD_DIR", "uploads")

    # Maximum number of activity log entries kept on disk.
    audit_log_cap: int = int(os.getenv("AUDIT_LOG_CAP", "1000"))
    # Pending activity entries held in memory before new ones are dropped.
    audit_queue_size: int = int(os.getenv("AUDIT_QUEUE_SIZE", "1000"))

    # Comma-separated list of allowed CORS origins; "*" allows any.
    cors_origins: str = os.getenv("CORS_ORIGINS", "*")

    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "5000"))

    def resolve(self, value: str) -> Path:
        """Return ``value`` as an absolute path, relative to the project root."""
        path = Path(value)
        if path.is_absolute():
            return path
        return (PROJECT_ROOT / path).resolve()

    @property
    def data_path(self) -> Path:
        return self.resolve(self.data_dir)

    @property
    def upload_path(self) -> Path:
        return self.resolve(self.upload_dir)

    @property
    def cors_origin_list(self) -> List[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.  Environment variables must
# be set before this module is imported.
settings = Settings()
