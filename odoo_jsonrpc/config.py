"""Configuration management using Pydantic Settings.

Priority: CLI args > env vars > config file > defaults.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings

from odoo_jsonrpc.connection.client import (
    DEFAULT_HOST,
    DEFAULT_PORT,
    ConnectionConfig,
    parse_url,
)

CONFIG_PATH_ENV = "ODOO_JSONRPC_CONFIG"

LOG_LEVELS = ("debug", "info", "warning", "error", "critical")


class OdooClientSettings(BaseSettings):
    """Settings for an application embedding the client."""

    # === Connection ===
    # odoo_url, when set, takes precedence over host/port/https
    odoo_url: str | None = None
    odoo_host: str = DEFAULT_HOST
    odoo_port: int = DEFAULT_PORT
    odoo_https: bool = False
    odoo_timeout: float = 30
    odoo_verify_ssl: bool = True

    # === Credentials ===
    odoo_db: str | None = None
    odoo_username: str | None = None
    odoo_password: str | None = None

    # === Logging ===
    log_level: str = "info"

    model_config = {
        "env_prefix": "",
        "case_sensitive": False,
        "extra": "ignore",
    }

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @model_validator(mode="after")
    def validate_settings(self) -> "OdooClientSettings":
        errors: list[str] = []

        if self.odoo_url:
            try:
                parse_url(self.odoo_url)
            except ValueError as e:
                errors.append(str(e))

        if not 1 <= self.odoo_port <= 65535:
            errors.append(f"odoo_port must be 1-65535, got: {self.odoo_port}")

        if self.odoo_timeout <= 0:
            errors.append(f"odoo_timeout must be > 0, got: {self.odoo_timeout}")

        if self.log_level not in LOG_LEVELS:
            errors.append(
                f"log_level must be one of {', '.join(LOG_LEVELS)}, got: {self.log_level}"
            )

        if errors:
            raise ValueError(
                "Configuration validation failed:\n  - " + "\n  - ".join(errors)
            )

        return self

    def connection_config(self) -> ConnectionConfig:
        if self.odoo_url:
            return parse_url(self.odoo_url)
        return ConnectionConfig(
            host=self.odoo_host, port=self.odoo_port, https=self.odoo_https
        )

    def credentials(self) -> tuple[str, str, str]:
        """Return ``(db, username, password)`` or raise if any is missing."""
        missing = [
            name
            for name in ("odoo_db", "odoo_username", "odoo_password")
            if not getattr(self, name)
        ]
        if missing:
            raise ValueError(f"Missing credentials: {', '.join(missing)}")
        return self.odoo_db, self.odoo_username, self.odoo_password  # type: ignore[return-value]


def load_config(
    cli_overrides: dict[str, Any] | None = None,
) -> OdooClientSettings:
    """Load settings with priority: CLI > env > config file > defaults."""
    cli = dict(cli_overrides or {})

    config_path = cli.pop("_config_path", None) or os.environ.get(CONFIG_PATH_ENV)

    file_values: dict[str, Any] = {}
    if config_path:
        path = Path(config_path)
        if path.exists():
            with open(path) as f:
                file_values = json.load(f)
        else:
            raise FileNotFoundError(f"Config file not found: {config_path}")

    # Init kwargs outrank env vars in pydantic-settings, so file values
    # must only fill in what the environment leaves unset.
    env_keys = {k.lower() for k in os.environ}
    file_values = {k: v for k, v in file_values.items() if k.lower() not in env_keys}

    merged = {**file_values, **cli}

    return OdooClientSettings(**merged)
