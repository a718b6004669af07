"""Tests for configuration management."""

from __future__ import annotations

import json
import os
import tempfile

import pytest

from odoo_jsonrpc.config import OdooClientSettings, load_config
from odoo_jsonrpc.connection.client import ConnectionConfig, OdooClient

ENV_KEYS = [
    "ODOO_URL",
    "ODOO_HOST",
    "ODOO_PORT",
    "ODOO_HTTPS",
    "ODOO_DB",
    "ODOO_USERNAME",
    "ODOO_PASSWORD",
    "ODOO_TIMEOUT",
    "ODOO_VERIFY_SSL",
    "LOG_LEVEL",
    "ODOO_JSONRPC_CONFIG",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


class TestOdooClientSettings:

    def test_defaults(self):
        settings = OdooClientSettings()
        assert settings.odoo_url is None
        assert settings.odoo_timeout == 30
        assert settings.odoo_verify_ssl is True
        assert settings.log_level == "info"
        assert settings.connection_config() == ConnectionConfig("localhost", 8069, False)

    def test_url_takes_precedence(self, minimal_settings):
        assert minimal_settings.connection_config() == ConnectionConfig(
            "test.odoo.com", 8069, True
        )

    def test_host_port(self):
        settings = OdooClientSettings(odoo_host="erp", odoo_port=8070, odoo_https=True)
        assert settings.connection_config() == ConnectionConfig("erp", 8070, True)

    def test_invalid_url(self):
        with pytest.raises(ValueError, match="Unsupported URL scheme"):
            OdooClientSettings(odoo_url="ftp://bad.com")

    def test_invalid_port(self):
        with pytest.raises(ValueError, match="odoo_port must be 1-65535"):
            OdooClientSettings(odoo_port=0)

    def test_invalid_timeout(self):
        with pytest.raises(ValueError, match="odoo_timeout"):
            OdooClientSettings(odoo_timeout=0)

    def test_log_level_normalized(self):
        assert OdooClientSettings(log_level=" DEBUG ").log_level == "debug"

    def test_invalid_log_level(self):
        with pytest.raises(ValueError, match="log_level"):
            OdooClientSettings(log_level="verbose")

    def test_env_vars(self, monkeypatch):
        monkeypatch.setenv("ODOO_URL", "https://env.odoo.com:8443")
        monkeypatch.setenv("ODOO_DB", "envdb")
        monkeypatch.setenv("ODOO_TIMEOUT", "5")
        settings = OdooClientSettings()
        assert settings.connection_config() == ConnectionConfig("env.odoo.com", 8443, True)
        assert settings.odoo_db == "envdb"
        assert settings.odoo_timeout == 5

    def test_credentials(self, minimal_settings):
        assert minimal_settings.credentials() == ("testdb", "admin", "admin")

    def test_missing_credentials(self):
        with pytest.raises(ValueError, match="odoo_db, odoo_password"):
            OdooClientSettings(odoo_username="admin").credentials()

    def test_client_from_settings(self, minimal_settings):
        client = OdooClient.from_settings(minimal_settings)
        assert client.url("web/login") == "https://test.odoo.com:8069/web/login"


class TestLoadConfig:

    def test_defaults(self):
        settings = load_config()
        assert settings.odoo_host == "localhost"

    def test_cli_overrides(self):
        settings = load_config({"odoo_url": "https://cli.odoo.com", "log_level": "debug"})
        assert settings.odoo_url == "https://cli.odoo.com"
        assert settings.log_level == "debug"

    def test_config_file(self):
        with tempfile.NamedTemporaryFile("w", suffix=".json", delete=False) as f:
            json.dump({"odoo_url": "https://file.odoo.com", "odoo_db": "filedb"}, f)
            path = f.name
        try:
            settings = load_config({"_config_path": path, "odoo_db": "clidb"})
            assert settings.odoo_url == "https://file.odoo.com"
            assert settings.odoo_db == "clidb"
        finally:
            os.unlink(path)

    def test_config_file_from_env(self, monkeypatch):
        with tempfile.NamedTemporaryFile("w", suffix=".json", delete=False) as f:
            json.dump({"odoo_db": "filedb"}, f)
            path = f.name
        try:
            monkeypatch.setenv("ODOO_JSONRPC_CONFIG", path)
            assert load_config().odoo_db == "filedb"
        finally:
            os.unlink(path)

    def test_env_beats_file(self, monkeypatch):
        with tempfile.NamedTemporaryFile("w", suffix=".json", delete=False) as f:
            json.dump({"odoo_db": "filedb", "odoo_username": "fileuser"}, f)
            path = f.name
        try:
            monkeypatch.setenv("ODOO_DB", "envdb")
            settings = load_config({"_config_path": path})
            assert settings.odoo_db == "envdb"
            assert settings.odoo_username == "fileuser"
        finally:
            os.unlink(path)

    def test_missing_config_file(self):
        with pytest.raises(FileNotFoundError, match="Config file not found"):
            load_config({"_config_path": "/nonexistent/odoo.json"})

    def test_overrides_not_mutated(self):
        overrides = {"_config_path": None, "odoo_db": "x"}
        load_config(overrides)
        assert "_config_path" in overrides
