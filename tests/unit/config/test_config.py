"""Tests for Config loading: defaults, env overrides, YAML file and policy table."""

import logging

import pytest
from pydantic import ValidationError

from warden.config import Config, LoggingConfig, configure_logging
from warden.domain.shared.authorization.permission import PermissionKind
from warden.domain.shared.error import ConfigurationError


class TestDefaults:
    def test_defaults(self) -> None:
        config = Config()
        assert config.database.url.startswith("sqlite+aiosqlite://")
        assert config.auth.jwt.algorithm == "HS256"
        assert config.auth.base_role == "admin"
        assert config.policy is None

    def test_default_policy_is_canonical(self) -> None:
        table = Config().policy_table()
        assert table.names == frozenset({"super_admin", "developer", "admin"})


class TestOverrides:
    def test_env_nested_delimiter(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("WARDEN_DATABASE__URL", "sqlite+aiosqlite:///:memory:")
        monkeypatch.setenv("WARDEN_AUTH__BASE_ROLE", "developer")
        config = Config()
        assert config.database.url == "sqlite+aiosqlite:///:memory:"
        assert config.auth.base_role == "developer"

    def test_invalid_base_role(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("WARDEN_AUTH__BASE_ROLE", "Not Valid")
        with pytest.raises(ValidationError):
            Config()

    def test_yaml_file(self, tmp_path, monkeypatch: pytest.MonkeyPatch) -> None:
        path = tmp_path / "warden.yaml"
        path.write_text(
            "server:\n"
            "  port: 9001\n"
            "policy:\n"
            "  - name: owner\n"
            "    level: 2\n"
            "    capabilities: [create, read, update, delete, manage_roles]\n"
            "  - name: viewer\n"
            "    level: 1\n"
            "    capabilities: [read]\n"
        )
        monkeypatch.setenv("WARDEN_CONFIG_FILE", str(path))

        config = Config()

        assert config.server.port == 9001
        table = config.policy_table()
        assert table.names == frozenset({"owner", "viewer"})
        assert table.capabilities_of("viewer").capabilities == frozenset({PermissionKind.READ})
        table.validate_coverage()

    def test_env_beats_yaml(self, tmp_path, monkeypatch: pytest.MonkeyPatch) -> None:
        path = tmp_path / "warden.yaml"
        path.write_text("server:\n  port: 9001\n")
        monkeypatch.setenv("WARDEN_CONFIG_FILE", str(path))
        monkeypatch.setenv("WARDEN_SERVER__PORT", "9002")
        assert Config().server.port == 9002

    def test_duplicate_policy_roles(self) -> None:
        config = Config(
            policy=[
                {"name": "viewer", "level": 1, "capabilities": ["read"]},
                {"name": "viewer", "level": 2, "capabilities": ["read"]},
            ]
        )
        with pytest.raises(ConfigurationError):
            config.policy_table()


class TestConfigureLogging:
    def test_sets_root_level(self) -> None:
        root = logging.getLogger()
        saved_level, saved_handlers = root.level, root.handlers[:]
        try:
            configure_logging(LoggingConfig(level="DEBUG"))
            assert root.level == logging.DEBUG
            assert len(root.handlers) == 1
            assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING
        finally:
            root.handlers[:] = saved_handlers
            root.setLevel(saved_level)

    def test_log_file(self, tmp_path, monkeypatch: pytest.MonkeyPatch) -> None:
        log_file = tmp_path / "logs" / "warden.log"
        monkeypatch.setenv("WARDEN_LOG_FILE", str(log_file))
        root = logging.getLogger()
        saved_level, saved_handlers = root.level, root.handlers[:]
        try:
            configure_logging(LoggingConfig())
            logging.getLogger("warden.test").info("hello")
            assert log_file.exists()
            assert isinstance(root.handlers[0], logging.FileHandler)
        finally:
            for handler in root.handlers:
                handler.close()
            root.handlers[:] = saved_handlers
            root.setLevel(saved_level)
