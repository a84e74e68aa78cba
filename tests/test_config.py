"""Tests for YAML ledger configuration."""

import pytest

from rewardledger.config import CONFIG_FILENAME, LedgerConfig, PullSettings, load_config
from rewardledger.exceptions import InvalidConfigurationError


class TestLedgerConfig:
    def test_defaults(self):
        config = LedgerConfig(admin="ops")
        assert config.ledger_account == "rewards"
        assert config.registry_id == "barn"
        assert config.log_level == "WARNING"
        assert config.pull is None

    def test_log_level_normalized(self):
        assert LedgerConfig(admin="ops", log_level="debug").log_level == "DEBUG"

    def test_unknown_log_level(self):
        with pytest.raises(ValueError):
            LedgerConfig(admin="ops", log_level="chatty")

    def test_blank_admin(self):
        with pytest.raises(ValueError):
            LedgerConfig(admin=" ")

    def test_pull_window_must_not_be_empty(self):
        with pytest.raises(ValueError):
            PullSettings(source="treasury", start_at=10, end_at=10, amount=5)


class TestLoadConfig:
    def test_load_file(self, tmp_path):
        path = tmp_path / "custom.yaml"
        path.write_text(
            "admin: did:example:ops\n"
            "registry_id: barn-v2\n"
            "pull:\n"
            "  source: treasury\n"
            "  start_at: 0\n"
            "  end_at: 100\n"
            "  amount: 1000\n"
        )
        config = load_config(path)
        assert config.admin == "did:example:ops"
        assert config.registry_id == "barn-v2"
        assert config.pull.amount == 1000

    def test_load_from_directory(self, tmp_path):
        (tmp_path / CONFIG_FILENAME).write_text("admin: ops\n")
        assert load_config(tmp_path).admin == "ops"

    def test_missing_file(self, tmp_path):
        with pytest.raises(InvalidConfigurationError, match="not found"):
            load_config(tmp_path / "nope.yaml")

    def test_invalid_window(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text(
            "admin: ops\npull: {source: t, start_at: 100, end_at: 50, amount: 1}\n"
        )
        with pytest.raises(InvalidConfigurationError):
            load_config(path)

    def test_malformed_yaml(self, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text("admin: [unclosed\n")
        with pytest.raises(InvalidConfigurationError):
            load_config(path)

    def test_missing_admin(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        with pytest.raises(InvalidConfigurationError):
            load_config(path)
