# Author: PB
# Date: 2026-10-19
# License: (c) HRDAG, 2026, GPL-2 or newer
#
# ---
# test/test_config.py

"""Tests for the client config module (toml-based)."""

import pytest

from fairos import config as config_module
from fairos.client import Client
from fairos.config import ClientConfig, load_config
from fairos.transport import DEFAULT_URL, IDLE_TIMEOUT, MAX_IDLE_PER_HOST


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    monkeypatch.delenv("FAIROS_URL", raising=False)
    monkeypatch.delenv("FAIROS_TIMEOUT", raising=False)
    # never read the developer's own config file
    monkeypatch.setattr(config_module, "DEFAULT_CONFIG", tmp_path / "absent.toml")


class TestClientConfig:
    def test_defaults(self):
        cfg = ClientConfig()
        assert cfg.url == DEFAULT_URL
        assert cfg.timeout == 60.0
        assert cfg.pool_idle_timeout == IDLE_TIMEOUT
        assert cfg.max_idle_per_host == MAX_IDLE_PER_HOST

    def test_from_dict(self):
        cfg = ClientConfig.from_dict({"url": "https://dfs.example.org/v1", "timeout": 5})
        assert cfg.url == "https://dfs.example.org/v1"
        assert cfg.timeout == 5.0
        assert cfg.max_idle_per_host == MAX_IDLE_PER_HOST

    def test_round_trip(self):
        cfg = ClientConfig(url="https://dfs.example.org/v1", timeout=10, max_idle_per_host=4)
        assert ClientConfig.from_dict(cfg.to_dict()) == cfg


class TestValidate:
    def test_default_is_valid(self):
        assert ClientConfig().validate() == ([], [])

    def test_bad_scheme(self):
        errors, _ = ClientConfig(url="ftp://dfs/v1").validate()
        assert any("http(s)" in e for e in errors)

    def test_missing_version_warns(self):
        errors, warnings = ClientConfig(url="http://localhost:9090").validate()
        assert errors == []
        assert any("/v1" in w for w in warnings)

    def test_plain_http_remote_warns(self):
        _, warnings = ClientConfig(url="http://dfs.example.org/v1").validate()
        assert any("unencrypted" in w for w in warnings)

    def test_https_remote_ok(self):
        assert ClientConfig(url="https://dfs.example.org/v1").validate() == ([], [])

    def test_bad_numbers(self):
        errors, _ = ClientConfig(timeout=0, max_idle_per_host=-1).validate()
        assert len(errors) == 2


class TestLoadConfig:
    def test_no_file_gives_defaults(self):
        assert load_config() == ClientConfig()

    def test_explicit_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "nope.toml")

    def test_reads_server_section(self, tmp_path):
        path = tmp_path / "client.toml"
        path.write_text(
            '[server]\n'
            'url = "https://dfs.example.org/v1"\n'
            'timeout = 15\n'
            'max_idle_per_host = 5\n'
        )
        cfg = load_config(path)
        assert cfg.url == "https://dfs.example.org/v1"
        assert cfg.timeout == 15.0
        assert cfg.max_idle_per_host == 5

    def test_default_file_used(self, tmp_path, monkeypatch):
        path = tmp_path / "default.toml"
        path.write_text('[server]\nurl = "http://127.0.0.1:9999/v1"\n')
        monkeypatch.setattr(config_module, "DEFAULT_CONFIG", path)
        assert load_config().url == "http://127.0.0.1:9999/v1"

    def test_invalid_toml(self, tmp_path):
        path = tmp_path / "client.toml"
        path.write_text("[server\nurl = ")
        with pytest.raises(ValueError, match="Invalid config file"):
            load_config(path)

    def test_env_overrides_file(self, tmp_path, monkeypatch):
        path = tmp_path / "client.toml"
        path.write_text('[server]\nurl = "http://a/v1"\ntimeout = 5\n')
        monkeypatch.setenv("FAIROS_URL", "http://b/v1")
        monkeypatch.setenv("FAIROS_TIMEOUT", "7.5")
        cfg = load_config(path)
        assert cfg.url == "http://b/v1"
        assert cfg.timeout == 7.5

    def test_invalid_env_timeout(self, monkeypatch):
        monkeypatch.setenv("FAIROS_TIMEOUT", "soon")
        with pytest.raises(ValueError, match="FAIROS_TIMEOUT"):
            load_config()


class TestClientUsesConfig:
    def test_url_from_config(self):
        client = Client(config=ClientConfig(url="https://dfs.example.org/v1/"))
        assert client.url == "https://dfs.example.org/v1"

    def test_explicit_url_wins(self):
        client = Client("http://localhost:1234/v1", config=ClientConfig(url="http://other/v1"))
        assert client.url == "http://localhost:1234/v1"
