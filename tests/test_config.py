import logging

import pytest

from gemini_chat import config as config_module
from gemini_chat.config import Configuration, setup_logging
from gemini_chat.http_transport import HttpConfig, create_http_config_from_dict


@pytest.fixture
def no_key_env(monkeypatch):
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    monkeypatch.delenv("GOOGLE_API_KEY", raising=False)
    monkeypatch.setattr(Configuration, "load_env", staticmethod(lambda: None))


def _write(tmp_path, text: str) -> str:
    path = tmp_path / "config.yaml"
    path.write_text(text)
    return str(path)


def test_packaged_defaults_load():
    cfg = Configuration()

    assert cfg.get_llm_config()["model"]
    assert cfg.get_llm_config()["base_url"].startswith("https://")
    assert cfg.get_logging_config()["level"] == "INFO"
    assert isinstance(cfg.get_http_config(), HttpConfig)


def test_env_key_wins_over_yaml(tmp_path, no_key_env, monkeypatch):
    cfg = Configuration(_write(tmp_path, "llm:\n  api_key: from-yaml\n"))

    assert cfg.gemini_api_key == "from-yaml"

    monkeypatch.setenv("GOOGLE_API_KEY", "from-google")
    assert cfg.gemini_api_key == "from-google"

    monkeypatch.setenv("GEMINI_API_KEY", "from-gemini")
    assert cfg.gemini_api_key == "from-gemini"


def test_missing_key_raises(tmp_path, no_key_env):
    cfg = Configuration(_write(tmp_path, "llm:\n  model: m\n"))

    with pytest.raises(ValueError, match="GEMINI_API_KEY"):
        _ = cfg.gemini_api_key


def test_empty_yaml_yields_empty_sections(tmp_path, no_key_env):
    cfg = Configuration(_write(tmp_path, ""))

    assert cfg.get_config_dict() == {}
    assert cfg.get_llm_config() == {}
    assert cfg.get_http_config() == HttpConfig()


def test_http_config_from_dict():
    config = create_http_config_from_dict({"http": {"timeout": 12.5, "max_connections": 4}})

    assert config.timeout == 12.5
    assert config.max_connections == 4
    assert config.max_keepalive_connections == HttpConfig().max_keepalive_connections


def test_setup_logging_applies_level_and_format(tmp_path, no_key_env, monkeypatch):
    calls = []
    monkeypatch.setattr(config_module.logging, "basicConfig", lambda **kw: calls.append(kw))
    cfg = Configuration(_write(
        tmp_path, "logging:\n  level: debug\n  format: '%(message)s'\n"
    ))

    setup_logging(cfg)

    assert calls == [{"level": logging.DEBUG, "format": "%(message)s"}]
