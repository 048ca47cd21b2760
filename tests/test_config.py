import pytest

from antigenics.config import AntigenicsConfig, load_config


def test_defaults(fresh_config, monkeypatch, tmp_path):
    monkeypatch.setenv("ANTIGENICS_CONFIG", str(tmp_path / "missing.yml"))
    for env in ("ANTIGENICS_SELF_CATALOG_SIZE", "ANTIGENICS_LOG_LEVEL", "ANTIGENICS_METRICS_ENABLED"):
        monkeypatch.delenv(env, raising=False)
    cfg = load_config()
    assert cfg == AntigenicsConfig()
    assert cfg.self_catalog_size == 32
    assert cfg.log_level == "INFO"
    assert cfg.metrics_enabled is True


def test_yaml_file_then_env_override(fresh_config, monkeypatch, tmp_path):
    path = tmp_path / "antigenics.yml"
    path.write_text("self_catalog_size: 12\nlog_level: debug\nmetrics_enabled: false\nunrelated: 1\n")
    monkeypatch.setenv("ANTIGENICS_CONFIG", str(path))
    monkeypatch.delenv("ANTIGENICS_SELF_CATALOG_SIZE", raising=False)
    monkeypatch.delenv("ANTIGENICS_LOG_LEVEL", raising=False)
    monkeypatch.delenv("ANTIGENICS_METRICS_ENABLED", raising=False)
    cfg = load_config()
    assert (cfg.self_catalog_size, cfg.log_level, cfg.metrics_enabled) == (12, "DEBUG", False)

    monkeypatch.setenv("ANTIGENICS_SELF_CATALOG_SIZE", "64")
    assert load_config().self_catalog_size == 64


def test_cached_until_env_changes(fresh_config, monkeypatch):
    monkeypatch.setenv("ANTIGENICS_LOG_LEVEL", "warning")
    first = load_config()
    assert first is load_config()
    monkeypatch.setenv("ANTIGENICS_LOG_LEVEL", "error")
    assert load_config().log_level == "ERROR"


@pytest.mark.parametrize("env, value", [
    ("ANTIGENICS_SELF_CATALOG_SIZE", "lots"),
    ("ANTIGENICS_SELF_CATALOG_SIZE", "0"),
    ("ANTIGENICS_LOG_LEVEL", "chatty"),
])
def test_invalid_values_raise(fresh_config, monkeypatch, env, value):
    monkeypatch.setenv(env, value)
    with pytest.raises(ValueError):
        load_config()


def test_non_mapping_file_rejected(fresh_config, monkeypatch, tmp_path):
    path = tmp_path / "antigenics.yml"
    path.write_text("- just\n- a list\n")
    monkeypatch.setenv("ANTIGENICS_CONFIG", str(path))
    with pytest.raises(ValueError):
        load_config()
