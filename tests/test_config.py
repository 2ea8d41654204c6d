from taskflow.config import DEFAULT_API_BASE_URL, TaskflowConfig, env_bool, env_int


def test_defaults(monkeypatch):
    for name in (
        "TASKFLOW_API_BASE_URL",
        "TASKFLOW_API_TOKEN",
        "TASKFLOW_API_TIMEOUT",
        "TASKFLOW_VERIFY_SSL",
        "TASKFLOW_RECENT_COUNT",
        "TASKFLOW_CALENDAR_MAX_PER_CELL",
        "TASKFLOW_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    config = TaskflowConfig.from_env()
    assert config.api_base_url == DEFAULT_API_BASE_URL
    assert config.api_token is None
    assert config.timeout_seconds == 30.0
    assert config.recent_count == 2
    assert config.calendar_max_per_cell == 3


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("TASKFLOW_API_BASE_URL", "https://tasks.example.com/api/v1/")
    monkeypatch.setenv("TASKFLOW_API_TOKEN", "secret")
    monkeypatch.setenv("TASKFLOW_API_TIMEOUT", "7.5")
    monkeypatch.setenv("TASKFLOW_VERIFY_SSL", "no")
    monkeypatch.setenv("TASKFLOW_CALENDAR_MAX_PER_CELL", "0")
    monkeypatch.setenv("TASKFLOW_LOG_LEVEL", "debug")
    config = TaskflowConfig.from_env()
    assert config.api_base_url == "https://tasks.example.com/api/v1"
    assert config.timeout_seconds == 7.5
    assert config.verify_ssl is False
    assert config.calendar_max_per_cell == 1
    assert config.log_level == "DEBUG"
    assert config.to_dict()["has_token"] is True
    assert "secret" not in str(config.to_dict())


def test_bad_values_fall_back(monkeypatch):
    monkeypatch.setenv("TASKFLOW_RECENT_COUNT", "many")
    monkeypatch.setenv("TASKFLOW_VERIFY_SSL", "maybe")
    assert env_int("TASKFLOW_RECENT_COUNT", 2) == 2
    assert env_bool("TASKFLOW_VERIFY_SSL", True) is True
