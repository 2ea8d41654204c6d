from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, Optional


DEFAULT_API_BASE_URL = "http://localhost:8081/api/v1"


def env_str(name: str, default: str, *, strip: bool = True) -> str:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip() if strip else value


def env_optional_str(name: str, default: Optional[str] = None, *, strip: bool = True) -> Optional[str]:
    value = os.environ.get(name)
    if value is None:
        return default
    value = value.strip() if strip else value
    return value or default


def env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    raw = raw.strip().lower()
    if raw in {"1", "true", "yes", "y", "on"}:
        return True
    if raw in {"0", "false", "no", "n", "off"}:
        return False
    return default


def env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        return int(raw.strip())
    except ValueError:
        return default


def env_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        return float(raw.strip())
    except ValueError:
        return default


@dataclass(frozen=True)
class TaskflowConfig:
    api_base_url: str = DEFAULT_API_BASE_URL
    api_token: Optional[str] = None
    timeout_seconds: float = 30.0
    verify_ssl: bool = True
    recent_count: int = 2
    calendar_max_per_cell: int = 3
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "TaskflowConfig":
        """Build config from environment variables.

        Env vars:
        - TASKFLOW_API_BASE_URL (default: http://localhost:8081/api/v1)
        - TASKFLOW_API_TOKEN (optional bearer token for headless use)
        - TASKFLOW_API_TIMEOUT (seconds, default: 30)
        - TASKFLOW_VERIFY_SSL (default: true)
        - TASKFLOW_RECENT_COUNT (default: 2)
        - TASKFLOW_CALENDAR_MAX_PER_CELL (default: 3)
        - TASKFLOW_LOG_LEVEL (default: INFO)
        """
        base_url = env_str("TASKFLOW_API_BASE_URL", DEFAULT_API_BASE_URL).rstrip("/")
        return cls(
            api_base_url=base_url or DEFAULT_API_BASE_URL,
            api_token=env_optional_str("TASKFLOW_API_TOKEN"),
            timeout_seconds=max(1.0, env_float("TASKFLOW_API_TIMEOUT", 30.0)),
            verify_ssl=env_bool("TASKFLOW_VERIFY_SSL", True),
            recent_count=max(1, env_int("TASKFLOW_RECENT_COUNT", 2)),
            calendar_max_per_cell=max(1, env_int("TASKFLOW_CALENDAR_MAX_PER_CELL", 3)),
            log_level=env_str("TASKFLOW_LOG_LEVEL", "INFO").upper() or "INFO",
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "api_base_url": self.api_base_url,
            "has_token": bool(self.api_token),
            "timeout_seconds": self.timeout_seconds,
            "verify_ssl": self.verify_ssl,
            "recent_count": self.recent_count,
            "calendar_max_per_cell": self.calendar_max_per_cell,
            "log_level": self.log_level,
        }


def configure_logging(level: str = "INFO") -> None:
    """Set up root logging for the Streamlit entry point.

    Streamlit reruns the script on every interaction; basicConfig is a no-op
    once handlers exist, so this is safe to call at the top of each page.
    """
    logging.basicConfig(
        level=getattr(logging, (level or "INFO").upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
