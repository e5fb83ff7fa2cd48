"""
Configuration

YAML-backed settings for the 5FAN response core. Values are read with
dotted keys (``config.get("llm.cloud.model")``) and layered over built-in
defaults, so an empty or missing config file still yields a working
template-only setup.

Secrets never live in the file: the cloud API key is read from the
environment variable named by ``llm.cloud.api_key_env``.
"""

import copy
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

import yaml

from fivefan.errors import ConfigError


CONFIG_ENV_VAR = "FIVEFAN_CONFIG"
DEFAULT_CONFIG_FILE = "config.yaml"

DEFAULTS = {
    "logging": {
        "level": "INFO",
        "dir": "logs",
        "file": None,
        "console": True,
    },
    "llm": {
        # auto: local -> cloud -> templates; local / cloud: that tier only;
        # template: never call a model
        "provider": "auto",
        "local": {
            "url": "http://localhost:11434",
            "model": "llama3.2:3b",
            "temperature": 0.7,
            "top_p": 0.9,
            "max_tokens": 50,          # 1-2 sentences
            "timeout": 30,
            "probe_timeout": 5,
            "history_limit": 3,
            "recheck_interval": None,  # seconds; None = probe once per process
        },
        "cloud": {
            "url": "https://api.groq.com/openai",
            "model": "llama-3.3-70b-versatile",
            "api_key": "",
            "api_key_env": "FIVEFAN_LM_KEY",
            "temperature": 0.7,
            "max_tokens": 200,
            "timeout": 15,
            "probe_timeout": 5,
            "history_limit": 6,
        },
    },
    "voices": {
        "default": "hear",
    },
}


def _deep_merge(base: dict, override: dict) -> dict:
    """Merge override into a copy of base, recursing into nested dicts."""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


class Config:
    """Dotted-key view over the merged configuration tree"""

    def __init__(self, data: Optional[dict] = None, path: Optional[Path] = None):
        self.path = path
        self._data = _deep_merge(DEFAULTS, data or {})

    def get(self, key: str, default: Any = None) -> Any:
        """
        Look up a dotted key

        Args:
            key: Dotted path, e.g. "llm.local.timeout"
            default: Returned when any segment is missing

        Returns:
            Stored value or default
        """
        node: Any = self._data
        for part in key.split("."):
            if not isinstance(node, dict) or part not in node:
                return default
            node = node[part]
        return node

    def set(self, key: str, value: Any) -> None:
        """Set a dotted key, creating intermediate sections as needed."""
        parts = key.split(".")
        node = self._data
        for part in parts[:-1]:
            node = node.setdefault(part, {})
        node[parts[-1]] = value

    @staticmethod
    def get_env(name: Optional[str], default: str = "") -> str:
        """Read a secret from the environment."""
        if not name:
            return default
        return os.environ.get(name, default)

    def as_dict(self) -> dict:
        return copy.deepcopy(self._data)


def load_config(path: Optional[str] = None) -> Config:
    """
    Load configuration from YAML

    Resolution order: explicit path, $FIVEFAN_CONFIG, ./config.yaml.
    A file that does not exist yields defaults only.

    Raises:
        ConfigError: file exists but is unreadable or not a mapping
    """
    candidate = path or os.environ.get(CONFIG_ENV_VAR) or DEFAULT_CONFIG_FILE
    config_path = Path(candidate).expanduser()

    if not config_path.exists():
        return Config(path=None)

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Could not read config {config_path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config {config_path} must contain a mapping, got {type(data).__name__}")

    return Config(data, path=config_path)


# ---------------------------------------------------------------------------
# Backend configuration snapshots (read-only to the core)
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class LocalBackendConfig:
    """Self-hosted model server (Ollama generate API)."""

    url: str = "http://localhost:11434"
    model: str = "llama3.2:3b"
    temperature: float = 0.7
    top_p: float = 0.9
    max_tokens: int = 50
    timeout: float = 30.0
    probe_timeout: float = 5.0
    history_limit: int = 3
    recheck_interval: Optional[float] = None

    @property
    def probe_url(self) -> str:
        return f"{self.url.rstrip('/')}/api/tags"

    @property
    def generate_url(self) -> str:
        return f"{self.url.rstrip('/')}/api/generate"

    @classmethod
    def from_config(cls, config: Config) -> "LocalBackendConfig":
        interval = config.get("llm.local.recheck_interval")
        return cls(
            url=config.get("llm.local.url", cls.url),
            model=config.get("llm.local.model", cls.model),
            temperature=float(config.get("llm.local.temperature", cls.temperature)),
            top_p=float(config.get("llm.local.top_p", cls.top_p)),
            max_tokens=int(config.get("llm.local.max_tokens", cls.max_tokens)),
            timeout=float(config.get("llm.local.timeout", cls.timeout)),
            probe_timeout=float(config.get("llm.local.probe_timeout", cls.probe_timeout)),
            history_limit=int(config.get("llm.local.history_limit", cls.history_limit)),
            recheck_interval=float(interval) if interval is not None else None,
        )


@dataclass(frozen=True)
class CloudBackendConfig:
    """Hosted OpenAI-compatible API (Groq, OpenRouter, Together.ai)."""

    url: str = ""
    api_key: str = ""
    model: str = "llama-3.3-70b-versatile"
    temperature: float = 0.7
    max_tokens: int = 200
    timeout: float = 15.0
    probe_timeout: float = 5.0
    history_limit: int = 6

    @property
    def configured(self) -> bool:
        return bool(self.url and self.api_key)

    @property
    def models_url(self) -> str:
        return f"{self.url.rstrip('/')}/v1/models"

    @property
    def chat_url(self) -> str:
        return f"{self.url.rstrip('/')}/v1/chat/completions"

    @property
    def auth_headers(self) -> dict:
        return {"Authorization": f"Bearer {self.api_key}"}

    @classmethod
    def from_config(cls, config: Config) -> "CloudBackendConfig":
        api_key = config.get("llm.cloud.api_key") or config.get_env(config.get("llm.cloud.api_key_env"))
        return cls(
            url=config.get("llm.cloud.url") or "",
            api_key=api_key or "",
            model=config.get("llm.cloud.model", cls.model),
            temperature=float(config.get("llm.cloud.temperature", cls.temperature)),
            max_tokens=int(config.get("llm.cloud.max_tokens", cls.max_tokens)),
            timeout=float(config.get("llm.cloud.timeout", cls.timeout)),
            probe_timeout=float(config.get("llm.cloud.probe_timeout", cls.probe_timeout)),
            history_limit=int(config.get("llm.cloud.history_limit", cls.history_limit)),
        )
