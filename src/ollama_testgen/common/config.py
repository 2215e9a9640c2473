"""Client settings loaded from YAML with environment overrides."""
from __future__ import annotations
import logging
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any

import yaml

LOGGER = logging.getLogger("testgen.config")

DEFAULT_CONFIG_PATH = "configs/client.yaml"

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}

@dataclass(frozen=True)
class ClientSettings:
    model: str = "llama3.1"
    base_url: str = "http://localhost:11434"
    stream: bool = False
    timeout: float = 120.0
    log_level: str = "INFO"
    template_path: str = "configs/prompt_template.txt"

def load_cfg(path: str) -> dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}

def _parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise ValueError(f"invalid boolean value: {value!r}")

def _coerce(raw: dict[str, Any]) -> dict[str, Any]:
    """Keep known keys only and convert them to their field types."""
    known = {f.name for f in fields(ClientSettings)}
    unknown = sorted(set(raw) - known)
    if unknown:
        LOGGER.warning("Ignoring unknown config keys: %s", ", ".join(unknown))
    out: dict[str, Any] = {}
    for key, value in raw.items():
        if key not in known or value is None:
            continue
        if key == "stream":
            out[key] = _parse_bool(value)
        elif key == "timeout":
            try:
                out[key] = float(value)
            except (TypeError, ValueError) as e:
                raise ValueError(f"invalid timeout: {value!r}") from e
            if out[key] <= 0:
                raise ValueError(f"timeout must be positive, got {value!r}")
        else:
            out[key] = str(value)
    return out

def load_settings(path: str | None = None) -> ClientSettings:
    """
    Load client settings.

    Args:
        path: YAML config path. When omitted, configs/client.yaml is used if
            it exists, otherwise built-in defaults.

    Environment variables OLLAMA_MODEL, OLLAMA_BASE_URL, OLLAMA_STREAM,
    OLLAMA_TIMEOUT and LOG_LEVEL take precedence over the file.
    """
    raw: dict[str, Any] = {}
    if path is not None:
        if not Path(path).exists():
            raise FileNotFoundError(f"config not found at {path}")
        raw = load_cfg(path)
    elif Path(DEFAULT_CONFIG_PATH).exists():
        raw = load_cfg(DEFAULT_CONFIG_PATH)
    if not isinstance(raw, dict):
        raise ValueError("config file must contain a mapping")

    env = {
        "model": os.getenv("OLLAMA_MODEL"),
        "base_url": os.getenv("OLLAMA_BASE_URL"),
        "stream": os.getenv("OLLAMA_STREAM"),
        "timeout": os.getenv("OLLAMA_TIMEOUT"),
        "log_level": os.getenv("LOG_LEVEL"),
    }
    settings = replace(ClientSettings(), **_coerce(raw))
    return replace(settings, **_coerce({k: v for k, v in env.items() if v}))
