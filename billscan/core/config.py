"""
Settings loaded from an optional JSON file and environment variables.
"""

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional

from .acquisition import DEFAULT_MAX_UPLOAD_MB
from .ocr import DEFAULT_SERVICE_URL, DEFAULT_UPLOAD_FIELD
from .reporting import DEFAULT_EXPORT_NAME


@dataclass
class Settings:
    service_url: str = DEFAULT_SERVICE_URL
    timeout: float = 60.0
    upload_field: str = DEFAULT_UPLOAD_FIELD
    max_upload_mb: float = DEFAULT_MAX_UPLOAD_MB
    output_dir: Path = field(default_factory=lambda: Path("."))
    export_name: str = DEFAULT_EXPORT_NAME

    @property
    def max_upload_bytes(self) -> int:
        return int(self.max_upload_mb * 1024 * 1024)


ENV_KEYS = {
    "service_url": "BILLSCAN_SERVICE_URL",
    "timeout": "BILLSCAN_TIMEOUT",
    "max_upload_mb": "BILLSCAN_MAX_UPLOAD_MB",
    "output_dir": "BILLSCAN_OUTPUT_DIR",
}


def load_config(path: Optional[Path]) -> Dict:
    """Load settings from a JSON file; a missing file means defaults."""
    if path is None or not path.exists():
        return {}
    with path.open("r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"{path} must contain a JSON object")
    return data


def _positive_float(key: str, value) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{key} must be a number, got {value!r}") from exc
    if number <= 0:
        raise ValueError(f"{key} must be positive, got {value!r}")
    return number


def _text(key: str, value) -> str:
    if isinstance(value, os.PathLike):
        value = os.fspath(value)
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"{key} must be a non-empty string, got {value!r}")
    return value


def load_settings(config_path: Optional[Path] = None, env: Optional[Dict[str, str]] = None,
                  **overrides) -> Settings:
    """
    Resolve settings: JSON file, then environment, then explicit overrides.

    Overrides set to None are ignored so argparse defaults can be passed
    straight through.
    """
    env = os.environ if env is None else env
    values = dict(load_config(config_path))

    for key, env_key in ENV_KEYS.items():
        raw = env.get(env_key)
        if raw is not None and raw.strip():
            values[key] = raw.strip()

    values.update({k: v for k, v in overrides.items() if v is not None})

    unknown = set(values) - set(Settings.__dataclass_fields__)
    if unknown:
        print(f"[WARN] Ignoring unknown setting(s): {', '.join(sorted(unknown))}")
        for key in unknown:
            values.pop(key)

    for key in ("timeout", "max_upload_mb"):
        if key in values:
            values[key] = _positive_float(key, values[key])
    for key in ("service_url", "upload_field", "export_name"):
        if key in values:
            values[key] = _text(key, values[key])
    if "output_dir" in values:
        values["output_dir"] = Path(_text("output_dir", values["output_dir"]))
    return Settings(**values)
