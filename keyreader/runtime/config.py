"""Read-only JSON config helpers.

Supplies user key names, the single-key sequence timeout, and the default
for continuous mode. All access is defensive: malformed or missing config
falls back safely. The key reader never writes this file.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from platformdirs import user_config_dir

from ..input.key_names import parse_key_sequence
from ..input.reader import DEFAULT_SEQUENCE_TIMEOUT_MS

logger = logging.getLogger(__name__)

APP_NAME = "keyreader"
CONFIG_FILENAME = "config.json"
CONFIG_ENV_VAR = "KEYREADER_CONFIG"
DEFAULT_CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME
CONFIG_PATH = DEFAULT_CONFIG_PATH


@dataclass(frozen=True)
class ReaderConfig:
    """Normalized config values with defaults filled in."""

    key_names: dict[str, bytes] = field(default_factory=dict)
    sequence_timeout_ms: int = DEFAULT_SEQUENCE_TIMEOUT_MS
    continuous: bool = False


def config_path() -> Path:
    """Return the config path, honoring the ``KEYREADER_CONFIG`` override."""
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return CONFIG_PATH


def load_config_data(path: Path | None = None) -> dict[str, object]:
    """Load the JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    path = config_path() if path is None else path
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {}
    except (OSError, ValueError) as exc:
        logger.debug("ignoring unreadable config %s: %s", path, exc)
        return {}
    return data if isinstance(data, dict) else {}


def _load_key_names(value: object) -> dict[str, bytes]:
    """Decode ``{"name": "\\e[A"}`` entries, dropping invalid ones."""
    if not isinstance(value, dict):
        return {}
    key_names: dict[str, bytes] = {}
    for name, raw_sequence in value.items():
        if not isinstance(name, str) or not name.strip():
            continue
        if not isinstance(raw_sequence, str):
            continue
        try:
            key_names[name.strip()] = parse_key_sequence(raw_sequence)
        except (ValueError, UnicodeEncodeError) as exc:
            logger.debug("dropping key name %r: %s", name, exc)
    return key_names


def _coerce_positive_int(value: object, default: int) -> int:
    """Booleans, non-integers and values < 1 fall back to ``default``."""
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        return default
    return value


def load_config(path: Path | None = None) -> ReaderConfig:
    data = load_config_data(path)
    continuous = data.get("continuous")
    return ReaderConfig(
        key_names=_load_key_names(data.get("key_names")),
        sequence_timeout_ms=_coerce_positive_int(
            data.get("sequence_timeout_ms"), DEFAULT_SEQUENCE_TIMEOUT_MS
        ),
        continuous=continuous if isinstance(continuous, bool) else False,
    )
