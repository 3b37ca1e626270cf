from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Optional

from config_parsing import parse_engine_config
from models import EngineConfig
from utils import deep_merge


def load_json_config(path: Path) -> Dict[str, Any]:
    """Load a JSON config file or raise a helpful error.

    Args:
        path: Path to the JSON configuration file.

    Returns:
        Parsed JSON data as a dictionary.

    Raises:
        FileNotFoundError: If the file does not exist.
        SystemExit: If JSON is invalid or not an object, with a friendly message.
    """
    if not path.exists():
        raise FileNotFoundError(f"Config not found: {path}")
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        msg = (
            f"\nERROR: Your config is not valid JSON.\n"
            f"File: {path}\n"
            f"Line {e.lineno}, Col {e.colno}\n"
            f"{e.msg}\n"
        )
        raise SystemExit(msg)
    if not isinstance(data, dict):
        raise SystemExit(f"\nERROR: {path} must contain a JSON object at the top level.\n")
    return data


def load_engine_config(
    path: Optional[Path] = None, overrides: Optional[Dict[str, Any]] = None
) -> EngineConfig:
    """Build the engine config from an optional file plus in-memory overrides.

    Missing keys fall back to the built-in defaults of each section parser.
    """
    raw: Dict[str, Any] = load_json_config(path) if path is not None else {}
    if overrides:
        raw = deep_merge(raw, overrides)
    return parse_engine_config(raw)
