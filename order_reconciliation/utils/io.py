"""Atomic JSON output and ordering file loading."""

from __future__ import annotations

from datetime import datetime, timezone
import json
import os
from pathlib import Path
import tempfile
from typing import Any

import yaml

from ..ordering import Ordering, coerce_orderings


def atomic_write_json(target_path: Path, payload: dict[str, Any]) -> Path:
    """Write JSON through a temp file in the same directory, then rename."""
    target_path.parent.mkdir(parents=True, exist_ok=True)
    serialized = json.dumps(payload, indent=2, sort_keys=False)
    with tempfile.NamedTemporaryFile(
        mode="w",
        encoding="utf-8",
        delete=False,
        dir=str(target_path.parent),
        suffix=".tmp",
    ) as handle:
        handle.write(serialized)
        handle.flush()
        os.fsync(handle.fileno())
        temp_path = Path(handle.name)
    os.replace(temp_path, target_path)
    return target_path


def load_orderings(path: Path) -> list[Ordering]:
    """Load ordering records from a JSON or YAML file.

    The document is either a list of records or a mapping with an
    ``orderings`` list.
    """
    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() in {".yaml", ".yml"}:
        payload = yaml.safe_load(text)
    else:
        payload = json.loads(text)

    if isinstance(payload, dict):
        if "orderings" not in payload:
            raise ValueError(f"No 'orderings' list found in {path}")
        payload = payload["orderings"]
    return coerce_orderings(payload or [])


def utc_now_iso() -> str:
    """Current UTC timestamp in ISO-8601 format."""
    return datetime.now(tz=timezone.utc).isoformat()
