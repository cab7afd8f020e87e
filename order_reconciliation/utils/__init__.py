"""Logging and file helpers for scripts around the engine."""

from .io import atomic_write_json, load_orderings, utc_now_iso
from .logging_config import setup_logging

__all__ = [
    "atomic_write_json",
    "load_orderings",
    "utc_now_iso",
    "setup_logging",
]
