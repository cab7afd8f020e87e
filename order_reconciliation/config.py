"""Engine configuration loaded from YAML."""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from numbers import Real
import os
from pathlib import Path
from typing import Any

import yaml

from .consensus.calculator import ConsensusOptions
from .evaluation.diff import DEFAULT_LARGE_MOVE_THRESHOLD
from .evaluation.metadata import (
    DEFAULT_CONFLICT_RATIO,
    DEFAULT_HIGH_AGREEMENT,
    DEFAULT_MAX_CONFLICTS,
    DEFAULT_MEDIUM_AGREEMENT,
)

CONFIG_ENV_VAR = "ORDER_RECONCILIATION_CONFIG"
DEFAULT_CONFIG_PATH = Path("config/engine.yaml")


@dataclass(slots=True)
class EngineConfig:
    """Tunable thresholds for consensus, conflict and diff analysis."""

    exclude_outliers: bool = False
    outlier_factor: float = 2.0
    conflict_ratio: float = DEFAULT_CONFLICT_RATIO
    max_conflicts: int | None = DEFAULT_MAX_CONFLICTS
    large_move_threshold: int = DEFAULT_LARGE_MOVE_THRESHOLD
    high_agreement: float = DEFAULT_HIGH_AGREEMENT
    medium_agreement: float = DEFAULT_MEDIUM_AGREEMENT

    def __post_init__(self) -> None:
        factor = self.outlier_factor
        if isinstance(factor, bool) or not isinstance(factor, Real) or not factor > 0:
            raise ValueError("outlier_factor must be a positive number")
        if self.conflict_ratio < 0:
            raise ValueError("conflict_ratio must be non-negative")
        if self.max_conflicts is not None and self.max_conflicts < 0:
            raise ValueError("max_conflicts must be non-negative or null")
        if self.large_move_threshold < 0:
            raise ValueError("large_move_threshold must be non-negative")
        if not 0.0 <= self.medium_agreement <= self.high_agreement <= 1.0:
            raise ValueError("agreement thresholds must satisfy 0 <= medium <= high <= 1")

    def consensus_options(self) -> ConsensusOptions:
        return ConsensusOptions(exclude_outliers=self.exclude_outliers, outlier_factor=self.outlier_factor)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, raw: dict[str, Any] | None) -> "EngineConfig":
        raw = dict(raw or {})
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(raw) - known)
        if unknown:
            raise ValueError(f"Unknown engine config keys: {', '.join(unknown)}")
        return cls(**raw)

    @classmethod
    def load(cls, path: Path) -> "EngineConfig":
        """Load config from YAML; the file may nest settings under ``engine``."""
        payload = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        if not isinstance(payload, dict):
            raise ValueError(f"Engine config in {path} must be a mapping")
        return cls.from_dict(payload.get("engine", payload))


def resolve_config_path(explicit: Path | None = None) -> Path | None:
    """Pick the config file: explicit argument, then env var, then the repo default."""
    if explicit is not None:
        return explicit
    env_value = os.environ.get(CONFIG_ENV_VAR)
    if env_value:
        return Path(env_value)
    if DEFAULT_CONFIG_PATH.exists():
        return DEFAULT_CONFIG_PATH
    return None


def load_config(path: Path | None = None) -> EngineConfig:
    resolved = resolve_config_path(path)
    if resolved is None:
        return EngineConfig()
    return EngineConfig.load(resolved)
