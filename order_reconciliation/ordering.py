"""Ordering records and input coercion shared by every engine entry point."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from .errors import InvalidInputError, InvalidOrderingShapeError, ReconciliationError

_ITEM_KEYS = ("items", "order")
_PARTICIPANT_KEYS = ("participant", "user")
_TIMESTAMP_KEYS = ("created_at", "timestamp")


@dataclass(slots=True, frozen=True)
class Ordering:
    """One participant's proposed sequence of unique item identifiers."""

    items: tuple[str, ...]
    participant: str | None = None
    created_at: datetime | None = None
    source: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "items", _checked_items(self.items, error=InvalidOrderingShapeError))
        object.__setattr__(self, "created_at", parse_timestamp(self.created_at))

    def __len__(self) -> int:
        return len(self.items)

    @property
    def is_empty(self) -> bool:
        return not self.items

    def to_dict(self) -> dict[str, Any]:
        """Convert to serializable dictionary."""
        return {
            "items": list(self.items),
            "participant": self.participant,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "source": self.source,
            "metadata": dict(self.metadata),
        }

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "Ordering":
        """Build an ordering from a record using either current or legacy keys."""
        items = _first_present(raw, _ITEM_KEYS)
        if items is None:
            raise InvalidOrderingShapeError(
                "Ordering record has no item sequence ('items' or 'order')",
                field="items",
                value=raw,
            )
        participant = _first_present(raw, _PARTICIPANT_KEYS)
        metadata = raw.get("metadata")
        if metadata is not None and not isinstance(metadata, Mapping):
            raise InvalidOrderingShapeError("metadata must be a mapping", field="metadata", value=metadata)
        return cls(
            items=items,
            participant=str(participant) if participant is not None else None,
            created_at=_first_present(raw, _TIMESTAMP_KEYS),
            source=raw.get("source"),
            metadata=dict(metadata or {}),
        )


def _first_present(raw: Mapping[str, Any], keys: tuple[str, ...]) -> Any:
    for key in keys:
        if raw.get(key) is not None:
            return raw[key]
    return None


def _checked_items(value: Any, *, error: type[ReconciliationError], field_name: str = "items") -> tuple[str, ...]:
    if not isinstance(value, (list, tuple)):
        raise error(f"{field_name} must be a list or tuple of identifiers", field=field_name, value=value)
    seen: set[str] = set()
    for item in value:
        if not isinstance(item, str):
            raise error(f"{field_name} contains a non-string identifier: {item!r}", field=field_name, value=value)
        if item in seen:
            raise error(f"{field_name} contains duplicate identifier: {item}", field=field_name, value=value)
        seen.add(item)
    return tuple(value)


def parse_timestamp(value: Any) -> datetime | None:
    """Parse an ISO-8601 string or datetime; naive values are taken as UTC."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError as exc:
            raise InvalidOrderingShapeError(
                f"Unparseable timestamp: {value}", field="created_at", value=value
            ) from exc
    else:
        raise InvalidOrderingShapeError(
            "Timestamp must be an ISO-8601 string or datetime", field="created_at", value=value
        )
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def coerce_ordering(record: Any) -> Ordering:
    """Normalize one ordering-like record into an ``Ordering``."""
    if isinstance(record, Ordering):
        return record
    if isinstance(record, Mapping):
        return Ordering.from_dict(record)
    if isinstance(record, (list, tuple)):
        # Bare item sequence: an anonymous ordering.
        return Ordering(items=record)

    for key in _ITEM_KEYS:
        items = getattr(record, key, None)
        if items is not None and not callable(items):
            return Ordering(
                items=items,
                participant=getattr(record, "participant", None),
                created_at=getattr(record, "created_at", None),
            )
    raise InvalidOrderingShapeError(
        f"Expected an ordering record, got {type(record).__name__}",
        field="items",
        value=record,
    )


def coerce_orderings(orderings: Any) -> list[Ordering]:
    """Validate a collection of ordering-like records and normalize each one."""
    if (
        orderings is None
        or isinstance(orderings, (str, bytes, Mapping, Ordering))
        or not isinstance(orderings, Iterable)
    ):
        raise InvalidInputError(
            "orderings must be a collection of ordering records",
            field="orderings",
            value=orderings,
        )
    return [coerce_ordering(record) for record in orderings]


def non_empty(orderings: Iterable[Ordering]) -> list[Ordering]:
    """Drop empty orderings, which count as no vote."""
    return [ordering for ordering in orderings if not ordering.is_empty]


def as_item_sequence(value: Any, *, field_name: str) -> list[str]:
    """Accept a plain list/tuple of identifiers or an ``Ordering``; return a fresh list."""
    if isinstance(value, Ordering):
        return list(value.items)
    return list(_checked_items(value, error=InvalidInputError, field_name=field_name))
