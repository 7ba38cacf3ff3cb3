"""Alias Merger — folds newly found aliases into a note's existing list."""

from typing import Any, Iterable


def _normalise(value: Any) -> list[str]:
    # Front-matter written by hand may hold a bare string or non-string items.
    if value is None:
        return []
    if isinstance(value, str):
        value = [value]
    elif not isinstance(value, (list, tuple, set)):
        value = [value]
    return [str(item).lower() for item in value if item is not None and str(item).strip()]


def merge(existing: Iterable[str] | None, incoming: Iterable[str]) -> list[str]:
    """Lower-cased, sorted union of both lists with no duplicates."""
    return sorted(set(_normalise(existing)) | set(_normalise(incoming)))


def apply_aliases(metadata: dict[str, Any], aliases: list[str]) -> dict[str, Any]:
    """Front-matter transform: merge *aliases* into ``metadata['aliases']``."""
    metadata["aliases"] = merge(metadata.get("aliases"), aliases)
    return metadata
