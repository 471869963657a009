# kr_tracker/deletion/helpers.py
"""Set and patch helpers shared by the planner and the applier."""

import copy
from collections.abc import Iterable, Mapping
from typing import Any, TypeVar

from kr_tracker.deletion.plan import CascadeItem
from kr_tracker.models.entities import EntityModel

E = TypeVar("E", bound=EntityModel)


def find_by_id(items: Iterable[E], entity_id: str) -> E | None:
    """Return the first record with the given id, or None."""
    for item in items:
        if item.id == entity_id:
            return item
    return None


def ids_of(items: Iterable[EntityModel]) -> frozenset[str]:
    return frozenset(item.id for item in items)


def merge_patch(
    patches: dict[str, dict[str, Any]], entity_id: str, patch: Mapping[str, Any]
) -> None:
    """Merge ``patch`` into any patch already collected for ``entity_id``."""
    patches.setdefault(entity_id, {}).update(patch)


def remove_ids(items: Iterable[E], ids: frozenset[str]) -> list[E]:
    """Records whose id is not in ``ids``. The input is left untouched."""
    if not ids:
        return list(items)
    return [item for item in items if item.id not in ids]


def apply_patches(items: Iterable[E], patches: Mapping[str, Mapping[str, Any]]) -> list[E]:
    """
    Deep-copy every record, applying its patch when one exists.

    Always returns fresh instances so the caller's snapshot shares no mutable
    state (lists inside records included) with the result.
    """
    result = []
    for item in items:
        patch = patches.get(item.id)
        if patch:
            result.append(item.model_copy(update=copy.deepcopy(dict(patch)), deep=True))
        else:
            result.append(item.model_copy(deep=True))
    return result


def strip_ids(values: list[str], ids: frozenset[str]) -> list[str]:
    return [value for value in values if value not in ids]


def build_cascade_items(*items: CascadeItem) -> tuple[CascadeItem, ...]:
    """Drop counted items whose count is zero; uncounted items are kept."""
    return tuple(item for item in items if item.count is None or item.count > 0)
