"""Before/after snapshot helpers."""

import json
from typing import Any, List

_MISSING = object()


def _canonical(value: Any) -> str:
    return json.dumps(value, sort_keys=True, default=str)


def changed_fields(before: Any, after: Any) -> List[str]:
    """
    Keys whose JSON value differs between two snapshots, sorted.
    Empty unless both snapshots are mappings (creates and deletes carry one side only).
    """
    if not isinstance(before, dict) or not isinstance(after, dict):
        return []
    changed = []
    for key in sorted(set(before) | set(after), key=str):
        old = before.get(key, _MISSING)
        new = after.get(key, _MISSING)
        if old is _MISSING or new is _MISSING or _canonical(old) != _canonical(new):
            changed.append(key)
    return changed
