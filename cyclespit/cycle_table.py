"""Cycle table lookup support."""

from __future__ import annotations

import json
import logging
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Iterator, Mapping, Optional, Sequence, Tuple


logger = logging.getLogger(__name__)

DEFAULT_TABLE_PATH = Path(__file__).resolve().parent / "db" / "cycles.json"


class CycleTable:
    """Resolve canonical instruction keys to cycle cost components.

    Each entry holds one or more cycle counts.  A single value is a fixed
    cost.  Branch style entries carry ``(not taken, taken)`` pairs and
    register list entries ``(base, per register)`` pairs; interpreting the
    components is left to :class:`cyclespit.resolver.CycleCount`.

    The table never changes after construction which allows the bundled
    instance returned by :meth:`default` to be shared freely.
    """

    def __init__(self, entries: Mapping[str, Sequence[int]]) -> None:
        self._entries: Dict[str, Tuple[int, ...]] = {
            str(key): tuple(int(value) for value in values)
            for key, values in entries.items()
        }

    @classmethod
    def load(cls, path: Path) -> "CycleTable":
        """Load a cycle table from a JSON document.

        ``path`` may point at a directory, in which case ``cycles.json`` inside
        it is used.  A missing file produces an empty table so that every
        lookup falls back to the zero-cost diagnostic path.
        """

        resolved = path
        if path.is_dir():
            resolved = path / "cycles.json"

        if not resolved.exists():
            logger.warning("cycle table %s not found; all lookups will miss", resolved)
            return cls({})

        data = json.loads(resolved.read_text("utf-8"))
        if not isinstance(data, Mapping):
            logger.warning("cycle table %s is not a JSON object; ignoring it", resolved)
            return cls({})

        entries: Dict[str, Tuple[int, ...]] = {}
        for key, raw in data.items():
            values = _parse_entry(raw)
            if values is None:
                logger.warning("skipping malformed cycle table entry %r: %r", key, raw)
                continue
            entries[key] = values
        return cls(entries)

    @classmethod
    def default(cls) -> "CycleTable":
        """Return the bundled 68000 cycle table."""

        return _load_default()

    def lookup(self, key: str) -> Optional[Tuple[int, ...]]:
        return self._entries.get(key)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)


def _parse_entry(raw: Any) -> Optional[Tuple[int, ...]]:
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return (raw,)
    if not isinstance(raw, (list, tuple)) or not raw:
        return None
    values = []
    for item in raw:
        if isinstance(item, bool) or not isinstance(item, int) or item < 0:
            return None
        values.append(item)
    return tuple(values)


@lru_cache(maxsize=None)
def _load_default() -> CycleTable:
    return CycleTable.load(DEFAULT_TABLE_PATH)
