"""Resolve the cycle cost of individual source lines."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional, Tuple

from .cycle_table import CycleTable
from .line_utils import extract_override
from .normalizer import REGISTER_LIST_PLACEHOLDER, normalize_line


logger = logging.getLogger(__name__)

OVERRIDE_KEY = "n/a"

SkipPredicate = Callable[[str], bool]


@dataclass(frozen=True)
class CycleCount:
    """Cycle cost components resolved for a single line."""

    components: Tuple[int, ...]
    key: str
    register_count: int = 0

    @property
    def base(self) -> int:
        return self.components[0] if self.components else 0

    @property
    def extra(self) -> int:
        """Second component: taken cost for branches, per register cost for lists."""

        return self.components[1] if len(self.components) > 1 else 0

    @property
    def is_register_list(self) -> bool:
        return REGISTER_LIST_PLACEHOLDER in self.key

    @property
    def cycles(self) -> int:
        """Effective cost used for straight-line accounting."""

        if self.is_register_list and self.register_count > 1:
            return self.base + self.extra * self.register_count
        return self.base

    def describe(self) -> str:
        if len(self.components) > 1 and self.is_register_list:
            return (
                f"{self.cycles} -> [base ({self.base}) + "
                f"(reg count ({self.register_count}) * reg ({self.extra}))]"
            )
        if len(self.components) > 1:
            return f"{self.base}/{self.extra}"
        return str(self.base)


class CycleResolver:
    """Combine inline cost overrides with cycle table lookups."""

    def __init__(self, table: CycleTable) -> None:
        self.table = table

    def resolve(
        self, line: str, should_skip: Optional[SkipPredicate] = None
    ) -> Optional[CycleCount]:
        """Return the cost of ``line`` or ``None`` when it carries no code.

        An inline ``(N)`` override wins over everything else.  Otherwise the
        ``should_skip`` predicate decides whether the line is code at all, and
        code lines are looked up in the cycle table.
        """

        override = extract_override(line)
        if override is not None:
            return CycleCount((override,), OVERRIDE_KEY)
        if should_skip is not None and should_skip(line):
            return None
        return self.lookup(line)

    def lookup(self, line: str) -> CycleCount:
        normalized = normalize_line(line)
        components = self.table.lookup(normalized.key)
        if components is None:
            logger.warning(
                "no cycle count found for instruction: %s (key %r)",
                line.strip(),
                normalized.key,
            )
            return CycleCount((0,), normalized.key, normalized.register_count)
        return CycleCount(components, normalized.key, normalized.register_count)
