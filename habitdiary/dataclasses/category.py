#!/usr/bin/env python3
"""
category.py
-----------
Detached snapshot of a habit category.
"""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Category:
    """
    A tracked habit as seen by callers.

    Instances are snapshots taken inside a store transaction; changing the
    diary never updates an existing Category value.

    Attributes:
        id: Store identifier
        abbreviation: Unique, case-insensitive short name (e.g. "GAM")
        display_order: Left-to-right presentation position
        hidden: Whether the category is offered for new entries
    """

    id: int
    abbreviation: str
    display_order: int
    hidden: bool = False

    @property
    def visible(self) -> bool:
        return not self.hidden

    def __str__(self) -> str:
        return f"{self.abbreviation} (hidden)" if self.hidden else self.abbreviation
