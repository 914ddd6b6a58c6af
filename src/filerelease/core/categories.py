"""
File categories and their name prefixes.

Each category is bound to exactly one literal filename prefix. The URL slug is
the form used in HTTP routes and on the command line.
"""

from __future__ import annotations

from enum import Enum


class Category(Enum):
    """Closed set of file categories released by the service."""

    REDEMPTION = ("redemption_", "redemption")
    OUTPAY = ("outpay_", "outpay")
    OWN_AND_BEN = ("own_and_ben_", "own-and-ben")

    def __init__(self, prefix: str, slug: str) -> None:
        self.prefix = prefix
        self.slug = slug

    @property
    def config_key(self) -> str:
        """Key of this category under the ``scheduling`` config section."""
        return self.name.lower()

    @classmethod
    def parse(cls, value: str) -> Category:
        """
        Resolve a category from its name, slug, or config key (case-insensitive).

        Raises:
            ValueError: If no category matches
        """
        needle = value.strip().lower()
        for category in cls:
            if needle in (category.name.lower(), category.slug, category.config_key):
                return category
        valid = ", ".join(c.slug for c in cls)
        raise ValueError(f"Unknown category {value!r} (expected one of: {valid})")

    def __str__(self) -> str:
        return self.name
