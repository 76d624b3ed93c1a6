"""Per-store cost-of-goods-sold (COGS) category settings.

Each store flags which expense categories count as COGS. Settings are seeded
on first read (food and drink are COGS, everything else is not) and saved
right away. Categories added to ``ExpenseCategory`` after a store's settings
were saved are filled in with their default on every load, so persisted state
never has to be migrated by hand.

Settings live in memory, or in a JSON file when a path is given::

    {"store_1": [{"expense_category": "food", "is_cogs": true}, ...]}
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Iterable, Optional

from pos_reports.exceptions import ConfigError
from pos_reports.records.models import CostCategorySetting, ExpenseCategory

logger = logging.getLogger(__name__)

DEFAULT_COGS_CATEGORIES = frozenset({ExpenseCategory.FOOD, ExpenseCategory.DRINK})


def default_settings() -> list[CostCategorySetting]:
    """Return the seeded settings, one per category in declaration order."""
    return [
        CostCategorySetting(expense_category=c, is_cogs=c in DEFAULT_COGS_CATEGORIES)
        for c in ExpenseCategory
    ]


def merge_with_defaults(current: Iterable[CostCategorySetting]) -> list[CostCategorySetting]:
    """Fill categories missing from ``current`` with their default flag.

    The result always holds exactly one setting per category, in declaration
    order. A persisted flag always wins over the default.
    """
    by_category = {s.expense_category: s for s in current}
    return [
        by_category.get(c)
        or CostCategorySetting(expense_category=c, is_cogs=c in DEFAULT_COGS_CATEGORIES)
        for c in ExpenseCategory
    ]


class CategorySettingsStore:
    """Load and save COGS flags per store.

    Args:
        path: Optional JSON file to persist settings to. When None, settings
            are only kept in memory for the lifetime of the store object.

    Example:
        >>> store = CategorySettingsStore()
        >>> sorted(c.value for c in store.cogs_categories("store_1"))
        ['drink', 'food']

    """

    def __init__(self, path: Optional[Path] = None) -> None:
        self.path = path
        self._state: dict[str, list[dict]] = self._read_file() if path else {}

    def load_settings(self, store_id: str) -> list[CostCategorySetting]:
        """Return the store's settings, seeding and persisting them on first read."""
        raw = self._state.get(store_id)
        if raw is None:
            logger.info("Seeding default cost category settings for store %s", store_id)
            seeded = default_settings()
            self.save_settings(store_id, seeded)
            return seeded

        return merge_with_defaults(self._decode(store_id, raw))

    def save_settings(self, store_id: str, settings: Iterable[CostCategorySetting]) -> None:
        self._state[store_id] = [
            {"expense_category": s.expense_category.value, "is_cogs": bool(s.is_cogs)}
            for s in settings
        ]
        if self.path:
            self._write_file()

    def cogs_categories(self, store_id: str) -> frozenset[ExpenseCategory]:
        """Return the categories currently flagged as COGS for the store."""
        return frozenset(s.expense_category for s in self.load_settings(store_id) if s.is_cogs)

    def _decode(self, store_id: str, raw: list[dict]) -> list[CostCategorySetting]:
        settings = []
        for item in raw:
            try:
                category = ExpenseCategory(item["expense_category"])
            except (KeyError, ValueError):
                logger.warning(
                    "Ignoring unknown cost category setting %r for store %s", item, store_id
                )
                continue
            settings.append(
                CostCategorySetting(expense_category=category, is_cogs=bool(item.get("is_cogs")))
            )
        return settings

    def _read_file(self) -> dict[str, list[dict]]:
        assert self.path is not None
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigError(f"Cannot read cost category settings {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"Cost category settings {self.path} must contain a JSON object")
        return data

    def _write_file(self) -> None:
        assert self.path is not None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(
                json.dumps(self._state, indent=2, sort_keys=True), encoding="utf-8"
            )
        except OSError as e:
            logger.error("Error saving cost category settings: %s", e)
            raise ConfigError(f"Cannot write cost category settings {self.path}: {e}") from e
