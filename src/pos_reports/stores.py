"""Store directory for resolving store and employee display names.

This module loads the store configuration from stores.json and resolves the
display names used in exported reports. Reports never fail because a name is
unknown; they fall back to an identifier-based label instead.

The file maps store ids to their configuration::

    {
        "store_1": {
            "name": "Main Street",
            "employees": {"1": "Taro Yamada", "2": "Hanako Sato"}
        }
    }
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from pos_reports.exceptions import ConfigError

if TYPE_CHECKING:
    from pos_reports.config import DataPaths

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StoreInfo:
    """Display configuration of one store.

    Attributes:
        store_id: Store identifier used by every record.
        name: Display name printed in reports.
        employees: Mapping of employee id to display name.
    """

    store_id: str
    name: str
    employees: dict[int, str] = field(default_factory=dict)


def load_stores_from_json(stores_path: Path) -> dict[str, StoreInfo]:
    """Load store definitions from a stores.json configuration file.

    Args:
        stores_path: Path to the stores.json configuration file.

    Returns:
        Dictionary mapping store ids to StoreInfo objects.

    Raises:
        ConfigError: If the file cannot be read or has an unexpected shape.
    """
    try:
        data = json.loads(stores_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f"Cannot load store directory {stores_path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Store directory {stores_path} must contain a JSON object")

    stores: dict[str, StoreInfo] = {}
    for store_id, rec in data.items():
        try:
            employees = {int(k): str(v) for k, v in rec.get("employees", {}).items()}
            stores[store_id] = StoreInfo(
                store_id=store_id,
                name=str(rec.get("name") or store_id),
                employees=employees,
            )
        except (AttributeError, ValueError) as e:
            raise ConfigError(f"Invalid entry for store '{store_id}': {e}") from e

    return stores


class StoreDirectory:
    """Registry of store and employee display names.

    Example:
        >>> from pos_reports import DataPaths
        >>> from pos_reports.stores import StoreDirectory
        >>>
        >>> paths = DataPaths.from_root("data", "config/stores.json")
        >>> directory = StoreDirectory.from_paths(paths)
        >>> directory.store_name("store_1")
        'Main Street'
        >>> directory.employee_name("store_1", 42)
        'employee42'

    """

    def __init__(self, stores: dict[str, StoreInfo] | None = None) -> None:
        self._stores = dict(stores or {})

    @classmethod
    def from_paths(cls, paths: DataPaths) -> StoreDirectory:
        """Build a directory from the stores.json referenced by ``paths``."""
        return cls(load_stores_from_json(paths.stores_json))

    def list_stores(self) -> list[str]:
        """List all configured store ids."""
        return sorted(self._stores.keys())

    def store_name(self, store_id: str) -> str:
        """Return the display name of a store, or its id when unconfigured."""
        info = self._stores.get(store_id)
        if info is None:
            logger.debug("Store '%s' not in directory, using id as name", store_id)
            return store_id
        return info.name

    def employee_names(self, store_id: str) -> dict[int, str]:
        """Return the employee id to name mapping for a store."""
        info = self._stores.get(store_id)
        return dict(info.employees) if info else {}

    def employee_name(self, store_id: str, employee_id: int) -> str:
        """Return an employee display name, falling back to ``employee<id>``."""
        return self.employee_names(store_id).get(employee_id, f"employee{employee_id}")
