"""Record stores domain module.

This module provides typed access to the six operational record kinds a
store produces, plus the per-store COGS category settings:

- **Models**: `records.models` - immutable record values and their enums
- **Interfaces**: `records.base` - abstract store contracts the aggregators use
- **Reference stores**: `records.memory` - in-memory implementations
- **Loading**: `records.csv_loader.load_record_stores()` - build in-memory
  stores from the record CSV files under `DataPaths.records_dir`
- **Settings**: `records.settings.CategorySettingsStore` - COGS flags

Example:
    >>> from pos_reports import DataPaths
    >>> from pos_reports.records import load_record_stores
    >>>
    >>> paths = DataPaths.from_root("data", "config/stores.json")
    >>> stores = load_record_stores(paths)
"""

from pos_reports.records.csv_loader import RecordStores, load_record_stores
from pos_reports.records.settings import CategorySettingsStore

__all__ = ["CategorySettingsStore", "RecordStores", "load_record_stores"]
