"""Unified configuration for POS Reports.

This module provides a single, simple configuration class describing where
record files, persisted settings and exported reports live.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass
class DataPaths:
    """All filesystem paths used by the reporting engine.

    Attributes:
        data_root: Root directory for record, settings and export files.
        stores_json: Path to the store directory JSON file.

    Directory Structure:
        data_root/
        ├── records/         # one CSV per record kind
        │   ├── receipts.csv
        │   ├── payment_splits.csv
        │   ├── expenses.csv
        │   ├── cash_transactions.csv
        │   ├── closings.csv
        │   ├── time_records.csv
        │   └── vendors.csv
        ├── settings/        # cost_category_settings.json
        └── exports/         # rendered CSV reports
    """

    data_root: Path
    stores_json: Path

    @classmethod
    def from_root(
        cls,
        data_root: str | Path,
        stores_json: str | Path,
    ) -> DataPaths:
        """Create DataPaths from root directory and stores file.

        Args:
            data_root: Root directory for reporting data.
            stores_json: Path to stores.json configuration.

        Returns:
            DataPaths instance.

        Examples:
            >>> paths = DataPaths.from_root("data", "config/stores.json")
            >>> paths.records_dir
            PosixPath('data/records')
        """
        if isinstance(data_root, str):
            data_root = Path(data_root)
        if isinstance(stores_json, str):
            stores_json = Path(stores_json)

        return cls(data_root=data_root, stores_json=stores_json)

    @property
    def records_dir(self) -> Path:
        """Source record CSV files."""
        return self.data_root / "records"

    @property
    def settings_dir(self) -> Path:
        """Persisted per-store settings."""
        return self.data_root / "settings"

    @property
    def category_settings_json(self) -> Path:
        """COGS flags for every store."""
        return self.settings_dir / "cost_category_settings.json"

    @property
    def exports_dir(self) -> Path:
        """Rendered CSV reports."""
        return self.data_root / "exports"

    def record_file(self, kind: str) -> Path:
        """Return the CSV path for a record kind, e.g. ``"receipts"``."""
        return self.records_dir / f"{kind}.csv"

    def ensure_dirs(self) -> None:
        """Create all directories in the data structure."""
        for path in [
            self.records_dir,
            self.settings_dir,
            self.exports_dir,
        ]:
            path.mkdir(parents=True, exist_ok=True)
