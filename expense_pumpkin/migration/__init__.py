"""Legacy schema migration."""

from expense_pumpkin.migration.migrator import (
    LegacyMigrator,
    migrate_legacy_records,
    migrated_description,
    validate_legacy_record,
)

__all__ = [
    "LegacyMigrator",
    "migrate_legacy_records",
    "migrated_description",
    "validate_legacy_record",
]
