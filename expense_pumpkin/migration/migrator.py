"""
Legacy Schema Migration

The previous schema stored one record per expense per day, with no
description and no currency:

    {"id": "...", "date": "2024-01-05", "amount": 10, "timestamp": 1704412800000}

Migration folds those into one current-schema record per month, in the
default currency, described as "Migrated expenses (<n> expense(s))".

It runs only when the current collection is empty and legacy data exists.
On success the current collection is replaced, the legacy key deleted and
a marker written; on failure nothing is written and the legacy data stays.
The legacy key is only deleted once the migrated collection is stored.
"""

import json
import math
import re
from typing import Any, Callable, Optional, Sequence

import structlog
from pydantic import TypeAdapter, ValidationError

from expense_pumpkin.aggregation.engine import total_of
from expense_pumpkin.config.catalog import DEFAULT_CURRENCY
from expense_pumpkin.config.settings import StorageSettings
from expense_pumpkin.models.events import TrackerEventBuilder
from expense_pumpkin.models.expense import (
    MONTH_KEY_PATTERN,
    Expense,
    LegacyExpense,
    current_time_ms,
)
from expense_pumpkin.models.outcomes import LegacyRecordCheck, MigrationOutcome
from expense_pumpkin.reporting import EventReporter
from expense_pumpkin.services.storage import KeyValueStore, PersistentValue, StorageError


logger = structlog.get_logger(__name__)

_MONTH_KEY_RE = re.compile(MONTH_KEY_PATTERN)
_LEGACY_ADAPTER = TypeAdapter(LegacyExpense)

NO_VALID_RECORDS = "no valid records"
NOTHING_PROCESSED = "failed to process any expenses"
NOT_A_LIST = "legacy data is not a list of records"
NOT_SAVED = "migrated expenses could not be saved"

SkipCallback = Callable[[str, str], None]


def validate_legacy_record(raw: Any) -> LegacyRecordCheck:
    """
    Structural check of one raw legacy record.

    Accepted only if it is an object with `id` and `date` strings and
    numeric `amount` and `timestamp`. Never raises.
    """
    if not isinstance(raw, dict):
        return LegacyRecordCheck.reject(f"expected an object, got {type(raw).__name__}")

    try:
        record = _LEGACY_ADAPTER.validate_python(raw, strict=True)
    except ValidationError as e:
        fields = ", ".join(
            ".".join(str(part) for part in error["loc"][:1]) or "record"
            for error in e.errors()
        )
        return LegacyRecordCheck.reject(f"invalid field(s): {fields}")

    return LegacyRecordCheck.accept(record)


def migrated_description(count: int) -> str:
    noun = "expense" if count == 1 else "expenses"
    return f"Migrated expenses ({count} {noun})"


def migrate_legacy_records(
    raw_records: Sequence[Any],
    default_currency: str = DEFAULT_CURRENCY,
    now_ms: Optional[int] = None,
    on_skip: Optional[SkipCallback] = None,
) -> MigrationOutcome:
    """
    Transform raw legacy records into monthly current-schema records.

    Args:
        raw_records: Decoded legacy collection
        default_currency: Currency given to every migrated record
        now_ms: Timestamp for the new records (defaults to now)
        on_skip: Called with (record id, reason) for each skipped record

    Returns:
        MigrationOutcome; records are sorted by month
    """
    if not raw_records:
        return MigrationOutcome.no_legacy_data()

    now_ms = current_time_ms() if now_ms is None else now_ms

    valid: list[LegacyExpense] = []
    skipped = 0
    for index, raw in enumerate(raw_records):
        check = validate_legacy_record(raw)
        if check.accepted:
            valid.append(check.record)
        else:
            skipped += 1
            record_id = raw.get("id") if isinstance(raw, dict) else None
            _skip(on_skip, str(record_id or f"#{index}"), check.reason)

    if not valid:
        return MigrationOutcome.invalid(NO_VALID_RECORDS)

    groups: dict[str, list[LegacyExpense]] = {}
    for record in valid:
        month = record.month_key
        if not _MONTH_KEY_RE.match(month):
            skipped += 1
            _skip(on_skip, record.id, f"invalid date '{record.date}'")
            continue
        groups.setdefault(month, []).append(record)

    if not groups:
        return MigrationOutcome.invalid(NOTHING_PROCESSED)

    records = []
    for month, group in sorted(groups.items()):
        total = sum_amounts(group)
        if not math.isfinite(total):
            skipped += len(group)
            for record in group:
                _skip(on_skip, record.id, f"total for {month} is out of range")
            continue
        records.append(Expense.create(
            month=month,
            description=migrated_description(len(group)),
            amount=total,
            currency=default_currency,
            now_ms=now_ms,
        ))

    if not records:
        return MigrationOutcome.invalid(NOTHING_PROCESSED)
    return MigrationOutcome.success(records, skipped=skipped)


def sum_amounts(records: Sequence[LegacyExpense]) -> float:
    """Exact sum of the amounts; non-finite when it leaves the float range."""
    return total_of(record.amount for record in records)


def _skip(on_skip: Optional[SkipCallback], record_id: str, reason: str) -> None:
    logger.warning("legacy_record_skipped", record_id=record_id, reason=reason)
    if on_skip is not None:
        on_skip(record_id, reason)


class LegacyMigrator:
    """
    Runs the one-time legacy migration against a store.

    Args:
        store: Key-value capability holding the legacy collection
        settings: Storage key names
        expenses: The current expense collection
        reporter: Where migration results are reported
        default_currency: Currency for migrated records
        clock: Millisecond clock used for new records and the marker
    """

    def __init__(
        self,
        store: KeyValueStore,
        settings: StorageSettings,
        expenses: PersistentValue[list[Expense]],
        reporter: EventReporter,
        default_currency: str = DEFAULT_CURRENCY,
        clock: Callable[[], int] = current_time_ms,
    ):
        self._store = store
        self._settings = settings
        self._expenses = expenses
        self._reporter = reporter
        self._default_currency = default_currency
        self._clock = clock

    def _read_legacy(self) -> Optional[str]:
        try:
            return self._store.get(self._settings.legacy_key)
        except StorageError as e:
            logger.warning("legacy_read_failed", error=str(e))
            return None

    def migrate(self) -> MigrationOutcome:
        """
        Compute the migration without writing anything.

        NO_LEGACY_DATA when storage is unavailable, the current collection
        already has records, or there is no (non-empty) legacy collection.
        """
        if not self._expenses.available or self._expenses.value:
            return MigrationOutcome.no_legacy_data()

        raw = self._read_legacy()
        if not raw:
            return MigrationOutcome.no_legacy_data()

        try:
            decoded = json.loads(raw)
        except json.JSONDecodeError:
            return MigrationOutcome.invalid(NOT_A_LIST)

        if not isinstance(decoded, list):
            return MigrationOutcome.invalid(NOT_A_LIST)

        return migrate_legacy_records(
            decoded,
            default_currency=self._default_currency,
            now_ms=self._clock(),
            on_skip=self._report_skip,
        )

    def _report_skip(self, record_id: str, reason: str) -> None:
        self._reporter.report(TrackerEventBuilder.legacy_record_skipped(record_id, reason))

    def apply(self, outcome: MigrationOutcome) -> MigrationOutcome:
        """
        Persist a successful outcome; anything else is returned unchanged.

        The legacy key is removed and the marker written only after the
        migrated collection reached the store. If that write fails the
        migrated records stay in memory for this session, the legacy data
        stays on disk, and the returned outcome has `persisted=False`.
        """
        if not outcome.succeeded:
            return outcome

        if not self._expenses.set(list(outcome.records)):
            error = self._expenses.last_write_error
            reason = f"{NOT_SAVED}: {error}" if error else NOT_SAVED
            logger.error("migration_not_saved", error=str(error))
            return outcome.mark_not_persisted(reason)

        try:
            self._store.remove(self._settings.legacy_key)
            self._store.set(
                self._settings.migration_flag_storage_key,
                json.dumps({"migrated_at": self._clock(), "records": len(outcome.records)}),
            )
        except StorageError as e:
            logger.error("migration_cleanup_failed", error=str(e))
        return outcome.mark_persisted()

    def run(self) -> MigrationOutcome:
        """Migrate, persist on success, and report the result."""
        outcome = self.migrate()

        if outcome.succeeded:
            outcome = self.apply(outcome)
            if outcome.persisted:
                self._reporter.report(
                    TrackerEventBuilder.migration_succeeded(len(outcome.records), outcome.skipped)
                )
            else:
                self._reporter.report(TrackerEventBuilder.migration_failed(outcome.reason))
        elif outcome.failed:
            self._reporter.report(TrackerEventBuilder.migration_failed(outcome.reason))

        return outcome
