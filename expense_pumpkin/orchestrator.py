"""
Expense Tracker Orchestrator

Wires storage, migration, the ledger, aggregation and export together and
is the only surface the UI layer talks to.

Flow:
1. Open   -> Probe storage, load persisted values, migrate legacy data once
2. Submit -> Validate input; only valid input becomes a record
3. Read   -> Aggregations are computed from the in-memory collection
4. Export -> Reject empty collections, build the CSV, hand it to a sink

Every failure comes back as a typed result; nothing here raises to the UI.
"""

import logging
from datetime import date
from typing import Callable, Optional

from pydantic import TypeAdapter

from expense_pumpkin.aggregation import engine
from expense_pumpkin.config import AppSettings, StorageSettings, get_settings
from expense_pumpkin.lifecycle import CurrencyPreference, ExpenseLedger, RepeatableExpenseBook
from expense_pumpkin.migration import LegacyMigrator
from expense_pumpkin.models.events import TrackerEventBuilder
from expense_pumpkin.models.expense import (
    Expense,
    ExpenseInput,
    ExpenseStatistics,
    MonthSummary,
    RepeatableExpense,
    current_time_ms,
)
from expense_pumpkin.models.outcomes import (
    AddExpenseResult,
    ErrorKind,
    ExportResult,
    MigrationOutcome,
    StartupReport,
)
from expense_pumpkin.reporting import EventReporter
from expense_pumpkin.services.export import (
    ArtifactSink,
    DeliveryError,
    DownloadUnsupportedError,
    ExportWithNoDataError,
    build_csv_artifact,
)
from expense_pumpkin.services.storage import (
    FileKeyValueStore,
    InMemoryKeyValueStore,
    KeyValueStore,
    PersistentValue,
    QuotaExceededError,
)
from expense_pumpkin.validation import ExpenseValidator


_EXPENSES_ADAPTER = TypeAdapter(list[Expense])
_TEMPLATES_ADAPTER = TypeAdapter(list[RepeatableExpense])


class ExpenseTracker:
    """
    Facade over the expense tracker core.

    Args:
        store: Key-value capability (may turn out to be unavailable)
        storage_settings: Key names
        app_settings: Defaults and limits
        reporter: Event reporter shared by every component
        clock: Millisecond clock for new records
    """

    def __init__(
        self,
        store: KeyValueStore,
        storage_settings: Optional[StorageSettings] = None,
        app_settings: Optional[AppSettings] = None,
        reporter: Optional[EventReporter] = None,
        clock: Callable[[], int] = current_time_ms,
    ):
        self._store = store
        self._storage_settings = storage_settings or StorageSettings()
        self._app_settings = app_settings or AppSettings()
        self._reporter = reporter or EventReporter()
        self._clock = clock

        self._storage_available = store.is_available()
        if not self._storage_available:
            self._reporter.report(TrackerEventBuilder.storage_unavailable())

        records = PersistentValue(
            store,
            self._storage_settings.expenses_storage_key,
            _EXPENSES_ADAPTER,
            [],
            self._reporter,
            available=self._storage_available,
        )
        templates = PersistentValue(
            store,
            self._storage_settings.repeatables_storage_key,
            _TEMPLATES_ADAPTER,
            [],
            self._reporter,
            available=self._storage_available,
        )

        self._persisted_values = (records, templates)
        self._ledger = ExpenseLedger(records, self._reporter, clock)
        self._templates = RepeatableExpenseBook(
            templates, limit=self._app_settings.max_repeatable_expenses
        )
        self._currency = CurrencyPreference(
            store,
            self._storage_settings.currency_storage_key,
            self._app_settings.default_currency,
            available=self._storage_available,
        )
        self._validator = ExpenseValidator(self._app_settings)
        self._migrator = LegacyMigrator(
            store,
            self._storage_settings,
            records,
            self._reporter,
            default_currency=self._app_settings.default_currency,
            clock=clock,
        )
        self._migration: Optional[MigrationOutcome] = None

    # =========================================================================
    # STARTUP & STATE
    # =========================================================================

    def open(self) -> StartupReport:
        """
        Run startup work once: legacy migration.

        Calling it again returns the first report without migrating again.
        """
        if self._migration is None:
            self._migration = self._migrator.run()

        discarded_keys = [value.key for value in self._persisted_values if value.discarded_on_load]
        problems = []
        if not self._storage_available:
            problems.append(ErrorKind.STORAGE_UNAVAILABLE)
        if discarded_keys:
            problems.append(ErrorKind.CORRUPTED_STORED_DATA)
        if self._migration.failed or self._migration.unsaved:
            problems.append(ErrorKind.MIGRATION_FAILURE)

        return StartupReport(
            storage_available=self._storage_available,
            migration=self._migration,
            discarded_keys=discarded_keys,
            problems=problems,
        )

    @property
    def storage_available(self) -> bool:
        return self._storage_available

    @property
    def reporter(self) -> EventReporter:
        return self._reporter

    @property
    def expenses(self) -> tuple[Expense, ...]:
        return self._ledger.expenses

    @property
    def default_currency(self) -> str:
        return self._app_settings.default_currency

    def on_external_update(self, handler: Callable[[list[Expense]], None]) -> Callable[[], None]:
        """Be told when another process replaced the expense collection."""
        return self._ledger.on_external_update(handler)

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    def submit_expense(self, expense_input: ExpenseInput) -> AddExpenseResult:
        """Validate a form submission and add it when valid."""
        validation = self._validator.validate(expense_input)
        if not validation.is_valid:
            return AddExpenseResult(
                success=False,
                validation=validation,
                error_kind=ErrorKind.VALIDATION,
            )

        expense = self._ledger.add(
            month=validation.month,
            description=validation.description,
            amount=validation.amount,
            currency=validation.currency,
        )

        error_kind = self._write_error_kind()
        return AddExpenseResult(
            success=True,
            expense=expense,
            validation=validation,
            persisted=self._storage_available and error_kind is None,
            error_kind=error_kind,
        )

    def add_expense(
        self,
        month: str,
        description: str,
        amount: float,
        currency: Optional[str] = None,
    ) -> Expense:
        """Add an already-validated expense."""
        return self._ledger.add(month, description, amount, currency or self.currency)

    def clear_expenses(self) -> None:
        self._ledger.clear()

    def expenses_for_month(self, month: str) -> list[Expense]:
        return self._ledger.by_month(month)

    def _write_error_kind(self) -> Optional[ErrorKind]:
        # Unavailable storage is a standing state reported at startup
        error = self._ledger.last_write_error
        if error is None:
            return None
        if isinstance(error, QuotaExceededError):
            return ErrorKind.QUOTA_EXCEEDED
        return ErrorKind.STORAGE_UNAVAILABLE

    # =========================================================================
    # CURRENCY & REPEATABLE EXPENSES
    # =========================================================================

    @property
    def currency(self) -> str:
        return self._currency.currency

    def select_currency(self, currency: str) -> bool:
        return self._currency.set(currency)

    @property
    def repeatable_expenses(self) -> tuple[RepeatableExpense, ...]:
        return self._templates.templates

    def save_repeatable_expense(self, category: str, amount: str, currency: str) -> bool:
        return self._templates.save(
            RepeatableExpense(category=category, amount=amount, currency=currency)
        )

    def remove_repeatable_expense(self, template: RepeatableExpense) -> bool:
        return self._templates.remove(template)

    # =========================================================================
    # AGGREGATION
    # =========================================================================

    def statistics(self, today: Optional[date] = None) -> ExpenseStatistics:
        return engine.summarize(self.expenses, today or date.today())

    def year_overview(self, year: int, today: Optional[date] = None) -> list[MonthSummary]:
        return engine.year_overview(
            self.expenses,
            year,
            today=today or date.today(),
            default_currency=self.default_currency,
        )

    # =========================================================================
    # EXPORT
    # =========================================================================

    def export_csv(self, sink: ArtifactSink, today: Optional[date] = None) -> ExportResult:
        """
        Export every expense as CSV through `sink`.

        Empty collections are rejected before a file is generated, and an
        unsupported sink is rejected before anything is delivered.
        """
        try:
            artifact = build_csv_artifact(
                self.expenses,
                today or date.today(),
                prefix=self._app_settings.export_prefix,
                default_currency=self.default_currency,
            )
            if not sink.is_supported():
                raise DownloadUnsupportedError("File downloads are not supported here")
            location = sink.deliver(artifact)
        except ExportWithNoDataError as e:
            return self._export_failed(ErrorKind.EXPORT_WITH_NO_DATA, str(e))
        except DownloadUnsupportedError as e:
            return self._export_failed(ErrorKind.DOWNLOAD_UNSUPPORTED, str(e))
        except DeliveryError as e:
            return self._export_failed(ErrorKind.EXPORT_FAILED, str(e))

        self._reporter.report(
            TrackerEventBuilder.export_completed(artifact.filename, artifact.row_count)
        )
        return ExportResult(
            success=True,
            filename=artifact.filename,
            location=location,
            row_count=artifact.row_count,
        )

    def _export_failed(self, kind: ErrorKind, message: str) -> ExportResult:
        self._reporter.report(TrackerEventBuilder.export_failed(kind.value, message))
        return ExportResult(success=False, error_kind=kind, message=message)


def create_tracker(
    use_storage: bool = True,
    reporter: Optional[EventReporter] = None,
) -> ExpenseTracker:
    """
    Factory function to create a tracker from settings.

    Args:
        use_storage: Whether to use the file-backed store.
                    Set to False for a purely in-memory tracker.
    """
    settings = get_settings()
    storage_settings = settings.storage
    app_settings = settings.app

    logging.getLogger("expense_pumpkin").setLevel(
        logging.DEBUG if app_settings.debug_mode else logging.INFO
    )

    if use_storage:
        store: KeyValueStore = FileKeyValueStore(
            storage_settings.data_dir,
            quota_bytes=storage_settings.quota_bytes,
            retry_attempts=storage_settings.write_retry_attempts,
        )
    else:
        store = InMemoryKeyValueStore()

    return ExpenseTracker(
        store,
        storage_settings=storage_settings,
        app_settings=app_settings,
        reporter=reporter,
    )
