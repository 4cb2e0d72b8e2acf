"""
Tests for CSV export and artifact delivery.
"""

import csv
import io
from datetime import date

import pytest

from expense_pumpkin.services.export import (
    CSV_MEDIA_TYPE,
    DirectorySink,
    DownloadUnsupportedError,
    ExportWithNoDataError,
    MemorySink,
    build_csv_artifact,
    escape_csv_field,
    generate_filename,
    to_csv,
)
from expense_pumpkin.services.export import csv_export


def parse(content: str) -> list[list[str]]:
    return list(csv.reader(io.StringIO(content)))


class TestEscaping:
    """Tests for field escaping."""

    @pytest.mark.parametrize("field", ["plain", "with space", "🛒 Groceries", ""])
    def test_plain_fields_unquoted(self, field):
        """Test fields without special characters are left alone."""
        assert escape_csv_field(field) == field

    @pytest.mark.parametrize("field", ["a,b", 'say "x"', "line\nbreak", "carriage\rreturn"])
    def test_special_fields_quoted(self, field):
        """Test quoting is triggered by quote, comma, CR and LF."""
        escaped = escape_csv_field(field)
        assert escaped.startswith('"') and escaped.endswith('"')

    def test_inner_quotes_doubled(self):
        """Test embedded quotes are doubled."""
        assert escape_csv_field('He said, "hi"\nbye') == '"He said, ""hi""\nbye"'


class TestToCsv:
    """Tests for to_csv."""

    def test_header_only_for_empty(self):
        """Test an empty list produces just the header."""
        assert to_csv([]) == "Month,Year,Description,Amount,Currency"

    def test_row_layout(self, make_expense):
        """Test month/year split, two-decimal amount and currency."""
        content = to_csv([make_expense("2024-03", 1500, "INR", description="Rent")])
        assert content == "Month,Year,Description,Amount,Currency\n03,2024,Rent,1500.00,INR"

    def test_no_trailing_newline(self, make_expense):
        """Test rows are joined without a trailing newline."""
        content = to_csv([make_expense("2024-01", 1), make_expense("2024-02", 2)])
        assert not content.endswith("\n")
        assert content.count("\n") == 2

    def test_missing_currency_uses_default(self, make_expense):
        """Test the default currency fills an empty currency."""
        content = to_csv([make_expense("2024-01", 1, None)], default_currency="GBP")
        assert content.endswith(",GBP")

    def test_round_trip(self, make_expense):
        """Test every record can be recovered from the CSV."""
        expenses = [
            make_expense("2024-01", 10.5, "USD", description="Lunch"),
            make_expense("2024-02", 1234.567, "EUR", description='He said, "hi"\nbye'),
            make_expense("2023-12", 3, "JPY", description="💡 Utilities"),
        ]
        rows = parse(to_csv(expenses))

        assert rows[0] == ["Month", "Year", "Description", "Amount", "Currency"]
        assert len(rows) - 1 == len(expenses)
        for expense, row in zip(expenses, rows[1:]):
            month, year, description, amount, currency = row
            assert f"{year}-{month}" == expense.month
            assert description == expense.description
            assert float(amount) == round(expense.amount, 2)
            assert currency == expense.currency

    def test_tricky_description_is_single_field(self, make_expense):
        """Test a comma, quotes and newline stay in one quoted field."""
        expense = make_expense("2024-01", 1, description='He said, "hi"\nbye')
        content = to_csv([expense])
        assert '"He said, ""hi""\nbye"' in content
        assert parse(content)[1][2] == 'He said, "hi"\nbye'


class TestArtifact:
    """Tests for filenames and artifact building."""

    def test_generate_filename(self):
        """Test the export filename pattern."""
        assert generate_filename(date(2024, 3, 9)) == "expense-pumpkin-export-2024-03-09.csv"
        assert generate_filename(date(2025, 12, 31), prefix="x") == "x-export-2025-12-31.csv"

    def test_empty_export_rejected_before_serialization(self, monkeypatch):
        """Test empty collections never reach CSV generation."""
        def fail(*args, **kwargs):
            raise AssertionError("to_csv must not be called")

        monkeypatch.setattr(csv_export, "to_csv", fail)
        with pytest.raises(ExportWithNoDataError):
            build_csv_artifact([], date(2024, 1, 1))

    def test_build_artifact(self, make_expense):
        """Test the artifact carries filename, content and media type."""
        artifact = build_csv_artifact([make_expense("2024-01", 5)], date(2024, 2, 1))
        assert artifact.filename == "expense-pumpkin-export-2024-02-01.csv"
        assert artifact.row_count == 1
        assert artifact.media_type == CSV_MEDIA_TYPE == "text/csv; charset=utf-8"


class TestDelivery:
    """Tests for artifact sinks."""

    def test_directory_sink_writes_file(self, tmp_path, make_expense):
        """Test a file is written into the directory."""
        artifact = build_csv_artifact([make_expense("2024-01", 5)], date(2024, 2, 1))
        location = DirectorySink(tmp_path).deliver(artifact)
        written = (tmp_path / artifact.filename).read_text(encoding="utf-8")
        assert location == str(tmp_path / artifact.filename)
        assert written == artifact.content

    def test_directory_sink_without_directory_unsupported(self, make_expense):
        """Test a missing directory primitive is reported distinctly."""
        sink = DirectorySink(None)
        assert sink.is_supported() is False
        artifact = build_csv_artifact([make_expense("2024-01", 5)], date(2024, 2, 1))
        with pytest.raises(DownloadUnsupportedError):
            sink.deliver(artifact)

    def test_directory_sink_missing_directory(self, tmp_path):
        """Test a directory that does not exist is unsupported."""
        assert DirectorySink(tmp_path / "missing").is_supported() is False

    def test_memory_sink(self, make_expense):
        """Test the memory sink keeps artifacts."""
        sink = MemorySink()
        artifact = build_csv_artifact([make_expense("2024-01", 5)], date(2024, 2, 1))
        assert sink.deliver(artifact) == f"memory://{artifact.filename}"
        assert sink.artifacts == [artifact]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
