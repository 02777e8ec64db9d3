"""
Tests for workbook loading, key sanitizing and output path helpers.
"""

import io
import pytest
import pandas as pd
from pathlib import Path
import tempfile
import shutil
import openpyxl

from excel_splitter.errors import LoadError
from excel_splitter.io_utils import (
    load_workbook_safe,
    sanitize_key,
    truncate_sheet_title,
    ensure_out_dir,
    output_file_path,
    write_manifest_csv
)


class TestSanitizeKey:
    """Test suite for sanitize_key function."""

    def test_plain_value_unchanged(self):
        """Test that letters, digits and underscores are kept."""
        assert sanitize_key("East_1") == "East_1"

    def test_runs_collapse_to_single_space(self):
        """Test that every run of other characters becomes one space."""
        assert sanitize_key("Sales/Marketing") == "Sales Marketing"
        assert sanitize_key("IT <> Support") == "IT Support"
        assert sanitize_key("a--b..c") == "a b c"

    def test_surrounding_separators_trimmed(self):
        """Test that leading and trailing separators do not leave spaces."""
        assert sanitize_key("  (North)  ") == "North"

    def test_empty_value_is_blank(self):
        """Test that an empty value maps to Blank."""
        assert sanitize_key("") == "Blank"

    @pytest.mark.parametrize("value", ["/", "***", " - ", "?!", "é"])
    def test_only_separators_is_blank(self, value):
        """Test that values without word characters map to Blank."""
        assert sanitize_key(value) == "Blank"

    @pytest.mark.parametrize("value", ["Sales/Marketing", "  x  y ", "", "Blank", "a&b&&c", "42.5"])
    def test_idempotent(self, value):
        """Test that sanitizing a sanitized key returns it unchanged."""
        once = sanitize_key(value)
        assert sanitize_key(once) == once


class TestTruncateSheetTitle:
    """Test suite for truncate_sheet_title function."""

    def test_short_title_unchanged(self):
        assert truncate_sheet_title("Region-East") == "Region-East"

    def test_long_title_cut_to_31(self):
        title = "Department Name-" + "x" * 40
        result = truncate_sheet_title(title)
        assert len(result) == 31
        assert title.startswith(result)


class TestLoadWorkbookSafe:
    """Test suite for load_workbook_safe function."""

    @pytest.fixture
    def temp_dir(self):
        """Create a temporary directory for test files."""
        temp_dir = Path(tempfile.mkdtemp())
        yield temp_dir
        shutil.rmtree(temp_dir)

    @pytest.fixture
    def workbook_path(self, temp_dir):
        """Create a small workbook on disk."""
        wb = openpyxl.Workbook()
        ws = wb.active
        ws.title = "Data"
        ws.append(["Region", "Amount"])
        ws.append(["East", 10])
        path = temp_dir / "input.xlsx"
        wb.save(path)
        wb.close()
        return path

    def test_load_from_path(self, workbook_path):
        """Test loading a workbook from a path."""
        wb = load_workbook_safe(workbook_path)
        assert wb.sheetnames == ["Data"]
        wb.close()

    def test_load_from_string_path(self, workbook_path):
        """Test loading a workbook from a string path."""
        wb = load_workbook_safe(str(workbook_path))
        assert wb["Data"]["A2"].value == "East"
        wb.close()

    def test_load_from_stream(self, workbook_path):
        """Test loading a workbook from a readable byte stream."""
        stream = io.BytesIO(workbook_path.read_bytes())
        wb = load_workbook_safe(stream)
        assert wb["Data"]["B2"].value == 10
        wb.close()

    def test_missing_file(self, temp_dir):
        """Test that a missing file raises LoadError."""
        with pytest.raises(LoadError, match="File not found"):
            load_workbook_safe(temp_dir / "missing.xlsx")

    def test_wrong_extension(self, temp_dir):
        """Test that non-Excel extensions are rejected."""
        path = temp_dir / "data.csv"
        path.write_text("a,b\n1,2\n")
        with pytest.raises(LoadError, match="must be an Excel file"):
            load_workbook_safe(path)

    def test_corrupt_file(self, temp_dir):
        """Test that an unreadable container raises LoadError."""
        path = temp_dir / "broken.xlsx"
        path.write_bytes(b"this is not a zip archive")
        with pytest.raises(LoadError, match="Failed to read workbook"):
            load_workbook_safe(path)

    def test_corrupt_stream(self):
        """Test that an unreadable stream raises LoadError."""
        with pytest.raises(LoadError):
            load_workbook_safe(io.BytesIO(b"garbage"))

    def test_load_error_is_value_error(self, temp_dir):
        """Test that callers catching ValueError still catch load failures."""
        with pytest.raises(ValueError):
            load_workbook_safe(temp_dir / "missing.xlsx")


class TestOutputHelpers:
    """Test suite for output directory, path and manifest helpers."""

    @pytest.fixture
    def temp_dir(self):
        temp_dir = Path(tempfile.mkdtemp())
        yield temp_dir
        shutil.rmtree(temp_dir)

    def test_ensure_out_dir_creates_nested(self, temp_dir):
        """Test that nested output directories are created."""
        target = temp_dir / "a" / "b"
        assert ensure_out_dir(target) == target
        assert target.is_dir()

    def test_ensure_out_dir_existing(self, temp_dir):
        """Test that an existing directory is accepted."""
        ensure_out_dir(temp_dir)
        assert temp_dir.is_dir()

    def test_output_file_path(self, temp_dir):
        """Test output file naming."""
        path = output_file_path(temp_dir / "Region", "Data", "Region", "East")
        assert path == temp_dir / "Region" / "Data-Region-East.xlsx"

    def test_write_manifest_csv(self, temp_dir):
        """Test that manifest entries are written as CSV."""
        entries = [
            {'value': 'East', 'output_path': 'Region/Data-Region-East.xlsx', 'row_count': 2, 'sheet_title': 'Region-East'},
            {'value': 'West', 'output_path': 'Region/Data-Region-West.xlsx', 'row_count': 1, 'sheet_title': 'Region-West'},
        ]
        manifest_path = temp_dir / "out" / "manifest.csv"
        write_manifest_csv(entries, manifest_path)

        df = pd.read_csv(manifest_path)
        assert list(df['value']) == ['East', 'West']
        assert list(df['row_count']) == [2, 1]

    def test_write_manifest_csv_empty(self, temp_dir):
        """Test that no file is written for an empty manifest."""
        manifest_path = temp_dir / "manifest.csv"
        write_manifest_csv([], manifest_path)
        assert not manifest_path.exists()
