"""Tests for the fleetquote CLI against a throwaway SQLite file."""

from __future__ import annotations

import re
from io import BytesIO

import pytest
from openpyxl import Workbook, load_workbook
from typer.testing import CliRunner

from fleetquote.cli import app
from fleetquote.config import reset_config

runner = CliRunner()


def _write_xlsx(path, rows):
    wb = Workbook()
    ws = wb.active
    for row in rows:
        ws.append(row)
    buffer = BytesIO()
    wb.save(buffer)
    path.write_bytes(buffer.getvalue())
    return path


@pytest.fixture
def sqlite_file_db(tmp_path, monkeypatch):
    monkeypatch.setenv("DATABASE_URL", f"sqlite+aiosqlite:///{tmp_path / 'fleetquote.db'}")
    monkeypatch.setenv("MATRIX_EXPORT_DIR", str(tmp_path / "exports"))
    reset_config()
    result = runner.invoke(app, ["init"])
    assert result.exit_code == 0, result.output
    return tmp_path


@pytest.fixture
def workbook(tmp_path, eg16_rows):
    return _write_xlsx(tmp_path / "eg16.xlsx", eg16_rows)


def _import(workbook) -> str:
    result = runner.invoke(app, ["import-matrix", str(workbook)])
    assert result.exit_code == 0, result.output
    return re.search(r"Saved matrix (\S+)", result.output).group(1)


def test_import_dry_run(workbook):
    result = runner.invoke(app, ["import-matrix", str(workbook), "--dry-run"])

    assert result.exit_code == 0, result.output
    assert "2 variants, 4 spec groups, 14 options" in result.output
    assert "Dry run" in result.output


def test_import_missing_file(tmp_path):
    result = runner.invoke(app, ["import-matrix", str(tmp_path / "missing.xlsx")])

    assert result.exit_code == 1
    assert "File not found" in result.output


def test_import_without_variants_fails(tmp_path):
    path = _write_xlsx(tmp_path / "bad.xlsx", [["h"] * 5, ["EG16", "OPT", "1135", "x", 1]])

    result = runner.invoke(app, ["import-matrix", str(path), "--dry-run"])

    assert result.exit_code == 1
    assert "No variants found" in result.output


def test_import_list_and_delete(sqlite_file_db, workbook):
    matrix_id = _import(workbook)

    listed = runner.invoke(app, ["list-matrices"])
    assert listed.exit_code == 0, listed.output
    assert "EG16" in listed.output

    deleted = runner.invoke(app, ["delete-matrix", matrix_id, "--yes"])
    assert deleted.exit_code == 0, deleted.output

    empty = runner.invoke(app, ["list-matrices"])
    assert "No configuration matrices stored" in empty.output


def test_set_option_and_quote(sqlite_file_db, workbook):
    matrix_id = _import(workbook)

    patched = runner.invoke(
        app, ["set-option", matrix_id, "EG16P", "5100", "OPT-CAB-FULL", "--cost", "1450"]
    )
    assert patched.exit_code == 0, patched.output

    quoted = runner.invoke(app, ["quote", "EG16", "EG16P", "-s", "5100=OPT-CAB-FULL"])
    assert quoted.exit_code == 0, quoted.output
    assert "EG16P Three-wheel (EG16P)" in quoted.output
    assert "Full cabin (+€1,450)" in quoted.output
    assert "Options total: 1,450 EUR" in quoted.output


def test_quote_incomplete_selection_exits_2(sqlite_file_db, workbook):
    _import(workbook)

    result = runner.invoke(app, ["quote", "EG16", "EG16P"])

    assert result.exit_code == 2
    assert "Missing: CABIN" in result.output


def test_set_option_unknown_option(sqlite_file_db, workbook):
    matrix_id = _import(workbook)

    result = runner.invoke(
        app, ["set-option", matrix_id, "EG16P", "1135", "OPT-NOPE", "--description", "x"]
    )

    assert result.exit_code == 1
    assert "Option OPT-NOPE not found in spec group 1135" in result.output


def test_set_option_requires_a_change(sqlite_file_db):
    result = runner.invoke(app, ["set-option", "m", "v", "s", "o"])

    assert result.exit_code == 1
    assert "Nothing to update" in result.output


def test_export_matrix(sqlite_file_db, workbook):
    _import(workbook)
    output = sqlite_file_db / "out.xlsx"

    result = runner.invoke(app, ["export-matrix", "EG16", "-o", str(output)])

    assert result.exit_code == 0, result.output
    ws = load_workbook(output).active
    assert [c.value for c in ws[1]][4:] == ["EG16P", "EG16"]


def test_export_matrix_default_location(sqlite_file_db, workbook):
    _import(workbook)

    result = runner.invoke(app, ["export-matrix", "EG16"])

    assert result.exit_code == 0, result.output
    assert (sqlite_file_db / "exports" / "configuration-matrix-EG16.xlsx").exists()


def test_export_unknown_family(sqlite_file_db):
    result = runner.invoke(app, ["export-matrix", "RX60"])

    assert result.exit_code == 1
