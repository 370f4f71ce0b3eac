from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path

import pandas as pd
import pytest

from sheet_enumerable.io import (
    detect_delimiter,
    load_rows,
    resolve_delimiter,
    save_rows,
    write_json,
)


def test_load_rows_csv_reads_without_header_as_strings(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    csv_path = tmp_path / "data.csv"
    csv_path.write_text("a;b\n1;2\n", encoding="utf-8")
    frame = pd.DataFrame([["a", "b"], ["1", pd.NA]], dtype="string")

    calls: list[dict[str, object]] = []

    def _fake_read_csv(path: Path, **kwargs: object) -> pd.DataFrame:
        calls.append({"path": path, **kwargs})
        return frame

    monkeypatch.setattr(pd, "read_csv", _fake_read_csv)

    result = load_rows(csv_path)

    assert result == [["a", "b"], ["1"]]
    assert len(calls) == 1
    assert calls[0]["header"] is None
    assert calls[0]["dtype"] == "string"
    assert calls[0]["sep"] == ","
    assert calls[0]["engine"] == "c"
    assert calls[0]["names"] == [0]
    assert calls[0]["encoding"] == "utf-8-sig"
    assert calls[0]["keep_default_na"] is False


def test_load_rows_csv_passes_explicit_delimiter_and_width(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    csv_path = tmp_path / "data.csv"
    csv_path.write_text("a|b\n", encoding="utf-8")
    calls: list[dict[str, object]] = []

    def _fake_read_csv(path: Path, **kwargs: object) -> pd.DataFrame:
        calls.append(dict(kwargs))
        return pd.DataFrame([["a", "b"]], dtype="string")

    monkeypatch.setattr(pd, "read_csv", _fake_read_csv)

    load_rows(csv_path, delimiter="|")

    assert calls[0]["sep"] == "|"
    assert calls[0]["engine"] == "c"
    assert calls[0]["names"] == [0, 1]


def test_load_rows_csv_retries_encoding_on_unicode_error(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    csv_path = tmp_path / "data.csv"
    csv_path.write_bytes(b"x")
    encodings: list[str] = []

    def _fake_read_csv(path: Path, **kwargs: object) -> pd.DataFrame:
        del path
        encoding = kwargs.get("encoding")
        assert isinstance(encoding, str)
        encodings.append(encoding)
        if encoding in {"utf-8-sig", "utf-8"}:
            raise UnicodeDecodeError("utf-8", b"x", 0, 1, "bad")
        return pd.DataFrame([["x"]], dtype="string")

    monkeypatch.setattr(pd, "read_csv", _fake_read_csv)

    assert load_rows(csv_path) == [["x"]]
    assert encodings == ["utf-8-sig", "utf-8", "latin-1"]


def test_load_rows_csv_parse_failure_raises_value_error(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    csv_path = tmp_path / "data.csv"
    csv_path.write_bytes(b"x")

    def _fake_read_csv(path: Path, **kwargs: object) -> pd.DataFrame:
        raise pd.errors.ParserError("broken")

    monkeypatch.setattr(pd, "read_csv", _fake_read_csv)

    with pytest.raises(ValueError, match="Could not read CSV"):
        load_rows(csv_path)


def test_load_rows_real_csv_keeps_blank_cells_and_lines(tmp_path: Path) -> None:
    csv_path = tmp_path / "grid.csv"
    csv_path.write_text("Name,Score\n,\nAnn,NA\n", encoding="utf-8")

    assert load_rows(csv_path, delimiter=",") == [["Name", "Score"], [], ["Ann", "NA"]]


def test_load_rows_csv_title_row_above_wider_header(tmp_path: Path) -> None:
    csv_path = tmp_path / "report.csv"
    csv_path.write_text("Quarterly report\nName,Score\nAnn,10\n", encoding="utf-8")

    assert load_rows(csv_path) == [["Quarterly report"], ["Name", "Score"], ["Ann", "10"]]


def test_load_rows_csv_ragged_rows(tmp_path: Path) -> None:
    csv_path = tmp_path / "ragged.csv"
    csv_path.write_text("Title,\nName,Score,Region\nAnn,10,North\n", encoding="utf-8")

    assert load_rows(csv_path) == [
        ["Title"],
        ["Name", "Score", "Region"],
        ["Ann", "10", "North"],
    ]


def test_load_rows_csv_auto_detects_semicolons(tmp_path: Path) -> None:
    csv_path = tmp_path / "semi.csv"
    csv_path.write_text("Name;Score\nAnn;10\nBob;20\n", encoding="utf-8")

    assert detect_delimiter(csv_path) == ";"
    assert load_rows(csv_path, delimiter="auto") == [
        ["Name", "Score"],
        ["Ann", "10"],
        ["Bob", "20"],
    ]


def test_resolve_delimiter_defaults_to_comma(tmp_path: Path) -> None:
    csv_path = tmp_path / "semi.csv"
    csv_path.write_text("Name;Score\nAnn;10\n", encoding="utf-8")

    assert resolve_delimiter(csv_path, None) == ","
    assert resolve_delimiter(csv_path, "\t") == "\t"
    assert resolve_delimiter(csv_path, "auto") == ";"


def test_load_rows_empty_csv(tmp_path: Path) -> None:
    csv_path = tmp_path / "empty.csv"
    csv_path.write_text("", encoding="utf-8")

    assert load_rows(csv_path) == []


def test_load_rows_xlsx_uses_openpyxl(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    xlsx_path = tmp_path / "data.xlsx"
    xlsx_path.write_bytes(b"x")
    calls: list[dict[str, object]] = []

    def _fake_read_excel(path: Path, **kwargs: object) -> pd.DataFrame:
        calls.append({"path": path, **kwargs})
        return pd.DataFrame([["a"]], dtype="string")

    monkeypatch.setattr(pd, "read_excel", _fake_read_excel)

    assert load_rows(xlsx_path) == [["a"]]
    assert calls[0]["engine"] == "openpyxl"
    assert calls[0]["header"] is None


def test_load_rows_missing_and_unsupported(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_rows(tmp_path / "nope.csv")

    txt = tmp_path / "notes.txt"
    txt.write_text("x", encoding="utf-8")
    with pytest.raises(ValueError, match="Unsupported file type"):
        load_rows(txt)


def test_save_rows_pads_and_replaces_atomically(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "out.csv"

    save_rows(path, [["a", "b", "c"], ["1"]])

    assert path.read_text(encoding="utf-8") == "a,b,c\n1,,\n"
    assert not (tmp_path / "nested" / "out.csv.tmp").exists()


def test_write_json_is_sorted_and_supports_path_and_datetime(tmp_path: Path) -> None:
    path = tmp_path / "out" / "summary.json"

    write_json(path, {"b": Path("x.csv"), "a": datetime(2024, 1, 2)})

    text = path.read_text(encoding="utf-8")
    assert text.endswith("\n")
    assert list(json.loads(text)) == ["a", "b"]
    assert json.loads(text)["b"] == "x.csv"


def test_write_json_rejects_unknown_objects(tmp_path: Path) -> None:
    with pytest.raises(TypeError, match="not JSON serializable"):
        write_json(tmp_path / "bad.json", {"x": object()})
