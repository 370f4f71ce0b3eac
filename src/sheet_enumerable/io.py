"""I/O helpers — load grid rows from files, write CSV/JSON artifacts."""

from __future__ import annotations

import csv
import json
from collections.abc import Sequence
from datetime import date, datetime
from pathlib import Path
from typing import Any, Callable, cast

import pandas as pd

CSV_SUFFIXES = (".csv",)
EXCEL_SUFFIXES = (".xlsx", ".xlsm", ".xltx", ".xltm")
AUTO_DELIMITER = "auto"
SNIFF_DELIMITERS = ",;\t|"

# ── Loading ──────────────────────────────────────────────────────


def _frame_to_rows(df: pd.DataFrame) -> list[list[str]]:
    rows: list[list[str]] = []
    for record in df.itertuples(index=False, name=None):
        row = ["" if pd.isna(cell) else str(cell) for cell in record]
        while row and row[-1] == "":
            row.pop()
        rows.append(row)
    return rows


def detect_delimiter(path: Path, sample_size: int = 65536) -> str:
    """Guess the CSV delimiter among ``, ; tab |``; fall back to a comma."""
    sample = Path(path).read_bytes()[:sample_size].decode("utf-8-sig", errors="replace")
    try:
        return csv.Sniffer().sniff(sample, delimiters=SNIFF_DELIMITERS).delimiter
    except csv.Error:
        return ","


def resolve_delimiter(path: Path, delimiter: str | None) -> str:
    if not delimiter:
        return ","
    if delimiter == AUTO_DELIMITER:
        return detect_delimiter(path)
    return delimiter


def _max_field_count(path: Path, delimiter: str, encoding: str) -> tuple[int, int]:
    # Rows may be ragged (a title cell above a wider header row).
    width = 0
    count = 0
    with open(path, encoding=encoding, errors="strict", newline="") as fh:
        for record in csv.reader(fh, delimiter=delimiter):
            width = max(width, len(record))
            count += 1
    return width, count


def load_rows(path: Path, delimiter: str | None = ",") -> list[list[str]]:
    """Load a CSV or Excel file as raw rows of cell text (no header row).

    CSV rows may have different lengths; *delimiter* defaults to a comma
    and ``"auto"`` sniffs it from the file.

    Raises
    ------
    FileNotFoundError
        If *path* does not exist.
    ValueError
        If the extension is not supported, or CSV decoding/parsing fails.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Input file not found: {path}")

    suffix = path.suffix.lower()
    if suffix in CSV_SUFFIXES:
        if path.stat().st_size == 0:
            return []
        sep = resolve_delimiter(path, delimiter)
        last_exc: Exception | None = None
        for encoding in ("utf-8-sig", "utf-8", "latin-1"):
            try:
                width, count = _max_field_count(path, sep, encoding)
                if width == 0:
                    return [[] for _ in range(count)]
                df = pd.read_csv(
                    path,
                    header=None,
                    names=list(range(width)),
                    dtype="string",
                    sep=sep,
                    engine="c",
                    encoding=encoding,
                    encoding_errors="strict",
                    keep_default_na=False,
                    skip_blank_lines=False,
                )
                return _frame_to_rows(df)
            except pd.errors.EmptyDataError:
                return []
            except (UnicodeDecodeError, csv.Error, pd.errors.ParserError) as exc:
                last_exc = exc
        raise ValueError(f"Could not read CSV {path} (decode or parse failed)") from last_exc

    if suffix in EXCEL_SUFFIXES:
        read_excel = cast(Callable[..., pd.DataFrame], getattr(pd, "read_excel"))
        return _frame_to_rows(read_excel(path, engine="openpyxl", header=None, dtype="string"))

    raise ValueError(f"Unsupported file type: {suffix!r}. Use .csv or .xlsx")


# ── Writing ──────────────────────────────────────────────────────


def save_rows(path: Path, rows: Sequence[Sequence[str]], delimiter: str = ",") -> Path:
    """Write *rows* to *path* as CSV (atomic), padding to the widest row."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    width = max((len(row) for row in rows), default=0)
    padded = [list(row) + [""] * (width - len(row)) for row in rows]
    tmp_path = path.with_suffix(path.suffix + ".tmp")
    with open(tmp_path, "w", encoding="utf-8", newline="") as fh:
        writer = csv.writer(fh, delimiter=delimiter, lineterminator="\n")
        writer.writerows(padded)
    tmp_path.replace(path)
    return path


def _json_default(obj: Any) -> Any:
    if isinstance(obj, Path):
        return str(obj)
    if isinstance(obj, (datetime, date)):
        return obj.isoformat()
    item = getattr(obj, "item", None)
    if callable(item):
        converted = item()
        if isinstance(converted, (str, int, float, bool)) or converted is None:
            return converted
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


def write_json(path: Path, data: Any) -> Path:
    """Write *data* as pretty-printed JSON to *path* (atomic + deterministic)."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    payload = json.dumps(
        data,
        indent=2,
        sort_keys=True,
        ensure_ascii=False,
        default=_json_default,
    ) + "\n"
    tmp_path = path.with_suffix(path.suffix + ".tmp")
    tmp_path.write_text(payload, encoding="utf-8")
    tmp_path.replace(path)
    return path
