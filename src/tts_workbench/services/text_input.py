"""
Input parsing for batch synthesis: free text (one entry per line),
CSV or Excel sheets with a name column and a text column, and sentence
splitting.
"""
from __future__ import annotations
import csv
import io
import re
import zipfile
from dataclasses import dataclass
from pathlib import Path
from typing import Any, BinaryIO, Iterable, Optional, Sequence, Union
import openpyxl
from openpyxl.utils.exceptions import InvalidFileException

from ..core.config import TEXT_CONFIG
from ..core.types import InputError
from ..utils.logger import logger


@dataclass(frozen=True)
class TextEntry:
    """One unit of input: becomes one group, exported under `label`."""
    label: str
    text: str


def split_sentences(text: str, terminators: str = TEXT_CONFIG.sentence_terminators) -> list[str]:
    """
    Split text after each terminator character, keeping the terminator.
    Trailing text without a terminator forms the last sentence.
    """
    if not terminators:
        stripped = text.strip()
        return [stripped] if stripped else []

    pattern = re.compile(f"([{re.escape(terminators)}])")
    sentences: list[str] = []
    current = ""
    for piece in pattern.split(text):
        if not piece.strip():
            continue
        if piece in terminators:
            # A terminator with nothing before it is not a sentence
            if current.strip():
                sentences.append((current + piece).strip())
            current = ""
            continue
        current += piece
    if current.strip():
        sentences.append(current.strip())
    return [s for s in sentences if s]


def parse_text_lines(text: str) -> list[TextEntry]:
    """One entry per non-empty line, labelled 1..n."""
    lines = [line.strip() for line in text.splitlines() if line.strip()]
    if not lines:
        raise InputError("No non-empty text lines")
    return [TextEntry(str(i), line) for i, line in enumerate(lines, start=1)]


def parse_csv(
    source: Union[str, Path, io.TextIOBase],
    label_column: str = TEXT_CONFIG.label_column,
    text_column: str = TEXT_CONFIG.text_column
) -> list[TextEntry]:
    """
    Read entries from a CSV sheet.

    Args:
        source: Path to a UTF-8 CSV file, or an open text stream
        label_column: Header of the output-name column
        text_column: Header of the text column

    Returns:
        Entries for rows that have both a label and non-blank text

    Raises:
        InputError: Missing headers or no usable rows
    """
    if isinstance(source, (str, Path)):
        with open(source, newline="", encoding="utf-8-sig") as f:
            return _read_rows(csv.reader(f), label_column, text_column, "CSV")
    return _read_rows(csv.reader(source), label_column, text_column, "CSV")


def parse_xlsx(
    source: Union[str, Path, BinaryIO],
    sheet: Optional[str] = None,
    label_column: str = TEXT_CONFIG.label_column,
    text_column: str = TEXT_CONFIG.text_column
) -> list[TextEntry]:
    """
    Read entries from an Excel workbook, applying the same rules as parse_csv.

    Args:
        source: Path to an .xlsx file, or a binary stream holding one
        sheet: Worksheet name; the first worksheet when None

    Raises:
        InputError: Unreadable workbook, unknown sheet, missing headers or no usable rows
    """
    try:
        workbook = openpyxl.load_workbook(source, read_only=True, data_only=True)
    except (InvalidFileException, zipfile.BadZipFile, KeyError, OSError) as e:
        raise InputError(f"Cannot read workbook: {e}") from e

    try:
        if sheet is None:
            worksheet = workbook.worksheets[0]
        elif sheet in workbook.sheetnames:
            worksheet = workbook[sheet]
        else:
            raise InputError(f"No worksheet named {sheet!r}")
        return _read_rows(worksheet.iter_rows(values_only=True), label_column, text_column, "workbook")
    finally:
        workbook.close()


def _cell(value: Any) -> str:
    return "" if value is None else str(value).strip()


def _read_rows(
    rows: Iterable[Sequence[Any]],
    label_column: str,
    text_column: str,
    kind: str
) -> list[TextEntry]:
    """First row is the header; later rows need both a label and text."""
    rows = iter(rows)
    headers = [_cell(h) for h in next(rows, ())]
    if label_column not in headers or text_column not in headers:
        raise InputError(f'Header must contain "{label_column}" and "{text_column}" columns')
    label_at, text_at = headers.index(label_column), headers.index(text_column)

    entries = []
    for row in rows:
        label = _cell(row[label_at]) if label_at < len(row) else ""
        text = _cell(row[text_at]) if text_at < len(row) else ""
        if label and text:
            entries.append(TextEntry(label, text))

    if not entries:
        raise InputError("No valid text rows")
    logger.info(f"Parsed {len(entries)} entries from {kind}")
    return entries
