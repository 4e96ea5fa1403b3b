# scopus_fetcher/exporters.py
"""Writes aggregated Scopus responses to JSON and to an XLSX workbook."""

import enum
import json
import logging
from collections.abc import Iterator, Sequence
from pathlib import Path

from openpyxl import Workbook
from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE

from .config import SHEET_HEADERS, SHEET_NAME
from .exceptions import FileWriteError, SerializationError, WorkbookError
from .types import Entry, ScopusResponse

log = logging.getLogger(__name__)

# Institution, City, Country
AFFILIATION_COLUMNS = (5, 6, 7)


class RowLayout(enum.Enum):
    """How spreadsheet rows are numbered."""

    # One row per entry, no gaps or overlaps.
    RUNNING = "running"
    # Row = entry index + response index + 2. Later responses overwrite
    # earlier rows when a response holds more than one entry.
    LEGACY = "legacy"


def output_path(source: str | Path, suffix: str) -> Path:
    """Path beside ``source`` with the same stem and a new extension."""
    p = Path(source)
    return p.with_name(p.stem + suffix)


def save_json(responses: Sequence[ScopusResponse], path: str | Path) -> Path:
    """Saves the collection as a two-space indented JSON array."""
    path = Path(path)
    try:
        payload = json.dumps(
            [r.to_json_dict() for r in responses], indent=2, ensure_ascii=False
        )
    except (TypeError, ValueError) as e:
        raise SerializationError(f"Could not convert results to JSON: {e}") from e

    try:
        path.write_text(payload, encoding="utf-8")
    except (OSError, UnicodeError) as e:
        raise FileWriteError(f"Could not write JSON file {path}: {e}") from e

    log.info("Data saved to file: %s", path)
    return path


def _clean(value: str) -> str:
    return ILLEGAL_CHARACTERS_RE.sub("", value)


def entry_row(entry: Entry) -> list[str]:
    """The spreadsheet cells for one entry, in header order."""
    affiliation = entry.last_affiliation()
    return [
        entry.cover_date,
        entry.doi,
        entry.title,
        entry.creator,
        affiliation.name,
        affiliation.city,
        affiliation.country,
        entry.publication_name,
        entry.eissn,
        entry.volume,
        entry.issue_identifier,
        entry.page_range,
        entry.open_access,
        entry.cited_by_count,
        entry.url,
    ]


def iter_rows(
    responses: Sequence[ScopusResponse], layout: RowLayout = RowLayout.RUNNING
) -> Iterator[tuple[int, Entry]]:
    """Yields ``(row_number, entry)`` for every entry; the header is row 1."""
    row = 2
    for i, response in enumerate(responses):
        for j, entry in enumerate(response.entries):
            if layout is RowLayout.LEGACY:
                yield j + i + 2, entry
            else:
                yield row, entry
                row += 1


def save_excel(
    responses: Sequence[ScopusResponse],
    path: str | Path,
    layout: RowLayout = RowLayout.RUNNING,
) -> Path:
    """Saves one row per entry to a single-sheet workbook."""
    path = Path(path)
    try:
        wb = Workbook()
        ws = wb.active
        ws.title = SHEET_NAME

        for col, header in enumerate(SHEET_HEADERS, start=1):
            ws.cell(row=1, column=col, value=header)

        for row, entry in iter_rows(responses, layout):
            for col, value in enumerate(entry_row(entry), start=1):
                # Legacy rows only touch the affiliation cells when the entry
                # has one, so an overwritten row keeps the earlier values.
                if (
                    layout is RowLayout.LEGACY
                    and col in AFFILIATION_COLUMNS
                    and not entry.affiliations
                ):
                    continue
                ws.cell(row=row, column=col, value=_clean(value))

        wb.save(path)
    except (OSError, ValueError) as e:
        raise WorkbookError(f"Could not save Excel file {path}: {e}") from e

    log.info("Data saved to file: %s", path)
    return path
