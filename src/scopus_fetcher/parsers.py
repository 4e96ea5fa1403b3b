# scopus_fetcher/parsers.py
"""Extracts DOIs from RIS-style bibliography exports."""

import logging
from collections.abc import Iterator
from pathlib import Path

from .config import DOI_TAG
from .exceptions import FileAccessError

log = logging.getLogger(__name__)


def _strip_line_ending(line: str) -> str:
    if line.endswith("\n"):
        line = line[:-1]
    if line.endswith("\r"):
        line = line[:-1]
    return line


def iter_dois(filepath: str | Path) -> Iterator[str]:
    """
    Lazily yields the DOI of every line tagged with ``DO  - ``.

    The value is everything after the tag, untrimmed. Lines with any other
    tag are skipped. The file is opened when iteration starts and closed
    when it ends; open and read failures surface as FileAccessError.
    """
    p = Path(filepath)
    try:
        with p.open("r", encoding="utf-8", errors="replace", newline="") as fh:
            for lineno, line in enumerate(fh, start=1):
                line = _strip_line_ending(line)
                if line.startswith(DOI_TAG):
                    doi = line[len(DOI_TAG):]
                    log.debug("Found DOI on line %d: %s", lineno, doi)
                    yield doi
    except OSError as e:
        raise FileAccessError(f"Could not read {filepath}: {e}") from e


def extract_dois_from_file(filepath: str | Path) -> list[str]:
    """Reads every tagged DOI from a file, keeping file order and duplicates."""
    return list(iter_dois(filepath))
