# src/scopus_fetcher/cli.py
import argparse
import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

import requests
from rich.logging import RichHandler

from . import settings_manager
from .aggregator import collect_responses
from .exceptions import (
    FileAccessError,
    FileWriteError,
    SerializationError,
    UsageError,
    WorkbookError,
)
from .exporters import RowLayout, output_path, save_excel, save_json
from .parsers import iter_dois
from .scopus_client import ScopusClient
from .tui import (
    create_progress,
    done,
    err,
    err_console,
    note,
    phase,
    prompt_api_key,
    prompt_source_path,
    save_failed_dois,
    show_summary,
)
from .types import LookupReport

log = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FATAL = 1
EXIT_USAGE = 2
EXIT_INTERRUPTED = 130

FATAL_ERRORS = (FileAccessError, SerializationError, FileWriteError, WorkbookError)


def should_show_debug(settings):
    return (settings or {}).get("ui_mode", settings_manager.DEFAULT_UI_MODE) == "debug"


def _setup_logging(debug: bool):
    log_level = logging.DEBUG if debug else logging.WARNING
    requests_log_level = logging.WARNING if debug else logging.ERROR

    handlers: list[logging.Handler] = [
        RichHandler(
            console=err_console, show_path=False, rich_tracebacks=True, show_level=False
        ),
    ]

    # Console-only logging when the settings directory is not writable.
    try:
        file_handler = RotatingFileHandler(
            settings_manager.log_file(), maxBytes=5 * 1024 * 1024, backupCount=3, encoding="utf-8"
        )
    except OSError as e:
        file_handler = None
        log_file_error = e
    else:
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        )
        handlers.append(file_handler)

    logging.basicConfig(level=log_level, format="%(message)s", handlers=handlers)
    logging.getLogger("urllib3").setLevel(requests_log_level)
    logging.getLogger("requests").setLevel(requests_log_level)

    if file_handler is None:
        log.warning("Logging to console only, cannot open log file: %s", log_file_error)


def _parse_args(argv):
    parser = argparse.ArgumentParser(
        prog="scopus-fetcher",
        description="Look up every DOI in a RIS file on Scopus and save the results as JSON and Excel.",
    )
    parser.add_argument(
        "--legacy-rows",
        action="store_true",
        help="Number spreadsheet rows as entry index + response index + 2 (rows may overlap)",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Per-request timeout in seconds (default: wait indefinitely)",
    )
    parser.add_argument(
        "--remember-key",
        action="store_true",
        help="Store the API key encrypted for later runs",
    )
    parser.add_argument(
        "--forget-key",
        action="store_true",
        help="Delete any stored settings before running",
    )
    parser.add_argument("--debug", action="store_true", help="Verbose logging")
    return parser.parse_args(argv)


def _ask(prompt, *args) -> str:
    # Closed input counts as a blank answer.
    try:
        return prompt(*args).strip()
    except EOFError:
        return ""


def _read_inputs(settings) -> tuple[str, str]:
    phase("Scopus Lookup by DOI")
    source_path = _ask(prompt_source_path)
    api_key = _ask(prompt_api_key, settings_manager.default_api_key(settings))
    if not source_path or not api_key:
        raise UsageError("RIS file path and Scopus API key must not be empty.")
    return source_path, api_key


def run(
    source_path: str | Path,
    api_key: str,
    layout: RowLayout = RowLayout.RUNNING,
    timeout: float | None = None,
    session: requests.Session | None = None,
) -> tuple[LookupReport, Path, Path]:
    """
    Runs the whole pipeline for one RIS file.

    Returns the lookup report and the paths of the JSON and Excel outputs,
    both written beside ``source_path``.
    """
    source = Path(source_path)
    with ScopusClient(api_key, session=session, timeout=timeout) as client, create_progress() as progress:
        task = progress.add_task("Fetching Scopus data", total=None)

        def _advance(idx, doi, ok):
            progress.update(task, advance=1, description=f"Fetching Scopus data for {doi}")

        report = collect_responses(iter_dois(source), client, on_progress=_advance)

    json_path = save_json(report.responses, output_path(source, ".json"))
    xlsx_path = save_excel(report.responses, output_path(source, ".xlsx"), layout)
    save_failed_dois(report, output_path(source, "_failed.txt"))
    return report, json_path, xlsx_path


def main(argv=None) -> int:
    args = _parse_args(argv)

    if args.forget_key:
        settings_manager.delete_config_raw()

    settings = settings_manager.read_config_raw() or {}
    _setup_logging(args.debug or should_show_debug(settings))

    try:
        source_path, api_key = _read_inputs(settings)

        if args.remember_key and settings.get("api_key") != api_key:
            settings["api_key"] = api_key
            settings_manager.write_config_raw(settings)
            note("API key saved.", settings)

        layout = RowLayout.LEGACY if args.legacy_rows else RowLayout.RUNNING
        report, json_path, xlsx_path = run(
            source_path, api_key, layout=layout, timeout=args.timeout
        )
    except UsageError as e:
        err(str(e))
        return EXIT_USAGE
    except FATAL_ERRORS as e:
        log.critical("Run aborted: %s", e)
        err(str(e))
        return EXIT_FATAL
    except KeyboardInterrupt:
        err("Interrupted.")
        return EXIT_INTERRUPTED

    show_summary(report, json_path, xlsx_path)
    done("Done.")
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
