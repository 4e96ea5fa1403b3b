import logging
from collections.abc import Callable, Iterable

from .exceptions import LookupFailed
from .scopus_client import ScopusClient
from .types import LookupReport

log = logging.getLogger(__name__)

ProgressCallback = Callable[[int, str, bool], None]


def collect_responses(
    dois: Iterable[str],
    client: ScopusClient,
    on_progress: ProgressCallback | None = None,
) -> LookupReport:
    """
    Looks up each DOI in order and keeps every successful response.

    A failed lookup is logged and skipped; it never stops the run. Errors
    raised while reading the DOIs themselves are not caught here.
    """
    report = LookupReport()

    for idx, doi in enumerate(dois, start=1):
        report.attempted += 1
        log.info("Fetching data for DOI: %s", doi)
        try:
            response = client.fetch(doi)
        except LookupFailed as e:
            log.warning("Failed to fetch data for DOI %s: %s", doi, e)
            report.failed.append((doi, str(e)))
            ok = False
        else:
            report.responses.append(response)
            ok = True

        if on_progress:
            on_progress(idx, doi, ok)

    log.info(
        "Looked up %d DOIs: %d succeeded, %d failed",
        report.attempted,
        report.succeeded,
        len(report.failed),
    )
    return report
