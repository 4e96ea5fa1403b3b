# scopus_fetcher/config.py
"""Configuration constants for the fetcher."""

USER_AGENT = "scopus-fetcher/1.0 (+https://dev.elsevier.com/)"

SCOPUS_SEARCH_URL = "https://api.elsevier.com/content/search/scopus"

# None leaves the transport default in place (requests waits indefinitely).
REQUEST_TIMEOUT: float | None = None

DOI_TAG = "DO  - "

# Literal escape sequences that survive inside Scopus JSON strings and wrap
# HTML entities; replaced before the general entity unescape pass.
ESCAPE_REPLACEMENTS = [
    ("\\u0026", "&"),
    ("\\u003C", "<"),
    ("\\u003E", ">"),
    ("\\u0022", '"'),
    ("\\u0027", "'"),
]

SHEET_NAME = "ScopusData"

SHEET_HEADERS = [
    "CoverDate",
    "DOI",
    "Title",
    "Creator",
    "Institution",
    "City",
    "Country",
    "Journal",
    "eISSN",
    "Volume",
    "Issue",
    "Pages",
    "OpenAccess",
    "CitedBy",
    "URL",
]

API_KEY_ENV = "SCOPUS_API_KEY"
