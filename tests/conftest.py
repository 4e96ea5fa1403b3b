import pytest

from scopus_fetcher import settings_manager


def make_entry(doi="10.1000/xyz123", title="Example Title", **extra):
    entry = {
        "@_fa": "true",
        "prism:url": f"https://api.elsevier.com/content/abstract/doi/{doi}",
        "dc:identifier": "SCOPUS_ID:85000000000",
        "eid": "2-s2.0-85000000000",
        "dc:title": title,
        "dc:creator": "Doe J.",
        "prism:publicationName": "Journal of Examples",
        "prism:eIssn": "12345678",
        "prism:volume": "12",
        "prism:issueIdentifier": "3",
        "prism:pageRange": "100-110",
        "prism:coverDate": "2023-05-01",
        "prism:doi": doi,
        "citedby-count": "7",
        "affiliation": [
            {
                "@_fa": "true",
                "affilname": "University of Examples",
                "affiliation-city": "Springfield",
                "affiliation-country": "United States",
            }
        ],
        "openaccess": "1",
        "openaccessFlag": True,
    }
    entry.update(extra)
    return entry


def make_payload(*entries):
    return {
        "search-results": {
            "opensearch:totalResults": str(len(entries)),
            "opensearch:startIndex": "0",
            "opensearch:itemsPerPage": str(len(entries)),
            "opensearch:Query": {
                "@role": "request",
                "@searchTerms": "DOI(10.1000/xyz123)",
                "@startPage": "0",
            },
            "entry": list(entries),
        }
    }


@pytest.fixture
def entry_factory():
    return make_entry


@pytest.fixture
def payload_factory():
    return make_payload


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Keeps settings, keys and logs out of the real home directory."""
    config_dir = tmp_path / "config"
    monkeypatch.setattr(settings_manager, "CONFIG_DIR", config_dir)
    monkeypatch.delenv("SCOPUS_API_KEY", raising=False)
    return config_dir


@pytest.fixture
def ris_file(tmp_path):
    def _write(*lines, name="refs.ris"):
        p = tmp_path / name
        p.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return p

    return _write
