# scopus_fetcher/types.py
"""Type definitions for Scopus search results.

Field aliases are the Scopus Search API's own JSON keys, so a response dumped
with ``by_alias=True`` has the same shape the API returned.
"""

import re
from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

# json.loads joins valid pairs, so any surrogate left in a str is unpaired.
_SURROGATE_RE = re.compile("[\ud800-\udfff]")


def _replace_lone_surrogates(value: Any) -> Any:
    """Unpaired surrogates from \\ud800-style escapes become U+FFFD."""
    if isinstance(value, str):
        return _SURROGATE_RE.sub("\ufffd", value)
    return value


class _ScopusModel(BaseModel):
    model_config = ConfigDict(
        populate_by_name=True,
        frozen=True,
        extra="ignore",
        coerce_numbers_to_str=True,
    )

    @model_validator(mode="before")
    @classmethod
    def _clean_values(cls, data: Any) -> Any:
        # Explicit nulls fall back to the field default like missing keys do.
        if isinstance(data, dict):
            return {k: _replace_lone_surrogates(v) for k, v in data.items() if v is not None}
        return data


class Link(_ScopusModel):
    fa: str = Field(default="", alias="@_fa")
    ref: str = Field(default="", alias="@ref")
    href: str = Field(default="", alias="@href")
    type: str = Field(default="", alias="@type")


class Affiliation(_ScopusModel):
    """An institutional address attached to an entry."""

    fa: str = Field(default="", alias="@_fa")
    name: str = Field(default="", alias="affilname")
    city: str = Field(default="", alias="affiliation-city")
    country: str = Field(default="", alias="affiliation-country")


class Entry(_ScopusModel):
    """One bibliographic record inside a search-results payload."""

    fa: str = Field(default="", alias="@_fa")
    links: list[Link] = Field(default_factory=list, alias="link")
    url: str = Field(default="", alias="prism:url")
    identifier: str = Field(default="", alias="dc:identifier")
    eid: str = Field(default="", alias="eid")
    title: str = Field(default="", alias="dc:title")
    creator: str = Field(default="", alias="dc:creator")
    publication_name: str = Field(default="", alias="prism:publicationName")
    eissn: str = Field(default="", alias="prism:eIssn")
    volume: str = Field(default="", alias="prism:volume")
    issue_identifier: str = Field(default="", alias="prism:issueIdentifier")
    page_range: str = Field(default="", alias="prism:pageRange")
    cover_date: str = Field(default="", alias="prism:coverDate")
    cover_display_date: str = Field(default="", alias="prism:coverDisplayDate")
    doi: str = Field(default="", alias="prism:doi")
    cited_by_count: str = Field(default="", alias="citedby-count")
    affiliations: list[Affiliation] = Field(default_factory=list, alias="affiliation")
    aggregation_type: str = Field(default="", alias="prism:aggregationType")
    subtype: str = Field(default="", alias="subtype")
    subtype_description: str = Field(default="", alias="subtypeDescription")
    article_number: str = Field(default="", alias="article-number")
    source_id: str = Field(default="", alias="source-id")
    open_access: str = Field(default="", alias="openaccess")
    open_access_flag: bool = Field(default=False, alias="openaccessFlag")

    def last_affiliation(self) -> Affiliation:
        """
        Returns the affiliation exported for this entry.
        When several are present the last one wins; with none, an empty one.
        """
        if self.affiliations:
            return self.affiliations[-1]
        return Affiliation()


class Query(_ScopusModel):
    role: str = Field(default="", alias="@role")
    search_terms: str = Field(default="", alias="@searchTerms")
    start_page: str = Field(default="", alias="@startPage")


class SearchResults(_ScopusModel):
    total_results: str = Field(default="", alias="opensearch:totalResults")
    start_index: str = Field(default="", alias="opensearch:startIndex")
    items_per_page: str = Field(default="", alias="opensearch:itemsPerPage")
    query: Query = Field(default_factory=Query, alias="opensearch:Query")
    links: list[Link] = Field(default_factory=list, alias="link")
    entries: list[Entry] = Field(default_factory=list, alias="entry")


class ScopusResponse(_ScopusModel):
    """A decoded Scopus search response for a single DOI query."""

    search_results: SearchResults = Field(
        default_factory=SearchResults, alias="search-results"
    )

    @property
    def entries(self) -> list[Entry]:
        return self.search_results.entries

    def to_json_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")


@dataclass
class LookupReport:
    """Outcome of looking up every DOI in a source file."""

    responses: list[ScopusResponse] = field(default_factory=list)
    failed: list[tuple[str, str]] = field(default_factory=list)
    attempted: int = 0

    @property
    def succeeded(self) -> int:
        return len(self.responses)
