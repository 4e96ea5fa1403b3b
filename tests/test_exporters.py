import json

import pytest
from openpyxl import load_workbook

from scopus_fetcher.config import SHEET_HEADERS, SHEET_NAME
from scopus_fetcher.exceptions import FileWriteError, WorkbookError
from scopus_fetcher.exporters import (
    RowLayout,
    entry_row,
    iter_rows,
    output_path,
    save_excel,
    save_json,
)
from scopus_fetcher.types import Entry, ScopusResponse


@pytest.fixture
def response_factory(payload_factory):
    def _make(*entries):
        return ScopusResponse.model_validate(payload_factory(*entries))

    return _make


def test_output_path_replaces_extension(tmp_path):
    src = tmp_path / "exports" / "my.refs.ris"
    assert output_path(src, ".json") == tmp_path / "exports" / "my.refs.json"
    assert output_path(src, ".xlsx") == tmp_path / "exports" / "my.refs.xlsx"
    assert output_path(tmp_path / "noext", ".json") == tmp_path / "noext.json"


def test_save_json_empty(tmp_path):
    path = save_json([], tmp_path / "out.json")
    assert path.read_text(encoding="utf-8") == "[]"


def test_save_json_uses_api_keys(tmp_path, response_factory, entry_factory):
    responses = [response_factory(entry_factory(title="Ünïcode & more"))]

    path = save_json(responses, tmp_path / "out.json")
    text = path.read_text(encoding="utf-8")
    data = json.loads(text)

    assert isinstance(data, list) and len(data) == 1
    entry = data[0]["search-results"]["entry"][0]
    assert entry["dc:title"] == "Ünïcode & more"
    assert entry["prism:doi"] == "10.1000/xyz123"
    assert entry["affiliation"][0]["affilname"] == "University of Examples"
    assert '\n  {\n    "search-results"' in text


def test_save_json_write_failure(tmp_path):
    with pytest.raises(FileWriteError):
        save_json([], tmp_path / "missing-dir" / "out.json")


def test_save_excel_empty_has_only_header(tmp_path):
    path = save_excel([], tmp_path / "out.xlsx")

    wb = load_workbook(path)
    assert wb.sheetnames == [SHEET_NAME]
    ws = wb[SHEET_NAME]
    assert ws.max_row == 1
    assert [c.value for c in ws[1]] == SHEET_HEADERS


def test_save_excel_single_entry(tmp_path, response_factory, entry_factory):
    path = save_excel([response_factory(entry_factory())], tmp_path / "out.xlsx")

    ws = load_workbook(path)[SHEET_NAME]
    assert ws["A2"].value == "2023-05-01"
    assert ws["B2"].value == "10.1000/xyz123"
    assert ws["C2"].value == "Example Title"
    assert ws["E2"].value == "University of Examples"
    assert ws["H2"].value == "Journal of Examples"
    assert ws["M2"].value == "1"
    assert ws["N2"].value == "7"
    assert ws["O2"].value == "https://api.elsevier.com/content/abstract/doi/10.1000/xyz123"


def test_two_entries_in_one_response_both_written(tmp_path, response_factory, entry_factory):
    response = response_factory(
        entry_factory(doi="10.1/one", title="One"),
        entry_factory(doi="10.1/two", title="Two"),
    )
    for layout in RowLayout:
        path = save_excel([response], tmp_path / f"{layout.value}.xlsx", layout)
        ws = load_workbook(path)[SHEET_NAME]
        assert ws.max_row == 3
        assert (ws["B2"].value, ws["B3"].value) == ("10.1/one", "10.1/two")


def test_running_rows_never_collide(tmp_path, response_factory, entry_factory):
    first = response_factory(*(entry_factory(doi=f"10.1/r0-{j}") for j in range(3)))
    second = response_factory(entry_factory(doi="10.1/r1-0"))

    ws = load_workbook(save_excel([first, second], tmp_path / "out.xlsx"))[SHEET_NAME]

    assert ws.max_row == 5
    assert [ws.cell(row=r, column=2).value for r in range(2, 6)] == [
        "10.1/r0-0",
        "10.1/r0-1",
        "10.1/r0-2",
        "10.1/r1-0",
    ]


def test_legacy_rows_overwrite(tmp_path, response_factory, entry_factory):
    """Response 1's first entry lands on row 3, over response 0's second entry."""
    first = response_factory(*(entry_factory(doi=f"10.1/r0-{j}") for j in range(3)))
    second = response_factory(entry_factory(doi="10.1/r1-0"))

    assert [row for row, _ in iter_rows([first, second], RowLayout.LEGACY)] == [2, 3, 4, 3]

    path = save_excel([first, second], tmp_path / "out.xlsx", RowLayout.LEGACY)
    ws = load_workbook(path)[SHEET_NAME]
    assert ws.max_row == 4
    assert [ws.cell(row=r, column=2).value for r in range(2, 5)] == [
        "10.1/r0-0",
        "10.1/r1-0",
        "10.1/r0-2",
    ]


def test_last_affiliation_wins(entry_factory):
    entry = Entry.model_validate(
        entry_factory(
            affiliation=[
                {"affilname": "First U", "affiliation-city": "A", "affiliation-country": "X"},
                {"affilname": "Last U", "affiliation-city": "B", "affiliation-country": "Y"},
            ]
        )
    )
    assert entry_row(entry)[4:7] == ["Last U", "B", "Y"]


def test_no_affiliation_gives_empty_cells():
    assert entry_row(Entry())[4:7] == ["", "", ""]


def test_illegal_characters_are_dropped(tmp_path, response_factory, entry_factory):
    response = response_factory(entry_factory(title="Bad\x0bchar"))
    ws = load_workbook(save_excel([response], tmp_path / "out.xlsx"))[SHEET_NAME]
    assert ws["C2"].value == "Badchar"


def test_save_excel_failure(tmp_path):
    with pytest.raises(WorkbookError):
        save_excel([], tmp_path / "missing-dir" / "out.xlsx")


def test_legacy_overwrite_keeps_affiliation_without_one(tmp_path, response_factory, entry_factory):
    """An entry with no affiliation leaves the institution cells it lands on alone."""
    first = response_factory(
        entry_factory(doi="10.1/r0-0"),
        entry_factory(
            doi="10.1/r0-1",
            affiliation=[{"affilname": "U0", "affiliation-city": "C0", "affiliation-country": "K0"}],
        ),
    )
    second = response_factory(entry_factory(doi="10.1/r1-0", affiliation=[]))

    ws = load_workbook(save_excel([first, second], tmp_path / "legacy.xlsx", RowLayout.LEGACY))[SHEET_NAME]
    assert ws["B3"].value == "10.1/r1-0"
    assert (ws["E3"].value, ws["F3"].value, ws["G3"].value) == ("U0", "C0", "K0")

    ws = load_workbook(save_excel([first, second], tmp_path / "running.xlsx"))[SHEET_NAME]
    assert ws["B4"].value == "10.1/r1-0"
    assert ws["E4"].value in (None, "")


def test_save_json_lone_surrogate_is_write_error(tmp_path, mocker):
    response = mocker.Mock(spec=ScopusResponse)
    response.to_json_dict.return_value = {"title": "bad \ud800"}

    with pytest.raises(FileWriteError):
        save_json([response], tmp_path / "out.json")
