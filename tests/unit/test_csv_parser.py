from __future__ import annotations

import pytest

from leadshub.core.csv_parser import FormatError, build_header_map, parse_leads_csv, read_leads_csv, split_csv_line

HEADER = (
    "First Name,Last Name,Designation,Profile Link,Email,Company Name,"
    "Company Link,Job Title,Job Link,City or Location"
)


def test_header_map_matches_columns_by_substring() -> None:
    mapping = build_header_map(["Email Address", " FIRST NAME ", "Company Name (legal)", "City"])
    assert mapping == {"email": 0, "first_name": 1, "company_name": 2, "location": 3}


def test_header_map_keeps_first_matching_column() -> None:
    mapping = build_header_map(["Email", "Backup Email"])
    assert mapping["email"] == 0


def test_split_csv_line_honours_quotes_and_trims() -> None:
    assert split_csv_line('Alice , "Acme, Inc" ,"say ""hi"""') == ["Alice", "Acme, Inc", 'say "hi"']


def test_parse_maps_rows_and_line_numbers() -> None:
    text = (
        f"{HEADER}\n"
        "Alice,Smith,CTO,,alice@x.com,Acme,,,,NYC\n"
        "\n"
        ",,,,,,,,,\n"
        'Bob,,"Head, Sales",,bob@y.com,"Beta, LLC",,,,\n'
    )
    rows = parse_leads_csv(text)

    assert [row.first_name for row in rows] == ["Alice", "Bob"]
    assert rows[0].line_number == 2
    assert rows[0].location == "NYC"
    assert rows[1].line_number == 5
    assert rows[1].designation == "Head, Sales"
    assert rows[1].company_name == "Beta, LLC"


def test_parse_fills_missing_columns_with_empty_strings() -> None:
    rows = parse_leads_csv("Email,First Name\nalice@x.com\n")
    assert len(rows) == 1
    assert rows[0].email == "alice@x.com"
    assert rows[0].first_name == ""
    assert rows[0].company_name == ""


def test_parse_strips_bom_and_carriage_returns() -> None:
    rows = parse_leads_csv("\ufeffFirst Name,Email\r\nAlice,alice@x.com\r\n")
    assert rows[0].first_name == "Alice"
    assert rows[0].email == "alice@x.com"


@pytest.mark.parametrize("text", ["", "\n\n", f"{HEADER}\n", f"{HEADER}\n   \n"])
def test_parse_rejects_sources_without_data_rows(text: str) -> None:
    with pytest.raises(FormatError):
        parse_leads_csv(text)


def test_read_leads_csv_from_disk(tmp_path) -> None:
    source = tmp_path / "leads.csv"
    source.write_text(f"{HEADER}\nAlice,Smith,CTO,,alice@x.com,Acme,,,,NYC\n", encoding="utf-8-sig")
    rows = read_leads_csv(source)
    assert rows[0].email == "alice@x.com"
