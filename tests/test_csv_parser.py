"""Tests for the quote-aware CSV parser."""

from __future__ import annotations

from ev_core.data import parse_csv, parse_csv_line


def test_parse_csv_keeps_quoted_commas_as_content() -> None:
    """A comma inside double quotes is literal field content."""

    df = parse_csv('name,notes\nA,"x, y"\nB,plain\nC,"z"\n')

    assert len(df) == 3
    assert list(df.columns) == ["name", "notes"]
    assert df["notes"].tolist() == ["x, y", "plain", "z"]


def test_parse_csv_header_only_returns_empty_frame() -> None:
    """A header without data rows yields no records instead of raising."""

    assert parse_csv("Make,Model").empty
    assert parse_csv("Make,Model\n\n   \n").empty
    assert parse_csv("").empty


def test_parse_csv_skips_blank_lines_and_trims_values() -> None:
    """Blank lines are ignored and cells are trimmed."""

    df = parse_csv(" Make , 'Model' \n\n  TESLA ,  MODEL S  \r\n\nNISSAN,LEAF\n")

    assert list(df.columns) == ["Make", "Model"]
    assert df.to_dict(orient="records") == [
        {"Make": "TESLA", "Model": "MODEL S"},
        {"Make": "NISSAN", "Model": "LEAF"},
    ]


def test_parse_csv_tolerates_slightly_ragged_rows() -> None:
    """Rows missing up to two trailing fields are padded; shorter rows are dropped."""

    df = parse_csv("a,b,c,d,e\n1,2,3,4,5\n1,2,3\n1,2\n")

    assert len(df) == 2
    assert df.iloc[1].tolist() == ["1", "2", "3", "", ""]


def test_parse_csv_line_drops_embedded_quotes() -> None:
    """Quote characters toggle quoting and are never kept."""

    assert parse_csv_line('foo"bar,1') == ["foobar,1"]
    assert parse_csv_line('foo"b"ar,1') == ["foobar", "1"]
    assert parse_csv_line('"say ""hi""",2') == ["say hi", "2"]
    assert parse_csv_line("a,,b,") == ["a", "", "b", ""]


def test_parse_csv_cells_are_strings(sample_records) -> None:
    """Parsed values stay untyped strings."""

    row = sample_records.iloc[0].to_dict()
    assert row["Model Year"] == "2020"
    assert row["Base MSRP"] == "0"
    assert sample_records.loc[1, "City"] == "Bellevue, East"
