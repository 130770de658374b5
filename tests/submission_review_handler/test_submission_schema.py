import pytest

from submission_review_handler.submission_schema import (
    format_submission_id,
    normalize_row,
    parse_submission_number,
    parse_submission_row,
    parse_submission_rows,
)


def test_format_submission_id_pads_to_five_digits():
    assert format_submission_id(5) == "SUB00005"
    assert format_submission_id(123456) == "SUB123456"


def test_format_submission_id_rejects_zero():
    with pytest.raises(ValueError):
        format_submission_id(0)


@pytest.mark.parametrize(
    "name,expected",
    [
        ("SUB00005", 5),
        ("SUB000123", 123),
        ("SUB5", 5),
        (" SUB00042 ", 42),
        ("SUB", None),
        ("sub00005", None),
        ("SUB00005 copy", None),
        ("Review Tracker", None),
    ],
)
def test_parse_submission_number(name, expected):
    assert parse_submission_number(name) == expected


def test_normalize_row_keeps_booleans_only_when_asked():
    assert normalize_row([" a ", None, True]) == ["a", "", "True"]
    assert normalize_row([" a ", None, True], keep_bool=True) == ["a", "", True]


def test_parse_submission_row_is_positional():
    header = ["Timestamp", "Project Title", "Category"]
    sub = parse_submission_row(
        header,
        ["1/1/2026 10:00:00", " Solar Kiln ", "Energy"],
        row_num=6,
        title_column="Project Title",
        group_column="Category",
    )
    assert sub.submission_id == "SUB00005"
    assert sub.title == "Solar Kiln"
    assert sub.group == "Energy"
    assert sub.fields == {
        "Timestamp": "1/1/2026 10:00:00",
        "Project Title": "Solar Kiln",
        "Category": "Energy",
    }


def test_parse_submission_row_pads_short_rows_and_ignores_columns():
    header = ["Project Title", "Notes", "Folder Link"]
    sub = parse_submission_row(
        header, ["Kiln"], row_num=2, ignore_columns=("Folder Link",)
    )
    assert sub.fields == {"Project Title": "Kiln", "Notes": ""}


def test_parse_submission_rows_blank_rows_keep_their_position():
    values = [
        ["Project Title"],
        ["First"],
        ["", ""],
        ["Third"],
    ]
    subs = parse_submission_rows(values, title_column="Project Title")
    assert [(s.submission_id, s.title, s.row_num) for s in subs] == [
        ("SUB00001", "First", 2),
        ("SUB00003", "Third", 4),
    ]


def test_parse_submission_rows_missing_title_column_raises():
    with pytest.raises(ValueError):
        parse_submission_rows([["Name"], ["x"]], title_column="Project Title")


def test_parse_submission_rows_empty_sheet():
    assert parse_submission_rows([]) == []
