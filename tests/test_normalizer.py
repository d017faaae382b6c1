from models import CanonicalPage
from normalizer import extract_word_count, normalize_row, normalize_rows


def test_all_aliases_absent_gives_defaults():
    page = normalize_row({})
    assert page == CanonicalPage(url="", title="", meta_description="", word_count=0, status_code=200, content="")


def test_first_present_alias_wins():
    page = normalize_row(
        {
            "address": "https://example.com/a",
            "url": "https://example.com/b",
            "title": "",
            "page_title": "Fallback Title",
            "meta_description": None,
            "description": "Fallback description",
            "status": 404,
        }
    )
    assert page.url == "https://example.com/a"
    assert page.title == "Fallback Title"
    assert page.meta_description == "Fallback description"
    assert page.status_code == 404


def test_word_count_derived_from_content():
    page = normalize_row({"content": "a b  c"})
    assert page.word_count == 3


def test_invalid_word_count_falls_back_to_content():
    for bad in (0, -5, "lots", float("nan")):
        page = normalize_row({"word_count": bad, "content": "one two"})
        assert page.word_count == 2


def test_word_count_from_float_cell():
    assert normalize_row({"word_count": 812.0}).word_count == 812


def test_whitespace_title_is_kept_verbatim():
    page = normalize_row({"title": "   "})
    assert page.title == "   "


def test_out_of_range_status_passes_through():
    assert normalize_row({"status_code": 999}).status_code == 999
    assert normalize_row({"status_code": "n/a"}).status_code == 200


def test_normalize_is_idempotent():
    raw = {
        "address": "https://example.com/x",
        "page_title": "Title",
        "description": "Desc",
        "status": 301,
        "content": "some words here",
    }
    once = normalize_row(raw)
    assert normalize_row(once.as_row()) == once

    empty = normalize_row({})
    assert normalize_row(empty.as_row()) == empty


def test_numeric_title_cell_becomes_text():
    assert normalize_row({"title": 2024.0}).title == "2024"


def test_extract_word_count_edge_cases():
    assert extract_word_count(None) == 0
    assert extract_word_count("") == 0
    assert extract_word_count("   \n\t ") == 0
    assert extract_word_count(" lead and trail ") == 3


def test_normalize_rows_keeps_order():
    pages = normalize_rows([{"url": "1"}, {"url": "2"}, {"url": "3"}])
    assert [p.url for p in pages] == ["1", "2", "3"]
