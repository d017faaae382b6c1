"""Map crawl-export rows onto CanonicalPage.

Crawlers name the same column differently (Screaming Frog uses "Address",
others "URL"). Each canonical field has an ordered list of candidate keys and
the first present value wins.
"""

import math
import re

from models import CanonicalPage, RawRow

FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    "url": ("address", "url"),
    "title": ("title", "page_title"),
    "meta_description": ("meta_description", "description"),
    "status_code": ("status_code", "status"),
    "word_count": ("word_count",),
    "content": ("content",),
}

DEFAULT_STATUS_CODE = 200

_WHITESPACE_RE = re.compile(r"\s+")


def _is_present(value: object) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return value != ""
    if isinstance(value, float) and math.isnan(value):
        return False
    return True


def _resolve(row: RawRow, field: str) -> object | None:
    for key in FIELD_ALIASES[field]:
        value = row.get(key)
        if _is_present(value):
            return value
    return None


def _text(value: object | None) -> str:
    if value is None:
        return ""
    # Numeric cells come back as floats when the column has blanks.
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _positive_int(value: object | None) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(str(value).strip())
    except (TypeError, ValueError):
        return None
    if math.isnan(number) or math.isinf(number) or number <= 0:
        return None
    return int(number)


def _status_code(row: RawRow) -> int:
    for key in FIELD_ALIASES["status_code"]:
        code = _positive_int(row.get(key))
        if code is not None:
            return code
    return DEFAULT_STATUS_CODE


def extract_word_count(content: object) -> int:
    """Count whitespace-separated tokens in `content`."""
    if not isinstance(content, str) or not content:
        return 0
    return len([word for word in _WHITESPACE_RE.split(content.strip()) if word])


def is_blank(value: str) -> bool:
    return not value or not value.strip()


def normalize_row(row: RawRow) -> CanonicalPage:
    """
    Build a CanonicalPage from one parsed CSV row. Never raises.

    Text fields keep their original whitespace; callers trim only when checking
    for emptiness. Out-of-range status codes are passed through unchanged.
    """
    content = _text(_resolve(row, "content"))
    word_count = _positive_int(_resolve(row, "word_count"))
    if word_count is None:
        word_count = extract_word_count(content)

    return CanonicalPage(
        url=_text(_resolve(row, "url")),
        title=_text(_resolve(row, "title")),
        meta_description=_text(_resolve(row, "meta_description")),
        word_count=word_count,
        status_code=_status_code(row),
        content=content,
    )


def normalize_rows(rows: list[RawRow]) -> list[CanonicalPage]:
    return [normalize_row(row) for row in rows]
