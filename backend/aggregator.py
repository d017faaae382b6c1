"""Quantitative analysis: corpus-wide statistics over canonical pages."""

import math

from errors import InvalidInputError
from models import CanonicalPage, ContentLengthDistribution, QuantitativeReport
from normalizer import is_blank

SHORT_MAX_WORDS = 300
MEDIUM_MAX_WORDS = 1000
LONG_MAX_WORDS = 2500


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives."""
    return int(math.floor(value + 0.5))


def length_bucket(word_count: int) -> str:
    if word_count < SHORT_MAX_WORDS:
        return "short"
    if word_count < MEDIUM_MAX_WORDS:
        return "medium"
    if word_count < LONG_MAX_WORDS:
        return "long"
    return "veryLong"


def aggregate(pages: list[CanonicalPage]) -> QuantitativeReport:
    """
    Single pass over `pages` producing the QuantitativeReport.

    Title and description averages only count pages where the field is not
    blank. Raises InvalidInputError on an empty sequence.
    """
    if not pages:
        raise InvalidInputError("Cannot aggregate an empty page set.")

    distribution: ContentLengthDistribution = {"short": 0, "medium": 0, "long": 0, "veryLong": 0}
    status_codes: dict[int, int] = {}
    missing_titles = 0
    missing_descriptions = 0
    total_words = 0
    total_title_length = 0
    total_description_length = 0
    valid_titles = 0
    valid_descriptions = 0

    for page in pages:
        total_words += page.word_count
        distribution[length_bucket(page.word_count)] += 1

        if is_blank(page.title):
            missing_titles += 1
        else:
            total_title_length += len(page.title)
            valid_titles += 1

        if is_blank(page.meta_description):
            missing_descriptions += 1
        else:
            total_description_length += len(page.meta_description)
            valid_descriptions += 1

        status_codes[page.status_code] = status_codes.get(page.status_code, 0) + 1

    total_pages = len(pages)
    return {
        "totalPages": total_pages,
        "avgWordCount": round_half_up(total_words / total_pages),
        "avgTitleLength": round_half_up(total_title_length / valid_titles) if valid_titles else 0,
        "avgDescriptionLength": (
            round_half_up(total_description_length / valid_descriptions) if valid_descriptions else 0
        ),
        "pagesWithMissingTitles": missing_titles,
        "pagesWithMissingDescriptions": missing_descriptions,
        "statusCodeDistribution": status_codes,
        "contentLengthDistribution": distribution,
    }
