"""Data models and types used across the backend.

Database table definitions are in database.py.
API response schemas are in schemas.py.
Report dicts use camelCase keys: they are the JSON documents the API returns
and the LLM is asked to produce.
"""

from dataclasses import asdict, dataclass
from typing import Callable, TypedDict

RawRow = dict[str, object]

CompletionFn = Callable[[str], str]


@dataclass(frozen=True)
class CanonicalPage:
    """One crawled page with a stable set of fields."""

    url: str = ""
    title: str = ""
    meta_description: str = ""
    word_count: int = 0
    status_code: int = 200
    content: str = ""

    def as_row(self) -> RawRow:
        """Return the page keyed by its canonical field names."""
        return asdict(self)


class ContentLengthDistribution(TypedDict):
    short: int
    medium: int
    long: int
    veryLong: int


class QuantitativeReport(TypedDict):
    """Deterministic corpus-wide statistics."""

    totalPages: int
    avgWordCount: int
    avgTitleLength: int
    avgDescriptionLength: int
    pagesWithMissingTitles: int
    pagesWithMissingDescriptions: int
    statusCodeDistribution: dict[int, int]
    contentLengthDistribution: ContentLengthDistribution


class QualitativeReport(TypedDict, total=False):
    """LLM-derived categorical counts.

    A degraded report has empty mappings plus one of `message` (no provider),
    `error` (provider failed) or `rawResponse` (unparsable reply).
    """

    topics: dict[str, int]
    tones: dict[str, int]
    contentTypes: dict[str, int]
    insights: list[str]
    message: str
    error: str
    rawResponse: str


class Insight(TypedDict):
    type: str
    priority: str
    insight: str
    recommendation: str


class AnalysisResult(TypedDict):
    sessionId: str
    quantitative: QuantitativeReport
    qualitative: QualitativeReport
    insights: list[Insight]
