"""Pydantic schemas for API request/response."""

from pydantic import BaseModel, Field, field_validator


class ContentLengthDistribution(BaseModel):
    short: int = 0
    medium: int = 0
    long: int = 0
    veryLong: int = 0


class QuantitativeSummary(BaseModel):
    """Deterministic statistics over the whole crawl."""

    totalPages: int
    avgWordCount: int
    avgTitleLength: int
    avgDescriptionLength: int
    pagesWithMissingTitles: int
    pagesWithMissingDescriptions: int
    statusCodeDistribution: dict[int, int]
    contentLengthDistribution: ContentLengthDistribution


class QualitativeSummary(BaseModel):
    """LLM categorisation. Degraded responses carry message, error or rawResponse."""

    topics: dict[str, int] = Field(default_factory=dict)
    tones: dict[str, int] = Field(default_factory=dict)
    contentTypes: dict[str, int] = Field(default_factory=dict)
    insights: list[str] = Field(default_factory=list)
    message: str | None = None
    error: str | None = None
    rawResponse: str | None = None


class InsightItem(BaseModel):
    type: str
    priority: str
    insight: str
    recommendation: str


class AnalysisPayload(BaseModel):
    sessionId: str
    quantitative: QuantitativeSummary
    qualitative: QualitativeSummary
    insights: list[InsightItem]


class UploadResponse(BaseModel):
    """Response for POST /upload."""

    success: bool
    sessionId: str
    totalPages: int
    analysis: AnalysisPayload


class ChatRequest(BaseModel):
    """Request body for POST /chat."""

    question: str = ""
    sessionId: str = ""

    @field_validator("question", "sessionId", mode="before")
    @classmethod
    def normalize_text_fields(cls, value: object) -> str:
        return str(value or "").strip()


class ChatResponse(BaseModel):
    answer: str
    question: str
    sessionId: str
