"""Turn quantitative and qualitative results into ranked recommendations.

Rules run in a fixed order and the output keeps that order.
"""

from aggregator import round_half_up
from models import Insight, QualitativeReport, QuantitativeReport

THIN_CONTENT_SHARE = 0.30
DOMINANT_TOPIC_PERCENT = 25


def _thin_content_insight(quantitative: QuantitativeReport) -> Insight | None:
    total = quantitative["totalPages"]
    short = quantitative["contentLengthDistribution"]["short"]
    if total <= 0 or short / total <= THIN_CONTENT_SHARE:
        return None
    return {
        "type": "content_length",
        "priority": "medium",
        "insight": f"{round_half_up(short / total * 100)}% of pages have less than 300 words",
        "recommendation": "Consider expanding thin content pages for better SEO performance",
    }


def _missing_descriptions_insight(quantitative: QuantitativeReport) -> Insight | None:
    missing = quantitative["pagesWithMissingDescriptions"]
    if missing <= 0:
        return None
    return {
        "type": "meta_optimization",
        "priority": "high",
        "insight": f"{missing} pages missing meta descriptions",
        "recommendation": "Add compelling meta descriptions to improve click-through rates",
    }


def _topic_insights(qualitative: QualitativeReport) -> list[Insight]:
    topics = qualitative.get("topics") or {}
    total = sum(topics.values())
    if total <= 0:
        return []

    out: list[Insight] = []
    for topic, count in topics.items():
        percentage = round_half_up(count / total * 100)
        if percentage > DOMINANT_TOPIC_PERCENT:
            out.append(
                {
                    "type": "content_strategy",
                    "priority": "medium",
                    "insight": f"{percentage}% of content focuses on {topic}",
                    "recommendation": f"Strong {topic} content presence - consider expanding related topics",
                }
            )
    return out


def generate_insights(quantitative: QuantitativeReport, qualitative: QualitativeReport) -> list[Insight]:
    insights: list[Insight] = []
    for rule in (_thin_content_insight, _missing_descriptions_insight):
        insight = rule(quantitative)
        if insight is not None:
            insights.append(insight)
    insights.extend(_topic_insights(qualitative))
    return insights
