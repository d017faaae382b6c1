"""Run one uploaded crawl through normalize -> aggregate -> sample -> analyze -> insights."""

import logging
import random
import string
import time
from typing import Callable

import database
from aggregator import aggregate
from ai_service import analyze_content
from errors import InputError, InternalError
from insights import generate_insights
from models import AnalysisResult, CanonicalPage, CompletionFn, RawRow
from normalizer import normalize_rows
from sampler import build_prompt, select_sample

logger = logging.getLogger(__name__)

RowStore = Callable[[str, list[CanonicalPage]], bool]
AnalysisStore = Callable[[str, AnalysisResult], None]

_SUFFIX_ALPHABET = string.ascii_lowercase + string.digits


def generate_session_id() -> str:
    suffix = "".join(random.choices(_SUFFIX_ALPHABET, k=9))
    return f"crawl_{int(time.time() * 1000)}_{suffix}"


def _store_rows(store_rows: RowStore | None, session_id: str, pages: list[CanonicalPage]) -> None:
    if store_rows is None:
        return
    try:
        if not store_rows(session_id, pages):
            logger.warning("Some crawl rows were not stored for session %s", session_id)
    except Exception:
        logger.exception("Database storage error for session %s, continuing without storage", session_id)


def _store_analysis(store_analysis: AnalysisStore | None, session_id: str, result: AnalysisResult) -> None:
    if store_analysis is None:
        return
    try:
        store_analysis(session_id, result)
    except Exception:
        logger.exception("Could not store analysis for session %s", session_id)


def run_pipeline(
    raw_rows: list[RawRow],
    completion_fn: CompletionFn | None = None,
    store_rows: RowStore | None = database.append_rows,
    store_analysis: AnalysisStore | None = database.save_analysis,
) -> AnalysisResult:
    """
    Analyze one crawl export. Storage is best-effort and never changes the result.

    Raises InputError when there are no rows and InternalError for anything
    unexpected; provider and storage failures only degrade the output.
    """
    session_id = generate_session_id()
    if not raw_rows:
        raise InputError("The uploaded crawl contains no pages.")

    try:
        pages = normalize_rows(raw_rows)
        quantitative = aggregate(pages)
        logger.info("Session %s: aggregated %d pages", session_id, quantitative["totalPages"])

        _store_rows(store_rows, session_id, pages)

        sample = select_sample(pages)
        qualitative = analyze_content(build_prompt(sample), completion_fn)

        result: AnalysisResult = {
            "sessionId": session_id,
            "quantitative": quantitative,
            "qualitative": qualitative,
            "insights": generate_insights(quantitative, qualitative),
        }
    except InputError:
        raise
    except Exception as e:
        logger.exception("Pipeline failed for session %s", session_id)
        raise InternalError("Failed to process crawl data") from e

    _store_analysis(store_analysis, session_id, result)
    return result
