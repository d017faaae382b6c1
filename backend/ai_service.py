"""Qualitative analysis of crawl content through a text-completion provider.

The analyzer only sees a `completion_fn(prompt) -> text`. Which provider backs
it is decided once at startup by resolve_completion_fn().
"""

import json
import logging

import requests
from anthropic import Anthropic, APIError

from config import (
    AI_MAX_TOKENS,
    AI_TEMPERATURE,
    AI_TIMEOUT_SECONDS,
    ANTHROPIC_API_KEY,
    ANTHROPIC_MODEL,
    OPENAI_API_KEY,
    OPENAI_MODEL,
)
from errors import ProviderError
from models import CompletionFn, QualitativeReport
from sampler import SYSTEM_MESSAGE

logger = logging.getLogger(__name__)

OPENAI_CHAT_URL = "https://api.openai.com/v1/chat/completions"

NO_PROVIDER_MESSAGE = "AI analysis requires API key configuration"
PARSE_FAILED_INSIGHT = "AI analysis parsing failed"


def openai_completion(
    api_key: str,
    model: str = OPENAI_MODEL,
    temperature: float = AI_TEMPERATURE,
    max_tokens: int = AI_MAX_TOKENS,
    timeout: float = AI_TIMEOUT_SECONDS,
) -> CompletionFn:
    """Chat-completions binding: system + user messages, text at choices[0].message.content."""

    def complete(prompt: str) -> str:
        try:
            response = requests.post(
                OPENAI_CHAT_URL,
                headers={
                    "Authorization": f"Bearer {api_key}",
                    "Content-Type": "application/json",
                },
                json={
                    "model": model,
                    "messages": [
                        {"role": "system", "content": SYSTEM_MESSAGE},
                        {"role": "user", "content": prompt},
                    ],
                    "temperature": temperature,
                    "max_tokens": max_tokens,
                },
                timeout=timeout,
            )
        except requests.RequestException as e:
            raise ProviderError(f"OpenAI request failed: {e}") from e

        if not response.ok:
            raise ProviderError(f"OpenAI API error: {response.status_code} {response.reason}")

        try:
            return str(response.json()["choices"][0]["message"]["content"] or "")
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise ProviderError("OpenAI response had no message content") from e

    return complete


def _extract_response_text(response: object) -> str:
    content = ""
    for block in getattr(response, "content", []) or []:
        text = getattr(block, "text", None)
        if text:
            content += text
    return content.strip()


def anthropic_completion(
    api_key: str,
    model: str = ANTHROPIC_MODEL,
    temperature: float = AI_TEMPERATURE,
    max_tokens: int = AI_MAX_TOKENS,
    timeout: float = AI_TIMEOUT_SECONDS,
) -> CompletionFn:
    """Messages binding: one user message, text joined from the content blocks."""
    client = Anthropic(api_key=api_key, timeout=timeout, max_retries=0)

    def complete(prompt: str) -> str:
        try:
            response = client.messages.create(
                model=model,
                max_tokens=max_tokens,
                messages=[{"role": "user", "content": prompt}],
                temperature=temperature,
            )
        except APIError as e:
            raise ProviderError(f"Anthropic API error: {e}") from e
        return _extract_response_text(response)

    return complete


def resolve_completion_fn(
    openai_api_key: str = OPENAI_API_KEY,
    anthropic_api_key: str = ANTHROPIC_API_KEY,
) -> CompletionFn | None:
    """Pick the configured provider. OpenAI wins when both keys are set."""
    if openai_api_key:
        logger.info("Qualitative analysis provider: OpenAI (%s)", OPENAI_MODEL)
        return openai_completion(openai_api_key)
    if anthropic_api_key:
        logger.info("Qualitative analysis provider: Anthropic (%s)", ANTHROPIC_MODEL)
        return anthropic_completion(anthropic_api_key)
    logger.info("No AI API keys configured, qualitative analysis disabled")
    return None


def _empty_report(**extra: object) -> QualitativeReport:
    report: QualitativeReport = {"topics": {}, "tones": {}, "contentTypes": {}}
    report.update(extra)  # type: ignore[typeddict-item]
    return report


def extract_json_object(text: str) -> str | None:
    """Return the first balanced {...} substring of `text`, ignoring braces inside strings."""
    start = text.find("{")
    while start != -1:
        depth = 0
        in_string = False
        escaped = False
        for i in range(start, len(text)):
            ch = text[i]
            if in_string:
                if escaped:
                    escaped = False
                elif ch == "\\":
                    escaped = True
                elif ch == '"':
                    in_string = False
                continue
            if ch == '"':
                in_string = True
            elif ch == "{":
                depth += 1
            elif ch == "}":
                depth -= 1
                if depth == 0:
                    return text[start : i + 1]
        # Unbalanced from here on; no later "{" can close either.
        return None
    return None


def _count_map(value: object) -> dict[str, int]:
    if not isinstance(value, dict):
        return {}
    out: dict[str, int] = {}
    for label, count in value.items():
        if isinstance(count, bool):
            continue
        try:
            number = int(count)
        except (TypeError, ValueError, OverflowError):
            # "1e999" and "Infinity" decode to inf, NaN to nan.
            continue
        if number >= 0:
            out[str(label)] = number
    return out


def _str_list(value: object) -> list[str]:
    if not isinstance(value, list):
        return []
    return [str(x).strip() for x in value if x is not None and str(x).strip()]


def parse_analysis(raw_text: str) -> QualitativeReport:
    """Parse the provider's reply. Unparsable text gives a degraded report keeping the raw reply."""
    candidate = extract_json_object(raw_text or "")
    try:
        parsed = json.loads(candidate if candidate is not None else raw_text)
        if not isinstance(parsed, dict):
            raise ValueError("top-level JSON value is not an object")
    except (TypeError, ValueError, RecursionError) as e:
        logger.warning("Failed to parse AI response: %s", e)
        return _empty_report(insights=[PARSE_FAILED_INSIGHT], rawResponse=raw_text or "")

    return {
        "topics": _count_map(parsed.get("topics")),
        "tones": _count_map(parsed.get("tones")),
        "contentTypes": _count_map(parsed.get("contentTypes")),
        "insights": _str_list(parsed.get("insights")),
    }


def analyze_content(prompt: str, completion_fn: CompletionFn | None) -> QualitativeReport:
    """
    Run the prompt through `completion_fn` and parse the categorical counts.
    Never raises: a missing provider or a failed call yields a degraded report.
    """
    if completion_fn is None:
        logger.info("No completion provider configured, skipping qualitative analysis")
        return _empty_report(message=NO_PROVIDER_MESSAGE)

    try:
        raw_text = completion_fn(prompt)
    except ProviderError as e:
        logger.error("AI analysis error: %s", e)
        return _empty_report(error=f"AI analysis failed: {e}")
    except Exception as e:
        logger.exception("Unexpected AI provider failure")
        return _empty_report(error=f"AI analysis failed: {e}")

    logger.debug("Raw AI response: %s", raw_text)
    return parse_analysis(raw_text)
