"""Select the analyzable corpus and turn a sample of it into an LLM prompt.

Two caps bound the cost independently: the corpus keeps the first
CORPUS_MAX_PAGES usable pages, the prompt serializes only the first
PROMPT_MAX_PAGES of those with content cut to PROMPT_CONTENT_CHARS.
"""

from dataclasses import replace

from config import CORPUS_CONTENT_CHARS, CORPUS_MAX_PAGES, PROMPT_CONTENT_CHARS, PROMPT_MAX_PAGES
from models import CanonicalPage
from normalizer import is_blank

SYSTEM_MESSAGE = (
    "You are an expert SEO content analyst. "
    "Provide accurate, data-driven analysis in the requested JSON format."
)

PAGE_TEMPLATE = """
Page {index}:
URL: {url}
Title: {title}
Description: {description}
Content: {content}...
---"""

ANALYSIS_PROMPT_TEMPLATE = """Analyze these webpage contents and provide a structured analysis:
{pages}

Provide analysis in this JSON format:
{{
  "topics": {{
    "Core Topic": number_of_pages,
    "Products & Services": number_of_pages,
    "How-To & Education": number_of_pages,
    "News & Updates": number_of_pages,
    "Company & Brand": number_of_pages,
    "Other": number_of_pages
  }},
  "tones": {{
    "casual": number_of_pages,
    "professional": number_of_pages,
    "technical": number_of_pages,
    "passive": number_of_pages
  }},
  "contentTypes": {{
    "article": number_of_pages,
    "listicle": number_of_pages,
    "guide": number_of_pages,
    "news": number_of_pages,
    "other": number_of_pages
  }},
  "insights": ["key insight 1", "key insight 2", "key insight 3"]
}}

Rename the topic categories to the six that best describe these pages.
Base your analysis on the actual content, titles, and descriptions provided.
Return a single JSON object and nothing else."""


def select_sample(pages: list[CanonicalPage], max_pages: int = CORPUS_MAX_PAGES) -> list[CanonicalPage]:
    """
    Return the analyzable corpus: the first `max_pages` pages in input order,
    minus pages with neither a title nor content. Content is capped at
    CORPUS_CONTENT_CHARS.
    """
    sample: list[CanonicalPage] = []
    for page in pages[: max(0, max_pages)]:
        if is_blank(page.title) and is_blank(page.content):
            continue
        if len(page.content) > CORPUS_CONTENT_CHARS:
            page = replace(page, content=page.content[:CORPUS_CONTENT_CHARS])
        sample.append(page)
    return sample


def build_prompt(
    sample: list[CanonicalPage],
    template: str = ANALYSIS_PROMPT_TEMPLATE,
    max_pages: int = PROMPT_MAX_PAGES,
    max_content_chars: int = PROMPT_CONTENT_CHARS,
) -> str:
    """Serialize at most `max_pages` pages into `template`'s {pages} slot."""
    blocks = [
        PAGE_TEMPLATE.format(
            index=index,
            url=page.url,
            title=page.title,
            description=page.meta_description,
            content=page.content[: max(0, max_content_chars)],
        )
        for index, page in enumerate(sample[: max(0, max_pages)], start=1)
    ]
    return template.format(pages="".join(blocks))
