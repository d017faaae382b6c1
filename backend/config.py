"""
Runtime configuration, read once from the environment.

Provider keys may be defined in a .env file in the backend root:

OPENAI_API_KEY=your_real_key_here
ANTHROPIC_API_KEY=your_real_key_here

If both are set, OpenAI is used. With neither, qualitative analysis is skipped.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv(dotenv_path=Path(__file__).resolve().parent / ".env")

OPENAI_API_KEY = os.getenv("OPENAI_API_KEY", "").strip()
ANTHROPIC_API_KEY = os.getenv("ANTHROPIC_API_KEY", "").strip()

OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-4").strip() or "gpt-4"
ANTHROPIC_MODEL = os.getenv("ANTHROPIC_MODEL", "claude-3-5-sonnet-latest").strip() or "claude-3-5-sonnet-latest"
AI_TEMPERATURE = float(os.getenv("AI_TEMPERATURE", "0.3"))
AI_MAX_TOKENS = int(os.getenv("AI_MAX_TOKENS", "1500"))
AI_TIMEOUT_SECONDS = float(os.getenv("AI_TIMEOUT_SECONDS", "60"))

CORPUS_MAX_PAGES = int(os.getenv("CORPUS_MAX_PAGES", "50"))
CORPUS_CONTENT_CHARS = int(os.getenv("CORPUS_CONTENT_CHARS", "2000"))
PROMPT_MAX_PAGES = int(os.getenv("PROMPT_MAX_PAGES", "10"))
PROMPT_CONTENT_CHARS = int(os.getenv("PROMPT_CONTENT_CHARS", "500"))

STORAGE_BATCH_SIZE = int(os.getenv("STORAGE_BATCH_SIZE", "100"))
DB_PATH = Path(os.getenv("DB_PATH", "") or Path(__file__).parent / "crawl_insights.db")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").strip().upper() or "INFO"
