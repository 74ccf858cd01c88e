# backend/config.py

import os
from enum import Enum
from dotenv import load_dotenv

load_dotenv(override=True)


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


DEBUG = _env_flag("DEBUG", "false")

_cors_origins_raw = os.getenv("CORS_ORIGINS")
if _cors_origins_raw:
    CORS_ORIGINS = [origin.strip() for origin in _cors_origins_raw.split(",") if origin.strip()]
else:
    CORS_ORIGINS = ["*"]

# Ensure local dev servers can hit the API even when custom origins are provided
_LOCAL_DEV_ORIGINS = {
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    "http://localhost:3000",
    "http://127.0.0.1:3000",
}
if "*" not in CORS_ORIGINS:
    for origin in _LOCAL_DEV_ORIGINS:
        if origin not in CORS_ORIGINS:
            CORS_ORIGINS.append(origin)

# Object store + metadata table (Supabase Storage / PostgREST)
SUPABASE_URL = os.getenv("SUPABASE_URL") or os.getenv("NEXT_PUBLIC_SUPABASE_URL")
SUPABASE_SERVICE_ROLE_KEY = os.getenv("SUPABASE_SERVICE_ROLE_KEY")
SUPABASE_ANON_KEY = os.getenv("SUPABASE_ANON_KEY") or os.getenv("NEXT_PUBLIC_SUPABASE_ANON_KEY")
STORAGE_BUCKET = os.getenv("STORAGE_BUCKET", "Documents")
DOCUMENTS_TABLE = os.getenv("DOCUMENTS_TABLE", "documents")
STORAGE_TIMEOUT_SECONDS = float(os.getenv("STORAGE_TIMEOUT_SECONDS", "30"))

# Listing is capped at 100 objects; the duplicate-name check scans wider.
LIST_LIMIT = 100
DUPLICATE_SCAN_LIMIT = 1000

REJECT_DUPLICATE_UPLOADS = _env_flag("REJECT_DUPLICATE_UPLOADS", "true")
# Off by default: deleting an object leaves its metadata row (and summary history) intact.
DELETE_CASCADE_METADATA = _env_flag("DELETE_CASCADE_METADATA", "false")


class LLMBackend(str, Enum):
    GEMINI = "gemini"
    OPENAI = "openai"
    DEEPSEEK = "deepseek"


GEMINI_API_KEY = os.getenv("GEMINI_API_KEY")
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")
OPENAI_BASE_URL = os.getenv("OPENAI_BASE_URL")
DEEPSEEK_BASE_URL = "https://api.deepseek.com/v1"

_llm_backend_raw = (os.getenv("LLM_BACKEND") or "").strip().lower()
LLM_BACKEND = LLMBackend(_llm_backend_raw) if _llm_backend_raw else None

GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-1.5-flash")
OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-4o-mini")
DEEPSEEK_MODEL = os.getenv("DEEPSEEK_MODEL", "deepseek-chat")
LLM_TIMEOUT_SECONDS = float(os.getenv("LLM_TIMEOUT_SECONDS", "120"))

# Summarization budget (hard cost control, not quality-aware)
SUMMARY_MAX_INPUT_CHARS = int(os.getenv("SUMMARY_MAX_INPUT_CHARS", "2500"))
SUMMARY_MAX_OUTPUT_TOKENS = int(os.getenv("SUMMARY_MAX_OUTPUT_TOKENS", "1000"))
SUMMARY_HISTORY_LIMIT = int(os.getenv("SUMMARY_HISTORY_LIMIT", "10"))

DEFAULT_LANGUAGE = "en"
