"""
Configuration for the Candidate Team Matcher

Values come from the environment (a local .env file is loaded first).
"""

import os
from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


# --- Gemini (embeddings + completions) ---
GEMINI_API_KEY = os.getenv("GEMINI_API_KEY")
EMBEDDING_MODEL = os.getenv("EMBEDDING_MODEL", "models/text-embedding-004")
CHAT_MODEL = os.getenv("CHAT_MODEL", "gemini-1.5-flash")

# --- Vector index (Chroma) ---
CANDIDATE_INDEX = os.getenv("CANDIDATE_INDEX", "candidates")
CHROMA_HOST = os.getenv("CHROMA_HOST")
CHROMA_PORT = int(os.getenv("CHROMA_PORT", "8000"))
CHROMA_SSL = _env_bool("CHROMA_SSL")
CHROMA_TOKEN = os.getenv("CHROMA_TOKEN")
CHROMA_PATH = os.getenv("CHROMA_PATH", "./chroma_db")

# --- Candidate data ---
CANDIDATES_PATH = os.getenv("CANDIDATES_PATH", os.path.join("data", "candidates.json"))

# --- Team selection ---
MATCH_TOP_K = int(os.getenv("MATCH_TOP_K", "20"))
TEAM_SIZE = int(os.getenv("TEAM_SIZE", "5"))

# --- Import pacing ---
IMPORT_BATCH_SIZE = int(os.getenv("IMPORT_BATCH_SIZE", "50"))
UPSERT_BATCH_SIZE = int(os.getenv("UPSERT_BATCH_SIZE", "100"))
IMPORT_ITEM_DELAY = float(os.getenv("IMPORT_ITEM_DELAY", "0.2"))
IMPORT_BATCH_PAUSE = float(os.getenv("IMPORT_BATCH_PAUSE", "2.0"))

# --- Serving ---
API_HOST = os.getenv("API_HOST", "0.0.0.0")
API_PORT = int(os.getenv("API_PORT", "8000"))
API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:8000")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
