# docchat/config.py
"""
Configuration for the DocChat retrieval-augmented chat service.

This file centralizes all tunable parameters for the RAG pipeline.
Secrets and endpoints come from the environment; everything else is a
plain constant so behavior changes stay reviewable in one place.
"""

import os


# ========== DOCUMENT PROCESSING ==========

# Chunk configuration (characters, not words)
CHUNK_SIZE = 1000  # characters per chunk
CHUNK_OVERLAP = 200  # characters shared between neighbouring chunks

# File upload limits
MAX_FILE_SIZE_MB = 10
SUPPORTED_EXTENSIONS = ["txt", "md", "json", "csv", "pdf", "docx"]
# Anything outside this list is decoded as UTF-8 text.

# PDFs that yield less text than this are treated as image-only scans
MIN_PDF_TEXT_CHARACTERS = 10


# ========== VECTOR STORE ==========

QDRANT_URL = os.getenv("QDRANT_URL", ":memory:")
QDRANT_API_KEY = os.getenv("QDRANT_API_KEY")
QDRANT_TIMEOUT_SECONDS = 60.0

# Single shared collection: every upload joins one retrieval corpus
COLLECTION_NAME = os.getenv("COLLECTION_NAME", "RAGAI_v2")


# ========== EMBEDDING CONFIGURATION ==========

# "gemini" or "openai"; follows LLM_PROVIDER so one API key is enough
EMBEDDING_PROVIDER = os.getenv("EMBEDDING_PROVIDER", os.getenv("LLM_PROVIDER", "gemini")).lower()

OPENAI_EMBEDDING_MODEL = os.getenv("OPENAI_EMBEDDING_MODEL", "text-embedding-3-small")
GEMINI_EMBEDDING_MODEL = os.getenv("GEMINI_EMBEDDING_MODEL", "gemini-embedding-001")

EMBEDDING_DIMENSIONS = {
    "text-embedding-3-small": 1536,
    "text-embedding-3-large": 3072,
    "gemini-embedding-001": 768,  # truncated via output_dimensionality
    "text-embedding-004": 768,
}
EMBED_BATCH_SIZE = 32


# ========== RETRIEVAL CONFIGURATION ==========

TOP_K = 5  # chunks retrieved per chat message
MAX_SOURCES = 3  # sources reported back to the client (subset of TOP_K)

CONTEXT_SEPARATOR = "\n\n---\n\n"


# ========== LLM CONFIGURATION ==========

# "gemini" or "openai"
LLM_PROVIDER = os.getenv("LLM_PROVIDER", "gemini").lower()

GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")
OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-4o-mini")

LLM_TEMPERATURE = 0.2
LLM_MAX_TOKENS = 800


# ========== OBSERVABILITY ==========

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_DIR = "logs"
METRICS_PATH = "storage/metrics.json"
METRICS_LATENCY_WINDOW = 1000  # latencies kept for p95
METRICS_SAVE_INTERVAL_SECONDS = 5.0  # at most one metrics write per interval

POSTHOG_API_KEY = os.getenv("POSTHOG_API_KEY")
POSTHOG_HOST = os.getenv("POSTHOG_HOST", "https://app.posthog.com")


# ========== UI ==========

API_BASE = os.getenv("DOCCHAT_API_BASE", "http://127.0.0.1:8000")


# ========== DESIGN TRADE-OFFS (DOCUMENTED) ==========

"""
TRADE-OFF DECISIONS:

1. CHUNK_SIZE = 1000 chars, CHUNK_OVERLAP = 200:
   - Character windows need no tokenizer and behave the same for every
     extracted format
   - 20% overlap keeps sentences that straddle a boundary retrievable

2. TOP_K = 5, MAX_SOURCES = 3:
   - All five chunks go into the prompt context
   - Only the three best are surfaced as citations to keep the UI readable

3. One global collection:
   - Every uploaded document is searchable from every chat
   - Limitation: no per-user isolation

4. Chunk ids derived from the file name:
   - Re-uploading the same file overwrites chunks index by index
   - Limitation: a shorter re-upload leaves its old tail chunks behind

5. Embeddings follow the LLM provider by default:
   - The default Gemini deployment needs only GEMINI_API_KEY
   - Switching EMBEDDING_PROVIDER changes the vector dimension, so an
     existing collection must be rebuilt under a new COLLECTION_NAME
"""
