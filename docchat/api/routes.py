from fastapi import APIRouter, Depends, File, Request, UploadFile
from starlette.concurrency import run_in_threadpool
import logging
import time
from typing import Optional

from docchat.config import MAX_FILE_SIZE_MB
from docchat.errors import FileTooLargeError, InvalidRequestError
from docchat.llm.client import AnswerGenerator
from docchat.memory.store import ChunkStore
from docchat.models import (
    ChatRequest,
    ChatResponse,
    HealthResponse,
    UploadResponse,
)
from docchat.observability.metrics import metrics_tracker
from docchat.observability.posthog_client import posthog_client
from docchat.workflow.document_chat import answer_chat
from docchat.workflow.document_ingest import ingest_document


# ============================================================
# LOGGER
# ============================================================

logger = logging.getLogger(__name__)

router = APIRouter()


# Summary shown in the "error" field when a route fails server-side
ERROR_SUMMARIES = {
    "/upload": "Failed to process document",
    "/chat": "Failed to process message",
}


# ============================================================
# DEPENDENCIES
# ============================================================

def get_chunk_store(request: Request) -> ChunkStore:

    store = getattr(request.app.state, "chunk_store", None)

    if store is None:
        raise RuntimeError("Chunk store not initialized")

    return store


def get_answer_generator(request: Request) -> AnswerGenerator:

    generator = getattr(request.app.state, "answer_generator", None)

    if generator is None:
        raise RuntimeError("Answer generator not initialized")

    return generator


def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", "unknown")


# ============================================================
# HELPERS
# ============================================================

def validate_file_size(size_bytes: int):

    size_mb = size_bytes / (1024 * 1024)

    if size_mb > MAX_FILE_SIZE_MB:
        raise FileTooLargeError(
            f"File too large: {size_mb:.2f}MB (limit {MAX_FILE_SIZE_MB}MB)",
        )


# ============================================================
# HEALTH
# ============================================================

@router.get("/health", response_model=HealthResponse)
def health_check(store: ChunkStore = Depends(get_chunk_store)):

    return HealthResponse(
        status="healthy",
        collection=store.collection,
        total_chunks=store.count(),
    )


# ============================================================
# UPLOAD DOCUMENT
# ============================================================

@router.post("/upload", response_model=UploadResponse)
async def upload_document(
    request: Request,
    file: Optional[UploadFile] = File(None),
    store: ChunkStore = Depends(get_chunk_store),
):

    if file is None or not file.filename:
        raise InvalidRequestError("No file provided")

    start_time = time.time()

    # spooled size is known before the body is read into memory
    if file.size is not None:
        validate_file_size(file.size)

    file_bytes = await file.read()

    validate_file_size(len(file_bytes))

    result = await run_in_threadpool(
        ingest_document,
        file.filename,
        file_bytes,
        store,
    )

    posthog_client.track_document_upload(
        distinct_id=_request_id(request),
        file_name=file.filename,
        chunks=result["chunks_added"],
        latency=time.time() - start_time,
    )

    return UploadResponse(
        success=True,
        file_name=file.filename,
        chunks_added=result["chunks_added"],
        message=f'Document "{file.filename}" uploaded and processed successfully',
    )


# ============================================================
# CHAT
# ============================================================

@router.post("/chat", response_model=ChatResponse)
def chat(
    payload: ChatRequest,
    request: Request,
    store: ChunkStore = Depends(get_chunk_store),
    generator: AnswerGenerator = Depends(get_answer_generator),
):

    start_time = time.time()

    result = answer_chat(
        message=payload.message,
        store=store,
        generator=generator,
    )

    posthog_client.track_chat(
        distinct_id=_request_id(request),
        message=payload.message,
        sources=len(result["sources"]),
        answered=bool(result["context"]),
        latency=time.time() - start_time,
    )

    return ChatResponse(**result)


# ============================================================
# METRICS ENDPOINT
# ============================================================

@router.get("/metrics")
def get_metrics():

    return metrics_tracker.get_metrics()
