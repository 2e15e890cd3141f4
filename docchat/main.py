# docchat/main.py
from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from starlette.concurrency import run_in_threadpool
import time
import uuid

from docchat.api.routes import router, ERROR_SUMMARIES
from docchat.config import COLLECTION_NAME, LOG_LEVEL
from docchat.errors import DocChatError
from docchat.llm.client import build_answer_generator
from docchat.memory.embedder import build_embedder
from docchat.memory.qdrant_client import QdrantVectorDB
from docchat.memory.store import ChunkStore
from docchat.observability.logger import setup_logging, get_logger
from docchat.observability.metrics import metrics_tracker
from docchat.observability.posthog_client import posthog_client

# Initialize logging FIRST
setup_logging(log_level=LOG_LEVEL)
logger = get_logger(__name__)

VERSION = "1.0.0"

app = FastAPI(
    title="DocChat API",
    description="Upload documents and chat with them through retrieval-augmented generation",
    version=VERSION,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """
    Assigns a request id, logs start and completion with latency and
    records request metrics.
    """

    request_id = str(uuid.uuid4())
    request.state.request_id = request_id

    logger.info(
        "request_started",
        extra={
            "request_id": request_id,
            "method": request.method,
            "path": request.url.path,
            "client_ip": request.client.host if request.client else None
        }
    )

    start_time = time.time()

    try:

        response = await call_next(request)

    except Exception as e:

        await run_in_threadpool(metrics_tracker.record_failure)

        logger.error(
            "request_failed",
            extra={
                "request_id": request_id,
                "method": request.method,
                "path": request.url.path,
                "latency_seconds": round(time.time() - start_time, 3),
                "error": str(e),
                "error_type": type(e).__name__
            },
            exc_info=True
        )

        raise

    latency = time.time() - start_time

    # file writes stay off the event loop
    if response.status_code >= 500:
        await run_in_threadpool(metrics_tracker.record_failure)
    else:
        await run_in_threadpool(metrics_tracker.record_success, latency)

    logger.info(
        "request_completed",
        extra={
            "request_id": request_id,
            "method": request.method,
            "path": request.url.path,
            "status_code": response.status_code,
            "latency_seconds": round(latency, 3)
        }
    )

    return response


app.include_router(router)


# ============================================================
# LIFECYCLE
# ============================================================

@app.on_event("startup")
async def startup_event():

    embedder = build_embedder()

    db = QdrantVectorDB(
        dim=embedder.get_dimension(),
        collection=COLLECTION_NAME,
    )

    app.state.chunk_store = ChunkStore(db, embedder)
    app.state.answer_generator = build_answer_generator()

    logger.info(
        "application_startup",
        extra={
            "version": VERSION,
            "collection": COLLECTION_NAME,
            "llm_provider": app.state.answer_generator.provider,
        },
    )


@app.on_event("shutdown")
async def shutdown_event():

    metrics_tracker.flush()
    posthog_client.shutdown()

    logger.info("application_shutdown")


# ============================================================
# ERROR HANDLING
# ============================================================

@app.exception_handler(DocChatError)
async def docchat_exception_handler(request: Request, exc: DocChatError):

    request_id = getattr(request.state, "request_id", "unknown")

    log = logger.warning if exc.status_code < 500 else logger.error

    log(
        "request_error",
        extra={
            "request_id": request_id,
            "path": request.url.path,
            "status_code": exc.status_code,
            "error": exc.message,
            "error_type": type(exc).__name__,
            "error_details": exc.details,
        },
    )

    posthog_client.track_error(
        distinct_id=request_id,
        error_type=type(exc).__name__,
        error_message=exc.message,
        endpoint=request.url.path,
    )

    if exc.status_code < 500:
        content = {"error": exc.message}
    else:
        content = {
            "error": ERROR_SUMMARIES.get(request.url.path, "Request failed"),
            "details": exc.message,
        }

    return JSONResponse(status_code=exc.status_code, content=content)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):

    if request.url.path != "/chat":
        return await request_validation_exception_handler(request, exc)

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": "Invalid message",
            "details": jsonable_encoder(exc.errors()),
        },
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):

    request_id = getattr(request.state, "request_id", "unknown")

    logger.error(
        "unhandled_exception",
        extra={
            "request_id": request_id,
            "path": request.url.path,
            "error": str(exc),
            "error_type": type(exc).__name__
        },
        exc_info=True
    )

    posthog_client.track_error(
        distinct_id=request_id,
        error_type=type(exc).__name__,
        error_message=str(exc),
        endpoint=request.url.path,
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "An internal error occurred. Please try again.",
            "details": str(exc),
            "request_id": request_id,
        }
    )


@app.get("/")
async def root():

    return {
        "message": "DocChat API",
        "version": VERSION,
        "docs": "/docs",
        "health": "/health",
        "metrics": "/metrics"
    }
