# docchat/observability/posthog_client.py

"""
PostHog product analytics.

- Disabled when POSTHOG_API_KEY is unset
- Uses the per-request id as distinct_id
- Never raises into the request path
"""

import logging
from typing import Optional, Dict, Any

from posthog import Posthog

from docchat.config import POSTHOG_API_KEY, POSTHOG_HOST


logger = logging.getLogger(__name__)


class PostHogClient:

    def __init__(self, api_key: Optional[str] = POSTHOG_API_KEY, host: str = POSTHOG_HOST):

        self._enabled = False
        self._client: Optional[Posthog] = None

        if not api_key:
            logger.info(
                "PostHog disabled: POSTHOG_API_KEY not set"
            )
            return

        try:

            self._client = Posthog(
                project_api_key=api_key,
                host=host,
                timeout=5,
                flush_interval=1,
            )

            self._enabled = True

            logger.info(
                "PostHog client initialized",
                extra={"host": host}
            )

        except Exception as e:

            logger.error(
                "PostHog initialization failed",
                extra={"error": str(e)}
            )

    @property
    def enabled(self) -> bool:
        return self._enabled

    # ==========================================================
    # INTERNAL SAFE TRACK
    # ==========================================================

    def _track(
        self,
        distinct_id: str,
        event: str,
        properties: Optional[Dict[str, Any]] = None,
    ):

        if not self._enabled or not self._client:
            return

        try:

            self._client.capture(
                distinct_id=distinct_id,
                event=event,
                properties=properties or {},
            )

        except Exception as e:

            logger.warning(
                "PostHog tracking failed",
                extra={
                    "event": event,
                    "error": str(e),
                }
            )

    # ==========================================================
    # EVENTS
    # ==========================================================

    def track_document_upload(
        self,
        distinct_id: str,
        file_name: str,
        chunks: int,
        latency: float,
    ):

        self._track(
            distinct_id,
            "document_uploaded",
            {
                "file_name": file_name,
                "chunks": chunks,
                "latency_seconds": latency,
            },
        )

    def track_chat(
        self,
        distinct_id: str,
        message: str,
        sources: int,
        answered: bool,
        latency: float,
    ):

        self._track(
            distinct_id,
            "chat_answered",
            {
                "message_length": len(message),
                "sources": sources,
                "answered": answered,
                "latency_seconds": latency,
            },
        )

    def track_error(
        self,
        distinct_id: str,
        error_type: str,
        error_message: str,
        endpoint: str,
    ):

        self._track(
            distinct_id,
            "system_error",
            {
                "error_type": error_type,
                "error_message": error_message,
                "endpoint": endpoint,
            },
        )

    def shutdown(self):

        if self._client:
            self._client.shutdown()


posthog_client = PostHogClient()
