# docchat/workflow/document_chat.py
from typing import Dict, List

from docchat.config import CONTEXT_SEPARATOR, MAX_SOURCES, TOP_K
from docchat.memory.store import ChunkStore, RetrievedChunk
from docchat.prompts.system_prompts import NO_DOCUMENTS_MESSAGE


def build_context(chunks: List[RetrievedChunk]) -> str:
    """Join retrieved chunk texts in rank order."""
    return CONTEXT_SEPARATOR.join(chunk.text for chunk in chunks)


def collect_sources(chunks: List[RetrievedChunk], limit: int = MAX_SOURCES) -> List[Dict]:

    return [
        {"fileName": chunk.file_name, "chunkIndex": chunk.chunk_index}
        for chunk in chunks[:limit]
    ]


def answer_chat(
    message: str,
    store: ChunkStore,
    generator,
    top_k: int = TOP_K,
    max_sources: int = MAX_SOURCES,
) -> Dict:
    """
    Answer a chat message from the shared document collection.

    An empty collection short-circuits to a fixed instruction message
    without calling the generator. Store and generator errors propagate.
    """
    chunks = store.query(message, k=top_k)

    context = build_context(chunks)

    if not context:
        return {
            "response": NO_DOCUMENTS_MESSAGE,
            "context": "",
            "sources": [],
        }

    response = generator.answer(message, context)

    return {
        "response": response,
        "context": context,
        "sources": collect_sources(chunks, max_sources),
    }
