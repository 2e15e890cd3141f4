# docchat/memory/identifiers.py

import re
from dataclasses import dataclass
from typing import Dict, List

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9]")


def make_chunk_id(file_name: str, chunk_index: int) -> str:
    """
    Stable id for one chunk of one file.

    Every character outside [A-Za-z0-9] becomes "_", so
    "report (final).pdf", 3 → "report__final__pdf_chunk_3".
    Different names can sanitize to the same id; those files share
    (and overwrite) each other's chunk slots.
    """
    return f"{_UNSAFE_CHARS.sub('_', file_name)}_chunk_{chunk_index}"


@dataclass(frozen=True)
class ChunkRecord:
    """One chunk ready for insertion into the store."""

    chunk_id: str
    text: str
    file_name: str
    chunk_index: int
    total_chunks: int

    def metadata(self) -> Dict:
        return {
            "fileName": self.file_name,
            "chunkIndex": self.chunk_index,
            "totalChunks": self.total_chunks,
        }


def build_chunk_records(file_name: str, chunks: List[str]) -> List[ChunkRecord]:

    total = len(chunks)

    return [
        ChunkRecord(
            chunk_id=make_chunk_id(file_name, index),
            text=text,
            file_name=file_name,
            chunk_index=index,
            total_chunks=total,
        )
        for index, text in enumerate(chunks)
    ]
