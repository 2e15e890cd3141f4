# docchat/models.py
from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional


class _WireModel(BaseModel):
    """Snake-case attributes, camelCase JSON."""

    model_config = ConfigDict(populate_by_name=True)


class UploadResponse(_WireModel):
    """Response after uploading a document."""
    success: bool = True
    file_name: str = Field(..., alias="fileName")
    chunks_added: int = Field(..., alias="chunksAdded")
    message: str


class ChatRequest(BaseModel):
    """A chat message. Blank messages are rejected by the store as empty queries."""
    message: str = Field(..., min_length=1)


class Source(_WireModel):
    file_name: Optional[str] = Field(None, alias="fileName")
    chunk_index: Optional[int] = Field(None, alias="chunkIndex")


class ChatResponse(BaseModel):
    """Answer plus the context it was generated from."""
    response: str
    context: str
    sources: List[Source]


class HealthResponse(_WireModel):
    """Health check response."""
    status: str
    collection: str
    total_chunks: int = Field(..., alias="totalChunks")
