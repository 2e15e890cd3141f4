# docchat/memory/loader.py

"""
Text extraction for uploaded documents.

Architecture contract preserved:
loader → chunker → identifiers → store

Supports:
- PDF files (pypdf)
- Word documents (python-docx)
- JSON (pretty-printed when parsable)
- Plain text, Markdown, CSV and any unknown extension (UTF-8)

Every failure is raised as ExtractionError naming the format.
Deciding whether empty output is acceptable is the caller's job.
"""

import io
import json
import logging

from docx import Document as DocxDocument
from pypdf import PdfReader

from docchat.config import MIN_PDF_TEXT_CHARACTERS
from docchat.errors import ExtractionError

logger = logging.getLogger(__name__)


# ============================================================
# EXTENSION
# ============================================================

def file_extension(file_name: str) -> str:

    if "." not in file_name:
        return ""

    return file_name.rsplit(".", 1)[-1].lower()


# ============================================================
# PLAIN TEXT
# ============================================================

def decode_text(data: bytes) -> str:

    # utf-8-sig strips a leading BOM and otherwise behaves like utf-8
    return data.decode("utf-8-sig")


# ============================================================
# JSON
# ============================================================

def load_json_text(data: bytes) -> str:

    raw = decode_text(data)

    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError:
        return raw

    return json.dumps(parsed, indent=2, ensure_ascii=False)


# ============================================================
# PDF
# ============================================================

def load_pdf_text(data: bytes) -> str:

    reader = PdfReader(io.BytesIO(data))

    parts = []

    for page in reader.pages:

        text = page.extract_text()

        if text:
            parts.append(text)

    text = " ".join(" ".join(parts).split())

    if len(text) < MIN_PDF_TEXT_CHARACTERS:
        raise ValueError("PDF contains no extractable text")

    return text


# ============================================================
# DOCX
# ============================================================

def load_docx_text(data: bytes) -> str:

    document = DocxDocument(io.BytesIO(data))

    parts = [p.text for p in document.paragraphs if p.text.strip()]

    for table in document.tables:
        for row in table.rows:
            for cell in row.cells:
                if cell.text.strip():
                    parts.append(cell.text)

    return "\n".join(parts)


# ============================================================
# MAIN ENTRY POINT (ARCHITECTURE CONTRACT)
# ============================================================

_LOADERS = {
    "pdf": load_pdf_text,
    "docx": load_docx_text,
    "json": load_json_text,
}


def extract_text(data: bytes, file_name: str) -> str:

    extension = file_extension(file_name)

    loader = _LOADERS.get(extension, decode_text)

    try:

        text = loader(data)

    except Exception as e:

        label = extension.upper() or "file"

        logger.error(
            "Text extraction failed",
            extra={
                "file_name": file_name,
                "extension": extension,
                "error": str(e),
            },
        )

        raise ExtractionError(
            f"Failed to extract text from {label}: {e}",
            file_type=extension or None,
        ) from e

    logger.info(
        "Text extracted",
        extra={
            "file_name": file_name,
            "extension": extension,
            "characters": len(text),
        },
    )

    return text
