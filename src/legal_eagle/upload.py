"""
Document Upload Utilities
Handles text extraction from uploaded files and default document naming.
"""

from __future__ import annotations

import io
import logging
from pathlib import PurePath
from typing import BinaryIO

from .errors import ValidationError

logger = logging.getLogger(__name__)

TEXT_SUFFIXES = (".txt", ".md", ".text")
SUPPORTED_SUFFIXES = (*TEXT_SUFFIXES, ".pdf", ".docx")


def default_document_name(filename: str) -> str:
    """Filename without directories and without its last extension.

    A dot file such as ``.env`` has no stem to keep, so it is returned whole
    rather than as an empty name.
    """
    name = PurePath(filename).name
    stem, dot, _ = name.rpartition(".")
    return stem if dot and stem else name


def name_for_upload(current_name: str | None, filename: str) -> str:
    """Keep a name the user already typed; otherwise derive one from the file."""
    if current_name and current_name.strip():
        return current_name
    return default_document_name(filename)


def decode_text(content: bytes) -> str:
    """Decode plain text, trying utf-8, then latin-1, then cp1252."""
    for encoding in ["utf-8", "latin-1", "cp1252"]:
        try:
            return content.decode(encoding)
        except UnicodeDecodeError:
            continue
    return ""


def extract_text_from_pdf(file: BinaryIO) -> str:
    """Extract text from a PDF file."""
    import pdfplumber

    text_parts = []
    with pdfplumber.open(file) as pdf:
        for page in pdf.pages:
            page_text = page.extract_text()
            if page_text:
                text_parts.append(page_text)

    return "\n\n".join(text_parts)


def extract_text_from_docx(file: BinaryIO) -> str:
    """Extract text from a Word document, including table cells."""
    from docx import Document

    doc = Document(file)
    text_parts = [p.text for p in doc.paragraphs if p.text.strip()]

    for table in doc.tables:
        for row in table.rows:
            row_text = " | ".join(cell.text.strip() for cell in row.cells if cell.text.strip())
            if row_text:
                text_parts.append(row_text)

    return "\n\n".join(text_parts)


def extract_text(filename: str, content: bytes) -> str:
    """
    Extract text from an uploaded file based on its extension.

    Args:
        filename: Original file name (used to pick the extractor)
        content: Raw file bytes

    Returns:
        Extracted text

    Raises:
        ValidationError: If the type is unsupported or nothing could be read
    """
    suffix = PurePath(filename.lower()).suffix

    try:
        if suffix == ".pdf":
            text = extract_text_from_pdf(io.BytesIO(content))
        elif suffix == ".docx":
            text = extract_text_from_docx(io.BytesIO(content))
        elif suffix in TEXT_SUFFIXES or not suffix:
            text = decode_text(content)
        else:
            raise ValidationError(f"Unsupported file type: {suffix}")
    except ValidationError:
        raise
    except Exception as exc:
        logger.error("Text extraction from %s failed: %s", filename, exc)
        raise ValidationError(f"Could not read {filename}. Please try a different file.") from exc

    if not text.strip():
        raise ValidationError(f"No text found in {filename}.")
    return text
