"""
Resume text acquisition.

Turns a raw document buffer into plain text, dispatching on a declared
document type:

    PLAIN_TEXT -> the decoded buffer as-is
    PDF        -> pdfplumber, page by page, pages joined by a blank line
    WORD       -> python-docx paragraphs, joined by newlines

Decoder libraries are imported at call time. A missing library raises
ParserUnavailable (the caller can fall back to pasted text); any failure inside
a present decoder is wrapped in DecodeError.
"""

import io
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Union

from joblens.contexts.resume.exceptions import (
    DecodeError,
    ParserUnavailable,
    TooShort,
    UnsupportedFormat,
)
from joblens.contexts.resume.logger import _log_debug, log_document_decoded

# Minimum trimmed length for text to count as a resume
MIN_RESUME_LENGTH = 50

PAGE_SEPARATOR = "\n\n"


class DocumentType(str, Enum):
    """Declared type tag of a raw document."""

    PLAIN_TEXT = "plain-text"
    PDF = "pdf"
    WORD = "word-processor-document"


# File extension -> document type
EXTENSION_TYPES = {
    "txt": DocumentType.PLAIN_TEXT,
    "pdf": DocumentType.PDF,
    "docx": DocumentType.WORD,
    "doc": DocumentType.WORD,
}


@dataclass(frozen=True)
class RawDocument:
    """Opaque byte buffer plus its declared type. Lives only for one extraction."""

    data: bytes
    document_type: DocumentType

    @classmethod
    def from_bytes(cls, data: Union[bytes, bytearray], filename: str) -> "RawDocument":
        """Build a RawDocument, deriving the type from the filename extension."""
        return cls(data=bytes(data), document_type=document_type_for(filename))


def document_type_for(filename: str) -> DocumentType:
    """
    Map a filename to its document type.

    Raises:
        UnsupportedFormat: If the extension has no decoder
    """
    name = Path(filename).name
    extension = name.rsplit(".", 1)[-1].lower() if "." in name else ""
    try:
        return EXTENSION_TYPES[extension]
    except KeyError:
        raise UnsupportedFormat(extension) from None


def read_document_file(file_path: Path) -> RawDocument:
    """
    Read a resume file from disk into a RawDocument.

    Raises:
        UnsupportedFormat: If the extension is not .txt, .pdf, .docx or .doc
    """
    file_path = Path(file_path)
    document_type = document_type_for(file_path.name)
    return RawDocument(data=file_path.read_bytes(), document_type=document_type)


def _decode_plain_text(data: bytes) -> str:
    return data.decode("utf-8", errors="replace")


def _decode_pdf(data: bytes) -> str:
    try:
        import pdfplumber
    except ImportError:
        raise ParserUnavailable("PDF", "pdfplumber") from None

    try:
        pages = []
        with pdfplumber.open(io.BytesIO(data)) as pdf:
            for page in pdf.pages:
                pages.append(page.extract_text() or "")
    except Exception as e:
        raise DecodeError("PDF", e) from e

    text = PAGE_SEPARATOR.join(pages)
    log_document_decoded("PDF", len(pages), len(text))
    return text


def _decode_word(data: bytes) -> str:
    try:
        import docx
    except ImportError:
        raise ParserUnavailable("DOCX", "python-docx") from None

    try:
        document = docx.Document(io.BytesIO(data))
        paragraphs = [paragraph.text for paragraph in document.paragraphs]
    except Exception as e:
        raise DecodeError("DOCX", e) from e

    text = "\n".join(paragraphs)
    log_document_decoded("DOCX", 1, len(text))
    return text


DECODERS = {
    DocumentType.PLAIN_TEXT: _decode_plain_text,
    DocumentType.PDF: _decode_pdf,
    DocumentType.WORD: _decode_word,
}


def check_min_length(text: str, minimum: int = MIN_RESUME_LENGTH) -> str:
    """
    Return the trimmed text, or raise TooShort if it is under the minimum.
    """
    trimmed = text.strip()
    if len(trimmed) < minimum:
        raise TooShort(len(trimmed), minimum)
    return trimmed


def extract_text(document: RawDocument, min_length: int = MIN_RESUME_LENGTH) -> str:
    """
    Decode a RawDocument into trimmed plain text.

    Args:
        document: Buffer plus declared type
        min_length: Minimum trimmed length (contract check)

    Returns:
        Trimmed text

    Raises:
        UnsupportedFormat: Unknown document type
        ParserUnavailable: Decoder library missing
        DecodeError: Decoder failed
        TooShort: Decoded text shorter than min_length
    """
    try:
        document_type = DocumentType(document.document_type)
    except ValueError:
        raise UnsupportedFormat(str(document.document_type)) from None

    decoder = DECODERS[document_type]
    _log_debug(f"Decoding {len(document.data)} bytes as {document_type.value}")
    return check_min_length(decoder(document.data), min_length)


def load_resume_text(source: Union[str, Path], min_length: int = MIN_RESUME_LENGTH) -> str:
    """
    Resume entry point: pasted text (str) or a file on disk (Path).

    Both paths go through the same minimum-length contract check.
    """
    if isinstance(source, Path):
        return extract_text(read_document_file(source), min_length)
    if isinstance(source, str):
        return check_min_length(source, min_length)
    raise TypeError("Resume source must be pasted text (str) or a file path (Path)")
