"""Exceptions raised while turning a resume document into text."""

from typing import Optional


class DocumentError(Exception):
    """
    Base class for resume document failures.

    The message is always user-facing: what happened plus what to do next.
    These errors are never retried automatically - the input has to change.
    """

    recoverable: bool = False


class UnsupportedFormat(DocumentError):
    """Raised when the file extension or document type has no decoder."""

    def __init__(self, extension: str):
        self.extension = extension
        label = f".{extension}" if extension else "(no extension)"
        super().__init__(f"Unsupported file type: {label}. Use PDF, DOCX, or TXT.")


class ParserUnavailable(DocumentError):
    """
    Raised when the decoder library for a document type cannot be loaded.

    Recoverable: the caller should offer to accept pasted text instead.
    """

    recoverable = True

    def __init__(self, document_label: str, package: str):
        self.document_label = document_label
        self.package = package
        super().__init__(
            f"{document_label} parser not available (install '{package}'). "
            "Please paste your resume text instead."
        )


class DecodeError(DocumentError):
    """
    Raised when the decoder is present but fails on this document.

    Attributes:
        document_label: "PDF" or "DOCX"
        original_error: The underlying decoder exception
    """

    def __init__(self, document_label: str, original_error: Optional[Exception] = None):
        self.document_label = document_label
        self.original_error = original_error
        detail = f": {original_error}" if original_error else ""
        super().__init__(
            f"{document_label} parsing failed{detail}. "
            "Try re-exporting the file or paste the text instead."
        )


class TooShort(DocumentError):
    """Raised when the decoded text is below the minimum resume length."""

    def __init__(self, length: int, minimum: int):
        self.length = length
        self.minimum = minimum
        super().__init__(
            f"Resume text is too short ({length} characters, need at least {minimum}). "
            "Please upload a valid resume."
        )
