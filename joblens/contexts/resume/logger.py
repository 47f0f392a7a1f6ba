"""
Resume context logger.

Provides logging interface for the resume context with automatic [resume] prefix.
All resume modules should import from this module, not from utils.logger directly.
"""

from pathlib import Path

from loguru import logger

from joblens.utils.logger import setup_logger as _setup_logger

CONTEXT_PREFIX = "[resume]"


def setup_resume_logger(log_dir: Path, source: str = "paste") -> Path:
    """
    Setup logger for the resume context.

    Args:
        log_dir: Directory for this session
        source: Where the resume came from (file path or "paste"), for provenance

    Returns:
        Path to log file
    """
    return _setup_logger(
        context_name="resume",
        log_dir=log_dir,
        extra_provenance={"Resume source": source},
    )


def _log_info(message: str) -> None:
    """Log info message with [resume] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [resume] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [resume] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [resume] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [resume] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


def log_document_decoded(document_label: str, pages: int, characters: int) -> None:
    """Log a successful document decode."""
    unit = "page" if pages == 1 else "pages"
    _log_debug(f"Decoded {document_label}: {pages} {unit}, {characters} characters")


def log_resume_parsed(parsed) -> None:
    """
    Log a summary of extracted resume fields.

    Args:
        parsed: ParsedResume
    """
    _log_info(
        f"Parsed resume for {parsed.name or '(no name)'}: "
        f"{len(parsed.skills)} skills, {len(parsed.education)} education lines, "
        f"{parsed.experience_years:g} years, {len(parsed.projects)} projects, "
        f"{len(parsed.certifications)} certifications"
    )
