"""
Analysis context logger.

Provides logging interface for the analysis context with automatic [analysis] prefix.
All analysis modules should import from this module, not from utils.logger directly.
"""

from pathlib import Path

from loguru import logger

from joblens.utils.logger import setup_logger as _setup_logger

CONTEXT_PREFIX = "[analysis]"


def setup_analysis_logger(log_dir: Path, backend_url: str) -> Path:
    """
    Setup logger for the analysis context.

    Args:
        log_dir: Directory for this session
        backend_url: Backend the session talks to, for provenance

    Returns:
        Path to log file
    """
    return _setup_logger(
        context_name="analysis",
        log_dir=log_dir,
        extra_provenance={"Backend": backend_url},
    )


def _log_info(message: str) -> None:
    """Log info message with [analysis] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [analysis] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [analysis] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [analysis] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [analysis] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")
