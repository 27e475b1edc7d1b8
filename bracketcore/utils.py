"""
Shared utilities for the bracket prediction core.

This module provides common functions used across multiple modules
to avoid code duplication.
"""

import logging
import shutil
import tempfile
from pathlib import Path

from bracketcore.config import ALLOWED_RANKING_POLICIES, ALLOWED_SCORING_SCHEMES


# --- Logging Setup ---
def setup_logging(name: str | None = None, level: int = logging.INFO) -> logging.Logger:
    """
    Configure and return a logger with consistent formatting.

    Args:
        name: Logger name (usually __name__ from the calling module)
        level: Logging level (default: INFO)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.setLevel(level)
    return logger


# --- Display ---
def whole_percent(part: int, whole: int) -> int:
    """Share of part in whole as a whole percentage, halves rounded up (1 of 8 -> 13). 0 when whole is 0."""
    if whole <= 0:
        return 0
    return (200 * part + whole) // (2 * whole)


# --- File Operations ---
def atomic_write_csv(df, path: Path, **kwargs) -> None:
    """
    Write a DataFrame to CSV atomically using a temporary file.

    This prevents a half-written export if the write is interrupted.

    Args:
        df: pandas DataFrame to write
        path: Destination path for the CSV file
        **kwargs: Additional arguments to pass to df.to_csv()
    """
    logger = setup_logging(__name__)

    path.parent.mkdir(parents=True, exist_ok=True)
    kwargs.setdefault('encoding', 'utf-8')

    try:
        with tempfile.NamedTemporaryFile(
            mode='w',
            delete=False,
            suffix='.csv',
            dir=path.parent  # Same filesystem for atomic move
        ) as tmp:
            tmp_path = Path(tmp.name)
        df.to_csv(tmp_path, **kwargs)

        shutil.move(str(tmp_path), str(path))
        logger.debug(f"Atomically wrote {len(df)} rows to {path}")

    except Exception:
        if 'tmp_path' in locals() and tmp_path.exists():
            tmp_path.unlink()
        raise


# --- Validation ---
def validate_scoring_scheme(scheme: str) -> None:
    """
    Validate that a scoring scheme name is allowed.

    Raises:
        ValueError: If scheme is not in ALLOWED_SCORING_SCHEMES
    """
    if scheme not in ALLOWED_SCORING_SCHEMES:
        raise ValueError(
            f"Invalid scoring scheme: '{scheme}'. "
            f"Allowed values: {', '.join(sorted(ALLOWED_SCORING_SCHEMES))}"
        )


def validate_ranking_policy(policy: str) -> None:
    """
    Validate that a ranking policy name is allowed.

    Raises:
        ValueError: If policy is not in ALLOWED_RANKING_POLICIES
    """
    if policy not in ALLOWED_RANKING_POLICIES:
        raise ValueError(
            f"Invalid ranking policy: '{policy}'. "
            f"Allowed values: {', '.join(sorted(ALLOWED_RANKING_POLICIES))}"
        )


__all__ = [
    # Logging
    'setup_logging',
    # File operations
    'atomic_write_csv',
    # Validation
    'validate_scoring_scheme',
    'validate_ranking_policy',
]
