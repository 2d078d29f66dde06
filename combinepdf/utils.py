"""Utility helpers shared by :mod:`combinepdf`."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Union

PathLike = Union[str, Path]

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def get_logger(name: str) -> logging.Logger:
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter(LOG_FORMAT)
        handler.setFormatter(formatter)
        logger.addHandler(handler)
        logger.propagate = False
    return logger


def configure_logging(level: int | str = logging.WARNING) -> logging.Logger:
    """Attach the package handler to the ``combinepdf`` logger and set *level*."""

    if isinstance(level, str):
        level = logging.getLevelName(level.strip().upper())
        if not isinstance(level, int):
            level = logging.WARNING
    logger = get_logger("combinepdf")
    logger.setLevel(level)
    return logger


def ensure_path(path: PathLike) -> Path:
    """Return a :class:`~pathlib.Path` instance for *path*.

    This helper normalises any string-like path and expands user-home
    references. Relative paths are resolved against the current working
    directory.
    """

    resolved = Path(path).expanduser()
    try:
        return resolved.resolve(strict=False)
    except OSError:
        return resolved


def ensure_iterable(paths: Iterable[PathLike]) -> list[Path]:
    """Convert an iterable of paths to :class:`Path` objects."""

    return [ensure_path(path) for path in paths]


def find_pdf_files(directory: PathLike, recursive: bool = False) -> list[Path]:
    """Return the PDF files inside *directory* in a stable, sorted order.

    With *recursive* set, nested directories are searched as well. The
    ``.pdf`` suffix is matched case-insensitively.
    """

    root = ensure_path(directory)
    if not root.exists():
        raise FileNotFoundError(f"Directory not found: {directory}")
    if not root.is_dir():
        raise NotADirectoryError(f"Not a directory: {directory}")

    candidates = root.rglob("*") if recursive else root.glob("*")
    return sorted(
        path for path in candidates if path.is_file() and path.suffix.lower() == ".pdf"
    )


__all__ = [
    "PathLike",
    "LOG_FORMAT",
    "get_logger",
    "configure_logging",
    "ensure_path",
    "ensure_iterable",
    "find_pdf_files",
]
