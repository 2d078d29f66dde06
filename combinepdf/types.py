"""
Type definitions and dataclasses for combinepdf.

This module defines data structures shared by the object store and the
merge pipeline.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

ObjectId = Tuple[int, int]
"""Address of an indirect object: ``(object number, generation)``."""

Color = Tuple[float, float, float]

ZERO_ID: ObjectId = (0, 0)


@dataclass(frozen=True)
class Bookmark:
    """
    One table-of-contents entry waiting to be compiled into an outline.

    Attributes:
        title: Text shown in the viewer's bookmark panel
        color: RGB components in the ``0..1`` range
        level: Nesting level, ``0`` for top-level entries
        target: Identifier of the page the entry jumps to
    """
    title: str
    color: Color
    level: int
    target: ObjectId


@dataclass
class LoadFailure:
    """A source file that was skipped because it could not be loaded."""
    path: str
    reason: str


@dataclass
class MergeResult:
    """
    Result of a merge operation.

    Attributes:
        success: Whether the merged file was written
        output_path: Destination path of the merged PDF
        total_pages: Number of pages in the merged PDF
        sources: Input files that contributed to the result
        skipped: Input files that could not be loaded
        bookmarks: Titles of the generated bookmarks, in order
        error: Error message if the operation failed
    """
    success: bool
    output_path: str
    total_pages: int = 0
    sources: List[str] = field(default_factory=list)
    skipped: List[LoadFailure] = field(default_factory=list)
    bookmarks: List[str] = field(default_factory=list)
    error: Optional[str] = None

    def __str__(self) -> str:
        """String representation of the result."""
        if self.success:
            return f"MergeResult(success=True, pages={self.total_pages}, sources={len(self.sources)})"
        else:
            return f"MergeResult(success=False, error='{self.error}')"
