"""Identifier renumbering pass run before documents are combined."""

from __future__ import annotations

import logging
from typing import Sequence

from ..document import Document

LOGGER = logging.getLogger("combinepdf.merge")


def renumber_documents(documents: Sequence[Document], start_id: int = 1) -> int:
    """Move every document into its own identifier range.

    Documents are processed in order: each one is renumbered from the
    current floor and the floor then advances past its highest identifier,
    so ranges never overlap and later inputs always sort after earlier ones.
    Returns the first identifier left unused.
    """

    floor = start_id
    for document in documents:
        document.renumber_objects(floor)
        LOGGER.debug(
            "Renumbered %s into objects %d-%d", document.source or "document", floor, document.max_id
        )
        floor = document.max_id + 1
    return floor


__all__ = ["renumber_documents"]
