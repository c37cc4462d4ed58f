"""Removes comments, highlights, stamps, ... from a page. Links survive."""
from __future__ import annotations

import logging

from pypdf import PageObject

from .pdf_primitives import annotation_subtype, list_annotations, remove_annotation

logger = logging.getLogger(__name__)

LINK_SUBTYPE = "/Link"


def remove_non_link_annotations(page: PageObject) -> int:
    """Returns the number of removed annotations."""
    removed = 0
    for annotation in list_annotations(page):
        subtype = annotation_subtype(annotation)
        if subtype == LINK_SUBTYPE:
            continue
        remove_annotation(page, annotation)
        removed += 1
        logger.debug("Removed annotation %s", subtype or "<no subtype>")
    return removed
