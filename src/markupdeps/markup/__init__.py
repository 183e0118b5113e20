"""HTML document handling: parsing, tag synthesis and tag placement."""

from .document import MarkupDocument
from .placement import update_tags
from .tags import TagSet, synthesize_tags

__all__ = [
    "MarkupDocument",
    "TagSet",
    "synthesize_tags",
    "update_tags",
]
