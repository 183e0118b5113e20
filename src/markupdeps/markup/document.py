"""BeautifulSoup-backed document facade.

Uses the stdlib ``html.parser`` tree builder so the tree mirrors the source
text closely enough to serialize unrelated markup back unchanged.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Union

from bs4 import BeautifulSoup
from bs4.dammit import EntitySubstitution
from bs4.element import Doctype, Tag
from bs4.formatter import HTMLFormatter

from ..constants import Constants


class _EveryTag(set):
    """Whitespace-preserving tag set that contains every tag name.

    The tree builder collapses whitespace-only strings to a single newline
    unless they sit inside a whitespace-preserving tag; indentation detection
    needs them verbatim.
    """

    def __contains__(self, item) -> bool:
        return True


class _Doctype(Doctype):
    """Doctype rendered without the trailing newline bs4 adds by default."""

    SUFFIX = ">"


class _SourceOrderFormatter(HTMLFormatter):
    """Keeps attributes in source order and renders void elements as ``<link ...>``."""

    def attributes(self, tag):
        return list(tag.attrs.items())


FORMATTER = _SourceOrderFormatter(
    entity_substitution=EntitySubstitution.substitute_xml,
    void_element_close_prefix=None,
)


class MarkupDocument:
    """Mutable HTML tree with query, create and serialize primitives."""

    def __init__(self, markup: Optional[str] = None):
        self.soup: BeautifulSoup
        self.load(markup)

    def load(self, markup: Optional[str] = None) -> "MarkupDocument":
        """Replace the tree with markup, or the default skeleton when empty."""
        self.soup = BeautifulSoup(
            markup or Constants.DEFAULT_MARKUP,
            "html.parser",
            multi_valued_attributes=None,
            preserve_whitespace_tags=_EveryTag(),
            element_classes={Doctype: _Doctype},
        )
        return self

    def serialize(self) -> str:
        return self.soup.decode(formatter=FORMATTER)

    @property
    def root(self) -> BeautifulSoup:
        return self.soup

    @property
    def head(self) -> Optional[Tag]:
        return self.soup.find("head")

    def select(self, selector: str) -> List[Tag]:
        return list(self.soup.select(selector))

    @staticmethod
    def element_children(parent: Union[Tag, BeautifulSoup]) -> List[Tag]:
        return [child for child in parent.children if isinstance(child, Tag)]

    def new_element(self, name: str, attrs: Dict[str, str]) -> Tag:
        return self.soup.new_tag(name, attrs=dict(attrs))
