"""Builds the script/link elements implied by a package's selected version."""

from __future__ import annotations

from typing import List, NamedTuple, Optional

from bs4.element import Tag

from ..constants import AssetClass, Constants
from ..graph import PackageNode
from ..versioning.models import VersionDescriptor
from .document import MarkupDocument


class TagSet(NamedTuple):
    """Freshly created (not yet inserted) elements for one package."""
    scripts: List[Tag]
    styles: List[Tag]

    def of(self, asset_class: AssetClass) -> List[Tag]:
        return self.scripts if asset_class is AssetClass.SCRIPTS else self.styles


def synthesize_tags(
    document: MarkupDocument,
    node: PackageNode,
    version: Optional[VersionDescriptor] = None,
) -> TagSet:
    """Create script and stylesheet elements for a package version.

    Each element carries ``data-require`` (``name@range`` as requested) and
    ``data-semver`` (the concrete version) provenance attributes.

    Args:
        document: Document used as the element factory; it is not modified.
        node: Package whose tags are built.
        version: Version to build from; defaults to the node's selected version.

    Returns:
        TagSet with empty lists when there is no version or it declares no assets.
    """
    if version is None:
        version = node.selected_version
    if version is None:
        return TagSet([], [])

    scripts = [
        document.new_element("script", {
            Constants.ATTR_REQUIRE: node.ref_text,
            Constants.ATTR_SEMVER: version.semver,
            "src": url,
        })
        for url in version.scripts
    ]
    styles = [
        document.new_element("link", {
            Constants.ATTR_REQUIRE: node.ref_text,
            Constants.ATTR_SEMVER: version.semver,
            "rel": "stylesheet",
            "href": url,
        })
        for url in version.styles
    ]
    return TagSet(scripts, styles)
