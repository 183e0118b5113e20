"""Tests for tag synthesis, indentation helpers and tag placement."""

import pytest

from markupdeps.constants import Constants
from markupdeps.graph import DependencyGraph
from markupdeps.markup.document import MarkupDocument
from markupdeps.markup.formatting import (
    after_indented,
    append_indented,
    before_indented,
    leading_indent,
    remove_indented,
)
from markupdeps.markup.placement import update_tags
from markupdeps.markup.tags import synthesize_tags
from markupdeps.versioning.models import VersionDescriptor
from markupdeps.versioning.parser import parse_package_ref

PRETTY = (
    "<!DOCTYPE html>\n"
    "<html>\n"
    "  <head>\n"
    "    <title>Demo</title>\n"
    "  </head>\n"
    "  <body>\n"
    "  </body>\n"
    "</html>\n"
)


def _node(graph, ref, *versions):
    """Create a resolved node from (semver, scripts, styles) tuples."""
    parsed = parse_package_ref(ref)
    node = graph.get_or_create(parsed.name)
    node.versions = [
        VersionDescriptor.from_dict({"semver": semver, "scripts": scripts, "styles": styles})
        for semver, scripts, styles in versions
    ]
    node.set_range(parsed.range, parsed.text_range)
    return node


@pytest.fixture
def graph():
    """Create an empty graph."""
    return DependencyGraph()


class TestMarkupDocument:
    """Tests for the document facade."""

    def test_default_skeleton_round_trips(self):
        """An empty document serializes to the skeleton exactly."""
        assert MarkupDocument().serialize() == Constants.DEFAULT_MARKUP

    def test_whitespace_and_attribute_order_survive(self):
        """Unrelated markup serializes back unchanged."""
        markup = (
            "<!DOCTYPE html>\n<html>\n  <head>\n"
            '    <meta name="viewport" content="width=device-width">\n'
            '    <script type="module" src="main.js"></script>\n'
            "  </head>\n  <body class=\"a b\">\n    <p>Hi &amp; bye</p>\n  </body>\n</html>\n"
        )
        assert MarkupDocument(markup).serialize() == markup

    def test_doctype_line_is_stable_across_reloads(self):
        """Loading serialized output again does not add lines after the doctype."""
        html = PRETTY
        for _ in range(3):
            html = MarkupDocument(html).serialize()

        assert html == PRETTY
        assert MarkupDocument("<!DOCTYPE html><p>x</p>").serialize() == "<!DOCTYPE html><p>x</p>"


class TestSynthesizeTags:
    """Tests for synthesize_tags."""

    def test_builds_scripts_and_styles_with_provenance(self, graph):
        """Each asset URL yields one element carrying name@range and version."""
        document = MarkupDocument()
        node = _node(graph, "bootstrap@^3.0.0", ("3.3.0", ["bs.js"], ["bs.css", "theme.css"]))

        tags = synthesize_tags(document, node)

        assert len(tags.scripts) == 1
        assert len(tags.styles) == 2
        script = tags.scripts[0]
        assert script.name == "script"
        assert script["data-require"] == "bootstrap@^3.0.0"
        assert script["data-semver"] == "3.3.0"
        assert script["src"] == "bs.js"
        link = tags.styles[1]
        assert link.name == "link"
        assert link["rel"] == "stylesheet"
        assert link["href"] == "theme.css"

    def test_is_pure(self, graph):
        """Synthesizing does not touch the document."""
        document = MarkupDocument()
        node = _node(graph, "x", ("1.0.0", ["x.js"], []))

        synthesize_tags(document, node)

        assert document.serialize() == Constants.DEFAULT_MARKUP

    def test_no_version_no_tags(self, graph):
        """Nodes without a selected version produce nothing."""
        node = _node(graph, "x@^9.0.0", ("1.0.0", ["x.js"], []))

        tags = synthesize_tags(MarkupDocument(), node)
        assert tags.scripts == [] and tags.styles == []

    def test_explicit_version(self, graph):
        """A given version overrides the selected one."""
        node = _node(graph, "x", ("2.0.0", ["x2.js"], []), ("1.0.0", ["x1.js"], []))

        tags = synthesize_tags(MarkupDocument(), node, node.versions[1])
        assert tags.scripts[0]["src"] == "x1.js"


class TestIndentationHelpers:
    """Tests for the whitespace-preserving insert/remove helpers."""

    def test_leading_indent_uses_last_line(self):
        """Only the whitespace of the anchor's own line is copied."""
        document = MarkupDocument(PRETTY)
        title = document.select("title")[0]

        assert leading_indent(title) == "    "

    def test_leading_indent_ignores_non_blank_text(self):
        """Text content before the anchor does not count as indentation."""
        document = MarkupDocument("<div>text<span></span></div>")

        assert leading_indent(document.select("span")[0]) == ""

    def test_before_and_remove_restore_layout(self):
        """Replacing a tag in place keeps the surrounding whitespace byte-identical."""
        document = MarkupDocument(PRETTY)
        title = document.select("title")[0]
        replacement = document.new_element("title", {})

        before_indented([title], [replacement])
        remove_indented([title])

        assert document.serialize() == PRETTY.replace("<title>Demo</title>", "<title></title>")

    def test_after_indented(self):
        """Tags inserted after an anchor copy its indentation."""
        document = MarkupDocument(PRETTY)
        title = document.select("title")[0]

        after_indented([title], [document.new_element("meta", {"charset": "utf-8"})])

        assert '<title>Demo</title>\n    <meta charset="utf-8">\n  </head>' in document.serialize()

    def test_append_indented(self):
        """Appending into an empty element puts each tag on its own line."""
        document = MarkupDocument()
        tags = [document.new_element("script", {"src": "a.js"}), document.new_element("script", {"src": "b.js"})]

        append_indented(document.head, tags)

        assert document.serialize() == (
            '<!DOCTYPE html><html><head>\n  <script src="a.js"></script>'
            '\n  <script src="b.js"></script>\n</head><body></body></html>'
        )

    def test_helpers_ignore_empty_anchor_lists(self):
        """Nothing happens without an anchor."""
        document = MarkupDocument()
        before_indented([], [document.new_element("script", {})])
        after_indented([], [document.new_element("script", {})])

        assert document.serialize() == Constants.DEFAULT_MARKUP


class TestUpdateTags:
    """Tests for the tag placement engine."""

    def test_first_insertion_goes_after_last_head_child(self, graph):
        """Without other anchors, tags follow the head's last element."""
        document = MarkupDocument(PRETTY)
        node = _node(graph, "x", ("1.0.0", ["x.js"], ["x.css"]))

        update_tags(document, node)

        html = document.serialize()
        assert (
            "    <title>Demo</title>\n"
            '    <script data-require="x@*" data-semver="1.0.0" src="x.js"></script>\n'
            '    <link data-require="x@*" data-semver="1.0.0" rel="stylesheet" href="x.css">\n'
            "  </head>"
        ) in html

    def test_first_insertion_goes_before_existing_head_scripts(self, graph):
        """Package scripts load before scripts already present in the head."""
        document = MarkupDocument(PRETTY.replace(
            "<title>Demo</title>", '<title>Demo</title>\n    <script src="app.js"></script>'))
        node = _node(graph, "x", ("1.0.0", ["x.js"], []))

        update_tags(document, node)

        html = document.serialize()
        assert (
            '    <script data-require="x@*" data-semver="1.0.0" src="x.js"></script>\n'
            '    <script src="app.js"></script>'
        ) in html

    def test_first_insertion_goes_before_provenance_tags(self, graph):
        """An unrelated new package is grouped with existing package tags."""
        document = MarkupDocument(PRETTY)
        first = _node(graph, "first", ("1.0.0", ["first.js"], []))
        second = _node(graph, "second", ("1.0.0", ["second.js"], []))

        update_tags(document, first)
        update_tags(document, second)

        html = document.serialize()
        assert html.index("second.js") < html.index("first.js")
        assert 'src="second.js"></script>\n    <script data-require="first@*"' in html

    def test_child_is_placed_before_parent(self, graph):
        """A dependency's tags go directly before its parent's first tag."""
        document = MarkupDocument(PRETTY)
        parent = _node(graph, "parent", ("1.0.0", ["p1.js", "p2.js"], []))
        child = _node(graph, "child", ("1.0.0", ["c.js"], []))
        graph.link(parent, child)

        update_tags(document, parent, update_children=True)

        html = document.serialize()
        assert html.index("c.js") < html.index("p1.js") < html.index("p2.js")
        assert 'src="c.js"></script>\n    <script data-require="parent@*"' in html

    def test_update_is_idempotent(self, graph):
        """Updating twice in a row leaves the document byte-identical."""
        document = MarkupDocument(PRETTY)
        parent = _node(graph, "parent", ("1.0.0", ["p.js"], ["p.css"]))
        child = _node(graph, "child", ("1.0.0", ["c.js"], ["c.css"]))
        graph.link(parent, child)

        update_tags(document, parent, update_children=True)
        once = document.serialize()
        update_tags(document, parent, update_children=True)
        update_tags(document, child)

        assert document.serialize() == once

    def test_version_change_replaces_in_place(self, graph):
        """Switching versions swaps the tags without moving them."""
        document = MarkupDocument(PRETTY)
        node = _node(graph, "x@^2.0.0", ("2.0.0", ["x2.js"], []), ("1.0.0", ["x1.js"], []))
        update_tags(document, node)

        ref = parse_package_ref("x@^1.0.0")
        node.set_range(ref.range, ref.text_range)
        update_tags(document, node)

        html = document.serialize()
        assert "x2.js" not in html
        assert '<script data-require="x@^1.0.0" data-semver="1.0.0" src="x1.js"></script>\n  </head>' in html
        assert html.count("<script") == 1

    def test_empty_new_list_removes_stale_tags(self, graph):
        """A version without assets clears the previously placed tags."""
        document = MarkupDocument(PRETTY)
        node = _node(graph, "x@^2.0.0", ("2.0.0", ["x2.js"], ["x2.css"]), ("1.0.0", [], []))
        update_tags(document, node)

        ref = parse_package_ref("x@^1.0.0")
        node.set_range(ref.range, ref.text_range)
        update_tags(document, node)

        assert document.serialize() == PRETTY
        assert node.scripts == [] and node.styles == []

    def test_append_to_root_without_head(self, graph):
        """Documents without a head receive the tags at the root."""
        document = MarkupDocument("<p>fragment</p>")
        node = _node(graph, "x", ("1.0.0", ["x.js"], []))

        update_tags(document, node)

        assert document.serialize() == (
            '<p>fragment</p>\n  <script data-require="x@*" data-semver="1.0.0" src="x.js"></script>\n'
        )

    def test_cascade_visits_cycles_once(self, graph):
        """Cyclic links do not recurse forever."""
        document = MarkupDocument(PRETTY)
        a = _node(graph, "a", ("1.0.0", ["a.js"], []))
        b = _node(graph, "b", ("1.0.0", ["b.js"], []))
        graph.link(a, b)
        graph.link(b, a)

        update_tags(document, a, update_children=True)

        html = document.serialize()
        assert html.count("a.js") == 1
        assert html.count("b.js") == 1
