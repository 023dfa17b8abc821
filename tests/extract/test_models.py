"""Tests for decoding book manifests and markup trees."""

import pytest

from extract.models import Anchor, BookManifest, MarkupNode, decode_book_manifest, decode_markup


class TestDecodeBookManifest:
    """Tests for decode_book_manifest."""

    def test_uuid_from_first_resource(self):
        data = {"res": [{"uuid": "bk-1"}, {"uuid": "bk-2"}]}
        assert decode_book_manifest(data) == BookManifest(uuid="bk-1")

    @pytest.mark.parametrize(
        "data",
        [{}, {"res": []}, {"res": [{}]}, {"res": [{"uuid": ""}]}, {"res": "x"}, [], None],
    )
    def test_missing_uuid(self, data):
        assert decode_book_manifest(data) is None


class TestDecodeMarkup:
    """Tests for decode_markup."""

    def test_field_mapping(self):
        node = decode_markup(
            {
                "title": "Intro",
                "originaltext": "quoted",
                "content": "my note",
                "page": 7,
                "uuid": "u7",
                "textblocks": [{"first": [1.5, 2, 99]}, {"first": [0, 0]}],
            }
        )
        assert node == MarkupNode(
            title="Intro",
            excerpt_text="quoted",
            free_text="my note",
            page=7,
            uuid="u7",
            anchor=Anchor(x=1.5, y=2),
        )

    @pytest.mark.parametrize(
        "textblocks",
        [None, [], [{}], [{"first": []}], [{"first": [3]}], [{"first": "12"}], ["x"]],
    )
    def test_anchor_needs_two_coordinates(self, textblocks):
        node = decode_markup({"originaltext": "q", "textblocks": textblocks})
        assert node.anchor is None

    def test_children_keep_order(self):
        node = decode_markup(
            {"markups": [{"title": "a"}, {"title": "b", "markups": [{"title": "c"}]}]}
        )
        assert [child.title for child in node.children] == ["a", "b"]
        assert node.children[1].children[0].title == "c"

    def test_empty_strings_are_absent(self):
        node = decode_markup({"title": "", "originaltext": "", "content": ""})
        assert node.title is None
        assert node.excerpt_text is None
        assert node.free_text is None

    def test_child_anchor_is_independent(self):
        """Test that a parent without an anchor does not affect its children."""
        node = decode_markup({"markups": [{"textblocks": [{"first": [1, 2]}]}]})
        assert node.anchor is None
        assert node.children[0].anchor == Anchor(1, 2)

    def test_non_object_node(self):
        with pytest.raises(ValueError):
            decode_markup({"markups": ["oops"]})

    def test_markups_must_be_list(self):
        with pytest.raises(ValueError):
            decode_markup({"markups": {"title": "a"}})

    @pytest.mark.parametrize("field", ["title", "originaltext", "content"])
    @pytest.mark.parametrize("value", [5, ["a"], {"text": "a"}, True])
    def test_text_fields_must_be_strings(self, field, value):
        with pytest.raises(ValueError, match=field):
            decode_markup({field: value})

    def test_nested_text_field_checked(self):
        with pytest.raises(ValueError, match="content"):
            decode_markup({"markups": [{"title": "ok", "content": 3.5}]})
