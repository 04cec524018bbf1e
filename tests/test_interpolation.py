"""
Tests for Interpolation — String expressions to message pieces

These tests validate:
- Text chunks, argument indices and nested sub-messages in order
- Decomposition is repeatable on the same expression
- The resolver's found flag for unrecognized expressions
"""

import pytest

from intl_extract.extraction import (
    InterpolationDecomposer,
    PluralGenderSelectResolver,
    decompose_message_text,
)
from intl_extract.messages import MainMessage, MessageExtractionError, Plural

from tests.factories import adjacent, call, ident, interp, plural, string


def message_with(*arguments):
    message = MainMessage()
    message.arguments = list(arguments)
    return message


class TestInterpolationDecomposer:
    """Direct-children walk of string expressions."""

    def test_plain_literal(self):
        pieces = InterpolationDecomposer(message_with()).decompose(string("Hello"))

        assert pieces == ["Hello"]

    def test_empty_literal_kept(self):
        pieces = InterpolationDecomposer(message_with()).decompose(string(""))

        assert pieces == [""]

    def test_identifier_resolved_to_index(self):
        pieces = InterpolationDecomposer(message_with("a", "b")).decompose(
            interp(ident("b"), " and ", ident("a")))

        assert pieces == [1, " and ", 0]

    def test_adjacent_with_interpolation(self):
        node = adjacent(string("Hi "), interp(ident("who"), "!"))

        pieces = InterpolationDecomposer(message_with("who")).decompose(node)

        assert pieces == ["Hi ", 0, "!"]

    def test_extracted_message_joins_text(self):
        decomposer = InterpolationDecomposer(message_with("who"))
        decomposer.decompose(interp("Hi ", ident("who"), "!"))

        assert decomposer.extracted_message == "Hi !"

    def test_unknown_identifier(self):
        with pytest.raises(MessageExtractionError) as excinfo:
            InterpolationDecomposer(message_with("a")).decompose(interp(ident("z")))

        assert excinfo.value.reasons == ["Cannot find argument z"]

    def test_nested_plural(self):
        node = interp("Got ", plural(ident("n"), one=string("one"), other=interp(ident("n"))))

        pieces = InterpolationDecomposer(message_with("n")).decompose(node)

        assert pieces[0] == "Got "
        assert isinstance(pieces[1], Plural)
        assert pieces[1].cases == {"one": ["one"], "other": [0]}

    def test_decomposition_is_repeatable(self):
        """The same expression decomposes to equal pieces every time."""
        node = interp("You have ", plural(ident("n"), one=string("one"), other=interp(ident("n"))),
                      " items")
        message = message_with("n")

        first = InterpolationDecomposer(message).decompose(node)
        second = InterpolationDecomposer(message).decompose(node)

        assert first == second


class TestResolver:
    """Recognition of nested select-family calls."""

    def test_not_found_for_other_calls(self):
        pieces = []
        resolver = PluralGenderSelectResolver(pieces, message_with("a"))

        resolver.visit_interpolation_expression(interp(call("trim", target=ident("a"))).children[0])

        assert resolver.found is False
        assert pieces == []

    def test_found_and_appended(self):
        pieces = []
        parent = message_with("n")
        resolver = PluralGenderSelectResolver(pieces, parent)

        resolver.visit_interpolation_expression(
            interp(plural(ident("n"), other=string("many"))).children[0])

        assert resolver.found is True
        assert len(pieces) == 1
        assert pieces[0].parent is parent
        assert pieces[0].main_argument == "n"

    def test_string_main_argument_keeps_source(self):
        resolver = PluralGenderSelectResolver([], message_with())

        sub = resolver.message_from_call(plural(string("3"), other=string("x")))

        assert sub.main_argument == "'3'"

    def test_plural_case_aliases(self):
        resolver = PluralGenderSelectResolver([], message_with("n"))

        sub = resolver.message_from_call(
            plural(ident("n"), **{"=0": string("none"), "other": string("some")}))

        assert sub.cases == {"zero": ["none"], "other": ["some"]}


class TestEmbeddingPolicy:
    """Top-level-only rule for plurals and genders."""

    def test_allowed_by_default(self):
        node = interp("Got ", plural(ident("n"), other=interp(ident("n"))))

        pieces = decompose_message_text(message_with("n"), node)

        assert len(pieces) == 2

    def test_rejected_with_text(self):
        node = interp("Got ", plural(ident("n"), other=interp(ident("n"))))

        with pytest.raises(MessageExtractionError) as excinfo:
            decompose_message_text(message_with("n"), node, allow_embedded_plurals_and_genders=False)

        assert "must be at the top level" in str(excinfo.value)

    def test_sole_content_accepted(self):
        node = interp(plural(ident("n"), other=interp(ident("n"))))

        pieces = decompose_message_text(message_with("n"), node, allow_embedded_plurals_and_genders=False)

        assert isinstance(pieces[0], Plural)
