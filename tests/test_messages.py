"""
Tests for Messages — Message kinds, validity checks and regenerated forms

These tests validate:
- check_validity rules for Intl.message and the select-family calls
- validate() and validate_description()
- Canonical Dart form, ICU text and JSON output
- Sub-message parent links
"""

import gc

import pytest

from intl_extract.core.nodes import Parameter
from intl_extract.messages import (
    Gender,
    MainMessage,
    MessageExtractionError,
    Plural,
    Select,
    compute_message_name,
    class_plus_method_name,
    message_for_kind,
)

from tests.factories import (
    ident,
    integer,
    interp,
    list_literal,
    map_literal,
    message,
    named,
    plural,
    string,
)


def params(*names):
    return [Parameter(name) for name in names]


def check(node, outer_name, outer_params, **kwargs):
    instance = message_for_kind(node.name)
    return instance.check_validity(node, node.arguments, outer_name, outer_params, **kwargs)


def greet_message():
    main = MainMessage()
    main.name = "greet"
    main.arguments = ["name"]
    main.add_pieces(["Hello ", 0, "!"])
    return main


# =============================================================================
# Naming
# =============================================================================

class TestNaming:

    def test_explicit_name_wins(self):
        assert compute_message_name("greet", "Hello", "x") == "greet"

    def test_text_without_meaning(self):
        assert compute_message_name(None, "Hello", None) == "Hello"

    def test_text_with_meaning(self):
        assert compute_message_name("", "Hello", "noun") == "Hello_noun"

    def test_class_plus_method(self):
        assert class_plus_method_name("Strings", "title") == "Strings_title"
        assert class_plus_method_name(None, "title") is None


# =============================================================================
# check_validity
# =============================================================================

class TestCheckValidity:
    """Shape checks run before extraction."""

    def test_valid_message(self):
        node = message(interp("Hi ", ident("who")), name="hi", args=["who"])

        assert check(node, "hi", params("who")) is None

    def test_text_must_be_string(self):
        node = message(integer(3), name="hi")

        assert check(node, "hi", []) == "Intl.message messages must be string literals"

    def test_args_required(self):
        node = message(interp("Hi ", ident("who")), name="hi")

        reason = check(node, "hi", params("who"))

        assert reason.startswith("The 'args' argument for Intl.message must be specified")

    def test_args_not_required_when_generated(self):
        node = message(interp("Hi ", ident("who")))

        assert check(node, "hi", params("who"), name_and_args_generated=True) is None

    def test_args_must_match_order(self):
        node = message(interp(ident("a"), ident("b")), name="f", args=["b", "a"])

        reason = check(node, "f", params("a", "b"))

        assert reason == "The 'args' argument must match the message arguments, e.g. args: [a, b]"

    def test_name_required_with_parameters(self):
        node = intl_message_with_args_only()

        reason = check(node, "f", params("a"))

        assert reason.startswith("The 'name' argument for Intl.message must be supplied")

    def test_name_must_be_string_literal(self):
        node = message(string("Hi"), name=None)
        node.arguments.append(named("name", ident("someName")))

        assert check(node, "hi", []) == "The 'name' argument for Intl.message must be a string literal"

    def test_name_must_match_outer(self):
        node = message(string("Hi"), name="other")

        reason = check(node, "hi", [])

        assert "('other' vs. 'hi')" in reason

    def test_class_method_name(self):
        node = message(string("Hi"), name="Strings_hi")

        assert check(node, "hi", [], class_name="Strings") is None

    def test_desc_must_be_string(self):
        node = message(string("Hi"), name="hi", desc=ident("description"))

        assert check(node, "hi", []) == "Intl.message arguments must be string literals: desc: description"

    def test_examples_must_be_map(self):
        node = message(interp("Hi ", ident("a")), name="hi", args=["a"], examples=list_literal(const=True))

        assert check(node, "hi", params("a")) == "Examples must be a const Map literal."

    def test_examples_must_be_const(self):
        node = message(interp("Hi ", ident("a")), name="hi", args=["a"],
                       examples=map_literal((string("a"), string("x"))))

        assert check(node, "hi", params("a")) == "Examples must be const."

    def test_examples_required(self):
        node = message(interp("Hi ", ident("a")), name="hi", args=["a"])

        reason = check(node, "hi", params("a"), examples_required=True)

        assert reason == "Examples must be provided for messages with parameters"

    def test_plural_uses_common_rules(self):
        node = plural(ident("n"), other=string("x"), name=string("count"), args=list_literal(ident("n")))

        assert check(node, "count", params("n")) is None
        assert "('count' vs. 'total')" in check(node, "total", params("n"))


def intl_message_with_args_only():
    return message(interp(ident("a")), args=["a"])


# =============================================================================
# MainMessage
# =============================================================================

class TestMainMessage:

    def test_validate_requires_name(self):
        main = MainMessage()
        main.add_pieces(["Hi"])

        with pytest.raises(MessageExtractionError, match="no name"):
            main.validate()

    def test_validate_index_range(self):
        main = greet_message()
        main.add_pieces([3])

        with pytest.raises(MessageExtractionError, match="Argument index 3 is out of range"):
            main.validate()

    def test_validate_description(self):
        main = greet_message()

        with pytest.raises(MessageExtractionError, match="Missing description for message greet"):
            main.validate_description()

        main["desc"] = "A greeting"
        main.validate_description()

    def test_args_attribute_ignored(self):
        main = greet_message()
        main["args"] = ["other"]

        assert main.arguments == ["name"]

    def test_skip_attribute(self):
        main = MainMessage()
        main["skip"] = True

        assert main.skip is True

    def test_original_code(self):
        main = greet_message()
        main["desc"] = "Greets"

        assert main.to_original_code(include_desc=False, include_examples=False) == \
            "Intl.message('Hello ${name}!', name: 'greet', args: [name])"
        assert "desc: 'Greets'" in main.to_original_code()

    def test_original_code_escapes(self):
        main = MainMessage()
        main.name = "quote"
        main.add_pieces(["It's $5\n"])

        assert main.to_original_code(include_examples=False) == \
            "Intl.message('It\\'s \\$5\\n', name: 'quote', args: [])"

    def test_expanded(self):
        assert greet_message().expanded() == "Hello {name}!"

    def test_to_json(self):
        main = greet_message()
        main["examples"] = {"name": "Ada"}

        assert main.to_json() == {
            "name": "greet",
            "text": "Hello {name}!",
            "arguments": ["name"],
            "examples": {"name": "Ada"},
        }


# =============================================================================
# Sub-messages
# =============================================================================

class TestSubMessages:

    def test_plural_aliases(self):
        sub = Plural()
        sub["=1"] = ["one"]
        sub["few"] = ["few"]

        assert sub.cases == {"one": ["one"], "few": ["few"]}
        assert sub["=1"] == ["one"]

    def test_unknown_case_ignored(self):
        sub = Gender()
        sub["neuter"] = ["it"]

        assert sub.cases == {}

    def test_validate(self):
        sub = Plural()
        sub["one"] = ["x"]

        errors = sub.validate(1)

        assert "Intl.plural has no main argument" in errors
        assert "Intl.plural requires an 'other' case" in errors

    def test_parent_is_weak(self):
        parent = greet_message()
        sub = Plural(parent=parent, main_argument="n")

        assert sub.arguments == ["name"]
        del parent
        gc.collect()

        assert sub.parent is None
        assert sub.arguments == []

    def test_nested_parent_set_by_assignment(self):
        outer = Plural(main_argument="n")
        inner = Gender(main_argument="g")
        outer["other"] = [inner]

        assert inner.parent is outer

    def test_plural_code_and_icu(self):
        main = MainMessage()
        main.name = "count"
        main.arguments = ["n"]
        sub = Plural(main_argument="n")
        sub["other"] = [0, " items"]
        sub["zero"] = ["none"]
        main.add_pieces([sub])

        assert sub.to_code() == "Intl.plural(n, zero: 'none', other: '${n} items')"
        assert main.expanded() == "{n,plural, =0{none} other{{n} items}}"

    def test_gender_icu_is_select(self):
        main = MainMessage()
        main.arguments = ["g"]
        sub = Gender(main_argument="g")
        sub["female"] = ["she"]
        sub["other"] = ["they"]
        main.add_pieces([sub])

        assert main.expanded() == "{g,select, female{she} other{they}}"

    def test_select_code(self):
        main = MainMessage()
        main.arguments = ["c"]
        sub = Select(main_argument="c")
        sub["tea"] = ["Tea"]
        sub["other"] = ["Coffee"]
        main.add_pieces([sub])

        assert sub.to_code() == "Intl.select(c, {'tea': 'Tea', 'other': 'Coffee'})"

    def test_equality(self):
        first, second = Plural(main_argument="n"), Plural(main_argument="n")
        first["other"] = ["x"]
        second["other"] = ["x"]

        assert first == second
        assert first != Gender(main_argument="n")

    def test_message_for_kind(self):
        assert isinstance(message_for_kind("message"), MainMessage)
        assert isinstance(message_for_kind("select"), Select)
        assert message_for_kind("format") is None
