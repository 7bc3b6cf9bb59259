"""Tests for deserializing composite shapes"""

import io
from dataclasses import dataclass

import pytest
from pytest import raises

from scanline import (
    ANY,
    BOOL,
    CHAR,
    FLOAT64,
    INT8,
    INT32,
    STRING,
    UINT8,
    UINT32,
    UINT64,
    Array,
    Deserializer,
    Enum,
    Field,
    List,
    Map,
    Optional,
    Options,
    ParseFailure,
    Struct,
    TrailingData,
    Tuple,
    UnexpectedEof,
    UnknownVariant,
    UnsupportedShape,
    ValueVisitor,
    Variant,
    VariantMatch,
    VariantShape,
    from_str,
    next_line,
)

TRIPLE = Struct("Triple", [Field("a", UINT32), Field("b", UINT32), Field("c", UINT32)])

COMMAND = Enum(
    "Command",
    [
        VariantShape("Q"),
        VariantShape("Help"),
        VariantShape("Size", (UINT64, UINT64)),
        VariantShape("Color", (UINT8,)),
    ],
)

COLOR = Enum("Color", [VariantShape("Red"), VariantShape("Blue"), VariantShape("Green")])


@dataclass
class Triple:
    a: int
    b: int
    c: int


def describe_fixed_arity_composites():
    def reads_arrays(expect):
        expect(from_str("1 2 3", Array(UINT32, 3))) == [1, 2, 3]

    def reads_tuples(expect):
        expect(from_str("1 2 3", Tuple((UINT32, UINT32, UINT32)))) == (1, 2, 3)

    def reads_structs_in_field_order(expect):
        expect(from_str("1 2 3", TRIPLE)) == {"a": 1, "b": 2, "c": 3}

    def reads_mixed_primitives(expect):
        shape = Tuple((INT8, CHAR, FLOAT64, BOOL, STRING))
        expect(from_str("-1 x 2.5 true hello", shape)) == (-1, "x", 2.5, True, "hello")

    def reads_nested_composites(expect):
        claim = Struct(
            "Claim",
            [
                Field("id", UINT32),
                Field("start", Tuple((UINT32, UINT32))),
                Field("dim", Array(UINT32, 2)),
            ],
        )
        expect(from_str("1 555 891 18 12", claim)) == {
            "id": 1,
            "start": (555, 891),
            "dim": [18, 12],
        }

    def treats_newlines_as_whitespace(expect):
        expect(from_str("1\n2\r\n\t3\n", TRIPLE)) == {"a": 1, "b": 2, "c": 3}

    def reads_empty_shapes_from_empty_input(expect):
        expect(from_str("", Tuple(()))) == ()
        expect(from_str("   ", Struct("Empty", []))) == {}
        expect(from_str("", Array(UINT8, 0))) == []

    def builds_user_types_with_factories(expect):
        visitor = ValueVisitor(factories={"Triple": Triple})
        expect(from_str("4 5 6", TRIPLE, visitor=visitor)) == Triple(a=4, b=5, c=6)


def describe_enums():
    def reads_tuple_variants(expect):
        expect(from_str("Size 1 2", COMMAND)) == Variant("Size", (1, 2))
        expect(from_str("Color 7", COMMAND)) == Variant("Color", (7,))

    def reads_unit_variants_from_one_token(expect):
        value = from_str("Q", COMMAND)
        expect(value) == Variant("Q")
        expect(value.is_unit) == True

        expect(from_str("Q 5", Tuple((COMMAND, UINT8)))) == (Variant("Q"), 5)

    def reads_variants_with_string_payloads(expect):
        enum_tuple = Enum(
            "EnumTuple",
            [
                VariantShape("variant", (INT32,)),
                VariantShape("tuple", (STRING, STRING, UINT64)),
            ],
        )
        expect(from_str("variant 1", enum_tuple)) == Variant("variant", (1,))
        expect(from_str("tuple two three 4", enum_tuple)) == Variant(
            "tuple", ("two", "three", 4)
        )

    def matches_case_sensitively_by_default(expect):
        with raises(UnknownVariant):
            from_str("red", COLOR)

    def matches_case_insensitively_when_asked(expect):
        options = Options(variant_match=VariantMatch.IGNORE_CASE)
        expect(from_str("red", COLOR, options=options)) == Variant("Red")
        expect(from_str("GREEN", COLOR, options=options)) == Variant("Green")

    def prefers_the_first_matching_variant(expect):
        dup = Enum("Dup", [VariantShape("A"), VariantShape("A", (UINT8,))])
        expect(from_str("A", dup)) == Variant("A")
        with raises(TrailingData):
            from_str("A 1", dup)

    def builds_user_types_with_factories(expect):
        visitor = ValueVisitor(factories={"Command": lambda name, values: (name, *values)})
        expect(from_str("Size 3 4", COMMAND, visitor=visitor)) == ("Size", 3, 4)


def describe_optional_and_any():
    def reads_absent_optionals_as_none(expect):
        shape = Tuple((UINT8, Optional(UINT8)))
        expect(from_str("1", shape)) == (1, None)
        expect(from_str("1 2", shape)) == (1, 2)

    def reads_self_describing_tokens(expect):
        shape = Tuple((ANY, ANY, ANY, ANY))
        expect(from_str("7 -7 7.5 x", shape)) == (7, -7, 7.5, "x")


def describe_errors():
    def fails_on_too_few_tokens(expect):
        with raises(UnexpectedEof) as exinfo:
            from_str("1 2", Array(UINT32, 3))
        expect(exinfo.value.expected) == "uint32"
        expect(exinfo.value.position) == 3

    def fails_on_missing_variant_payload(expect):
        with raises(UnexpectedEof):
            from_str("Size 1", COMMAND)

    def fails_on_empty_input(expect):
        with raises(UnexpectedEof):
            from_str("", UINT8)
        with raises(UnexpectedEof) as exinfo:
            from_str("  ", COMMAND)
        expect(exinfo.value.expected) == "Command variant"

    def fails_on_trailing_tokens(expect):
        with raises(TrailingData) as exinfo:
            from_str("1 2 3 4", TRIPLE)
        expect(exinfo.value.remaining) == 1
        expect(exinfo.value.position) == 6

    def fails_on_malformed_tokens(expect):
        with raises(ParseFailure) as exinfo:
            from_str("x 2 3", Tuple((INT32, INT32, INT32)))
        expect(exinfo.value.kind) == "int32"
        expect(exinfo.value.token_text) == "x"
        expect(exinfo.value.position) == 0

    def fails_on_unknown_variants(expect):
        with raises(UnknownVariant) as exinfo:
            from_str("Nope", COMMAND)
        expect(exinfo.value.token_text) == "Nope"
        expect(exinfo.value.known_variants) == ("Q", "Help", "Size", "Color")
        expect(str(exinfo.value)).includes("Q, Help, Size, Color")

    @pytest.mark.parametrize("text", ["", "1 2 3", "1 2 3 4 6 Stuff", "Nope"])
    def rejects_unbounded_containers_for_any_input(expect, text):
        for shape in (
            List(UINT32),
            Map(STRING, UINT32),
            Struct("VecWithStuff", [Field("vec", List(UINT32)), Field("stuff", STRING)]),
            Enum("Bad", [VariantShape("Q"), VariantShape("Many", (List(UINT8),))]),
        ):
            with raises(UnsupportedShape) as exinfo:
                from_str(text, shape)
            expect(str(exinfo.value)).includes("unbounded container")

    def consumes_nothing_for_unbounded_containers(expect):
        de = Deserializer("1 2")
        with raises(UnsupportedShape):
            de.deserialize(List(UINT32), ValueVisitor())
        expect(de.cursor.remaining) == 2


def describe_token_accounting():
    def drains_elements_a_visitor_skips(expect):
        class FirstOnly(ValueVisitor):
            def visit_tuple(self, access):
                return access.next_element(self)

        shape = Tuple((UINT8, UINT8, UINT8))
        expect(from_str("1 2 3", shape, visitor=FirstOnly())) == 1

        with raises(ParseFailure):
            from_str("1 x 3", shape, visitor=FirstOnly())

    def returns_the_same_result_every_time(expect):
        first = from_str("Size 1 2", COMMAND)
        second = from_str("Size 1 2", COMMAND)
        expect(first) == second

        for _ in range(2):
            with raises(TrailingData):
                from_str("Q Q", COMMAND)


def describe_next_line():
    def reads_one_line_per_call(expect):
        stream = io.StringIO("3\n1 2 3\n4 5 6\n")

        n = next_line(UINT64, stream)
        rows = [next_line(TRIPLE, stream) for _ in range(n - 1)]

        expect(n) == 3
        expect(rows) == [{"a": 1, "b": 2, "c": 3}, {"a": 4, "b": 5, "c": 6}]

    def fails_at_end_of_stream(expect):
        with raises(UnexpectedEof):
            next_line(UINT8, io.StringIO(""))

    def rejects_unbounded_shapes_before_reading(expect):
        stream = io.StringIO("1 2 3\n")
        with raises(UnsupportedShape):
            next_line(List(UINT8), stream)
        expect(stream.tell()) == 0
