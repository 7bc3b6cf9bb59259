"""Tests for token count calculation."""

from scanline.schema import CountKind, count_definitions, count_tokens, parse


def describe_fixed_counts():
    def counts_one_token_per_primitive(expect):
        defs = parse("struct Triple { a: uint32  b: uint32  c: uint32 }")
        count = count_tokens(defs["Triple"])

        expect(count.min_tokens) == 3
        expect(count.max_tokens) == 3
        expect(count.kind) == CountKind.FIXED
        expect(count.is_fixed) == True

    def multiplies_arrays(expect):
        defs = parse("type Grid = [[uint8; 3]; 4]")
        expect(count_tokens(defs["Grid"]).max_tokens) == 12

    def counts_unit_tuples_as_zero(expect):
        defs = parse("type Unit = ()")
        expect(count_tokens(defs["Unit"]).max_tokens) == 0

    def treats_equal_payloads_as_fixed(expect):
        defs = parse("enum E { A(uint8)  B(int8) }\nenum Flag { On  Off }")
        expect(count_tokens(defs["E"]).kind) == CountKind.FIXED
        expect(count_tokens(defs["E"]).max_tokens) == 2
        expect(count_tokens(defs["Flag"]).max_tokens) == 1


def describe_bounded_counts():
    def ranges_over_enum_payloads(expect):
        defs = parse("enum Command { Q  Help  Size(usize, usize)  Color(uint8) }")
        count = count_tokens(defs["Command"])

        expect(count.min_tokens) == 1
        expect(count.max_tokens) == 3
        expect(count.kind) == CountKind.BOUNDED
        expect(count.is_bounded) == True

    def allows_optionals_to_be_absent(expect):
        defs = parse("type Claim = (uint32, [uint32; 2], string?)")
        count = count_tokens(defs["Claim"])

        expect(count.min_tokens) == 3
        expect(count.max_tokens) == 4
        expect(count.kind) == CountKind.BOUNDED

    def propagates_through_arrays(expect):
        defs = parse("enum C { Q  Size(usize, usize) }\ntype Cs = [C; 2]")
        count = count_tokens(defs["Cs"])

        expect(count.min_tokens) == 2
        expect(count.max_tokens) == 6


def describe_unbounded_counts():
    def marks_lists_and_maps(expect):
        defs = parse(
            """
            struct VecWithStuff { vec: [uint32]  stuff: string }
            type Dict = {string: uint32}
            enum Bad { Q  Many([uint8]) }
        """
        )
        counts = count_definitions(defs)

        for name in ("VecWithStuff", "Dict", "Bad"):
            expect(counts[name].kind) == CountKind.UNBOUNDED
            expect(counts[name].max_tokens) == None
            expect(counts[name].is_bounded) == False
