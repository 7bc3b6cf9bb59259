"""Python code generator for scanline shape definitions."""

import keyword
from collections.abc import Mapping, Sequence

from jinja2 import Environment, PackageLoader

from scanline.de.shapes import (
    Array,
    Enum,
    List,
    Map,
    Optional,
    Primitive,
    PrimitiveKind,
    Shape,
    Struct,
    Tuple,
)

env = Environment(
    loader=PackageLoader("scanline.schema", "templates"),
    trim_blocks=True,
    lstrip_blocks=True,
    keep_trailing_newline=True,
    line_comment_prefix="%%",
    line_statement_prefix="%",
)

template = env.get_template("python.py.j2")

# Map primitive kinds to Python type annotations
PRIMITIVE_TYPE_MAP = {
    PrimitiveKind.BOOL: "bool",
    PrimitiveKind.INT8: "int",
    PrimitiveKind.INT16: "int",
    PrimitiveKind.INT32: "int",
    PrimitiveKind.INT64: "int",
    PrimitiveKind.UINT8: "int",
    PrimitiveKind.UINT16: "int",
    PrimitiveKind.UINT32: "int",
    PrimitiveKind.UINT64: "int",
    PrimitiveKind.FLOAT32: "float",
    PrimitiveKind.FLOAT64: "float",
    PrimitiveKind.CHAR: "str",
    PrimitiveKind.STRING: "str",
    PrimitiveKind.ANY: "int | float | str",
}


def _tuple_expr(items: Sequence[str]) -> str:
    if len(items) == 1:
        return f"({items[0]},)"
    return "(" + ", ".join(items) + ")"


def _annotation(shape: Shape) -> str:
    """Map a shape to a Python type annotation."""
    if isinstance(shape, Primitive):
        return PRIMITIVE_TYPE_MAP[shape.kind]
    if isinstance(shape, (Struct, Enum)):
        return shape.name
    if isinstance(shape, Tuple):
        if not shape.elements:
            return "tuple[()]"
        return "tuple[" + ", ".join(_annotation(e) for e in shape.elements) + "]"
    if isinstance(shape, (Array, List)):
        return f"list[{_annotation(shape.element)}]"
    if isinstance(shape, Optional):
        return f"{_annotation(shape.inner)} | None"
    if isinstance(shape, Map):
        return f"dict[{_annotation(shape.key)}, {_annotation(shape.value)}]"
    raise ValueError(f"Unknown shape: {shape!r}")


def _shape_expr(shape: Shape) -> str:
    """Generate the Python expression that builds a shape descriptor."""
    if isinstance(shape, Primitive):
        return f"_s.{shape.kind.name}"
    if isinstance(shape, Array):
        return f"_s.Array({_shape_expr(shape.element)}, {shape.length})"
    if isinstance(shape, Tuple):
        return f"_s.Tuple({_tuple_expr([_shape_expr(e) for e in shape.elements])})"
    if isinstance(shape, Struct):
        fields = [f'_s.Field("{f.name}", {_shape_expr(f.shape)})' for f in shape.fields]
        return f'_s.Struct("{shape.name}", {_tuple_expr(fields)})'
    if isinstance(shape, Enum):
        variants: list[str] = []
        for v in shape.variants:
            if v.is_unit:
                variants.append(f'_s.VariantShape("{v.name}")')
            else:
                elements = _tuple_expr([_shape_expr(e) for e in v.elements])
                variants.append(f'_s.VariantShape("{v.name}", {elements})')
        return f'_s.Enum("{shape.name}", {_tuple_expr(variants)})'
    if isinstance(shape, Optional):
        return f"_s.Optional({_shape_expr(shape.inner)})"
    if isinstance(shape, List):
        return f"_s.List({_shape_expr(shape.element)})"
    if isinstance(shape, Map):
        return f"_s.Map({_shape_expr(shape.key)}, {_shape_expr(shape.value)})"
    raise ValueError(f"Unknown shape: {shape!r}")


def _is_struct(shape: Shape) -> bool:
    return isinstance(shape, Struct)


def _is_unit_enum(shape: Shape) -> bool:
    """Check if an enum only has unit variants (rendered as a StrEnum)."""
    return isinstance(shape, Enum) and all(v.is_unit for v in shape.variants)


def _factory(shape: Struct | Enum) -> str:
    """Callable the generated visitor uses to build a value of ``shape``."""
    if isinstance(shape, Struct):
        return shape.name
    return f"{shape.name}._from_variant"


def _variant_list(shape: Enum) -> str:
    return ", ".join(str(v) for v in shape.variants)


def _check_identifiers(classes: list[Struct | Enum]) -> None:
    for shape in classes:
        names = [shape.name]
        if isinstance(shape, Struct):
            names.extend(shape.field_names)
        elif _is_unit_enum(shape):
            names.extend(shape.variant_names)

        for name in names:
            if keyword.iskeyword(name):
                raise ValueError(f"{name} in {shape.name} is a Python keyword")


def render(definitions: Mapping[str, Shape], runtime_import: str = "scanline") -> str:
    """Render shape definitions to Python source code.

    Structs become dataclasses, enums with only unit variants become StrEnums
    and other enums become ``Variant`` subclasses. Each class gets a
    ``from_str`` classmethod.
    """
    classes: list[Struct | Enum] = [
        shape
        for name, shape in definitions.items()
        if isinstance(shape, (Struct, Enum)) and shape.name == name
    ]
    _check_identifiers(classes)

    return template.render(
        definitions=definitions,
        classes=classes,
        annotation=_annotation,
        shape_expr=_shape_expr,
        is_struct=_is_struct,
        is_unit_enum=_is_unit_enum,
        factory=_factory,
        variant_list=_variant_list,
        runtime_import=runtime_import,
        BLANK_LINE="",
    )
