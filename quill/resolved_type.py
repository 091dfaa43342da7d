"""Types as resolved by the checker, with equality and conversion rules."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from quill.ast import Node


class ResolvedTypeKind(Enum):
    """Kinds of resolved type, numbered in declaration order."""

    NAMESPACE = 0
    VOID = 1
    BOOL = 2
    CHAR = 3
    INT = 4
    INT8 = 5
    INT16 = 6
    INT32 = 7
    INT64 = 8
    UINT = 9
    UINT8 = 10
    UINT16 = 11
    UINT32 = 12
    UINT64 = 13
    FLOAT = 14
    FLOAT32 = 15
    FLOAT64 = 16
    POINTER = 17
    MUT_POINTER = 18
    ARRAY = 19
    FUNCTION_DECL = 20
    FUNCTION_REF = 21
    STRUCT_DECL = 22
    STRUCT_REF = 23
    GENERIC = 24
    TERMINAL = 25


_K = ResolvedTypeKind


@dataclass
class ResolvedFunctionParam:
    type: ResolvedType | None
    name: str


@dataclass
class ResolvedFunctionDecl:
    return_type: ResolvedType | None
    params: list[ResolvedFunctionParam] = field(default_factory=list)
    generic_params: list[str] = field(default_factory=list)


@dataclass
class ResolvedFunctionRef:
    decl: ResolvedFunctionDecl
    generic_args: list[ResolvedType] = field(default_factory=list)
    impl_version: int = 0


@dataclass
class ResolvedArray:
    """An array of ``of``; ``explicit_length`` is None when unsized."""

    of: ResolvedType | None
    explicit_length: int | None = None


@dataclass
class ResolvedStructField:
    type: ResolvedType | None
    name: str


@dataclass
class ResolvedStructDecl:
    name: str
    fields: list[ResolvedStructField] = field(default_factory=list)
    generic_params: list[str] = field(default_factory=list)


@dataclass
class ResolvedStructRef:
    decl: ResolvedStructDecl
    generic_args: list[ResolvedType] = field(default_factory=list)
    decl_node_id: int | None = None
    impl_version: int = 0


@dataclass
class ResolvedGeneric:
    """The ``idx``-th generic parameter, called ``name``."""

    name: str
    idx: int


@dataclass(eq=False)
class ResolvedType:
    """A resolved type; which payload field is meaningful depends on ``kind``.

    ``of`` is the target of a pointer or mutable pointer.
    """

    kind: ResolvedTypeKind
    of: ResolvedType | None = None
    array: ResolvedArray | None = None
    function_decl: ResolvedFunctionDecl | None = None
    function_ref: ResolvedFunctionRef | None = None
    struct_decl: ResolvedStructDecl | None = None
    struct_ref: ResolvedStructRef | None = None
    generic: ResolvedGeneric | None = None
    namespace: Any = None
    from_pkg: Any = None
    src: Node | None = None


_PRIMITIVES = frozenset(
    {
        _K.VOID, _K.BOOL, _K.CHAR,
        _K.INT, _K.INT8, _K.INT16, _K.INT32, _K.INT64,
        _K.UINT, _K.UINT8, _K.UINT16, _K.UINT32, _K.UINT64,
        _K.FLOAT, _K.FLOAT32, _K.FLOAT64,
    }
)
_POINTERS = frozenset({_K.POINTER, _K.MUT_POINTER})
_STRUCTS = frozenset({_K.STRUCT_DECL, _K.STRUCT_REF})
_UNCOMPARABLE = frozenset(
    {_K.NAMESPACE, _K.FUNCTION_DECL, _K.FUNCTION_REF, _K.ARRAY, _K.TERMINAL}
)
_GENERIC_TARGETS = frozenset(set(_K) - {_K.NAMESPACE, _K.TERMINAL})

_NARROW_SCALARS = frozenset(
    {
        _K.BOOL, _K.CHAR,
        _K.INT, _K.INT8, _K.INT16, _K.INT32, _K.INT64,
        _K.UINT, _K.UINT8, _K.UINT16, _K.UINT32, _K.UINT64,
        _K.FLOAT, _K.FLOAT32, _K.FLOAT64,
    }
)
_MID_SCALARS = frozenset(
    {
        _K.BOOL,
        _K.INT, _K.INT16, _K.INT32, _K.INT64,
        _K.UINT, _K.UINT16, _K.UINT32, _K.UINT64,
        _K.FLOAT, _K.FLOAT32, _K.FLOAT64,
    }
)
_WIDE_SCALARS = frozenset(
    {
        _K.BOOL, _K.INT, _K.INT64, _K.UINT, _K.UINT64,
        _K.FLOAT, _K.FLOAT64, _K.POINTER, _K.MUT_POINTER,
    }
)
_IMPLICIT_TARGETS: dict[ResolvedTypeKind, frozenset[ResolvedTypeKind]] = {
    **dict.fromkeys((_K.BOOL, _K.CHAR, _K.INT8, _K.UINT8), _NARROW_SCALARS),
    **dict.fromkeys((_K.INT16, _K.UINT16), _MID_SCALARS),
    **dict.fromkeys((_K.INT32, _K.UINT32, _K.FLOAT32), _MID_SCALARS),
    **dict.fromkeys(
        (_K.INT, _K.INT64, _K.UINT, _K.UINT64, _K.FLOAT, _K.FLOAT64),
        _WIDE_SCALARS,
    ),
}

_CASTABLE_SCALARS = frozenset(
    {
        _K.BOOL, _K.CHAR,
        _K.INT8, _K.INT16, _K.INT32, _K.INT64,
        _K.UINT8, _K.UINT16, _K.UINT32, _K.UINT64,
        _K.FLOAT, _K.FLOAT32, _K.FLOAT64,
        _K.POINTER, _K.MUT_POINTER,
    }
)
_CAST_TARGETS = _NARROW_SCALARS | _POINTERS


def _struct_decl_of(rt: ResolvedType) -> ResolvedStructDecl | None:
    if rt.kind is _K.STRUCT_REF:
        return rt.struct_ref.decl if rt.struct_ref else None
    return rt.struct_decl


def _src_id(rt: ResolvedType) -> int | None:
    return rt.src.id if rt.src is not None else None


def resolved_struct_decl_eq(
    a: ResolvedStructDecl | None, b: ResolvedStructDecl | None
) -> bool:
    """Return whether two struct declarations have the same name, fields and params."""
    if a is None or b is None:
        return a is None and b is None
    if a.name != b.name:
        return False
    if len(a.fields) != len(b.fields):
        return False
    if len(a.generic_params) != len(b.generic_params):
        return False
    for fa, fb in zip(a.fields, b.fields):
        if fa.name != fb.name or not resolved_type_eq(fa.type, fb.type):
            return False
    return a.generic_params == b.generic_params


def resolved_type_eq(a: ResolvedType | None, b: ResolvedType | None) -> bool:
    """Return whether two resolved types are the same type.

    Raises TypeError for kinds that have no equality defined.
    """
    if a is None or b is None:
        return a is None and b is None

    kind = a.kind
    if kind in _UNCOMPARABLE:
        raise TypeError(f"equality is not defined for {kind.name} types")
    if kind in _PRIMITIVES:
        return b.kind is kind
    if kind in _POINTERS:
        return b.kind in _POINTERS and resolved_type_eq(a.of, b.of)
    if kind is _K.STRUCT_REF:
        if b.kind is _K.STRUCT_REF:
            if len(a.struct_ref.generic_args) != len(b.struct_ref.generic_args):
                return False
            if not all(
                resolved_type_eq(x, y)
                for x, y in zip(a.struct_ref.generic_args, b.struct_ref.generic_args)
            ):
                return False
            return resolved_struct_decl_eq(a.struct_ref.decl, b.struct_ref.decl)
        if b.kind is _K.STRUCT_DECL:
            return resolved_struct_decl_eq(a.struct_ref.decl, b.struct_decl)
        return False
    if kind is _K.STRUCT_DECL:
        if b.kind in _STRUCTS:
            return resolved_struct_decl_eq(a.struct_decl, _struct_decl_of(b))
        return False
    if kind is _K.GENERIC:
        if b.kind is not kind:
            return False
        if _src_id(a) != _src_id(b):
            return False
        return a.generic.idx == b.generic.idx and a.generic.name == b.generic.name
    return True


def resolved_type_implicit_to(
    from_: ResolvedType | None, to: ResolvedType | None
) -> bool:
    """Return whether a value of ``from_`` converts to ``to`` without a cast."""
    if from_ is None or to is None:
        return False
    if resolved_type_eq(from_, to):
        return True

    if (from_.kind is _K.GENERIC or to.kind is _K.GENERIC) and to.kind in _GENERIC_TARGETS:
        return True

    kind = from_.kind
    targets = _IMPLICIT_TARGETS.get(kind)
    if targets is not None:
        return to.kind in targets

    if kind is _K.POINTER:
        return to.kind in _POINTERS and resolved_type_implicit_to(from_.of, to.of)
    if kind is _K.MUT_POINTER:
        return to.kind in _POINTERS and resolved_type_eq(from_.of, to.of)
    if kind is _K.STRUCT_REF:
        if to.kind is _K.STRUCT_REF:
            if len(from_.struct_ref.generic_args) != len(to.struct_ref.generic_args):
                return False
            if not all(
                resolved_type_implicit_to(x, y)
                for x, y in zip(from_.struct_ref.generic_args, to.struct_ref.generic_args)
            ):
                return False
            return resolved_struct_decl_eq(to.struct_ref.decl, to.struct_ref.decl)
        if to.kind is _K.STRUCT_DECL:
            return resolved_struct_decl_eq(from_.struct_ref.decl, to.struct_decl)
        return False
    if kind is _K.STRUCT_DECL:
        if to.kind in _STRUCTS:
            return resolved_struct_decl_eq(from_.struct_decl, _struct_decl_of(to))
        return False
    return False


def resolved_type_cast_to(
    from_: ResolvedType | None, to: ResolvedType | None
) -> bool:
    """Return whether ``from_`` may be converted to ``to`` by an explicit cast."""
    if resolved_type_implicit_to(from_, to):
        return True
    if from_ is None or to is None:
        return False
    if from_.kind in _POINTERS and to.kind in _POINTERS:
        return True
    if from_.kind in _CASTABLE_SCALARS:
        return to.kind in _CAST_TARGETS
    if from_.kind in _STRUCTS:
        return to.kind in _STRUCTS
    return False


def _format_args(args: list[ResolvedType]) -> str:
    if not args:
        return ""
    return "<" + ", ".join(format_resolved_type(arg) for arg in args) + ">"


def _format_params(params: list[str]) -> str:
    if not params:
        return ""
    return "<" + ", ".join(params) + ">"


def format_resolved_type(rt: ResolvedType | None) -> str:
    """Render a resolved type for diagnostics."""
    if rt is None:
        return "null"

    kind = rt.kind
    if kind in _PRIMITIVES:
        return kind.name.lower()
    if kind in _POINTERS:
        return format_resolved_type(rt.of) + "*"
    if kind is _K.ARRAY:
        length = "" if rt.array.explicit_length is None else str(rt.array.explicit_length)
        return f"{format_resolved_type(rt.array.of)}[{length}]"
    if kind is _K.FUNCTION_DECL:
        decl = rt.function_decl
        params = ", ".join(
            f"{format_resolved_type(p.type)} {p.name}" for p in decl.params
        )
        return (
            f"{format_resolved_type(decl.return_type)} "
            f"{_format_params(decl.generic_params)}({params}) {{ ... }}"
        )
    if kind is _K.FUNCTION_REF:
        return "<name_unknown>" + _format_args(rt.function_ref.generic_args)
    if kind is _K.STRUCT_DECL:
        decl = rt.struct_decl
        body = "".join(
            f"    {format_resolved_type(f.type)} {f.name},\n" for f in decl.fields
        )
        return f"{decl.name}{_format_params(decl.generic_params)} {{\n{body}}}"
    if kind is _K.STRUCT_REF:
        return rt.struct_ref.decl.name + _format_args(rt.struct_ref.generic_args)
    if kind is _K.GENERIC:
        return f"<{rt.generic.idx}:{rt.generic.name}>"
    return f"RTK_{kind.value}"