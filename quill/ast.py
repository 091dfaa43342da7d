"""Syntax tree produced by the parser."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Union

from quill.tokens import Token


class DirectiveType(Enum):
    """Compiler directives, valued by their source spelling."""

    C_HEADER = "@c_header"
    C_RESTRICT = "@c_restrict"
    C_FILE = "@c_FILE"
    C_STR = "@c_str"
    IGNORE_UNUSED = "@ignore_unused"
    IMPL = "@impl"
    STRING_LITERAL = "@string_literal"
    STRING_TEMPLATE = "@string_template"
    RANGE_LITERAL = "@range_literal"


@dataclass
class Directive:
    """A directive attached to a node; ``include`` is set for ``@c_header``."""

    type: DirectiveType
    include: str | None = None


@dataclass
class StaticPath:
    """A ``::``-separated name path such as ``std::io::println``."""

    name: str
    child: StaticPath | None = None

    def parts(self) -> list[str]:
        """Return the names along the path, outermost first."""
        names = []
        node: StaticPath | None = self
        while node is not None:
            names.append(node.name)
            node = node.child
        return names

    def __str__(self) -> str:
        return "::".join(self.parts())


@dataclass
class PackagePath:
    """A ``/``-separated package name such as ``std/io``."""

    name: str
    child: PackagePath | None = None

    def parts(self) -> list[str]:
        """Return the names along the path, outermost first."""
        names = []
        node: PackagePath | None = self
        while node is not None:
            names.append(node.name)
            node = node.child
        return names

    def __str__(self) -> str:
        return "/".join(self.parts())


@dataclass
class ImportStaticPath:
    """A path inside an imported file; ``name`` is None for the ``*`` wildcard."""

    name: str | None
    child: ImportStaticPath | None = None


class ImportPathKind(Enum):
    FILE = auto()
    DIR = auto()


@dataclass
class ImportPath:
    """An import target: a directory step (child is an ImportPath) or a file."""

    kind: ImportPathKind
    name: str
    child: Union[ImportPath, ImportStaticPath, None] = None


class ImportType(Enum):
    DEFAULT = auto()
    LOCAL = auto()
    ROOT = auto()


class BuiltInType(Enum):
    VOID = "void"
    BOOL = "bool"
    CHAR = "char"
    INT = "int"
    INT8 = "int8"
    INT16 = "int16"
    INT32 = "int32"
    INT64 = "int64"
    UINT = "uint"
    UINT8 = "uint8"
    UINT16 = "uint16"
    UINT32 = "uint32"
    UINT64 = "uint64"
    FLOAT = "float"
    FLOAT32 = "float32"
    FLOAT64 = "float64"


class TypeKind(Enum):
    BUILT_IN = auto()
    STATIC_PATH = auto()
    POINTER = auto()
    MUT_POINTER = auto()
    ARRAY = auto()


@dataclass
class Type:
    """A written type; which fields are meaningful depends on ``kind``."""

    id: int
    kind: TypeKind
    directives: list[Directive] = field(default_factory=list)
    built_in: BuiltInType | None = None
    path: StaticPath | None = None
    generic_args: list[Type] = field(default_factory=list)
    impl_version: int = 0
    of: Type | None = None
    explicit_size: Token | None = None


class UnaryOp(Enum):
    BOOL_NEGATE = "!"
    NUM_NEGATE = "-"
    PTR_REF = "&"
    PTR_DEREF = "*"
    PLUS_PLUS = "++"
    MINUS_MINUS = "--"


class PostfixOp(Enum):
    PLUS_PLUS = "++"
    MINUS_MINUS = "--"


class BinaryOp(Enum):
    ADD = "+"
    SUBTRACT = "-"
    MULTIPLY = "*"
    DIVIDE = "/"
    MODULO = "%"
    BOOL_OR = "||"
    BOOL_AND = "&&"
    EQ = "=="
    NOT_EQ = "!="
    LESS = "<"
    LESS_OR_EQ = "<="
    GREATER = ">"
    GREATER_OR_EQ = ">="
    BIT_OR = "|"
    BIT_AND = "&"
    BIT_XOR = "^"


class AssignmentOp(Enum):
    ASSIGN = "="
    PLUS_ASSIGN = "+="
    MINUS_ASSIGN = "-="
    MULTIPLY_ASSIGN = "*="
    DIVIDE_ASSIGN = "/="
    BIT_AND_ASSIGN = "&="
    BIT_OR_ASSIGN = "|="
    BIT_XOR_ASSIGN = "^="


class LiteralKind(Enum):
    NULL = auto()
    BOOL = auto()
    CHAR = auto()
    CHARS = auto()
    STR = auto()
    INT = auto()
    FLOAT = auto()


@dataclass(kw_only=True)
class Node:
    """Base of every syntax-tree node."""

    id: int | None = None
    directives: list[Directive] = field(default_factory=list)


@dataclass(kw_only=True)
class PackageDecl(Node):
    path: PackagePath


@dataclass(kw_only=True)
class Import(Node):
    import_type: ImportType
    path: ImportPath


@dataclass(kw_only=True)
class TypedefDecl(Node):
    name: str
    type: Type


@dataclass
class StructField:
    type: Type
    name: str


@dataclass(kw_only=True)
class StructDecl(Node):
    name: str
    fields: list[StructField] = field(default_factory=list)
    generic_params: list[str] = field(default_factory=list)
    generic_impls: list[list[Type]] = field(default_factory=list)


@dataclass(kw_only=True)
class Literal(Node):
    """A literal; ``value`` is None, bool, str, int or float by ``kind``."""

    kind: LiteralKind
    value: Union[None, bool, str, int, float] = None


@dataclass(kw_only=True)
class TemplateString(Node):
    """A template string: ``str_parts`` surround each of ``expr_parts``."""

    str_parts: list[str] = field(default_factory=list)
    expr_parts: list[Node] = field(default_factory=list)


@dataclass(kw_only=True)
class VarRef(Node):
    path: StaticPath


@dataclass(kw_only=True)
class Index(Node):
    root: Node
    value: Node


@dataclass(kw_only=True)
class Range(Node):
    lhs: Node
    rhs: Node
    inclusive: bool = False


@dataclass(kw_only=True)
class GetField(Node):
    root: Node
    name: str
    is_ptr_deref: bool = False


@dataclass(kw_only=True)
class FunctionCall(Node):
    function: Node
    generic_args: list[Type] = field(default_factory=list)
    args: list[Node] = field(default_factory=list)


@dataclass(kw_only=True)
class SizeOf(Node):
    type: Type | None


@dataclass(kw_only=True)
class Cast(Node):
    type: Type
    target: Node


@dataclass(kw_only=True)
class TupleExpr(Node):
    exprs: list[Node] = field(default_factory=list)


@dataclass
class StructFieldInit:
    name: str
    value: Node


@dataclass(kw_only=True)
class StructInit(Node):
    fields: list[StructFieldInit] = field(default_factory=list)


@dataclass
class ArrayInitElem:
    value: Node
    index: Node | None = None


@dataclass(kw_only=True)
class ArrayInit(Node):
    elems: list[ArrayInitElem] = field(default_factory=list)
    explicit_length: Node | None = None


@dataclass(kw_only=True)
class UnaryOperation(Node):
    op: UnaryOp
    right: Node | None


@dataclass(kw_only=True)
class PostfixOperation(Node):
    op: PostfixOp
    left: Node


@dataclass(kw_only=True)
class BinaryOperation(Node):
    lhs: Node
    op: BinaryOp
    rhs: Node


@dataclass
class TypeOrLet:
    """Either ``let`` (type inferred) or an explicit type, optionally ``mut``."""

    is_let: bool = False
    is_mut: bool = False
    type: Type | None = None


@dataclass(kw_only=True)
class VarDecl(Node):
    name: str
    type_or_let: TypeOrLet
    initializer: Node | None = None
    is_static: bool = False


@dataclass(kw_only=True)
class Return(Node):
    expr: Node | None = None


@dataclass(kw_only=True)
class Defer(Node):
    stmt: Node


@dataclass(kw_only=True)
class StatementBlock(Node):
    stmts: list[Node] = field(default_factory=list)


@dataclass(kw_only=True)
class If(Node):
    cond: Node
    block: StatementBlock
    else_: Node | None = None


@dataclass(kw_only=True)
class While(Node):
    cond: Node
    block: StatementBlock


@dataclass(kw_only=True)
class Foreach(Node):
    var: str
    iterable: Node
    block: StatementBlock


@dataclass(kw_only=True)
class Crash(Node):
    expr: Node | None = None


@dataclass(kw_only=True)
class Assignment(Node):
    lhs: Node
    op: AssignmentOp
    rhs: Node | None


@dataclass(kw_only=True)
class Break(Node):
    expr: Node | None = None


@dataclass(kw_only=True)
class Continue(Node):
    pass


@dataclass
class FnParam:
    type: Type
    name: str
    is_mut: bool = False


@dataclass
class FunctionHeader:
    return_type: Type
    name: str
    params: list[FnParam] = field(default_factory=list)
    generic_params: list[str] = field(default_factory=list)
    generic_impls: list[list[Type]] = field(default_factory=list)
    is_main: bool = False


@dataclass(kw_only=True)
class FunctionHeaderDecl(Node):
    header: FunctionHeader


@dataclass(kw_only=True)
class FunctionDecl(Node):
    header: FunctionHeader
    stmts: list[Node] = field(default_factory=list)


@dataclass(kw_only=True)
class FileSeparator(Node):
    pass


@dataclass(kw_only=True)
class FileRoot(Node):
    nodes: list[Node] = field(default_factory=list)