# quill

Front-end building blocks for a compiler of the Quill language: a token
model, the syntax-tree classes, a recursive-descent parser for types, paths,
directives and expressions, and the resolved type model used to decide
whether one type converts to another.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Modules

- `quill.tokens`: `TokenType`, the frozen dataclass `Token` (`type`, `text`,
  `line`) and `token_type_label`, which gives the printable text of a token
  type (`"::"`, `"foreach"`, `"<eof>"`, ...).
- `quill.ast`: the syntax-tree dataclasses (`Literal`, `VarRef`,
  `BinaryOperation`, `FunctionCall`, `Cast`, `StructInit`, `ArrayInit`,
  `Type`, `StaticPath`, `ImportPath`, `FunctionDecl`, `FileRoot`, ...) and the
  enums for operators, literal kinds and directives.
- `quill.parser_base`: `ParserBase`, a cursor over a token list with
  `parse_type`, `parse_directives`, `parse_static_path`,
  `parse_package_path` and `parse_import_path`; `parse_directive_type`;
  the `ParseError` exception and the `Diagnostic` record.
- `quill.expressions`: `ExpressionParser`, which adds `parse_expr` and
  `parse_simple_expr`.
- `quill.resolved_type`: `ResolvedType` and its payload classes, with
  `resolved_type_eq`, `resolved_struct_decl_eq`, `resolved_type_implicit_to`,
  `resolved_type_cast_to` and `format_resolved_type`.

## Parsing expressions

The parsers take an iterable of `Token` values. If the list does not end with
a `TokenType.EOF` token, one is appended.

```python
from quill.tokens import Token, TokenType
from quill.expressions import ExpressionParser

tokens = [
    Token(TokenType.LITERAL_NUMBER, "1"),
    Token(TokenType.PLUS, "+"),
    Token(TokenType.IDENTIFIER, "x"),
    Token(TokenType.STAR, "*"),
    Token(TokenType.LITERAL_NUMBER, "2"),
]

expr = ExpressionParser(tokens).parse_expr()
print(expr.op)        # BinaryOp.ADD
print(expr.lhs.value) # 1
print(expr.rhs.op)    # BinaryOp.MULTIPLY
```

Binary operators are not ranked by precedence: the right-hand side of an
operator is the whole remaining expression.

`parse_expr` and `parse_simple_expr` return `None` when no expression starts
at the cursor. Errors that stop parsing raise `ParseError`, whose `message`
and `token` attributes describe the failure. Recoverable errors are recorded
as `Diagnostic` objects in the parser's `diagnostics` list (and printed to
standard error), and `had_error` is set.

## Parsing types

```python
from quill.tokens import Token, TokenType
from quill.parser_base import ParserBase

parser = ParserBase([
    Token(TokenType.IDENTIFIER, "List"),
    Token(TokenType.LESS, "<"),
    Token(TokenType.INT, "int"),
    Token(TokenType.GREATER, ">"),
    Token(TokenType.STAR, "*"),
])
ptr = parser.parse_type()
print(ptr.kind)              # TypeKind.POINTER
print(str(ptr.of.path))      # List
print(ptr.of.generic_args[0].built_in)  # BuiltInType.INT
```

## Type conversions

```python
from quill.resolved_type import (
    ResolvedType, ResolvedTypeKind,
    resolved_type_implicit_to, resolved_type_cast_to, format_resolved_type,
)

int8 = ResolvedType(ResolvedTypeKind.INT8)
int64 = ResolvedType(ResolvedTypeKind.INT64)

resolved_type_implicit_to(int8, int64)   # True: widening
resolved_type_implicit_to(int64, int8)   # False: narrowing
resolved_type_cast_to(int64, int8)       # True: explicit cast
format_resolved_type(int64)              # "int64"
```

`resolved_type_eq` raises `TypeError` for namespace, function, array and
terminal types, for which no equality is defined.

## What this package does not do

- It has no lexer: token lists must be built by the caller.
- It parses types, paths, directives and expressions only. There is no parser
  for statements, function, struct, typedef, package or import declarations,
  or whole files, although `quill.ast` defines the node classes for them.
- It does not resolve names or check types of a syntax tree, and it does not
  generate code. There is no command-line tool.