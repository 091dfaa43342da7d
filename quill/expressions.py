"""Expression grammar: literals, operators, calls, casts and initialisers."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum, auto
from typing import Callable, Iterable

from quill.ast import (
    ArrayInit,
    ArrayInitElem,
    BinaryOp,
    BinaryOperation,
    Cast,
    Directive,
    FunctionCall,
    GetField,
    Index,
    Literal,
    LiteralKind,
    Node,
    PostfixOp,
    PostfixOperation,
    Range,
    SizeOf,
    StructFieldInit,
    StructInit,
    TemplateString,
    TupleExpr,
    UnaryOp,
    UnaryOperation,
    VarRef,
)
from quill.parser_base import ParseError, ParserBase
from quill.tokens import Token, TokenType

_T = TokenType

_TEMPLATE_PART_LIMIT = 256

_UNARY_OPS: dict[TokenType, UnaryOp] = {
    _T.BANG: UnaryOp.BOOL_NEGATE,
    _T.MINUS: UnaryOp.NUM_NEGATE,
    _T.AMPERSAND: UnaryOp.PTR_REF,
    _T.STAR: UnaryOp.PTR_DEREF,
    _T.PLUS_PLUS: UnaryOp.PLUS_PLUS,
    _T.MINUS_MINUS: UnaryOp.MINUS_MINUS,
}

_POSTFIX_OPS: dict[TokenType, PostfixOp] = {
    _T.PLUS_PLUS: PostfixOp.PLUS_PLUS,
    _T.MINUS_MINUS: PostfixOp.MINUS_MINUS,
}

_BINARY_OPS: dict[TokenType, BinaryOp] = {
    _T.PLUS: BinaryOp.ADD,
    _T.MINUS: BinaryOp.SUBTRACT,
    _T.STAR: BinaryOp.MULTIPLY,
    _T.SLASH: BinaryOp.DIVIDE,
    _T.PERCENT: BinaryOp.MODULO,
    _T.PIPE_PIPE: BinaryOp.BOOL_OR,
    _T.AMPERSAND_AMPERSAND: BinaryOp.BOOL_AND,
    _T.EQUAL_EQUAL: BinaryOp.EQ,
    _T.BANG_EQUAL: BinaryOp.NOT_EQ,
    _T.LESS: BinaryOp.LESS,
    _T.LESS_EQUAL: BinaryOp.LESS_OR_EQ,
    _T.GREATER: BinaryOp.GREATER,
    _T.GREATER_EQUAL: BinaryOp.GREATER_OR_EQ,
    _T.PIPE: BinaryOp.BIT_OR,
    _T.AMPERSAND: BinaryOp.BIT_AND,
    _T.CARET: BinaryOp.BIT_XOR,
}

_FLOAT_PREFIX = re.compile(r"\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_INT_PREFIX = re.compile(r"\s*[+-]?\d+")


class _Status(Enum):
    OK = auto()
    ERROR = auto()
    NONE = auto()


@dataclass(frozen=True)
class _Result:
    """Outcome of one grammar rule: parsed, parsed with errors, or not present."""

    status: _Status
    node: Node | None = None

    @property
    def ok(self) -> bool:
        return self.status is _Status.OK

    @property
    def is_none(self) -> bool:
        return self.status is _Status.NONE

    @property
    def value(self) -> Node | None:
        return self.node if self.ok else None


_NONE = _Result(_Status.NONE)


def _ok(node: Node) -> _Result:
    return _Result(_Status.OK, node)


def _err(node: Node) -> _Result:
    return _Result(_Status.ERROR, node)


def _c_atof(text: str) -> float:
    match = _FLOAT_PREFIX.match(text)
    return float(match.group()) if match else 0.0


def _c_atoll(text: str) -> int:
    match = _INT_PREFIX.match(text)
    return int(match.group()) if match else 0


def _escape_template_text(token: Token) -> str:
    """Keep escape pairs as written and escape bare double quotes."""
    out: list[str] = []
    chars = iter(token.text)
    for ch in chars:
        if ch == "\\":
            following = next(chars, None)
            if following is None:
                raise ParseError("Dangling escape in template string.", token)
            out.append(ch + following)
        elif ch == '"':
            out.append('\\"')
        else:
            out.append(ch)
    return "".join(out)


class ExpressionParser(ParserBase):
    """Parser for expressions, layered over the shared token cursor."""

    # -- public entry points ----------------------------------------------

    def parse_expr(self, directives: Iterable[Directive] | None = None) -> Node | None:
        """Parse a full expression, or return None (cursor unchanged) if there is none."""
        return self._expr_result(list(directives or ())).value

    def parse_simple_expr(
        self, directives: Iterable[Directive] | None = None
    ) -> Node | None:
        """Parse an operand with its calls, fields and indexes, or return None."""
        return self._simple_expr_result(list(directives or ())).value

    # -- helpers -----------------------------------------------------------

    def _require(self, res: _Result, message: str) -> Node:
        if not res.ok or res.node is None:
            raise ParseError(message, self._peek())
        return res.node

    # -- literals ----------------------------------------------------------

    def _parse_lit_str(self, directives: list[Directive]) -> _Result:
        token = self._peek()
        if not self._consume(_T.LITERAL_STRING, "Expected string literal."):
            return _NONE
        if len(token.text) <= 1:
            self._error("Missing string boundaries.")
            return _err(Literal(id=self._new_node_id(), directives=list(directives),
                                kind=LiteralKind.STR, value=""))
        return _ok(Literal(id=self._new_node_id(), directives=list(directives),
                           kind=LiteralKind.STR, value=token.text[1:-1]))

    def _parse_lit_str_template(self, directives: list[Directive]) -> _Result:
        token = self._peek()

        if token.type is _T.LITERAL_STRING_TEMPLATE_FULL:
            str_parts = [_escape_template_text(token)]
            self._advance()
            return _ok(TemplateString(id=self._new_node_id(), directives=list(directives),
                                      str_parts=str_parts))

        if token.type is not _T.LITERAL_STRING_TEMPLATE_START:
            return _NONE

        str_parts = [_escape_template_text(token)]
        expr_parts: list[Node] = []
        self._advance()

        for _ in range(_TEMPLATE_PART_LIMIT):
            expr_parts.append(
                self._require(self._expr_result([]), "Expected expression in template string.")
            )
            token = self._peek()
            if token.type is not _T.LITERAL_STRING_TEMPLATE_CONT:
                raise ParseError("Expected continuation of template string.", token)
            str_parts.append(_escape_template_text(token))
            self._advance()
            if token.text.startswith("}") and token.text.endswith("`"):
                break
        else:
            raise ParseError("Too many parts in template string.", token)

        return _ok(TemplateString(id=self._new_node_id(), directives=list(directives),
                                  str_parts=str_parts, expr_parts=expr_parts))

    def _parse_lit_char(self, directives: list[Directive]) -> _Result:
        token = self._peek()
        if not self._consume(_T.LITERAL_CHAR, "Expected char literal."):
            return _NONE

        text = token.text  # includes the single quotes
        if len(text) <= 2:
            self._error("Empty character not allowed.")
            return _err(Literal(id=self._new_node_id(), directives=list(directives),
                                kind=LiteralKind.CHAR, value="\0"))
        if len(text) == 3:
            kind, value = LiteralKind.CHAR, text[1]
        elif text[1] == "\\" and len(text) == 4:
            kind, value = LiteralKind.CHAR, text[1:3]
        else:
            kind, value = LiteralKind.CHARS, text[1:-1]
        return _ok(Literal(id=self._new_node_id(), directives=list(directives),
                           kind=kind, value=value))

    def _parse_lit_number(self, directives: list[Directive]) -> _Result:
        token = self._peek()
        if not self._consume(_T.LITERAL_NUMBER, "Expected number literal."):
            return _NONE
        if "." in token.text:
            kind, value = LiteralKind.FLOAT, _c_atof(token.text)
        else:
            kind, value = LiteralKind.INT, _c_atoll(token.text)
        return _ok(Literal(id=self._new_node_id(), directives=list(directives),
                           kind=kind, value=value))

    def _parse_bool(self, directives: list[Directive]) -> _Result:
        token = self._peek()
        if token.type not in (_T.TRUE, _T.FALSE):
            return _NONE
        self._advance()
        return _ok(Literal(id=self._new_node_id(), directives=list(directives),
                           kind=LiteralKind.BOOL, value=token.type is _T.TRUE))

    def _parse_lit(self, directives: list[Directive]) -> _Result:
        kind = self._peek().type
        if kind in (_T.TRUE, _T.FALSE):
            return self._parse_bool(directives)
        if kind is _T.LITERAL_STRING:
            return self._parse_lit_str(directives)
        if kind is _T.LITERAL_CHAR:
            return self._parse_lit_char(directives)
        if kind is _T.LITERAL_NUMBER:
            return self._parse_lit_number(directives)
        if kind in (_T.LITERAL_STRING_TEMPLATE_START, _T.LITERAL_STRING_TEMPLATE_FULL):
            return self._parse_lit_str_template(directives)
        return _NONE

    def _parse_var_ref(self, directives: list[Directive]) -> _Result:
        path = self.parse_static_path()
        if path is None:
            return _NONE
        return _ok(VarRef(id=self._new_node_id(), directives=list(directives), path=path))

    # -- suffixes of a simple expression ------------------------------------

    def _parse_index(self, expr: Node) -> _Result:
        if not self._check(_T.LEFT_BRACKET):
            return _NONE
        self._advance()
        value = self._simple_expr_result([])
        if not value.ok:
            return _NONE
        self._expect(_T.RIGHT_BRACKET, "Exptected `]`")
        return _ok(Index(id=self._new_node_id(), root=expr, value=value.node))

    def _parse_get_field(self, expr: Node) -> _Result:
        token = self._peek()
        if token.type not in (_T.DOT, _T.MINUS_GREATER):
            return _NONE
        self._advance()
        name = self._expect(_T.IDENTIFIER, "Expected field name.")
        return _ok(GetField(id=self._new_node_id(), root=expr, name=name.text,
                            is_ptr_deref=token.type is _T.MINUS_GREATER))

    def _parse_fn_call(self, expr: Node) -> _Result:
        generic_args = []
        if self._check(_T.LESS):
            self._advance()
            while not self._check(_T.GREATER, _T.EOF):
                arg = self.parse_type()
                if arg is None:
                    return _NONE
                generic_args.append(arg)
                if not self._check(_T.GREATER, _T.GREATER_GREATER, _T.EOF):
                    if not self._check(_T.COMMA):
                        return _NONE
                    self._advance()
            if self._check(_T.COMMA):
                self._advance()
            if not self._check(_T.GREATER):
                return _NONE
            self._advance()

        if not self._check(_T.LEFT_PAREN):
            return _NONE
        self._advance()

        call = FunctionCall(id=self._new_node_id(), function=expr, generic_args=generic_args)
        while not self._check(_T.RIGHT_PAREN, _T.EOF):
            arg_directives = self.parse_directives()
            arg = self._expr_result(arg_directives)
            if arg.node is not None:
                call.args.append(arg.node)
            if not arg.ok:
                return _err(call)
            if not self._check(_T.RIGHT_PAREN, _T.EOF):
                if not self._consume(_T.COMMA, "Expected comma."):
                    continue

        if not self._consume(_T.RIGHT_PAREN, "Expected ')'."):
            return _err(call)
        return _ok(call)

    def _parse_postfix(self, expr: Node) -> _Result:
        op = _POSTFIX_OPS.get(self._peek().type)
        if op is None:
            return _NONE
        self._advance()
        return _ok(PostfixOperation(id=self._new_node_id(), op=op, left=expr))

    def _wrap_simple_expr(self, res: _Result) -> _Result:
        if not res.ok:
            return res
        expr = res.node

        if self._check(_T.PLUS_PLUS):
            return self._wrap_simple_expr(self._parse_postfix(expr))

        cached = self.cursor
        attempts: tuple[Callable[[Node], _Result], ...] = (
            self._parse_fn_call,
            self._parse_get_field,
            self._parse_index,
        )
        for attempt in attempts:
            wrapped = attempt(expr)
            if wrapped.ok:
                wrapped.node.directives = list(expr.directives)
                return self._wrap_simple_expr(wrapped)
            self.cursor = cached
        return res

    # -- prefix forms ------------------------------------------------------

    def _parse_sizeof(self, directives: list[Directive]) -> _Result:
        if not self._consume(_T.SIZEOF, "Expected 'sizeof'."):
            return _NONE
        self._expect(_T.LEFT_PAREN, "Exptected '('")
        sized = self.parse_type()
        self._expect(_T.RIGHT_PAREN, "Exptected ')'")
        return _ok(SizeOf(id=self._new_node_id(), directives=list(directives), type=sized))

    def _parse_cast_at(self, start: int, directives: list[Directive]) -> _Result:
        self.cursor = start
        cast_type = self.parse_type()
        if cast_type is None:
            raise ParseError("Expected type in cast.", self._peek())
        self._expect(_T.RIGHT_PAREN, "Expected ')'.")
        target = self._require(self._expr_result([]), "Expected expression after cast.")
        return _ok(Cast(id=self._new_node_id(), directives=list(directives),
                        type=cast_type, target=target))

    def _parse_tuple_or_cast(self, directives: list[Directive]) -> _Result:
        if not self._consume(_T.LEFT_PAREN, "Expected '('."):
            return _NONE
        start = self.cursor

        exprs: list[Node] = []
        while not self._check(_T.RIGHT_PAREN, _T.EOF):
            res = self._expr_result([])
            if not res.ok:
                return self._parse_cast_at(start, directives)
            exprs.append(res.node)
            # Anything but a closing paren after an expression means a cast.
            if not self._check(_T.RIGHT_PAREN, _T.EOF):
                return self._parse_cast_at(start, directives)

        self._expect(_T.RIGHT_PAREN, "Expected ')'.")

        if len(exprs) == 1:
            after_paren = self.cursor
            if self._expr_result([]).ok:
                return self._parse_cast_at(start, directives)
            self.cursor = after_paren

        return _ok(TupleExpr(id=self._new_node_id(), directives=list(directives), exprs=exprs))

    def _parse_unary(self, directives: list[Directive]) -> _Result:
        op = _UNARY_OPS.get(self._peek().type)
        if op is None:
            return _NONE
        self._advance()
        rhs = self._expr_result(directives)
        unary = UnaryOperation(id=self._new_node_id(), op=op, right=rhs.node)
        return _ok(unary) if rhs.ok else _err(unary)

    def _simple_expr_result(self, directives: list[Directive]) -> _Result:
        kind = self._peek().type
        if kind is _T.NULL:
            self._advance()
            return _ok(Literal(id=self._new_node_id(), directives=list(directives),
                               kind=LiteralKind.NULL))
        if kind is _T.SIZEOF:
            return self._wrap_simple_expr(self._parse_sizeof(directives))
        if kind is _T.LEFT_PAREN:
            return self._wrap_simple_expr(self._parse_tuple_or_cast(directives))

        cached = self.cursor
        for attempt in (self._parse_unary, self._parse_lit, self._parse_var_ref):
            res = attempt(directives)
            if res.ok:
                return self._wrap_simple_expr(res)
            self.cursor = cached
        return _NONE

    # -- initialisers ------------------------------------------------------

    def _parse_struct_init(self, directives: list[Directive]) -> _Result:
        if not self._consume(_T.DOT, "Expected '.'"):
            return _NONE
        self._expect(_T.LEFT_BRACE, "Expected '{'.")

        fields: list[StructFieldInit] = []
        while not self._check(_T.RIGHT_BRACE, _T.EOF):
            self._expect(_T.DOT, "Expected '.'")
            name = self._expect(_T.IDENTIFIER, "Expected name")
            self._expect(_T.EQUAL, "Expected '='")
            value_directives = self.parse_directives()
            value = self._require(self._expr_result(value_directives),
                                  "Expected field value.")
            fields.append(StructFieldInit(name.text, value))
            if not self._check(_T.RIGHT_BRACE, _T.EOF):
                self._expect(_T.COMMA, "Expected ','")

        self._expect(_T.RIGHT_BRACE, "Expected '}'.")
        return _ok(StructInit(id=self._new_node_id(), directives=list(directives),
                              fields=fields))

    def _parse_array_init(self, directives: list[Directive]) -> _Result:
        if not self._consume(_T.LEFT_BRACKET, "Expected '['."):
            return _NONE

        explicit_length = None
        if not self._check(_T.RIGHT_BRACKET):
            explicit_length = self._require(self._simple_expr_result([]),
                                            "Expected array length.")
        self._expect(_T.RIGHT_BRACKET, "Expected ']'.")
        self._expect(_T.LEFT_BRACE, "Expected '{'.")

        elems: list[ArrayInitElem] = []
        while not self._check(_T.RIGHT_BRACE, _T.EOF):
            cached = self.cursor
            simple = self._simple_expr_result([])
            if simple.ok:
                if self._check(_T.EQUAL):
                    raise ParseError("Indexed array elements are not supported.", self._peek())
                if not self._check(_T.COMMA, _T.RIGHT_BRACE):
                    self._expect(_T.RIGHT_BRACE, "Expected '}'")
                elems.append(ArrayInitElem(simple.node))
            else:
                self.cursor = cached
                value = self._require(self._expr_result([]), "Expected array element.")
                elems.append(ArrayInitElem(value))

            if not self._check(_T.RIGHT_BRACE, _T.EOF):
                self._expect(_T.COMMA, "Expected ','")

        self._expect(_T.RIGHT_BRACE, "Exptected '}'.")
        return _ok(ArrayInit(id=self._new_node_id(), directives=list(directives),
                             elems=elems, explicit_length=explicit_length))

    # -- full expressions --------------------------------------------------

    def _parse_binary(self, expr: Node) -> _Result:
        op = _BINARY_OPS.get(self._peek().type)
        if op is None:
            return _NONE
        self._advance()
        rhs = self._expr_result([])
        if not rhs.ok:
            return _NONE
        return _ok(BinaryOperation(id=self._new_node_id(), lhs=expr, op=op, rhs=rhs.node))

    def _parse_range(self, expr: Node) -> _Result:
        token = self._peek()
        if token.type not in (_T.DOT_DOT, _T.DOT_DOT_EQUAL):
            return _NONE
        self._advance()
        rhs = self._require(self._simple_expr_result([]), "Expected end of range.")
        return _ok(Range(id=self._new_node_id(), lhs=expr, rhs=rhs,
                         inclusive=token.type is _T.DOT_DOT_EQUAL))

    def _wrap_expr(self, res: _Result) -> _Result:
        if not res.ok:
            return res
        expr = res.node
        cached = self.cursor
        for attempt in (self._parse_binary, self._parse_range):
            wrapped = attempt(expr)
            if wrapped.ok:
                wrapped.node.directives = list(expr.directives)
                return self._wrap_expr(wrapped)
            self.cursor = cached
        return res

    def _expr_result(self, directives: list[Directive]) -> _Result:
        kind = self._peek().type
        if kind is _T.DOT:
            return self._wrap_expr(self._parse_struct_init(directives))
        if kind is _T.LEFT_BRACKET:
            return self._wrap_expr(self._parse_array_init(directives))

        cached = self.cursor
        res = self._simple_expr_result(directives)
        if res.ok:
            return self._wrap_expr(res)
        self.cursor = cached
        return _NONE