import pytest

from quill.ast import (
    ArrayInit,
    BinaryOp,
    BinaryOperation,
    BuiltInType,
    Cast,
    Directive,
    DirectiveType,
    FunctionCall,
    GetField,
    Index,
    Literal,
    LiteralKind,
    PostfixOp,
    PostfixOperation,
    Range,
    SizeOf,
    StructInit,
    TemplateString,
    TupleExpr,
    TypeKind,
    UnaryOp,
    UnaryOperation,
    VarRef,
)
from quill.expressions import ExpressionParser
from quill.parser_base import ParseError
from quill.tokens import Token, TokenType, token_type_label

T = TokenType


def tok(kind, text=None):
    return Token(kind, token_type_label(kind) if text is None else text, 1)


def ident(name):
    return tok(T.IDENTIFIER, name)


def num(text):
    return tok(T.LITERAL_NUMBER, text)


def make(*items):
    return ExpressionParser([item if isinstance(item, Token) else tok(item) for item in items])


def expr(*items):
    return make(*items).parse_expr()


def test_int_literal():
    node = expr(num("42"))
    assert isinstance(node, Literal)
    assert node.kind is LiteralKind.INT
    assert node.value == 42


def test_float_literal():
    node = expr(num("1.5"))
    assert node.kind is LiteralKind.FLOAT
    assert node.value == 1.5


def test_string_literal_strips_quotes():
    node = expr(tok(T.LITERAL_STRING, '"hi"'))
    assert node.kind is LiteralKind.STR
    assert node.value == "hi"


def test_string_without_boundaries_reports_error():
    p = make(tok(T.LITERAL_STRING, '"'))
    assert p.parse_expr() is None
    assert p.had_error
    assert p.diagnostics[0].message == "Missing string boundaries."


@pytest.mark.parametrize(
    "text, kind, value",
    [
        ("'a'", LiteralKind.CHAR, "a"),
        ("'\\n'", LiteralKind.CHAR, "\\n"),
        ("'ab'", LiteralKind.CHARS, "ab"),
    ],
)
def test_char_literals(text, kind, value):
    node = expr(tok(T.LITERAL_CHAR, text))
    assert node.kind is kind
    assert node.value == value


def test_empty_char_is_error():
    p = make(tok(T.LITERAL_CHAR, "''"))
    assert p.parse_simple_expr() is None
    assert p.diagnostics[0].message == "Empty character not allowed."


@pytest.mark.parametrize("kind, value", [(T.TRUE, True), (T.FALSE, False)])
def test_bool_literals(kind, value):
    node = expr(kind)
    assert node.kind is LiteralKind.BOOL
    assert node.value is value


def test_null_literal():
    node = expr(T.NULL)
    assert node.kind is LiteralKind.NULL


def test_var_ref_path():
    node = expr(ident("std"), T.COLON_COLON, ident("io"))
    assert isinstance(node, VarRef)
    assert node.path.parts() == ["std", "io"]


def test_binary_is_right_recursive():
    node = expr(ident("a"), T.PLUS, ident("b"), T.STAR, ident("c"))
    assert isinstance(node, BinaryOperation)
    assert node.op is BinaryOp.ADD
    assert node.lhs.path.name == "a"
    assert isinstance(node.rhs, BinaryOperation)
    assert node.rhs.op is BinaryOp.MULTIPLY
    assert node.rhs.rhs.path.name == "c"


def test_less_than_is_not_generic_call():
    p = make(ident("a"), T.LESS, ident("b"), T.SEMICOLON)
    node = p.parse_expr()
    assert isinstance(node, BinaryOperation)
    assert node.op is BinaryOp.LESS
    assert p._peek().type is T.SEMICOLON


@pytest.mark.parametrize("kind, inclusive", [(T.DOT_DOT, False), (T.DOT_DOT_EQUAL, True)])
def test_range(kind, inclusive):
    node = expr(num("0"), kind, ident("n"))
    assert isinstance(node, Range)
    assert node.inclusive is inclusive
    assert node.lhs.value == 0
    assert node.rhs.path.name == "n"


def test_function_call_args_and_ids():
    node = expr(ident("f"), T.LEFT_PAREN, ident("a"), T.COMMA, ident("b"), T.RIGHT_PAREN)
    assert isinstance(node, FunctionCall)
    assert node.function.path.name == "f"
    assert [arg.path.name for arg in node.args] == ["a", "b"]
    assert len({node.id, node.args[0].id, node.args[1].id, node.function.id}) == 4


def test_generic_function_call():
    node = expr(ident("f"), T.LESS, T.INT, T.GREATER, T.LEFT_PAREN, ident("x"), T.RIGHT_PAREN)
    assert isinstance(node, FunctionCall)
    assert [g.built_in for g in node.generic_args] == [BuiltInType.INT]
    assert node.args[0].path.name == "x"


def test_call_directives_copied_to_wrapper():
    directives = [Directive(DirectiveType.C_STR)]
    node = make(ident("f"), T.LEFT_PAREN, ident("x"), T.RIGHT_PAREN).parse_expr(directives)
    assert node.directives == directives
    assert node.function.directives == directives


def test_field_access_chain():
    node = expr(ident("a"), T.DOT, ident("b"), T.MINUS_GREATER, ident("c"))
    assert isinstance(node, GetField)
    assert node.name == "c"
    assert node.is_ptr_deref is True
    assert isinstance(node.root, GetField)
    assert node.root.name == "b"
    assert node.root.is_ptr_deref is False


def test_field_access_without_name_raises():
    with pytest.raises(ParseError, match="Expected field name"):
        expr(ident("a"), T.DOT, num("1"))


def test_index():
    node = expr(ident("a"), T.LEFT_BRACKET, num("1"), T.RIGHT_BRACKET)
    assert isinstance(node, Index)
    assert node.root.path.name == "a"
    assert node.value.value == 1


def test_postfix_plus_plus():
    node = expr(ident("i"), T.PLUS_PLUS)
    assert isinstance(node, PostfixOperation)
    assert node.op is PostfixOp.PLUS_PLUS
    assert node.left.path.name == "i"


def test_minus_minus_is_not_postfix():
    p = make(ident("i"), T.MINUS_MINUS)
    node = p.parse_expr()
    assert isinstance(node, VarRef)
    assert p.cursor == 1


@pytest.mark.parametrize(
    "kind, op",
    [
        (T.MINUS, UnaryOp.NUM_NEGATE),
        (T.BANG, UnaryOp.BOOL_NEGATE),
        (T.AMPERSAND, UnaryOp.PTR_REF),
        (T.STAR, UnaryOp.PTR_DEREF),
    ],
)
def test_unary(kind, op):
    node = expr(kind, ident("x"))
    assert isinstance(node, UnaryOperation)
    assert node.op is op
    assert node.right.path.name == "x"


def test_unary_takes_whole_expression():
    node = expr(T.MINUS, ident("a"), T.PLUS, ident("b"))
    assert isinstance(node, UnaryOperation)
    assert isinstance(node.right, BinaryOperation)
    assert node.right.op is BinaryOp.ADD


def test_sizeof():
    node = expr(T.SIZEOF, T.LEFT_PAREN, T.INT, T.RIGHT_PAREN)
    assert isinstance(node, SizeOf)
    assert node.type.built_in is BuiltInType.INT


def test_cast_to_built_in():
    node = expr(T.LEFT_PAREN, T.INT, T.RIGHT_PAREN, ident("x"))
    assert isinstance(node, Cast)
    assert node.type.built_in is BuiltInType.INT
    assert node.target.path.name == "x"


def test_cast_to_named_type():
    node = expr(T.LEFT_PAREN, ident("Foo"), T.RIGHT_PAREN, ident("bar"))
    assert isinstance(node, Cast)
    assert node.type.kind is TypeKind.STATIC_PATH
    assert node.type.path.name == "Foo"
    assert node.target.path.name == "bar"


def test_parenthesised_expression_is_tuple():
    p = make(T.LEFT_PAREN, ident("a"), T.RIGHT_PAREN, T.SEMICOLON)
    node = p.parse_expr()
    assert isinstance(node, TupleExpr)
    assert [e.path.name for e in node.exprs] == ["a"]
    assert p._peek().type is T.SEMICOLON


def test_struct_init():
    node = expr(
        T.DOT, T.LEFT_BRACE,
        T.DOT, ident("x"), T.EQUAL, num("1"), T.COMMA,
        T.DOT, ident("y"), T.EQUAL, num("2"),
        T.RIGHT_BRACE,
    )
    assert isinstance(node, StructInit)
    assert [(f.name, f.value.value) for f in node.fields] == [("x", 1), ("y", 2)]


def test_array_init():
    node = expr(
        T.LEFT_BRACKET, num("3"), T.RIGHT_BRACKET, T.LEFT_BRACE,
        num("1"), T.COMMA, num("2"), T.COMMA, num("3"),
        T.RIGHT_BRACE,
    )
    assert isinstance(node, ArrayInit)
    assert node.explicit_length.value == 3
    assert [e.value.value for e in node.elems] == [1, 2, 3]
    assert all(e.index is None for e in node.elems)


def test_empty_array_init():
    node = expr(T.LEFT_BRACKET, T.RIGHT_BRACKET, T.LEFT_BRACE, T.RIGHT_BRACE)
    assert isinstance(node, ArrayInit)
    assert node.elems == []
    assert node.explicit_length is None


def test_template_full_escapes_quotes_keeps_escapes():
    node = expr(tok(T.LITERAL_STRING_TEMPLATE_FULL, '`say "hi" \\n`'))
    assert isinstance(node, TemplateString)
    assert node.str_parts == ['`say \\"hi\\" \\n`']
    assert node.expr_parts == []


def test_template_with_expression():
    node = expr(
        tok(T.LITERAL_STRING_TEMPLATE_START, "`a ${"),
        ident("x"),
        tok(T.LITERAL_STRING_TEMPLATE_CONT, "}`"),
    )
    assert isinstance(node, TemplateString)
    assert node.str_parts == ["`a ${", "}`"]
    assert [e.path.name for e in node.expr_parts] == ["x"]
    assert len(node.str_parts) == len(node.expr_parts) + 1


def test_template_dangling_escape_raises():
    with pytest.raises(ParseError):
        expr(tok(T.LITERAL_STRING_TEMPLATE_FULL, "`a\\"))


def test_no_expression_leaves_cursor():
    p = make(T.SEMICOLON)
    assert p.parse_expr() is None
    assert p.cursor == 0


def test_cursor_stops_after_expression():
    p = make(ident("a"), T.PLUS, ident("b"), T.SEMICOLON)
    p.parse_expr()
    assert p.cursor == 3