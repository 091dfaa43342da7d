"""Token kinds and tokens produced by the lexer and consumed by the parser."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class TokenType(Enum):
    """Every kind of token the lexer can produce."""

    IDENTIFIER = auto()
    COMPILER_DIRECTIVE = auto()

    # single-character tokens
    LEFT_PAREN = auto()
    RIGHT_PAREN = auto()
    LEFT_BRACE = auto()
    RIGHT_BRACE = auto()
    LEFT_BRACKET = auto()
    RIGHT_BRACKET = auto()
    COMMA = auto()
    TILDE = auto()
    SEMICOLON = auto()
    QUESTION = auto()
    AT = auto()
    PERCENT = auto()

    # one or more character tokens
    BANG = auto()
    BANG_EQUAL = auto()
    EQUAL = auto()
    EQUAL_EQUAL = auto()
    PLUS = auto()
    PLUS_EQUAL = auto()
    PLUS_PLUS = auto()
    MINUS = auto()
    MINUS_EQUAL = auto()
    MINUS_GREATER = auto()
    MINUS_MINUS = auto()
    MINUS_MINUS_MINUS = auto()
    SLASH = auto()
    SLASH_EQUAL = auto()
    STAR = auto()
    STAR_EQUAL = auto()
    CARET = auto()
    CARET_EQUAL = auto()
    GREATER = auto()
    GREATER_EQUAL = auto()
    GREATER_GREATER = auto()
    LESS = auto()
    LESS_EQUAL = auto()
    LESS_LESS = auto()
    PIPE = auto()
    PIPE_EQUAL = auto()
    PIPE_PIPE = auto()
    AMPERSAND = auto()
    AMPERSAND_EQUAL = auto()
    AMPERSAND_AMPERSAND = auto()
    COLON = auto()
    COLON_COLON = auto()
    DOT = auto()
    DOT_DOT = auto()
    DOT_DOT_EQUAL = auto()

    # literals
    LITERAL_NUMBER = auto()
    LITERAL_CHAR = auto()
    LITERAL_STRING = auto()
    LITERAL_STRING_TEMPLATE_START = auto()
    LITERAL_STRING_TEMPLATE_CONT = auto()
    LITERAL_STRING_TEMPLATE_FULL = auto()

    # keywords
    BREAK = auto()
    CONTINUE = auto()
    CRASH = auto()
    ELSE = auto()
    ENUM = auto()
    FALSE = auto()
    FOR = auto()
    FOREACH = auto()
    GLOBALTAG = auto()
    IF = auto()
    IMPORT = auto()
    IN = auto()
    LET = auto()
    MUT = auto()
    NULL = auto()
    PACKAGE = auto()
    RETURN = auto()
    SIZEOF = auto()
    STATIC = auto()
    STRUCT = auto()
    SWITCH = auto()
    TRUE = auto()
    TYPEDEF = auto()
    UNION = auto()
    WHILE = auto()
    DEFER = auto()

    # built-in types
    VOID = auto()
    BOOL = auto()
    CHAR = auto()
    INT = auto()
    INT8 = auto()
    INT16 = auto()
    INT32 = auto()
    INT64 = auto()
    UINT = auto()
    UINT8 = auto()
    UINT16 = auto()
    UINT32 = auto()
    UINT64 = auto()
    FLOAT = auto()
    FLOAT32 = auto()
    FLOAT64 = auto()

    # ephemeral
    ERROR = auto()
    EOF = auto()


@dataclass(frozen=True)
class Token:
    """A single lexeme with its kind and the line it starts on."""

    type: TokenType
    text: str
    line: int = 1


_T = TokenType

_LABELS: dict[TokenType, str] = {
    _T.IDENTIFIER: "identifier",
    _T.COMPILER_DIRECTIVE: "compiler_directive",
    _T.LEFT_PAREN: "(",
    _T.RIGHT_PAREN: ")",
    _T.LEFT_BRACE: "{",
    _T.RIGHT_BRACE: "}",
    _T.LEFT_BRACKET: "[",
    _T.RIGHT_BRACKET: "]",
    _T.COMMA: ",",
    _T.DOT: ".",
    _T.DOT_DOT: "..",
    _T.DOT_DOT_EQUAL: "..=",
    _T.TILDE: "~",
    _T.SEMICOLON: ";",
    _T.QUESTION: "?",
    _T.AT: "@",
    _T.PERCENT: "%",
    _T.BANG: "!",
    _T.BANG_EQUAL: "!=",
    _T.EQUAL: "=",
    _T.EQUAL_EQUAL: "==",
    _T.PLUS: "+",
    _T.PLUS_EQUAL: "+=",
    _T.PLUS_PLUS: "++",
    _T.MINUS: "-",
    _T.MINUS_EQUAL: "-=",
    _T.MINUS_GREATER: "->",
    _T.MINUS_MINUS: "--",
    _T.MINUS_MINUS_MINUS: "---",
    _T.SLASH: "/",
    _T.SLASH_EQUAL: "/=",
    _T.STAR: "*",
    _T.STAR_EQUAL: "*=",
    _T.CARET: "^",
    _T.CARET_EQUAL: "^=",
    _T.GREATER: ">",
    _T.GREATER_EQUAL: ">=",
    _T.GREATER_GREATER: ">>",
    _T.LESS: "<",
    _T.LESS_EQUAL: "<=",
    _T.LESS_LESS: "<<",
    _T.PIPE: "|",
    _T.PIPE_EQUAL: "|=",
    _T.PIPE_PIPE: "||",
    _T.AMPERSAND: "&",
    _T.AMPERSAND_EQUAL: "&=",
    _T.AMPERSAND_AMPERSAND: "&&",
    _T.COLON: ":",
    _T.COLON_COLON: "::",
    _T.LITERAL_NUMBER: "literal_number",
    _T.LITERAL_CHAR: "literal_char",
    _T.LITERAL_STRING: "literal_string",
    _T.LITERAL_STRING_TEMPLATE_START: "literal_string_template_start",
    _T.LITERAL_STRING_TEMPLATE_CONT: "literal_string_template_cont",
    _T.LITERAL_STRING_TEMPLATE_FULL: "literal_string_template_full",
    _T.BREAK: "break",
    _T.CONTINUE: "continue",
    _T.CRASH: "CRASH",
    _T.ELSE: "else",
    _T.ENUM: "enum",
    _T.FALSE: "false",
    _T.FOR: "for",
    _T.FOREACH: "foreach",
    _T.GLOBALTAG: "globaltag",
    _T.IF: "if",
    _T.IMPORT: "import",
    _T.IN: "in",
    _T.LET: "let",
    _T.MUT: "mut",
    _T.NULL: "null",
    _T.PACKAGE: "package",
    _T.RETURN: "return",
    _T.SIZEOF: "sizeof",
    _T.STATIC: "static",
    _T.STRUCT: "struct",
    _T.SWITCH: "switch",
    _T.TRUE: "true",
    _T.TYPEDEF: "typedef",
    _T.UNION: "union",
    _T.WHILE: "while",
    _T.DEFER: "defer",
    _T.VOID: "void",
    _T.BOOL: "bool",
    _T.CHAR: "char",
    _T.INT: "int",
    _T.INT8: "int8",
    _T.INT16: "int16",
    _T.INT32: "int32",
    _T.INT64: "int64",
    _T.UINT: "uint",
    _T.UINT8: "uint8",
    _T.UINT16: "uint16",
    _T.UINT32: "uint32",
    _T.UINT64: "uint64",
    _T.FLOAT: "float",
    _T.FLOAT32: "float32",
    _T.FLOAT64: "float64",
    _T.ERROR: "<error>",
    _T.EOF: "<eof>",
}


def token_type_label(token_type: TokenType) -> str:
    """Return the human-readable label used when reporting a token kind."""
    return _LABELS[token_type]