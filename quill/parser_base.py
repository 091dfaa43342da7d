"""Token cursor, diagnostics and the type, path and directive grammar."""

from __future__ import annotations

import sys
from dataclasses import dataclass, replace
from typing import Iterable

from quill.ast import (
    BuiltInType,
    Directive,
    DirectiveType,
    ImportPath,
    ImportPathKind,
    ImportStaticPath,
    Node,
    PackagePath,
    StaticPath,
    Type,
    TypeKind,
)
from quill.tokens import Token, TokenType

_T = TokenType

_BUILT_IN_TYPES: dict[TokenType, BuiltInType] = {
    _T.VOID: BuiltInType.VOID,
    _T.BOOL: BuiltInType.BOOL,
    _T.CHAR: BuiltInType.CHAR,
    _T.INT: BuiltInType.INT,
    _T.INT8: BuiltInType.INT8,
    _T.INT16: BuiltInType.INT16,
    _T.INT32: BuiltInType.INT32,
    _T.INT64: BuiltInType.INT64,
    _T.UINT: BuiltInType.UINT,
    _T.UINT8: BuiltInType.UINT8,
    _T.UINT16: BuiltInType.UINT16,
    _T.UINT32: BuiltInType.UINT32,
    _T.UINT64: BuiltInType.UINT64,
    _T.FLOAT: BuiltInType.FLOAT,
    _T.FLOAT32: BuiltInType.FLOAT32,
    _T.FLOAT64: BuiltInType.FLOAT64,
}

_GENERIC_CLOSERS = frozenset({_T.GREATER, _T.GREATER_GREATER, _T.EOF})
_ARRAY_SIZE_TOKENS = frozenset(
    {_T.LITERAL_NUMBER, _T.LITERAL_CHAR, _T.TRUE, _T.FALSE}
)


class ParseError(Exception):
    """Raised when the token stream cannot be parsed any further."""

    def __init__(self, message: str, token: Token | None = None) -> None:
        self.message = message
        self.token = token
        if token is not None:
            super().__init__(f"[line {token.line}] {message}")
        else:
            super().__init__(message)


@dataclass(frozen=True)
class Diagnostic:
    """An error reported while parsing, tied to the offending token."""

    token: Token
    message: str

    @property
    def line(self) -> int:
        return self.token.line

    @property
    def location(self) -> str:
        if self.token.type is _T.EOF:
            return " at end"
        if self.token.type is _T.ERROR:
            return f" parsing broken token '{self.token.text}'"
        return f" at [{self.token.text}]"

    def __str__(self) -> str:
        return f"[line {self.line}] Error{self.location}: {self.message}"


def parse_directive_type(text: str) -> DirectiveType | None:
    """Return the directive spelled exactly ``text``, or None if unknown."""
    try:
        return DirectiveType(text)
    except ValueError:
        return None


class ParserBase:
    """Cursor over a token list with the grammar shared by all parser parts."""

    def __init__(self, tokens: Iterable[Token]) -> None:
        self.tokens: list[Token] = list(tokens)
        if not self.tokens or self.tokens[-1].type is not _T.EOF:
            line = self.tokens[-1].line if self.tokens else 1
            self.tokens.append(Token(_T.EOF, "", line))
        self.cursor_start = 0
        self.cursor = 0
        self.package: Node | None = None
        self.had_error = False
        self.panic_mode = False
        self.next_node_id = 0
        self.next_type_id = 0
        self.diagnostics: list[Diagnostic] = []

    # -- cursor ------------------------------------------------------------

    def _token_at(self, index: int) -> Token:
        return self.tokens[min(max(index, 0), len(self.tokens) - 1)]

    def _is_at_end(self) -> bool:
        return self._peek().type is _T.EOF

    def _peek(self) -> Token:
        return self._token_at(self.cursor)

    def _peek_prev(self) -> Token:
        return self._token_at(self.cursor - 1)

    def _peek_next(self) -> Token:
        if self._is_at_end():
            return self._peek()
        return self._token_at(self.cursor + 1)

    def _check(self, *types: TokenType) -> bool:
        return self._peek().type in types

    def _advance(self) -> Token:
        token = self._peek()
        self.cursor += 1
        return token

    def _new_node_id(self) -> int:
        node_id = self.next_node_id
        self.next_node_id += 1
        return node_id

    def _new_type_id(self) -> int:
        type_id = self.next_type_id
        self.next_type_id += 1
        return type_id

    # -- diagnostics -------------------------------------------------------

    def _error_at(self, token: Token, message: str) -> None:
        if self.panic_mode:
            return
        self.panic_mode = True
        diagnostic = Diagnostic(token, message)
        self.diagnostics.append(diagnostic)
        print(diagnostic, file=sys.stderr)
        self.had_error = True

    def _error(self, message: str) -> None:
        self._error_at(self._peek_prev(), message)

    def _error_at_current(self, message: str) -> None:
        self._error_at(self._peek(), message)

    def _consume(self, token_type: TokenType, message: str) -> bool:
        """Advance past a token of ``token_type``, or report an error and return False."""
        if self._peek().type is not token_type:
            self._error_at_current(message)
            return False
        self._advance()
        return True

    def _expect(self, token_type: TokenType, message: str) -> Token:
        """Advance past a token of ``token_type`` or raise ParseError."""
        token = self._peek()
        if not self._consume(token_type, message):
            raise ParseError(message, token)
        return token

    # -- directives --------------------------------------------------------

    def parse_directives(self) -> list[Directive]:
        """Parse any compiler directives at the cursor."""
        directives: list[Directive] = []
        while self._check(_T.COMPILER_DIRECTIVE):
            token = self._peek()
            directive_type = parse_directive_type(token.text)
            if directive_type is None:
                raise ParseError(f"Unknown directive: [{token.text}]", token)
            self._advance()

            if directive_type is DirectiveType.C_HEADER:
                self._expect(_T.LEFT_PAREN, "Expected '(' after @c_header.")
                include = self._expect(
                    _T.LITERAL_STRING,
                    'Expected string of c file name. ie. @c_header("stdio.h")',
                )
                self._expect(_T.RIGHT_PAREN, "Expected ')' after @c_header(...")
                directives.append(Directive(directive_type, include.text[1:-1]))
            else:
                directives.append(Directive(directive_type))
        return directives

    # -- types -------------------------------------------------------------

    def _parse_generic_args(self, into: list[Type], separator_message: str,
                            close_message: str) -> None:
        """Parse ``<T, U, ...>`` after the opening ``<`` has been consumed."""
        while not self._check(*_GENERIC_CLOSERS):
            arg = self.parse_type()
            if arg is None:
                raise ParseError("Expected generic type argument", self._peek())
            into.append(arg)
            if not self._check(*_GENERIC_CLOSERS):
                self._expect(_T.COMMA, separator_message)
        if self._check(_T.COMMA):
            self._advance()
        if self._check(_T.GREATER_GREATER):
            # Split '>>': this list closes here, the outer list takes the '>'.
            self.tokens[self.cursor] = replace(self._peek(), type=_T.GREATER)
        else:
            self._expect(_T.GREATER, close_message)

    def _parse_type_wrap(self, inner: Type) -> Type | None:
        t = self._peek()

        if t.type is _T.STAR:
            self._advance()
            wrapped = Type(id=self._new_type_id(), kind=TypeKind.POINTER, of=inner)
            return self._parse_type_wrap(wrapped)

        if t.type is _T.MUT:
            if self._peek_next().type is not _T.STAR:
                return inner
            self._advance()
            self._advance()
            wrapped = Type(id=self._new_type_id(), kind=TypeKind.MUT_POINTER, of=inner)
            return self._parse_type_wrap(wrapped)

        if t.type is _T.LESS:
            if inner.kind is not TypeKind.STATIC_PATH or inner.generic_args:
                raise ParseError("Generics are only allowed on named types", t)
            self._advance()
            self._parse_generic_args(
                inner.generic_args,
                "Expected ',' between generics",
                "Expected '>' to close generic type",
            )
            return self._parse_type_wrap(inner)

        if t.type is _T.LEFT_BRACKET:
            self._advance()
            explicit_size: Token | None = None
            size = self._peek()
            if size.type is not _T.RIGHT_BRACKET:
                if size.type not in _ARRAY_SIZE_TOKENS:
                    return None
                explicit_size = size
                self._advance()
            self._expect(_T.RIGHT_BRACKET, "Exptected ']'")
            wrapped = Type(
                id=self._new_type_id(),
                kind=TypeKind.ARRAY,
                of=inner,
                explicit_size=explicit_size,
            )
            return self._parse_type_wrap(wrapped)

        return inner

    def parse_type(self) -> Type | None:
        """Parse a type at the cursor, or return None if there is none."""
        directives = self.parse_directives()
        type_id = self._new_type_id()
        t = self._peek()

        if t.type is _T.IDENTIFIER:
            path = self.parse_static_path()
            parsed = Type(
                id=type_id,
                kind=TypeKind.STATIC_PATH,
                directives=directives,
                path=path,
            )
            if self._check(_T.LESS):
                self._advance()
                self._parse_generic_args(
                    parsed.generic_args,
                    "Expected ',' between generic args",
                    "Expected '>' to close generic args",
                )
            return self._parse_type_wrap(parsed)

        built_in = _BUILT_IN_TYPES.get(t.type)
        if built_in is None:
            return None
        self._advance()
        parsed = Type(
            id=type_id,
            kind=TypeKind.BUILT_IN,
            directives=directives,
            built_in=built_in,
        )
        return self._parse_type_wrap(parsed)

    # -- paths -------------------------------------------------------------

    def parse_static_path(self) -> StaticPath | None:
        """Parse ``a::b::c``, or return None if no identifier is at the cursor."""
        if not self._check(_T.IDENTIFIER):
            return None
        path = StaticPath(self._advance().text)
        if self._check(_T.COLON_COLON):
            self._advance()
            path.child = self.parse_static_path()
        return path

    def parse_package_path(self) -> PackagePath | None:
        """Parse ``a/b/c``, or return None if no identifier is at the cursor."""
        if not self._check(_T.IDENTIFIER):
            return None
        path = PackagePath(self._advance().text)
        if self._check(_T.SLASH):
            self._advance()
            path.child = self.parse_package_path()
        return path

    def _parse_import_static_path(self) -> ImportStaticPath | None:
        if self._check(_T.STAR):
            self._advance()
            return ImportStaticPath(None)
        if not self._check(_T.IDENTIFIER):
            return None
        path = ImportStaticPath(self._advance().text)
        if self._check(_T.COLON_COLON):
            self._advance()
            path.child = self._parse_import_static_path()
        return path

    def parse_import_path(self) -> ImportPath | None:
        """Parse an import target such as ``std/io::println`` or ``std::*``."""
        if not self._check(_T.IDENTIFIER):
            return None
        name = self._advance().text

        delim = self._peek()
        if delim.type is _T.COLON_COLON:
            self._advance()
            if not self._check(_T.IDENTIFIER, _T.STAR):
                self._expect(_T.IDENTIFIER, "Exptected ident after '::' in import.")
            return ImportPath(ImportPathKind.FILE, name, self._parse_import_static_path())

        if delim.type is not _T.SLASH:
            return ImportPath(ImportPathKind.FILE, name)
        self._advance()

        if not self._consume(_T.IDENTIFIER, "Expected ident after '/' in import."):
            return ImportPath(ImportPathKind.FILE, name)
        self.cursor -= 1

        return ImportPath(ImportPathKind.DIR, name, self.parse_import_path())