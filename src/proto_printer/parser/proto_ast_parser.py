"""Recursive descent parser for protobuf (.proto) files.

Consumes a token stream from proto_tokenizer and produces proto AST nodes.
"""

from __future__ import annotations

from typing import List

from .proto_ast import ProtoEnum, ProtoEnumValue, ProtoField, ProtoFile, ProtoMessage
from .proto_tokenizer import ProtoToken, ProtoTokenType

# Keywords that may still appear as field or type names ("string message = 1;").
_NAME_TOKENS = {
    ProtoTokenType.IDENT,
    ProtoTokenType.MESSAGE,
    ProtoTokenType.ENUM,
    ProtoTokenType.ONEOF,
    ProtoTokenType.MAP,
    ProtoTokenType.OPTION,
    ProtoTokenType.PACKAGE,
    ProtoTokenType.IMPORT,
    ProtoTokenType.SYNTAX,
    ProtoTokenType.EDITION,
    ProtoTokenType.RESERVED,
    ProtoTokenType.EXTENSIONS,
}

_LABELS = (
    ProtoTokenType.REPEATED,
    ProtoTokenType.OPTIONAL,
    ProtoTokenType.REQUIRED,
)

# Blocks introduced by a plain identifier that carry no message fields.
_SKIPPED_BLOCKS = {"service", "extend"}


class ProtoParseError(Exception):
    """Raised when the parser encounters unexpected input."""

    def __init__(self, message: str, token: ProtoToken | None = None):
        if token:
            super().__init__(f"Line {token.line}:{token.col}: {message}")
        else:
            super().__init__(message)


class ProtoParser:
    """Recursive descent parser for .proto files."""

    def __init__(self, tokens: List[ProtoToken]):
        self._tokens = tokens
        self._pos = 0

    # -- public API --

    def parse(self) -> ProtoFile:
        """Parse the full token stream into a ProtoFile AST."""
        proto_file = ProtoFile()

        while not self._at_end():
            tok = self._peek()
            tt = tok.type

            if tt == ProtoTokenType.MESSAGE:
                proto_file.messages.append(self._parse_message())
            elif tt == ProtoTokenType.ENUM:
                proto_file.enums.append(self._parse_enum())
            elif tt == ProtoTokenType.PACKAGE:
                self._advance()
                proto_file.package = self._expect(ProtoTokenType.IDENT).value
                self._expect(ProtoTokenType.SEMICOLON)
            elif tt in (
                ProtoTokenType.SYNTAX,
                ProtoTokenType.EDITION,
                ProtoTokenType.OPTION,
                ProtoTokenType.IMPORT,
            ):
                self._skip_statement()
            elif tt == ProtoTokenType.IDENT and tok.value in _SKIPPED_BLOCKS:
                self._skip_block()
            else:
                self._advance()

        return proto_file

    # -- message parsing --

    def _parse_message(self) -> ProtoMessage:
        """Parse: MESSAGE IDENT LBRACE body RBRACE"""
        self._expect(ProtoTokenType.MESSAGE)
        name_tok = self._expect(ProtoTokenType.IDENT)
        self._expect(ProtoTokenType.LBRACE)
        message = ProtoMessage(name=name_tok.value)
        self._parse_message_body(message)
        self._expect(ProtoTokenType.RBRACE)
        return message

    def _parse_message_body(self, message: ProtoMessage) -> None:
        """Parse the contents between { and } of a message (or oneof)."""
        while not self._at_end() and self._peek().type != ProtoTokenType.RBRACE:
            tok = self._peek()
            tt = tok.type

            if tt == ProtoTokenType.MESSAGE and self._starts_block():
                message.nested_messages.append(self._parse_message())
            elif tt == ProtoTokenType.ENUM and self._starts_block():
                message.enums.append(self._parse_enum())
            elif tt == ProtoTokenType.ONEOF and self._starts_block():
                # oneof members are ordinary singular fields of the message
                self._advance()
                self._advance()
                self._expect(ProtoTokenType.LBRACE)
                self._parse_message_body(message)
                self._expect(ProtoTokenType.RBRACE)
            elif tt == ProtoTokenType.MAP and self._peek(1).type == ProtoTokenType.LANGLE:
                message.fields.append(self._parse_map_field())
            elif tt in _LABELS:
                label = self._advance()
                message.fields.append(
                    self._parse_field(is_repeated=label.type == ProtoTokenType.REPEATED)
                )
            elif tt in (
                ProtoTokenType.OPTION,
                ProtoTokenType.RESERVED,
                ProtoTokenType.EXTENSIONS,
            ):
                self._skip_statement()
            elif tt == ProtoTokenType.IDENT and tok.value in _SKIPPED_BLOCKS:
                self._skip_block()
            elif tt in _NAME_TOKENS:
                message.fields.append(self._parse_field(is_repeated=False))
            else:
                self._advance()

    def _parse_field(self, *, is_repeated: bool) -> ProtoField:
        """Parse: Type name EQUALS NUMBER [options] SEMICOLON (label already consumed)"""
        type_tok = self._expect_name()
        name_tok = self._expect_name()
        number = self._parse_field_number()

        return ProtoField(
            type_name=type_tok.value,
            field_name=name_tok.value,
            field_number=number,
            is_repeated=is_repeated,
        )

    def _parse_map_field(self) -> ProtoField:
        """Parse: MAP LANGLE KeyType COMMA ValueType RANGLE name EQUALS NUMBER SEMICOLON"""
        self._expect(ProtoTokenType.MAP)
        self._expect(ProtoTokenType.LANGLE)
        key_tok = self._expect_name()
        self._expect(ProtoTokenType.COMMA)
        value_tok = self._expect_name()
        self._expect(ProtoTokenType.RANGLE)
        name_tok = self._expect_name()
        number = self._parse_field_number()

        return ProtoField(
            type_name="map",
            field_name=name_tok.value,
            field_number=number,
            is_repeated=True,
            key_type=key_tok.value,
            value_type=value_tok.value,
        )

    def _parse_field_number(self) -> int:
        self._expect(ProtoTokenType.EQUALS)
        num_tok = self._expect(ProtoTokenType.NUMBER)
        self._skip_options()
        self._expect(ProtoTokenType.SEMICOLON)
        return _parse_int(num_tok)

    # -- enum parsing --

    def _parse_enum(self) -> ProtoEnum:
        """Parse: ENUM IDENT LBRACE { IDENT EQUALS NUMBER [options] SEMICOLON } RBRACE"""
        self._expect(ProtoTokenType.ENUM)
        name_tok = self._expect(ProtoTokenType.IDENT)
        self._expect(ProtoTokenType.LBRACE)
        enum = ProtoEnum(name=name_tok.value)

        while not self._at_end() and self._peek().type != ProtoTokenType.RBRACE:
            tt = self._peek().type
            if tt in (ProtoTokenType.OPTION, ProtoTokenType.RESERVED):
                self._skip_statement()
            elif tt == ProtoTokenType.SEMICOLON:
                self._advance()
            else:
                value_tok = self._expect_name()
                self._expect(ProtoTokenType.EQUALS)
                num_tok = self._expect(ProtoTokenType.NUMBER)
                self._skip_options()
                self._expect(ProtoTokenType.SEMICOLON)
                enum.values.append(ProtoEnumValue(value_tok.value, _parse_int(num_tok)))

        self._expect(ProtoTokenType.RBRACE)
        return enum

    # -- skip helpers --

    def _skip_statement(self) -> None:
        """Skip tokens until (and including) the next semicolon."""
        while not self._at_end():
            tok = self._advance()
            if tok.type == ProtoTokenType.SEMICOLON:
                return

    def _skip_block(self) -> None:
        """Skip a keyword + IDENT + braced block (e.g. service, extend)."""
        self._advance()  # keyword
        # Skip until opening brace
        while not self._at_end() and self._peek().type != ProtoTokenType.LBRACE:
            self._advance()
        if not self._at_end():
            self._advance()  # consume LBRACE
        depth = 1
        while not self._at_end() and depth > 0:
            tok = self._advance()
            if tok.type == ProtoTokenType.LBRACE:
                depth += 1
            elif tok.type == ProtoTokenType.RBRACE:
                depth -= 1

    def _skip_options(self) -> None:
        """Skip a bracketed option list: [default = 1, deprecated = true]"""
        if self._peek().type != ProtoTokenType.LBRACKET:
            return
        while not self._at_end():
            tok = self._advance()
            if tok.type == ProtoTokenType.RBRACKET:
                return

    # -- token helpers --

    def _peek(self, offset: int = 0) -> ProtoToken:
        idx = min(self._pos + offset, len(self._tokens) - 1)
        return self._tokens[idx]

    def _advance(self) -> ProtoToken:
        tok = self._tokens[self._pos]
        if tok.type != ProtoTokenType.EOF:
            self._pos += 1
        return tok

    def _expect(self, expected: ProtoTokenType) -> ProtoToken:
        tok = self._peek()
        if tok.type != expected:
            raise ProtoParseError(
                f"Expected {expected.name}, got {tok.type.name} ({tok.value!r})",
                tok,
            )
        return self._advance()

    def _expect_name(self) -> ProtoToken:
        tok = self._peek()
        if tok.type not in _NAME_TOKENS:
            raise ProtoParseError(
                f"Expected a name, got {tok.type.name} ({tok.value!r})",
                tok,
            )
        return self._advance()

    def _starts_block(self) -> bool:
        """True for KEYWORD IDENT LBRACE, as opposed to a field named like a keyword."""
        return (
            self._peek(1).type == ProtoTokenType.IDENT
            and self._peek(2).type == ProtoTokenType.LBRACE
        )

    def _at_end(self) -> bool:
        return self._tokens[self._pos].type == ProtoTokenType.EOF


def _parse_int(tok: ProtoToken) -> int:
    try:
        return int(tok.value, 0)
    except ValueError:
        raise ProtoParseError(f"Invalid number {tok.value!r}", tok) from None

