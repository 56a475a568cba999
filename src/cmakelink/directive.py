"""Directive argument parsing.

A directive takes one or two string literals separated by a comma::

    "vendor/zlib"
    "vendor/zlib", "z"

The first literal is the native source directory, the second the optional
library target to build and link. Literal syntax is Python's, so escapes and
bytes literals behave as they do in Python source. The path may be a bytes
literal holding UTF-8; the library name must be a non-empty ``str`` literal,
so ``"vendor/zlib", ""`` is rejected with "library name must not be empty".
"""

from __future__ import annotations

import ast
import io
import tokenize
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from cmakelink.errors import MalformedDirectiveError
from cmakelink.models import BuildDirective

TokenKind = Literal["literal", "separator", "other"]

END_OF_INPUT = "<end of input>"

_SKIPPED_TOKENS = frozenset(
    {
        tokenize.NEWLINE,
        tokenize.NL,
        tokenize.ENDMARKER,
        tokenize.COMMENT,
        tokenize.INDENT,
        tokenize.DEDENT,
    }
)


@dataclass(frozen=True, slots=True)
class Token:
    kind: TokenKind
    text: str
    value: str | bytes | None = None

    @classmethod
    def literal(cls, value: str | bytes, text: str | None = None) -> Token:
        return cls(kind="literal", text=text if text is not None else repr(value), value=value)

    @classmethod
    def separator(cls) -> Token:
        return cls(kind="separator", text=",")

    @classmethod
    def other(cls, text: str) -> Token:
        return cls(kind="other", text=text)


def tokenize_directive(text: str) -> list[Token]:
    """Split directive source text into literal, separator and other tokens."""
    tokens: list[Token] = []
    try:
        for tok in tokenize.generate_tokens(io.StringIO(text.strip()).readline):
            if tok.type in _SKIPPED_TOKENS:
                continue
            if tok.type == tokenize.ERRORTOKEN:
                if not tok.string.strip():
                    continue
                raise SyntaxError(f"unexpected {tok.string!r} at column {tok.start[1]}")
            if tok.type == tokenize.OP and tok.string == ",":
                tokens.append(Token.separator())
            elif tok.type == tokenize.STRING:
                tokens.append(_string_token(tok.string))
            else:
                tokens.append(Token.other(tok.string))
    except (tokenize.TokenError, SyntaxError) as exc:
        raise MalformedDirectiveError(
            "invalid directive syntax",
            context={"directive": text, "error": str(exc)},
        ) from exc
    return tokens


def tokens_from_values(*values: object) -> list[Token]:
    """Build a token stream from host values, one argument per value."""
    tokens: list[Token] = []
    for index, value in enumerate(values):
        if index:
            tokens.append(Token.separator())
        if isinstance(value, (str, bytes)):
            tokens.append(Token.literal(value))
        else:
            tokens.append(Token.other(repr(value)))
    return tokens


def parse_directive(tokens: Iterable[Token]) -> BuildDirective:
    stream = list(tokens)

    source_path = _path_from_literal(_expect_literal(stream[0] if stream else None))
    rest = stream[1:]

    library_name: str | None = None
    if rest and rest[0].kind == "separator":
        library_token = rest[1] if len(rest) > 1 else None
        library_name = _library_from_literal(_expect_literal(library_token))
        rest = rest[2:]

    if rest:
        raise MalformedDirectiveError(
            "too many arguments",
            context={"unexpected": rest[0].text},
        )
    return BuildDirective(source_path=source_path, library_name=library_name)


def parse_directive_text(text: str) -> BuildDirective:
    return parse_directive(tokenize_directive(text))


def parse_arguments(arguments: str | Iterable[Token]) -> BuildDirective:
    """Parse directive text or an already tokenized argument stream."""
    if isinstance(arguments, str):
        return parse_directive_text(arguments)
    return parse_directive(arguments)


def _string_token(source: str) -> Token:
    try:
        value = ast.literal_eval(source)
    except (ValueError, SyntaxError):
        # f-strings and other non-constant string forms
        return Token.other(source)
    if not isinstance(value, (str, bytes)):
        return Token.other(source)
    return Token.literal(value, text=source)


def _expect_literal(token: Token | None) -> Token:
    if token is None:
        raise MalformedDirectiveError(f"expected string literal, got `{END_OF_INPUT}`")
    if token.kind != "literal" or not isinstance(token.value, (str, bytes)):
        raise MalformedDirectiveError(f"expected string literal, got `{token.text}`")
    return token


def _path_from_literal(token: Token) -> Path:
    if isinstance(token.value, bytes):
        try:
            value = token.value.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise MalformedDirectiveError(
                "the path is not valid",
                context={"literal": token.text, "error": str(exc)},
            ) from exc
    elif isinstance(token.value, str):
        value = token.value
    else:
        raise MalformedDirectiveError(f"expected string literal, got `{token.text}`")
    if "\x00" in value:
        raise MalformedDirectiveError(
            "the path is not valid",
            context={"literal": token.text, "error": "embedded NUL character"},
        )
    try:
        value.encode("utf-8")
    except UnicodeEncodeError as exc:
        raise MalformedDirectiveError(
            "the path is not valid",
            context={"literal": token.text, "error": str(exc)},
        ) from exc
    return Path(value)


def _library_from_literal(token: Token) -> str:
    if not isinstance(token.value, str):
        raise MalformedDirectiveError(f"expected string literal, got `{token.text}`")
    if not token.value:
        raise MalformedDirectiveError("library name must not be empty")
    return token.value
