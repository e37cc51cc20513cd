"""
  Lexer for calcvm source text.

- Streaming: `lex` is a generator of (token_type, token_text) tuples
- Token types:

    - keyword   -> var mut if else elseif while break continue fun return
    - name      -> identifiers
    - number    -> unsigned decimal integers (sign is a unary operator)
    - assign    -> = += -= *= /= %=
    - operator  -> + - * / % & | ~ < > <= >= == ~=
    - lparen rparen lbrace rbrace comma
    - bang      -> `!`, starts an output statement
    - semi      -> `;`, optional statement separator

- `#` comments run to end of line, `#[[ ... ]]` comments may span lines
"""

from __future__ import annotations

import re
from typing import Iterator

from calcvm.errors import CalcSyntaxError

KEYWORDS = frozenset(
    {"var", "mut", "if", "else", "elseif", "while", "break", "continue", "fun", "return"}
)

TOKEN_RE = re.compile(
    r"(?P<block_comment>#\[\[.*?\]\])"  # multi-line comment
    r"|(?P<comment>#[^\n]*)"  # single-line comment
    r"|(?P<number>\d+)"
    r"|(?P<name>[A-Za-z_][A-Za-z0-9_]*)"
    r"|(?P<assign>[+\-*/%]=|=(?!=))"  # assignment, but not ==
    r"|(?P<operator>==|~=|<=|>=|[+\-*/%<>~&|])"
    r"|(?P<lparen>\()"
    r"|(?P<rparen>\))"
    r"|(?P<lbrace>\{)"
    r"|(?P<rbrace>\})"
    r"|(?P<comma>,)"
    r"|(?P<bang>!)"
    r"|(?P<semi>;)",
    re.DOTALL,
)

_SKIPPED = ("block_comment", "comment")


def lex(source: str) -> Iterator[tuple[str, str]]:
    """Token generator: yields (token_type, token_text) tuples."""
    pos = 0
    n = len(source)

    while pos < n:
        if source[pos].isspace():
            pos += 1
            continue

        m = TOKEN_RE.match(source, pos)
        if not m:
            raise CalcSyntaxError(f"Unexpected character {source[pos]!r}", pos)
        kind = m.lastgroup
        text = m.group(kind)

        if kind == "comment" and text.startswith("#[["):
            raise CalcSyntaxError("Unterminated block comment", pos)
        pos = m.end()
        if kind in _SKIPPED:
            continue
        if kind == "name" and text in KEYWORDS:
            kind = "keyword"
        yield kind, text


def bracket_depth(source: str) -> int:
    """Net count of open `{`/`(` over closing ones, ignoring comments.

    Used by interactive hosts to decide when a statement group is complete;
    it looks at raw text only, never at the parse.
    """
    depth = 0
    pos = 0
    n = len(source)
    while pos < n:
        ch = source[pos]
        if ch == "#":
            if source.startswith("#[[", pos):
                end = source.find("]]", pos + 3)
                if end < 0:
                    # still inside a block comment: keep collecting input
                    return depth + 1
                pos = end + 2
                continue
            end = source.find("\n", pos)
            pos = n if end < 0 else end + 1
            continue
        if ch in "{(":
            depth += 1
        elif ch in "})":
            depth -= 1
        pos += 1
    return depth
