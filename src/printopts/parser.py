## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import os
import re
import sys
import functools
from typing import Iterator

import lark
from .types import WHITESPACE, ascii_fold, is_collection
from .store import OptionStore
from .errors import OptionError, OptionParseError, OptionIncompleteParse


# Strict grammar; whitespace is significant inside collections so it's matched explicitly, never ignored.
GRAMMAR = r"""start: _WS? (pair (_WS pair)* _WS?)?
pair: NAME (EQUALS value?)?
?value: QUOTED | BARE | collection_list
collection_list: collection (COMMA collection)*
collection: LBRACE (CHUNK | collection)* RBRACE

// TOKENS
NAME: /[^ \t\n\v\f\r=]+/
EQUALS: "="
QUOTED: /"(?:[^"\\]|\\.)*"/s | /'(?:[^'\\]|\\.)*'/s
BARE: /(?:\\.|\\$|[^ \t\n\v\f\r\\'"{])(?:\\.|\\$|[^ \t\n\v\f\r\\])*/s
CHUNK: /(?:\\.|[^{}\\])+/s
COMMA: ","
LBRACE: "{"
RBRACE: "}"

// WHITESPACE
_WS: /[ \t\n\v\f\r]+/
"""

_ESCAPE_RE = re.compile(r'\\(.)', re.S)
_QUOTES = ('"', "'")


def _unescape(text: str) -> str:
    return _ESCAPE_RE.sub(r'\1', text)

def _boolean_pair(name: str) -> tuple[str, str]:
    if ascii_fold(name[:2]) == 'no':
        return name[2:], 'false'
    return name, 'true'


# Tolerant scanner ─────────────────────────────────────────────────────────────────────────────
def _skip_whitespace(text: str, pos: int) -> int:
    while pos < len(text) and text[pos] in WHITESPACE:
        pos += 1
    return pos

def _scan_until(text: str, pos: int, stop) -> tuple[str, int]:
    """Collect characters until `stop(ch)` holds, collapsing each backslash escape to its character."""
    chars, end = [], len(text)
    while pos < end and not stop(text[pos]):
        if text[pos] == '\\' and pos + 1 < end:
            pos += 1
        chars.append(text[pos])
        pos += 1
    return ''.join(chars), pos

def _scan_quoted(text: str, pos: int) -> tuple[str, int]:
    quote = text[pos]
    value, pos = _scan_until(text, pos + 1, lambda ch: ch == quote)
    # Closing quote is consumed; a missing one means the value ran to the end.
    return value, min(pos + 1, len(text))

def _scan_collection(text: str, pos: int) -> tuple[str, int]:
    chars, depth, end = ['{'], 1, len(text)
    pos += 1
    while pos < end:
        ch = text[pos]
        if ch == '\\' and pos + 1 < end:
            pos += 1
            chars.append(text[pos])
        else:
            chars.append(ch)
            if ch == '{':
                depth += 1
            elif ch == '}':
                depth -= 1
                # `{...},{...}` keeps going as one value.
                if depth == 0 and not text.startswith(',', pos + 1):
                    return ''.join(chars), pos + 1
        pos += 1
    return ''.join(chars), pos

def _scan_value(text: str, pos: int) -> tuple[str, int]:
    if pos >= len(text): return '', pos
    if text[pos] in _QUOTES:
        return _scan_quoted(text, pos)
    if text[pos] == '{':
        return _scan_collection(text, pos)
    return _scan_until(text, pos, lambda ch: ch in WHITESPACE)


def iter_options(arg: str | None) -> Iterator[tuple[str, str]]:
    """Tolerant tokenizer: yields (name, value) pairs from one argument string.

    Never raises on malformed input.  An empty name (e.g. a stray `=`) stops the scan,
    and unterminated quotes or braces run to the end of the string.
    """
    if arg is None: return
    text = arg
    pos = _skip_whitespace(text, 0)

    while pos < len(text):
        start = pos
        while pos < len(text) and text[pos] not in WHITESPACE and text[pos] != '=':
            pos += 1
        if pos == start: break
        name = text[start:pos]
        pos = _skip_whitespace(text, pos)

        if pos >= len(text) or text[pos] != '=':
            yield _boolean_pair(name)
            continue

        value, pos = _scan_value(text, pos + 1)
        pos = _skip_whitespace(text, pos)
        yield name, value


# Strict parser ────────────────────────────────────────────────────────────────────────────────
@functools.cache
def _strict_parser() -> lark.Lark:
    return lark.Lark(GRAMMAR, start='start', parser="earley", lexer="dynamic", propagate_positions=True)


def _line_and_column(source: str, pos: int) -> tuple[int, int]:
    line = source.count('\n', 0, pos) + 1
    return line, pos - (source.rfind('\n', 0, pos) + 1) + 1

def iter_strict_options(arg: str | None) -> Iterator[tuple[str, str]]:
    """Strict tokenizer: same pairs as `iter_options` on well-formed input, otherwise raises.

    Raises `OptionIncompleteParse` when input ends inside a quote or collection, and
    `OptionParseError` for any other malformation.
    """
    if arg is None: return

    def _is_token(node, type_: str) -> bool: return isinstance(node, lark.Token) and node.type == type_
    def _is_tree(node, data_: str) -> bool: return isinstance(node, lark.Tree) and node.data == data_

    def _value(node) -> str:
        if _is_token(node, 'QUOTED'):
            return _unescape(node.value[1:-1])
        if _is_token(node, 'BARE'):
            return _unescape(node.value)
        # Only `collection_list` remains by grammar.
        return _unescape(arg[node.meta.start_pos:node.meta.end_pos])

    try:
        tree = _strict_parser().parse(arg)
    except lark.exceptions.UnexpectedInput as exc:
        if isinstance(exc, lark.exceptions.UnexpectedEOF):
            (line, column), token, error_class = _line_and_column(arg, len(arg)), '', OptionIncompleteParse
        else:
            char = getattr(exc, 'char', '') or ''
            line, column, token = exc.line, exc.column, char
            # An opening quote only fails to lex when its closing quote is missing.
            error_class = OptionIncompleteParse if char in _QUOTES else OptionParseError
        raise error_class(str(exc), source=arg, line=line, column=column, token=token) from None

    for node in tree.children:
        if not _is_tree(node, 'pair'): continue
        children = list(node.children)
        name = children[0].value
        if len(children) == 1:
            yield _boolean_pair(name)
        else:
            yield name, (_value(children[2]) if len(children) > 2 else '')


# Store entry points ───────────────────────────────────────────────────────────────────────────
def parse_options(arg: str | None, store: OptionStore | None, *, strict: bool = False, verbosity: int = 0) -> int:
    """Parse one argument string into `store`, returning its new entry count."""
    if store is None: return 0
    if arg is None: return len(store)

    # Strict parsing is all-or-nothing: grammar errors surface before the store changes,
    # and a rejected add restores every entry as it was.
    pairs = list(iter_strict_options(arg)) if strict else iter_options(arg)
    trace = verbosity > 0 or bool(os.environ.get('PRINTOPTS_DEBUG'))
    checkpoint = store.checkpoint() if strict else None
    try:
        for name, value in pairs:
            count = store.add(name, value)
            if trace: print(f"\033[90m[{count}]\033[0m {name} \033[36m←\033[0m {value!r}", file=sys.stderr)
    except OptionError:
        if checkpoint is not None: store.rollback(checkpoint)
        raise
    return len(store)


def parse_collection(value: str, store: OptionStore | None = None, *, strict: bool = False, verbosity: int = 0) -> OptionStore:
    """Expand the inner text of a `{...}` value into a store; other values leave it untouched."""
    store = OptionStore() if store is None else store
    if is_collection(value):
        parse_options(value[1:-1], store, strict=strict, verbosity=verbosity)
    return store


def format_parse_error_context(source: str, line: int, column: int, token_value: str, label: str = '<ARG>') -> str:
    lines = source.splitlines() or ['']
    line = max(1, min(line, len(lines)))
    start_line, end_line = max(0, line - 3), min(len(lines), line + 2)
    result = [f"\033[97m  Argument {label}, line {line}, column {column}\033[0m"]

    for i in range(start_line, end_line):
        line_content = lines[i]
        line_color = '\033[90m'
        if i+1 == line:
            line_color = '\033[97m'
            if column > 0 and column <= len(line_content):
                width = max(1, len(token_value))
                line_content = (
                    line_content[:column-1] +
                    f"\033[48;5;30m\033[1;97m{line_content[column-1:column+width-1]}\033[0m" +
                    line_content[column+width-1:]
                )
            else:
                line_content += "\033[48;5;30m \033[0m"
        result.append(f"{line_color}{i+1:>5} |\033[0m {line_content}")
    return '\n' + '\n'.join(result) + '\n'
