## printopts — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from typing import Callable
from dataclasses import dataclass


# Matches C-locale isspace(), unlike str.isspace() which accepts Unicode spacing.
WHITESPACE = frozenset(' \t\n\v\f\r')

_ASCII_LOWER = str.maketrans('ABCDEFGHIJKLMNOPQRSTUVWXYZ', 'abcdefghijklmnopqrstuvwxyz')


def ascii_fold(name: str) -> str:
    """Locale-independent case folding, only touching ASCII letters."""
    return name.translate(_ASCII_LOWER)


FoldPolicy = Callable[[str], str]


@dataclass(frozen=True)
class Option:
    name: str
    value: str

    def __iter__(self):
        # Allows `name, value = option` unpacking.
        yield self.name
        yield self.value


def is_collection(value: str | None) -> bool:
    return isinstance(value, str) and len(value) >= 2 and value[0] == '{' and value[-1] == '}'
