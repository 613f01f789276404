## printopts — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from typing import Iterable, Iterator
from dataclasses import replace

from .types import Option, FoldPolicy, ascii_fold
from .errors import OptionNameError, OptionValueError, OptionStorageError


class OptionStore:
    """Ordered name/value collection with case-insensitive names.

    Adding a name that already exists overwrites its value in place, keeping the
    original spelling and position.  By default invalid input and growth failures
    are silent no-ops that return the unchanged count; pass `strict=True` to have
    them raised as `OptionError` subclasses instead.
    """

    def __init__(self, entries: Iterable[tuple[str, str]] | dict | None = None, *,
                 fold: FoldPolicy = ascii_fold, max_options: int | None = None, strict: bool = False):
        self._entries: list[Option] = []
        self.fold = fold
        self.max_options = max_options
        self.strict = strict

        if isinstance(entries, dict): entries = entries.items()
        for name, value in (entries or ()):
            self.add(name, value)

    def _index(self, name: str) -> int | None:
        key = self.fold(name)
        for i, entry in enumerate(self._entries):
            if self.fold(entry.name) == key:
                return i
        return None

    def _reject(self, error_class, message: str, name, value) -> int:
        if self.strict:
            raise error_class(message, option_name=name, option_value=value)
        return len(self._entries)

    # Mutation ────────────────────────────────────────────────────────────────────────────────
    def add(self, name: str, value: str) -> int:
        if not isinstance(name, str) or not name:
            return self._reject(OptionNameError, f"Option name must be a non-empty string, got {name!r}.", name, value)
        if not isinstance(value, str):
            return self._reject(OptionValueError, f"Option `{name}` needs a string value, got {type(value).__name__}.", name, value)

        if (i := self._index(name)) is not None:
            self._entries[i] = replace(self._entries[i], value=value)
            return len(self._entries)

        count = len(self._entries)
        try:
            if self.max_options is not None and count >= self.max_options:
                raise MemoryError(f"store is limited to {self.max_options} option(s)")
            self._entries.append(Option(name, value))
        except MemoryError as exc:
            if self.strict:
                raise OptionStorageError(f"Cannot grow store to add `{name}`: {exc}",
                                         option_name=name, option_value=value, capacity=self.max_options) from None
            return count
        return count + 1

    def remove(self, name: str) -> int:
        if not isinstance(name, str) or not self._entries:
            return len(self._entries)
        if (i := self._index(name)) is not None:
            del self._entries[i]
        return len(self._entries)

    def free(self) -> None:
        self._entries.clear()

    def checkpoint(self) -> tuple[Option, ...]:
        return tuple(self._entries)

    def rollback(self, checkpoint: tuple[Option, ...]) -> None:
        self._entries[:] = checkpoint

    # Lookup ──────────────────────────────────────────────────────────────────────────────────
    def get(self, name: str, default: str | None = None) -> str | None:
        if not isinstance(name, str) or not self._entries:
            return default
        i = self._index(name)
        return default if i is None else self._entries[i].value

    def __contains__(self, name) -> bool:
        return isinstance(name, str) and self._index(name) is not None

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Option]:
        return iter(tuple(self._entries))

    def __repr__(self):
        return f"OptionStore({[tuple(o) for o in self._entries]!r})"

    def names(self) -> list[str]:
        return [o.name for o in self._entries]

    def items(self) -> list[tuple[str, str]]:
        return [(o.name, o.value) for o in self._entries]

    def to_dict(self) -> dict[str, str]:
        return dict(self.items())
