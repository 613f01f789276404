## printopts — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from .types import Option, ascii_fold, is_collection
from .errors import *
from .store import OptionStore
from .parser import iter_options, iter_strict_options, parse_collection
from .parser import parse_options as _parse_options


def add_option(name: str, value: str, store: OptionStore | None) -> int:
    if store is None: return 0
    return store.add(name, value)

def get_option(name: str, store: OptionStore | None) -> str | None:
    if store is None: return None
    return store.get(name)

def remove_option(name: str, store: OptionStore | None) -> int:
    if store is None: return 0
    return store.remove(name)

def parse_options(arg: str | None, store: OptionStore | None, *, strict: bool = False, verbosity: int = 0) -> int:
    return _parse_options(arg, store, strict=strict, verbosity=verbosity)

def free_options(store: OptionStore | None) -> None:
    if store is not None: store.free()
