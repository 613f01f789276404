## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import re
import sys

from .types import is_collection
from .store import OptionStore
from .parser import parse_collection


def write_without_ansi(write_fn):
    """Wrapper function that strips ANSI codes before calling the original writer."""
    ansi_re = re.compile(r'\033\[[0-9;]*m')
    return lambda text: write_fn(ansi_re.sub('', text))


def format_option(name: str, value: str, name_width: int = 0, indent=0) -> str:
    return ' ' * indent + f"\033[97m{name:<{name_width}}\033[0m  \033[36m{value}\033[0m"

def format_store(store: OptionStore, indent=0, expand: bool = False) -> list[str]:
    """Render one line per option, recursing into collection values when `expand` is set."""
    name_width = max((len(o.name) for o in store), default=0)
    lines = []
    for option in store:
        if expand and is_collection(option.value):
            lines.append(' ' * indent + f"\033[97m{option.name}\033[0m")
            lines.extend(format_store(parse_collection(option.value), indent + 4, expand=True))
            continue
        lines.append(format_option(option.name, option.value, name_width, indent))
    return lines

def show_options(store: OptionStore, expand: bool = False, file=None) -> None:
    if len(store) == 0:
        print('∅', file=file or sys.stdout)
        return
    print(*format_store(store, expand=expand), sep='\n', file=file or sys.stdout)
