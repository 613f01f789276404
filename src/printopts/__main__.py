## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘
#
# printopts — Parse printer-option strings like `copies=2 nocollate media={size=a4}`.
#

import sys
from dataclasses import dataclass

import click

from .store import OptionStore
from .errors import OptionError, OptionParseError, OptionIncompleteParse, OptionStorageError
from .parser import parse_options, format_parse_error_context
from .formatting import write_without_ansi, show_options


@dataclass(frozen=True)
class CliConfig:
    verbose: int
    strict: bool
    expand: bool
    ignore: bool
    plain: bool
    max_options: int | None = None


@dataclass
class ArgumentItem:
    source: str
    label: str


class OptionRunner:
    def __init__(self, config: CliConfig):
        self.verbose = config.verbose
        self.strict = config.strict
        self.expand = config.expand
        self.ignore = config.ignore
        self.plain = config.plain

        if self.plain:
            writer = write_without_ansi(sys.stdout.write)
            sys.stdout.write, sys.stderr.write = writer, writer

        self.store = OptionStore(max_options=config.max_options, strict=config.strict)
        self.failure = False
        self.parsed_items = 0

    def _maybe_fatal_error(self, message: str, detail: str, exc_type: str = None, context: str = '', is_repl: bool = False) -> None:
        header = detail if not exc_type else f"{detail} (Exception: \033[33m{exc_type}\033[0m)"
        print(f'\033[30;43m {message} \033[0m {header}\n{context}', file=sys.stderr)
        if is_repl: return
        self.failure = True
        if not self.ignore: sys.exit(1)

    def _handle_exception(self, exc: OptionError, label: str, is_repl: bool = False) -> bool:
        if isinstance(exc, OptionParseError):
            if is_repl and isinstance(exc, OptionIncompleteParse): return True
            banner = "INCOMPLETE INPUT." if isinstance(exc, OptionIncompleteParse) else "SYNTAX ERROR."
            context = format_parse_error_context(exc.source, exc.line, exc.column, exc.token, label=label)
            context += f"\n\033[90m{str(exc).replace(chr(10), ' ').replace(chr(9), ' ')}\033[0m\n"
            self._maybe_fatal_error(banner, f"Parsing `\033[97m{label}\033[0m` caused a problem!", type(exc).__name__, context, is_repl)
        elif isinstance(exc, OptionStorageError):
            detail = f"Option `\033[1;97m{exc.option_name}\033[0m` from `\033[97m{label}\033[0m` did not fit, limit is {exc.capacity}."
            self._maybe_fatal_error("STORAGE ERROR.", detail, type(exc).__name__, '', is_repl)
        else:
            detail = f"Option `\033[1;97m{exc.option_name}\033[0m` from `\033[97m{label}\033[0m` was rejected: {exc}"
            self._maybe_fatal_error("OPTION ERROR.", detail, type(exc).__name__, '', is_repl)
        return False

    def parse_items(self, items: list[ArgumentItem]) -> None:
        for item in items:
            self._parse_argument(item.source, item.label)

    def _parse_argument(self, source: str, label: str) -> None:
        try:
            parse_options(source, self.store, strict=self.strict, verbosity=self.verbose)
        except OptionError as exc:
            self._handle_exception(exc, label)
        else:
            self.parsed_items += 1

    def show(self) -> None:
        show_options(self.store, expand=self.expand)

    def repl(self) -> None:
        if sys.platform != "win32": import readline

        print('printopts - Option string REPL; type Ctrl+C to exit, `show` to list options.')
        source = ""

        while True:
            try:
                prompt = "\033[36m<<< \033[0m" if not source.strip() else "\033[36m... \033[0m"
                line = input(prompt)
                if len(line.strip()) == 0: continue
                if line.strip() in ('quit', 'exit'): break
                if line.strip() == 'show' and not source:
                    self.show(); continue
                source += line + "\n"

                try:
                    parse_options(source, self.store, strict=self.strict, verbosity=self.verbose)
                    print("\033[90m>>>\033[0m", f"{len(self.store)} option(s)")
                    source = ""
                except OptionError as exc:
                    if not self._handle_exception(exc, '<REPL>', is_repl=True):
                        source = ""

            except (KeyboardInterrupt, EOFError):
                print(""); break

    def finalize(self) -> int:
        if self.verbose and self.parsed_items > 0:
            print(f"\n\033[97m\033[48;5;30m STATISTICS. \033[0m", file=sys.stderr)
            print(f"args\t\033[97m{self.parsed_items:,}\033[0m", file=sys.stderr)
            print(f"options\t\033[97m{len(self.store):,}\033[0m", file=sys.stderr)
        return 1 if self.failure else 0


def _argument_items(arguments: tuple[str, ...]) -> list[ArgumentItem]:
    return [ArgumentItem(arg, f'<ARG_{i}>') for i, arg in enumerate(arguments, start=1)]

def _stdin_items(stream) -> list[ArgumentItem]:
    return [ArgumentItem(line.rstrip('\n'), f'<STDIN_{i}>') for i, line in enumerate(stream, start=1) if line.strip()]


@click.group(invoke_without_command=True)
@click.option('--verbose', '-v', default=0, count=True, help='Trace every option as it is added.')
@click.option('--strict', is_flag=True, help='Reject malformed arguments instead of truncating them.')
@click.option('--expand', '-x', is_flag=True, help='Show the contents of collection values recursively.')
@click.option('--ignore', '-i', is_flag=True, help='Ignore errors and continue parsing.')
@click.option('--plain', '-p', is_flag=True, help='Strip ANSI color codes and redirect stderr to stdout.')
@click.option('--max-options', type=click.IntRange(min=0), default=None, help='Limit how many distinct options are stored.')
@click.pass_context
def cli(ctx: click.Context, verbose: int, strict: bool, expand: bool, ignore: bool, plain: bool, max_options: int | None) -> None:
    ctx.ensure_object(dict)
    ctx.obj['config'] = CliConfig(verbose=verbose, strict=strict, expand=expand, ignore=ignore,
                                  plain=plain, max_options=max_options)


@cli.command('show')
@click.argument('arguments', nargs=-1)
@click.pass_context
def show_cmd(ctx: click.Context, arguments: tuple[str, ...]) -> None:
    runner = OptionRunner(ctx.obj['config'])
    items = _argument_items(arguments) if arguments else _stdin_items(click.get_text_stream('stdin'))
    runner.parse_items(items)
    runner.show()
    ctx.exit(runner.finalize())


@cli.command('get')
@click.argument('name')
@click.argument('arguments', nargs=-1)
@click.pass_context
def get_cmd(ctx: click.Context, name: str, arguments: tuple[str, ...]) -> None:
    runner = OptionRunner(ctx.obj['config'])
    items = _argument_items(arguments) if arguments else _stdin_items(click.get_text_stream('stdin'))
    runner.parse_items(items)
    if (value := runner.store.get(name)) is None:
        print(f'\033[30;43m NOT FOUND. \033[0m Option `\033[1;97m{name}\033[0m` is not set.', file=sys.stderr)
        ctx.exit(1)
    print(value)
    ctx.exit(runner.finalize())


@cli.command('repl')
@click.pass_context
def repl_cmd(ctx: click.Context) -> None:
    runner = OptionRunner(ctx.obj['config'])
    runner.repl()
    runner.show()
    ctx.exit(runner.finalize())


_FLAGS = ('--strict', '--expand', '--ignore', '--plain', '-x', '-i', '-p')

def main(argv: list[str] | None = None) -> None:
    a = list(sys.argv[1:] if argv is None else argv)
    g, r, literal_at = [], [], None
    it = iter(a)
    for t in it:
        # Everything after `--` is an option string, even if it looks like a flag.
        if t == '--':
            literal_at = len(r)
            r.extend(it)
            break
        if t in _FLAGS or (t.startswith('-v') and set(t[1:]) == {'v'}) or t == '--verbose':
            g.append(t)
        elif t == '--max-options':
            g.extend((t, next(it, '')))
        elif t.startswith('--max-options='):
            g.append(t)
        else:
            r.append(t)

    if literal_at != 0 and len(r) >= 1 and r[0] in ('-g', '--get'):
        if len(r) < 2: raise SystemExit("Expected option name after --get.")
        cmd, tail = 'get', ['--', *r[1:]]
    elif literal_at is None and len(r) == 0 and sys.stdin.isatty():
        cmd, tail = 'repl', []
    elif literal_at is None and r == ['--repl']:
        cmd, tail = 'repl', []
    else:
        # Arguments themselves may start with `-`, so they're passed after `--`.
        cmd, tail = 'show', ['--', *r]

    cli.main(args=[*g, cmd, *tail], prog_name='printopts')


if __name__ == "__main__":
    main()
