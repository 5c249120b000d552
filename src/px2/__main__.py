## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘
#
# px2: a minimal stack language, compiled to verified bytecode and run on a stack machine.
#

import sys
import time
from dataclasses import dataclass

import click

from .types import nil
from .errors import Px2CompileError, Px2FileError, Px2RuntimeError, Px2UnhandledDataError
from .formatting import write_without_ansi, format_compile_error, format_program, format_stack

from . import api


@dataclass(frozen=True)
class RuntimeConfig:
    verbose: int
    stats: bool
    plain: bool
    ignore: bool


@dataclass
class ExecutionItem:
    source: str
    filename: str


class Px2Runner:
    def __init__(self, config: RuntimeConfig):
        self.verbose = config.verbose
        self.stats_enabled = config.stats
        self.plain = config.plain
        self.ignore = config.ignore

        if self.plain:
            sys.stdout.write = write_without_ansi(sys.stdout.write)
            sys.stderr.write = write_without_ansi(sys.stderr.write)

        self.runtime = api._RUNTIME
        self.total_stats = {'steps': 0, 'start': time.time()} if self.stats_enabled else None
        self.failure = False
        self.executed_items = 0

    def _maybe_fatal_error(self, message: str, detail: str, context: str = '', is_repl: bool = False) -> None:
        print(f'\033[30;43m {message} \033[0m {detail}' + (f'\n{context}' if context else ''), file=sys.stderr)
        self.failure = self.failure or not is_repl
        if not is_repl and not self.ignore: sys.exit(1)

    def _handle_exception(self, exc: Exception, filename: str, source: str, is_repl: bool = False) -> None:
        if isinstance(exc, Px2CompileError):
            print(format_compile_error(exc, source), file=sys.stderr)
            self._maybe_fatal_error("STOPPED.", "Stopping execution due to compilation errors", is_repl=is_repl)
        elif isinstance(exc, Px2UnhandledDataError):
            context = f'\033[1;33m  Stack content is\033[0;33m\n    {" ".join(map(str, exc.types))}\033[0m'
            self._maybe_fatal_error("COMPILER ERROR.", f"Unhandled data on the stack in `\033[97m{filename}\033[0m`.", context, is_repl)
        elif isinstance(exc, Px2FileError):
            self._maybe_fatal_error("FILE ERROR.", exc.message, is_repl=is_repl)
        elif isinstance(exc, Px2RuntimeError):
            detail = f"Operation \033[1;97m`{exc.op}`\033[0m caused an error: {exc.message}"
            context = f'\033[1;33m  Stack content is\033[0;33m\n    {format_stack(exc.stack if exc.stack is not None else nil)}\033[0m'
            self._maybe_fatal_error("RUNTIME ERROR.", detail, context, is_repl)
        else:
            raise exc

    def load_file(self, path: str) -> ExecutionItem | None:
        if path == '-':
            return ExecutionItem(sys.stdin.read(), '<STDIN>')
        try:
            return ExecutionItem(self.runtime.load_source_file(path), path)
        except Px2FileError as exc:
            self._handle_exception(exc, path, '')
            return None

    def execute_items(self, items) -> None:
        for item in items:
            self._execute_script(item.source, item.filename)

    def _execute_script(self, source: str, filename: str, is_repl: bool = False) -> None:
        try:
            start = time.perf_counter()
            program = self.runtime.compile(source, filename=filename, verbosity=self.verbose)
            if self.verbose > 0:
                print(f"\033[97mCompilation succeeded in {(time.perf_counter() - start) * 1000:.3f}ms\033[0m")
                print(format_program(program))
            self.runtime.run(program, verbosity=self.verbose, stats=self.total_stats)
        except (Px2CompileError, Px2UnhandledDataError, Px2RuntimeError) as exc:
            self._handle_exception(exc, filename, source, is_repl=is_repl)
        else:
            self.executed_items += 1

    def repl(self) -> None:
        if sys.platform != "win32": import readline

        print('px2 - Stack language REPL; each line runs on its own, type Ctrl+C to exit.')
        while True:
            try:
                line = input("\033[36m<<< \033[0m")
                if len(line.strip()) == 0: continue
                if line.strip() in ('quit', 'exit'): break
                self._execute_script(line + '\n', '<REPL>', is_repl=True)
            except (KeyboardInterrupt, EOFError):
                print(""); break

    def finalize(self) -> int:
        if self.total_stats and self.executed_items > 0:
            elapsed_time = time.time() - self.total_stats['start']
            print(f"\n\033[97m\033[48;5;30m STATISTICS. \033[0m")
            print(f"step\t\033[97m{self.total_stats['steps']:,}\033[0m")
            print(f"time\t\033[97m{elapsed_time:.3f}s\033[0m")
        return 1 if self.failure else 0


def _inline_command_source(index: int, command: str) -> ExecutionItem:
    return ExecutionItem(command.rstrip() + '\n', f'<INPUT_{index}>')


def _parse_dev_tokens(tokens: list[str]) -> list[tuple[str, str | None]]:
    actions: list[tuple[str, str | None]] = []
    index = 0
    while index < len(tokens):
        token = tokens[index]
        if token == '--':
            index += 1
            continue
        if token in ('-c', '--command'):
            index += 1
            if index >= len(tokens):
                raise click.BadParameter("Missing inline px2 code after -c/--command option.")
            actions.append(('command', tokens[index]))
            index += 1
            continue
        if token.startswith('-c=') or token.startswith('--command='):
            _, value = token.split('=', 1)
            if value == '':
                raise click.BadParameter("Empty px2 code supplied to command option.")
            actions.append(('command', value))
            index += 1
            continue
        if token in ('-r', '--repl'):
            actions.append(('repl', None))
            index += 1
            continue
        if token.startswith('-'):
            raise click.BadParameter(f"Unknown option `{token}`.")
        raise click.BadParameter(f"Unexpected argument `{token}`; run a file on its own.")
    return actions


@click.group(invoke_without_command=True)
@click.option('--verbose', '-v', default=0, count=True, help='Print tokens and bytecode; twice to trace every step.')
@click.option('--stats', is_flag=True, help='Display execution statistics (e.g., number of steps).')
@click.option('--plain', '-p', is_flag=True, help='Strip ANSI color codes from the output.')
@click.option('--ignore', '-i', is_flag=True, help='Ignore errors and continue executing.')
@click.pass_context
def cli(ctx: click.Context, verbose: int, stats: bool, plain: bool, ignore: bool) -> None:
    ctx.ensure_object(dict)
    ctx.obj['config'] = RuntimeConfig(verbose=verbose, stats=stats, plain=plain, ignore=ignore)


@cli.command('run-file')
@click.argument('script')
@click.pass_context
def run_file(ctx: click.Context, script: str) -> None:
    runner = Px2Runner(ctx.obj['config'])
    if (item := runner.load_file(script)) is not None:
        runner.execute_items((item,))
    ctx.exit(runner.finalize())


@cli.command('run-dev', context_settings={'ignore_unknown_options': True, 'allow_extra_args': True})
@click.argument('tokens', nargs=-1)
@click.pass_context
def run_dev(ctx: click.Context, tokens: tuple[str, ...]) -> None:
    runner = Px2Runner(ctx.obj['config'])
    actions = _parse_dev_tokens(list(tokens))

    command_index = 1
    for action, payload in actions:
        if action == 'command':
            item = _inline_command_source(command_index, payload)
            runner._execute_script(item.source, item.filename)
            command_index += 1
        elif action == 'repl':
            runner.repl()
        else:
            raise NotImplementedError

    if not actions:
        runner.repl()
    ctx.exit(runner.finalize())


def main(argv: list[str] | None = None) -> None:
    a = list(sys.argv[1:] if argv is None else argv)
    g = [t for t in a if t in ('--verbose', '--stats', '--plain', '--ignore', '-i', '-p') or (t.startswith('-v') and set(t[1:]) == {'v'})]
    r = [t for t in a if t not in g]
    has_dev_opt = any(t in ('-c', '-r', '--repl') or t.startswith('-c=') or t.startswith('--command') for t in r)

    if len(r) == 0:
        # No args: if stdin has data, treat as file '-', else click reports the missing script.
        cmd, tail = 'run-file', ([] if sys.stdin.isatty() else ['-'])
    elif has_dev_opt:
        cmd, tail = 'run-dev', r
    else:
        cmd, tail = 'run-file', r

    cli.main(args=[*g, cmd, *tail], prog_name='px2')


if __name__ == "__main__":
    main()
