#!python3 -X utf8

from typing import Any, List
import sys
import os
import argparse
from pathlib import Path
import logging

##################################################################################################
# Main
##################################################################################################

ArgParser = argparse.ArgumentParser

class Commands:
    def __init__(self, parser: ArgParser) -> None:
        self.root_parser = parser
        self.parsers = {}
        self.subparsers = {}

    class Command:
        def __init__(self, commands: 'Commands', name: str) -> None:
            path = name.split('/')
            parsers = commands.parsers
            subparsers = commands.subparsers

            def subcommand(i: int) -> str:
                if i == 0: return 'command'
                return ('sub' * i) + 'command'

            if '' not in parsers:
                parsers[''] = commands.root_parser

            if '' not in subparsers:
                subparsers[''] = commands.root_parser.add_subparsers(dest='command')

            for i in range(1, len(path) + 1):
                p = '/'.join(path[:i])
                p0 = '/'.join(path[:i-1])
                if p not in parsers:
                    parsers[p] = subparsers[p0].add_parser(path[i-1])
                if p not in subparsers and i != len(path):
                    subparsers[p] = parsers[p].add_subparsers(dest=subcommand(i))

            self.parser = parsers[name]

        def __enter__(self) -> ArgParser:
            return self.parser

        def __exit__(self, exc_type: Any, exc_value: Any, traceback: Any) -> None:
            pass

    def __call__(self, name: str) -> Any:
        return Commands.Command(self, name)


def main(argv: List[str] | None = None) -> int:
    if sys.platform.lower() == "win32":
        os.system('color')
        os.system('chcp 65001 > nul')
        sys.stdout.reconfigure(encoding='utf-8') # type: ignore
        sys.stderr.reconfigure(encoding='utf-8') # type: ignore

    from hygiene.tasks.check import check_names

    parser = argparse.ArgumentParser(description="Repository hygiene checks for staged files.")
    parser.add_argument('--repo', type=Path, default=Path('.'), help='Repository to check (default: current directory).')
    parser.add_argument('--settings', type=Path, default=None, help='Settings override file.')
    parser.add_argument('-v', '--verbose', action='store_true')
    commands = Commands(parser)

    with commands('check') as cmd:
        cmd.add_argument('files', type=Path, nargs='*', help='Files to check. If not provided, the staged files are checked.')
        cmd.add_argument('--checks', nargs='+', choices=check_names(), default=None, help='List of checks to perform. If not provided, all checks will be performed.')

    with commands('install') as cmd:
        cmd.add_argument('--force', action='store_true', help='Replace an existing hook without a backup.')

    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO, format='%(message)s')

    match args.command:
        case None | 'check':
            from hygiene.tasks.check import check_main
            return check_main(
                files=getattr(args, 'files', None) or None,
                repo_path=args.repo,
                settings_path=args.settings,
                enabled_checks=getattr(args, 'checks', None))

        case 'install':
            from hygiene.tasks.install import install
            return install(args.repo, Path(__file__), force=args.force)

        case _:
            raise ValueError(f"Unknown command: {args.command}")

if __name__ == '__main__':
    sys.exit(main())
