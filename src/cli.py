#!/usr/bin/env python3
"""
Butiki CLI
Personal bookmarks for shell commands
"""

import argparse
import json
import logging
import sys
from typing import List, Optional

from command_store import CommandStore
from config_manager import ConfigManager
from constants import DEFAULT_SHELL
from errors import (
    ButikiError,
    ConfigError,
    HomeDirUnresolvable,
    InvalidFormat,
    LabelExists,
    LabelNotFound,
    StoreWriteError,
)
from logging_setup import init_logger
from runner import edit_text, resolve_editor, run_shell_command

logger = logging.getLogger(f"butiki.{__name__}")

USAGE_LINES = [
    "butiki add <label> <command>",
    "butiki update <label> <command>",
    "butiki delete <label>",
    "butiki list",
    "butiki run <label>",
    "butiki edit <label>",
    "butiki search <keyword>",
    "butiki export <filename>",
    "butiki import <filename>",
    "butiki config {get,set,list} [key] [value]",
]


def _fail(message: str, code: int = 1):
    print(message)
    sys.exit(code)


def _usage(command: str):
    line = next(u for u in USAGE_LINES if u.split()[1] == command)
    _fail(f"[!] Usage: {line}")


def _first(words: List[str]) -> Optional[str]:
    """First positional word; anything after it is ignored"""
    return words[0] if words else None


class ButikiCLI:
    """Command-line interface for Butiki"""

    def __init__(self, config: Optional[ConfigManager] = None):
        self.config = config or ConfigManager()
        self._store: Optional[CommandStore] = None

    @property
    def store(self) -> CommandStore:
        """Store at the configured path, resolved on first use"""
        if self._store is None:
            self._store = CommandStore(self.config.get_path('commands_file'))
        return self._store

    def _store_error(self, error: ButikiError):
        if isinstance(error, StoreWriteError):
            _fail(f"Error saving commands: {error}")
        _fail(f"Error loading commands: {error}")

    def cmd_add(self, args):
        """Store a new command under a label"""
        label = _first(args.words)
        command = " ".join(args.words[1:])
        if not label or not command:
            _usage('add')

        try:
            self.store.add_command(label, command)
        except LabelExists:
            _fail(f"[!] Label '{label}' already exists. Use 'update' instead.")
        except ButikiError as e:
            self._store_error(e)

        print(f"[+] Added command under label '{label}'.")

    def cmd_update(self, args):
        """Replace the command stored under an existing label"""
        label = _first(args.words)
        command = " ".join(args.words[1:])
        if not label or not command:
            _usage('update')

        try:
            self.store.update_command(label, command)
        except LabelNotFound:
            _fail(f"[!] Label '{label}' does not exist. Use 'add' instead.")
        except ButikiError as e:
            self._store_error(e)

        print(f"[~] Updated command under label '{label}'.")

    def cmd_delete(self, args):
        """Remove a stored command"""
        label = _first(args.words)
        if not label:
            _usage('delete')

        try:
            self.store.delete_command(label)
        except LabelNotFound:
            _fail(f"[!] Label '{label}' not found.")
        except ButikiError as e:
            self._store_error(e)

        print(f"[-] Deleted command '{label}'.")

    def cmd_list(self, args):
        """Print every stored command"""
        try:
            commands = self.store.list_commands()
        except ButikiError as e:
            self._store_error(e)

        if not commands:
            print("[i] No commands stored.")
            return

        print("Stored Commands:")
        for label, command in commands:
            print(f" - {label}: {command}")

    def cmd_search(self, args):
        """Find commands whose label or text contains a keyword"""
        keyword = _first(args.words)
        if keyword is None:
            _usage('search')

        try:
            matches = self.store.search(keyword)
        except ButikiError as e:
            self._store_error(e)

        if not matches:
            print("[i] No matching commands found.")
            return

        for label, command in matches:
            print(f" - {label}: {command}")

    def cmd_run(self, args):
        """Execute a stored command through the shell"""
        label = _first(args.words)
        if not label:
            _usage('run')

        try:
            command = self.store.get_command(label)
        except LabelNotFound:
            _fail(f"[!] Command '{label}' not found.")
        except ButikiError as e:
            self._store_error(e)

        shell = self.config.get('shell.program') or DEFAULT_SHELL
        print(f"[*] Running '{label}': {command}")
        sys.stdout.flush()

        try:
            returncode = run_shell_command(command, shell=shell)
        except ButikiError as e:
            _fail(f"[!] Error running command: {e}")

        if returncode != 0:
            _fail(f"[!] Error running command: exit status {returncode}", returncode)

    def cmd_edit(self, args):
        """Edit a stored command in $EDITOR"""
        label = _first(args.words)
        if not label:
            _usage('edit')

        try:
            old_command = self.store.get_command(label)
        except LabelNotFound:
            _fail(f"[!] Label '{label}' not found.")
        except ButikiError as e:
            self._store_error(e)

        editor = resolve_editor(self.config.get('editor.fallback'))
        try:
            new_command = edit_text(old_command, editor).strip()
        except ButikiError as e:
            _fail(f"[!] {e}")

        if not new_command or new_command == old_command.strip():
            print("[i] No changes made.")
            return

        try:
            self.store.update_command(label, new_command)
        except ButikiError as e:
            _fail(f"[!] Failed to save command: {e}")

        print(f"[~] Updated command '{label}'.")

    def cmd_export(self, args):
        """Dump all commands to a JSON file"""
        filename = _first(args.words)
        if not filename:
            _usage('export')

        try:
            self.store.export_to(filename)
        except ButikiError as e:
            _fail(f"Failed to export: {e}")

        print(f"[⇨] Exported to {filename}")

    def cmd_import(self, args):
        """Merge commands from a JSON file"""
        filename = _first(args.words)
        if not filename:
            _usage('import')

        try:
            result = self.store.import_from(filename)
        except InvalidFormat as e:
            logger.debug("Rejected import file: %s", e)
            _fail("[!] Invalid JSON format.")
        except ButikiError as e:
            _fail(f"[!] Failed to import: {e}")

        if result.load_error:
            print(f"Warning: Could not load existing commands ({result.load_error}), "
                  f"importing into an empty table")
        if result.backup_path:
            print(f"Corrupted file backed up to: {result.backup_path}")

        print(f"[✓] Imported {result.count} command(s).")

    def cmd_config(self, args):
        """Inspect or change Butiki settings"""
        if args.action == 'get':
            if not args.key:
                _usage('config')
            value = self.config.get(args.key)
            print(f"{args.key} = {value}")

        elif args.action == 'set':
            if not args.key or args.value is None:
                _usage('config')

            # Try to parse value as JSON for complex types
            try:
                value = json.loads(args.value)
            except json.JSONDecodeError:
                value = args.value

            try:
                self.config.set(args.key, value)
            except ButikiError as e:
                _fail(f"[!] {e}")
            print(f"✓ Set {args.key} = {value}")

        elif args.action == 'list':
            print("Current Configuration:")
            print(json.dumps(self.config.config, indent=2))


# Subcommands whose arguments are plain words, taken verbatim even when
# they start with "-" (e.g. `butiki search --force`).
WORD_COMMANDS = [
    ('add', 'Store a new command', 'label_and_command'),
    ('update', 'Replace an existing command', 'label_and_command'),
    ('delete', 'Remove a stored command', 'label'),
    ('run', 'Run a stored command via the shell', 'label'),
    ('edit', 'Edit a stored command in $EDITOR', 'label'),
    ('search', 'Search labels and commands', 'keyword'),
    ('export', 'Export all commands to a JSON file', 'filename'),
    ('import', 'Import commands from a JSON file', 'filename'),
]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='butiki',
        description='Butiki - bookmarks for your shell commands',
        epilog="Usage:\n  " + "\n  ".join(USAGE_LINES),
        formatter_class=argparse.RawDescriptionHelpFormatter
    )

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    for name, help_text, metavar in WORD_COMMANDS:
        sub = subparsers.add_parser(name, help=help_text, add_help=False)
        sub.add_argument('words', nargs='*', default=[], metavar=metavar)

    subparsers.add_parser('list', help='List stored commands')

    config_parser = subparsers.add_parser('config', help='Configure Butiki settings')
    config_parser.add_argument(
        'action',
        choices=['get', 'set', 'list'],
        help='Config action'
    )
    config_parser.add_argument('key', nargs='?', help='Config key (dot notation)')
    config_parser.add_argument('value', nargs='?', help='Config value')

    return parser


WORD_COMMAND_NAMES = [name for name, _, _ in WORD_COMMANDS]
COMMANDS = WORD_COMMAND_NAMES + ['list', 'config']


def main(argv: Optional[List[str]] = None):
    """Main CLI entry point"""
    if argv is None:
        argv = sys.argv[1:]

    parser = build_parser()

    if not argv or argv[0] not in COMMANDS + ['-h', '--help']:
        parser.print_help()
        sys.exit(1)

    if argv[0] in WORD_COMMAND_NAMES:
        # "--" ends option parsing, so every later word is positional
        argv = [argv[0], '--'] + argv[1:]

    args = parser.parse_args(argv)

    try:
        cli = ButikiCLI()
        if args.command != 'config':
            cli.store  # resolves the configured store path
    except HomeDirUnresolvable as e:
        print(f"Fatal: {e}", file=sys.stderr)
        sys.exit(1)
    except ConfigError as e:
        _fail(f"[!] {e}. Fix it with: butiki config set paths.commands_file <path>")

    init_logger(cli.config.get('logging.level'), cli.config.get('logging.file'))

    command_map = {
        'add': cli.cmd_add,
        'update': cli.cmd_update,
        'delete': cli.cmd_delete,
        'list': cli.cmd_list,
        'run': cli.cmd_run,
        'edit': cli.cmd_edit,
        'search': cli.cmd_search,
        'export': cli.cmd_export,
        'import': cli.cmd_import,
        'config': cli.cmd_config,
    }

    handler = command_map.get(args.command)
    if handler:
        handler(args)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == '__main__':
    main()
