"""
Foreground process helpers for Butiki

Both the shell and the editor inherit the terminal's stdin/stdout/stderr
and block until they exit. No timeouts are applied.
"""

import logging
import os
import shlex
import subprocess
import tempfile
from typing import Optional

from constants import (
    DEFAULT_EDITOR,
    DEFAULT_SHELL,
    EDITOR_ENV_VAR,
    EDIT_TEMP_PREFIX,
    EDIT_TEMP_SUFFIX,
)
from errors import StoreReadError, StoreWriteError, SubprocessError

logger = logging.getLogger(f"butiki.{__name__}")


def run_shell_command(command: str, shell: str = DEFAULT_SHELL) -> int:
    """Run a command string verbatim via `<shell> -c` and return its exit status"""
    logger.debug("Launching %s -c %r", shell, command)
    try:
        result = subprocess.run([shell, "-c", command])
    except OSError as e:
        raise SubprocessError(f"Failed to launch {shell}: {e}") from e

    logger.debug("%s exited with status %d", shell, result.returncode)
    return result.returncode


def resolve_editor(fallback: str = DEFAULT_EDITOR) -> str:
    """$EDITOR if set, otherwise the fallback editor"""
    return os.environ.get(EDITOR_ENV_VAR) or fallback


def edit_text(text: str, editor: Optional[str] = None) -> str:
    """
    Open text in an external editor and return the edited content.

    The text goes through a fresh temp file that is removed on every exit
    path. The editor's exit status is ignored.
    """
    editor = editor or resolve_editor()

    try:
        fd, temp_path = tempfile.mkstemp(prefix=EDIT_TEMP_PREFIX, suffix=EDIT_TEMP_SUFFIX)
    except OSError as e:
        raise StoreWriteError(f"Failed to create temp file: {e}") from e

    try:
        with os.fdopen(fd, 'w') as f:
            f.write(text)

        try:
            argv = shlex.split(editor)
            if not argv:
                raise ValueError("empty editor command")
            argv.append(temp_path)
            logger.debug("Launching editor: %s", argv)
            subprocess.run(argv)
        except (OSError, ValueError) as e:
            raise SubprocessError(f"Failed to launch editor '{editor}': {e}") from e

        try:
            with open(temp_path, 'r') as f:
                return f.read()
        except OSError as e:
            raise StoreReadError(f"Could not read file: {e}") from e
    finally:
        try:
            os.unlink(temp_path)
        except FileNotFoundError:
            pass
