"""
Tests for the shell and editor helpers
"""

import os
import sys
from pathlib import Path
from unittest.mock import patch, MagicMock

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent / 'src'))

from errors import SubprocessError
from runner import edit_text, resolve_editor, run_shell_command


class TestRunShellCommand:

    def test_passes_command_verbatim_to_shell(self):
        with patch('runner.subprocess.run') as mock_run:
            mock_run.return_value = MagicMock(returncode=0)

            code = run_shell_command("echo $HOME | wc -c && ls *.py", shell="bash")

        assert code == 0
        mock_run.assert_called_once_with(["bash", "-c", "echo $HOME | wc -c && ls *.py"])

    def test_streams_are_inherited(self):
        with patch('runner.subprocess.run') as mock_run:
            mock_run.return_value = MagicMock(returncode=0)
            run_shell_command("true")

        _, kwargs = mock_run.call_args
        assert "stdout" not in kwargs
        assert "stdin" not in kwargs
        assert "capture_output" not in kwargs

    def test_returns_exit_status(self):
        with patch('runner.subprocess.run') as mock_run:
            mock_run.return_value = MagicMock(returncode=3)

            assert run_shell_command("exit 3") == 3

    def test_launch_failure_raises_subprocess_error(self):
        with patch('runner.subprocess.run', side_effect=FileNotFoundError("no bash")):
            with pytest.raises(SubprocessError):
                run_shell_command("ls", shell="no-such-shell")

    def test_real_shell_exit_status(self):
        if not os.path.exists("/bin/sh"):
            pytest.skip("no /bin/sh")
        assert run_shell_command("exit 5", shell="sh") == 5


class TestResolveEditor:

    def test_editor_env_wins(self, monkeypatch):
        monkeypatch.setenv("EDITOR", "vim")
        assert resolve_editor("nano") == "vim"

    def test_fallback_when_unset(self):
        assert resolve_editor("nano") == "nano"

    def test_empty_env_uses_fallback(self, monkeypatch):
        monkeypatch.setenv("EDITOR", "")
        assert resolve_editor("nano") == "nano"


def _fake_editor(new_text):
    """subprocess.run stand-in that rewrites the file it was given"""
    seen = {}

    def run(argv, *args, **kwargs):
        path = argv[-1]
        seen['argv'] = argv
        seen['path'] = path
        with open(path) as f:
            seen['original'] = f.read()
        if new_text is not None:
            with open(path, 'w') as f:
                f.write(new_text)
        return MagicMock(returncode=0)

    return run, seen


class TestEditText:

    def test_returns_edited_content(self):
        run, seen = _fake_editor("make -j8\n")
        with patch('runner.subprocess.run', side_effect=run):
            result = edit_text("make all", "nano")

        assert result == "make -j8\n"
        assert seen['original'] == "make all"
        assert seen['argv'][0] == "nano"

    def test_temp_file_is_removed(self):
        run, seen = _fake_editor("x")
        with patch('runner.subprocess.run', side_effect=run):
            edit_text("y", "nano")

        assert os.path.basename(seen['path']).startswith("butiki_edit_")
        assert seen['path'].endswith(".txt")
        assert not os.path.exists(seen['path'])

    def test_temp_file_removed_on_launch_failure(self):
        created = []

        def run(argv, *args, **kwargs):
            created.append(argv[-1])
            raise FileNotFoundError("no editor")

        with patch('runner.subprocess.run', side_effect=run):
            with pytest.raises(SubprocessError):
                edit_text("y", "missing-editor")

        assert created and not os.path.exists(created[0])

    def test_editor_with_arguments(self):
        run, seen = _fake_editor(None)
        with patch('runner.subprocess.run', side_effect=run):
            edit_text("y", "code --wait")

        assert seen['argv'][:2] == ["code", "--wait"]

    def test_editor_exit_status_is_ignored(self):
        def run(argv, *args, **kwargs):
            return MagicMock(returncode=1)

        with patch('runner.subprocess.run', side_effect=run):
            assert edit_text("unchanged", "false") == "unchanged"

    def test_uses_editor_env_when_not_given(self, monkeypatch):
        monkeypatch.setenv("EDITOR", "my-editor")
        run, seen = _fake_editor(None)
        with patch('runner.subprocess.run', side_effect=run):
            edit_text("y")

        assert seen['argv'][0] == "my-editor"
