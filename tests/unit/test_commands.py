"""Unit tests for the command sequence runner."""

import subprocess
from unittest.mock import MagicMock, patch

import pytest

from hostenv.commands import Command, dedupe_commands, run_commands
from hostenv.environ import InMemoryEnvironment
from hostenv.errors import ScriptExecutionError

from tests.helpers.markers import posix_only


def _fail_on(*failing):
    """subprocess.run stand-in that fails for the given executables."""

    def _run(argv, **kwargs):
        if argv[0] in failing:
            raise subprocess.CalledProcessError(1, argv)
        return MagicMock(returncode=0)

    return _run


class TestCommand:
    """Test Command parsing."""

    def test_parse_splits_on_whitespace(self):
        """The first token is the executable, the rest are arguments."""
        command = Command.parse("npm  install\t--save-dev jest", "/app")
        assert command.executable == "npm"
        assert command.args == ("install", "--save-dev", "jest")
        assert command.working_dir == "/app"
        assert command.argv == ["npm", "install", "--save-dev", "jest"]

    def test_parse_does_not_interpret_quotes(self):
        """Quotes are kept as literal characters."""
        command = Command.parse('echo "hello world"')
        assert command.args == ('"hello', 'world"')

    def test_parse_blank(self):
        """Blank strings are rejected."""
        with pytest.raises(ScriptExecutionError, match="empty command"):
            Command.parse("   ")


class TestDedupe:
    """Test dedupe_commands."""

    def test_keeps_first_seen_order(self):
        assert dedupe_commands(["a", "b", "a", "c", "b"]) == ["a", "b", "c"]


class TestRunCommands:
    """Test run_commands (subprocess mocked)."""

    @patch("subprocess.run")
    def test_empty_list_is_noop(self, mock_run):
        """No commands, no subprocesses."""
        run_commands([], "/tmp")
        mock_run.assert_not_called()

    @patch("subprocess.run")
    def test_runs_in_order_with_working_dir(self, mock_run):
        """Commands run sequentially in the given directory."""
        env = InMemoryEnvironment({"PATH": "/usr/bin"})

        run_commands(["git init", "git add .", "git commit -m init"], "/repo", environment=env)

        argvs = [c.args[0] for c in mock_run.call_args_list]
        assert argvs == [["git", "init"], ["git", "add", "."], ["git", "commit", "-m", "init"]]
        for call in mock_run.call_args_list:
            assert call.kwargs["cwd"] == "/repo"
            assert call.kwargs["env"] == {"PATH": "/usr/bin"}
            assert call.kwargs["check"] is True
            assert "stdout" not in call.kwargs

    @patch("subprocess.run", side_effect=_fail_on("false"))
    def test_stops_at_first_failure(self, mock_run):
        """The third command never runs after the second fails."""
        with pytest.raises(ScriptExecutionError) as exc_info:
            run_commands(["true", "false", "true"], None, environment=InMemoryEnvironment())

        assert mock_run.call_count == 2
        assert exc_info.value.target == "false"
        assert exc_info.value.returncode == 1

    @patch("subprocess.run", side_effect=FileNotFoundError(2, "No such file", "nosuchtool"))
    def test_spawn_failure(self, mock_run):
        """A missing executable is a ScriptExecutionError."""
        with pytest.raises(ScriptExecutionError, match="nosuchtool"):
            run_commands(["nosuchtool --help"], environment=InMemoryEnvironment())

    @patch("subprocess.run")
    def test_duplicates_run_verbatim_by_default(self, mock_run):
        """Without dedupe, repeated commands run every time."""
        run_commands(["make", "make"], environment=InMemoryEnvironment())
        assert mock_run.call_count == 2

    @patch("subprocess.run")
    def test_dedupe(self, mock_run):
        """With dedupe, repeated commands run once."""
        run_commands(["make", "make test", "make"], dedupe=True, environment=InMemoryEnvironment())

        argvs = [c.args[0] for c in mock_run.call_args_list]
        assert argvs == [["make"], ["make", "test"]]

    @patch("subprocess.run", side_effect=_fail_on("false"))
    def test_blank_after_failure_not_reported(self, mock_run):
        """Commands after the failing one are not even parsed."""
        with pytest.raises(ScriptExecutionError) as exc_info:
            run_commands(["false", "  "], environment=InMemoryEnvironment())

        assert exc_info.value.target == "false"

    @patch("subprocess.run")
    def test_empty_environment_is_passed_as_given(self, mock_run):
        """Children get exactly the injected environment, even when empty."""
        run_commands(["make"], environment=InMemoryEnvironment())

        assert mock_run.call_args.kwargs["env"] == {}


@posix_only
class TestRunCommandsIntegration:
    """Run real commands."""

    def test_short_circuit(self, memory_env, tmp_path):
        """Real true/false/true stops after false."""
        marker = tmp_path / "marker"

        with pytest.raises(ScriptExecutionError):
            run_commands(["true", "false", f"touch {marker}"], str(tmp_path), environment=memory_env)

        assert not marker.exists()

    def test_working_directory(self, memory_env, tmp_path):
        """Relative paths resolve against the working directory."""
        run_commands(["mkdir out", "touch out/done"], str(tmp_path), environment=memory_env)

        assert (tmp_path / "out" / "done").exists()
