"""Tests for the external helper commands"""
import subprocess
import sys
from unittest.mock import Mock, patch

from git_worktree_keeper.services.commands import install_dependencies, open_in_editor


class TestInstallDependencies:
    def test_success(self, temp_dir):
        ok, error = install_dependencies([sys.executable, "-c", "pass"], temp_dir)

        assert ok is True
        assert error is None

    def test_nonzero_exit(self, temp_dir):
        command = [sys.executable, "-c", "import sys; sys.stderr.write('lockfile broken\\n'); sys.exit(3)"]

        ok, error = install_dependencies(command, temp_dir)

        assert ok is False
        assert "exited with 3" in error
        assert "lockfile broken" in error

    def test_missing_executable(self, temp_dir):
        ok, error = install_dependencies(["definitely-not-a-package-manager", "install"], temp_dir)

        assert ok is False
        assert "Could not run" in error


class TestOpenInEditor:
    def test_disabled(self, temp_dir):
        assert open_in_editor(None, temp_dir) is False
        assert open_in_editor("", temp_dir) is False

    def test_not_on_path(self, temp_dir):
        with patch("git_worktree_keeper.services.commands.shutil.which", return_value=None):
            assert open_in_editor("cursor", temp_dir) is False

    def test_runs_helper(self, temp_dir):
        with patch("git_worktree_keeper.services.commands.shutil.which", return_value="/usr/bin/cursor"), \
                patch("git_worktree_keeper.services.commands.subprocess.run") as mock_run:
            mock_run.return_value = Mock(returncode=0)

            assert open_in_editor("cursor", temp_dir) is True

        mock_run.assert_called_once()
        assert mock_run.call_args[0][0] == ["/usr/bin/cursor", str(temp_dir)]

    def test_helper_failure_is_ignored(self, temp_dir):
        with patch("git_worktree_keeper.services.commands.shutil.which", return_value="/usr/bin/cursor"), \
                patch(
                    "git_worktree_keeper.services.commands.subprocess.run",
                    side_effect=subprocess.SubprocessError("boom"),
                ):
            assert open_in_editor("cursor", temp_dir) is False
