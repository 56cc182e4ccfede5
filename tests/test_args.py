"""Tests for command-line argument parsing"""
import pytest

from git_worktree_keeper.cli.args import CREATE, LIST, MERGE, UsageError, parse_args


class TestCreateArguments:
    """Test parsing for create-worktrees."""

    def test_flags_mixed_with_branches(self):
        request = parse_args(CREATE, ["-q", "feat-a", "--no-env", "feat-b", "-p"])

        assert request.branches == ["feat-a", "feat-b"]
        assert request.quiet is True
        assert request.copy_env is False
        assert request.install_deps is True

    def test_defaults(self):
        request = parse_args(CREATE, ["feature-x"])

        assert request.branches == ["feature-x"]
        assert request.quiet is False
        assert request.copy_env is True
        assert request.install_deps is False

    def test_long_aliases(self):
        request = parse_args(CREATE, ["--install-deps", "--quiet", "x"])
        assert request.install_deps is True
        assert request.quiet is True

        request = parse_args(CREATE, ["--pnpm", "x"])
        assert request.install_deps is True

    def test_branch_with_slash(self):
        request = parse_args(CREATE, ["feature/login"])
        assert request.branches == ["feature/login"]

    def test_no_branches_is_usage_error(self):
        with pytest.raises(UsageError) as exc_info:
            parse_args(CREATE, ["--quiet"])

        assert "create-worktrees" in exc_info.value.usage

    def test_unknown_option_is_ignored(self):
        request = parse_args(CREATE, ["feat", "--bogus"])

        assert "feat" in request.branches
        assert "--bogus" not in request.branches


class TestListArguments:
    """Test parsing for list-worktrees."""

    def test_defaults(self):
        request = parse_args(LIST, [])

        assert request.show_status is True
        assert request.debug is False

    def test_no_status_and_debug(self):
        request = parse_args(LIST, ["--no-status", "-d"])

        assert request.show_status is False
        assert request.debug is True

    def test_status_flag_kept_for_compatibility(self):
        request = parse_args(LIST, ["-s"])
        assert request.show_status is True

    def test_positionals_are_ignored(self):
        request = parse_args(LIST, ["something"])
        assert request.branches == []


class TestMergeArguments:
    """Test parsing for merge-worktree."""

    @pytest.mark.parametrize("argv", [
        ["feature-x", "--cleanup-all"],
        ["--cleanup-all", "feature-x"],
    ])
    def test_cleanup_flag_in_any_position(self, argv):
        request = parse_args(MERGE, argv)

        assert request.branches == ["feature-x"]
        assert request.cleanup_all is True

    def test_missing_branch(self):
        with pytest.raises(UsageError, match="branch is required"):
            parse_args(MERGE, ["--cleanup-all"])

    def test_more_than_one_branch(self):
        with pytest.raises(UsageError, match="exactly one branch"):
            parse_args(MERGE, ["a", "b"])
