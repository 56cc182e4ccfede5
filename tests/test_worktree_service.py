"""Tests for the worktree registration service"""
import os
import shutil
from unittest.mock import Mock, patch

import git
import pytest

from git_worktree_keeper.exceptions import GitOperationError
from git_worktree_keeper.services.git.worktrees import (
    WorktreeService,
    parse_status_porcelain,
    parse_worktree_porcelain,
)


class TestGitStatusParsing:
    """Test the git status porcelain parsing logic."""

    def test_modified_unstaged_file(self):
        """Test detection of modified, unstaged file ( M)."""
        result = parse_status_porcelain(" M file.txt")

        assert result.modified is True
        assert result.untracked is False
        assert result.staged is False

    def test_modified_staged_file(self):
        """Test detection of modified, staged file (M )."""
        result = parse_status_porcelain("M  file.txt")

        assert result.modified is False  # No working tree changes
        assert result.staged is True

    def test_modified_staged_and_unstaged(self):
        """Test detection of file staged AND modified (MM)."""
        result = parse_status_porcelain("MM file.txt")

        assert result.modified is True
        assert result.staged is True

    def test_added_file(self):
        """Test detection of newly added file (A )."""
        result = parse_status_porcelain("A  new_file.txt")

        assert result.staged is True
        assert result.modified is False

    def test_untracked_only_is_not_uncommitted(self):
        """Untracked files alone do not count as uncommitted changes."""
        result = parse_status_porcelain("?? scratch.txt")

        assert result.untracked is True
        assert result.has_uncommitted is False

    def test_deleted_file(self):
        result = parse_status_porcelain(" D gone.txt")
        assert result.modified is True

    def test_mixed_output(self):
        status = "M  staged.txt\n M modified.txt\n?? new.txt\n"
        result = parse_status_porcelain(status)

        assert result.modified is True
        assert result.untracked is True
        assert result.staged is True

    def test_clean(self):
        result = parse_status_porcelain("")
        assert result.has_uncommitted is False
        assert result.untracked is False


class TestWorktreePorcelainParsing:
    """Test parsing of `git worktree list --porcelain`."""

    def test_main_and_linked(self, temp_dir):
        main = temp_dir / "app"
        linked = temp_dir / "dev" / "app-feature"
        main.mkdir()
        output = (
            f"worktree {main}\n"
            "HEAD aaaa\n"
            "branch refs/heads/main\n"
            "\n"
            f"worktree {linked}\n"
            "HEAD bbbb\n"
            "branch refs/heads/feature\n"
            "\n"
        )

        entries = parse_worktree_porcelain(output)

        assert [e.branch_name for e in entries] == ["main", "feature"]
        assert entries[0].is_main is True
        assert entries[1].is_main is False
        assert entries[1].commit_sha == "bbbb"
        assert entries[0].is_orphaned is False
        assert entries[1].is_orphaned is True

    def test_detached_entry_has_no_branch(self):
        output = "worktree /x/app\nHEAD aaaa\nbranch refs/heads/main\n\nworktree /x/app-y\nHEAD cccc\ndetached\n"

        entries = parse_worktree_porcelain(output)

        assert len(entries) == 2
        assert entries[1].branch_name == ""

    def test_last_entry_without_trailing_blank_line(self):
        entries = parse_worktree_porcelain("worktree /x/app\nHEAD aaaa\nbranch refs/heads/main")

        assert len(entries) == 1
        assert entries[0].branch_name == "main"

    def test_bare_main_entry(self):
        entries = parse_worktree_porcelain("worktree /x/app.git\nbare\n\n")

        assert len(entries) == 1
        assert entries[0].commit_sha == ""

    def test_empty_output(self):
        assert parse_worktree_porcelain("") == []


class TestWorktreeService:
    """Test WorktreeService against a real repository."""

    def test_lists_main_first(self, git_repo, add_worktree):
        path = add_worktree("feature")
        service = WorktreeService(git_repo.working_dir)

        entries = service.get_worktree_info()

        assert entries[0].is_main
        assert entries[0].branch_name == "main"
        assert os.path.realpath(entries[1].path) == str(path)
        assert entries[1].branch_name == "feature"

    def test_find_by_branch_and_path(self, git_repo, add_worktree):
        path = add_worktree("feature")
        service = WorktreeService(git_repo.working_dir)

        assert service.find_by_branch("feature").branch_name == "feature"
        assert service.find_by_branch("main") is None
        assert service.find_by_branch("nope") is None
        assert service.find_by_path(str(path)).branch_name == "feature"

    def test_add_worktree(self, git_repo, worktree_parent):
        git_repo.git.branch("topic")
        service = WorktreeService(git_repo.working_dir)
        target = worktree_parent / "app-topic"

        service.add_worktree(str(target), "topic")

        assert (target / "README.md").exists()
        assert service.query_branch(str(target)) == "topic"

    def test_add_worktree_failure_raises(self, git_repo, worktree_parent):
        service = WorktreeService(git_repo.working_dir)

        with pytest.raises(GitOperationError) as exc_info:
            service.add_worktree(str(worktree_parent / "app-missing"), "missing-branch")

        assert exc_info.value.branch == "missing-branch"

    def test_remove_and_prune(self, git_repo, add_worktree):
        path = add_worktree("feature")
        service = WorktreeService(git_repo.working_dir)

        removed, error = service.remove_worktree(str(path), force=True)

        assert removed is True
        assert error is None
        assert not path.exists()
        assert service.find_by_branch("feature") is None
        assert service.prune_worktrees() == (True, None)

    def test_remove_unknown_path_reports_error(self, git_repo, temp_dir):
        service = WorktreeService(git_repo.working_dir)

        removed, error = service.remove_worktree(str(temp_dir / "nowhere"), force=True)

        assert removed is False
        assert "worktree remove" in error

    def test_prune_drops_deleted_directory(self, git_repo, add_worktree):
        path = add_worktree("feature")
        shutil.rmtree(path)
        service = WorktreeService(git_repo.working_dir)
        assert service.find_by_branch("feature").is_orphaned

        service.prune_worktrees()

        assert service.find_by_branch("feature") is None

    def test_status_details(self, git_repo, add_worktree):
        path = add_worktree("feature")
        service = WorktreeService(git_repo.working_dir)
        assert service.get_worktree_status_details(str(path)).has_uncommitted is False

        (path / "README.md").write_text("changed\n")
        status = service.get_worktree_status_details(str(path))

        assert status.modified is True
        assert status.staged is False

    def test_status_of_missing_directory_raises(self, git_repo, temp_dir):
        service = WorktreeService(git_repo.working_dir)

        with pytest.raises(GitOperationError, match="not accessible"):
            service.get_worktree_status_details(str(temp_dir / "gone"))

    def test_query_branch_detached(self, git_repo, add_worktree):
        path = add_worktree("feature")
        git.Repo(path).git.checkout("--detach")
        service = WorktreeService(git_repo.working_dir)

        assert service.query_branch(str(path)) is None

    def test_query_branch_without_git_dir(self, git_repo, temp_dir):
        plain = temp_dir / "plain"
        plain.mkdir()
        service = WorktreeService(git_repo.working_dir)

        assert service.query_branch(str(plain)) is None

    def test_commit_all(self, git_repo, add_worktree):
        path = add_worktree("feature")
        (path / "new.txt").write_text("new\n")
        service = WorktreeService(git_repo.working_dir)
        before = service.get_head_sha(str(path))

        service.commit_all(str(path), "add new file")

        assert service.get_head_sha(str(path)) != before
        assert service.get_worktree_status_details(str(path)).untracked is False

    def test_list_failure_raises(self, git_repo):
        service = WorktreeService(git_repo.working_dir)
        repo = Mock()
        repo.git.worktree.side_effect = git.exc.GitCommandError(
            ["git", "worktree"], 128, stderr="fatal: broken"
        )

        with patch.object(service, "_get_repo", return_value=repo):
            with pytest.raises(GitOperationError, match="broken"):
                service.get_worktree_info()
