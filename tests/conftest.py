"""Pytest fixtures for git-worktree-keeper tests"""
import io
import logging
import tempfile
from pathlib import Path

import git
import pytest
from rich.console import Console

from git_worktree_keeper.config import Config
from git_worktree_keeper.logging_config import ColoredFormatter
from git_worktree_keeper.services.git import resolve_repository


class ScriptedPrompter:
    """Prompter returning canned answers and recording the questions."""

    def __init__(self, answers=None, confirmations=None):
        self.answers = list(answers or [])
        self.confirmations = list(confirmations or [])
        self.asked = []
        self.confirmed = []

    def ask(self, message):
        self.asked.append(message)
        return self.answers.pop(0) if self.answers else ""

    def confirm(self, message):
        self.confirmed.append(message)
        return self.confirmations.pop(0) if self.confirmations else False


def _commit_file(path, name, content, message):
    target = Path(path) / name
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(content)
    repo = git.Repo(path)
    repo.git.add(name)
    repo.git.commit("-m", message)
    return repo.git.rev_parse("HEAD")


@pytest.fixture(autouse=True)
def restore_logging():
    """Undo handlers installed by setup_logging during a test."""
    root = logging.getLogger()
    level = root.level
    yield
    for handler in root.handlers[:]:
        ours = isinstance(handler.formatter, ColoredFormatter) or (
            isinstance(handler, logging.FileHandler)
            and handler.baseFilename.endswith("git-worktree-keeper.log")
        )
        if ours:
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)


@pytest.fixture
def temp_dir():
    """Create a temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir).resolve()


@pytest.fixture
def worktree_parent(temp_dir):
    return temp_dir / "dev"


@pytest.fixture
def config(worktree_parent):
    """Config pointing at a temporary worktree directory, with no editor helper."""
    return Config(worktree_parent=str(worktree_parent), open_command=None)


@pytest.fixture
def console():
    """Console that records output instead of writing to the terminal."""
    return Console(file=io.StringIO(), width=400, record=True)


@pytest.fixture
def git_repo(temp_dir):
    """Create a real Git repository named 'app' on branch main."""
    repo_path = temp_dir / "app"
    repo_path.mkdir()

    repo = git.Repo.init(repo_path)
    with repo.config_writer() as writer:
        writer.set_value("user", "name", "Test User")
        writer.set_value("user", "email", "test@example.com")
        writer.set_value("commit", "gpgsign", "false")

    (repo_path / "README.md").write_text("# Test Repository\n")
    repo.git.add("README.md")
    repo.git.commit("-m", "Initial commit")

    # Rename master to main if needed
    repo.git.branch("-M", "main")

    yield repo

    repo.close()


@pytest.fixture
def origin(temp_dir, git_repo):
    """Bare repository registered as 'origin', with main pushed to it."""
    origin_path = temp_dir / "origin.git"
    bare = git.Repo.init(origin_path, bare=True)
    git_repo.create_remote("origin", str(origin_path))
    git_repo.git.push("origin", "main")
    yield bare
    bare.close()


@pytest.fixture
def context(git_repo, config):
    """RepositoryContext of the test repository."""
    return resolve_repository(git_repo.working_dir, config)


@pytest.fixture
def commit_file():
    """Write a file inside a (work)tree and commit it; returns the new HEAD sha."""
    return _commit_file


@pytest.fixture
def prompter():
    return ScriptedPrompter()


@pytest.fixture
def add_worktree(git_repo, worktree_parent):
    """Factory creating a branch from main and a conventional worktree for it."""

    def _add(branch, parent=None):
        path = Path(parent or worktree_parent) / f"app-{branch}"
        git_repo.git.worktree("add", "-b", branch, str(path), "main")
        return path

    return _add
