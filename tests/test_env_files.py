"""Tests for environment file copying"""
from git_worktree_keeper.services.env_files import EnvFileService


def make_service():
    return EnvFileService(".env", ["node_modules", ".git", "dist", "build"])


class TestDiscover:
    """Test finding environment files."""

    def test_finds_nested_files(self, temp_dir):
        (temp_dir / ".env").write_text("A=1\n")
        (temp_dir / "apps" / "web").mkdir(parents=True)
        (temp_dir / "apps" / "web" / ".env.local").write_text("B=2\n")
        (temp_dir / "README.md").write_text("readme\n")

        found = [str(p) for p in make_service().discover(temp_dir)]

        assert found == [".env", "apps/web/.env.local"]

    def test_skips_excluded_directories(self, temp_dir):
        for excluded in ("node_modules/pkg", ".git", "dist", "build"):
            (temp_dir / excluded).mkdir(parents=True)
            (temp_dir / excluded / ".env").write_text("X=1\n")

        assert make_service().discover(temp_dir) == []

    def test_exclusion_matches_whole_directory_names(self, temp_dir):
        (temp_dir / "builder").mkdir()
        (temp_dir / "builder" / ".env").write_text("X=1\n")

        found = [str(p) for p in make_service().discover(temp_dir)]

        assert found == ["builder/.env"]

    def test_directories_named_like_env_files_are_ignored(self, temp_dir):
        (temp_dir / ".envs").mkdir()

        assert make_service().discover(temp_dir) == []


class TestCopy:
    """Test copying into a worktree."""

    def test_copies_preserving_relative_paths(self, temp_dir):
        source = temp_dir / "src"
        target = temp_dir / "dst"
        (source / "api").mkdir(parents=True)
        (source / ".env").write_text("ROOT=1\n")
        (source / "api" / ".env.test").write_text("API=1\n")
        target.mkdir()

        result = make_service().copy_to(source, target)

        assert result.found == 2
        assert result.copied == [".env", "api/.env.test"]
        assert result.skipped == []
        assert (target / "api" / ".env.test").read_text() == "API=1\n"

    def test_existing_files_are_not_overwritten(self, temp_dir):
        source = temp_dir / "src"
        target = temp_dir / "dst"
        source.mkdir()
        target.mkdir()
        (source / ".env").write_text("NEW=1\n")
        (target / ".env").write_text("OLD=1\n")

        result = make_service().copy_to(source, target)

        assert result.copied == []
        assert result.skipped == [".env"]
        assert (target / ".env").read_text() == "OLD=1\n"

    def test_nothing_to_copy(self, temp_dir):
        result = make_service().copy_to(temp_dir, temp_dir / "dst")

        assert result.found == 0
        assert result.copied == []
