"""Branch query service for git-worktree-keeper."""

from typing import Optional, Tuple

import git

from git_worktree_keeper.exceptions import GitOperationError
from git_worktree_keeper.logging_config import get_logger
from git_worktree_keeper.models.worktree import MainLineState
from git_worktree_keeper.services.git.worktrees import describe_git_error

logger = get_logger(__name__)


def classify_against_main(
    main_sha: str, worktree_sha: str, merge_base: Optional[str]
) -> MainLineState:
    """Classify a worktree tip relative to the main tip and their merge base."""
    if worktree_sha == main_sha:
        return MainLineState.IDENTICAL
    if merge_base == main_sha:
        return MainLineState.AHEAD
    if merge_base == worktree_sha:
        return MainLineState.BEHIND
    return MainLineState.DIVERGED


class BranchQueries:
    """Service for querying and creating branches."""

    def __init__(self, repo_path: str, remote_name: str = "origin"):
        """Initialize the branch queries service.

        Args:
            repo_path: Path to the git repository
            remote_name: Remote consulted for tracking branches
        """
        self.repo_path = repo_path
        self.remote_name = remote_name

    def _get_repo(self):
        """Open a fresh git.Repo for the repository."""
        return git.Repo(self.repo_path)

    def has_local_branch(self, branch_name: str) -> bool:
        """Check whether refs/heads/<branch_name> exists."""
        try:
            self._get_repo().git.show_ref("--verify", "--quiet", f"refs/heads/{branch_name}")
            return True
        except git.exc.GitCommandError:
            return False

    def has_remote_branch(self, branch_name: str) -> bool:
        """Ask the remote whether a branch of this name exists (ls-remote)."""
        try:
            self._get_repo().git.ls_remote(
                "--exit-code", "--heads", self.remote_name, branch_name
            )
            return True
        except git.exc.GitCommandError as e:
            logger.debug(f"No remote branch {self.remote_name}/{branch_name}: {e}")
            return False

    def create_tracking_branch(self, branch_name: str) -> None:
        """Fetch <remote>/<branch_name> and create a local branch tracking it.

        Raises:
            GitOperationError: If the fetch or branch creation fails
        """
        repo = self._get_repo()
        try:
            repo.git.fetch(self.remote_name, branch_name)
        except git.exc.GitCommandError as e:
            raise GitOperationError(
                "fetch", branch_name,
                f"Failed to fetch '{self.remote_name}/{branch_name}': {describe_git_error(e, 'fetch')}",
            )
        try:
            repo.git.branch("--track", branch_name, f"{self.remote_name}/{branch_name}")
        except git.exc.GitCommandError as e:
            raise GitOperationError(
                "branch --track", branch_name,
                f"Failed to create tracking branch: {describe_git_error(e, 'branch')}",
            )
        logger.info(f"Created {branch_name} tracking {self.remote_name}/{branch_name}")

    def create_branch(self, branch_name: str) -> None:
        """Create a local branch at the current HEAD.

        Raises:
            GitOperationError: If git refuses the branch
        """
        try:
            self._get_repo().git.branch(branch_name)
        except git.exc.GitCommandError as e:
            raise GitOperationError(
                "branch", branch_name,
                f"Failed to create branch '{branch_name}': {describe_git_error(e, 'branch')}",
            )
        logger.info(f"Created branch {branch_name}")

    def delete_branch(self, branch_name: str) -> tuple[bool, Optional[str]]:
        """Force-delete a local branch.

        Returns:
            Tuple of (success, error_message). error_message is None on success.
        """
        try:
            self._get_repo().git.branch("-D", branch_name)
            logger.info(f"Deleted branch {branch_name}")
            return True, None
        except git.exc.GitCommandError as e:
            error_msg = describe_git_error(e, "branch -D")
            logger.error(f"Failed to delete branch {branch_name}: {error_msg}")
            return False, error_msg

    def get_merge_base(self, sha_a: str, sha_b: str) -> Optional[str]:
        """Best common ancestor of two commits, or None if histories are unrelated."""
        try:
            bases = self._get_repo().merge_base(sha_a, sha_b)
        except git.exc.GitCommandError as e:
            logger.debug(f"No merge base between {sha_a} and {sha_b}: {e}")
            return None
        return bases[0].hexsha if bases else None

    def count_commits(self, revision_range: str) -> int:
        """Number of commits in `revision_range` (rev-list --count).

        Raises:
            GitOperationError: If git cannot evaluate the range
        """
        try:
            return int(self._get_repo().git.rev_list("--count", revision_range).strip())
        except git.exc.GitCommandError as e:
            raise GitOperationError("rev-list", message=describe_git_error(e, "rev-list"))

    def compare_with_main(
        self, main_sha: str, worktree_sha: str
    ) -> Tuple[MainLineState, int, int]:
        """Compare a worktree tip with the main tip.

        Returns:
            Tuple of (state, ahead, behind). For an ahead tree `ahead` is the
            number of commits after main; for a behind tree `behind` is the
            number of main commits it lacks; a diverged tree carries both,
            counted from the merge base.
        """
        if worktree_sha == main_sha:
            return MainLineState.IDENTICAL, 0, 0

        merge_base = self.get_merge_base(main_sha, worktree_sha)
        logger.debug(f"Merge base of {main_sha[:7]} and {worktree_sha[:7]}: {merge_base}")
        state = classify_against_main(main_sha, worktree_sha, merge_base)

        if state == MainLineState.AHEAD:
            return state, self.count_commits(f"{main_sha}..{worktree_sha}"), 0
        if state == MainLineState.BEHIND:
            return state, 0, self.count_commits(f"{worktree_sha}..{main_sha}")
        if merge_base:
            return (
                state,
                self.count_commits(f"{merge_base}..{worktree_sha}"),
                self.count_commits(f"{merge_base}..{main_sha}"),
            )
        return state, 0, 0

    def get_remote_divergence(self, branch_name: str) -> Tuple[int, int]:
        """Commits ahead of and behind <remote>/<branch_name>.

        A count git cannot compute (for instance when the remote ref was never
        fetched) is reported as 0.
        """
        remote_ref = f"{self.remote_name}/{branch_name}"
        counts = []
        for revision_range in (f"{remote_ref}..{branch_name}", f"{branch_name}..{remote_ref}"):
            try:
                counts.append(self.count_commits(revision_range))
            except GitOperationError as e:
                logger.debug(f"Treating {revision_range} as 0 commits: {e}")
                counts.append(0)
        return counts[0], counts[1]
