"""Git command-line wrapper for repository operations."""

import os
import re
import subprocess
from pathlib import Path

from hoist.core.exceptions import CherryPickError, GitError, NoopError
from hoist.core.models import CommitRecord
from hoist.utils.logging import get_logger

logger = get_logger(__name__)

MERGE_COMMIT_MARKER = "is a merge but no -m option was given"

_URL_CREDENTIALS = re.compile(r"(?P<scheme>https?://)[^/@\s]+@")
_FIELD_SEPARATOR = "\x1f"


def redact(text: str) -> str:
    """Hide credentials embedded in URLs."""
    return _URL_CREDENTIALS.sub(r"\g<scheme>***@", text)


class GitCLI:
    """Wrapper for the git command-line tool."""

    def __init__(self, executable: str = "git"):
        """Initialize git wrapper.

        Args:
            executable: git binary to run
        """
        self.executable = executable

    def _run_command(
        self,
        args: list[str],
        cwd: str | Path | None = None,
        check: bool = True,
    ) -> subprocess.CompletedProcess:
        """Run a git command.

        Args:
            args: Command arguments
            cwd: Directory to run in
            check: Raise exception on non-zero exit code

        Returns:
            CompletedProcess instance

        Raises:
            GitError: If command fails
        """
        cmd = [self.executable] + args
        printable = redact(" ".join(cmd))

        logger.debug("running_git_command", command=printable, cwd=str(cwd) if cwd else None)

        env = dict(os.environ)
        env["GIT_TERMINAL_PROMPT"] = "0"

        try:
            result = subprocess.run(
                cmd,
                cwd=str(cwd) if cwd else None,
                capture_output=True,
                text=True,
                check=check,
                env=env,
            )

            logger.debug("git_command_completed", returncode=result.returncode)

            return result

        except subprocess.CalledProcessError as e:
            output = redact((e.stderr or "") + (e.stdout or ""))
            logger.debug(
                "git_command_failed",
                command=printable,
                returncode=e.returncode,
                stderr=redact(e.stderr or ""),
            )
            raise GitError(
                f"git command failed: {printable}: {output.strip()}",
                command=[redact(a) for a in args],
                returncode=e.returncode,
                stderr=output,
            ) from e
        except FileNotFoundError as e:
            logger.error("git_not_found", executable=self.executable)
            raise GitError(f"{self.executable} command not found. Please install git.") from e

    def clone(self, url: str, directory: str | Path) -> None:
        """Clone a repository with a working tree."""
        logger.info("cloning_repository", url=redact(url), directory=str(directory))
        self._run_command(["clone", url, str(directory)])

    def clone_bare(self, url: str, directory: str | Path) -> None:
        """Clone a repository without a working tree."""
        logger.info("cloning_bare_repository", url=redact(url), directory=str(directory))
        self._run_command(["clone", "--bare", url, str(directory)])

    def fetch(self, directory: str | Path, source: str, refspecs: list[str]) -> None:
        """Fetch refs from another repository without touching local tags."""
        self._run_command(["fetch", "--no-tags", "--force", source] + refspecs, cwd=directory)

    def checkout(self, directory: str | Path, ref: str) -> None:
        """Check out a branch, tag or commit."""
        self._run_command(["checkout", ref], cwd=directory)

    def create_branch(self, directory: str | Path, branch: str) -> None:
        """Create a branch at HEAD."""
        self._run_command(["branch", branch], cwd=directory)

    def delete_local_branch(self, directory: str | Path, branch: str) -> None:
        """Force delete a local branch."""
        self._run_command(["branch", "-D", branch], cwd=directory)

    def get_commit_pointed_to_by_tag(self, directory: str | Path, tag: str) -> str:
        """Resolve a tag, branch or commit-ish to the commit SHA it points at.

        Args:
            directory: Repository directory
            tag: Ref to resolve

        Returns:
            Full commit SHA

        Raises:
            GitError: If the ref does not exist
        """
        result = self._run_command(["rev-list", "-n", "1", tag, "--"], cwd=directory)
        sha = result.stdout.strip()
        if not sha:
            raise GitError(f"no commit found for {tag}")
        return sha

    def get_commits(self, directory: str | Path, start_sha: str, end_sha: str) -> list[CommitRecord]:
        """List commits reachable from end_sha but not from start_sha.

        Returned newest first, in the order git log prints them.
        """
        result = self._run_command(
            ["log", f"--format=%H{_FIELD_SEPARATOR}%s", f"{start_sha}..{end_sha}", "--"],
            cwd=directory,
        )

        commits = []
        for line in result.stdout.splitlines():
            if not line.strip():
                continue
            sha, _, subject = line.partition(_FIELD_SEPARATOR)
            commits.append(CommitRecord(sha=sha.strip(), subject=subject.strip()))
        return commits

    def cherry_pick_theirs(self, directory: str | Path, sha: str) -> None:
        """Cherry-pick a commit, preferring its side of any conflicting hunk.

        Raises:
            CherryPickError: With kind ``merge_commit`` if the commit has several
                parents, ``conflict`` for any other failure
        """
        try:
            self._run_command(
                ["cherry-pick", sha, "--strategy=recursive", "-X", "theirs"],
                cwd=directory,
            )
        except GitError as e:
            kind = (
                CherryPickError.MERGE_COMMIT
                if MERGE_COMMIT_MARKER in e.stderr
                else CherryPickError.CONFLICT
            )
            raise CherryPickError(
                f"cherry-pick of {sha} failed: {e.stderr.strip()}",
                sha=sha,
                kind=kind,
                stderr=e.stderr,
            ) from e

    def checkout_commit_files(self, directory: str | Path, sha: str, paths: list[str]) -> None:
        """Restore paths from a commit into the index and working tree."""
        self._run_command(["checkout", sha, "--"] + paths, cwd=directory)

    def add_commit_files(self, directory: str | Path, message: str, paths: list[str]) -> None:
        """Stage and commit the given paths only.

        Raises:
            NoopError: If the paths have no staged changes
        """
        self._run_command(["add", "--"] + paths, cwd=directory)

        diff = self._run_command(
            ["diff", "--cached", "--quiet", "--"] + paths, cwd=directory, check=False
        )
        if diff.returncode == 0:
            raise NoopError(f"nothing to commit for {', '.join(paths)}")

        self._run_command(["commit", "-m", message, "--"] + paths, cwd=directory)

    def get_remote_url(self, directory: str | Path, remote: str = "origin") -> str:
        """Get the URL of a remote."""
        result = self._run_command(["config", "--get", f"remote.{remote}.url"], cwd=directory)
        return result.stdout.strip()

    def push(
        self, directory: str | Path, remote: str, refspec: str, force: bool = True
    ) -> None:
        """Push a refspec to a remote name or URL."""
        args = ["push"]
        if force:
            args.append("--force")
        self._run_command(args + [remote, refspec], cwd=directory)
