"""Integration test fixtures and configuration."""

import itertools
import os
import re
import shutil
import subprocess
from pathlib import Path

import pytest

MIN_GIT_VERSION = (2, 32)


def git_version() -> tuple[int, ...] | None:
    """Get the installed git version, or None if git is missing."""
    if shutil.which("git") is None:
        return None
    output = subprocess.run(["git", "--version"], capture_output=True, text=True).stdout
    match = re.search(r"(\d+)\.(\d+)", output)
    return tuple(int(part) for part in match.groups()) if match else None


@pytest.fixture
def skip_if_no_git():
    """Skip test if a git new enough for GIT_CONFIG_GLOBAL is not available."""
    version = git_version()
    if version is None or version < MIN_GIT_VERSION:
        pytest.skip(f"git >= {'.'.join(map(str, MIN_GIT_VERSION))} not available")


@pytest.fixture
def git_global_config(tmp_path: Path, monkeypatch, skip_if_no_git) -> Path:
    """Isolate git from user and system configuration and set a committer identity."""
    config_file = tmp_path / "gitconfig"
    config_file.write_text("[init]\n\tdefaultBranch = master\n[commit]\n\tgpgsign = false\n")

    monkeypatch.setenv("GIT_CONFIG_GLOBAL", str(config_file))
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    monkeypatch.setenv("GIT_AUTHOR_NAME", "HOIST Test")
    monkeypatch.setenv("GIT_AUTHOR_EMAIL", "hoist@example.com")
    monkeypatch.setenv("GIT_COMMITTER_NAME", "HOIST Test")
    monkeypatch.setenv("GIT_COMMITTER_EMAIL", "hoist@example.com")
    return config_file


class LocalRepo:
    """A throwaway git repository with commits at increasing timestamps."""

    _clock = itertools.count(1)

    def __init__(self, path: Path):
        self.path = path
        path.mkdir(parents=True)
        self.git("init", "-q")
        self.git("symbolic-ref", "HEAD", "refs/heads/master")

    def git(self, *args: str) -> str:
        tick = next(self._clock)
        env = dict(os.environ)
        env["GIT_AUTHOR_DATE"] = f"2024-01-01T00:{tick // 60:02d}:{tick % 60:02d}Z"
        env["GIT_COMMITTER_DATE"] = env["GIT_AUTHOR_DATE"]
        result = subprocess.run(
            ["git", *args], cwd=self.path, capture_output=True, text=True, check=True, env=env
        )
        return result.stdout.strip()

    def write(self, files: dict[str, str]) -> None:
        for name, content in files.items():
            target = self.path / name
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content)

    def commit(self, message: str, files: dict[str, str] | None = None) -> str:
        if files:
            self.write(files)
        self.git("add", "-A")
        self.git("commit", "-q", "-m", message)
        return self.head()

    def head(self) -> str:
        return self.git("rev-parse", "HEAD")

    def subjects(self, rev: str = "HEAD", count: int = 20) -> list[str]:
        return self.git("log", f"-{count}", "--format=%s", rev).splitlines()

    def show(self, rev: str, path: str) -> str:
        return self.git("show", f"{rev}:{path}")


BOOT_CONFIG_V1 = {
    "env/values.yaml": "replicas: 1\n",
    "OWNERS": "approvers:\n- upstream\n",
    "jenkins-x.yml": "buildPack: none\n",
}


@pytest.fixture
def boot_config_repo(tmp_path: Path, git_global_config: Path) -> LocalRepo:
    """Upstream boot config with tags v1.0.0 and v1.1.0 and a merged feature branch.

    History, oldest first:
        initial (v1.0.0) -> bump replicas -> [feature: add ingress] merge -> add storage (v1.1.0)
    """
    repo = LocalRepo(tmp_path / "upstream" / "jenkins-x-boot-config")
    repo.commit("initial boot config", BOOT_CONFIG_V1)
    repo.git("tag", "v1.0.0")

    repo.commit(
        "fix: bump replicas",
        {"env/values.yaml": "replicas: 2\n", "OWNERS": "approvers:\n- upstream\n- newcomer\n"},
    )

    repo.git("checkout", "-q", "-b", "feature")
    repo.commit("feat: add ingress", {"env/ingress.yaml": "enabled: true\n"})
    repo.git("checkout", "-q", "master")
    repo.git("merge", "-q", "--no-ff", "-m", "Merge branch 'feature'", "feature")

    repo.commit("feat: add storage", {"env/storage.yaml": "size: 10Gi\n"})
    repo.git("tag", "v1.1.0")
    return repo


@pytest.fixture
def make_repo(git_global_config: Path):
    """Factory for throwaway repositories."""
    return LocalRepo


@pytest.fixture
def boot_config_files() -> dict[str, str]:
    """Files of boot config v1.0.0."""
    return dict(BOOT_CONFIG_V1)
