"""Configuration management for HOIST."""

from pathlib import Path

import yaml
from pydantic import BaseModel, Field

from hoist.core.exceptions import ConfigurationError

DEFAULT_CONFIG_PATH = "~/.hoist/config.yaml"

DEFAULT_VERSIONS_URL = "https://github.com/jenkins-x/jenkins-x-versions.git"
DEFAULT_BOOT_CONFIG_URL = "https://github.com/jenkins-x/jenkins-x-boot-config.git"
CLOUDBEES_VERSIONS_URL = "https://github.com/cloudbees/cloudbees-jenkins-x-distro.git"
CLOUDBEES_BOOT_CONFIG_URL = "https://github.com/cloudbees/cloudbees-jenkins-x-boot-config.git"

PULL_REQUEST_LABEL = "jx-boot-upgrade"


def normalize_git_url(url: str) -> str:
    """Normalize a git URL for comparison (case, trailing slash and .git suffix)."""
    normalized = url.strip().rstrip("/").lower()
    if normalized.endswith(".git"):
        normalized = normalized[: -len(".git")]
    return normalized


class GitConfig(BaseModel):
    """Local git settings."""

    trunk_branch: str = "master"
    excluded_paths: list[str] = Field(default_factory=lambda: ["OWNERS"])
    requirements_file: str = "jx-requirements.yml"
    executable: str = "git"


class VersionStreamConfig(BaseModel):
    """Version stream to boot config mapping."""

    default_boot_config_url: str = DEFAULT_BOOT_CONFIG_URL
    boot_config_urls: dict[str, str] = Field(
        default_factory=lambda: {CLOUDBEES_VERSIONS_URL: CLOUDBEES_BOOT_CONFIG_URL}
    )


class PullRequestConfig(BaseModel):
    """Pull request raised for each upgrade."""

    branch_name: str = "hoist_boot_upgrade_branch"
    title: str = "feat(config): upgrade configuration"
    message: str = "Upgrade configuration"
    labels: list[str] = Field(default_factory=lambda: [PULL_REQUEST_LABEL])


class ScmServerConfig(BaseModel):
    """A source control server HOIST can raise pull requests against."""

    url: str
    kind: str  # github or gitlab
    token_env: str | None = None
    api_url: str | None = None


class ScmConfig(BaseModel):
    """Source control provider configuration."""

    servers: list[ScmServerConfig] = Field(default_factory=list)
    default_token_env: str = "GIT_TOKEN"


class KubernetesConfig(BaseModel):
    """Cluster access used to find the dev environment repository."""

    namespace: str = "jx"
    environment: str = "dev"
    kubeconfig_path: str | None = None
    context: str | None = None


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    format: str = "console"
    output: str = "stderr"


class UpgraderConfig(BaseModel):
    """Main HOIST configuration."""

    git: GitConfig = Field(default_factory=GitConfig)
    version_stream: VersionStreamConfig = Field(default_factory=VersionStreamConfig)
    pull_request: PullRequestConfig = Field(default_factory=PullRequestConfig)
    scm: ScmConfig = Field(default_factory=ScmConfig)
    kubernetes: KubernetesConfig = Field(default_factory=KubernetesConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def from_file(cls, path: str | Path) -> "UpgraderConfig":
        """Load configuration from YAML file.

        Args:
            path: Path to configuration file

        Returns:
            UpgraderConfig instance

        Raises:
            ConfigurationError: If file cannot be loaded or parsed
        """
        config_path = Path(path).expanduser()

        if not config_path.exists():
            raise ConfigurationError(f"Configuration file not found: {config_path}")

        try:
            with config_path.open() as f:
                data = yaml.safe_load(f)
        except Exception as e:
            raise ConfigurationError(f"Failed to load configuration: {e}") from e

        try:
            return cls(**(data or {}))
        except Exception as e:
            raise ConfigurationError(f"Invalid configuration: {e}") from e

    @classmethod
    def load(cls, path: str | Path | None = None) -> "UpgraderConfig":
        """Load configuration, falling back to defaults when the default file is absent.

        An explicitly given path must exist.
        """
        if path is None or str(path) == DEFAULT_CONFIG_PATH:
            if not Path(DEFAULT_CONFIG_PATH).expanduser().exists():
                return cls()
            path = DEFAULT_CONFIG_PATH
        return cls.from_file(path)

    def boot_config_url_for(self, version_stream_url: str) -> str:
        """Get the boot config repository derived from a version stream.

        Args:
            version_stream_url: Version stream repository URL

        Returns:
            Boot config repository URL
        """
        wanted = normalize_git_url(version_stream_url)
        for stream_url, boot_config_url in self.version_stream.boot_config_urls.items():
            if normalize_git_url(stream_url) == wanted:
                return boot_config_url
        return self.version_stream.default_boot_config_url

    def get_scm_server(self, host: str) -> ScmServerConfig | None:
        """Get configured server by host name.

        Args:
            host: Host part of a repository URL

        Returns:
            ScmServerConfig if found, None otherwise
        """
        for server in self.scm.servers:
            server_host = normalize_git_url(server.url).split("://", 1)[-1].split("/", 1)[0]
            if server_host == host.lower():
                return server
        return None
