"""Main CLI entry point for HOIST."""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING

import click
from rich.console import Console
from rich.markup import escape

from hoist import __version__
from hoist.core.config import DEFAULT_CONFIG_PATH

if TYPE_CHECKING:
    from hoist.adapters.provider_factory import ProviderFactory
    from hoist.clients.git_cli import GitCLI
    from hoist.core.config import UpgraderConfig
    from hoist.gitops.upgrade_orchestrator import UpgradeOrchestrator

console = Console(stderr=True)

LOGO = r"""
 _   _  ___ ___ ___ _____
| |_| |/ _ \_ _/ __|_   _|
|  _  | (_) | |\__ \ | |
|_| |_|\___/___|___/ |_|
"""


class HoistContext:
    """Shared context for CLI commands with lazy initialization."""

    def __init__(self, config_path: str):
        """Initialize context with config path.

        Args:
            config_path: Path to configuration file
        """
        self.config_path = config_path
        self._config: UpgraderConfig | None = None
        self._git: GitCLI | None = None
        self._provider_factory: ProviderFactory | None = None

    @property
    def config(self) -> UpgraderConfig:
        """Get or create config lazily."""
        if self._config is None:
            from hoist.core.config import UpgraderConfig

            self._config = UpgraderConfig.load(self.config_path)
        return self._config

    @property
    def git(self) -> GitCLI:
        """Get or create git wrapper lazily."""
        if self._git is None:
            from hoist.clients.git_cli import GitCLI

            self._git = GitCLI(executable=self.config.git.executable)
        return self._git

    @property
    def provider_factory(self) -> ProviderFactory:
        """Get or create provider factory lazily."""
        if self._provider_factory is None:
            from hoist.adapters.provider_factory import ProviderFactory

            self._provider_factory = ProviderFactory(self.config)
        return self._provider_factory

    def dev_env_url(self) -> str:
        """Look up the dev environment repository URL in the cluster."""
        from hoist.clients.kubernetes_client import KubernetesClient

        k8s = self.config.kubernetes
        client = KubernetesClient(kubeconfig_path=k8s.kubeconfig_path, context=k8s.context)
        return client.get_environment_source_url(name=k8s.environment, namespace=k8s.namespace)

    def orchestrator(self) -> UpgradeOrchestrator:
        """Create the upgrade orchestrator."""
        from hoist.gitops.change_publisher import ChangePublisher
        from hoist.gitops.upgrade_orchestrator import UpgradeOrchestrator

        return UpgradeOrchestrator(
            config=self.config,
            git=self.git,
            publisher=ChangePublisher(self.git, self.provider_factory),
            dev_env_locator=self.dev_env_url,
        )


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--config",
    type=click.Path(),
    default=DEFAULT_CONFIG_PATH,
    help="Path to configuration file",
)
@click.pass_context
def cli(ctx: click.Context, config: str) -> None:
    """HOIST - Upgrade jx boot GitOps repositories to the latest version stream and boot config."""
    console.print(f"[bold cyan]{LOGO}[/bold cyan]", highlight=False)
    console.print(f"[bold]v{__version__}[/bold]\n")

    ctx.obj = HoistContext(config_path=config)


@cli.command()
@click.option(
    "--dir",
    "-d",
    "work_dir",
    type=click.Path(file_okay=False),
    default=None,
    help="The directory to look for the Jenkins X Pipeline and requirements",
)
@click.pass_context
def upgrade(ctx: click.Context, work_dir: str | None) -> None:
    """Create a pull request upgrading boot config and version stream ref."""
    from hoist.core.exceptions import HoistError
    from hoist.core.models import WorkflowState
    from hoist.utils.logging import get_logger, log_error, setup_logging

    hoist_ctx = ctx.obj

    try:
        log_config = hoist_ctx.config.logging
    except HoistError as e:
        console.print(f"[red]✗ {escape(str(e))}[/red]")
        sys.exit(1)

    setup_logging(level=log_config.level, format=log_config.format, output=log_config.output)
    logger = get_logger(__name__)

    console.print("[bold blue]HOIST Upgrade Command[/bold blue]")
    console.print(f"Directory: {work_dir or 'clone of the dev environment'}\n")

    try:
        result = hoist_ctx.orchestrator().run(work_dir)
    except HoistError as e:
        console.print(f"[red]✗ Upgrade failed: {escape(str(e))}[/red]")
        log_error(logger, e, operation="upgrade")
        sys.exit(1)

    if result.state == WorkflowState.DONE_NO_OP:
        console.print("[green]✓ No upgrade available[/green]")
        return

    console.print(f"[green]✓ Version stream upgraded to {result.upgrade_sha}[/green]")
    if result.boot_config_upgraded:
        console.print(
            f"[green]✓ Boot config upgraded from v{result.from_version} "
            f"to v{result.to_version}[/green]"
        )
        console.print(f"  Replayed commits: {len(result.replayed)}")
        for commit in result.skipped:
            console.print(f"  [yellow]Skipped merge commit {commit.sha} - {escape(commit.subject)}[/yellow]")
    else:
        console.print("  No boot config upgrade available")
    console.print(f"[green]✓ Pull request: {result.pull_request_url}[/green]")


@cli.command()
@click.option("--dir", "-d", "work_dir", type=click.Path(file_okay=False), default=".")
@click.pass_context
def validate(ctx: click.Context, work_dir: str) -> None:
    """Validate configuration, requirements file and provider credentials."""
    from hoist.core.exceptions import HoistError
    from hoist.core.models import GitRepositoryInfo
    from hoist.gitops.requirements import RequirementsFile

    console.print("[bold magenta]HOIST Validate Command[/bold magenta]\n")
    hoist_ctx = ctx.obj
    ok = True

    console.print("[bold]1. Configuration[/bold]")
    try:
        config = hoist_ctx.config
        console.print("  [green]✓ Config valid[/green]\n")
    except HoistError as e:
        console.print(f"  [red]✗ Config invalid: {escape(str(e))}[/red]\n")
        sys.exit(1)

    console.print("[bold]2. Requirements File[/bold]")
    try:
        requirements = RequirementsFile.load(work_dir, config.git.requirements_file)
        stream = requirements.version_stream
        console.print(f"  Path: {requirements.path}")
        console.print(f"  Version stream: {stream.url} @ {stream.ref}")
        console.print(f"  Boot config: {config.boot_config_url_for(stream.url)}")
        console.print("  [green]✓ Requirements file valid[/green]\n")
    except HoistError as e:
        ok = False
        console.print(f"  [red]✗ {escape(str(e))}[/red]\n")

    console.print("[bold]3. Git Provider[/bold]")
    try:
        repo = GitRepositoryInfo.parse(hoist_ctx.git.get_remote_url(work_dir))
        kind = hoist_ctx.provider_factory.resolve_kind(repo)
        hoist_ctx.provider_factory.resolve_token(repo)
        console.print(f"  Repository: {repo.full_name} on {repo.host} ({kind})")
        console.print("  [green]✓ Provider and token found[/green]\n")
    except (HoistError, ValueError) as e:
        ok = False
        console.print(f"  [red]✗ {escape(str(e))}[/red]\n")

    if not ok:
        sys.exit(1)
    console.print("[bold green]✓ Validation complete![/bold green]")


if __name__ == "__main__":
    cli()
