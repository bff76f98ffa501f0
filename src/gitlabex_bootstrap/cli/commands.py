# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""
GitLabEx Bootstrap CLI Commands.

Provides the ``provision`` command run by the init container and a
``check`` command for probing a GitLab instance by hand.

Exit status is 0 on success and 1 on any failure. Credentials are read
from the environment only and are never accepted as flags.
"""

from __future__ import annotations

import logging
import os

import click
import httpx
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from gitlabex_bootstrap import __version__
from gitlabex_bootstrap.enums import EnumResponseClass
from gitlabex_bootstrap.errors import BootstrapError
from gitlabex_bootstrap.handlers.handler_gitlab_api import VERSION_PATH
from gitlabex_bootstrap.services.service_artifact_publisher import DEFAULT_SHARED_ROOT
from gitlabex_bootstrap.services.service_bootstrap_pipeline import (
    DEFAULT_CONFIG_PATH,
    ServiceBootstrapPipeline,
)
from gitlabex_bootstrap.services.service_config_loader import (
    CREDENTIAL_KEYS,
    load_bootstrap_config,
)
from gitlabex_bootstrap.services.service_readiness_probe import (
    DEFAULT_MAX_ATTEMPTS,
    DEFAULT_WARMUP_SECONDS,
    HEALTH_PATH,
    READINESS_PATH,
    ServiceReadinessProbe,
)
from gitlabex_bootstrap.utils.util_error_sanitization import sanitize_error_message

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

console = Console()
logger = logging.getLogger("gitlabex-bootstrap")


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format=LOG_FORMAT,
    )
    if not verbose:
        # httpx logs every request at INFO.
        logging.getLogger("httpx").setLevel(logging.WARNING)


def _credential_overrides() -> dict[str, str]:
    return {key: os.environ[key] for key in CREDENTIAL_KEYS if os.environ.get(key)}


@click.group()
@click.version_option(__version__, prog_name="gitlabex-bootstrap")
def cli() -> None:
    """GitLabEx OAuth bootstrap."""


@cli.command("provision")
@click.option(
    "--config",
    "config_path",
    envvar="OAUTH_CONFIG_FILE",
    default=str(DEFAULT_CONFIG_PATH),
    show_default=True,
    type=click.Path(dir_okay=False),
    help="KEY=VALUE config file (env: OAUTH_CONFIG_FILE)",
)
@click.option(
    "--shared-dir",
    envvar="SHARED_DIR",
    default=str(DEFAULT_SHARED_ROOT),
    show_default=True,
    type=click.Path(file_okay=False),
    help="Shared volume mount point (env: SHARED_DIR)",
)
@click.option(
    "--subdir",
    default=None,
    help="Subdirectory below the shared volume for the artifact",
)
@click.option(
    "--max-attempts",
    default=DEFAULT_MAX_ATTEMPTS,
    show_default=True,
    type=click.IntRange(min=1),
    help="Readiness checks before giving up",
)
@click.option(
    "--warmup-seconds",
    default=DEFAULT_WARMUP_SECONDS,
    show_default=True,
    type=click.FloatRange(min=0),
    help="Sleep before the first readiness check",
)
@click.option(
    "--dry-run",
    is_flag=True,
    help="Validate config and show the plan without contacting GitLab",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def provision_cmd(
    config_path: str,
    shared_dir: str,
    subdir: str | None,
    max_attempts: int,
    warmup_seconds: float,
    dry_run: bool,
    verbose: bool,
) -> None:
    """Provision the GitLab OAuth application and publish its credentials."""
    _configure_logging(verbose)
    pipeline = ServiceBootstrapPipeline(
        config_path=config_path,
        shared_root=shared_dir,
        subdirectory=subdir,
        max_attempts=max_attempts,
        warmup_seconds=warmup_seconds,
        overrides=_credential_overrides(),
    )

    try:
        if dry_run:
            plan = pipeline.plan()
            table = Table(title="Bootstrap Plan (dry run)")
            table.add_column("Setting", style="cyan")
            table.add_column("Value")
            for key, value in plan.items():
                if isinstance(value, list):
                    value = ", ".join(value)
                table.add_row(key.replace("_", " "), escape(str(value)))
            console.print(table)
            raise SystemExit(0)

        pipeline.run()
    except BootstrapError as e:
        stage = e.stage.value if e.stage is not None else "unknown"
        logger.error("Bootstrap failed during %s: %s", stage, e)
        raise SystemExit(1) from e
    except Exception as e:
        logger.exception("Bootstrap failed unexpectedly: %s", sanitize_error_message(e))
        raise SystemExit(1) from e

    raise SystemExit(0)


@cli.command("check")
@click.option(
    "--config",
    "config_path",
    envvar="OAUTH_CONFIG_FILE",
    default=str(DEFAULT_CONFIG_PATH),
    show_default=True,
    type=click.Path(dir_okay=False),
    help="KEY=VALUE config file (env: OAUTH_CONFIG_FILE)",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def check_cmd(config_path: str, verbose: bool) -> None:
    """Probe the GitLab API, health and readiness endpoints once."""
    _configure_logging(verbose)
    try:
        config = load_bootstrap_config(config_path)
    except BootstrapError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise SystemExit(1) from e

    console.print(f"[bold blue]Checking GitLab at {config.internal_url}...[/bold blue]")
    with httpx.Client(
        timeout=httpx.Timeout(config.http_timeout_seconds),
        verify=config.tls_verify,
    ) as client:
        probe = ServiceReadinessProbe(config.internal_url, client, warmup_seconds=0)
        checks = [
            probe.check_once(path)
            for path in (VERSION_PATH, HEALTH_PATH, READINESS_PATH)
        ]

    table = Table(title="GitLab Endpoints")
    table.add_column("Endpoint", style="cyan")
    table.add_column("Status", style="bold")
    table.add_column("HTTP", style="dim")
    table.add_column("Detail")
    for check in checks:
        ready = check.verdict is EnumResponseClass.READY
        table.add_row(
            check.path,
            "[green]READY[/green]" if ready else "[red]NOT READY[/red]",
            str(check.status_code) if check.status_code is not None else "-",
            escape(check.detail),
        )
    console.print(table)

    api_ready = checks[0].verdict is EnumResponseClass.READY
    raise SystemExit(0 if api_ready else 1)


def main() -> None:
    """Console script entry point."""
    cli()


if __name__ == "__main__":
    main()
