"""Click-based CLI for galion - rclone sync remotes in the terminal."""

from __future__ import annotations

import sys
import time
from pathlib import Path
from typing import Optional

import click

from galion import __version__
from galion.app import AppOptions, GalionApp
from galion.config.defaults import generate_default_config
from galion.config.loader import get_config_path, load_config, validate_config_file
from galion.errors import GalionError, RcloneError
from galion.jobs.model import JobStatus
from galion.output.console import Console
from galion.remotes.store import RemoteStore
from galion.utils.logging import setup_logging

console = Console()


def _fail(message: str) -> None:
    console.print_error(message)
    sys.exit(1)


def _options(ctx: click.Context) -> AppOptions:
    return ctx.ensure_object(AppOptions)


def _open_app(ctx: click.Context, *, quiet: bool = False, console_logging: bool = True) -> GalionApp:
    """Load the configuration and set up logging for a command."""
    options = _options(ctx)
    if quiet:
        options.hide_banner = True
    app = GalionApp.from_options(options, console=console)
    output = app.config.output
    level = "DEBUG" if ctx.meta.get("galion.verbose") or output.verbose else output.log_level
    setup_logging(level, output.log_file, console_enabled=console_logging)
    return app


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="galion")
@click.option("--config", "config_path", type=click.Path(dir_okay=False, path_type=Path), help="Path to the configuration file")
@click.option("--rclone-config", type=click.Path(dir_okay=False, path_type=Path), help="Path to the rclone configuration file")
@click.option("--rclone-ask-password", is_flag=True, help="Let rclone ask for the configuration password")
@click.option("--hide-banner", is_flag=True, help="Do not print the banner")
@click.option("--auto-update-config", is_flag=True, help="Save the configuration after start-up")
@click.option("--ignore-duplicate-remote", is_flag=True, help="Skip rclone remotes already defined in galion")
@click.option("--rc-url", help="URL of the rclone rc server (overrides the configuration)")
@click.option("--verbose", "-v", is_flag=True, help="Debug logging")
@click.pass_context
def cli(
    ctx: click.Context,
    config_path: Optional[Path],
    rclone_config: Optional[Path],
    rclone_ask_password: bool,
    hide_banner: bool,
    auto_update_config: bool,
    ignore_duplicate_remote: bool,
    rc_url: Optional[str],
    verbose: bool,
) -> None:
    """Galion - drive rclone sync jobs from the terminal.

    Without a command the interactive interface starts.

    \b
    Keys:  j/k move   s sync   e edit   c duplicate   d delete   q quit
    """
    ctx.obj = AppOptions(
        config_path=config_path,
        rclone_config=rclone_config,
        rclone_ask_password=rclone_ask_password,
        hide_banner=hide_banner,
        auto_update_config=auto_update_config,
        ignore_duplicate_remote=ignore_duplicate_remote,
        rc_url=rc_url,
    )
    ctx.meta["galion.verbose"] = verbose
    if ctx.invoked_subcommand is None:
        ctx.invoke(tui)


@cli.command()
@click.pass_context
def tui(ctx: click.Context) -> None:
    """Start the interactive interface."""
    try:
        # Log lines would corrupt the screen, keep them in the log file
        with _open_app(ctx, console_logging=False) as app:
            app.init()
            app.run_tui()
    except GalionError as e:
        _fail(str(e))


@cli.command()
@click.pass_context
def remotes(ctx: click.Context) -> None:
    """List galion and rclone remotes."""
    try:
        with _open_app(ctx, quiet=True) as app:
            app.init()
            console.print_remotes(app.store.remotes)
    except GalionError as e:
        _fail(str(e))


@cli.command()
@click.pass_context
def jobs(ctx: click.Context) -> None:
    """Show the jobs known to the rclone server."""
    try:
        with _open_app(ctx, quiet=True) as app:
            app.start_rclone()
            statuses: dict[int, Optional[JobStatus]] = {}
            for job_id in app.client.list_active_jobs():
                try:
                    statuses[job_id] = app.client.job_status(job_id)
                except RcloneError:
                    statuses[job_id] = None
            console.print_jobs(statuses)
    except GalionError as e:
        _fail(str(e))


@cli.command()
@click.argument("name")
@click.option("--wait/--no-wait", default=True, help="Wait for the job to finish (default: wait)")
@click.pass_context
def sync(ctx: click.Context, name: str, wait: bool) -> None:
    """Start a sync job for the remote NAME.

    \b
    Examples:
        galion sync backup            # Sync and wait for the result
        galion sync backup --no-wait  # Only submit the job
    """
    try:
        with _open_app(ctx, quiet=True) as app:
            app.init()
            remote = app.store.find(name)
            if remote is None:
                _fail(f"Unknown remote: {name}")
                return
            if not remote.source_locator or not remote.destination_locator:
                _fail(f"Remote {name} needs a source and a destination")
                return

            job_id = app.client.submit_sync(remote.source_locator, remote.destination_locator)
            console.print_info(f"Started job {job_id}: {remote.source_locator} → {remote.destination_locator}")
            if not wait:
                return

            status = _wait_for_job(app, job_id)
            console.print_job_result(name, job_id, status)
            if not status.success:
                sys.exit(1)
    except GalionError as e:
        _fail(str(e))


def _wait_for_job(app: GalionApp, job_id: int) -> JobStatus:
    """Poll a job until rclone reports it finished."""
    with console.rich.status(f"Waiting for job {job_id}..."):
        while True:
            try:
                status = app.client.job_status(job_id)
            except RcloneError:
                # Transient, same policy as the job tracker
                status = None
            if status is not None and status.finished:
                return status
            time.sleep(app.config.jobs.poll_interval)


# ============================================================================
# Configuration Commands
# ============================================================================


@cli.group()
def config() -> None:
    """Configuration file commands."""
    pass


@config.command("init")
@click.option("--force", "-f", is_flag=True, help="Overwrite an existing configuration")
@click.pass_context
def config_init(ctx: click.Context, force: bool) -> None:
    """Create the default configuration file."""
    path = _options(ctx).config_path or get_config_path()
    if path.exists() and not force:
        console.print_warning(f"Configuration already exists: {path} (use --force to overwrite)")
        return
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(generate_default_config(), encoding="utf-8")
    console.print_success(f"Created configuration: {path}")


@config.command("path")
@click.pass_context
def config_path_cmd(ctx: click.Context) -> None:
    """Print the configuration file path."""
    click.echo(str(_options(ctx).config_path or get_config_path()))


@config.command("show")
@click.pass_context
def config_show(ctx: click.Context) -> None:
    """Show a summary of the configuration."""
    path = _options(ctx).config_path or get_config_path()
    try:
        loaded = load_config(path)
    except GalionError as e:
        _fail(str(e))
        return
    console.print_config_summary(str(path), len(loaded.remotes), loaded.rclone.url)
    if loaded.remotes:
        console.print_remotes(RemoteStore.from_config(loaded, path).remotes)


@config.command("check")
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path), required=False)
@click.pass_context
def config_check(ctx: click.Context, file: Optional[Path]) -> None:
    """Validate a configuration file."""
    path = file or _options(ctx).config_path or get_config_path()
    is_valid, errors = validate_config_file(path)
    if is_valid:
        console.print_success(f"Configuration is valid: {path}")
        return
    for error in errors:
        console.print_error(error)
    sys.exit(1)
