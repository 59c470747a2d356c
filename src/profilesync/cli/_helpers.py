"""Shared helpers, option decorators, and the main CLI group."""

from __future__ import annotations

import logging

import click

from ..exceptions import ProfileSyncError
from ..health import HealthCheck
from ..repositories import Repository, create_repository
from ..settings import Settings, load_settings

_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _status(ctx, msg):
    """Emit a status message to stderr when verbose mode (-v) is on."""
    if ctx.obj.get("verbose"):
        click.echo(msg, err=True)


def _setup_logging(verbose: bool) -> None:
    if verbose:
        logging.basicConfig(level=logging.INFO, format=_LOG_FORMAT)
        logging.getLogger("profilesync").setLevel(logging.INFO)
    else:
        logging.basicConfig(level=logging.WARNING, format=_LOG_FORMAT)


def _load_settings(ctx) -> Settings:
    """Load settings named by --config, raising a clear error if missing."""
    config_path = ctx.obj.get("config_path")
    if not config_path:
        raise click.ClickException(
            "No settings file specified. Use --config or set PROFILESYNC_CONFIG."
        )
    try:
        return load_settings(config_path, profile=ctx.obj.get("profile"))
    except ProfileSyncError as exc:
        raise click.ClickException(str(exc))


def _open_repository(ctx) -> Repository:
    return create_repository(_load_settings(ctx))


def _initialize(repo: Repository) -> Repository:
    """Run ``initialize()`` and fail the command if it did not succeed."""
    try:
        result = repo.initialize()
    except ProfileSyncError as exc:
        raise click.ClickException(str(exc))
    if not repo.initialized:
        if isinstance(result, HealthCheck):
            raise click.ClickException(result.message)
        raise click.ClickException(f"Could not initialize {repo!r}")
    return repo


def _initialized_repository(ctx) -> Repository:
    return _initialize(_open_repository(ctx))


# ---------------------------------------------------------------------------
# Main group
# ---------------------------------------------------------------------------

@click.group()
@click.option("--config", "-c", "config_path", type=click.Path(dir_okay=False),
              envvar="PROFILESYNC_CONFIG",
              help="Path to the JSON settings file (or set PROFILESYNC_CONFIG).")
@click.option("--profile", "-p", envvar="PROFILESYNC_PROFILE", default=None,
              help="Profile to sync (overrides the settings file).")
@click.option("-v", "--verbose", is_flag=True, help="Verbose output on stderr.")
@click.pass_context
def main(ctx, config_path, profile, verbose):
    """profilesync: keep settings profiles in sync with a remote store.

    \b
    Quick start:
      profilesync -c sync.json init
      profilesync -c sync.json download
      profilesync -c sync.json upload

    \b
    Backends (the "type" of the "repository" section):
      webdav    mirror a WebDAV collection into a temporary directory
      git       commit profiles into a local git working tree
    """
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    ctx.obj["profile"] = profile
    ctx.obj["verbose"] = verbose
    _setup_logging(verbose)
