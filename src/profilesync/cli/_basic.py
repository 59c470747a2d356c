"""Lifecycle commands: check, init, download, upload, terminate."""

from __future__ import annotations

import click

from ..exceptions import ProfileSyncError
from ..repositories import WebDAVRepository
from ._helpers import (
    main,
    _initialized_repository,
    _open_repository,
    _status,
)


def _run(action, *args):
    """Call *action*, turning library errors into click errors."""
    try:
        return action(*args)
    except ProfileSyncError as exc:
        raise click.ClickException(str(exc))


# ---------------------------------------------------------------------------
# check
# ---------------------------------------------------------------------------

@main.command()
@click.pass_context
def check(ctx):
    """Check that the configured store is reachable."""
    repo = _open_repository(ctx)
    if isinstance(repo, WebDAVRepository):
        result = repo.check()
        if not result.ok:
            click.echo(f"{result.status.value}: {result.message}", err=True)
            ctx.exit(1)
        click.echo(result.message)
    else:
        click.echo(f"git repository at {repo.root_path}")


# ---------------------------------------------------------------------------
# init
# ---------------------------------------------------------------------------

@main.command()
@click.pass_context
def init(ctx):
    """Initialize the repository and the current profile."""
    repo = _initialized_repository(ctx)
    _status(ctx, f"Initialized {repo.root_path}")


# ---------------------------------------------------------------------------
# download / upload
# ---------------------------------------------------------------------------

@main.command()
@click.pass_context
def download(ctx):
    """Bring the local mirror up to date with the store."""
    repo = _initialized_repository(ctx)
    _run(repo.download)
    _status(ctx, f"Downloaded into {repo.root_path}")


@main.command()
@click.pass_context
def upload(ctx):
    """Send local changes to the store."""
    repo = _initialized_repository(ctx)
    _run(repo.upload)
    _status(ctx, f"Uploaded from {repo.root_path}")


# ---------------------------------------------------------------------------
# terminate
# ---------------------------------------------------------------------------

@main.command()
@click.pass_context
def terminate(ctx):
    """Release the repository (removes a temporary WebDAV mirror)."""
    repo = _open_repository(ctx)
    _run(repo.terminate)
    _status(ctx, "Terminated")
