"""Profile commands: profiles, duplicate, log."""

from __future__ import annotations

import click

from ..exceptions import ProfileSyncError
from ..repositories import LocalGitRepository
from ._helpers import main, _initialized_repository, _status


@main.command("profiles")
@click.pass_context
def profiles_cmd(ctx):
    """List profiles in the local mirror."""
    repo = _initialized_repository(ctx)
    for name in repo.profiles.list_profiles():
        marker = "*" if name == repo.profile else " "
        click.echo(f"{marker} {name}")


@main.command()
@click.argument("original")
@click.argument("new")
@click.pass_context
def duplicate(ctx, original, new):
    """Copy profile ORIGINAL to NEW and push the result."""
    repo = _initialized_repository(ctx)
    try:
        repo.duplicate_profile_to(original, new)
    except ProfileSyncError as exc:
        raise click.ClickException(str(exc))
    _status(ctx, f"Duplicated {original} -> {new}")


@main.command()
@click.pass_context
def log(ctx):
    """Show commit messages of a git repository, newest first."""
    repo = _initialized_repository(ctx)
    if not isinstance(repo, LocalGitRepository):
        raise click.ClickException("log is only available for git repositories")
    for message in repo.git.log_messages():
        click.echo(message)
