"""Watch mode: upload the local mirror whenever it changes."""

from __future__ import annotations

import datetime

import click

from ._helpers import main, _initialized_repository


def _import_watchfiles():
    """Lazy-import watchfiles, raising a friendly error if missing."""
    try:
        import watchfiles
        return watchfiles
    except ImportError:
        raise click.ClickException(
            "watchfiles is required for watch mode.\n"
            "Install it with: pip install profilesync[watch]"
        )


def _format_changes(changes) -> str:
    """One-line +N ~N -N summary from a watchfiles change set."""
    added = modified = deleted = 0
    for change, _path in changes:
        name = getattr(change, "name", str(change))
        if name == "added":
            added += 1
        elif name == "deleted":
            deleted += 1
        else:
            modified += 1
    parts = []
    if added:
        parts.append(f"+{added}")
    if modified:
        parts.append(f"~{modified}")
    if deleted:
        parts.append(f"-{deleted}")
    return " ".join(parts) if parts else "no changes"


def _run_upload_cycle(repo, changes=()) -> None:
    """Run one upload and report it with a timestamp."""
    now = datetime.datetime.now().strftime("%H:%M:%S")
    repo.upload()
    click.echo(f"[{now}] Upload: {_format_changes(changes)}")


def watch_and_upload(repo, *, debounce: int) -> None:
    """Watch the mirror of *repo* and upload on every change batch."""
    watchfiles = _import_watchfiles()

    click.echo(f"Watching {repo.root_path} (debounce {debounce}ms)")
    try:
        _run_upload_cycle(repo)
    except Exception as exc:
        click.echo(f"ERROR: Initial upload failed: {exc}", err=True)

    try:
        for changes in watchfiles.watch(repo.root_path, debounce=debounce):
            try:
                _run_upload_cycle(repo, changes)
            except Exception as exc:
                click.echo(f"ERROR: Upload failed: {exc}", err=True)
    except KeyboardInterrupt:
        click.echo("\nStopped watching.")


@main.command()
@click.option("--debounce", default=1600, show_default=True, type=int,
              help="Milliseconds to wait for changes to settle.")
@click.option("--no-download", is_flag=True, default=False,
              help="Do not download before watching.")
@click.pass_context
def watch(ctx, debounce, no_download):
    """Upload the local mirror every time it changes."""
    repo = _initialized_repository(ctx)
    if not no_download:
        repo.download()
    watch_and_upload(repo, debounce=debounce)
