"""Command-line interface for git-provenance."""

from datetime import datetime
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from git_provenance.config import ProvenanceConfig
from git_provenance.core.aggregation import SourceFileIndex, build_source_file_index
from git_provenance.core.extractor import CommitHistoryExtractor
from git_provenance.errors import ProvenanceError
from git_provenance.logging_setup import setup_logging
from git_provenance.models.commit import CommitHistory
from git_provenance.models.time_window import TimeWindow

console = Console()


class Context:
    """Repository location and settings shared by every command."""

    def __init__(self, repo_root: Path, config: ProvenanceConfig):
        self.repo_root = repo_root
        self.config = config
        self._history: Optional[CommitHistory] = None

    def history(self) -> CommitHistory:
        if self._history is None:
            try:
                self._history = CommitHistoryExtractor(
                    self.repo_root, config=self.config
                ).extract()
            except ProvenanceError as e:
                cause = f" ({e.__cause__})" if e.__cause__ else ""
                console.print(f"[red]Error: {escape(str(e))}{escape(cause)}[/red]")
                raise click.Abort() from e
        return self._history

    def index(self) -> SourceFileIndex:
        return build_source_file_index(self.history(), self.repo_root)


@click.group()
@click.version_option()
@click.option(
    "--repo",
    "repo_path",
    type=click.Path(exists=True, file_okay=False),
    default=None,
    help="Path to the git repository (defaults to the enclosing repository)",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Path to a JSON config file",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def main(ctx, repo_path: Optional[str], config_path: Optional[str], verbose: bool):
    """git-provenance - commit history and per-file revision queries."""
    setup_logging(verbose=verbose)

    repo_root = Path(repo_path).resolve() if repo_path else _find_project_root()
    if repo_root is None:
        raise click.Abort()

    try:
        config = ProvenanceConfig.load(
            Path(config_path) if config_path else None, repo_root=repo_root
        )
    except ProvenanceError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise click.Abort() from e

    ctx.obj = Context(repo_root, config)


@main.command()
@click.option("--limit", default=20, help="Number of commits to show")
@click.option("--author", default=None, help="Only commits by this name or email")
@click.pass_obj
def log(obj: Context, limit: int, author: Optional[str]):
    """Show commits, most recent first."""
    history = obj.history()
    records = history.commits_by(author) if author else tuple(history)

    table = Table(title=f"Commits ({len(records)})")
    table.add_column("Hash", style="cyan", no_wrap=True)
    table.add_column("Committer", style="green")
    table.add_column("Date", style="magenta")
    table.add_column("Files", style="yellow", justify="right")
    table.add_column("Message")

    for record in reversed(records[-limit:] if limit > 0 else records):
        table.add_row(
            record.short_hash,
            escape(record.author.name),
            record.date_time.strftime("%Y-%m-%d %H:%M"),
            str(len(record.files)),
            escape(_summary(record.message)),
        )

    console.print(table)


@main.command()
@click.argument("commit_hash")
@click.pass_obj
def files(obj: Context, commit_hash: str):
    """List the paths touched by a commit."""
    try:
        record = obj.history().get(commit_hash)
    except ProvenanceError as e:
        raise click.ClickException(str(e)) from e
    if record is None:
        raise click.ClickException(f"Unknown commit: {commit_hash}")

    for path in record.sorted_files():
        change_type = record.change_type(path)
        console.print(f"{change_type.value:<12} {path}", highlight=False, markup=False)


@main.command()
@click.argument("path")
@click.option("--author", default=None, help="Only revisions by this name or email")
@click.option("--since", type=click.DateTime(), default=None, help="Window start")
@click.option("--until", type=click.DateTime(), default=None, help="Window end")
@click.pass_obj
def history(
    obj: Context,
    path: str,
    author: Optional[str],
    since: Optional[datetime],
    until: Optional[datetime],
):
    """Show the revisions of a file."""
    source_file = _source_file_or_fail(obj, path)

    revisions = source_file.revisions_by(author) if author else source_file.revisions()
    if since or until:
        try:
            window = TimeWindow(start=since, end=until)
        except ValueError as e:
            raise click.BadParameter("--since must not be after --until") from e
        in_window = set(source_file.revisions_during(window))
        revisions = tuple(r for r in revisions if r in in_window)

    table = Table(title=f"{escape(path)} ({source_file.type.name})")
    table.add_column("Revision", style="cyan", no_wrap=True)
    table.add_column("Author", style="green")
    table.add_column("Date", style="magenta")

    for revision in revisions:
        table.add_row(
            revision.id[:7],
            escape(str(revision.author)),
            revision.date_time.strftime("%Y-%m-%d %H:%M"),
        )

    console.print(table)
    console.print(f"{len(revisions)} of {source_file.revision_count()} revisions")


@main.command()
@click.argument("path")
@click.pass_obj
def authors(obj: Context, path: str):
    """List everyone who modified a file."""
    source_file = _source_file_or_fail(obj, path)
    for author in sorted(source_file.authors()):
        count = len(source_file.revisions_by(author))
        console.print(f"{author} ({count})", highlight=False, markup=False)


def _summary(message: str) -> str:
    lines = message.strip().splitlines()
    return lines[0] if lines else ""


def _source_file_or_fail(obj: Context, path: str):
    source_file = obj.index().get(_repository_path(obj.repo_root, path))
    if source_file is None:
        raise click.ClickException(f"No revision history for {path}")
    return source_file


def _repository_path(repo_root: Path, path: str) -> Path:
    """Read a relative path from the current directory when inside the repository."""
    candidate = Path(path)
    if candidate.is_absolute():
        return candidate
    cwd = Path.cwd().resolve()
    root = repo_root.resolve()
    if cwd == root or root in cwd.parents:
        return cwd / candidate
    return candidate


def _find_project_root() -> Optional[Path]:
    """Find the enclosing git repository."""
    current_dir = Path.cwd()

    for parent in [current_dir] + list(current_dir.parents):
        if (parent / ".git").exists():
            return parent

    console.print("[red]Error: Not in a git repository[/red]")
    return None


if __name__ == "__main__":
    main()
