"""Main CLI entry point for gitcas."""

import logging
import os
from pathlib import Path
from typing import List, NoReturn, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from gitcas.constants import (
    EXIT_DATA_ERROR,
    EXIT_SYSTEM_ERROR,
    EXIT_USER_ERROR,
    GIT_DIR,
)
from gitcas.core import (
    CommitBuilder,
    ObjectCodec,
    ObjectKind,
    TreeBuilder,
    TreeEntry,
    find_git_dir,
    init_repository,
    object_id_for,
    parse_commit,
    parse_tree,
)
from gitcas.errors import (
    CorruptStreamError,
    FilesystemError,
    GitCasError,
    MalformedObjectError,
    RepositoryNotFoundError,
)
from gitcas.storage import ObjectId, ObjectStore

console = Console()
err_console = Console(stderr=True)
app = typer.Typer(
    name="gitcas",
    help="Content-addressable object store using git's loose-object format",
    add_completion=False,
)


def _exit_code_for(error: Exception) -> int:
    if isinstance(error, FilesystemError):
        return EXIT_SYSTEM_ERROR
    if isinstance(error, (CorruptStreamError, MalformedObjectError)):
        return EXIT_DATA_ERROR
    return EXIT_USER_ERROR


def _fail(error: Exception) -> NoReturn:
    """Report error on stderr and exit with its mapped code."""
    err_console.print(f"[bold red]Error:[/bold red] {escape(str(error))}", style="red")
    raise typer.Exit(_exit_code_for(error))


def _git_dir(ctx: typer.Context) -> Path:
    explicit = ctx.obj.get("git_dir") if ctx.obj else None
    if explicit is not None:
        if not explicit.is_dir():
            raise RepositoryNotFoundError(f"Git directory not found: {explicit}")
        return explicit
    return find_git_dir(Path.cwd())


def _codec(ctx: typer.Context) -> ObjectCodec:
    return ObjectCodec(ObjectStore(_git_dir(ctx)))


def _format_entry(entry: TreeEntry) -> bytes:
    """Format a tree entry as an ls-tree line, keeping the name's raw bytes."""
    prefix = f"{entry.mode:0>6} {entry.kind.value} {entry.object_id.hex}\t"
    return prefix.encode("ascii") + os.fsencode(entry.name) + b"\n"


def _parse_oid(value: str) -> ObjectId:
    try:
        return ObjectId.from_hex(value)
    except ValueError as e:
        _fail(e)


@app.callback()
def main_callback(
    ctx: typer.Context,
    git_dir: Optional[Path] = typer.Option(
        None,
        "--git-dir",
        envvar="GIT_DIR",
        help="Path to the .git directory (default: search upwards from cwd)",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Log object store activity to stderr",
    ),
) -> None:
    """Content-addressable object store using git's loose-object format."""
    ctx.obj = {"git_dir": git_dir}
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=err_console, show_path=False)],
            force=True,
        )


@app.command()
def version() -> None:
    """Show gitcas version."""
    from gitcas import __version__
    typer.echo(f"gitcas version {__version__}")


@app.command()
def init(
    force: bool = typer.Option(
        False,
        "--force",
        help="Re-create missing pieces of an existing repository",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Suppress output except errors",
    ),
) -> None:
    """Initialize a repository in the current directory."""
    try:
        git_dir = init_repository(Path.cwd(), force=force)
    except GitCasError as e:
        _fail(e)

    if not quiet:
        console.print(f"[bold green]✓[/bold green] Initialized git directory in {escape(str(git_dir))}")


@app.command("cat-file")
def cat_file(
    ctx: typer.Context,
    object_id: str = typer.Argument(..., help="Object id (40 hex characters)"),
    pretty: bool = typer.Option(False, "-p", help="Pretty-print the object's content"),
    show_type: bool = typer.Option(False, "-t", help="Show the object's kind"),
    show_size: bool = typer.Option(False, "-s", help="Show the object's payload size"),
) -> None:
    """Print an object's content, kind or size."""
    if sum((pretty, show_type, show_size)) != 1:
        _fail(ValueError("Exactly one of -p, -t or -s is required"))

    oid = _parse_oid(object_id)
    try:
        kind, payload = _codec(ctx).decode(oid)
        if show_type:
            typer.echo(kind.value)
        elif show_size:
            typer.echo(str(len(payload)))
        elif kind is ObjectKind.TREE:
            for entry in parse_tree(payload):
                typer.echo(_format_entry(entry), nl=False)
        elif kind is ObjectKind.COMMIT:
            parse_commit(payload)
            typer.echo(payload, nl=False)
        else:
            typer.echo(payload, nl=False)
    except GitCasError as e:
        _fail(e)


@app.command("hash-object")
def hash_object(
    ctx: typer.Context,
    path: Path = typer.Argument(..., help="File to hash"),
    write: bool = typer.Option(False, "-w", help="Write the object into the store"),
    kind: ObjectKind = typer.Option(ObjectKind.BLOB, "-t", help="Object kind"),
) -> None:
    """Compute an object id for a file, optionally storing it."""
    try:
        content = path.read_bytes()
    except OSError as e:
        _fail(FilesystemError(f"Failed to read file ({e.strerror})", path))

    try:
        if kind is ObjectKind.TREE:
            parse_tree(content)
        elif kind is ObjectKind.COMMIT:
            parse_commit(content)

        if write:
            oid = _codec(ctx).encode(kind, content)
        else:
            oid = object_id_for(kind, content)
    except GitCasError as e:
        _fail(e)

    typer.echo(oid.hex)


@app.command("ls-tree")
def ls_tree(
    ctx: typer.Context,
    object_id: str = typer.Argument(..., help="Tree id (40 hex characters)"),
    name_only: bool = typer.Option(False, "--name-only", help="List only entry names"),
) -> None:
    """List the entries of a tree object."""
    oid = _parse_oid(object_id)
    try:
        entries = _codec(ctx).read_tree(oid)
    except GitCasError as e:
        _fail(e)

    for entry in entries:
        if name_only:
            typer.echo(os.fsencode(entry.name) + b"\n", nl=False)
        else:
            typer.echo(_format_entry(entry), nl=False)


@app.command("write-tree")
def write_tree(
    ctx: typer.Context,
    directory: Optional[Path] = typer.Argument(
        None,
        help="Directory to snapshot (default: the repository's work tree)",
    ),
) -> None:
    """Store a tree object for a directory and print its id."""
    try:
        git_dir = _git_dir(ctx)
        builder = TreeBuilder(
            ObjectCodec(ObjectStore(git_dir)),
            ignored_names={GIT_DIR},
            ignored_paths={git_dir},
        )
        oid = builder.build(directory if directory is not None else git_dir.parent)
    except GitCasError as e:
        _fail(e)

    typer.echo(oid.hex)


@app.command("commit-tree")
def commit_tree(
    ctx: typer.Context,
    tree: str = typer.Argument(..., help="Tree id (40 hex characters)"),
    parents: Optional[List[str]] = typer.Option(
        None,
        "-p",
        help="Parent commit id (repeatable)",
    ),
    message: str = typer.Option(..., "--message", "-m", help="Commit message"),
) -> None:
    """Create a commit object for a tree and print its id."""
    tree_id = _parse_oid(tree)
    parent_ids = [_parse_oid(p) for p in parents or []]
    try:
        oid = CommitBuilder(_codec(ctx)).create_commit(tree_id, message, parent_ids)
    except GitCasError as e:
        _fail(e)

    typer.echo(oid.hex)


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
