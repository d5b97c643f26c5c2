"""mp3edit - scripted batch editing of MP3 tags."""

from collections import deque
from collections.abc import Mapping, Sequence
from pathlib import Path

import typer
from typer.core import TyperCommand

from mp3edit import __version__
from mp3edit.commands import check as check_command
from mp3edit.commands.edit import process_files
from mp3edit.core.compiler import FragmentCompileError, compile_editors
from mp3edit.core.editor import RunOptions
from mp3edit.core.fragments import FragmentKind, FragmentRegistry
from mp3edit.core.scanner import NoInputError, expand_inputs
from mp3edit.utils.config import ConfigError, get_config
from mp3edit.utils.console import print_error, setup_logging

# Command parameter name -> (field, fragment kind)
FRAGMENT_PARAMS = {
    "title": ("title", FragmentKind.EXPRESSION),
    "set_title": ("title", FragmentKind.LITERAL),
    "artist": ("artist", FragmentKind.EXPRESSION),
    "set_artist": ("artist", FragmentKind.LITERAL),
    "album": ("album", FragmentKind.EXPRESSION),
    "set_album": ("album", FragmentKind.LITERAL),
    "genre": ("genre", FragmentKind.EXPRESSION),
    "set_genre": ("genre", FragmentKind.LITERAL),
    "track": ("track", FragmentKind.EXPRESSION),
    "set_track": ("track", FragmentKind.LITERAL),
    "comment": ("comment", FragmentKind.EXPRESSION),
    "set_comment": ("comment", FragmentKind.LITERAL),
    "year": ("year", FragmentKind.EXPRESSION),
    "set_year": ("year", FragmentKind.LITERAL),
}
ASCII_PARAM = "ascii_only"

PARAM_ORDER_KEY = "mp3edit.param_order"


class FragmentOrderCommand(TyperCommand):
    """Command that records the order its options were given in.

    click passes each repeatable option's values as a separate list, which
    loses how e.g. ``--title``, ``-t`` and ``--ascii`` were interleaved.
    """

    def parse_args(self, ctx, args):
        parser = self.make_parser(ctx)
        _, _, param_order = parser.parse_args(args=list(args))
        ctx.meta[PARAM_ORDER_KEY] = [param.name for param in param_order]
        return super().parse_args(ctx, args)


def build_registry(param_order: Sequence[str], params: Mapping[str, Sequence[str]]) -> FragmentRegistry:
    """Register fragments in the order their options appeared."""
    pending = {name: deque(params.get(name) or ()) for name in FRAGMENT_PARAMS}
    registry = FragmentRegistry()
    for name in param_order:
        if name == ASCII_PARAM:
            registry.add_ascii()
        elif name in FRAGMENT_PARAMS:
            field, kind = FRAGMENT_PARAMS[name]
            registry.register(field, kind, pending[name].popleft())
    return registry


def version_callback(value: bool):
    """Show version and exit."""
    if value:
        typer.echo(f"mp3edit version {__version__}")
        raise typer.Exit()


app = typer.Typer(
    name="mp3edit",
    help="Edit MP3 tags with Python fragments.",
    add_completion=False,
)


@app.command(cls=FragmentOrderCommand)
def main(
    ctx: typer.Context,
    files: list[Path] = typer.Argument(None, help="MP3 files to edit (default: every *.mp3 here)", show_default=False),
    title: list[str] = typer.Option([], "--title", "-T", metavar="CODE", help="Fragment editing the title"),
    set_title: list[str] = typer.Option([], "-t", "--set-title", metavar="TEXT", help="Set the title"),
    artist: list[str] = typer.Option([], "--artist", "-A", metavar="CODE", help="Fragment editing the artist"),
    set_artist: list[str] = typer.Option([], "-a", "--set-artist", metavar="TEXT", help="Set the artist"),
    album: list[str] = typer.Option([], "--album", "-L", metavar="CODE", help="Fragment editing the album"),
    set_album: list[str] = typer.Option([], "-l", "--set-album", metavar="TEXT", help="Set the album"),
    genre: list[str] = typer.Option([], "--genre", "-G", metavar="CODE", help="Fragment editing the genre"),
    set_genre: list[str] = typer.Option([], "-g", "--set-genre", metavar="TEXT", help="Set the genre"),
    track: list[str] = typer.Option([], "--track", "-K", metavar="CODE", help="Fragment editing the track"),
    set_track: list[str] = typer.Option([], "-k", "--set-track", metavar="TEXT", help="Set the track"),
    comment: list[str] = typer.Option([], "--comment", "-C", metavar="CODE", help="Fragment editing the comment"),
    set_comment: list[str] = typer.Option([], "-c", "--set-comment", metavar="TEXT", help="Set the comment"),
    year: list[str] = typer.Option([], "--year", "-Y", metavar="CODE", help="Fragment editing the year"),
    set_year: list[str] = typer.Option([], "-y", "--set-year", metavar="TEXT", help="Set the year"),
    ascii_only: bool = typer.Option(False, "--ascii", help="Strip non-printable and non-ASCII characters from every field"),
    update_length: bool = typer.Option(False, "--update-length", "-u", help="Recompute the length (TLEN) tag"),
    dry_run: bool = typer.Option(False, "--dry-run", "-n", help="Show the edits without saving them"),
    check: bool = typer.Option(False, "--check/--no-check", help="Check that the required libraries are installed and exit"),
    quiet: bool = typer.Option(
        None, "--quiet/--no-quiet", "-q/-Q", help="Only print errors (defaults to output.quiet in the config)", show_default=False
    ),
    debug: bool = typer.Option(False, "--debug/--no-debug", help="Trace what happens on stderr"),
    version: bool = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit",
        callback=version_callback,
        is_eager=True,
    ),
):
    """Edit the tags of MP3 files with Python fragments.

    Each fragment sees the field's current text as `value` and changes it by
    assigning to it. A fragment that is a single expression replaces the value
    with the expression's result. `file`, `duration` (M:SS), `seconds` and the
    `re` module are available too. Fragments for a field run in the order given;
    `break` skips the remaining ones.

    Examples:
        mp3edit --title 're.sub(r"^(?!Podcast: )", "Podcast: ", value)' *.mp3
        mp3edit -a "Some Band" --ascii --dry-run
    """
    setup_logging(debug)

    # Fragment option values are read back from ctx.params in command-line order
    registry = build_registry(ctx.meta.get(PARAM_ORDER_KEY, []), ctx.params)
    try:
        editors = compile_editors(registry.freeze())
    except FragmentCompileError as e:
        print_error(f"Error compiling {e.field} fragment {e.index}: {e.message}")
        raise typer.Exit(1)

    if check:
        raise typer.Exit(check_command.run())

    config = get_config()
    try:
        id3v2_version = config.id3v2_version
    except ConfigError as e:
        print_error(f"Invalid configuration in {config.config_file}: {e}")
        raise typer.Exit(1)

    try:
        paths = expand_inputs(files or [], pattern=config.pattern)
    except NoInputError as e:
        print_error(str(e))
        raise typer.Exit(1)

    options = RunOptions(
        dry_run=dry_run,
        quiet=config.quiet if quiet is None else quiet,
        update_length=update_length,
        id3v2_version=id3v2_version,
    )
    raise typer.Exit(process_files(paths, editors, options))


if __name__ == "__main__":
    app()
