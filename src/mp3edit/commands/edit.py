"""Apply compiled field editors to a list of MP3 files."""

import logging
from collections.abc import Iterable, Mapping
from pathlib import Path

from mp3edit.core.audio import TagFileError, open_tag_file
from mp3edit.core.compiler import CompiledEditor, FragmentRuntimeError
from mp3edit.core.editor import RunOptions, context_for, edit_fields
from mp3edit.utils.console import console, print_change, print_error

logger = logging.getLogger(__name__)


def process_file(path: Path, editors: Mapping[str, CompiledEditor], options: RunOptions) -> bool:
    """Edit one file's tags. Returns False if the file could not be processed."""
    try:
        with open_tag_file(path, id3v2_version=options.id3v2_version) as tag_file:
            changes = 0
            if options.update_length and not options.dry_run:
                tag_file.update_length()
                changes += 1

            context = context_for(tag_file)
            logger.debug("%s: duration %s (%d s)", path, context.duration, context.seconds)

            try:
                outcomes = edit_fields(tag_file, editors, context)
            except FragmentRuntimeError as e:
                print_error(f"Error in {e.field} fragment {e.index} for {path}: {e.message}")
                return False

            for outcome in outcomes:
                if not outcome.changed:
                    continue
                changes += 1
                if not options.dry_run:
                    tag_file.set(outcome.field, outcome.new)
                if not options.quiet:
                    print_change(outcome.label, outcome.old, outcome.new)

            if not changes:
                if not options.quiet:
                    console.print(f"Unchanged tags in {path}", markup=False)
                return True

            if not options.quiet:
                console.print(f"Updating tags in {path}", markup=False)
            if not options.dry_run:
                try:
                    tag_file.save()
                except TagFileError as e:
                    print_error(f"Can't save {path}: {e}")
                    return False
    except TagFileError as e:
        print_error(f"Can't open {path}: {e}")
        return False

    return True


def process_files(paths: Iterable[Path], editors: Mapping[str, CompiledEditor], options: RunOptions) -> int:
    """Process every file in order. Returns the exit status for the run."""
    failed = 0
    for path in paths:
        if not process_file(path, editors, options):
            failed += 1

    if failed:
        logger.debug("%d file(s) failed", failed)
        return 1
    return 0
