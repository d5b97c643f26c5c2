"""Run the compiled editors against one file's fields."""

import logging
from collections.abc import Mapping
from dataclasses import dataclass

from mp3edit.core.audio import TagFile
from mp3edit.core.compiler import CompiledEditor, EvaluationContext
from mp3edit.core.fragments import FIELD_LABELS, FIELDS

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EditOutcome:
    """Result of running one field's editor on one file."""

    field: str
    old: str
    new: str

    @property
    def changed(self) -> bool:
        return self.old != self.new

    @property
    def label(self) -> str:
        return FIELD_LABELS[self.field]


@dataclass(frozen=True)
class RunOptions:
    dry_run: bool = False
    quiet: bool = False
    update_length: bool = False
    id3v2_version: int = 4


def context_for(tag_file: TagFile) -> EvaluationContext:
    return EvaluationContext(
        file=str(tag_file.path),
        duration=tag_file.duration_str,
        seconds=tag_file.seconds,
    )


def edit_fields(
    tag_file: TagFile,
    editors: Mapping[str, CompiledEditor],
    context: EvaluationContext,
) -> list[EditOutcome]:
    """Run every field's editor on its current value, in field order.

    Nothing is written to ``tag_file``; the caller decides what to stage.
    """
    outcomes = []
    for field in FIELDS:
        old = tag_file.get(field)
        editor = editors.get(field)
        new = tag_file.normalize(field, editor(old, context)) if editor is not None else old
        outcome = EditOutcome(field, old, new)
        if not outcome.changed:
            logger.debug("%s: %s unchanged (%r)", tag_file.path, field, old)
        outcomes.append(outcome)
    return outcomes
