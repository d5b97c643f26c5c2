"""Compile per-field fragment chains into editors.

Every expression fragment is wrapped in a single-pass loop before it is
compiled, so a top-level ``break`` inside the fragment ends the chain for that
field while ``continue`` only ends the current fragment. A fragment that is a
single bare expression assigns its result to ``value`` (unless it is None).

Literal fragments never reach the compiler: the literal is returned as-is.
"""

import ast
import logging
import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from types import MappingProxyType

from mp3edit.core.fragments import FIELDS, Fragment, FragmentKind

logger = logging.getLogger(__name__)

_STEP_TEMPLATE = """\
_stopped = True
for _ in (None,):
    pass
else:
    _stopped = False
"""

_EXPRESSION_TEMPLATE = """\
_result = None
if _result is not None:
    value = _result
"""


class FragmentError(Exception):
    """Base error for a fragment of a field's chain (index is 1-based)."""

    def __init__(self, field: str, index: int, message: str):
        self.field = field
        self.index = index
        self.message = message
        super().__init__(f"{field} fragment {index}: {message}")


class FragmentCompileError(FragmentError):
    """A fragment could not be compiled."""


class FragmentRuntimeError(FragmentError):
    """A fragment raised while editing a value."""


@dataclass(frozen=True)
class EvaluationContext:
    """Read-only bindings visible to every fragment for one file."""

    file: str
    duration: str
    seconds: int

    def namespace(self, value: str) -> dict:
        return {
            "re": re,
            "file": self.file,
            "duration": self.duration,
            "seconds": self.seconds,
            "value": value,
        }


def _describe(error: SyntaxError) -> str:
    if error.lineno:
        return f"{error.msg} (line {error.lineno})"
    return error.msg


def _build_code(field: str, index: int, text: str):
    filename = f"<{field} fragment {index}>"
    try:
        body = ast.parse(text, filename=filename).body
        if len(body) == 1 and isinstance(body[0], ast.Expr):
            assign, check = ast.parse(_EXPRESSION_TEMPLATE).body
            assign.value = body[0].value
            body = [assign, check]

        module = ast.parse(_STEP_TEMPLATE, filename=filename)
        loop = module.body[1]
        loop.body = body or [ast.Pass()]
        ast.fix_missing_locations(module)
        return compile(module, filename, "exec")
    except SyntaxError as e:
        raise FragmentCompileError(field, index, _describe(e)) from e
    except ValueError as e:
        # e.g. null bytes in the source on older interpreters
        raise FragmentCompileError(field, index, str(e)) from e


class ExpressionStep:
    """A compiled expression fragment."""

    def __init__(self, field: str, index: int, text: str):
        self.field = field
        self.index = index
        self.text = text
        self._code = _build_code(field, index, text)

    def __call__(self, value: str, context: EvaluationContext) -> tuple[object, bool]:
        namespace = context.namespace(value)
        try:
            exec(self._code, namespace)
        except Exception as e:
            raise FragmentRuntimeError(self.field, self.index, f"{type(e).__name__}: {e}") from e
        return namespace.get("value"), namespace["_stopped"]


class LiteralStep:
    """A literal fragment: always yields its value and lets the chain go on."""

    def __init__(self, field: str, index: int, text: str):
        self.field = field
        self.index = index
        self.text = text

    def __call__(self, value: str, context: EvaluationContext) -> tuple[object, bool]:
        return self.text, False


def _as_text(value: object) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return str(value)


class CompiledEditor:
    """The frozen fragment pipeline for one field."""

    def __init__(self, field: str, steps: Sequence = ()):
        self.field = field
        self._steps = tuple(steps)

    def __call__(self, value: str, context: EvaluationContext) -> str:
        for step in self._steps:
            value, stop = step(value, context)
            value = _as_text(value)
            if stop:
                logger.debug("%s: chain stopped by fragment %d", self.field, step.index)
                break
        return value


def compile_editor(field: str, fragments: Sequence[Fragment]) -> CompiledEditor:
    """Compile one field's fragments, in order, into a CompiledEditor."""
    steps = []
    for index, fragment in enumerate(fragments, start=1):
        if fragment.kind == FragmentKind.LITERAL:
            steps.append(LiteralStep(field, index, fragment.text))
        else:
            steps.append(ExpressionStep(field, index, fragment.text))
    logger.debug("Compiled %d fragment(s) for %s", len(steps), field)
    return CompiledEditor(field, steps)


def compile_editors(chains: Mapping[str, Sequence[Fragment]]) -> Mapping[str, CompiledEditor]:
    """Compile every field's chain. Stops at the first field that fails."""
    editors = {}
    for field in FIELDS:
        editors[field] = compile_editor(field, chains.get(field, ()))
    return MappingProxyType(editors)
