"""Per-field registry of edit fragments collected from the command line."""

from dataclasses import dataclass
from enum import Enum

# Fixed processing order of the editable fields
FIELDS = ("title", "artist", "album", "genre", "track", "comment", "year")

FIELD_LABELS = {
    "title": "Title",
    "artist": "Artist",
    "album": "Album",
    "genre": "Genre",
    "track": "Track",
    "comment": "Comment",
    "year": "Year",
}

# Printable ASCII is U+0020..U+007E
ASCII_FRAGMENT = 'value = re.sub(r"[^ -~]+", "", value)'


class FragmentKind(str, Enum):
    EXPRESSION = "expression"
    LITERAL = "literal"


@dataclass(frozen=True)
class Fragment:
    """One transform step for a field.

    Expression fragments hold Python source. Literal fragments hold the
    replacement value itself and are never compiled.
    """

    kind: FragmentKind
    text: str


class FragmentRegistry:
    """Collects fragments per field in the order they were given."""

    def __init__(self):
        self._fragments: dict[str, list[Fragment]] = {name: [] for name in FIELDS}
        self._frozen = False

    def register(self, field: str, kind: FragmentKind, text: str) -> None:
        """Append a fragment to ``field``'s chain."""
        if self._frozen:
            raise RuntimeError("Fragment registry is frozen")
        if field not in self._fragments:
            raise ValueError(f"Unknown field: {field!r} (expected one of {', '.join(FIELDS)})")
        self._fragments[field].append(Fragment(FragmentKind(kind), text))

    def add_expression(self, field: str, text: str) -> None:
        self.register(field, FragmentKind.EXPRESSION, text)

    def add_ascii(self) -> None:
        """Append the non-ASCII stripping fragment to every field."""
        for name in FIELDS:
            self.add_expression(name, ASCII_FRAGMENT)

    def freeze(self) -> dict[str, tuple[Fragment, ...]]:
        """Stop accepting fragments and return the per-field chains."""
        self._frozen = True
        return {name: tuple(self._fragments[name]) for name in FIELDS}
