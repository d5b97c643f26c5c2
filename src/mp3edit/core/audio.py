"""MP3 tag container wrapping mutagen."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from mutagen import MutagenError
from mutagen.id3 import COMM, TCON, TLEN, Frames
from mutagen.mp3 import MP3

logger = logging.getLogger(__name__)

# ID3v2 frame backing each editable field
FIELD_FRAMES = {
    "title": "TIT2",
    "artist": "TPE1",
    "album": "TALB",
    "genre": "TCON",
    "track": "TRCK",
    "comment": "COMM",
    "year": "TDRC",
}

# Joins multi-valued text frames into one editable string
MULTI_VALUE_SEP = "/"


class TagFileError(Exception):
    """An MP3 file could not be opened or saved."""


def format_duration(length: float) -> str:
    """Format a length in seconds as M:SS."""
    minutes, seconds = divmod(int(length), 60)
    return f"{minutes}:{seconds:02d}"


class TagFile:
    """ID3 tags and stream length of one MP3 file.

    Edits made with ``set`` and ``update_length`` stay in memory until
    ``save`` writes them all in one go.
    """

    def __init__(self, path: Path, id3v2_version: int = 4):
        self.path = Path(path)
        self.id3v2_version = id3v2_version
        try:
            self._audio = MP3(str(self.path))
        except (MutagenError, OSError) as e:
            raise TagFileError(str(e)) from e

        if self._audio.tags is None:
            logger.debug("%s has no ID3 tag, starting an empty one", self.path)
            self._audio.add_tags()

    @property
    def tags(self):
        if self.closed:
            raise TagFileError(f"{self.path} is closed")
        return self._audio.tags

    @property
    def duration(self) -> float:
        if self.closed:
            raise TagFileError(f"{self.path} is closed")
        return self._audio.info.length

    @property
    def duration_str(self) -> str:
        return format_duration(self.duration)

    @property
    def seconds(self) -> int:
        return int(self.duration)

    def _comment_keys(self) -> list[str]:
        # Only the plain comment; described comments (iTunNORM etc.) are left alone
        return [key for key, frame in self.tags.items() if frame.FrameID == "COMM" and not frame.desc]

    def get(self, field: str) -> str:
        """Return the current text of ``field``, or "" if it is not set."""
        frame_id = FIELD_FRAMES[field]
        if frame_id == "COMM":
            keys = self._comment_keys()
            frame = self.tags[keys[0]] if keys else None
        else:
            frame = self.tags.get(frame_id)

        if frame is None:
            return ""
        return MULTI_VALUE_SEP.join(str(text) for text in frame.text)

    def normalize(self, field: str, value: str) -> str:
        """Return ``value`` the way it reads back once saved and reopened.

        mutagen resolves numeric and "(nn)" genre references to genre names
        when it loads a tag, so genres are stored already resolved.
        """
        if FIELD_FRAMES[field] == "TCON" and value:
            return MULTI_VALUE_SEP.join(TCON(encoding=3, text=[value]).genres)
        return value

    def set(self, field: str, value: str) -> None:
        """Replace ``field`` with ``value``; an empty value removes the frame."""
        frame_id = FIELD_FRAMES[field]
        if frame_id == "COMM":
            for key in self._comment_keys():
                del self.tags[key]
            if value:
                self.tags.add(COMM(encoding=3, lang="eng", desc="", text=[value]))
            return

        value = self.normalize(field, value)
        self.tags.delall(frame_id)
        if value:
            self.tags.add(Frames[frame_id](encoding=3, text=[value]))

    def update_length(self) -> None:
        """Store the stream length in the TLEN frame (milliseconds)."""
        length_ms = int(round(self.duration * 1000))
        self.tags.delall("TLEN")
        self.tags.add(TLEN(encoding=3, text=[str(length_ms)]))

    def save(self) -> None:
        try:
            self._audio.save(v2_version=self.id3v2_version)
        except (MutagenError, OSError) as e:
            raise TagFileError(str(e)) from e

    def close(self) -> None:
        self._audio = None

    @property
    def closed(self) -> bool:
        return self._audio is None


@contextmanager
def open_tag_file(path: Path, id3v2_version: int = 4) -> Iterator[TagFile]:
    """Open ``path`` and close it again on every way out of the block."""
    tag_file = TagFile(path, id3v2_version=id3v2_version)
    try:
        yield tag_file
    finally:
        tag_file.close()
