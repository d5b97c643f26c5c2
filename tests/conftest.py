"""Pytest fixtures and test utilities."""

from pathlib import Path

import pytest
from mutagen.id3 import COMM, TALB, TCON, TDRC, TIT2, TPE1, TRCK
from mutagen.mp3 import MP3

from mp3edit.utils.config import reset_config

# MPEG-1 Layer III, 128 kbit/s, 44.1 kHz, no padding
FRAME_HEADER = b"\xff\xfb\x90\x64"
FRAME_SIZE = 417


def create_test_mp3(path: Path, frames: int = 40):
    """Write a minimal valid MP3 stream of silent frames (about 1s by default)."""
    frame = FRAME_HEADER + b"\x00" * (FRAME_SIZE - len(FRAME_HEADER))
    path.write_bytes(frame * frames)


def create_tagged_mp3(path: Path, frames: int = 40, **fields: str):
    """Create an MP3 file and give it ID3v2 text frames."""
    create_test_mp3(path, frames=frames)
    frame_classes = {
        "title": TIT2,
        "artist": TPE1,
        "album": TALB,
        "genre": TCON,
        "track": TRCK,
        "year": TDRC,
    }

    audio = MP3(str(path))
    if audio.tags is None:
        audio.add_tags()
    for name, value in fields.items():
        if name == "comment":
            audio.tags.add(COMM(encoding=3, lang="eng", desc="", text=[value]))
        else:
            audio.tags.add(frame_classes[name](encoding=3, text=[value]))
    audio.save()
    return path


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep the user's ~/.config/mp3edit out of the tests."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    reset_config()
    yield home
    reset_config()


@pytest.fixture
def temp_music_dir(tmp_path):
    """Create a temporary directory for test music files."""
    music_dir = tmp_path / "music"
    music_dir.mkdir()
    return music_dir


@pytest.fixture
def sample_mp3(temp_music_dir):
    """An MP3 file titled "Episode 1" with artist and album set."""
    return create_tagged_mp3(
        temp_music_dir / "episode.mp3",
        title="Episode 1",
        artist="Test Artist",
        album="Test Album",
    )


@pytest.fixture
def untagged_mp3(temp_music_dir):
    """An MP3 file with no ID3 tag at all."""
    mp3_path = temp_music_dir / "untagged.mp3"
    create_test_mp3(mp3_path)
    return mp3_path


@pytest.fixture
def fully_tagged_mp3(temp_music_dir):
    """An MP3 file with all seven editable fields set."""
    return create_tagged_mp3(
        temp_music_dir / "full.mp3",
        title="Song",
        artist="Artist",
        album="Album",
        genre="Podcast",
        track="3/12",
        comment="Nice",
        year="2020",
    )


@pytest.fixture
def not_an_mp3(temp_music_dir):
    """A file with an .mp3 name that holds no MPEG audio."""
    bad_file = temp_music_dir / "not_audio.mp3"
    bad_file.write_text("This is not an audio file")
    return bad_file
