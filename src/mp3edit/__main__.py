"""Allows: python -m mp3edit ..."""

from mp3edit.cli import app

if __name__ == "__main__":
    app()
