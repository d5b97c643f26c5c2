"""mp3edit - scripted batch editing of MP3 tags."""

__version__ = "0.1.0"
