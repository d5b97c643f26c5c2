"""Rich console setup and shared output helpers."""

import logging

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.theme import Theme

custom_theme = Theme(
    {
        "error": "bold red",
        "success": "bold green",
        "tag_key": "bold cyan",
        "old_value": "red",
        "new_value": "green",
    }
)

# Tag values and paths are printed verbatim on one line
console = Console(theme=custom_theme, soft_wrap=True, highlight=False, emoji=False)
err_console = Console(stderr=True, theme=custom_theme, soft_wrap=True, highlight=False, emoji=False)

# Width of the label column in before/after blocks ("Comment" is the longest)
LABEL_WIDTH = 7


def visible(value: str) -> str:
    """Spell out control characters, which the terminal would hide or expand."""
    return "".join(char if char.isprintable() else repr(char)[1:-1] for char in value)


def print_change(label: str, old: str, new: str) -> None:
    """Print the two-line before/after block for one field."""
    console.print(f'[tag_key]{label:<{LABEL_WIDTH}}[/tag_key]: [old_value]"{escape(visible(old))}"[/old_value]')
    console.print(f'{"":<{LABEL_WIDTH}}: [new_value]"{escape(visible(new))}"[/new_value]')


def print_error(message: str) -> None:
    err_console.print(f"[error]{escape(message)}[/error]")


def setup_logging(debug: bool = False) -> None:
    """Send the package's log records to stderr through rich."""
    handler = RichHandler(console=err_console, show_path=False, markup=False)
    handler.setFormatter(logging.Formatter("%(message)s"))

    logger = logging.getLogger("mp3edit")
    logger.handlers = [handler]
    logger.setLevel(logging.DEBUG if debug else logging.WARNING)
    logger.propagate = False
