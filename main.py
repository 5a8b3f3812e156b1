from __future__ import annotations

import sys

from rich.console import Console
from rich.markup import escape

from segments.cli import app
from core.exceptions import TmuxstarError

console = Console(stderr=True)


if __name__ == "__main__":
    try:
        app()
    except TmuxstarError as e:
        console.print(f"[red]tmuxstar error: {escape(str(e))}[/red]")
        sys.exit(1)
