from .app import REPL
from .app import main_entry
from .app import print_help_text

__all__ = ["main_entry", "REPL", "print_help_text"]
