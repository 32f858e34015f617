from dataclasses import dataclass, field
from typing import Optional

from ..expression.resolver import ExprStore
from ..utils.formatting import DisplayContext


@dataclass
class ReplContext:
    """Holds the state of the interactive REPL session."""
    degree_mode: bool = False
    digits: Optional[int] = None
    display: DisplayContext = field(default_factory=DisplayContext.default)
    store: ExprStore = field(default_factory=ExprStore)
    last_index: Optional[int] = None
    last_short_rep: str = ""
