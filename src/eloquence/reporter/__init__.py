"""Reporter module.

Provides output formatting for results:
- TextReporter: Human-readable text output
"""

from .text import TextReporter, print_outcome

__all__ = [
    "TextReporter",
    "print_outcome",
]
