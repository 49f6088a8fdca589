"""Command-line entry points for quizadmin.

``main`` is the multi-command tool; ``validate_template`` is a standalone
validator for automation that only needs the exit code.
"""

from .main import main

__all__ = ["main"]
