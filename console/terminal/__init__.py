"""
Terminal front end.

Lets one user play against the computer on the console.
"""

from .prompts import ConsolePrompts, UserExit
from .help_table import render_probability_table
from .controller import ConsoleGameController

__all__ = ["ConsolePrompts", "UserExit", "render_probability_table", "ConsoleGameController"]
