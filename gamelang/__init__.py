"""Build and run turn-based games from a game-definition syntax tree."""

__version__ = "0.1.0"

__all__ = [
    "compiler",
    "components",
    "datatypes",
    "expressions",
    "instructions",
    "players",
    "syntax",
    "treewalk",
]