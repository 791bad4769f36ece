"""Building blocks of a terminal chat client: settings, themes, shortcuts, read markers and commands."""

__version__ = "0.1.0"