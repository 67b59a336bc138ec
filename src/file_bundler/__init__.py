"""Bundle a directory of static assets into generated Go source."""

__version__ = "0.1.0"
