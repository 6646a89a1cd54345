"""CodeMosaic: split, combine, list and count source files."""

__version__ = "0.1.0"
