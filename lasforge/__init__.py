"""Range coding, LAS variable-length records and point-cloud indexing helpers."""

__version__ = "0.1.0"