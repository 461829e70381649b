"""Switch sibling Git repositories to an updated main branch in one batch."""

__version__ = "0.1.0"
