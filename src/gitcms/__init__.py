"""Git-backed content management with branch-per-draft publishing."""

__version__ = '0.1.0'
