"""gitboard: sync status dashboard for many local git repositories."""

__version__ = "0.1.0"
