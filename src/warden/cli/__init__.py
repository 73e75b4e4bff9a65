"""
CLI layer for warden.

Runs a Warden from the terminal over watchers or a custom processor given as
``module:qualname`` references. Scheduling logic lives in
``warden.scheduling``; this package only handles argument parsing and
coloured output.

Entry point::

    warden --help
"""

from warden.cli.app import app

__all__ = ["app"]
