from __future__ import annotations


class TapbumpError(Exception):
    """Base class for every error the CLI reports as `Error: <message>`."""
