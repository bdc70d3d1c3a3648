"""
tapbump package

This package implements the release routine for the clipzero Homebrew tap.

Key responsibilities are split across modules:
- `version.py`: semantic version triplet and bump arithmetic
- `formula.py`: read the current version from, and rewrite fields in, the formula file
- `renderer.py`: Jinja2 rendering of the formula template and commit messages
- `github_client.py`: isolated GitHub interactions (tarball checksum, tag lookup)
- `git.py`: thin wrapper around the `git` executable
- `config.py`: optional YAML configuration with CLI overrides
- `release.py`: release orchestration (plan -> tag -> checksum -> rewrite -> commit)
- `cli.py`: CLI entrypoint
"""

from __future__ import annotations

__all__ = ["__version__"]

__version__ = "0.1.0"
