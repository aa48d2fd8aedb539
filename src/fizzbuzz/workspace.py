from __future__ import annotations

import os
from pathlib import Path

SUBDIRS = ("profiles", "conditions")


def workspace_dir() -> Path:
    env = os.environ.get("FIZZBUZZ_HOME")
    if env:
        return Path(env).expanduser().resolve()
    return (Path.home() / ".fizzbuzz").resolve()


def workspace_subdir(sub: str) -> Path:
    """<workspace>/<sub>; not created, the workspace is optional."""
    if sub not in SUBDIRS:
        raise ValueError(f"unknown workspace folder: {sub!r}")
    return workspace_dir() / sub
