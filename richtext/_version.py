"""Package version: installed distribution metadata, else pyproject.toml."""
from __future__ import annotations

import re
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path


def _read_version() -> str:
    try:
        return version("richtext")
    except PackageNotFoundError:
        pass
    # Source checkout without pip install -e .
    pyproject = Path(__file__).resolve().parent.parent / "pyproject.toml"
    try:
        match = re.search(r'^version\s*=\s*"([^"]+)"', pyproject.read_text(), re.MULTILINE)
    except OSError:
        return "0.0.0"
    return match.group(1) if match else "0.0.0"


__version__: str = _read_version()
