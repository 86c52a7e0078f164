"""
Run the test suite from the project root: ``python tests.py``.

Installs the ``dev`` extra first when pytest or hypothesis is missing.
"""
from __future__ import annotations

import subprocess
import sys
from pathlib import Path


ROOT = Path(__file__).resolve().parent


def ensure_test_dependencies() -> None:
    try:
        import hypothesis  # noqa: F401
        import pytest  # noqa: F401
    except ImportError:
        print("pytest/hypothesis missing, installing .[dev]")
        subprocess.check_call([sys.executable, "-m", "pip", "install", "-e", ".[dev]"], cwd=str(ROOT))


def main() -> int:
    ensure_test_dependencies()
    return subprocess.call([sys.executable, "-m", "pytest", *sys.argv[1:]], cwd=str(ROOT))


if __name__ == "__main__":
    sys.exit(main())
