"""
Pytest configuration to ensure paths are set up correctly for tests.

Adds src/ to sys.path so `import order_risk` works from a plain checkout,
without an editable install.
"""

import os
import sys
from pathlib import Path


def _ensure_src_on_sys_path() -> None:
    """Add src/ to sys.path if missing."""
    src_root = Path(__file__).resolve().parents[1] / "src"
    src_str = str(src_root)
    if src_str not in sys.path:
        sys.path.insert(0, src_str)


_ensure_src_on_sys_path()

# Deterministic defaults so tests do not depend on the developer's shell.
os.environ["ENVIRONMENT"] = "test"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ.pop("ORDER_TIMEZONE", None)
