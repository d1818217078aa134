"""Pytest configuration ensuring project root is importable.

Adds repository root to sys.path explicitly to avoid interpreter/path quirks.
"""
from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


@pytest.fixture(autouse=True)
def _isolate_config_env(tmp_path_factory):  # noqa: D401
    """Ensure global config/env side effects do not leak between tests.

    - Point COMFYREG_CONFIG_DIR at an empty dir (pure defaults)
    - Drop COMFYREG__* overrides from the outer environment
    - Clear config cache and metrics before and after
    """
    from comfy_registry import metrics
    from comfy_registry.config import clear_config_cache

    saved = {
        k: v
        for k, v in os.environ.items()
        if k.startswith("COMFYREG__") or k == "COMFYREG_CONFIG_DIR"
    }
    for k in saved:
        os.environ.pop(k)
    os.environ["COMFYREG_CONFIG_DIR"] = str(
        tmp_path_factory.mktemp("empty-config")
    )
    clear_config_cache()
    metrics.reset_for_tests()
    try:
        yield
    finally:
        clear_config_cache()
        for k in [k for k in os.environ if k.startswith("COMFYREG__")]:
            os.environ.pop(k)
        os.environ.pop("COMFYREG_CONFIG_DIR", None)
        os.environ.update(saved)
