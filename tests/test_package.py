"""Import checks for the public package surface."""

from __future__ import annotations

import importlib


def test_import_package() -> None:
    module = importlib.import_module("invoice_builder")

    assert module.__version__
    for name in module.__all__:
        assert hasattr(module, name), name
