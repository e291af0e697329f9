"""
Top‑level package for the Repair Shop back‑office API.

This file makes ``repair_shop_api`` a Python package so that modules
within ``app`` can be imported using fully qualified names like
``repair_shop_api.app.main``.

The package provides no public exports; all functionality lives in
submodules under ``app``.
"""

__all__ = []
