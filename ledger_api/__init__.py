"""
Top-level package for the Ledger API.

The package provides no public exports; all functionality lives in
submodules under ``app`` (e.g. ``ledger_api.app.main``).
"""

__all__ = []
