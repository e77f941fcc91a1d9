"""
Application package initializer.

This package contains the main entrypoint for the API and its
submodules.  Each domain (persons, accounts, transactions) has its own
schema, repository and service module and exposes a router defined in
``api/v1/endpoints``.
"""

from .main import app  # noqa: F401
