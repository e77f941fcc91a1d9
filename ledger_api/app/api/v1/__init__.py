"""
Version 1 of the API.

Breaking changes to the HTTP contract should be introduced in a new
version subpackage (e.g. ``v2``).
"""
