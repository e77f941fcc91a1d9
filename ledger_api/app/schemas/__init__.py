"""
Pydantic schema definitions for API payloads.

Each domain (persons, accounts, transactions) defines its own Pydantic
models for request and response bodies.  Field names are snake_case in
Python and camelCase on the wire to match the web front end.
"""
