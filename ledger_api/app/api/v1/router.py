"""
Top-level router for version 1 of the API.

This router aggregates the domain routers (persons, accounts,
transactions).  When a new domain is introduced, include its router
here.
"""

from fastapi import APIRouter

from .endpoints import accounts, persons, transactions

router = APIRouter()

router.include_router(persons.router, prefix="/persons", tags=["persons"])
router.include_router(accounts.router, prefix="/accounts", tags=["accounts"])
router.include_router(transactions.router, prefix="/transactions", tags=["transactions"])
