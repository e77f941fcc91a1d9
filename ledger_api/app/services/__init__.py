"""
Service layer.

Each service encapsulates the business rules of one aggregate and talks
to storage only through the repositories, which it receives in its
constructor.  Services raise ``core.errors`` exceptions and return
``None``/``False`` for entities that do not exist.
"""
