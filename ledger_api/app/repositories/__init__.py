"""
Persistence layer.

Repositories wrap the SQLite tables behind small async methods keyed by
codes and owner references.  They hold no business rules beyond the
storage constraints declared in ``core.db``.
"""
