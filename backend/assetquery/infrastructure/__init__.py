"""Infrastructure Layer — database access and cross-cutting concerns.

Invariants:
    - Infrastructure never imports compilers from core/ (only the error types)
    - Driver exceptions are mapped to core.errors.DatabaseError here
"""
