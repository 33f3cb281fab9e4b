"""Services Layer — executes core-compiled statements against the database.

Invariants:
    - Services receive an AsyncSession; they never create engines
    - Query text comes from core/ compilers only
"""
