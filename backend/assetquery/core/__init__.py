"""Core Layer — pure filter grammar, parsers and SQL compilers; no IO, no async, no DB.

Invariants:
    - No module in core/ imports from services/, api/ or infrastructure/
    - All functions are deterministic: same input, same SQL text and bound values
    - SQLAlchemy is used only to construct statements (text + bind parameters)
"""
