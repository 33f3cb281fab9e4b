"""Pydantic Schemas — request/response validation for API endpoints.

Invariants:
    - Schemas validate at system boundary (user input, API responses)
    - Filter grammar itself is parsed by core/filter_parser, not by Pydantic
"""
