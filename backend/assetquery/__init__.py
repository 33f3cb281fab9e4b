"""Asset Query — filter/sort compilation and paginated listing for the asset index.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
