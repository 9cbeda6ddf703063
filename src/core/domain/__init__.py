"""Domain models and static tables.

Why:
- Pure, strict data structures (Pydantic v2) and the fixed payment tables.
- The domain knows nothing about subprocesses, the CLI or rendering.
"""
