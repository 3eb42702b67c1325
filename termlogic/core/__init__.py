"""Core Layer — pure domain logic, no IO, no threads, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, db/ or models/
    - All functions are pure and deterministic

Design Decisions:
    - Functional core separated from imperative shell: identity hashing, result
      aggregation and tree mapping are testable without a lookup service or parser
"""
