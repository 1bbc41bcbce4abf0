"""Core Layer — pure query-engine logic, no IO, no async, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, db/ or models/
    - All functions are pure and deterministic

Design Decisions:
    - Functional core separated from imperative shell: predicates, sorting,
      pagination and facets are testable without a database
"""
