"""Infrastructure Layer — database access, store adapters and cross-cutting concerns.

Invariants:
    - Store adapters implement core.repository_protocols.ProfileStore
    - All driver exceptions are mapped to core.errors before leaving this layer

Design Decisions:
    - Adapters consume the core predicate tree; core never imports from here
"""
