"""Services Layer — orchestration of pure core logic around store IO.

Invariants:
    - Services await stores; they never build SQL or parse HTTP input

Design Decisions:
    - One service per resource (ProfileQueryService)
"""
