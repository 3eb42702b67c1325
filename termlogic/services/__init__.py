"""Services Layer — stateful orchestration around the pure core.

Invariants:
    - Services own the only shared mutable state (the resolver's handle cache)
    - Services call IO only through injected Protocol implementations
"""
