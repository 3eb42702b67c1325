"""Infrastructure Layer — external service clients and cross-cutting concerns.

Invariants:
    - Infrastructure never imports domain logic beyond core types and errors
    - All external failures mapped to TermLogicError subclasses

Design Decisions:
    - Thin wrappers over libraries (defusedxml, SQLAlchemy, logging)
"""
