"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - IO reached only through these Protocol types
    - Implementations provided by shell via dependency injection

Design Decisions:
    - Protocol over ABC: structural subtyping, test fakes need no inheritance
    - Sync methods: the resolver blocks its caller by contract; callers that
      must not block run resolution on a worker thread
"""

from typing import Protocol
from uuid import UUID


class IdentifierLookup(Protocol):
    """Contract for the external identifier-lookup service.

    Returns None when the service is reachable but has no entry for the
    identifier. Unavailability is signalled by raising (LookupUnavailableError,
    or ConnectionError / TimeoutError / OSError from a network client).
    """
    def lookup(self, stable_id: UUID) -> int | None: ...
