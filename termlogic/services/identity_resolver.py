"""Identity Resolver — lazily maps node kinds to process-local integer handles.

Invariants:
    - stable_id(kind) is pure and never calls the lookup service
    - A cached resolve() returns without calling the lookup service
    - reset() starts a new epoch; a lookup that began in an older epoch never
      writes into the new cache, so no handle survives a reset
    - The lookup runs outside the lock: concurrent first-time resolutions may
      each call it (duplicate lookups are allowed, the service is deterministic)
    - Unavailability and "not assigned" are raised, never returned as defaults

Design Decisions:
    - Cache lives on a resolver instance, not on the kinds: kinds stay pure enum
      members, and tests build independent resolvers
    - threading.Lock + dict keyed by the 128-bit stable id; the critical
      sections are dictionary reads and writes only
"""

import logging
import threading
from collections.abc import Iterable

from termlogic.core.domain_types import LogicNodeKind, NodeHandle, StableId
from termlogic.core.errors import (
    ErrorContext, HandleNotAssignedError, LookupUnavailableError,
)
from termlogic.core.node_identity import stable_id as _stable_id
from termlogic.core.repository_protocols import IdentifierLookup

logger = logging.getLogger(__name__)


class IdentityResolver:
    """Resolves LogicNodeKind -> NodeHandle through an IdentifierLookup, with caching."""

    def __init__(self, lookup: IdentifierLookup):
        self._lookup = lookup
        self._lock = threading.Lock()
        self._handles: dict[StableId, NodeHandle] = {}
        self._epoch = 0

    @property
    def epoch(self) -> int:
        with self._lock:
            return self._epoch

    def stable_id(self, kind: LogicNodeKind) -> StableId:
        return _stable_id(kind)

    def cached_handle(self, kind: LogicNodeKind) -> NodeHandle | None:
        with self._lock:
            return self._handles.get(_stable_id(kind))

    def resolve(self, kind: LogicNodeKind) -> NodeHandle:
        identifier = _stable_id(kind)
        with self._lock:
            cached = self._handles.get(identifier)
            started_epoch = self._epoch
        if cached is not None:
            return cached

        logger.debug(
            f"Handle cache miss for {kind.name}",
            extra={"node_kind": kind.name, "stable_id": identifier, "epoch": started_epoch},
        )
        handle = NodeHandle(self._call_lookup(kind, identifier))

        with self._lock:
            if self._epoch == started_epoch:
                self._handles.setdefault(identifier, handle)
                return self._handles[identifier]
        # Reset happened mid-lookup: the answer belongs to the old identity space
        return self.resolve(kind)

    def resolve_many(self, kinds: Iterable[LogicNodeKind]) -> dict[LogicNodeKind, NodeHandle]:
        """Resolve several kinds; one lookup per kind not yet cached."""
        return {kind: self.resolve(kind) for kind in dict.fromkeys(kinds)}

    def reset(self) -> None:
        """Drop every cached handle; the next resolve() of each kind looks up again."""
        with self._lock:
            dropped = len(self._handles)
            self._handles = {}
            self._epoch += 1
            epoch = self._epoch
        logger.info(
            f"Identity cache reset, dropped {dropped} handles",
            extra={"epoch": epoch},
        )

    def _call_lookup(self, kind: LogicNodeKind, identifier: StableId) -> int:
        context = ErrorContext(node_kind=kind.name, stable_id=identifier)
        try:
            handle = self._lookup.lookup(identifier)
        except LookupUnavailableError:
            logger.warning(
                f"Identifier lookup unavailable for {kind.name}",
                extra={"node_kind": kind.name, "stable_id": identifier},
            )
            raise
        except OSError as e:  # ConnectionError, TimeoutError, socket errors
            logger.warning(
                f"Identifier lookup unavailable for {kind.name}: {e}",
                extra={"node_kind": kind.name, "stable_id": identifier},
            )
            raise LookupUnavailableError(
                f"Identifier lookup unavailable for {kind.name}", context,
            ) from e
        if handle is None:
            raise HandleNotAssignedError(identifier, context)
        return handle
