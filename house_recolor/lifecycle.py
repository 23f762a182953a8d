"""Explicit initialization state shared by the pipeline services."""

from __future__ import annotations

import enum
import logging

from house_recolor.errors import ServiceNotReadyError

logger = logging.getLogger(__name__)


class ServiceState(enum.Enum):
    UNINITIALIZED = "uninitialized"
    READY = "ready"


class ManagedService:
    """Base class for services that must be initialized before use.

    Services are plain objects created by the caller; ``initialize()`` moves
    them from ``UNINITIALIZED`` to ``READY`` exactly once and is safe to
    call again.
    """

    def __init__(self) -> None:
        self._state = ServiceState.UNINITIALIZED

    @property
    def state(self) -> ServiceState:
        return self._state

    @property
    def ready(self) -> bool:
        return self._state is ServiceState.READY

    def _setup(self) -> None:
        """Hook for one-time preparation; subclasses override as needed."""

    def initialize(self) -> None:
        if self.ready:
            return
        self._setup()
        self._state = ServiceState.READY
        logger.debug("%s ready", type(self).__name__)

    def _require_ready(self) -> None:
        if not self.ready:
            raise ServiceNotReadyError(f"{type(self).__name__} used before initialize().")
