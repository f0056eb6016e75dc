# src/taskledger/core/access.py

from __future__ import annotations

import logging

from .errors import InvalidOwner, Unauthorized
from .ports import OwnerRepo

logger = logging.getLogger(__name__)


class OwnerAccessControl:
    """
    Single-owner access gate.

    - check() is a pure predicate over the current owner (no side effects).
    - The owner is read from the OwnerRepo at construction; `initial_owner`
      is used (and persisted) only when nothing has been stored yet.
    - transfer() swaps the owner in one write: there is exactly one owner at any time.
    """

    def __init__(self, repo: OwnerRepo, initial_owner: str) -> None:
        self._repo = repo

        stored = repo.load_owner()
        if stored:
            self._owner = stored
        else:
            owner = (initial_owner or "").strip()
            if not owner:
                raise InvalidOwner("initial owner must be a non-empty identity")
            repo.save_owner(owner)
            self._owner = owner
            logger.info("Owner initialized owner=%s", owner)

    def current_owner(self) -> str:
        return self._owner

    def check(self, caller: str, action: str = "perform this action") -> None:
        if caller != self._owner:
            logger.warning("Unauthorized caller=%s action=%s", caller, action)
            raise Unauthorized(caller, action)

    def transfer(self, caller: str, new_owner: str) -> str:
        """Hand ownership to `new_owner`; returns the previous owner."""
        self.check(caller, "transfer ownership")

        new_owner = (new_owner or "").strip()
        if not new_owner:
            raise InvalidOwner("new owner must be a non-empty identity")

        previous = self._owner
        self._repo.save_owner(new_owner)
        self._owner = new_owner
        logger.info("Ownership transferred %s -> %s", previous, new_owner)
        return previous
