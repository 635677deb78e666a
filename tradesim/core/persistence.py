"""
Save/load boundary between the running session and a UserStore.

Neither function lets a PersistenceError escape: a failed load falls back to a
fresh default user, a failed save is reported as False. In-memory state is never
touched by either failure.
"""

from __future__ import annotations

import logging
from typing import Callable

from tradesim.core.user import User
from tradesim.errors.errors import PersistenceError, StateCorruptError
from tradesim.ports.user_store import UserStore

logger = logging.getLogger(__name__)


def load_user_state(store: UserStore, default_factory: Callable[[], User]) -> User:
    """
    - absent state  -> fresh default user
    - corrupt state -> warning, fresh default user
    - I/O failure   -> warning, fresh default user
    """
    try:
        user = store.load()
    except StateCorruptError as exc:
        logger.warning(f"Saved state is corrupt, starting fresh: {exc}")
        return default_factory()
    except PersistenceError as exc:
        logger.warning(f"Could not read saved state, starting fresh: {exc}")
        return default_factory()

    if user is None:
        logger.info("No saved state found, starting fresh")
        return default_factory()

    logger.info(f"Restored state for {user.name} (balance={user.balance})")
    return user


def save_user_state(store: UserStore, user: User) -> bool:
    try:
        store.save(user)
    except PersistenceError as exc:
        logger.warning(f"Error saving state: {exc}")
        return False
    return True
