"""UserStore Port Interface.

Contract: Load & persist the whole user state (balance, holdings, transaction log).
- load() returns None when nothing has been saved yet and raises StateCorruptError
  when saved state exists but cannot be decoded.
- save() overwrites prior content; failures raise PersistenceError.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional, Protocol

if TYPE_CHECKING:
    from tradesim.core.user import User


class UserStore(Protocol):
    def load(self) -> Optional[User]: ...
    def save(self, user: User) -> None: ...
