"""
Dynamic field list for the repeatable "technologies" rows.

Every entry gets a key from a per-list counter when it is created. Keys are
never reused, not even after remove() or reset(), so a widget bound to a
removed row can never pick up the values of a newer one.
"""

import itertools
import logging
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional

from .exceptions import FieldListError
from .models import TechEntry

logger = logging.getLogger(__name__)

KEY_PREFIX = "tech"

_UNSET = object()


class TechFieldList:
    """Ordered, mutable collection of TechEntry rows."""

    def __init__(self, values: Optional[Iterable[Dict[str, Any]]] = None, key_prefix: str = KEY_PREFIX):
        self._key_prefix = key_prefix
        self._counter = itertools.count(1)
        self._entries: List[TechEntry] = []
        self._listeners: List[Callable[["TechFieldList"], None]] = []

        for value in values or []:
            self._entries.append(self._new_entry(value.get('title', ""), value.get('knowledge', 0)))

    def _new_entry(self, title: Any, knowledge: Any) -> TechEntry:
        return TechEntry(key=f"{self._key_prefix}-{next(self._counter)}", title=title, knowledge=knowledge)

    def _check_index(self, index: int) -> int:
        length = len(self._entries)
        if not isinstance(index, int) or isinstance(index, bool) or not -length <= index < length:
            raise FieldListError(index, length)
        return index

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)

    def subscribe(self, listener: Callable[["TechFieldList"], None]) -> Callable[[], None]:
        """
        Register a callback run after every mutation.

        Returns:
            Function that removes the listener again
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    @property
    def entries(self) -> List[TechEntry]:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[TechEntry]:
        return iter(list(self._entries))

    def __getitem__(self, index: int) -> TechEntry:
        return self._entries[self._check_index(index)]

    def keys(self) -> List[str]:
        return [entry.key for entry in self._entries]

    def values(self) -> List[Dict[str, Any]]:
        """Entry values without their keys, in order."""
        return [entry.to_values() for entry in self._entries]

    def index_of(self, key: str) -> int:
        """Position of the entry with the given key."""
        for index, entry in enumerate(self._entries):
            if entry.key == key:
                return index
        raise FieldListError(key, len(self._entries))

    def append(self, title: Any = "", knowledge: Any = 0) -> TechEntry:
        """
        Add a new entry at the end.

        Args:
            title: Initial title (empty by default)
            knowledge: Initial knowledge value (0 by default)

        Returns:
            The new entry, carrying a fresh key
        """
        entry = self._new_entry(title, knowledge)
        self._entries.append(entry)
        logger.debug(f"Appended tech entry {entry.key} ({len(self._entries)} total)")
        self._notify()
        return entry

    def remove(self, index: int) -> TechEntry:
        """
        Delete the entry at a position. Remaining entries keep their order
        and keys.

        Raises:
            FieldListError: If index is out of range
        """
        entry = self._entries.pop(self._check_index(index))
        logger.debug(f"Removed tech entry {entry.key} ({len(self._entries)} left)")
        self._notify()
        return entry

    def update(self, index: int, title: Any = _UNSET, knowledge: Any = _UNSET) -> TechEntry:
        """Change the values of an entry in place; its key is kept."""
        entry = self._entries[self._check_index(index)]
        if title is not _UNSET:
            entry.title = title
        if knowledge is not _UNSET:
            entry.knowledge = knowledge
        self._notify()
        return entry

    def reset(self, values: Optional[Iterable[Dict[str, Any]]] = None) -> None:
        """Replace all entries. New entries get new keys."""
        self._entries = [
            self._new_entry(value.get('title', ""), value.get('knowledge', 0))
            for value in values or []
        ]
        logger.debug(f"Reset tech list to {len(self._entries)} entries")
        self._notify()
