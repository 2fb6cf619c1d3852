"""Linear undo/redo history of visited states."""

from __future__ import annotations

from dataclasses import dataclass

from fsm_history.types import StateId


@dataclass(frozen=True, slots=True)
class HistoryEntry:
    id: int
    state: StateId


class History:
    """Ordered record of visited states with an undo stack for redo.

    Entry ids start at 1 and each ``push`` takes the last entry's id + 1.
    ``undo`` moves the last entry onto the undo stack and ``redo`` moves it
    back, keeping its original id. Redo is only allowed while the redo
    flag set by ``undo`` is still up; ``push`` lowers it without
    discarding the undo stack.
    """

    def __init__(self, initial: StateId) -> None:
        self._initial = initial
        self._entries: list[HistoryEntry] = [HistoryEntry(id=1, state=initial)]
        self._undone: list[HistoryEntry] = []
        self._current_id = 1
        self._redo_enabled = False

    @property
    def entries(self) -> tuple[HistoryEntry, ...]:
        return tuple(self._entries)

    @property
    def last(self) -> HistoryEntry:
        return self._entries[-1]

    @property
    def current_id(self) -> int:
        return self._current_id

    @property
    def undo_depth(self) -> int:
        """Number of entries waiting on the undo stack."""
        return len(self._undone)

    @property
    def redo_enabled(self) -> bool:
        return self._redo_enabled

    @property
    def can_undo(self) -> bool:
        return len(self._entries) > 1

    @property
    def can_redo(self) -> bool:
        return self._redo_enabled and bool(self._undone)

    def __len__(self) -> int:
        return len(self._entries)

    def push(self, state: StateId) -> HistoryEntry:
        """Append *state* as a new entry and lower the redo flag."""
        entry = HistoryEntry(id=self.last.id + 1, state=state)
        self._entries.append(entry)
        self._current_id = entry.id
        self._redo_enabled = False
        return entry

    def undo(self) -> HistoryEntry | None:
        """Pop the last entry onto the undo stack.

        Returns the entry now at the end of the history, or None when only
        one entry is left.
        """
        if not self.can_undo:
            return None
        self._undone.append(self._entries.pop())
        # Tracks the new last entry; with contiguous ids this is current_id - 1.
        self._current_id = self.last.id
        self._redo_enabled = True
        return self.last

    def redo(self) -> HistoryEntry | None:
        """Move the most recently undone entry back onto the history.

        Returns the restored entry, or None when there is nothing to redo
        or the redo flag has been lowered.
        """
        if not self.can_redo:
            return None
        entry = self._undone.pop()
        self._entries.append(entry)
        self._current_id = entry.id
        return entry

    def clear(self) -> None:
        """Drop the undo stack and restart at a single entry for the initial state.

        The redo flag is left as it is; with an empty undo stack redo is
        unavailable either way.
        """
        self._undone.clear()
        self._entries = [HistoryEntry(id=1, state=self._initial)]
        self._current_id = 1
