from typing import Iterable

from hotspot.core.shape import Shape, renumber


Snapshot = tuple[Shape, ...]


class HistoryLog:
    """Linear undo/redo log of complete shape lists.

    Snapshot 0 is always the empty list, and the pointer never moves
    before it.
    """

    def __init__(self):
        self.snapshots: list[Snapshot] = [()]
        self.pointer = 0

    def __len__(self):
        return len(self.snapshots)

    @property
    def active(self) -> Snapshot:
        return self.snapshots[self.pointer]

    def commit(self, shapes: Iterable[Shape]) -> Snapshot:
        """
        Records a new snapshot after the current one.
        Anything that could have been redone is discarded.
        """
        snapshot = renumber(shapes)
        del self.snapshots[self.pointer + 1:]
        self.snapshots.append(snapshot)
        self.pointer = len(self.snapshots) - 1
        return snapshot

    def undo(self) -> Snapshot | None:
        """
        Steps back one snapshot. Returns ``None`` at the initial snapshot.
        """
        return self.step(-1)

    def redo(self) -> Snapshot | None:
        """
        Steps forward one snapshot. Returns ``None`` at the newest snapshot.
        """
        return self.step(1)

    def step(self, delta: int) -> Snapshot | None:
        target = self.pointer + delta
        if target < 0 or target >= len(self.snapshots):
            return None
        self.pointer = target
        return self.active

    def can_undo(self) -> bool:
        return self.pointer > 0

    def can_redo(self) -> bool:
        return self.pointer < len(self.snapshots) - 1
