# causelog/core/task_level.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True)
class TaskLevel:
    """
    The location of a message within the tree of actions of a task.

    Each item indicates a child relationship and the value indicates the
    message count. For example ``(2, 3)`` is the third message within an
    action which is the second item in the task. The root level is empty.
    """

    level: Tuple[int, ...] = ()

    def __post_init__(self) -> None:
        # Accept any iterable, store a tuple so instances stay hashable.
        object.__setattr__(self, "level", tuple(self.level))

    @classmethod
    def from_string(cls, s: str) -> "TaskLevel":
        """Parse the output of ``to_string``; empty components are skipped."""
        return cls(tuple(int(part) for part in s.split("/") if part))

    def to_string(self) -> str:
        return "/" + "/".join(str(i) for i in self.level)

    def __str__(self) -> str:
        return self.to_string()

    def as_list(self) -> list[int]:
        return list(self.level)

    def next_sibling(self) -> "TaskLevel":
        """The task level at the same depth, one later."""
        return TaskLevel(self.level[:-1] + (self.level[-1] + 1,))

    def child(self) -> "TaskLevel":
        return TaskLevel(self.level + (1,))

    def parent(self) -> Optional["TaskLevel"]:
        """Parent of this level, or ``None`` for the root level."""
        if not self.level:
            return None
        return TaskLevel(self.level[:-1])

    def is_sibling_of(self, other: "TaskLevel") -> bool:
        return self.parent() == other.parent()
