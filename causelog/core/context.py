# causelog/core/context.py
"""
Execution context tracking the currently running action.

The stack lives in a ``ContextVar`` so every thread and asyncio task gets an
independent view of "what is running now", while push/pop remain the only
mutators.
"""
from __future__ import annotations

from contextlib import contextmanager
from contextvars import ContextVar
from typing import TYPE_CHECKING, Iterator, Optional, Tuple

if TYPE_CHECKING:
    from causelog.core.action import Action


class ExecutionContext:
    """Stack-based context storing the current ``Action``."""

    def __init__(self) -> None:
        self._stack: ContextVar[Tuple["Action", ...]] = ContextVar(
            f"causelog_stack_{id(self):x}", default=()
        )

    def push(self, action: "Action") -> None:
        """Make ``action`` the parent of new messages and actions."""
        self._stack.set(self._stack.get() + (action,))

    def pop(self) -> None:
        stack = self._stack.get()
        if not stack:
            raise IndexError("pop from an empty execution context")
        self._stack.set(stack[:-1])

    def current(self) -> Optional["Action"]:
        stack = self._stack.get()
        return stack[-1] if stack else None

    def __len__(self) -> int:
        return len(self._stack.get())


_context = ExecutionContext()


def get_context() -> ExecutionContext:
    return _context


def current_action() -> Optional["Action"]:
    """The action at the top of the global execution context, if any."""
    return _context.current()


@contextmanager
def use_context(context: Optional[ExecutionContext] = None) -> Iterator[ExecutionContext]:
    """Temporarily install ``context`` (a fresh one by default) as the global context."""
    global _context
    previous = _context
    _context = context if context is not None else ExecutionContext()
    try:
        yield _context
    finally:
        _context = previous
