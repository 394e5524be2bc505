# uiauto_selenium/context.py
"""
@file context.py
@brief Per-thread stack of running element operations.

Nested handles (a child located from a parent, a list item) run their
operations inside the caller's operation, so failures can report the whole
chain.
"""

from __future__ import annotations
import threading
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Dict, Generator, List, Optional
from uuid import uuid4


@dataclass
class ActionContext:
    """Context information for a single element operation."""
    action_id: str = field(default_factory=lambda: str(uuid4())[:8])
    action_name: str = ""
    target: Optional[str] = None
    start_time: float = field(default_factory=time.time)
    metadata: Dict[str, Any] = field(default_factory=dict)
    parent_context: Optional[ActionContext] = None

    @property
    def description(self) -> str:
        if self.target:
            return f"{self.action_name} on '{self.target}'"
        return self.action_name

    @property
    def elapsed_time(self) -> float:
        return time.time() - self.start_time

    def to_dict(self) -> Dict[str, Any]:
        return {
            "action_id": self.action_id,
            "action_name": self.action_name,
            "target": self.target,
            "elapsed_time": self.elapsed_time,
            "metadata": self.metadata,
        }

    def get_full_trace(self) -> List[ActionContext]:
        """Get this context followed by all of its parents."""
        trace = [self]
        current = self.parent_context
        while current is not None:
            trace.append(current)
            current = current.parent_context
        return trace

    def format_trace(self) -> str:
        """Format the full action trace for error messages."""
        lines = ["Action trace (most recent first):"]
        for i, ctx in enumerate(self.get_full_trace()):
            prefix = "  -> " if i > 0 else "  X "
            lines.append(f"{prefix}{ctx.description} [{ctx.elapsed_time:.2f}s]")
        return "\n".join(lines)


class ActionContextManager:
    """Thread-safe manager for the action context stack."""

    _local = threading.local()

    @classmethod
    def _get_stack(cls) -> List[ActionContext]:
        if not hasattr(cls._local, "stack"):
            cls._local.stack = []
        return cls._local.stack

    @classmethod
    def current(cls) -> Optional[ActionContext]:
        """Get the innermost action context of this thread."""
        stack = cls._get_stack()
        return stack[-1] if stack else None

    @classmethod
    def push(cls, context: ActionContext) -> None:
        stack = cls._get_stack()
        if stack:
            context.parent_context = stack[-1]
        stack.append(context)

    @classmethod
    def pop(cls) -> Optional[ActionContext]:
        stack = cls._get_stack()
        return stack.pop() if stack else None

    @classmethod
    @contextmanager
    def action(
        cls,
        action_name: str,
        target: Optional[str] = None,
        **metadata: Any
    ) -> Generator[ActionContext, None, None]:
        """Track an operation for the duration of the block."""
        context = ActionContext(action_name=action_name, target=target, metadata=metadata)
        cls.push(context)
        try:
            yield context
        finally:
            cls.pop()

    @classmethod
    def get_current_description(cls) -> str:
        current = cls.current()
        if current:
            return current.description
        return "operation"

    @classmethod
    def clear(cls) -> None:
        """Clear the context stack (useful for test cleanup)."""
        cls._local.stack = []
