"""Coalesced single-shot timers as one pending deadline per role.

Scheduling a role replaces whatever was pending for it; nothing queues.
The owning actor polls next_deadline()/pop_due() on its own thread, so a
firing timer is serialized with every other event.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

SILENCE = "silence"
RESTART = "restart"


class DeadlineTimers:
    def __init__(self) -> None:
        self._pending: Dict[str, Tuple[float, Any]] = {}

    def schedule(self, role: str, deadline: float, payload: Any = None) -> None:
        self._pending[role] = (deadline, payload)

    def cancel(self, role: str) -> None:
        self._pending.pop(role, None)

    def cancel_all(self) -> None:
        self._pending.clear()

    def is_pending(self, role: str) -> bool:
        return role in self._pending

    def deadline(self, role: str) -> Optional[float]:
        entry = self._pending.get(role)
        return entry[0] if entry else None

    def next_deadline(self) -> Optional[float]:
        if not self._pending:
            return None
        return min(deadline for deadline, _ in self._pending.values())

    def pop_due(self, now: float) -> List[Tuple[str, Any]]:
        """Remove and return (role, payload) for every expired role, earliest first."""
        due = sorted(
            ((deadline, role, payload) for role, (deadline, payload) in self._pending.items() if deadline <= now),
            key=lambda item: item[0],
        )
        for _, role, _ in due:
            del self._pending[role]
        return [(role, payload) for _, role, payload in due]
