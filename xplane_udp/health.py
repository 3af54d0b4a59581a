"""Health reporting for the dataref monitor."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, Mapping, Optional


@dataclass(slots=True)
class ComponentStatus:
    name: str
    healthy: bool
    detail: Optional[str] = None
    counters: Dict[str, int] = field(default_factory=dict)
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def as_dict(self) -> Dict[str, object]:
        payload: Dict[str, object] = {
            "name": self.name,
            "healthy": self.healthy,
            "detail": self.detail,
            "updatedAt": self.updated_at.isoformat(timespec="seconds"),
        }
        if self.counters:
            payload["counters"] = dict(self.counters)
        return payload


class HealthReporter:
    """Tracks component statuses for the running monitor."""

    def __init__(self) -> None:
        self._status: Dict[str, ComponentStatus] = {}
        self._monitor_state: Optional[ComponentStatus] = None
        self._lock = asyncio.Lock()

    async def update(
        self,
        name: str,
        healthy: bool,
        detail: Optional[str] = None,
        *,
        counters: Optional[Mapping[str, int]] = None,
    ) -> None:
        async with self._lock:
            self._status[name] = ComponentStatus(
                name=name,
                healthy=healthy,
                detail=detail,
                counters=dict(counters or {}),
            )

    async def set_monitor_state(
        self, state: str, *, healthy: bool, detail: Optional[str] = None
    ) -> None:
        async with self._lock:
            self._monitor_state = ComponentStatus(
                name="monitor",
                healthy=healthy,
                detail=detail if detail is not None else state,
            )

    async def snapshot(self) -> Dict[str, object]:
        async with self._lock:
            components = [status.as_dict() for status in self._status.values()]
            monitor_state = self._monitor_state

        overall = "ok" if all(item["healthy"] for item in components) else "degraded"
        if monitor_state is not None and not monitor_state.healthy:
            overall = "degraded"

        payload: Dict[str, object] = {"status": overall, "components": components}
        if monitor_state is not None:
            payload["monitorState"] = {
                "state": monitor_state.detail,
                "healthy": monitor_state.healthy,
                "updatedAt": monitor_state.updated_at.isoformat(timespec="seconds"),
            }

        return payload
