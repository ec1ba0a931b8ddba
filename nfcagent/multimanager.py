"""Discovery of NFC readers across several device managers."""

from __future__ import annotations

import logging
import queue
import threading
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

log = logging.getLogger(__name__)

_FORWARD_POLL_SECONDS = 0.1


@runtime_checkable
class Manager(Protocol):
    """Lists NFC readers and opens connections to them."""

    def open_device(self, device_str: str) -> Any:
        """Open the named device and return it; raise on failure."""
        ...

    def list_devices(self) -> list[str]:
        """Return the names of the available devices; raise on failure."""
        ...


@runtime_checkable
class DeviceChangeNotifier(Protocol):
    """A manager that signals when devices are added or removed.

    ``device_changes`` returns a queue that receives an item on each change.
    Putting ``None`` on the queue means no further changes will come.
    """

    def device_changes(self) -> queue.Queue:
        ...


class ManagerError(RuntimeError):
    """Raised when managers cannot be registered or a device cannot be opened."""


@dataclass(frozen=True)
class ManagerEntry:
    """A named manager given to :class:`MultiManager` at construction."""

    name: str
    manager: Manager | None


class MultiManager:
    """Aggregates several managers, trying them in the order they were added."""

    def __init__(self, *entries: ManagerEntry) -> None:
        self._managers: dict[str, Manager] = {}
        self._lock = threading.RLock()
        self._changes: queue.Queue = queue.Queue(maxsize=1)
        self._stop = threading.Event()

        for entry in entries:
            if not entry.name or entry.manager is None:
                log.warning(
                    "[multi] Skipping invalid manager entry: name=%s, manager=%r",
                    entry.name,
                    entry.manager,
                )
                continue
            if entry.name in self._managers:
                log.warning("[multi] Skipping duplicate manager: %s", entry.name)
                continue
            self._managers[entry.name] = entry.manager
            log.info("[multi] Manager registered: %s", entry.name)
            if isinstance(entry.manager, DeviceChangeNotifier):
                threading.Thread(
                    target=self._forward_device_changes,
                    args=(entry.manager.device_changes(),),
                    daemon=True,
                ).start()

    def _snapshot(self) -> dict[str, Manager]:
        with self._lock:
            return dict(self._managers)

    def add_manager(self, name: str, manager: Manager | None) -> None:
        """Register a manager under a unique, non-empty name."""
        if not name:
            raise ManagerError("manager name cannot be empty")
        if manager is None:
            raise ManagerError("manager cannot be nil")
        with self._lock:
            if name in self._managers:
                raise ManagerError(f"manager with name '{name}' already exists")
            self._managers[name] = manager
        log.info("[multi] Manager added: %s", name)

    def remove_manager(self, name: str) -> None:
        """Unregister the manager with the given name."""
        with self._lock:
            if name not in self._managers:
                raise ManagerError(f"manager not found: {name}")
            del self._managers[name]
        log.info("[multi] Manager removed: %s", name)

    def get_manager(self, name: str) -> Manager | None:
        """Return the manager with the given name, or None."""
        with self._lock:
            return self._managers.get(name)

    def open_device(self, device_str: str) -> Any:
        """Open a device.

        ``"manager:deviceID"`` goes straight to that manager when the prefix
        names a registered one; anything else is offered to every manager in
        order until one succeeds.
        """
        managers = self._snapshot()
        if not managers:
            raise ManagerError("no managers registered")

        manager_name, sep, device_id = device_str.partition(":")
        if sep and manager_name in managers:
            try:
                return managers[manager_name].open_device(device_id)
            except Exception as exc:
                raise ManagerError(
                    f"failed to open device '{device_id}' with manager '{manager_name}': {exc}"
                ) from exc

        last_error: Exception | None = None
        for manager in managers.values():
            try:
                return manager.open_device(device_str)
            except Exception as exc:
                last_error = exc

        if last_error is not None:
            raise ManagerError(
                f"all managers failed to open device '{device_str}': {last_error}"
            ) from last_error
        raise ManagerError(f"no device found: {device_str}")

    def list_devices(self) -> list[str]:
        """List devices from every manager, prefixed with the manager's name.

        Names that already contain a colon are kept as they are. A manager that
        fails to list its devices is logged and skipped.
        """
        devices: list[str] = []
        for name, manager in self._snapshot().items():
            try:
                listed = manager.list_devices()
            except Exception as exc:
                log.warning("[multi] manager '%s' failed to list devices: %s", name, exc)
                continue
            devices.extend(d if ":" in d else f"{name}:{d}" for d in listed)
        return devices

    def manager_count(self) -> int:
        with self._lock:
            return len(self._managers)

    def manager_names(self) -> list[str]:
        """Return the registered names in registration order."""
        with self._lock:
            return list(self._managers)

    def close(self) -> None:
        """Stop forwarding change signals and close every manager that can be closed."""
        self._stop.set()
        for name, manager in self._snapshot().items():
            closer = getattr(manager, "close", None)
            if callable(closer):
                log.info("[multi] Closing manager: %s", name)
                closer()

    def device_changes(self) -> queue.Queue:
        """Return a queue that receives an item when any child's devices change."""
        return self._changes

    def _forward_device_changes(self, source: queue.Queue) -> None:
        while not self._stop.is_set():
            try:
                item = source.get(timeout=_FORWARD_POLL_SECONDS)
            except queue.Empty:
                continue
            if item is None or self._stop.is_set():
                return
            try:
                self._changes.put_nowait(True)
            except queue.Full:
                pass