"""Ports (interfaces) used by the core pipeline.

Ports define the minimal contracts for storage, host document, and command
surface adapters so that the core can be reused with different frontends.
"""

from __future__ import annotations

from typing import Any, Awaitable, Callable, Hashable, Optional, Protocol, Sequence

from core.models import MutationRecord

CommandAction = Callable[[], Awaitable[None]]
MutationCallback = Callable[[Sequence[MutationRecord]], None]


class KeyValueStorePort(Protocol):
    """Opaque persistent key-value storage."""

    def load(self, key: str, default: Any) -> Any:
        ...

    def save(self, key: str, value: Any) -> None:
        ...


class ItemPort(Protocol):
    """One entry of the watched list."""

    def text(self) -> str:
        ...

    def has_marker(self, marker: str) -> bool:
        ...

    def set_marker(self, marker: str, enabled: bool) -> None:
        ...


class ContainerPort(Protocol):
    """The watched list container."""

    def items(self) -> Sequence[ItemPort]:
        ...


class DocumentPort(Protocol):
    """Host document operations needed at startup."""

    def query_container(self, selector: str) -> Optional[ContainerPort]:
        ...

    def install_hide_rule(self, marker: str) -> None:
        ...


class ChangeSourcePort(Protocol):
    """Structural change notifications for a container."""

    def observe(self, container: ContainerPort, callback: MutationCallback) -> Callable[[], None]:
        ...


class CommandSurfacePort(Protocol):
    """External command menu."""

    def register(self, label: str, action: CommandAction) -> Hashable:
        ...

    def unregister(self, handle: Hashable) -> None:
        ...


class PromptPort(Protocol):
    """User interaction used by the command flows."""

    async def prompt(self, message: str) -> Optional[str]:
        ...

    async def confirm(self, message: str) -> bool:
        ...

    def alert(self, message: str) -> None:
        ...
