"""Startup wiring for the filter pipeline.

The order is fixed: find the container, install the hide rule, load the
patterns, expose the menu, classify what is already there, then start
watching for growth. If any step fails the pieces that were already wired
are torn down again and nothing is left half running.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
import logging
from typing import Optional

from core.classifier import reveal_all
from core.config import FilterConfig
from core.config_interface import ConfigInterface
from core.errors import DiscoveryFailure
from core.pattern_store import PatternStore
from core.ports import (
    ChangeSourcePort,
    CommandSurfacePort,
    ContainerPort,
    DocumentPort,
    KeyValueStorePort,
    PromptPort,
)
from core.watcher import ChangeWatcher

LOGGER = logging.getLogger(__name__)


async def wait_for_container(
    document: DocumentPort,
    selector: str,
    timeout: float,
    poll_interval: float,
) -> ContainerPort:
    """Poll the document until the container exists or the timeout passes."""

    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while True:
        container = document.query_container(selector)
        if container is not None:
            return container
        if loop.time() >= deadline:
            raise DiscoveryFailure(selector, timeout)
        await asyncio.sleep(poll_interval)


@dataclass
class Session:
    """Live filter attached to one container."""

    container: ContainerPort
    store: PatternStore
    interface: ConfigInterface
    watcher: ChangeWatcher

    def dispose(self) -> None:
        """Stop watching and withdraw the menu commands."""

        self.watcher.dispose()
        self.interface.dispose()
        LOGGER.info("Filter session disposed")


async def start_session(
    config: FilterConfig,
    document: DocumentPort,
    storage: KeyValueStorePort,
    change_source: ChangeSourcePort,
    surface: CommandSurfacePort,
    prompts: PromptPort,
) -> Session:
    """Wire the pipeline; raise on the first failing step."""

    container = await wait_for_container(
        document,
        config.container_selector,
        config.discovery.timeout_seconds,
        config.discovery.poll_interval_ms / 1000.0,
    )
    document.install_hide_rule(config.marker_class)

    store = PatternStore(
        storage,
        key=config.storage_key,
        policy=config.invalid_pattern_policy,
        alert=prompts.alert,
    )
    store.load()

    watcher = ChangeWatcher(
        container,
        change_source,
        snapshot=lambda: store.snapshot,
        quiescence=config.quiescence_seconds,
        marker=config.marker_class,
    )
    interface = ConfigInterface(
        store,
        surface,
        prompts,
        refresh=watcher.flush_now,
        reveal=lambda: reveal_all(container.items(), config.marker_class),
    )
    try:
        interface.rebuild()
        watcher.flush_now()
        watcher.start()
    except Exception:
        watcher.dispose()
        interface.dispose()
        raise

    LOGGER.info("Filter session started on %s", config.container_selector)
    return Session(container=container, store=store, interface=interface, watcher=watcher)


async def bootstrap(
    config: FilterConfig,
    document: DocumentPort,
    storage: KeyValueStorePort,
    change_source: ChangeSourcePort,
    surface: CommandSurfacePort,
    prompts: PromptPort,
) -> Optional[Session]:
    """Start a session, logging instead of raising when startup fails."""

    try:
        return await start_session(config, document, storage, change_source, surface, prompts)
    except Exception:
        LOGGER.exception("listblock: Initialization failed")
        return None
