"""Main Textual app: a paginated feed with the filter attached."""

from __future__ import annotations

import logging
from typing import Any, Optional

from rich.text import Text
from textual.app import App, ComposeResult
from textual.containers import Container, Horizontal, Vertical
from textual.css.query import NoMatches
from textual.widgets import Footer, Static

from adapters.feed_file import FeedPager, Posting
from adapters.textual_host import CommandRegistry, ObservableList, TextualChangeSource, TextualDocument
from core.bootstrap import Session, bootstrap
from core.config import FilterConfig
from core.ports import KeyValueStorePort
from .commands import PatternCommands
from .constants import ACCENT, LIST_ID, LIST_MOUNT_DELAY, STATUS_ID
from .modals import ModalPrompts

LOGGER = logging.getLogger(__name__)


class PostingCard(Static):
    """One posting in the feed."""

    def __init__(self, posting: Posting, **kwargs: Any) -> None:
        super().__init__(self._render_posting(posting), **kwargs)
        self.posting = posting

    @property
    def plain_text(self) -> str:
        return self.posting.plain_text

    @staticmethod
    def _render_posting(posting: Posting) -> Text:
        text = Text(posting.title, style="bold")
        meta = " · ".join(part for part in (posting.company, posting.location) if part)
        if meta:
            text.append(f"\n{meta}", style="dim")
        if posting.description:
            text.append(f"\n{posting.description}")
        return text


class PostingList(ObservableList):
    """The watched container."""


class FeedViewerApp(App):
    """Feed viewer that hides postings matching the stored patterns."""

    CSS = """
    Screen {
        background: #17140f;
        color: #efe8dc;
    }

    #header {
        height: 4;
        padding: 0 2;
        border-bottom: solid #3a3226;
    }

    #title {
        text-style: bold;
    }

    .subtle {
        color: #b9ae9c;
    }

    #feed-body {
        height: 1fr;
    }

    PostingList {
        height: 1fr;
        padding: 0 2;
    }

    PostingCard {
        margin: 1 0 0 0;
        padding: 0 1;
        border-left: wide #3a3226;
    }

    .modal-dialog {
        width: 60;
        height: auto;
        padding: 1 2;
        border: round #E8A33D;
        background: #211c15;
    }

    .modal-title {
        text-style: bold;
        margin-bottom: 1;
    }

    .modal-actions {
        height: auto;
        margin-top: 1;
    }

    PromptScreen, ConfirmScreen {
        align: center middle;
    }
    """

    BINDINGS = [
        ("n", "load_more", "Load more"),
        ("q", "quit", "Quit"),
    ]

    COMMANDS = App.COMMANDS | {PatternCommands}

    def __init__(
        self,
        filter_config: FilterConfig,
        storage: KeyValueStorePort,
        pager: FeedPager,
        auto_load_seconds: Optional[float] = None,
        mount_delay: float = LIST_MOUNT_DELAY,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self.filter_config = filter_config
        self.command_registry = CommandRegistry(self)
        self.session: Optional[Session] = None
        self._storage = storage
        self._pager = pager
        self._auto_load_seconds = auto_load_seconds
        self._mount_delay = mount_delay
        self._loaded = 0

    def compose(self) -> ComposeResult:
        with Container(id="header"):
            with Horizontal():
                with Vertical():
                    yield Static(self._title_text(), id="title")
                    yield Static("ctrl+p: pattern commands", classes="subtle")
                with Vertical():
                    yield Static("Loading postings...", id=STATUS_ID, classes="subtle")
        yield Container(id="feed-body")
        yield Footer()

    def on_mount(self) -> None:
        self.set_timer(self._mount_delay, self._mount_list)
        self.run_worker(self._start_filter(), group="bootstrap")

    def on_unmount(self) -> None:
        if self.session is not None:
            self.session.dispose()
            self.session = None

    async def _mount_list(self) -> None:
        await self.query_one("#feed-body", Container).mount(PostingList(id=LIST_ID))
        await self.action_load_more()
        if self._auto_load_seconds:
            self.set_interval(self._auto_load_seconds, self.action_load_more)

    async def _start_filter(self) -> None:
        config = self.filter_config
        self.session = await bootstrap(
            config,
            TextualDocument(self, config.item_selector),
            self._storage,
            TextualChangeSource(),
            self.command_registry,
            ModalPrompts(self),
        )
        if self.session is None:
            self.notify("Filter did not start; see the log.", severity="warning")

    async def action_load_more(self) -> None:
        try:
            posting_list = self.query_one(f"#{LIST_ID}", PostingList)
        except NoMatches:
            return
        page = self._pager.next_page()
        self._loaded += await posting_list.append_items(PostingCard(posting) for posting in page)
        self.query_one(f"#{STATUS_ID}", Static).update(
            f"{self._loaded} postings loaded, page {self._pager.pages_served}"
        )

    @staticmethod
    def _title_text() -> Text:
        return Text.assemble(
            ("LIST", ACCENT),
            ("BLOCK > Feed", "bold"),
        )
