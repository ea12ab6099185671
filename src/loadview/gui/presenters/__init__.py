"""Presenters for MVP architecture.

Presenters own the loading state machines and the background tasks behind
them. Views render whatever state a presenter reports and delegate user
actions (retry, scrolling) back via method calls.
"""

from loadview.gui.presenters.auto_load_more_presenter import (
    AutoLoadMorePresenter,
    ListSlot,
    ListState,
    PageFailure,
    SlotKind,
)
from loadview.gui.presenters.loader_presenter import LoaderPhase, LoaderPresenter

__all__ = [
    "AutoLoadMorePresenter",
    "ListSlot",
    "ListState",
    "LoaderPhase",
    "LoaderPresenter",
    "PageFailure",
    "SlotKind",
]
