"""Views for MVP architecture.

Views render presenter state through caller-supplied builders and delegate
user actions (retry, scrolling) back to the presenter.
"""

from loadview.gui.views.auto_load_more_list import AutoLoadMoreList
from loadview.gui.views.loader_widget import LoaderWidget

__all__ = ["AutoLoadMoreList", "LoaderWidget"]
