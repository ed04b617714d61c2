"""
Synchronization engine for the Sales Order UI.

Components:
- ListSynchronizer: paginated, searchable lists with single-flight fetches
- DetailLoader: the single selected order
- MutationCoordinator: pessimistic mutations followed by refreshes
- SearchDebouncer: quiet-period commit of search input
- ViewportTrigger: infinite-scroll trigger over a NearEndSensor
"""

from order_ui.sync.debounce import SearchDebouncer
from order_ui.sync.detail_loader import DetailLoader
from order_ui.sync.list_sync import ListSynchronizer
from order_ui.sync.mutations import MutationCoordinator, MutationOutcome
from order_ui.sync.tokens import TokenSource
from order_ui.sync.viewport import CallbackSensor, NearEndSensor, ViewportTrigger

__all__ = [
    "CallbackSensor",
    "DetailLoader",
    "ListSynchronizer",
    "MutationCoordinator",
    "MutationOutcome",
    "NearEndSensor",
    "SearchDebouncer",
    "TokenSource",
    "ViewportTrigger",
]
