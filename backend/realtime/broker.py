"""
In-process change notification.

Committed inserts, updates and deletes of tenant records are published here
by the session listeners in ``database.py``. Subscribers register per
(collection, tenant) pair and receive every matching ``ChangeEvent``.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple
import itertools
import logging
import threading

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChangeEvent:
    collection: str
    tenant_id: str
    action: str  # 'INSERT', 'UPDATE' or 'DELETE'
    record_id: Optional[Any] = None


Callback = Callable[[ChangeEvent], None]


class ChangeBroker:
    def __init__(self):
        self._lock = threading.Lock()
        self._subscribers: Dict[Tuple[str, str], Dict[int, Callback]] = {}
        self._ids = itertools.count(1)

    def subscribe(self, collection: str, tenant_id: str, callback: Callback) -> Callable[[], None]:
        """Register ``callback`` for changes of one tenant collection.

        Returns a function that removes the subscription. Calling it twice is harmless.
        """
        key = (collection, tenant_id)
        token = next(self._ids)
        with self._lock:
            self._subscribers.setdefault(key, {})[token] = callback

        def unsubscribe():
            with self._lock:
                callbacks = self._subscribers.get(key)
                if callbacks is None:
                    return
                callbacks.pop(token, None)
                if not callbacks:
                    del self._subscribers[key]

        return unsubscribe

    def publish(self, event: ChangeEvent):
        with self._lock:
            callbacks: List[Callback] = list(self._subscribers.get((event.collection, event.tenant_id), {}).values())
        for callback in callbacks:
            try:
                callback(event)
            except Exception:
                # A failing listener must not stop the others
                logger.exception(f"Change listener failed for {event.collection} (tenant {event.tenant_id})")

    def subscriber_count(self, collection: str, tenant_id: str) -> int:
        with self._lock:
            return len(self._subscribers.get((collection, tenant_id), {}))


broker = ChangeBroker()
