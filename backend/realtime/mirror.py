"""
In-memory mirror of one tenant collection.

A mirror loads an ordered snapshot of a table for one tenant, subscribes to
the change broker and re-reads the whole collection whenever a matching
change is committed. Every fresh snapshot is handed to ``on_snapshot``.
Query failures are passed to ``on_error``; the previous snapshot is kept.
"""

from typing import Any, Callable, Dict, List, Optional, Sequence
import logging
import threading

from realtime.broker import ChangeBroker, ChangeEvent, broker as default_broker

logger = logging.getLogger(__name__)


class CollectionMirror:
    def __init__(
        self,
        session_factory: Callable,
        model,
        tenant_id: str,
        order_by: Optional[Sequence] = None,
        filters: Optional[Dict[str, Any]] = None,
        serializer: Optional[Callable[[Any], Any]] = None,
        on_snapshot: Optional[Callable[[List[Any]], None]] = None,
        on_error: Optional[Callable[[Exception], None]] = None,
        broker: Optional[ChangeBroker] = None,
    ):
        self.session_factory = session_factory
        self.model = model
        self.tenant_id = tenant_id
        self.order_by = list(order_by or [])
        self.filters = dict(filters or {})
        self.serializer = serializer
        self.on_snapshot = on_snapshot
        self.on_error = on_error
        self.broker = broker or default_broker
        self.items: List[Any] = []
        self.loaded = False
        self._lock = threading.Lock()
        self._unsubscribe = None

    @property
    def collection(self) -> str:
        return self.model.__tablename__

    def start(self) -> "CollectionMirror":
        if self._unsubscribe is None:
            self._unsubscribe = self.broker.subscribe(self.collection, self.tenant_id, self._on_change)
        self.refresh()
        return self

    def stop(self):
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def _on_change(self, event: ChangeEvent):
        logger.debug(f"{event.action} on {event.collection} #{event.record_id}, refreshing mirror for tenant {self.tenant_id}")
        self.refresh()

    def _query(self, db):
        query = db.query(self.model).filter(self.model.tenant_id == self.tenant_id)
        for column, value in self.filters.items():
            query = query.filter(getattr(self.model, column) == value)
        if self.order_by:
            query = query.order_by(*self.order_by)
        return query.all()

    def _load(self) -> List[Any]:
        db = self.session_factory()
        try:
            rows = self._query(db)
            if self.serializer is not None:
                return [self.serializer(row) for row in rows]
            for row in rows:
                db.expunge(row)
            return rows
        finally:
            db.close()

    def refresh(self) -> bool:
        """Re-read the collection. Returns False when the query failed."""
        with self._lock:
            try:
                snapshot = self._load()
            except Exception as e:
                logger.error(f"Error refreshing {self.collection} for tenant {self.tenant_id}: {e}")
                if self.on_error is not None:
                    self.on_error(e)
                return False
            self.items = snapshot
            self.loaded = True
        if self.on_snapshot is not None:
            self.on_snapshot(list(snapshot))
        return True
