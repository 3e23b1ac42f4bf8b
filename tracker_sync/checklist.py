import threading
import logging

from tracker_sync.config import CHECKLIST_ITEMS

logger = logging.getLogger(__name__)

class Checklist:
    """Per-run operator checklist. Cleared whenever the operator moves to another run."""

    def __init__(self, items=None):
        self._lock = threading.Lock()
        self._items = {name: False for name in (items or CHECKLIST_ITEMS)}

    def reset(self):
        with self._lock:
            self._items = {name: False for name in self._items}
        logger.info("[checklist] Reset")

    def toggle(self, item):
        with self._lock:
            if item not in self._items: raise KeyError(item)
            self._items = dict(self._items, **{item: not self._items[item]})
            return self._items[item]

    def snapshot(self):
        with self._lock:
            return dict(self._items)
