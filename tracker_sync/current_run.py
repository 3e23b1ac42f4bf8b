import copy
import logging

from tracker_sync import state as store
from tracker_sync.errors import AssetError, NavigationError

logger = logging.getLogger(__name__)

class CurrentRunController:
    """Moves the current-run pointer and publishes the enriched run."""

    def __init__(self, resolver, checklist=None):
        self.resolver = resolver
        self.checklist = checklist

    def publish(self, run):
        """
        Build the current-run record for `run` and publish it if it differs from
        what is already published. Returns True when the published value changed.

        The record is a deep copy of the run with `nextRun` set to a copy of the
        following run (absent for the last run) and `boxart.base64` resolved.
        A boxart failure leaves the published run untouched.
        """
        cr = copy.deepcopy(run)
        schedule = store.get_schedule()

        # `order` is always index + 1, so schedule[order] is the run after this one
        if cr['order'] < len(schedule):
            cr['nextRun'] = copy.deepcopy(schedule[cr['order']])

        try:
            cr['boxart']['base64'] = self.resolver.resolve_url(cr['boxart']['url'])
        except AssetError as e:
            logger.warning("[schedule] Could not download boxart for %r: %s", cr['name'], e)
            return False

        return store.replace_current_run_if_changed(cr)

    def _navigate(self, index):
        schedule = store.get_schedule()
        if index < 0 or index >= len(schedule):
            raise NavigationError(f"no run at position {index + 1} of {len(schedule)}")
        target = schedule[index]
        if self.checklist is not None: self.checklist.reset()
        return self.publish(target)

    def advance(self):
        current = store.get_current_run()
        next_run = current.get('nextRun')
        if not next_run:
            raise NavigationError("current run has no next run")
        return self._navigate(next_run['order'] - 1)

    def retreat(self):
        current = store.get_current_run()
        if 'order' not in current:
            raise NavigationError("no current run set")
        return self._navigate(current['order'] - 2)

    def jump_to_order(self, order):
        return self._navigate(order - 1)
