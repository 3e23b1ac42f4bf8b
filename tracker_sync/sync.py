import logging
import threading

from tracker_sync import state as store
from tracker_sync.config import POLL_INTERVAL
from tracker_sync.errors import TrackerSyncError
from tracker_sync.formatter import format_schedule

logger = logging.getLogger(__name__)

class ScheduleSync:
    """
    Keeps the published schedule in step with the tracker.

    Every `interval` seconds the tracker is polled, the listings are formatted and
    compared against the published schedule. On a change the schedule is replaced
    and the current run is re-resolved: first by name, then by order. A failed
    poll is logged and leaves both published values as they were.
    """

    def __init__(self, fetcher, controller, interval=POLL_INTERVAL):
        self.fetcher = fetcher
        self.controller = controller
        self.interval = interval
        self._timer = None
        self._timer_lock = threading.Lock()
        self._running = False

    # ================= TIMER =================
    def _tick(self):
        # Re-arm first so a slow poll doesn't push the next one back
        self._arm()
        self.update()

    def _arm_locked(self):
        # Caller holds _timer_lock. Only one timer chain may ever be live.
        if self._timer is not None: self._timer.cancel()
        self._timer = None
        if not self._running: return
        self._timer = threading.Timer(self.interval, self._tick)
        self._timer.daemon = True
        self._timer.start()

    def _arm(self):
        with self._timer_lock:
            self._arm_locked()

    def restart_timer(self):
        self._arm()

    def start(self, run_now=True):
        logger.info("[schedule] Polling schedule every %s seconds...", self.interval)
        with self._timer_lock:
            self._running = True
            self._arm_locked()
        if run_now:
            threading.Thread(target=self.update, daemon=True).start()

    def stop(self):
        with self._timer_lock:
            self._running = False
            self._arm_locked()

    # ================= UPDATE CYCLE =================
    def _update(self):
        runners_json, schedule_json = self.fetcher.fetch()
        formatted = format_schedule(runners_json, schedule_json)

        # If nothing has changed, return.
        if not store.replace_schedule(formatted): return False

        self.reconcile(formatted)
        return True

    def update(self):
        """Timer entry point. Never raises."""
        try:
            return self._update()
        except TrackerSyncError as e:
            logger.error("[schedule] Failed to update: %s", e)
        except Exception:
            logger.exception("[schedule] Failed to update")
        return False

    def trigger_update(self):
        """Manual update from the dashboard. Restarts the poll timer and re-raises failures."""
        logger.info("[schedule] Manual schedule update requested, invoking update...")
        self.restart_timer()
        try:
            updated = self._update()
        except Exception:
            logger.exception("[schedule] Manual update failed")
            raise
        if updated:
            logger.info("[schedule] Schedule successfully updated")
        else:
            logger.info("[schedule] Schedule unchanged, not updated")
        return updated

    def reconcile(self, schedule):
        """Point the current run at its counterpart in a freshly replaced schedule."""
        if not schedule:
            logger.warning("[schedule] Tracker returned an empty schedule, current run left as is")
            return False

        current = store.get_current_run()

        # No current run yet, or it fell off the end of the schedule: start over at the top
        if 'order' not in current or current['order'] > len(schedule):
            return self.controller.publish(schedule[0])

        for run in schedule:
            if run['name'] == current['name']:
                return self.controller.publish(run)

        # Renamed or removed; fall back to whatever now sits at its position
        for run in schedule:
            if run['order'] == current['order']:
                return self.controller.publish(run)

        logger.warning("[schedule] Current run %r (#%s) not found in new schedule, keeping it",
                       current['name'], current['order'])
        return False
