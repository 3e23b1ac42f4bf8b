import logging
import concurrent.futures
import requests

from tracker_sync.config import TRACKER_URL, TRACKER_EVENT_ID, API_TIMEOUT, HEADERS, WORKER_THREAD_COUNT
from tracker_sync.errors import TransportError, DecodeError
from tracker_sync.utils import build_pooled_session

logger = logging.getLogger(__name__)

class TrackerFetcher:
    """Pulls the runner and run listings for one event from the donation tracker."""

    def __init__(self, url=TRACKER_URL, event_id=TRACKER_EVENT_ID, session=None, timeout=API_TIMEOUT):
        self.url = url
        self.event_id = event_id
        self.timeout = timeout
        self.session = session or build_pooled_session(pool_size=WORKER_THREAD_COUNT, headers=HEADERS)
        self.executor = concurrent.futures.ThreadPoolExecutor(max_workers=WORKER_THREAD_COUNT)

    def _search(self, record_type):
        params = {'type': record_type, 'event': self.event_id}
        try:
            r = self.session.get(self.url, params=params, timeout=self.timeout)
            r.raise_for_status()
        except requests.RequestException as e:
            logger.warning("[tracker] %s search failed: %s", record_type, e)
            raise TransportError(f"tracker search for {record_type} failed: {e}") from e

        try:
            records = r.json()
        except ValueError as e:
            logger.warning("[tracker] %s search returned a non-JSON body", record_type)
            raise DecodeError(f"tracker search for {record_type} did not return JSON") from e

        if not isinstance(records, list):
            raise DecodeError(f"tracker search for {record_type} returned {type(records).__name__}, expected a list")
        for rec in records:
            if not isinstance(rec, dict) or not isinstance(rec.get('fields'), dict):
                raise DecodeError(f"tracker {record_type} record without fields: {rec!r}")
        return records

    def fetch(self):
        """Returns (runner_records, run_records). Either listing failing fails the whole fetch."""
        runners_future = self.executor.submit(self._search, 'runner')
        runs_future = self.executor.submit(self._search, 'run')
        # Wait for both so a failed listing never leaves the other one running unobserved
        concurrent.futures.wait([runners_future, runs_future])
        return runners_future.result(), runs_future.result()

    def close(self):
        self.executor.shutdown(wait=False)
        self.session.close()
