import threading
import logging

logger = logging.getLogger(__name__)

data_lock = threading.Lock()

# Both values are only ever replaced wholesale, never mutated in place.
# Schedule always starts empty so the first poll is treated as a change.
state = {
    'schedule': [],
    'schedule_version': 0,
    'current_run': {},
    'current_run_version': 0,
}

def get_schedule():
    with data_lock:
        return state['schedule']

def get_current_run():
    with data_lock:
        return state['current_run']

def replace_schedule(schedule):
    """Swap in a new schedule if it differs. Returns True when replaced."""
    with data_lock:
        if schedule == state['schedule']: return False
        state['schedule'] = schedule
        state['schedule_version'] += 1
        return True

def replace_current_run_if_changed(candidate):
    """Publish the candidate as current run unless it deep-equals the published one"""
    with data_lock:
        if candidate == state['current_run']: return False
        state['current_run'] = candidate
        state['current_run_version'] += 1
    logger.info("[schedule] Current run is now #%s: %s", candidate.get('order'), candidate.get('name'))
    return True

def snapshot():
    with data_lock:
        return {
            'schedule': state['schedule'],
            'schedule_version': state['schedule_version'],
            'current_run': state['current_run'],
            'current_run_version': state['current_run_version'],
        }

def reset_state():
    with data_lock:
        state['schedule'] = []
        state['schedule_version'] = 0
        state['current_run'] = {}
        state['current_run_version'] = 0
