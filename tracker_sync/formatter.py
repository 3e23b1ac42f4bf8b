import logging
from datetime import datetime as dt, timezone

from tracker_sync.config import UNKNOWN, DEFAULT_CATEGORY
from tracker_sync.errors import DecodeError, ScheduleOrderError
from tracker_sync.fetchers.boxart import build_boxart_url

logger = logging.getLogger(__name__)

def format_runner(fields):
    stream = fields.get('stream') or ''
    return {
        'name': fields.get('name') or UNKNOWN,
        # Tracker stores full URLs, layouts only want the channel
        'stream': stream.rstrip('/').split('/')[-1],
    }

def concatenate_runners(runners):
    names = [r['name'] for r in runners if r is not None]
    return ', '.join(names)

def parse_start_time(value):
    """ISO-8601 string -> epoch milliseconds, or None if it can't be read"""
    if not value or not isinstance(value, str): return None
    try:
        parsed = dt.fromisoformat(value.replace('Z', '+00:00'))
    except ValueError:
        return None
    if parsed.tzinfo is None: parsed = parsed.replace(tzinfo=timezone.utc)
    return int(parsed.timestamp() * 1000)

def _check_orders(runs):
    orders = [run['order'] for run in runs]
    if orders != list(range(1, len(runs) + 1)):
        raise ScheduleOrderError(f"run orders must be contiguous from 1, got {orders}")

def format_schedule(runner_records, run_records):
    all_runners = {}
    for rec in runner_records:
        if 'pk' not in rec:
            raise DecodeError(f"runner record without pk: {rec!r}")
        all_runners[rec['pk']] = format_runner(rec['fields'])

    schedule = []
    for rec in run_records:
        f = rec['fields']
        order = f.get('order')
        if order is None:
            logger.info("[schedule] Skipping unscheduled run %r", f.get('name'))
            continue
        if not isinstance(order, int) or isinstance(order, bool):
            raise DecodeError(f"run {f.get('name')!r} has non-integer order {order!r}")

        runners = []
        for runner_id in f.get('runners') or []:
            runner = all_runners.get(runner_id)
            if runner is None:
                logger.warning("[schedule] Run %r references unknown runner id %r", f.get('name'), runner_id)
            runners.append(runner)

        schedule.append({
            'name': f.get('name') or UNKNOWN,
            'console': f.get('console') or UNKNOWN,
            'commentators': f.get('commentators') or UNKNOWN,
            'category': f.get('category') or DEFAULT_CATEGORY,
            'startTime': parse_start_time(f.get('starttime')),
            'order': order,
            'estimate': f.get('run_time') or UNKNOWN,
            'releaseYear': f.get('release_year'),
            'runners': runners,
            'concatenatedRunners': concatenate_runners(runners),
            'boxart': {
                'url': build_boxart_url(f.get('name') or UNKNOWN),
            },
            'type': 'run',
        })

    schedule.sort(key=lambda run: run['order'])
    _check_orders(schedule)
    return schedule
