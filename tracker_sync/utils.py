import sys
import logging
import requests
from requests.adapters import HTTPAdapter

from tracker_sync.config import LOG_FILE, LOG_LEVEL

# ================= LOGGING SETUP =================
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

def setup_logging(log_file=LOG_FILE, level=LOG_LEVEL):
    """Tee every record to stdout and the log file"""
    root = logging.getLogger()
    root.setLevel(level)
    formatter = logging.Formatter(LOG_FORMAT)

    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, mode='a'))

    for handler in handlers:
        handler.setFormatter(formatter)
        root.addHandler(handler)
    return root

def build_pooled_session(pool_size=20, retries=2, headers=None):
    session = requests.Session()
    adapter = HTTPAdapter(pool_connections=pool_size, pool_maxsize=pool_size, max_retries=retries, pool_block=True)
    session.mount("http://", adapter)
    session.mount("https://", adapter)
    if headers: session.headers.update(headers)
    return session
