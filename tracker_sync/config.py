import os

# ================= SERVER VERSION TAG =================
SERVER_VERSION = "v1"
SERVER_PORT = int(os.environ.get("PORT", 5000))

# ================= TRACKER SOURCE =================
TRACKER_URL = os.environ.get("TRACKER_URL", "https://gamesdonequick.com/tracker/search")
TRACKER_EVENT_ID = int(os.environ.get("TRACKER_EVENT_ID", 17))

# === POLLING ===
POLL_INTERVAL = float(os.environ.get("POLL_INTERVAL", 60))   # Seconds between schedule polls
API_TIMEOUT = float(os.environ.get("API_TIMEOUT", 10))       # Hard timeout for tracker + boxart requests
WORKER_THREAD_COUNT = 2                                        # One worker per tracker listing

HEADERS = {
    "User-Agent": "Mozilla/5.0",
    "Accept": "application/json",
    "Accept-Language": "en",
}

# ================= BOXART =================
BOXART_TEMPLATE = os.environ.get(
    "BOXART_TEMPLATE", "http://static-cdn.jtvnw.net/ttv-boxart/{name}-{width}x{height}.jpg"
)
BOXART_ASPECT_RATIO = 1.397
BOXART_WIDTH = 469
BOXART_HEIGHT = round(BOXART_WIDTH * BOXART_ASPECT_RATIO)

# Twitch serves this generic image when a game has no art of its own
TWITCH_DEFAULT_BOXART_URL = os.environ.get(
    "TWITCH_DEFAULT_BOXART_URL",
    f"https://static-cdn.jtvnw.net/ttv-static/404_boxart-{BOXART_WIDTH}x{BOXART_HEIGHT}.jpg"
)
DEFAULT_BOXART_FILE = os.environ.get(
    "DEFAULT_BOXART_FILE",
    os.path.join(os.path.dirname(os.path.abspath(__file__)), "assets", "default_boxart.png")
)

# ================= RUN DEFAULTS =================
UNKNOWN = "Unknown"
DEFAULT_CATEGORY = "Any%"

# ================= LOGGING =================
LOG_FILE = os.environ.get("LOG_FILE", "tracker_sync.log")
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

# ================= CHECKLIST =================
CHECKLIST_ITEMS = [
    "Runner audio checked",
    "Commentator audio checked",
    "Game capture checked",
    "Stream layout set",
    "Donation totals reset",
]
