import io
import base64
import logging
import threading
import requests
from PIL import Image, UnidentifiedImageError

from tracker_sync.config import (
    BOXART_TEMPLATE, BOXART_WIDTH, BOXART_HEIGHT, API_TIMEOUT,
    TWITCH_DEFAULT_BOXART_URL, DEFAULT_BOXART_FILE
)
from tracker_sync.errors import AssetError
from tracker_sync.utils import build_pooled_session

logger = logging.getLogger(__name__)

def build_boxart_url(name, template=BOXART_TEMPLATE, width=BOXART_WIDTH, height=BOXART_HEIGHT):
    return (template
            .replace('{name}', str(name))
            .replace('{width}', str(width))
            .replace('{height}', str(height)))

def load_fallback_base64(path=DEFAULT_BOXART_FILE):
    with open(path, 'rb') as f:
        return base64.b64encode(f.read()).decode('ascii')

class BoxartResolver:
    """
    Downloads boxart and hands it back base64 encoded.

    Twitch answers unknown games with a generic "no boxart" image instead of a 404.
    When the download matches that image byte for byte we substitute our own
    bundled default so the layouts show event branding instead.
    """

    def __init__(self, session=None, timeout=API_TIMEOUT,
                 placeholder_url=TWITCH_DEFAULT_BOXART_URL, fallback_base64=None):
        self.session = session or build_pooled_session(pool_size=4)
        self.timeout = timeout
        self.placeholder_url = placeholder_url
        self.fallback_base64 = fallback_base64 if fallback_base64 is not None else load_fallback_base64()
        self._placeholder_base64 = None
        self._placeholder_lock = threading.Lock()

    def _download(self, url):
        try:
            r = self.session.get(url, timeout=self.timeout)
            r.raise_for_status()
        except requests.RequestException as e:
            raise AssetError(f"could not download boxart {url}: {e}") from e

        content = r.content
        try:
            with Image.open(io.BytesIO(content)) as img:
                img.verify()
        except (UnidentifiedImageError, OSError, SyntaxError) as e:
            raise AssetError(f"boxart at {url} is not a readable image") from e
        return base64.b64encode(content).decode('ascii')

    def placeholder_base64(self):
        """The provider's generic image, fetched once. None while it cannot be retrieved."""
        with self._placeholder_lock:
            if self._placeholder_base64 is None and self.placeholder_url:
                try:
                    self._placeholder_base64 = self._download(self.placeholder_url)
                except AssetError as e:
                    logger.warning("[boxart] Could not fetch default boxart, substitution skipped: %s", e)
            return self._placeholder_base64

    def resolve_url(self, url):
        image = self._download(url)
        if image == self.placeholder_base64():
            return self.fallback_base64
        return image

    def resolve(self, url_template, name):
        return self.resolve_url(build_boxart_url(name, template=url_template))
