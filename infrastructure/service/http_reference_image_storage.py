from pathlib import Path
from urllib.parse import quote, urlparse

import numpy as np
import requests

from domain.service import ReferenceImageStorage
from utils import get_logger
from utils.helpers import decode_image_bytes, load_image

logger = get_logger(__name__)


class HttpReferenceImageStorage(ReferenceImageStorage):
    """Loads reference photos from URLs, local paths, or a public bucket.

    Relative references are object names inside the bucket and are joined to
    ``public_base_url``.
    """

    def __init__(self, public_base_url: str | None = None, timeout: float = 10.0, session: requests.Session | None = None):
        self.public_base_url = public_base_url.rstrip("/") if public_base_url else None
        self.timeout = timeout
        self.session = session or requests.Session()

    def public_url(self, reference: str) -> str | None:
        if urlparse(reference).scheme in ("http", "https"):
            return reference
        if self.public_base_url:
            return f"{self.public_base_url}/{quote(reference.lstrip('/'))}"
        return None

    def fetch_image(self, reference: str) -> np.ndarray | None:
        if urlparse(reference).scheme not in ("http", "https") and Path(reference).is_file():
            return load_image(reference)

        url = self.public_url(reference)
        if url is None:
            logger.warning(f"No public URL for reference image {reference}")
            return None

        response = self.session.get(url, timeout=self.timeout)
        response.raise_for_status()
        image = decode_image_bytes(response.content)
        if image is None:
            logger.warning(f"Could not decode image downloaded from {url}")
        return image
