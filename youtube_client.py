import logging
import re
from typing import Optional
from urllib.parse import urlparse, parse_qs

import requests

from config import Config

logger = logging.getLogger(__name__)

YOUTUBE_VIDEO_URL = 'https://www.googleapis.com/youtube/v3/videos'
REQUEST_TIMEOUT_SECONDS = 10

VIDEO_ID_RE = re.compile(r'[A-Za-z0-9_-]{11}')


def _valid_id(candidate):
    return candidate if candidate and VIDEO_ID_RE.fullmatch(candidate) else None


def extract_video_id(url_or_id: str) -> Optional[str]:
    """
    Resolve a YouTube URL or bare 11-character ID to the video ID.

    Supported shapes: bare IDs, youtu.be/<id>, any URL carrying ?v=<id>,
    and /embed/<id> paths. Returns None when nothing matches.
    """
    if not isinstance(url_or_id, str):
        return None
    if VIDEO_ID_RE.fullmatch(url_or_id):
        return url_or_id
    try:
        parsed = urlparse(url_or_id)
        # Relative strings ("not a url") parse without a scheme or host
        if not parsed.scheme or not parsed.netloc:
            return None
        host = (parsed.hostname or '').lower()
        if 'youtu.be' in host:
            return _valid_id(parsed.path.lstrip('/').split('/')[0])
        v = parse_qs(parsed.query).get('v')
        if v:
            return _valid_id(v[0])
        parts = parsed.path.split('/')
        if 'embed' in parts:
            idx = parts.index('embed')
            if idx + 1 < len(parts):
                return _valid_id(parts[idx + 1])
        return None
    except ValueError as e:
        logger.debug(f"Could not parse video reference {url_or_id!r}: {e}")
        return None


def get_video_metadata(video_id: str, api_key: Optional[str] = None) -> Optional[dict]:
    """Fetch title and description from the YouTube Data API."""
    key = api_key or Config.YOUTUBE_API_KEY
    if not key:
        logger.warning("YOUTUBE_API_KEY not set; skipping metadata lookup.")
        return None

    params = {
        'part': 'snippet',
        'id': video_id,
        'key': key
    }
    try:
        resp = requests.get(YOUTUBE_VIDEO_URL, params=params, timeout=REQUEST_TIMEOUT_SECONDS)
        resp.raise_for_status()
        data = resp.json()
    except (requests.RequestException, ValueError) as e:
        logger.error(f"Error fetching YouTube metadata for {video_id}: {e}")
        return None

    items = data.get('items') or []
    if not items or not items[0]:
        logger.info(f"No metadata returned for {video_id}")
        return None
    snippet = items[0].get('snippet', {})
    return {
        'title': snippet.get('title', ''),
        'description': snippet.get('description', '')
    }
