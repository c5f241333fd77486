"""Best-effort song lookup against the YouTube Data API.

Never raises: a missing key, upstream failure or unexpected body all come
back as ``None``. Latency is bounded by the client timeout here, not by the
battle engine.
"""
import logging
from typing import Optional

import httpx

from songwars.models import SongMatch

logger = logging.getLogger(__name__)

SEARCH_URL = 'https://www.googleapis.com/youtube/v3/search'
MUSIC_CATEGORY_ID = '10'
# Titles containing any of these are rarely the original track
REJECT_WORDS = ('karaoke', 'instrumental', 'reaction', 'review')


class SongLookupService:

    def __init__(self, api_key=None, timeout=5.0, transport=None):
        self.api_key = api_key
        self.timeout = timeout
        self.transport = transport

    def __call__(self, title, artist):
        return self.lookup(title, artist)

    def lookup(self, title: str, artist: str) -> Optional[SongMatch]:
        if not self.api_key:
            logger.warning("[lookup-skip] no YouTube API key configured")
            return None

        params = {
            'part': 'snippet',
            'q': f"{title} {artist}",
            'type': 'video',
            'videoCategoryId': MUSIC_CATEGORY_ID,
            'maxResults': 3,
            'key': self.api_key,
        }
        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                response = client.get(SEARCH_URL, params=params)
                response.raise_for_status()
                items = response.json().get('items') or []
            return self._pick(items)
        except (httpx.HTTPError, ValueError, KeyError, TypeError, AttributeError) as e:
            logger.error(f"[lookup-error] title={title!r} artist={artist!r} error={e}")
            return None

    def _pick(self, items) -> Optional[SongMatch]:
        if not items:
            return None
        for item in items:
            title = (item['snippet'].get('title') or '').lower()
            if not any(word in title for word in REJECT_WORDS):
                return self._to_match(item)
        return self._to_match(items[0])

    @staticmethod
    def _to_match(item) -> SongMatch:
        snippet = item['snippet']
        thumbnail = (snippet.get('thumbnails') or {}).get('medium') or {}
        return SongMatch(
            media_id=item['id']['videoId'],
            title=snippet.get('title'),
            thumbnail_url=thumbnail.get('url'),
            channel_title=snippet.get('channelTitle'),
        )
