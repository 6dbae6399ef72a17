"""Store lookup clients: App Store JSON API and Play Store page scraping.

Architecture:
  StoreClient          - one blocking GET + extraction, raises StoreLookupError
  AppStoreClient       - iTunes lookup API, reads results[0]
  PlayStoreClient      - listing page HTML, extraction via a PlayStoreExtractor
  ClassMarkerExtractor - default extractor keyed on the page's CSS classes

lookup() raises, fetch() never does: it wraps the outcome in a LookupResult.

A lookup can be abandoned from another thread by setting the client's
cancel_event. The body is streamed in READ_BUFFER chunks and the event is
checked before connecting and between chunks, so a cancelled request is
closed within one socket read (bounded by settings.timeout).
"""

import http.client
import json
import logging
import threading
from typing import Iterable
from urllib.error import HTTPError, URLError
from urllib.parse import quote, urlencode
from urllib.request import Request, urlopen

from bs4 import BeautifulSoup

from newversion.branding import AppBranding
from newversion.config.settings import CheckerSettings
from newversion.core.errors import (
    LookupCancelled, LookupTimeout, MalformedResponse, NotFound,
    StoreLookupError, StoreUnreachable, VersionLabelNotFound,
)
from newversion.core.models import LookupResult, StoreListing

logger = logging.getLogger(__name__)

# Buffer size for streaming response bodies
READ_BUFFER = 16384


class StoreClient:
    """Base class: fetch one store's published version for an app id."""

    STORE_NAME = "store"

    def __init__(self, settings: CheckerSettings | None = None):
        self.settings = settings or CheckerSettings()
        self.cancel_event = threading.Event()

    def listing_url(self, app_id: str) -> str:
        raise NotImplementedError

    def lookup(self, app_id: str) -> StoreListing:
        raise NotImplementedError

    def cancel(self):
        """Abort the lookup in progress (or the next one) with LookupCancelled."""
        self.cancel_event.set()

    def fetch(self, app_id: str) -> LookupResult:
        """Run lookup() and capture any StoreLookupError as a failed result."""
        try:
            listing = self.lookup(app_id)
        except StoreLookupError as e:
            logger.warning("%s lookup for %s failed: %s", self.STORE_NAME, app_id, e)
            return LookupResult.failure(e)
        logger.info("%s has %s at version %s", self.STORE_NAME, app_id, listing.version)
        return LookupResult.success(listing)

    # ── HTTP ─────────────────────────────────────────────────────────

    def _get(self, url: str, app_id: str) -> bytes:
        """GET ``url`` and return the body of a 2xx response."""
        if self.cancel_event.is_set():
            raise LookupCancelled(url)

        timeout = self.settings.timeout
        req = Request(url, headers={'User-Agent': AppBranding.user_agent()})
        try:
            with urlopen(req, timeout=timeout) as resp:
                status = getattr(resp, 'status', 200)
                if not 200 <= status < 300:
                    raise NotFound(app_id, self.STORE_NAME, status)

                chunks = []
                while True:
                    # Leaving the with-block closes the connection
                    if self.cancel_event.is_set():
                        raise LookupCancelled(url)
                    chunk = resp.read(READ_BUFFER)
                    if not chunk:
                        break
                    chunks.append(chunk)
                return b''.join(chunks)
        except HTTPError as e:
            raise NotFound(app_id, self.STORE_NAME, e.code) from e
        except TimeoutError as e:
            raise LookupTimeout(url, timeout) from e
        except URLError as e:
            # Connect timeouts arrive wrapped
            if isinstance(e.reason, TimeoutError):
                raise LookupTimeout(url, timeout) from e
            raise StoreUnreachable(f"{url}: {e.reason}") from e
        except http.client.HTTPException as e:
            # Truncated body, bad status line: not an OSError
            raise StoreUnreachable(f"{url}: {e!r}") from e
        except OSError as e:
            raise StoreUnreachable(f"{url}: {e}") from e


class AppStoreClient(StoreClient):
    """Apple App Store, via the public iTunes lookup API."""

    STORE_NAME = "App Store"

    def listing_url(self, app_id: str) -> str:
        return self.settings.app_store_url.format(
            app_id=quote(app_id, safe=''), country=quote(self.settings.country, safe='')
        )

    def lookup(self, app_id: str) -> StoreListing:
        body = self._get(self.listing_url(app_id), app_id)
        try:
            data = json.loads(body)
        except ValueError as e:
            raise MalformedResponse(f"App Store returned invalid JSON: {e}") from e

        results = data.get('results') if isinstance(data, dict) else None
        if not isinstance(results, list) or not results:
            raise MalformedResponse(f"App Store returned no results for {app_id}")

        first = results[0]
        if not isinstance(first, dict):
            raise MalformedResponse("App Store result is not an object")
        version = first.get('version')
        link = first.get('trackViewUrl')
        if not isinstance(version, str) or not isinstance(link, str):
            raise MalformedResponse(
                f"App Store result for {app_id} lacks version/trackViewUrl"
            )
        return StoreListing(version=version, link=link)


# ── Play Store extraction strategies ─────────────────────────────────

class PlayStoreExtractor:
    """Pulls the version out of a parsed Play Store listing page."""

    def extract(self, document: BeautifulSoup, url: str) -> StoreListing:
        """Return the listing or raise VersionLabelNotFound."""
        raise NotImplementedError


class ClassMarkerExtractor(PlayStoreExtractor):
    """Finds the metadata row whose label reads "Current Version".

    Page structure it expects:
        <div class="{row_class}">
          <div class="{label_class}">Current Version</div>
          <span class="{value_class}">1.2.3</span>
        </div>
    """

    def __init__(self, row_class: str, label_class: str, value_class: str,
                 labels: Iterable[str]):
        self.row_class = row_class
        self.label_class = label_class
        self.value_class = value_class
        self.labels = frozenset(labels)

    @classmethod
    def from_settings(cls, settings: CheckerSettings) -> 'ClassMarkerExtractor':
        return cls(settings.row_class, settings.label_class, settings.value_class,
                   settings.version_labels.values())

    def extract(self, document: BeautifulSoup, url: str) -> StoreListing:
        rows = document.find_all(class_=self.row_class)
        for row in rows:
            label = row.find(class_=self.label_class)
            if label is None or label.get_text(strip=True) not in self.labels:
                continue
            value = row.find(class_=self.value_class)
            if value is None:
                continue
            version = value.get_text(strip=True)
            if version:
                return StoreListing(version=version, link=url)

        raise VersionLabelNotFound(
            f"No '{self.row_class}' row labelled {sorted(self.labels)} "
            f"among {len(rows)} rows at {url}"
        )


class PlayStoreClient(StoreClient):
    """Google Play Store, by scraping the public listing page."""

    STORE_NAME = "Play Store"

    def __init__(self, settings: CheckerSettings | None = None,
                 extractor: PlayStoreExtractor | None = None):
        super().__init__(settings)
        self.extractor = extractor or ClassMarkerExtractor.from_settings(self.settings)

    def listing_url(self, app_id: str) -> str:
        url = self.settings.play_store_url.format(app_id=quote(app_id, safe=''))
        if self.settings.play_store_language:
            url += '&' + urlencode({'hl': self.settings.play_store_language})
        return url

    def lookup(self, app_id: str) -> StoreListing:
        url = self.listing_url(app_id)
        body = self._get(url, app_id)
        document = BeautifulSoup(body, 'html.parser')
        return self.extractor.extract(document, url)
