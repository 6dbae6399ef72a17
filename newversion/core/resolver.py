"""Version status resolution: picks the store for a platform and asks it.

Architecture:
  VersionStatusResolver - pure Python logic (no Qt dependency), blocking
  ResolveWorker         - QThread wrapper with pyqtSignal for thread-safe UI updates
"""

import logging
import threading
from typing import Callable

from newversion.config.settings import CheckerSettings
from newversion.core.errors import PlatformUnsupported, StoreLookupError
from newversion.core.models import AppIdentity, Platform, VersionStatus
from newversion.core.stores import AppStoreClient, PlayStoreClient, StoreClient

logger = logging.getLogger(__name__)

# Platform → client factory. Anything not listed is unsupported.
DEFAULT_STORES: dict[Platform, Callable[[CheckerSettings], StoreClient]] = {
    Platform.ANDROID: PlayStoreClient,
    Platform.IOS: AppStoreClient,
}


class VersionStatusResolver:
    """Builds a fresh VersionStatus per call. resolve() never raises."""

    def __init__(self, settings: CheckerSettings | None = None,
                 stores: dict[Platform, Callable[[CheckerSettings], StoreClient]] | None = None):
        self.settings = settings or CheckerSettings()
        self._stores = dict(DEFAULT_STORES if stores is None else stores)

    def register_store(self, platform: Platform,
                       factory: Callable[[CheckerSettings], StoreClient]):
        """Route lookups for ``platform`` to clients built by ``factory``."""
        self._stores[platform] = factory

    def client_for(self, platform: Platform) -> StoreClient | None:
        factory = self._stores.get(platform)
        return factory(self.settings) if factory else None

    def resolve(self, platform: Platform, local_version: str, app_id: str,
                cancel_event: threading.Event | None = None) -> VersionStatus:
        """Look ``app_id`` up in the store for ``platform``.

        Lookup failures of any kind produce a status without a store
        version; the reason is kept on ``status.error``. Setting
        ``cancel_event`` from another thread aborts the request.
        """
        try:
            client = self.client_for(platform)
            if client is None:
                error = PlatformUnsupported(platform)
                logger.warning("%s", error)
                return VersionStatus(local_version=local_version, platform=platform,
                                     error=error)
            if cancel_event is not None:
                client.cancel_event = cancel_event
            result = client.fetch(app_id)
        except Exception as e:
            # A status must come back even if a client or its settings are broken
            logger.exception("%s lookup for %s crashed", platform.value, app_id)
            return VersionStatus(local_version=local_version, platform=platform,
                                 error=StoreLookupError(str(e)))
        if not result.ok:
            return VersionStatus(local_version=local_version, platform=platform,
                                 error=result.error)

        status = VersionStatus(
            local_version=local_version,
            store_version=result.listing.version,
            store_link=result.listing.link,
            platform=platform,
        )
        logger.info("Local %s, store %s, update available: %s",
                    status.local_version, status.store_version, status.can_update)
        return status

    def status_for(self, identity: AppIdentity, platform: Platform | None = None,
                   android_id: str | None = None, ios_id: str | None = None,
                   cancel_event: threading.Event | None = None) -> VersionStatus:
        """Resolve using the installed app's identity.

        ``android_id`` / ``ios_id`` (or the matching settings) override the
        package name for apps published under a different id in one store.
        """
        if platform is None:
            platform = Platform.current()

        if platform is Platform.ANDROID:
            override = android_id or self.settings.android_id
        elif platform is Platform.IOS:
            override = ios_id or self.settings.ios_id
        else:
            override = None

        return self.resolve(platform, identity.version,
                            override or identity.package_name, cancel_event)


# ── QThread Worker ───────────────────────────────────────────────────

# Import PyQt6 only when the worker is actually used (lazy import
# to keep the resolver itself free of Qt dependency)

def _get_worker_class():
    """Lazy import to avoid PyQt6 at module level."""
    from PyQt6.QtCore import QThread, pyqtSignal

    class ResolveWorker(QThread):
        """Runs one status_for() off the UI thread.

        Emits status_ready unless cancel() was called, in which case the
        request is aborted and nothing is emitted.
        """

        status_ready = pyqtSignal(object)    # VersionStatus

        def __init__(self, resolver: VersionStatusResolver, identity: AppIdentity,
                     platform: Platform | None = None,
                     android_id: str | None = None, ios_id: str | None = None,
                     parent=None):
            super().__init__(parent)
            self._resolver = resolver
            self._identity = identity
            self._platform = platform
            self._android_id = android_id
            self._ios_id = ios_id
            # QThread.start() clears the interruption flag, so keep our own
            self._cancel_event = threading.Event()

        def cancel(self):
            """Abandon the check and close its connection."""
            self._cancel_event.set()
            self.requestInterruption()

        def is_cancelled(self) -> bool:
            return self._cancel_event.is_set()

        def run(self):
            """Thread entry point."""
            status = self._resolver.status_for(
                self._identity, self._platform, self._android_id, self._ios_id,
                cancel_event=self._cancel_event,
            )
            if self._cancel_event.is_set():
                logger.info("Version check for %s cancelled", self._identity.package_name)
                return
            self.status_ready.emit(status)

    return ResolveWorker


# Module-level accessor
_ResolveWorkerClass = None


def get_resolve_worker_class():
    """Get the ResolveWorker class (lazy-imported to avoid PyQt6 at import time)."""
    global _ResolveWorkerClass
    if _ResolveWorkerClass is None:
        _ResolveWorkerClass = _get_worker_class()
    return _ResolveWorkerClass
