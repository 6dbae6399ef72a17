"""Error taxonomy for version parsing and store lookups."""


class ParseError(ValueError):
    """A version string contains a non-numeric segment."""

    def __init__(self, segment: str, text: str):
        super().__init__(f"Invalid version segment {segment!r} in {text!r}")
        self.segment = segment
        self.text = text


class StoreLookupError(Exception):
    """Base class for everything that can go wrong during a store lookup.

    These never escape the resolver; they end up on an inconclusive
    VersionStatus instead.
    """


class NotFound(StoreLookupError):
    def __init__(self, app_id: str, store: str = "store", status: int | None = None):
        msg = f"Can't find an app in the {store} with the id: {app_id}"
        if status is not None:
            msg += f" (HTTP {status})"
        super().__init__(msg)
        self.app_id = app_id
        self.store = store
        self.status = status


class MalformedResponse(StoreLookupError):
    """The store answered, but not with anything we can read a version from."""


class VersionLabelNotFound(StoreLookupError):
    """No metadata row on the listing page carried a known version label."""


class LookupTimeout(StoreLookupError):
    def __init__(self, url: str, timeout: float):
        super().__init__(f"Timed out after {timeout:g}s: {url}")
        self.url = url
        self.timeout = timeout


class StoreUnreachable(StoreLookupError):
    """Connection-level failure (DNS, refused, TLS) before any HTTP status."""


class PlatformUnsupported(StoreLookupError):
    def __init__(self, platform):
        super().__init__(f"This target platform is not yet supported: {platform}")
        self.platform = platform


class LookupCancelled(StoreLookupError):
    def __init__(self, url: str):
        super().__init__(f"Lookup cancelled: {url}")
        self.url = url
