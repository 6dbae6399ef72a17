"""Version check data models."""

import logging
import sys
from dataclasses import dataclass
from enum import Enum
from importlib.metadata import version as distribution_version

from newversion.core.errors import ParseError, StoreLookupError
from newversion.core.version import can_update, parse_version

logger = logging.getLogger(__name__)


class Platform(Enum):
    ANDROID = "android"
    IOS = "ios"
    UNSUPPORTED = "unsupported"

    @classmethod
    def current(cls) -> 'Platform':
        """Map the running interpreter's sys.platform to a store platform."""
        return cls.parse(sys.platform)

    @classmethod
    def parse(cls, text: str | None) -> 'Platform':
        """Case-insensitive lookup by value; anything unknown is UNSUPPORTED."""
        try:
            return cls((text or '').strip().lower())
        except ValueError:
            return cls.UNSUPPORTED


@dataclass(frozen=True)
class AppIdentity:
    """The installed application's version and bundle/package identifier."""

    version: str
    package_name: str

    @classmethod
    def from_distribution(cls, name: str, package_name: str | None = None) -> 'AppIdentity':
        """Read the installed version of distribution ``name``.

        ``package_name`` is the store identifier (e.g. com.example.app) and
        defaults to the distribution name.
        """
        return cls(version=distribution_version(name),
                   package_name=package_name or name)


@dataclass(frozen=True)
class StoreListing:
    """What one successful lookup extracts from a store."""

    version: str
    link: str


@dataclass(frozen=True)
class LookupResult:
    """Either a StoreListing or the StoreLookupError that prevented it."""

    listing: StoreListing | None = None
    error: StoreLookupError | None = None

    @property
    def ok(self) -> bool:
        return self.listing is not None

    @classmethod
    def success(cls, listing: StoreListing) -> 'LookupResult':
        return cls(listing=listing)

    @classmethod
    def failure(cls, error: StoreLookupError) -> 'LookupResult':
        return cls(error=error)


@dataclass(frozen=True)
class VersionStatus:
    """Installed version vs. the version currently published in the store."""

    local_version: str
    store_version: str | None = None
    store_link: str | None = None
    platform: Platform = Platform.UNSUPPORTED
    error: StoreLookupError | None = None   # Why store_version is missing

    @property
    def is_conclusive(self) -> bool:
        return self.store_version is not None

    @property
    def can_update(self) -> bool:
        """True only if the store version is strictly newer.

        A missing store version compares as equal to the local one. A
        malformed version string on either side means no update.
        """
        try:
            local = parse_version(self.local_version)
            store = parse_version(self.store_version or self.local_version)
        except ParseError as e:
            logger.warning("Cannot compare versions: %s", e)
            return False
        return can_update(local, store)
