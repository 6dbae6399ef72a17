"""Checker settings: persistence via JSON."""

import json
import logging
import os
from dataclasses import dataclass, field, asdict

logger = logging.getLogger(__name__)

DEFAULT_DATA_DIR = os.environ.get(
    'NEWVERSION_DATA_DIR', os.path.join(os.path.expanduser('~'), '.newversion')
)

APP_STORE_LOOKUP_URL = "https://itunes.apple.com/lookup?bundleId={app_id}&country={country}"
PLAY_STORE_DETAILS_URL = "https://play.google.com/store/apps/details?id={app_id}"

# Text of the "Current Version" row label on the Play Store listing page,
# keyed by the page language
CURRENT_VERSION_LABELS = {
    'en': "Current Version",
    'ko': "현재 버전",
}


@dataclass
class CheckerSettings:
    """Store endpoints, page markers and lookup options."""
    # Lookup
    country: str = "kr"                 # App Store storefront
    timeout: float = 10.0               # Seconds per request
    android_id: str = ""                # Play Store package override
    ios_id: str = ""                    # App Store bundle id override

    # Endpoints
    app_store_url: str = APP_STORE_LOOKUP_URL
    play_store_url: str = PLAY_STORE_DETAILS_URL
    play_store_language: str = ""       # 'hl' query param, '' = store default

    # Play Store page markers (change without notice upstream)
    row_class: str = "hAyfc"
    label_class: str = "BgcNfc"
    value_class: str = "htlgb"
    version_labels: dict[str, str] = field(
        default_factory=lambda: dict(CURRENT_VERSION_LABELS)
    )

    data_dir: str = ""

    def __post_init__(self):
        if not self.data_dir:
            self.data_dir = DEFAULT_DATA_DIR

    @staticmethod
    def load(path: str | None = None) -> 'CheckerSettings':
        """Load settings from JSON. Returns defaults if file doesn't exist."""
        if path is None:
            path = os.path.join(DEFAULT_DATA_DIR, 'settings.json')

        if not os.path.isfile(path):
            logger.info("No settings file, using defaults")
            return CheckerSettings()

        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
            settings = CheckerSettings(**{k: v for k, v in data.items()
                                          if _accepts(k, v)})
            logger.info("Loaded settings from %s", path)
            return settings
        except (OSError, ValueError, TypeError, AttributeError) as e:
            logger.warning("Failed to load settings: %s", e)
            return CheckerSettings()

    def save(self, path: str | None = None):
        """Save settings to JSON."""
        if path is None:
            path = os.path.join(self.data_dir, 'settings.json')

        os.makedirs(os.path.dirname(path) or '.', exist_ok=True)
        try:
            with open(path, 'w', encoding='utf-8') as f:
                json.dump(asdict(self), f, indent=2, ensure_ascii=False)
            logger.info("Saved settings to %s", path)
        except OSError as e:
            logger.warning("Failed to save settings: %s", e)

    def ensure_dirs(self):
        """Create the data and log directories if they don't exist."""
        os.makedirs(os.path.join(self.data_dir, 'logs'), exist_ok=True)


def _accepts(key: str, value) -> bool:
    """Whether a loaded ``key: value`` pair may replace the default."""
    if key not in CheckerSettings.__dataclass_fields__:
        return False

    if key == 'timeout':
        ok = isinstance(value, (int, float)) and not isinstance(value, bool) and value > 0
    elif key == 'version_labels':
        ok = isinstance(value, dict) and all(isinstance(v, str) for v in value.values())
    else:
        ok = isinstance(value, str)

    if not ok:
        logger.warning("Ignoring invalid setting %s=%r", key, value)
    return ok
