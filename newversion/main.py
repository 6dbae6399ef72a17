"""newversion: check a store for a newer release of an app."""

import argparse
import logging
import os
import sys

from newversion.config.settings import CheckerSettings
from newversion.core.models import AppIdentity, Platform
from newversion.core.resolver import VersionStatusResolver


def setup_logging(data_dir: str):
    """Configure logging to file and console."""
    log_dir = os.path.join(data_dir, 'logs')
    os.makedirs(log_dir, exist_ok=True)
    log_file = os.path.join(log_dir, 'newversion.log')

    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        handlers=[
            logging.FileHandler(log_file, encoding='utf-8'),
            logging.StreamHandler(),
        ],
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='newversion',
        description="Check the App Store / Play Store for a newer app version.",
    )
    parser.add_argument('--platform', default=None,
                        help="android or ios (default: current platform)")
    parser.add_argument('--app-id', required=True,
                        help="bundle id / package name in the store")
    parser.add_argument('--local-version', required=True,
                        help="installed version, e.g. 1.2.0")
    parser.add_argument('--settings', default=None,
                        help="path to settings.json")
    parser.add_argument('--no-gui', action='store_true',
                        help="print the result instead of showing a dialog")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    settings = CheckerSettings.load(args.settings)
    settings.ensure_dirs()

    setup_logging(settings.data_dir)
    logger = logging.getLogger(__name__)

    platform = Platform.parse(args.platform) if args.platform else Platform.current()
    logger.info("Checking %s on %s", args.app_id, platform.value)

    resolver = VersionStatusResolver(settings)
    status = resolver.resolve(platform, args.local_version, args.app_id)

    print(f"local: {status.local_version}  store: {status.store_version or '-'}  "
          f"update: {'yes' if status.can_update else 'no'}")
    if status.store_link:
        print(status.store_link)

    if status.can_update and not args.no_gui:
        # Import Qt only when a dialog is actually shown
        from PyQt6.QtWidgets import QApplication
        from newversion.ui.update_dialog import UpdatePrompt

        app = QApplication(sys.argv[:1])
        app.setApplicationName('newversion')
        prompt = UpdatePrompt(AppIdentity(args.local_version, args.app_id),
                              platform=platform, resolver=resolver)
        prompt.show_update_dialog(status)

    return 0


if __name__ == '__main__':
    sys.exit(main())
