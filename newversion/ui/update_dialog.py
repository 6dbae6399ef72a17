"""Update prompt: platform-styled dialog that sends the user to the store.

UpdateDialog  - QMessageBox with "Maybe Later" / "Update" buttons
UpdatePrompt  - checks the version status and shows the dialog when needed
"""

import logging
from typing import Callable

from PyQt6.QtCore import QUrl
from PyQt6.QtGui import QDesktopServices
from PyQt6.QtWidgets import QMessageBox, QWidget

from newversion.config.settings import CheckerSettings
from newversion.core.models import AppIdentity, Platform, VersionStatus
from newversion.core.resolver import VersionStatusResolver, get_resolve_worker_class

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "Update Available"
DEFAULT_DISMISS = "Maybe Later"
DEFAULT_UPDATE = "Update"


def update_message(status: VersionStatus, content: str | None = None) -> str:
    """Body text of the prompt."""
    if content:
        return content
    return (f"You can now update this app from {status.local_version} "
            f"to {status.store_version}")


def launch_store(link: str | None) -> bool:
    """Open the store listing in the system browser / store app."""
    if not link or not QDesktopServices.openUrl(QUrl(link)):
        logger.error("Could not launch store link: %s", link)
        return False
    return True


class UpdateDialog(QMessageBox):
    """Asks the user to update. Android puts the dismiss button first;
    iOS makes Update the default action."""

    def __init__(self, status: VersionStatus, parent: QWidget | None = None,
                 dismissible: bool = True, title: str | None = None,
                 content: str | None = None, dismiss: str | None = None,
                 update: str | None = None):
        super().__init__(parent)
        self.status = status
        self.setWindowTitle(title or DEFAULT_TITLE)
        self.setText(update_message(status, content))
        self.setIcon(QMessageBox.Icon.Information)

        self._dismiss_btn = None
        if status.platform is Platform.ANDROID:
            if dismissible:
                self._dismiss_btn = self.addButton(
                    dismiss or DEFAULT_DISMISS, QMessageBox.ButtonRole.RejectRole)
            self._update_btn = self.addButton(
                update or DEFAULT_UPDATE, QMessageBox.ButtonRole.AcceptRole)
        else:
            self._update_btn = self.addButton(
                update or DEFAULT_UPDATE, QMessageBox.ButtonRole.AcceptRole)
            if dismissible:
                self._dismiss_btn = self.addButton(
                    dismiss or DEFAULT_DISMISS, QMessageBox.ButtonRole.RejectRole)
            self.setDefaultButton(self._update_btn)

        # Bold "Update" label, like the native prompts
        font = self._update_btn.font()
        font.setBold(True)
        self._update_btn.setFont(font)

        if self._dismiss_btn is not None:
            self.setEscapeButton(self._dismiss_btn)

    def update_chosen(self) -> bool:
        return self.clickedButton() is self._update_btn


class UpdatePrompt:
    """Checks the store and shows UpdateDialog if a newer version exists."""

    def __init__(self, identity: AppIdentity, parent: QWidget | None = None,
                 platform: Platform | None = None,
                 android_id: str | None = None, ios_id: str | None = None,
                 settings: CheckerSettings | None = None,
                 resolver: VersionStatusResolver | None = None):
        self.identity = identity
        self.parent = parent
        self.platform = platform or Platform.current()
        self.android_id = android_id
        self.ios_id = ios_id
        self.resolver = resolver or VersionStatusResolver(settings)
        self._worker = None
        self._running = set()

    def get_version_status(self) -> VersionStatus:
        """The raw status, for callers that want their own UI."""
        return self.resolver.status_for(self.identity, self.platform,
                                        self.android_id, self.ios_id)

    def show_alert_if_necessary(self, dismissible: bool = True,
                                title: str | None = None,
                                content: str | None = None,
                                dismiss: str | None = None,
                                update: str | None = None,
                                on_dismiss: Callable[[], None] | None = None,
                                on_update: Callable[[], None] | None = None) -> bool:
        """Check the store (blocking) and prompt if an update exists.

        Returns True only when the dialog was shown. GUI code should prefer
        check_in_background().
        """
        status = self.get_version_status()
        if not status.can_update:
            return False
        self.show_update_dialog(status, dismissible=dismissible, title=title,
                                content=content, dismiss=dismiss, update=update,
                                on_dismiss=on_dismiss, on_update=on_update)
        return True

    def show_update_dialog(self, status: VersionStatus, dismissible: bool = True,
                           title: str | None = None, content: str | None = None,
                           dismiss: str | None = None, update: str | None = None,
                           on_dismiss: Callable[[], None] | None = None,
                           on_update: Callable[[], None] | None = None):
        """Show the dialog modally and run the chosen action."""
        dialog = UpdateDialog(status, self.parent, dismissible=dismissible,
                              title=title, content=content, dismiss=dismiss,
                              update=update)
        dialog.exec()

        if dialog.update_chosen():
            if on_update:
                on_update()
            else:
                launch_store(status.store_link)
        elif on_dismiss:
            on_dismiss()

    # ── Background check ─────────────────────────────────────────────

    def check_in_background(self, **dialog_options):
        """Run the store lookup on a ResolveWorker so the UI stays responsive.

        The dialog appears from the status_ready slot if an update exists.
        ``dialog_options`` are the keyword arguments of show_update_dialog().
        Returns the started worker.
        """
        self.cancel()
        worker = get_resolve_worker_class()(
            self.resolver, self.identity, self.platform,
            self.android_id, self.ios_id,
        )
        worker.status_ready.connect(
            lambda status: self._on_status_ready(status, dialog_options)
        )
        # Hold a reference until the thread ends, even after cancel()
        self._running.add(worker)
        worker.finished.connect(lambda: self._release(worker))
        self._worker = worker
        worker.start()
        return worker

    def cancel(self):
        """Abandon the background check; its request is closed and no
        dialog is shown."""
        if self._worker is not None:
            self._worker.cancel()
            self._worker = None

    def _release(self, worker):
        worker.wait()
        self._running.discard(worker)

    def _on_status_ready(self, status: VersionStatus, dialog_options: dict):
        self._worker = None
        if status.can_update:
            self.show_update_dialog(status, **dialog_options)
