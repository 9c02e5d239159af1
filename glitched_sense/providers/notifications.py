"""
Notification Providers
======================

NotificationProvider
    Local-notification puzzles. Authorization is requested on activation;
    denial forces the mechanic to fallback. `schedule_notification()`
    posts NotificationReceived once the platform accepts the request, and
    a tapped notification posts NotificationTapped with the correctness
    flag it was scheduled with. Deactivation removes every pending request.

FocusModeProvider
    There is no public Focus/Do Not Disturb API. Focus is inferred from the
    notification settings: if notification center delivery or alerts are
    disabled, focus is assumed on. Polled every `polling.focus_interval`
    seconds and reported on the first poll and on every change. This is a
    best-effort heuristic; it can lag or misreport.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Dict, Optional

from ..events import FocusModeChanged, NotificationReceived, NotificationTapped
from ..mechanics import Mechanic
from ..platform import (
    NotificationCenter,
    NotificationRequest,
    NotificationSettings,
    PlatformNotification,
    UserNotificationCenter,
)
from ..provider import ProviderBase

logger = logging.getLogger(__name__)


class NotificationProvider(ProviderBase):
    mechanics = frozenset({Mechanic.NOTIFICATION})

    def __init__(
        self,
        user_notifications: UserNotificationCenter,
        notifications: NotificationCenter,
        bus,
        policy,
        scheduler=None,
        config=None,
    ):
        super().__init__(bus, policy, scheduler, config)
        self.user_notifications = user_notifications
        self.notifications = notifications
        self._pending: Dict[str, bool] = {}
        self._pending_lock = threading.Lock()
        self._session_id = 0

    def _start_session(self, session: int) -> None:
        self._session_id = session
        self._observe(
            self.notifications,
            PlatformNotification.NOTIFICATION_TAPPED,
            lambda info: self._on_tapped(session, info),
        )
        self.user_notifications.request_authorization(
            lambda granted: self._on_authorization(session, granted)
        )

    def _stop_session(self) -> None:
        with self._pending_lock:
            self._pending.clear()
        self.user_notifications.remove_all_pending()

    def _on_authorization(self, session: int, granted: bool) -> None:
        if not self._current(session):
            return
        if granted:
            logger.info(f"{self.name}: Permission granted")
        else:
            self._fail("Notification permission denied")

    @property
    def pending_ids(self):
        with self._pending_lock:
            return sorted(self._pending)

    def schedule_notification(
        self,
        notification_id: str,
        title: str,
        body: str,
        delay: float,
        is_correct: bool,
    ) -> None:
        """Schedule a game notification; NotificationReceived follows on success."""
        session = self._session_id
        if not self._current(session):
            logger.debug(f"{self.name}: Not active, dropping {notification_id}")
            return

        request = NotificationRequest(
            identifier=notification_id,
            title=title,
            body=body,
            delay=delay,
            user_info={"notification_id": notification_id, "is_correct": is_correct},
        )
        with self._pending_lock:
            self._pending[notification_id] = is_correct

        def completion(error: Optional[Exception]) -> None:
            if error is not None:
                logger.warning(f"{self.name}: Error scheduling {notification_id}: {error}")
                return
            self._emit(NotificationReceived(notification_id=notification_id), session)

        self.user_notifications.add(request, completion)

    def _on_tapped(self, session: int, info: Dict[str, Any]) -> None:
        notification_id = info.get("notification_id")
        if not isinstance(notification_id, str):
            return
        with self._pending_lock:
            is_correct = self._pending.pop(notification_id, False)
        self._emit(
            NotificationTapped(notification_id=notification_id, is_correct=is_correct),
            session,
        )


def focus_likely_enabled(settings: NotificationSettings) -> bool:
    return not settings.notification_center_enabled or not settings.alerts_enabled


class FocusModeProvider(ProviderBase):
    mechanics = frozenset({Mechanic.FOCUS_MODE})

    def __init__(
        self,
        user_notifications: UserNotificationCenter,
        bus,
        policy,
        scheduler=None,
        config=None,
    ):
        super().__init__(bus, policy, scheduler, config)
        self.user_notifications = user_notifications
        self._last: Optional[bool] = None

    def _start_session(self, session: int) -> None:
        self._last = None
        self._every(self.config.polling.focus_interval, lambda: self._poll(session))
        self._poll(session)

    def _stop_session(self) -> None:
        self._last = None

    def _poll(self, session: int) -> None:
        self.user_notifications.get_settings(lambda s: self._on_settings(session, s))

    def _on_settings(self, session: int, settings: NotificationSettings) -> None:
        enabled = focus_likely_enabled(settings)
        with self._lock:
            if not self._current(session) or enabled == self._last:
                return
            self._last = enabled
            self._emit(FocusModeChanged(is_enabled=enabled), session)


__all__ = [
    "NotificationProvider",
    "focus_likely_enabled",
    "FocusModeProvider",
]
