"""
Fire-and-forget delivery to haptic and sync collaborators.

Notifications run on a single background thread so a slow or unreachable
peer never stalls sample ingestion. Failures are logged and dropped; the
local rep count is never rolled back.
"""

from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable, Optional
import logging

import requests

from repcounter.core.collaborators import CounterPreferences
from repcounter.core.errors import SinkUnreachable

logger = logging.getLogger(__name__)


class NotificationDispatcher:
    """Single-thread executor for collaborator calls."""

    def __init__(self, name: str = "repcounter-notify"):
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix=name)

    def submit(self, description: str, fn: Callable, *args) -> Future:
        return self._executor.submit(self._run, description, fn, *args)

    @staticmethod
    def _run(description: str, fn: Callable, *args):
        try:
            fn(*args)
        except SinkUnreachable as e:
            logger.warning(f"{description} dropped, sink unreachable: {e}")
        except Exception:
            logger.exception(f"{description} failed")

    def shutdown(self, wait: bool = True):
        self._executor.shutdown(wait=wait)


class HttpSyncSink:
    """
    Posts completed sets to the companion service.

    At-most-once: a failed post is reported as SinkUnreachable and not retried.
    """

    def __init__(self, base_url: str, timeout: float = 5.0, api_prefix: str = "/api"):
        self.url = f"{base_url.rstrip('/')}{api_prefix}/sets"
        self.timeout = timeout

    def notify_completed_set(self, rep_count: int) -> None:
        try:
            response = requests.post(self.url, json={"rep_count": rep_count}, timeout=self.timeout)
        except requests.RequestException as e:
            raise SinkUnreachable(f"POST {self.url} failed: {e}") from e

        if not response.ok:
            raise SinkUnreachable(f"POST {self.url} returned {response.status_code}")
        logger.info(f"Sent completed set: {rep_count} reps")


class HttpPreferencesSource:
    """
    Pulls target reps and haptics preference from the companion service.

    Falls back to the supplied defaults when the companion can't be reached,
    like a watch that hasn't received any application context yet.
    """

    def __init__(
        self,
        base_url: str,
        defaults: CounterPreferences,
        timeout: float = 2.0,
        api_prefix: str = "/api"
    ):
        self.url = f"{base_url.rstrip('/')}{api_prefix}/preferences"
        self.defaults = defaults
        self.timeout = timeout
        self._last: Optional[CounterPreferences] = None

    def get_preferences(self) -> CounterPreferences:
        try:
            response = requests.get(self.url, timeout=self.timeout)
            response.raise_for_status()
            payload = response.json()
            target_reps = int(payload["target_reps"])
            if target_reps < 1:
                raise ValueError(f"target_reps must be >= 1, got {target_reps}")
            self._last = CounterPreferences(
                target_reps=target_reps,
                haptics_enabled=bool(payload["haptics_enabled"]),
            )
        except (requests.RequestException, KeyError, TypeError, ValueError) as e:
            logger.warning(f"Could not fetch preferences from {self.url}: {e}")
            return self._last or self.defaults
        return self._last
