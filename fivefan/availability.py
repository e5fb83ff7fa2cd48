"""
Backend Availability

Reachability checks for the generation backends.

  - Local: probed lazily on first use and cached for the life of the
    process (or for llm.local.recheck_interval seconds when set).
  - Cloud: "configured" is a pure config check; "available" hits
    /v1/models on every call with the short probe timeout.

Probes never raise; every failure reads as unavailable.
"""

import threading
import time
from enum import Enum
from typing import Optional

from fivefan.backends import CloudBackendClient, LocalBackendClient
from fivefan.logger import get_logger


class Availability(Enum):
    UNKNOWN = "unknown"
    AVAILABLE = "available"
    UNAVAILABLE = "unavailable"


def _state(flag: bool) -> Availability:
    return Availability.AVAILABLE if flag else Availability.UNAVAILABLE


class AvailabilityProbe:
    """Owns the cached local availability flag"""

    def __init__(self, local: LocalBackendClient, cloud: CloudBackendClient,
                 config=None, recheck_interval: Optional[float] = None):
        """
        Args:
            local: Local backend client (its probe() does the network check)
            cloud: Cloud backend client
            config: Configuration object (for logging)
            recheck_interval: Seconds before the cached local result expires;
                None keeps it for the process lifetime
        """
        self.local = local
        self.cloud = cloud
        self.logger = get_logger(__name__, config)
        self.recheck_interval = recheck_interval

        self._lock = threading.Lock()
        self._local_state = Availability.UNKNOWN
        self._local_checked_at = 0.0
        self._cloud_state = Availability.UNKNOWN

    @property
    def local_state(self) -> Availability:
        with self._lock:
            return self._local_state

    @property
    def cloud_state(self) -> Availability:
        """Result of the most recent cloud probe (informational only)."""
        return self._cloud_state

    def _local_cached(self) -> Optional[bool]:
        with self._lock:
            if self._local_state is Availability.UNKNOWN:
                return None
            if (self.recheck_interval is not None
                    and time.monotonic() - self._local_checked_at >= self.recheck_interval):
                return None
            return self._local_state is Availability.AVAILABLE

    def is_local_available(self) -> bool:
        """Local backend reachable? One network probe, then the cached answer."""
        cached = self._local_cached()
        if cached is not None:
            return cached

        available = self.local.probe()

        with self._lock:
            # Two first callers may both probe; the first stored answer stands
            # until it expires.
            expired = (self.recheck_interval is not None
                       and time.monotonic() - self._local_checked_at >= self.recheck_interval)
            if self._local_state is Availability.UNKNOWN or expired:
                self._local_state = _state(available)
                self._local_checked_at = time.monotonic()
                self.logger.info(f"[probe] Local LLM available: {available}")
            return self._local_state is Availability.AVAILABLE

    def is_cloud_configured(self) -> bool:
        """Cloud base URL and API key both set. No network."""
        return self.cloud.configured

    def is_cloud_available(self) -> bool:
        """Cloud API reachable right now? Probes on every call."""
        if not self.is_cloud_configured():
            self._cloud_state = Availability.UNAVAILABLE
            return False
        available = self.cloud.probe()
        self._cloud_state = _state(available)
        if not available:
            self.logger.info(f"[probe] Cloud LLM ({self.cloud.provider_name()}) unreachable")
        return available

    def reset(self) -> None:
        """Forget the cached local result so the next call probes again."""
        with self._lock:
            self._local_state = Availability.UNKNOWN
            self._local_checked_at = 0.0

    def status(self) -> dict:
        """Probe both tiers and report which one would answer."""
        local = self.is_local_available()
        cloud = self.is_cloud_available()
        active = "local" if local else "cloud" if cloud else "template"
        return {"local": local, "cloud": cloud, "active": active}
