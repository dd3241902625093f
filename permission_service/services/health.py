import logging
import threading
from enum import Enum
from typing import Optional

from permission_service.services.permission_store import MongoStore

logger = logging.getLogger(__name__)


class ServingStatus(str, Enum):
    UNKNOWN = "UNKNOWN"
    SERVING = "SERVING"
    NOT_SERVING = "NOT_SERVING"


class HealthMonitor:
    """
    Polls the store every ``interval`` seconds on a background thread and
    keeps the last serving status for the /health endpoint.
    """

    def __init__(self, store: MongoStore, interval: float, timeout: Optional[float] = None):
        self.store = store
        self.interval = interval
        self.timeout = timeout if timeout is not None else interval
        self.status = ServingStatus.UNKNOWN
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def check(self) -> ServingStatus:
        healthy, error = self.store.health_check(timeout=self.timeout)
        new_status = ServingStatus.SERVING if healthy else ServingStatus.NOT_SERVING

        if new_status != self.status:
            if healthy:
                logger.info("Permission store is %s", new_status.value)
            else:
                logger.error("Permission store is %s: %s", new_status.value, error)
        self.status = new_status
        return new_status

    def _run(self) -> None:
        while not self._stop.wait(self.interval):
            self.check()

    def start(self) -> None:
        self.check()
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name="health-monitor", daemon=True)
        self._thread.start()

    def stop(self) -> None:
        self._stop.set()
        if self._thread is not None:
            # an in-flight check can take up to self.timeout
            self._thread.join(timeout=self.interval + self.timeout)
            if self._thread.is_alive():
                logger.warning("Health monitor thread did not stop in time")
            else:
                self._thread = None
