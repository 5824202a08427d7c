"""Clock abstraction used for snapshot identifiers and settle waits"""

import time
from datetime import datetime

from ..constants import TIMESTAMP_FORMAT


class Clock:
    """Wall clock

    Every timestamp-derived identifier (snapshot directories, backup
    branches) and every fixed wait goes through one instance so that tests
    can substitute a frozen clock.
    """

    def now(self) -> datetime:
        return datetime.now()

    def timestamp(self) -> str:
        """Timestamp in the ``YYYYmmdd-HHMMSS`` form"""
        return self.now().strftime(TIMESTAMP_FORMAT)

    def monotonic(self) -> float:
        return time.monotonic()

    def sleep(self, seconds: float) -> None:
        time.sleep(seconds)
