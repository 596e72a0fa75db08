"""The pending-finalize record stored between the two phases."""

from dataclasses import dataclass
from io import StringIO

from pagespeed.interceptor.protocol import TextSink


@dataclass(slots=True)
class PendingFinalize:
    """Everything ``after`` needs to finish what ``before`` started.

    Stored in the request's ``items`` under ``key`` and removed when
    consumed, so it runs at most once.
    """

    key: str
    original: TextSink
    buffer: StringIO

    @property
    def captured(self) -> str:
        return self.buffer.getvalue()
