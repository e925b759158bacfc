"""Network reachability probe.

Answers one question: can we open a TCP connection to the directory host
right now? No data is exchanged and DNS/connection failures simply report
``False``.
"""

from __future__ import annotations

import socket
from typing import Optional

from config import settings

__all__ = ["ConnectivityProbe"]


class ConnectivityProbe:
    def __init__(
        self,
        host: Optional[str] = None,
        port: Optional[int] = None,
        timeout: Optional[float] = None,
    ) -> None:
        self.host = host or settings.CONNECTIVITY_HOST
        self.port = port or settings.CONNECTIVITY_PORT
        self.timeout = timeout or settings.CONNECTIVITY_TIMEOUT

    def is_connected(self) -> bool:
        try:
            with socket.create_connection((self.host, self.port), timeout=self.timeout):
                return True
        except OSError:
            return False
