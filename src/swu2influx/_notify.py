"""Best-effort systemd service notifications (``sd_notify`` protocol)."""

from __future__ import annotations

import logging
import os
import socket

_logger = logging.getLogger(__name__)


class SystemdNotifier:
    """Send ``READY``/``WATCHDOG``/``STOPPING`` to ``$NOTIFY_SOCKET``.

    Does nothing when not running under systemd; send failures are logged
    at DEBUG and otherwise ignored.
    """

    def __init__(self, address: str | None = None) -> None:
        if address is None:
            address = os.environ.get("NOTIFY_SOCKET")
        if address and address.startswith("@"):
            # abstract namespace socket
            address = "\0" + address[1:]
        self._address = address or None

    @property
    def enabled(self) -> bool:
        return self._address is not None

    def notify(self, state: str) -> None:
        if self._address is None:
            return
        try:
            with socket.socket(socket.AF_UNIX, socket.SOCK_DGRAM) as sock:
                sock.connect(self._address)
                sock.sendall(state.encode("utf-8"))
        except OSError as exc:
            _logger.debug("sd_notify %s failed: %s", state, exc)

    def ready(self) -> None:
        self.notify("READY=1")

    def watchdog(self) -> None:
        self.notify("WATCHDOG=1")

    def stopping(self) -> None:
        self.notify("STOPPING=1")
