from logging import getLogger
from typing import Callable, Optional

from ._utils.constants import LOGGER_NAME

logger = getLogger(LOGGER_NAME)


class NetworkActivityIndicator:
    """Counts in-flight calls and reports when network activity starts or stops.

    Applications plug a UI hook in ``on_change``; it receives ``True`` when the
    first call starts and ``False`` when the last one finishes.
    """

    def __init__(self, on_change: Optional[Callable[[bool], None]] = None) -> None:
        self.on_change = on_change
        self._active = 0

    @property
    def active_calls(self) -> int:
        return self._active

    @property
    def visible(self) -> bool:
        return self._active > 0

    def start(self) -> None:
        self._active += 1
        if self._active == 1:
            self._notify(True)

    def stop(self) -> None:
        if self._active == 0:
            return
        self._active -= 1
        if self._active == 0:
            self._notify(False)

    def _notify(self, visible: bool) -> None:
        logger.debug(f"Network activity indicator visible: {visible}")
        if self.on_change is not None:
            self.on_change(visible)


network_activity_indicator = NetworkActivityIndicator()
