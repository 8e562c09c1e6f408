"""Sound notifications."""

import logging
from typing import Callable, Optional, Protocol

from ..models.game import SoundEvent

logger = logging.getLogger(__name__)


class AudioNotifier(Protocol):
    def notify(self, event: SoundEvent) -> None: ...


class SoundBoard:
    """
    Forwards sound events to the client unless muted.

    Each session owns one board, so muting only affects that session.
    """

    def __init__(
        self,
        sink: Optional[Callable[[SoundEvent], None]] = None,
        muted: bool = False,
    ):
        self.sink = sink
        self.muted = muted

    def toggle_mute(self) -> bool:
        """Flip the mute flag and return the new value."""
        self.muted = not self.muted
        return self.muted

    def notify(self, event: SoundEvent) -> None:
        if self.muted or self.sink is None:
            return
        try:
            self.sink(event)
        except Exception:
            logger.exception("Error playing %s sound", event.value)
