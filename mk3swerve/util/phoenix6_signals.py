# ------------------------------------------------------------------------ #
#      o-o      o                o                                         #
#     /         |                |                                         #
#    O     o  o O-o  o-o o-o     |  oo o--o o-o o-o                        #
#     \    |  | |  | |-' |   \   o | | |  |  /   /                         #
#      o-o o--O o-o  o-o o    o-o  o-o-o--O o-o o-o                        #
#             |                           |                                #
#          o--o                        o--o                                #
#                        o--o      o         o                             #
#                        |   |     |         |  o                          #
#                        O-Oo  o-o O-o  o-o -o-    o-o o-o                 #
#                        |  \  | | |  | | |  |  | |     \                  #
#                        o   o o-o o-o  o-o  o  |  o-o o-o                 #
#                                                                          #
#    Jemison High School - Huntsville Alabama                              #
# ------------------------------------------------------------------------ #
import logging
from typing import List

from phoenix6 import StatusCode, StatusSignal

logger = logging.getLogger(__name__)


class Phoenix6Signals:
    """
    Group of CTRE status signals refreshed in one call, so that everything read in a
    period was sampled at the same time. Each swerve module keeps its own group.
    """
    def __init__(self):
        self._signals: List[StatusSignal] = []

    def __len__(self) -> int:
        return len(self._signals)

    def register_signal(self, signal: StatusSignal) -> None:
        if any(signal is registered for registered in self._signals):
            logger.warning(f"Signal {signal.name} already registered")
            return

        self._signals.append(signal)

    def register_signals(self, *signals: StatusSignal) -> None:
        for signal in signals:
            self.register_signal(signal)

    def refresh(self) -> StatusCode:
        """
        Call once at the top of the period. Faster than refreshing each signal on
        its own, and a failed signal keeps its last value.
        """
        if not self._signals:
            return StatusCode.OK

        return StatusSignal.refresh_all(*self._signals)
