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
"""
Per-period measurement snapshots and where they get published.

A snapshot is built once from the reads of a single measurement step and never
modified afterwards, so a consumer can not see a heading from one period paired
with a velocity from the next.
"""
import logging
from dataclasses import asdict, dataclass, fields
from typing import Dict, Optional

from ntcore import NetworkTableEntry, NetworkTableInstance
from wpimath.units import degrees, meters, meters_per_second

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SwerveModuleSnapshot:
    angle: degrees = 0.0                    # internal (motor) angle, unbounded
    angle_ext: degrees = 0.0                # absolute encoder angle, [-180, 180)
    velocity: meters_per_second = 0.0
    distance: meters = 0.0
    angle_target: degrees = 0.0
    velocity_target: meters_per_second = 0.0

    def as_dict(self) -> Dict[str, float]:
        return asdict(self)


class TelemetrySink:
    """
    Receives a snapshot from each module every period. Implementations must not
    block, the call is made from inside the control loop.
    """
    def publish(self, name: str, snapshot: SwerveModuleSnapshot) -> None:
        raise NotImplementedError("Implement in derived class")


class NullTelemetry(TelemetrySink):
    def publish(self, name: str, snapshot: SwerveModuleSnapshot) -> None:
        pass


class NetworkTablesTelemetry(TelemetrySink):
    """
    Publish snapshots under the drivetrain network table. Each module gets its own
    sub-table, for module 'FL':

        /DT/MK3-FL/angle
        /DT/MK3-FL/angle_ext
        ...
    """
    def __init__(self, inst: Optional[NetworkTableInstance] = None, table_name: str = "DT"):
        self._inst = inst or NetworkTableInstance.getDefault()
        self._table = self._inst.getTable(table_name)
        self._entries: Dict[str, Dict[str, NetworkTableEntry]] = {}

    @staticmethod
    def prefix(name: str) -> str:
        return f"MK3-{name}"

    def _module_entries(self, name: str) -> Dict[str, NetworkTableEntry]:
        entries = self._entries.get(name)

        if entries is None:
            table = self._table.getSubTable(self.prefix(name))
            entries = {field.name: table.getEntry(field.name) for field in fields(SwerveModuleSnapshot)}
            self._entries[name] = entries
            logger.debug(f"NetworkTablesTelemetry: created entries for {self.prefix(name)}")

        return entries

    def publish(self, name: str, snapshot: SwerveModuleSnapshot) -> None:
        entries = self._module_entries(name)

        for key, value in snapshot.as_dict().items():
            entries[key].setDouble(value)
