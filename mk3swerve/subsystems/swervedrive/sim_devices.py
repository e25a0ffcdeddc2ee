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
Simulated swerve module devices.

These stand in for the CANcoder / TalonFX devices when running in simulation
or under test. The steering actuator owns the physical wheel heading and the
absolute sensor observes it, so calibration and steering behave the way they
do on the robot. Failures can be injected to exercise the calibration error paths.
"""
import logging
from typing import List, Optional

from wpimath.units import degrees, meters, meters_per_second, seconds

from mk3swerve.subsystems.swervedrive.exceptions import DeviceIOError
from mk3swerve.subsystems.swervedrive.swerve_io import AbsoluteAngleSensor, DriveActuator, PIDFConstants, \
    RelativeAngleActuator
from mk3swerve.util.angle_math import wrap180

logger = logging.getLogger(__name__)


class SimSteerActuator(RelativeAngleActuator):
    """
    Ideal position servo. A position command moves the wheel there immediately.

    :param mounting_direction: +1.0 if a positive motor rotation turns the wheel counter-clockwise
                               (as seen by the absolute encoder), -1.0 if the gearing reverses it
    """
    def __init__(self, mounting_direction: float = 1.0, wheel_angle: degrees = 0.0):
        self.wheel_angle: degrees = wheel_angle   # physical heading, unbounded
        self.mounting_direction = mounting_direction
        self.inverted = False
        self.scale: Optional[float] = None
        self.pidf: Optional[PIDFConstants] = None

        self.commands: List[degrees] = []
        self.position_writes = 0
        self.fail_position_writes = False

        self._register_offset: degrees = 0.0

    @property
    def direction(self) -> float:
        return -self.mounting_direction if self.inverted else self.mounting_direction

    def configure(self, inverted: bool, scale: float, pidf: PIDFConstants) -> None:
        self.inverted = inverted
        self.scale = scale
        self.pidf = pidf

    def set_inverted(self, inverted: bool) -> None:
        # The register keeps its value, only the direction it counts in changes
        position = self.get_position_deg()
        self.inverted = inverted
        self._register_offset = position - self.wheel_angle * self.direction

    def get_position_deg(self) -> degrees:
        return self.wheel_angle * self.direction + self._register_offset

    def set_position_deg(self, position: degrees) -> None:
        if self.fail_position_writes:
            raise DeviceIOError("SimSteerActuator", "set position")

        self.position_writes += 1
        self._register_offset = position - self.wheel_angle * self.direction

    def command_position(self, position: degrees) -> None:
        self.commands.append(position)
        self.wheel_angle = (position - self._register_offset) * self.direction

    @property
    def last_command(self) -> Optional[degrees]:
        return self.commands[-1] if self.commands else None


class SimAbsoluteAngleSensor(AbsoluteAngleSensor):
    """
    Absolute encoder that reads the heading of a simulated wheel.

    Reading = wrap180(wheel heading + mounting rotation + persisted magnetic offset)

    :param steer:           Wheel to observe. If None, the heading is set through `wheel_angle`
    :param mounting_offset: Rotation of the magnet relative to the wheel's forward direction
    """
    def __init__(self, steer: Optional[SimSteerActuator] = None, mounting_offset: degrees = 0.0,
                 persisted_offset: degrees = 0.0):
        self._steer = steer
        self._wheel_angle: degrees = 0.0
        self.mounting_offset = mounting_offset
        self.persisted_offset = persisted_offset

        self.offset_writes = 0
        self.fail_reads = False
        self.fail_config_reads = False
        self.fail_config_writes = False

        self._last_reading: degrees = self._compute()

    @property
    def wheel_angle(self) -> degrees:
        return self._steer.wheel_angle if self._steer is not None else self._wheel_angle

    @wheel_angle.setter
    def wheel_angle(self, value: degrees) -> None:
        if self._steer is not None:
            self._steer.wheel_angle = value
        else:
            self._wheel_angle = value

    def _compute(self) -> degrees:
        return wrap180(self.wheel_angle + self.mounting_offset + self.persisted_offset)

    def read_bounded_angle_deg(self, timeout: Optional[seconds] = None) -> degrees:
        if self.fail_reads:
            if timeout is not None:
                raise DeviceIOError("SimAbsoluteAngleSensor", "absolute position read")
            return self._last_reading

        self._last_reading = self._compute()
        return self._last_reading

    def get_persisted_offset_deg(self) -> degrees:
        if self.fail_config_reads:
            raise DeviceIOError("SimAbsoluteAngleSensor", "configuration read")

        return self.persisted_offset

    def set_persisted_offset_deg(self, offset: degrees, timeout: seconds) -> None:
        if self.fail_config_writes:
            raise DeviceIOError("SimAbsoluteAngleSensor", "configuration write")

        self.offset_writes += 1
        self.persisted_offset = offset
        logger.debug(f"SimAbsoluteAngleSensor: magnetic offset now {offset}")


class SimDriveActuator(DriveActuator):
    """
    Ideal velocity servo. Distance accumulates on each call to `update`.
    """
    def __init__(self):
        self.velocity: meters_per_second = 0.0
        self.position: meters = 0.0
        self.inverted = False
        self.scale: Optional[float] = None
        self.pidf: Optional[PIDFConstants] = None

        self.commands: List[meters_per_second] = []

    def configure(self, inverted: bool, scale: float, pidf: PIDFConstants) -> None:
        self.inverted = inverted
        self.scale = scale
        self.pidf = pidf

    def set_inverted(self, inverted: bool) -> None:
        self.inverted = inverted

    def get_velocity(self) -> meters_per_second:
        return self.velocity

    def get_position(self) -> meters:
        return self.position

    def command_velocity(self, velocity: meters_per_second) -> None:
        self.commands.append(velocity)
        self.velocity = velocity

    def update(self, tm_diff: seconds) -> None:
        """
        Advance the simulation

        :param tm_diff: The amount of time that has passed since the last call
        """
        self.position += self.velocity * tm_diff
