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
Capability interfaces for the devices a swerve module is built from, along with
the configuration that is handed to them at setup.

The module core only talks to these interfaces so that the CTRE hardware (see
phoenix6_devices.py) can be swapped for simulated devices (see sim_devices.py).
"""
import math
from dataclasses import dataclass, field
from typing import Optional, Tuple

from wpimath.units import degrees, meters, meters_per_second, seconds

from mk3swerve.constants import DEGREES_PER_REVOLUTION, DRIVE_GEAR_RATIO, STEERING_GEAR_RATIO, WHEEL_DIAMETER
from mk3swerve.subsystems.swervedrive.exceptions import SwerveConfigurationError


@dataclass(frozen=True)
class PIDFConstants:
    """
    Gains for a closed loop that runs on the motor controller itself. They are
    forwarded as-is, this code never runs the loop.
    """
    kP: float = 0.0
    kI: float = 0.0
    kD: float = 0.0
    kFF: float = 0.0

    def copy_to(self, slot) -> None:
        """
        Copy gains into a Phoenix 6 slot configuration (Slot0Configs and friends)
        """
        slot.k_p = self.kP
        slot.k_i = self.kI
        slot.k_d = self.kD
        slot.k_v = self.kFF


@dataclass(frozen=True)
class ModuleConstants:
    """
    Geometry and tuning shared by all modules of a drivetrain
    """
    wheel_diameter: meters = WHEEL_DIAMETER
    drive_gear_ratio: float = DRIVE_GEAR_RATIO
    steering_gear_ratio: float = STEERING_GEAR_RATIO
    angle_pidf: PIDFConstants = field(default_factory=PIDFConstants)
    drive_pidf: PIDFConstants = field(default_factory=PIDFConstants)

    def __post_init__(self):
        for name in ("wheel_diameter", "drive_gear_ratio", "steering_gear_ratio"):
            value = getattr(self, name)
            if not isinstance(value, (int, float)) or not math.isfinite(value) or value <= 0.0:
                raise SwerveConfigurationError(f"{name} must be a positive number, got {value!r}")

    @property
    def steering_scale(self) -> degrees:
        """Module degrees per steering motor rotation"""
        return DEGREES_PER_REVOLUTION / self.steering_gear_ratio

    @property
    def drive_scale(self) -> meters:
        """Wheel travel per drive motor rotation"""
        return math.pi * self.wheel_diameter / self.drive_gear_ratio


@dataclass(frozen=True)
class SwerveModuleConfigParams:
    """
    Per module wiring and calibration
    """
    name: str
    drive_motor_id: int
    steer_motor_id: int
    encoder_id: int
    magnetic_offset: degrees = 0.0
    drive_motor_inverted: bool = False
    steer_motor_inverted: bool = False
    angle_command_inverted: bool = False
    canbus: str = ""


class AbsoluteAngleSensor:
    """
    An absolute encoder (CANcoder or similar) that reports a bounded heading and
    keeps a magnetic offset in its own persistent configuration.
    """
    def read_bounded_angle_deg(self, timeout: Optional[seconds] = None) -> degrees:
        """Read the absolute heading in [-180, 180).

        Args:
            timeout (seconds): If given, wait up to this long for a fresh sample and raise
                DeviceIOError if one does not arrive. Otherwise return the value from the
                last status_signals() refresh.
        """
        raise NotImplementedError("Implement in derived class")

    def status_signals(self) -> Tuple:
        """Status signals to refresh together once per period, before any read"""
        return ()

    def get_persisted_offset_deg(self) -> degrees:
        """Magnetic offset presently stored in the sensor configuration.

        Raises:
            DeviceIOError: The configuration could not be read.
        """
        raise NotImplementedError("Implement in derived class")

    def set_persisted_offset_deg(self, offset: degrees, timeout: seconds) -> None:
        """Write a new magnetic offset to the sensor configuration.

        Raises:
            DeviceIOError: The sensor did not acknowledge the write within the timeout.
        """
        raise NotImplementedError("Implement in derived class")


class _Actuator:
    def configure(self, inverted: bool, scale: float, pidf: PIDFConstants) -> None:
        """Apply the one-time setup.

        Args:
            inverted (bool): Reverse the positive direction of the motor.
            scale (float): Mechanism units per motor rotation.
            pidf (PIDFConstants): Gains for the on-controller closed loop.
        """
        raise NotImplementedError("Implement in derived class")

    def set_inverted(self, inverted: bool) -> None:
        raise NotImplementedError("Implement in derived class")

    def status_signals(self) -> Tuple:
        """Status signals behind the measurement reads, refreshed by the owning module"""
        return ()


class RelativeAngleActuator(_Actuator):
    """
    Steering motor and its built-in encoder. The position is unbounded and
    in degrees once configured.
    """
    def get_position_deg(self) -> degrees:
        raise NotImplementedError("Implement in derived class")

    def set_position_deg(self, position: degrees) -> None:
        """Overwrite the encoder position register (calibration seed).

        Raises:
            DeviceIOError: The controller did not acknowledge the new position.
        """
        raise NotImplementedError("Implement in derived class")

    def command_position(self, position: degrees) -> None:
        raise NotImplementedError("Implement in derived class")


class DriveActuator(_Actuator):
    """
    Drive motor and its built-in encoder, in drivetrain distance units once configured
    """
    def get_velocity(self) -> meters_per_second:
        raise NotImplementedError("Implement in derived class")

    def get_position(self) -> meters:
        raise NotImplementedError("Implement in derived class")

    def command_velocity(self, velocity: meters_per_second) -> None:
        raise NotImplementedError("Implement in derived class")
