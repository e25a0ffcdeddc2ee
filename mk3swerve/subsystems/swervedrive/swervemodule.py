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
import time
from typing import Optional

from wpimath.geometry import Rotation2d
from wpimath.kinematics import SwerveModulePosition, SwerveModuleState
from wpimath.units import degrees, meters, meters_per_second, seconds

from mk3swerve.constants import ABSOLUTE_READ_TIMEOUT, CONFIG_TIMEOUT, MAG_OFFSET_SETTLE_TIME, \
    MAX_UNBOUNDED_ANGLE, MIN_DRIVE_SPEED
from mk3swerve.subsystems.swervedrive.exceptions import CalibrationError, DeviceIOError, NotCalibratedError, \
    SwerveConfigurationError
from mk3swerve.subsystems.swervedrive.swerve_io import AbsoluteAngleSensor, DriveActuator, ModuleConstants, \
    RelativeAngleActuator, SwerveModuleConfigParams
from mk3swerve.subsystems.swervedrive.telemetry import SwerveModuleSnapshot, TelemetrySink
from mk3swerve.util.angle_math import delta360, optimize
from mk3swerve.util.phoenix6_signals import Phoenix6Signals

logger = logging.getLogger(__name__)

# Offsets closer than this are treated as already stored. The sensor keeps the
# offset in rotations, so a value read back rarely matches to the last bit.
OFFSET_TOLERANCE: degrees = 1.0e-3


class SwerveModule:
    """
    One independently steered and driven wheel.

    The drive motor runs in velocity mode, in the units of the wheel diameter
    (meters per second).

    The steering motor runs in position mode, in degrees, on the motor's own
    (relative) encoder. That position is not bound to +/- 180 degrees. It is
    allowed to grow or shrink by however far the wheel needs to turn, and every
    command is the present position plus the shortest delta to the new heading.
    So the wheel never turns more than half a revolution to reach a heading.

    The absolute encoder (bounded, +/- 180) is only used to seed the motor
    position at calibration and for diagnostics.

    The device handles are borrowed. Whoever created them owns their teardown.
    """
    def __init__(self,
                 params: SwerveModuleConfigParams,
                 drive: DriveActuator,
                 steer: RelativeAngleActuator,
                 encoder: AbsoluteAngleSensor,
                 module_constants: Optional[ModuleConstants] = None,
                 telemetry: Optional[TelemetrySink] = None,
                 min_speed: meters_per_second = MIN_DRIVE_SPEED,
                 settle_time: seconds = MAG_OFFSET_SETTLE_TIME,
                 optimize_states: bool = False):

        if not isinstance(params, SwerveModuleConfigParams):
            raise SwerveConfigurationError(f"Invalid module parameters: {params!r}")

        if not isinstance(params.name, str) or not params.name:
            raise SwerveConfigurationError("Swerve module name must be a non-empty string")

        for label, device in (("drive", drive), ("steer", steer), ("encoder", encoder)):
            if device is None:
                raise SwerveConfigurationError(f"{params.name}: missing {label} device")

        module_constants = module_constants or ModuleConstants()

        if not isinstance(module_constants, ModuleConstants):
            raise SwerveConfigurationError(f"{params.name}: invalid module constants: {module_constants!r}")

        if min_speed < 0.0 or settle_time < 0.0:
            raise SwerveConfigurationError(f"{params.name}: min_speed and settle_time can not be negative")

        self.name = params.name
        self._params = params
        self._drive = drive
        self._steer = steer
        self._encoder = encoder
        self._module_constants = module_constants
        self._telemetry = telemetry
        self._telemetry_failed = False

        self._min_speed = min_speed
        self._settle_time = settle_time
        self._optimize = optimize_states

        # account for command sign differences if needed
        self._angle_cmd_invert = -1.0 if params.angle_command_inverted else 1.0
        self._calibrated = False
        self._range_warned = False

        # measurements made every period
        self._angle: degrees = 0.0                      # steering motor, unbounded
        self._angle_external: degrees = 0.0             # absolute encoder, bounded +/- 180
        self._velocity: meters_per_second = 0.0
        self._distance: meters = 0.0
        self._angle_target: degrees = 0.0
        self._velocity_target: meters_per_second = 0.0
        self._snapshot = SwerveModuleSnapshot()

        self._signals = Phoenix6Signals()
        self._signals.register_signals(*steer.status_signals(),
                                       *encoder.status_signals(),
                                       *drive.status_signals())

        try:
            self._drive.configure(params.drive_motor_inverted,
                                  module_constants.drive_scale,
                                  module_constants.drive_pidf)

            self._steer.configure(params.steer_motor_inverted,
                                  module_constants.steering_scale,
                                  module_constants.angle_pidf)

        except DeviceIOError as e:
            raise SwerveConfigurationError(f"{self.name}: unable to configure motors") from e

        self._apply_magnetic_offset(params.magnetic_offset)
        self.calibrate()

        logger.info(f"SwerveModule {self.name}: initialized, angle: {self._angle:.3f}")

    def __repr__(self) -> str:
        return f"SwerveModule({self.name}, calibrated={self._calibrated}, angle={self._angle:.3f})"

    ######################
    # Calibration

    def _apply_magnetic_offset(self, offset: degrees) -> bool:
        """
        Store the magnetic offset (correcting for how the absolute encoder is mounted)
        in the encoder's persistent configuration. Only written if different from what
        is already there.

        The absolute position read right after a configuration write is not reliable,
        so a write is followed by the settle delay.

        :returns: True if a new offset was written
        """
        try:
            stored = self._encoder.get_persisted_offset_deg()

            if abs(delta360(offset, stored)) < OFFSET_TOLERANCE:
                logger.debug(f"SwerveModule {self.name}: magnetic offset {offset} already stored")
                return False

            self._encoder.set_persisted_offset_deg(offset, CONFIG_TIMEOUT)

        except DeviceIOError as e:
            self._calibrated = False
            logger.error(f"SwerveModule {self.name}: unable to apply magnetic offset: {e}")
            raise CalibrationError(f"{self.name}: unable to apply magnetic offset {offset}") from e

        # Written offsets change what the absolute encoder reports
        self._calibrated = False
        time.sleep(self._settle_time)

        logger.info(f"SwerveModule {self.name}: magnetic offset changed from {stored} to {offset}")
        return True

    def set_magnetic_offset(self, offset: degrees) -> bool:
        """
        Apply a new magnetic offset and recalibrate if it changed anything

        :returns: True if a new offset was written
        """
        written = self._apply_magnetic_offset(offset)

        if written or not self._calibrated:
            self.calibrate()

        return written

    def calibrate(self) -> None:
        """
        Align the steering motor's position with the absolute encoder. This is done at
        power up, and on demand when the unbounded position gets close to its
        position range limit.

        On failure the module is left uncalibrated and CalibrationError is raised.
        """
        self._calibrated = False

        try:
            position = self._encoder.read_bounded_angle_deg(timeout=ABSOLUTE_READ_TIMEOUT)
            self._steer.set_position_deg(self._angle_cmd_invert * position)

        except DeviceIOError as e:
            logger.error(f"SwerveModule {self.name}: calibration failed: {e}")
            raise CalibrationError(f"{self.name}: calibration failed") from e

        # Motor register now holds invert * position, and we read it back times invert.
        # The snapshot is left alone until the next periodic() measures everything.
        self._angle = position
        self._angle_external = position

        self._calibrated = True
        self._range_warned = False

        logger.info(f"SwerveModule {self.name}: calibrated to {position:.3f} degrees")

    @property
    def calibrated(self) -> bool:
        return self._calibrated

    @property
    def needs_recalibration(self) -> bool:
        """
        True once the unbounded angle is close to the end of the motor encoder's position range
        """
        return abs(self._angle) > MAX_UNBOUNDED_ANGLE

    ######################
    # Diagnostic overrides, for bring up only

    def _set_invert_angle_command(self, invert: bool) -> None:
        logger.warning(f"SwerveModule {self.name}: overriding angle command inversion: {invert}")
        self._angle_cmd_invert = -1.0 if invert else 1.0
        self.calibrate()

    def _set_invert_angle_motor(self, invert: bool) -> None:
        logger.warning(f"SwerveModule {self.name}: overriding angle motor inversion: {invert}")
        self._steer.set_inverted(invert)

    def _set_invert_drive_motor(self, invert: bool) -> None:
        logger.warning(f"SwerveModule {self.name}: overriding drive motor inversion: {invert}")
        self._drive.set_inverted(invert)

    @property
    def invert_angle_command(self) -> float:
        return self._angle_cmd_invert

    ######################
    # Telemetry

    def attach_telemetry(self, telemetry: Optional[TelemetrySink]) -> 'SwerveModule':
        """
        Publish a snapshot to `telemetry` on every periodic() call. Pass None to stop.
        """
        self._telemetry = telemetry
        self._telemetry_failed = False
        return self

    def _take_snapshot(self) -> SwerveModuleSnapshot:
        return SwerveModuleSnapshot(angle=self._angle,
                                    angle_ext=self._angle_external,
                                    velocity=self._velocity,
                                    distance=self._distance,
                                    angle_target=self._angle_target,
                                    velocity_target=self._velocity_target)

    def _publish(self, snapshot: SwerveModuleSnapshot) -> None:
        if self._telemetry is None:
            return

        try:
            self._telemetry.publish(self.name, snapshot)

        except Exception as e:
            # Telemetry is best effort and must never stop the control loop
            if not self._telemetry_failed:
                logger.warning(f"SwerveModule {self.name}: telemetry publish failed: {e}")
            self._telemetry_failed = True

    @property
    def snapshot(self) -> SwerveModuleSnapshot:
        """Measurements and targets as of the last periodic() call"""
        return self._snapshot

    ######################
    # Control period

    def periodic(self) -> SwerveModuleSnapshot:
        """
        Measure everything at the same time, then publish. Call once per period
        before set_desired_state().
        """
        status = self._signals.refresh()

        if not status.is_ok():
            logger.debug(f"SwerveModule {self.name}: signal refresh returned {status}")

        self._angle = self._steer.get_position_deg() * self._angle_cmd_invert
        self._angle_external = self._encoder.read_bounded_angle_deg()
        self._velocity = self._drive.get_velocity()
        self._distance = self._drive.get_position()

        snapshot = self._snapshot = self._take_snapshot()

        if not self._range_warned and self.needs_recalibration:
            logger.warning(f"SwerveModule {self.name}: steering position {self._angle:.0f} is near the "
                           f"encoder position range limit, recalibrate")
            self._range_warned = True

        self._publish(snapshot)
        return snapshot

    def set_desired(self, heading: degrees, speed: meters_per_second) -> degrees:
        """
        Command a heading and wheel speed.

        :param heading: Desired wheel heading, bounded or unbounded
        :param speed:   Desired wheel speed, signed
        :returns:       The unbounded steering target (before command inversion)
        """
        if not self._calibrated:
            raise NotCalibratedError(f"{self.name}: module is not calibrated")

        if self._optimize:
            heading, speed = optimize(heading, speed, self._angle)

        self._angle_target = heading
        self._velocity_target = speed

        # figure out how far we need to move, target - current, bounded +/- 180
        delta = delta360(heading, self._angle)

        # if we aren't moving, keep the wheels pointed where they are
        if abs(speed) < self._min_speed:
            delta = 0.0

        target = self._angle + delta
        self._steer.command_position(self._angle_cmd_invert * target)
        self._drive.command_velocity(speed)

        return target

    def set_desired_state(self, state: SwerveModuleState) -> degrees:
        """
        Set the speed and heading of the module from a SwerveModuleState
        """
        return self.set_desired(state.angle.degrees(), state.speed)

    def stop(self) -> None:
        """
        Stop the wheel and hold the present heading
        """
        self._velocity_target = 0.0
        self._drive.command_velocity(0.0)

        if self._calibrated:
            self._angle_target = self._angle
            self._steer.command_position(self._angle_cmd_invert * self._angle)

    ######################
    # Read-only measurements

    @property
    def angle(self) -> degrees:
        """
        Steering motor (internal) angle. This is the angle being controlled, so treat
        it as the real angle of the wheel.
        """
        return self._angle

    @property
    def angle_external(self) -> degrees:
        """Absolute encoder angle, +/- 180"""
        return self._angle_external

    @property
    def velocity(self) -> meters_per_second:
        return self._velocity

    @property
    def distance(self) -> meters:
        return self._distance

    @property
    def angle_target(self) -> degrees:
        return self._angle_target

    @property
    def velocity_target(self) -> meters_per_second:
        return self._velocity_target

    def get_angle_rotation(self) -> Rotation2d:
        return Rotation2d.fromDegrees(self._angle)

    def get_angle_external_rotation(self) -> Rotation2d:
        return Rotation2d.fromDegrees(self._angle_external)

    def get_state(self) -> SwerveModuleState:
        return SwerveModuleState(self._velocity, self.get_angle_rotation())

    def get_position(self) -> SwerveModulePosition:
        return SwerveModulePosition(self._distance, self.get_angle_rotation())
