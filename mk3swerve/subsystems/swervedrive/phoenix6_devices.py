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
CTRE Phoenix 6 implementations of the swerve module device interfaces: a
CANcoder for the absolute angle, and TalonFX motors for steering and drive.

Phoenix 6 works in rotations. The conversion to degrees (steering) or meters
(drive) happens here with the scale factor handed to configure(), so the
motor controller itself stays in its native units.

Measurement reads return the signal values from the owning module's single
refresh_all() at the top of the period. They never refresh on their own.
"""
import logging
from typing import Optional, Tuple

from phoenix6 import StatusCode, StatusSignal
from phoenix6.configs import CANcoderConfiguration, TalonFXConfiguration
from phoenix6.controls import PositionVoltage, VelocityVoltage
from phoenix6.hardware import CANcoder, TalonFX
from phoenix6.signals import InvertedValue, NeutralModeValue
from wpimath.units import degrees, meters, meters_per_second, seconds

from mk3swerve.constants import CONFIG_TIMEOUT, DEGREES_PER_REVOLUTION
from mk3swerve.subsystems.swervedrive.constants import DriveConstants
from mk3swerve.subsystems.swervedrive.exceptions import DeviceIOError, SwerveConfigurationError
from mk3swerve.subsystems.swervedrive.swerve_io import AbsoluteAngleSensor, DriveActuator, ModuleConstants, \
    PIDFConstants, RelativeAngleActuator, SwerveModuleConfigParams
from mk3swerve.subsystems.swervedrive.swervemodule import SwerveModule
from mk3swerve.subsystems.swervedrive.telemetry import TelemetrySink
from mk3swerve.util.angle_math import wrap180

logger = logging.getLogger(__name__)

CONFIG_RETRIES = 5


def _apply(configurator, config, device: str, timeout: seconds = CONFIG_TIMEOUT) -> None:
    status: StatusCode = StatusCode.OK

    for _ in range(CONFIG_RETRIES):
        status = configurator.apply(config, timeout)
        if status.is_ok():
            return

    raise DeviceIOError(device, "configuration apply", status)


class CANcoderAngleSensor(AbsoluteAngleSensor):
    """
    CANcoder in its default range, [-0.5, 0.5) rotations, so [-180, 180) degrees
    """
    def __init__(self, cancoder: CANcoder, name: str = ""):
        self._cancoder = cancoder
        self._name = name or f"CANcoder {cancoder.device_id}"
        self._absolute_position: StatusSignal = cancoder.get_absolute_position()

    def read_bounded_angle_deg(self, timeout: Optional[seconds] = None) -> degrees:
        if timeout is not None:
            status = self._absolute_position.wait_for_update(timeout).status

            if not status.is_ok():
                raise DeviceIOError(self._name, "absolute position read", status)

        return wrap180(self._absolute_position.value * DEGREES_PER_REVOLUTION)

    def status_signals(self) -> Tuple[StatusSignal, ...]:
        return (self._absolute_position,)

    def _read_config(self) -> CANcoderConfiguration:
        config = CANcoderConfiguration()
        status = self._cancoder.configurator.refresh(config, CONFIG_TIMEOUT)

        if not status.is_ok():
            raise DeviceIOError(self._name, "configuration read", status)

        return config

    def get_persisted_offset_deg(self) -> degrees:
        return self._read_config().magnet_sensor.magnet_offset * DEGREES_PER_REVOLUTION

    def set_persisted_offset_deg(self, offset: degrees, timeout: seconds) -> None:
        # Start from what is stored so the rest of the configuration is kept
        config = self._read_config()
        config.magnet_sensor.magnet_offset = wrap180(offset) / DEGREES_PER_REVOLUTION

        _apply(self._cancoder.configurator, config, self._name, timeout)


class _TalonFXActuator:
    def __init__(self, talon: TalonFX, name: str = ""):
        self._talon = talon
        self._name = name or f"TalonFX {talon.device_id}"
        self._config = TalonFXConfiguration()
        self._scale: float = 1.0

        self._position: StatusSignal = talon.get_position()
        self._velocity: StatusSignal = talon.get_velocity()

    def configure(self, inverted: bool, scale: float, pidf: PIDFConstants) -> None:
        if scale <= 0.0:
            raise SwerveConfigurationError(f"{self._name}: scale must be positive, got {scale}")

        self._scale = scale
        self._config = TalonFXConfiguration()
        self._config.motor_output.neutral_mode = NeutralModeValue.BRAKE
        self._config.motor_output.inverted = self._inverted_value(inverted)
        pidf.copy_to(self._config.slot0)

        _apply(self._talon.configurator, self._config, self._name)
        logger.info(f"{self._name}: configured, inverted: {inverted}, scale: {scale:.5f}")

    def set_inverted(self, inverted: bool) -> None:
        self._config.motor_output.inverted = self._inverted_value(inverted)
        _apply(self._talon.configurator, self._config, self._name)

    @staticmethod
    def _inverted_value(inverted: bool) -> InvertedValue:
        return InvertedValue.CLOCKWISE_POSITIVE if inverted else InvertedValue.COUNTER_CLOCKWISE_POSITIVE


class TalonFXSteerActuator(_TalonFXActuator, RelativeAngleActuator):
    """
    Steering TalonFX in position mode on its internal rotor encoder
    """
    def __init__(self, talon: TalonFX, name: str = ""):
        super().__init__(talon, name)
        self._request = PositionVoltage(0).with_slot(0)

    def get_position_deg(self) -> degrees:
        return self._position.value * self._scale

    def status_signals(self) -> Tuple[StatusSignal, ...]:
        return (self._position,)

    def set_position_deg(self, position: degrees) -> None:
        status = self._talon.set_position(position / self._scale, CONFIG_TIMEOUT)

        if not status.is_ok():
            raise DeviceIOError(self._name, "set position", status)

    def command_position(self, position: degrees) -> None:
        self._talon.set_control(self._request.with_position(position / self._scale))


class TalonFXDriveActuator(_TalonFXActuator, DriveActuator):
    """
    Drive TalonFX in velocity mode
    """
    def __init__(self, talon: TalonFX, name: str = ""):
        super().__init__(talon, name)
        self._request = VelocityVoltage(0).with_slot(0)

    def get_velocity(self) -> meters_per_second:
        return self._velocity.value * self._scale

    def get_position(self) -> meters:
        return self._position.value * self._scale

    def status_signals(self) -> Tuple[StatusSignal, ...]:
        return self._velocity, self._position

    def command_velocity(self, velocity: meters_per_second) -> None:
        self._talon.set_control(self._request.with_velocity(velocity / self._scale))


def create_swerve_module(params: SwerveModuleConfigParams,
                         module_constants: ModuleConstants = DriveConstants.MODULE_CONSTANTS,
                         telemetry: Optional[TelemetrySink] = None,
                         **kwargs) -> SwerveModule:
    """
    Create the CTRE devices for one module and the module that controls them
    """
    drive = TalonFXDriveActuator(TalonFX(params.drive_motor_id, params.canbus), f"{params.name}/drive")
    steer = TalonFXSteerActuator(TalonFX(params.steer_motor_id, params.canbus), f"{params.name}/steer")
    encoder = CANcoderAngleSensor(CANcoder(params.encoder_id, params.canbus), f"{params.name}/encoder")

    return SwerveModule(params, drive, steer, encoder, module_constants, telemetry=telemetry, **kwargs)
