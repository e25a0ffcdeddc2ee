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
import math
from dataclasses import replace

import pytest

from mk3swerve.constants import DRIVE_GEAR_RATIO, MAG_OFFSET_SETTLE_TIME, STEERING_GEAR_RATIO, WHEEL_DIAMETER
from mk3swerve.subsystems.swervedrive.constants import DriveConstants
from mk3swerve.subsystems.swervedrive.exceptions import CalibrationError, DeviceIOError, NotCalibratedError, \
    SwerveConfigurationError
from mk3swerve.subsystems.swervedrive.sim_devices import SimAbsoluteAngleSensor, SimSteerActuator
from mk3swerve.subsystems.swervedrive.swerve_io import ModuleConstants
from mk3swerve.subsystems.swervedrive.swervemodule import SwerveModule


def test_motors_configured_at_construction(make_module, drive, steer):
    make_module(drive_motor_inverted=True, module_constants=DriveConstants.MODULE_CONSTANTS)

    assert drive.inverted
    assert not steer.inverted

    assert steer.scale == pytest.approx(360.0 / STEERING_GEAR_RATIO)
    assert drive.scale == pytest.approx(math.pi * WHEEL_DIAMETER / DRIVE_GEAR_RATIO)

    assert steer.pidf == DriveConstants.ANGLE_PIDF
    assert drive.pidf == DriveConstants.DRIVE_PIDF


def test_calibration_seeds_motor_position(make_module, encoder, steer):
    encoder.wheel_angle = 37.5
    module = make_module()

    assert module.calibrated
    assert steer.position_writes == 1
    assert steer.get_position_deg() == pytest.approx(37.5)
    assert module.angle == pytest.approx(37.5)
    assert module.angle_external == pytest.approx(37.5)


def test_calibration_with_inverted_angle_command(params, drive, sleeps):
    steer = SimSteerActuator(mounting_direction=-1.0, wheel_angle=37.5)
    encoder = SimAbsoluteAngleSensor(steer)

    module = SwerveModule(replace(params, angle_command_inverted=True),
                          drive, steer, encoder)

    # Motor register holds the inverted value, the sign corrected angle matches the encoder
    assert module.invert_angle_command == -1.0
    assert steer.get_position_deg() == pytest.approx(-37.5)
    assert module.angle == pytest.approx(37.5)

    module.periodic()
    assert module.angle == pytest.approx(37.5)
    assert module.angle_external == pytest.approx(37.5)


def test_calibration_after_many_turns_uses_bounded_reading(make_module, steer):
    steer.wheel_angle = 757.5  # two turns plus 37.5

    module = make_module()

    assert module.angle == pytest.approx(37.5)
    assert steer.get_position_deg() == pytest.approx(37.5)


def test_offset_written_once(make_module, encoder, sleeps):
    module = make_module(magnetic_offset=12.5)

    assert encoder.offset_writes == 1
    assert encoder.persisted_offset == 12.5
    assert sleeps == [MAG_OFFSET_SETTLE_TIME]

    assert module.set_magnetic_offset(12.5) is False
    assert encoder.offset_writes == 1
    assert sleeps == [MAG_OFFSET_SETTLE_TIME]

    assert module.set_magnetic_offset(20.0) is True
    assert encoder.offset_writes == 2
    assert len(sleeps) == 2


def test_stored_offset_not_rewritten(make_module, encoder, sleeps):
    encoder.persisted_offset = 12.5
    make_module(magnetic_offset=12.5)

    assert encoder.offset_writes == 0
    assert sleeps == []


def test_equivalent_offset_not_rewritten(make_module, encoder, sleeps):
    encoder.persisted_offset = -90.0
    make_module(magnetic_offset=270.0)

    assert encoder.offset_writes == 0
    assert sleeps == []


def test_offset_settles_before_calibration_read(make_module, encoder, steer, monkeypatch):
    encoder.mounting_offset = 30.0
    writes_at_sleep = []

    monkeypatch.setattr("mk3swerve.subsystems.swervedrive.swervemodule.time.sleep",
                        lambda delay: writes_at_sleep.append(steer.position_writes))

    module = make_module(magnetic_offset=-30.0)

    assert writes_at_sleep == [0]
    assert module.angle == pytest.approx(0.0)
    assert module.angle_external == pytest.approx(0.0)


def test_new_offset_recalibrates(module, encoder, steer):
    assert module.angle == pytest.approx(0.0)

    module.set_magnetic_offset(45.0)

    assert steer.position_writes == 2
    assert module.angle == pytest.approx(45.0)


def test_calibration_read_failure_is_fatal(make_module, encoder, steer):
    encoder.fail_reads = True

    with pytest.raises(CalibrationError) as excinfo:
        make_module()

    assert isinstance(excinfo.value.__cause__, DeviceIOError)
    assert steer.position_writes == 0


def test_offset_write_failure_is_fatal(make_module, encoder, steer):
    encoder.fail_config_writes = True

    with pytest.raises(CalibrationError):
        make_module(magnetic_offset=5.0)

    assert steer.position_writes == 0


def test_offset_read_failure_is_fatal(make_module, encoder):
    encoder.fail_config_reads = True

    with pytest.raises(CalibrationError):
        make_module()


def test_motor_position_write_failure_is_fatal(make_module, steer):
    steer.fail_position_writes = True

    with pytest.raises(CalibrationError):
        make_module()


def test_failed_recalibration_refuses_commands(module, encoder, steer, drive):
    encoder.fail_reads = True

    with pytest.raises(CalibrationError):
        module.calibrate()

    assert not module.calibrated

    with pytest.raises(NotCalibratedError):
        module.set_desired(10.0, 1.0)

    assert steer.commands == []
    assert drive.commands == []

    encoder.fail_reads = False
    module.calibrate()

    assert module.calibrated
    assert module.set_desired(10.0, 1.0) == pytest.approx(10.0)


def test_missing_device_is_configuration_error(params, drive, encoder, steer):
    with pytest.raises(SwerveConfigurationError):
        SwerveModule(params, drive, None, encoder)

    with pytest.raises(SwerveConfigurationError):
        SwerveModule(params, None, steer, encoder)

    assert steer.position_writes == 0


@pytest.mark.parametrize("kwargs", [
    {"wheel_diameter": 0.0},
    {"drive_gear_ratio": -8.16},
    {"steering_gear_ratio": float("nan")},
])
def test_bad_module_constants(kwargs):
    with pytest.raises(SwerveConfigurationError):
        ModuleConstants(**kwargs)

    # Configuration errors are also value errors
    with pytest.raises(ValueError):
        ModuleConstants(**kwargs)


def test_bad_module_parameters(make_module):
    with pytest.raises(SwerveConfigurationError):
        make_module(name="")

    with pytest.raises(SwerveConfigurationError):
        make_module(min_speed=-1.0)

    with pytest.raises(SwerveConfigurationError):
        make_module(module_constants="MK3")


def test_override_angle_command_inversion_recalibrates(make_module, encoder, steer):
    encoder.wheel_angle = 37.5
    module = make_module()

    module._set_invert_angle_command(True)

    assert module.invert_angle_command == -1.0
    assert steer.position_writes == 2
    assert steer.get_position_deg() == pytest.approx(-37.5)
    assert module.angle == pytest.approx(37.5)


def test_override_motor_inversions(module, drive, steer):
    module._set_invert_angle_motor(True)
    module._set_invert_drive_motor(True)

    assert steer.inverted
    assert drive.inverted
