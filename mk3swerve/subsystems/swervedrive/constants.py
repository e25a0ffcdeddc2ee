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

# Copyright (c) FIRST and other WPILib contributors.
# Open Source Software; you can modify and/or share it under the terms of
# the WPILib BSD license file in the root directory of this project.

from collections import OrderedDict

from mk3swerve.subsystems.swervedrive.swerve_io import ModuleConstants, PIDFConstants, SwerveModuleConfigParams


class DriveConstants:
    # Closed loop gains run on the motor controllers. Angle is position mode
    # in degrees, drive is velocity mode in meters per second.
    ANGLE_PIDF = PIDFConstants(kP=0.01, kI=0.0, kD=0.0, kFF=0.0)
    DRIVE_PIDF = PIDFConstants(kP=0.05, kI=0.0, kD=0.0, kFF=0.12)

    MODULE_CONSTANTS = ModuleConstants(angle_pidf=ANGLE_PIDF, drive_pidf=DRIVE_PIDF)

    # Magnetic offsets are measured with all wheels pointed forward, bevel
    # gears to the left, and read back from the absolute encoders.
    FRONT_LEFT = SwerveModuleConfigParams(name="FL",
                                          drive_motor_id=20, steer_motor_id=21, encoder_id=22,
                                          magnetic_offset=-98.942,
                                          drive_motor_inverted=False,
                                          steer_motor_inverted=False,
                                          angle_command_inverted=False)

    FRONT_RIGHT = SwerveModuleConfigParams(name="FR",
                                           drive_motor_id=23, steer_motor_id=24, encoder_id=25,
                                           magnetic_offset=91.33,
                                           drive_motor_inverted=True,
                                           steer_motor_inverted=False,
                                           angle_command_inverted=False)

    BACK_LEFT = SwerveModuleConfigParams(name="BL",
                                         drive_motor_id=26, steer_motor_id=27, encoder_id=28,
                                         magnetic_offset=-177.035,
                                         drive_motor_inverted=False,
                                         steer_motor_inverted=False,
                                         angle_command_inverted=False)

    BACK_RIGHT = SwerveModuleConfigParams(name="BR",
                                          drive_motor_id=29, steer_motor_id=30, encoder_id=31,
                                          magnetic_offset=-28.215,
                                          drive_motor_inverted=True,
                                          steer_motor_inverted=False,
                                          angle_command_inverted=False)

    MODULES: OrderedDict[str, SwerveModuleConfigParams] = OrderedDict(
        [
            ("front-left", FRONT_LEFT),
            ("front-right", FRONT_RIGHT),
            ("back-left", BACK_LEFT),
            ("back-right", BACK_RIGHT),
        ])
