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
#
# Commonly used constants and robot-wide tunables for the swerve module core

from wpimath.units import degrees, inchesToMeters, meters, meters_per_second, seconds

######################################################################
# Math
DEGREES_PER_REVOLUTION = 360.0
DEGREES_PER_HALF_REVOLUTION = DEGREES_PER_REVOLUTION / 2

#################################################################
# Swerve module hardware (SDS MK3, standard gearing)

WHEEL_DIAMETER: meters = inchesToMeters(4.0)
DRIVE_GEAR_RATIO = 8.16  # motor rotations per wheel rotation
STEERING_GEAR_RATIO = 12.8  # motor rotations per module rotation

# Below this speed the wheel keeps its present heading instead of
# swinging around to a new one
MIN_DRIVE_SPEED: meters_per_second = 0.01

#################################################################
# Absolute encoder configuration timing
#
# Reading the absolute position right after a configuration write returns
# stale data. The settle time is how long we wait after writing a new
# magnetic offset before the calibration read.

CONFIG_TIMEOUT: seconds = 0.05
MAG_OFFSET_SETTLE_TIME: seconds = 0.05
ABSOLUTE_READ_TIMEOUT: seconds = 0.1

#################################################################
# Relative (motor) encoder range
#
# The TalonFX reports its rotor position in [-16384, 16384) motor rotations.
# Through the steering reduction that is 460,800 degrees of module rotation
# in either direction. We ask for a recalibration well before that.

_MAX_MOTOR_ROTATIONS = 16384.0

MAX_UNBOUNDED_ANGLE: degrees = _MAX_MOTOR_ROTATIONS / STEERING_GEAR_RATIO * DEGREES_PER_REVOLUTION * 0.9
