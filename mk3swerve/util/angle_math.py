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
Wraparound safe angle arithmetic.

The absolute encoder reports a bounded heading in [-180, 180) while the
steering motor tracks an unbounded position that keeps accumulating as the
module spins. These helpers reconcile the two.

Example, a command of 175 degrees is equivalent to any of:

    ... -545 == -185 == 175 == 535 == 895 ...

so from an unbounded position of 530 degrees the shortest move is +5 degrees.
"""
from typing import Tuple

from wpimath.units import degrees

from mk3swerve.constants import DEGREES_PER_HALF_REVOLUTION, DEGREES_PER_REVOLUTION

# Deltas larger than this (in magnitude) are cheaper to reach by reversing the wheel
OPTIMIZE_THRESHOLD: degrees = 90.0


def wrap180(angle: degrees) -> degrees:
    """
    Bound an angle to [-180, 180)
    """
    wrapped = (angle + DEGREES_PER_HALF_REVOLUTION) % DEGREES_PER_REVOLUTION - DEGREES_PER_HALF_REVOLUTION

    # float modulo can round up to exactly +180 for tiny negative inputs
    return -DEGREES_PER_HALF_REVOLUTION if wrapped >= DEGREES_PER_HALF_REVOLUTION else wrapped


def delta360(target: degrees, current: degrees) -> degrees:
    """
    Signed minimal rotation that takes `current` to an angle congruent to `target`.

    :param target:  Desired heading, bounded or not
    :param current: Present heading, typically the unbounded motor position
    :returns:       Delta in [-180, 180). A target exactly opposite the current
                    heading returns -180 (clockwise).
    """
    return wrap180(target - current)


def optimize(heading: degrees, speed: float, current: degrees) -> Tuple[degrees, float]:
    """
    Optional pre-transform of a desired state: if the wheel would have to steer more
    than 90 degrees, point it the opposite way and drive in reverse instead.

    :returns: (heading, speed) to command
    """
    if abs(delta360(heading, current)) > OPTIMIZE_THRESHOLD:
        return wrap180(heading + DEGREES_PER_HALF_REVOLUTION), -speed

    return heading, speed
