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


class SwerveModuleError(RuntimeError):
    """Base class for all swerve module failures"""


class SwerveConfigurationError(SwerveModuleError, ValueError):
    """
    Bad construction parameters (gear ratio, wheel size, missing device handle). The
    module never reaches a usable state.
    """


class DeviceIOError(SwerveModuleError):
    """
    A motor controller or encoder did not acknowledge a request.
    """
    def __init__(self, device: str, action: str, status=None):
        self.device = device
        self.action = action
        self.status = status

        message = f"{device}: {action} failed"
        if status is not None:
            message += f" ({status})"

        super().__init__(message)


class CalibrationError(SwerveModuleError):
    """
    Calibration could not complete. The module stays uncalibrated and will
    refuse commands until a later calibration succeeds.
    """


class NotCalibratedError(SwerveModuleError):
    """A command was issued to a module that is not calibrated"""
