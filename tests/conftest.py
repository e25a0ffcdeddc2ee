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
from dataclasses import fields, replace
from typing import List

import pytest

from mk3swerve.subsystems.swervedrive.sim_devices import SimAbsoluteAngleSensor, SimDriveActuator, SimSteerActuator
from mk3swerve.subsystems.swervedrive.swerve_io import SwerveModuleConfigParams
from mk3swerve.subsystems.swervedrive.swervemodule import SwerveModule

_PARAM_NAMES = {f.name for f in fields(SwerveModuleConfigParams)}


@pytest.fixture
def sleeps(monkeypatch) -> List[float]:
    """
    Record the settle delays instead of sleeping through them
    """
    delays: List[float] = []
    monkeypatch.setattr("mk3swerve.subsystems.swervedrive.swervemodule.time.sleep", delays.append)
    return delays


@pytest.fixture
def params() -> SwerveModuleConfigParams:
    return SwerveModuleConfigParams(name="FL", drive_motor_id=1, steer_motor_id=2, encoder_id=3)


@pytest.fixture
def steer() -> SimSteerActuator:
    return SimSteerActuator()


@pytest.fixture
def encoder(steer) -> SimAbsoluteAngleSensor:
    return SimAbsoluteAngleSensor(steer)


@pytest.fixture
def drive() -> SimDriveActuator:
    return SimDriveActuator()


@pytest.fixture
def make_module(params, drive, steer, encoder, sleeps):
    """
    Build a module on the simulated devices. Keyword arguments that name a
    SwerveModuleConfigParams field override the default parameters, the rest are
    passed on to SwerveModule.
    """
    def _make(**kwargs) -> SwerveModule:
        overrides = {key: kwargs.pop(key) for key in list(kwargs) if key in _PARAM_NAMES}
        return SwerveModule(replace(params, **overrides), drive, steer, encoder, **kwargs)

    return _make


@pytest.fixture
def module(make_module) -> SwerveModule:
    return make_module()
