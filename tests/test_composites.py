import math

import pytest

from dflogreader.errors import RequiredFieldMissing
from dflogreader.log.geometry import Location, Vector3
from dflogreader.log.handler import MsgHandler
from dflogreader.log.records import FormatDescriptor
from tests.conftest import pack_record

GPS = FormatDescriptor(
    "GPS", "BIHBcLLeeEef",
    "Status,TimeMS,Week,NSats,HDop,Lat,Lng,RelAlt,Alt,Spd,GCrs,VZ",
)
ATT = FormatDescriptor(
    "ATT", "IccccCCCC",
    "TimeMS,DesRoll,Roll,DesPitch,Pitch,DesYaw,Yaw,ErrRP,ErrYaw",
)


@pytest.fixture
def gps():
    return MsgHandler(GPS)


def test_location_from_msg(gps):
    record = pack_record(GPS, Lat=-353632621, Lng=1491652374, Alt=58400)
    loc = gps.location_from_msg(record, "Lat", "Lng", "Alt")
    assert loc == Location(lat=-353632621, lng=1491652374, alt=58400, options=0)
    assert loc.lat_deg == pytest.approx(-35.3632621)
    assert loc.alt_m == pytest.approx(584.0)


def test_location_missing_label_raises(gps):
    record = pack_record(GPS)
    with pytest.raises(RequiredFieldMissing) as exc:
        gps.location_from_msg(record, "Lat", "Lng", "AltMSL")
    assert exc.value.label == "AltMSL"


@pytest.mark.parametrize("course_cd,expected", [
    (0, (5.0, 0.0)),        # north
    (9000, (0.0, 5.0)),     # east
    (18000, (-5.0, 0.0)),   # south
    (27000, (0.0, -5.0)),   # west
])
def test_ground_velocity_is_north_east_down(gps, course_cd, expected):
    record = pack_record(GPS, Spd=500, GCrs=course_cd, VZ=-1.5)
    vel = gps.ground_vel_from_msg(record, "Spd", "GCrs", "VZ")
    assert vel.x == pytest.approx(expected[0], abs=1e-9)
    assert vel.y == pytest.approx(expected[1], abs=1e-9)
    assert vel.z == -1.5


def test_ground_velocity_diagonal(gps):
    record = pack_record(GPS, Spd=1000, GCrs=4500, VZ=0.25)
    vel = gps.ground_vel_from_msg(record, "Spd", "GCrs", "VZ")
    assert vel.x == pytest.approx(10 * math.cos(math.radians(45)))
    assert vel.y == pytest.approx(10 * math.sin(math.radians(45)))
    assert Vector3(vel.x, vel.y, 0).length() == pytest.approx(10.0)


def test_attitude_has_no_unit_conversion():
    handler = MsgHandler(ATT)
    record = pack_record(ATT, Roll=-1250, Pitch=300, Yaw=35999)
    att = handler.attitude_from_msg(record, "Roll", "Pitch", "Yaw")
    assert tuple(att) == (-1250.0, 300.0, 35999.0)


def test_attitude_missing_field_raises():
    d = FormatDescriptor("ATT", "cc", "Roll,Pitch")
    handler = MsgHandler(d)
    with pytest.raises(RequiredFieldMissing):
        handler.attitude_from_msg(pack_record(d), "Roll", "Pitch", "Yaw")
