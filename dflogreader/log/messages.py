"""Format-specific decoders built on MsgHandler's field accessors.

Decodes one record into a small dataclass for:
FMT (format declarations), ATT/AHR2/SIM (attitude), GPS/GPS2,
IMU/IMU2/IMU3, MAG/MAG2, BARO, ARSP, PARM, MSG, EV, ARM, NTUN.

Each decoder takes the handler built for that record's format, so the
same function serves every format that shares the field layout.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

from dflogreader.log.constants import FMT_FORMAT_BUFLEN, FMT_LABELS_BUFLEN, FMT_NAME_BUFLEN
from dflogreader.log.enums import EVENT_ID, GPS_OK_FIX_3D, GPS_STATUS, detect_vehicle, lookup_enum
from dflogreader.log.geometry import Location, Vector3
from dflogreader.log.handler import Buffer, MsgHandler
from dflogreader.log.records import FormatDescriptor

PARM_NAME_BUFLEN = 17
MSG_TEXT_BUFLEN = 65


@dataclass(slots=True)
class AttitudeSample:
    attitude: Vector3


@dataclass(slots=True)
class GpsSample:
    status: int
    time_ms: int
    week: int
    num_sats: int
    hdop: float
    location: Location
    velocity: Vector3

    @property
    def status_name(self) -> str:
        return lookup_enum(GPS_STATUS, self.status)

    @property
    def has_3d_fix(self) -> bool:
        return self.status >= GPS_OK_FIX_3D


@dataclass(slots=True)
class ImuSample:
    time_ms: Optional[int]
    gyro: Vector3
    accel: Vector3


@dataclass(slots=True)
class CompassSample:
    field: Vector3
    offsets: Vector3
    motor_offsets: Optional[Vector3] = None


@dataclass(slots=True)
class BaroSample:
    pressure: float
    temperature: float       # degrees C
    altitude: Optional[float] = None


@dataclass(slots=True)
class AirspeedSample:
    airspeed: float
    diff_pressure: float
    temperature: float       # degrees C


@dataclass(slots=True)
class Parameter:
    name: str
    value: float


@dataclass(slots=True)
class TextMessage:
    text: str
    vehicle: Optional[str] = None


@dataclass(slots=True)
class Event:
    event_id: int

    @property
    def name(self) -> str:
        return lookup_enum(EVENT_ID, self.event_id)


@dataclass(slots=True)
class ArmEvent:
    armed: bool
    time_ms: Optional[int] = None


@dataclass(slots=True)
class NavPosition:
    x: float    # metres
    y: float


def decode_message(handler: MsgHandler, msg: Buffer):
    """Decode a record with the decoder registered for its format name.

    Returns None for formats without a decoder.
    """
    decoder = _DECODERS.get(handler.name)
    if decoder is None:
        return None
    return decoder(handler, msg)


def _first_of(handler: MsgHandler, msg: Buffer, labels: tuple[str, ...], kind: str):
    """Value of the first label the format has; the last one is required."""
    for label in labels[:-1]:
        value = handler.field_value(msg, label, kind)
        if value is not None:
            return value
    return handler.require_field(msg, labels[-1], kind)


def decode_fmt(handler: MsgHandler, msg: Buffer) -> FormatDescriptor:
    """Turn a FMT record into the descriptor it declares."""
    return FormatDescriptor(
        name=handler.require_string(msg, "Name", FMT_NAME_BUFLEN),
        format=handler.require_string(msg, "Format", FMT_FORMAT_BUFLEN),
        labels=handler.require_string(msg, "Columns", FMT_LABELS_BUFLEN),
        type=handler.require_field(msg, "Type", "uint8"),
        length=handler.require_field(msg, "Length", "uint8"),
    )


def decode_attitude(handler: MsgHandler, msg: Buffer) -> AttitudeSample:
    return AttitudeSample(handler.attitude_from_msg(msg, "Roll", "Pitch", "Yaw"))


def decode_gps(handler: MsgHandler, msg: Buffer) -> GpsSample:
    # Older firmware logs GPS time as TimeMS/Week, newer as GMS/GWk
    return GpsSample(
        status=handler.require_field(msg, "Status", "uint8"),
        time_ms=_first_of(handler, msg, ("GMS", "TimeMS"), "uint32"),
        week=_first_of(handler, msg, ("GWk", "Week"), "uint16"),
        num_sats=handler.require_field(msg, "NSats", "uint8"),
        hdop=handler.require_field(msg, "HDop", "int16") * 0.01,
        location=handler.location_from_msg(msg, "Lat", "Lng", "Alt"),
        velocity=handler.ground_vel_from_msg(msg, "Spd", "GCrs", "VZ"),
    )


def decode_imu(handler: MsgHandler, msg: Buffer) -> ImuSample:
    return ImuSample(
        time_ms=handler.field_value(msg, "TimeMS", "uint32"),
        gyro=handler.require_vector3(msg, "Gyr"),
        accel=handler.require_vector3(msg, "Acc"),
    )


def decode_compass(handler: MsgHandler, msg: Buffer) -> CompassSample:
    return CompassSample(
        field=handler.require_vector3(msg, "Mag"),
        offsets=handler.require_vector3(msg, "Ofs"),
        motor_offsets=handler.field_vector3(msg, "MOfs"),
    )


def decode_baro(handler: MsgHandler, msg: Buffer) -> BaroSample:
    return BaroSample(
        pressure=handler.require_field(msg, "Press", "float32"),
        temperature=handler.require_field(msg, "Temp", "int16") * 0.01,
        altitude=handler.field_value(msg, "Alt", "float32"),
    )


def decode_airspeed(handler: MsgHandler, msg: Buffer) -> AirspeedSample:
    return AirspeedSample(
        airspeed=handler.require_field(msg, "Airspeed", "float32"),
        diff_pressure=handler.require_field(msg, "DiffPress", "float32"),
        temperature=handler.require_field(msg, "Temp", "int16") * 0.01,
    )


def decode_parm(handler: MsgHandler, msg: Buffer) -> Parameter:
    return Parameter(
        name=handler.require_string(msg, "Name", PARM_NAME_BUFLEN),
        value=handler.require_field(msg, "Value", "float32"),
    )


def decode_text(handler: MsgHandler, msg: Buffer) -> TextMessage:
    text = handler.require_string(msg, "Message", MSG_TEXT_BUFLEN)
    return TextMessage(text=text, vehicle=detect_vehicle(text))


def decode_event(handler: MsgHandler, msg: Buffer) -> Event:
    return Event(handler.require_field(msg, "Id", "uint8"))


def decode_arm(handler: MsgHandler, msg: Buffer) -> ArmEvent:
    return ArmEvent(
        armed=bool(handler.require_field(msg, "ArmState", "uint8")),
        time_ms=handler.field_value(msg, "TimeMS", "uint32"),
    )


def decode_ntun(handler: MsgHandler, msg: Buffer) -> NavPosition:
    # PosX/PosY are logged in centimetres
    return NavPosition(
        x=handler.require_field(msg, "PosX", "float32") * 0.01,
        y=handler.require_field(msg, "PosY", "float32") * 0.01,
    )


_DECODERS: dict[str, Callable[[MsgHandler, Buffer], object]] = {
    "FMT": decode_fmt,
    "ATT": decode_attitude,
    "AHR2": decode_attitude,
    "SIM": decode_attitude,
    "GPS": decode_gps,
    "GPS2": decode_gps,
    "IMU": decode_imu,
    "IMU2": decode_imu,
    "IMU3": decode_imu,
    "MAG": decode_compass,
    "MAG2": decode_compass,
    "BARO": decode_baro,
    "ARSP": decode_airspeed,
    "PARM": decode_parm,
    "MSG": decode_text,
    "EV": decode_event,
    "ARM": decode_arm,
    "NTUN": decode_ntun,
}

DECODED_FORMATS = frozenset(_DECODERS)
