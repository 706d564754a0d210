"""Built-in log format declarations for common DataFlash messages.

Logs carry their own FMT records, so these only matter when decoding
records without the log's header at hand. Message type ids vary between
vehicles and firmware versions; FMT's own id (128) is fixed.
"""
from __future__ import annotations

from dflogreader.log.records import FormatDescriptor


def _fmt(type_id: int, name: str, fmt: str, labels: str) -> FormatDescriptor:
    return FormatDescriptor(name=name, format=fmt, labels=labels, type=type_id)


BUILTIN_FORMATS: dict[str, FormatDescriptor] = {d.name: d for d in (
    FormatDescriptor("FMT", "BBnNZ", "Type,Length,Name,Format,Columns", type=128, length=89),
    _fmt(129, "PARM", "Nf", "Name,Value"),
    _fmt(130, "GPS", "BIHBcLLeeEef", "Status,TimeMS,Week,NSats,HDop,Lat,Lng,RelAlt,Alt,Spd,GCrs,VZ"),
    _fmt(131, "IMU", "Iffffff", "TimeMS,GyrX,GyrY,GyrZ,AccX,AccY,AccZ"),
    _fmt(132, "MSG", "Z", "Message"),
    _fmt(136, "BARO", "Iffcf", "TimeMS,Alt,Press,Temp,CRt"),
    _fmt(138, "AHR2", "IccCfLL", "TimeMS,Roll,Pitch,Yaw,Alt,Lat,Lng"),
    _fmt(139, "SIM", "IccCfLL", "TimeMS,Roll,Pitch,Yaw,Alt,Lat,Lng"),
    _fmt(147, "GPS2", "BIHBcLLeeEef", "Status,TimeMS,Week,NSats,HDop,Lat,Lng,RelAlt,Alt,Spd,GCrs,VZ"),
    _fmt(149, "IMU2", "Iffffff", "TimeMS,GyrX,GyrY,GyrZ,AccX,AccY,AccZ"),
    _fmt(150, "IMU3", "Iffffff", "TimeMS,GyrX,GyrY,GyrZ,AccX,AccY,AccZ"),
    _fmt(152, "ARSP", "Iffcff", "TimeMS,Airspeed,DiffPress,Temp,RawPress,Offset"),
    _fmt(153, "MAG", "Ihhhhhhhhh", "TimeMS,MagX,MagY,MagZ,OfsX,OfsY,OfsZ,MOfsX,MOfsY,MOfsZ"),
    _fmt(154, "MAG2", "Ihhhhhhhhh", "TimeMS,MagX,MagY,MagZ,OfsX,OfsY,OfsZ,MOfsX,MOfsY,MOfsZ"),
    _fmt(162, "ARM", "IHB", "TimeMS,ArmState,ArmChecks"),
    _fmt(1, "ATT", "IccccCCCC", "TimeMS,DesRoll,Roll,DesPitch,Pitch,DesYaw,Yaw,ErrRP,ErrYaw"),
    _fmt(2, "NTUN", "Iffffffffff", "TimeMS,DPosX,DPosY,PosX,PosY,DVelX,DVelY,VelX,VelY,DAccX,DAccY"),
    _fmt(13, "EV", "B", "Id"),
)}
