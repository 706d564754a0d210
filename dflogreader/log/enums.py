"""Enum lookup dicts for integer-coded fields in log records."""
from __future__ import annotations


def lookup_enum(table: dict[int, str], value: int) -> str:
    """Return human-readable name for an enum value, or str(value) for unknowns."""
    return table.get(value, str(value))


# GPS Status
GPS_STATUS: dict[int, str] = {
    0: "no_gps",
    1: "no_fix",
    2: "fix_2d",
    3: "fix_3d",
    4: "fix_3d_dgps",
    5: "fix_3d_rtk_float",
    6: "fix_3d_rtk_fixed",
}
GPS_OK_FIX_3D = 3

# EV Id
EVENT_ID: dict[int, str] = {
    7: "ap_state",
    8: "system_time_set",
    9: "init_simple_bearing",
    10: "armed",
    11: "disarmed",
    15: "auto_armed",
    17: "land_complete_maybe",
    18: "land_complete",
    19: "lost_gps",
    21: "flip_start",
    22: "flip_end",
    25: "set_home",
    26: "set_simple_on",
    27: "set_simple_off",
    28: "not_landed",
}

# MSG text prefix -> vehicle type
VEHICLE_PREFIXES: tuple[tuple[str, str], ...] = (
    ("ArduPlane", "plane"),
    ("ArduCopter", "copter"),
    ("APM:Copter", "copter"),
    ("ArduRover", "rover"),
    ("APM:Rover", "rover"),
    ("AntennaTracker", "tracker"),
)


def detect_vehicle(text: str) -> str | None:
    """Vehicle type announced by a firmware banner message, if any."""
    for prefix, vehicle in VEHICLE_PREFIXES:
        if text.startswith(prefix):
            return vehicle
    return None
