"""
Time Utilities
==============

Parsing and formatting of elapsed times in seconds.
"""
import re

from kepler_propagator.model.constants import CONVERTER


_DURATION_UNITS = {
  's'   : 1.0,
  'sec' : 1.0,
  'min' : CONVERTER.SEC_PER_MIN,
  'm'   : CONVERTER.SEC_PER_MIN,
  'h'   : CONVERTER.SEC_PER_HOUR,
  'hr'  : CONVERTER.SEC_PER_HOUR,
  'd'   : CONVERTER.SEC_PER_DAY,
  'day' : CONVERTER.SEC_PER_DAY,
}

_DURATION_PATTERN = re.compile(r'^\s*([-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?)\s*([a-zA-Z]*)\s*$')


def format_time_offset(
  seconds : float,
) -> str:
  """
  Format a time offset in seconds as a human-readable string.

  Examples:
    12345.678 -> "+0d 03h 25m 45.678s"
   -98765.432 -> "-1d 03h 26m 05.432s"

  Input:
  ------
    seconds : float
      Time offset in seconds (can be positive or negative).

  Output:
  -------
    str
      Formatted string like "+1d 00h 00m 00.000s".
  """
  sign    = '+' if seconds >= 0 else '-'
  abs_sec = abs(seconds)

  days    = int(abs_sec // 86400)
  hours   = int((abs_sec % 86400) // 3600)
  minutes = int((abs_sec % 3600) // 60)
  secs    = abs_sec % 60

  return f"{sign}{days}d {hours:02d}h {minutes:02d}m {secs:06.3f}s"


def parse_duration(
  duration_str : str,
) -> float:
  """
  Parse a duration into seconds.

  Accepted formats include:
  - Plain seconds: "86400", "3.6e3"
  - Number with unit suffix: "3600s", "60min", "1h", "1d"

  Input:
  ------
    duration_str : str
      Duration string to parse.

  Output:
  -------
    float
      Duration in seconds.
  """
  match = _DURATION_PATTERN.match(str(duration_str))
  if match is None:
    raise ValueError(f"Unable to parse duration: {duration_str}")

  value, unit = match.groups()
  unit        = unit.lower() or 's'
  if unit not in _DURATION_UNITS:
    raise ValueError(f"Unknown duration unit '{unit}' in '{duration_str}'. Supported: {sorted(_DURATION_UNITS)}")

  return float(value) * _DURATION_UNITS[unit]
