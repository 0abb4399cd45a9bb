class CONVERTER:
  # Unity Values
  ONE_M   = 1.0                            # [meter]
  ONE_SEC = 1.0                            # [second]

  # Angle Conversions
  RAD_PER_DEG = 3.141592653589793 / 180.0  # [radian] per [degree]
  DEG_PER_RAD = 180.0 / 3.141592653589793  # [degree] per [radian]

  # Time Conversions
  SEC_PER_DAY  = 86400                     # [seconds] per [day]
  SEC_PER_HOUR = 3600                      # [seconds] per [hour]
  SEC_PER_MIN  = 60                        # [seconds] per [minute]

  # Distance Conversions
  M_PER_KM = 1000.0                        # [meters] per [kilometer]
  KM_PER_M = 1.0 / 1000.0                  # [kilometers] per [meter]
  M_PER_AU = 149597870700.0                # [meters] per [astronomical unit]

  # Mapping from length unit name to [meters] per [unit]
  M_PER_UNIT = {
    'm'  : ONE_M,
    'km' : M_PER_KM,
    'au' : M_PER_AU,
  }


class NUMERICS:
  """
  Numerical thresholds shared by the converter and the Kepler solvers.
  """
  EPS                  = 1e-12   # generic small number for magnitude comparisons
  PARABOLIC_TOLERANCE  = 1e-10   # |ecc - 1| below this is treated as parabolic
  KEPLER_TOLERANCE     = 1e-12   # default Newton-Raphson residual tolerance [rad]
  KEPLER_MAX_ITER      = 100     # default Newton-Raphson iteration budget


class SOLARSYSTEMCONSTANTS:
  """
  Gravitational parameters of central bodies.
  Some constants are from "OrbitalMotion", created by Hanspeter Schaub on 6/19/05.
  """

  class SUN:
    GP = 1.32712440018e20                   # Sun's gravitational parameter [m³/s²]

  class MERCURY:
    GP = 2.2032e13                          # Mercury's gravitational parameter [m³/s²]

  class VENUS:
    GP = 3.2485859e14                       # Venus's gravitational parameter [m³/s²]

  class EARTH:
    class RADIUS:
      EQUATOR = 6378137.0                   # Earth's WGS84 equatorial radius [m]
      POLAR   = 6356752.3                   # Earth's WGS84 polar radius [m]

    GP = 3.986004418e14                     # Earth's gravitational parameter [m³/s²]

  class MOON:
    GP = 4.9048695e12                       # Moon's gravitational parameter [m³/s²]

  class MARS:
    GP = 4.28283e13                         # Mars's gravitational parameter [m³/s²]

  class JUPITER:
    GP = 1.2671277e17                       # Jupiter's gravitational parameter [m³/s²]

  class SATURN:
    GP = 3.79406e16                         # Saturn's gravitational parameter [m³/s²]

  class URANUS:
    GP = 5.79455e15                         # Uranus's gravitational parameter [m³/s²]

  class NEPTUNE:
    GP = 6.83653e15                         # Neptune's gravitational parameter [m³/s²]

  class PLUTO:
    GP = 9.830e11                           # Pluto's gravitational parameter [m³/s²]

  # Mapping from body name to gravitational parameter [m³/s²]
  NAME_TO_GP = {
    'SUN'     : SUN.GP,
    'MERCURY' : MERCURY.GP,
    'VENUS'   : VENUS.GP,
    'EARTH'   : EARTH.GP,
    'MOON'    : MOON.GP,
    'MARS'    : MARS.GP,
    'JUPITER' : JUPITER.GP,
    'SATURN'  : SATURN.GP,
    'URANUS'  : URANUS.GP,
    'NEPTUNE' : NEPTUNE.GP,
    'PLUTO'   : PLUTO.GP,
  }
