"""
Physical constants for Lambert targeting and trajectory propagation.

All constants are defined in SI units and stored as numpy float64 data types
for precision and consistency in numerical computations.

The module includes:
1. Time and distance units (astronomical unit, Julian day)
2. Gravitational parameters of the Sun, the Earth and the Moon
3. Canonical Earth units used by classical textbook examples
4. The Earth-Moon mass parameter of the restricted three-body problem

References
----------
- IAU 1976 System of Astronomical Constants (astronomical unit)
- Mengali, G., and A.A. Quarta, Fondamenti di Meccanica del volo Spaziale
  (canonical Earth units)
"""

import numpy as np

# Units
#------

#: float: Astronomical unit (m)
ASTRONOMICAL_UNIT = np.float64(1.49597870691e11)  # m

#: float: Length of a Julian day (s)
JULIAN_DAY = np.float64(86400.0)  # s

# Gravitational parameters
#-------------------------

#: float: Gravitational parameter of the Sun (m^3 s^-2)
MU_SUN = np.float64(1.32712428e20)  # m^3 s^-2

#: float: Gravitational parameter of the Earth (m^3 s^-2)
MU_EARTH = np.float64(398600.4418e9)  # m^3 s^-2

#: float: Gravitational parameter of the Moon (m^3 s^-2)
MU_MOON = np.float64(4902.800066e9)  # m^3 s^-2

# Canonical Earth units
#----------------------

#: float: Earth distance unit, the equatorial radius (m)
EARTH_DISTANCE_UNIT = np.float64(6.378136e6)  # m

#: float: Earth time unit, sqrt(DU^3 / mu) rounded as tabulated (s)
EARTH_TIME_UNIT = np.float64(806.78)  # s

# Three-body systems
#-------------------

#: float: Mass parameter of the Earth-Moon circular restricted three-body system
MU_EARTH_MOON_SYSTEM = MU_MOON / (MU_EARTH + MU_MOON)
