"""Physical constants and reference values for NEO threat modelling.

All values in SI units unless the name says otherwise. Measured constants
that carry a meaningful uncertainty have an ``*_UNCERTAINTY`` companion.
"""

# --- Fundamental constants (CODATA 2018) ---
SPEED_OF_LIGHT_M_S: float = 299792458.0
"""Speed of light in vacuum in m/s (exact)."""

GRAVITATIONAL_CONSTANT: float = 6.6743e-11
"""Newtonian constant of gravitation in m³ kg⁻¹ s⁻²."""

GRAVITATIONAL_CONSTANT_UNCERTAINTY: float = 1.5e-15
"""Standard uncertainty of G in m³ kg⁻¹ s⁻²."""

STEFAN_BOLTZMANN: float = 5.670374419e-8
"""Stefan-Boltzmann constant in W m⁻² K⁻⁴ (exact)."""

BOLTZMANN: float = 1.380649e-23
"""Boltzmann constant in J/K (exact)."""

ELECTRON_VOLT_J: float = 1.602176634e-19
"""One electron volt in joules (exact)."""

ATOMIC_MASS_UNIT_KG: float = 1.6605390666e-27
"""Unified atomic mass unit in kg."""

STANDARD_GRAVITY_M_S2: float = 9.80665
"""Standard acceleration of gravity in m/s² (exact)."""

STANDARD_ATMOSPHERE_PA: float = 101325.0
"""Standard atmosphere in Pa (exact)."""

# --- Astronomical ---
AU_M: float = 149597870700.0
"""Astronomical unit in meters (IAU 2012, exact)."""

AU_KM: float = 149597870.7
"""Astronomical unit in km."""

LIGHT_YEAR_M: float = 9460730472580800.0
"""Julian light year in meters."""

JULIAN_YEAR_S: float = 31557600.0
"""Julian year in seconds."""

SECONDS_PER_DAY: float = 86400.0
"""Seconds in a day."""

J2000_JD: float = 2451545.0
"""Julian date of the J2000.0 epoch (2000-01-01 12:00 TT)."""

DAYS_PER_JULIAN_CENTURY: float = 36525.0
"""Days in a Julian century."""

SUN_MASS_KG: float = 1.9884e30
"""Solar mass in kg."""

SUN_RADIUS_M: float = 695700e3
"""Nominal solar radius in meters."""

SUN_MU_M3_S2: float = 1.32712440018e20
"""Heliocentric gravitational parameter in m³/s²."""

SUN_MU_KM3_S2: float = 1.32712442018e11
"""Heliocentric gravitational parameter in km³/s² (perturbation model value)."""

MOON_MU_KM3_S2: float = 4902.7779
"""Lunar gravitational parameter in km³/s²."""

LUNAR_DISTANCE_KM: float = 384400.0
"""Mean Earth-Moon distance in km."""

SOLAR_CONSTANT_W_M2: float = 1361.0
"""Total solar irradiance at 1 AU in W/m²."""

SOLAR_PRESSURE_1AU_N_M2: float = 4.56e-6
"""Solar radiation pressure on an absorbing surface at 1 AU in N/m²."""

# --- Earth parameters (WGS-84) ---
EARTH_MASS_KG: float = 5.9722e24
"""Earth mass in kg."""

EARTH_MASS_UNCERTAINTY_KG: float = 6e20
"""Standard uncertainty of Earth mass in kg."""

EARTH_RADIUS_KM: float = 6378.137
"""Equatorial radius of Earth in km."""

EARTH_EQUATORIAL_RADIUS_M: float = 6378137.0
"""Equatorial radius of Earth in meters."""

EARTH_POLAR_RADIUS_M: float = 6356752.314245
"""Polar radius of Earth in meters."""

EARTH_MEAN_RADIUS_M: float = 6371008.8
"""IUGG mean radius of Earth in meters."""

EARTH_MU_KM3_S2: float = 398600.4418
"""Earth gravitational parameter (GM) in km³/s²."""

EARTH_J2: float = 1.0826267e-3
"""Earth J2 oblateness coefficient."""

EARTH_ROTATION_RAD_S: float = 7.2921150e-5
"""Earth rotation rate in rad/s."""

EARTH_ORBITAL_VELOCITY_KM_S: float = 29.78
"""Mean orbital velocity of Earth in km/s."""

EARTH_ESCAPE_VELOCITY_KM_S: float = 11.18
"""Escape velocity at Earth's surface in km/s."""

EARTH_SOI_KM: float = 924000.0
"""Radius of Earth's sphere of influence in km."""

# --- Energy ---
KILOTON_TNT_J: float = 4.184e12
"""One kiloton of TNT in joules."""

MEGATON_TNT_J: float = 4.184e15
"""One megaton of TNT in joules."""

# --- Calibrated ranges of the empirical models ---
IMPACT_ENERGY_RANGE_J: tuple[float, float] = (1e12, 1e24)
"""Impact energies covered by the seismic and crater scaling fits."""

IMPACT_VELOCITY_RANGE_M_S: tuple[float, float] = (11000.0, 72000.0)
"""Physically possible Earth impact velocities."""

ORBIT_SEMI_MAJOR_AXIS_RANGE_AU: tuple[float, float] = (0.1, 100.0)
"""Semi-major axes the orbital models are intended for."""

DEFLECTION_DELTA_V_RANGE_M_S: tuple[float, float] = (1e-6, 1000.0)
"""Velocity changes the deflection models are intended for."""
