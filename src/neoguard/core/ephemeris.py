"""Time scales, coordinate frames and state vectors.

Julian dates follow Meeus. Time-scale conversion routes through TT:
UTC → TAI by the leap-second table, TAI → TT by the fixed 32.184 s offset,
TT → TDB by a three-term periodic series. Frame rotations are plain 3×3
numpy matrices; a transform's inverse is its transpose.
"""

from __future__ import annotations

import logging
import math
from bisect import bisect_right
from dataclasses import dataclass, field
from enum import Enum

import numpy as np
from numpy.typing import NDArray

from neoguard.core.kepler import OrbitType, classify_orbit, solve_kepler
from neoguard.core.uncertainty import UncertaintyValue
from neoguard.utils.constants import (
    DAYS_PER_JULIAN_CENTURY,
    J2000_JD,
    SECONDS_PER_DAY,
    SUN_MU_M3_S2,
    AU_KM,
    AU_M,
)
from neoguard.utils.lookup import frozen, lookup

logger = logging.getLogger(__name__)

TT_MINUS_TAI_S = 32.184
"""TT - TAI in seconds (exact)."""

ARCSEC_TO_RAD = math.pi / 648000.0


class CoordinateFrame(Enum):
    """Reference frames supported by :func:`transform`."""

    J2000_ECLIPTIC = "J2000_ECLIPTIC"
    J2000_EQUATORIAL = "J2000_EQUATORIAL"
    EARTH_FIXED = "EARTH_FIXED"
    TOPOCENTRIC = "TOPOCENTRIC"


class TimeScale(Enum):
    """Astronomical time scales."""

    UTC = "UTC"
    TAI = "TAI"
    TT = "TT"
    TDB = "TDB"


# Julian date (UTC) from which each TAI-UTC value applies, 1972 onwards.
_LEAP_SECOND_EPOCHS: tuple[float, ...] = (
    2441317.5, 2441499.5, 2441683.5, 2442048.5, 2442413.5, 2442778.5,
    2443144.5, 2443509.5, 2443874.5, 2444239.5, 2444786.5, 2445151.5,
    2445516.5, 2446247.5, 2447161.5, 2447892.5, 2448257.5, 2448804.5,
    2449169.5, 2449534.5, 2450083.5, 2450630.5, 2451179.5, 2453736.5,
    2454832.5, 2456109.5, 2457204.5, 2457754.5,
)


def leap_seconds(jd_utc: float) -> float:
    """TAI - UTC in seconds at a UTC Julian date (10 s before 1972-07-01, 37 s since 2017)."""
    index = bisect_right(_LEAP_SECOND_EPOCHS, jd_utc)
    return 10.0 + max(0, index - 1)


def tdb_minus_tt(jd_tt: float) -> float:
    """TDB - TT in seconds from the leading periodic terms."""
    t = (jd_tt - J2000_JD) / DAYS_PER_JULIAN_CENTURY
    return (
        0.001657 * math.sin(628.3076 * t + 6.2401)
        + 0.000022 * math.sin(575.3385 * t + 4.2970)
        + 0.000014 * math.sin(1256.6152 * t + 6.1969)
    )


@dataclass(frozen=True)
class JulianDate:
    """A Julian date tagged with its time scale.

    Attributes:
        jd: Julian date (days).
        time_scale: Scale the date is expressed in.
    """

    jd: float
    time_scale: TimeScale = TimeScale.UTC

    @classmethod
    def from_calendar(
        cls,
        year: int,
        month: int,
        day: int,
        hour: int = 0,
        minute: int = 0,
        second: float = 0.0,
        time_scale: TimeScale = TimeScale.UTC,
    ) -> JulianDate:
        """Julian date of a Gregorian calendar instant (Meeus)."""
        a = (14 - month) // 12
        y = year + 4800 - a
        m = month + 12 * a - 3
        jdn = day + (153 * m + 2) // 5 + 365 * y + y // 4 - y // 100 + y // 400 - 32045
        jd = jdn + (hour + minute / 60.0 + second / 3600.0) / 24.0 - 0.5
        return cls(jd, time_scale)

    @classmethod
    def j2000(cls) -> JulianDate:
        """The J2000.0 epoch (TT)."""
        return cls(J2000_JD, TimeScale.TT)

    def to_calendar(self) -> tuple[int, int, int, int, int, float]:
        """Gregorian (year, month, day, hour, minute, second)."""
        z = math.floor(self.jd + 0.5)
        f = self.jd + 0.5 - z
        alpha = math.floor((z - 1867216.25) / 36524.25)
        a = z + 1 + alpha - alpha // 4
        b = a + 1524
        c = math.floor((b - 122.1) / 365.25)
        d = math.floor(365.25 * c)
        e = math.floor((b - d) / 30.6001)

        day = int(b - d - math.floor(30.6001 * e))
        month = int(e - 1 if e < 14 else e - 13)
        year = int(c - 4716 if month > 2 else c - 4715)

        seconds = f * SECONDS_PER_DAY
        hour = int(seconds // 3600)
        minute = int((seconds - hour * 3600) // 60)
        second = seconds - hour * 3600 - minute * 60
        return year, month, day, hour, minute, second

    @property
    def centuries_since_j2000(self) -> float:
        return (self.jd - J2000_JD) / DAYS_PER_JULIAN_CENTURY

    @property
    def days_since_j2000(self) -> float:
        return self.jd - J2000_JD

    def add_days(self, days: float) -> JulianDate:
        return JulianDate(self.jd + days, self.time_scale)

    def days_between(self, other: JulianDate) -> float:
        """``other - self`` in days.

        Raises:
            ValueError: If the two dates are in different time scales.
        """
        if other.time_scale != self.time_scale:
            raise ValueError(
                f"Time scale mismatch: {self.time_scale.value} vs {other.time_scale.value}; convert first"
            )
        return other.jd - self.jd

    def to_scale(self, target: TimeScale) -> JulianDate:
        return convert_time_scale(self, target)


def _to_tt(date: JulianDate) -> float:
    jd = date.jd
    if date.time_scale == TimeScale.TT:
        return jd
    if date.time_scale == TimeScale.TAI:
        return jd + TT_MINUS_TAI_S / SECONDS_PER_DAY
    if date.time_scale == TimeScale.UTC:
        return jd + (leap_seconds(jd) + TT_MINUS_TAI_S) / SECONDS_PER_DAY
    # TDB: the periodic term is evaluated at TDB, good to well below a microsecond.
    return jd - tdb_minus_tt(jd) / SECONDS_PER_DAY


def _from_tt(jd_tt: float, target: TimeScale) -> float:
    if target == TimeScale.TT:
        return jd_tt
    if target == TimeScale.TAI:
        return jd_tt - TT_MINUS_TAI_S / SECONDS_PER_DAY
    if target == TimeScale.TDB:
        return jd_tt + tdb_minus_tt(jd_tt) / SECONDS_PER_DAY
    jd_tai = jd_tt - TT_MINUS_TAI_S / SECONDS_PER_DAY
    # The table is keyed on UTC; one correction settles dates next to a step.
    jd_utc = jd_tai - leap_seconds(jd_tai) / SECONDS_PER_DAY
    return jd_tai - leap_seconds(jd_utc) / SECONDS_PER_DAY


def convert_time_scale(date: JulianDate, target: TimeScale) -> JulianDate:
    """Express a Julian date in another time scale."""
    if date.time_scale == target:
        return date
    return JulianDate(_from_tt(_to_tt(date), target), target)


# --- Earth orientation ---

def earth_rotation_angle(jd_ut1: float) -> float:
    """Earth rotation angle (IAU 2000) in radians, [0, 2π)."""
    t_days = jd_ut1 - J2000_JD
    era = 2.0 * math.pi * (0.7790572732640 + 1.00273781191135448 * t_days)
    return era % (2.0 * math.pi)


def greenwich_mean_sidereal_time(jd_ut1: float) -> float:
    """GMST (IAU 1982) in radians, [0, 2π)."""
    jd0 = math.floor(jd_ut1 - 0.5) + 0.5
    seconds_of_day = (jd_ut1 - jd0) * SECONDS_PER_DAY
    T = (jd0 - J2000_JD) / DAYS_PER_JULIAN_CENTURY
    gmst0 = 24110.54841 + 8640184.812866 * T + 0.093104 * T**2 - 6.2e-6 * T**3
    gmst_s = (gmst0 + 1.00273790935 * seconds_of_day) % SECONDS_PER_DAY
    return gmst_s * 2.0 * math.pi / SECONDS_PER_DAY


def mean_obliquity(jd_tt: float) -> float:
    """Mean obliquity of the ecliptic (IAU 2006) in radians."""
    T = (jd_tt - J2000_JD) / DAYS_PER_JULIAN_CENTURY
    arcsec = (
        84381.406
        - 46.836769 * T
        - 0.0001831 * T**2
        + 0.00200340 * T**3
        - 0.000000576 * T**4
        - 0.0000000434 * T**5
    )
    return arcsec * ARCSEC_TO_RAD


# --- Rotation matrices ---

def ecliptic_to_equatorial_matrix(obliquity: float) -> NDArray[np.float64]:
    """Rotation about x by -ε taking ecliptic to equatorial coordinates."""
    c, s = math.cos(obliquity), math.sin(obliquity)
    return np.array([
        [1.0, 0.0, 0.0],
        [0.0, c, -s],
        [0.0, s, c],
    ])


def equatorial_to_earth_fixed_matrix(
    gmst: float, polar_motion: tuple[float, float] | None = None
) -> NDArray[np.float64]:
    """Sidereal rotation, optionally followed by polar motion.

    Args:
        gmst: Greenwich sidereal angle in radians.
        polar_motion: Pole offsets ``(xp, yp)`` in arcseconds.
    """
    c, s = math.cos(gmst), math.sin(gmst)
    spin = np.array([
        [c, s, 0.0],
        [-s, c, 0.0],
        [0.0, 0.0, 1.0],
    ])
    if not polar_motion:
        return spin

    xp = polar_motion[0] * ARCSEC_TO_RAD
    yp = polar_motion[1] * ARCSEC_TO_RAD
    cx, sx = math.cos(xp), math.sin(xp)
    cy, sy = math.cos(yp), math.sin(yp)
    rot_x = np.array([[1.0, 0.0, 0.0], [0.0, cy, -sy], [0.0, sy, cy]])
    rot_y = np.array([[cx, 0.0, sx], [0.0, 1.0, 0.0], [-sx, 0.0, cx]])
    return rot_x @ rot_y @ spin


def earth_fixed_to_topocentric_matrix(latitude: float, longitude: float) -> NDArray[np.float64]:
    """Rotation from Earth-fixed axes to local east-north-up axes (radians in)."""
    sl, cl = math.sin(longitude), math.cos(longitude)
    sp, cp = math.sin(latitude), math.cos(latitude)
    return np.array([
        [-sl, cl, 0.0],
        [-sp * cl, -sp * sl, cp],
        [cp * cl, cp * sl, sp],
    ])


# --- Observers ---

@dataclass(frozen=True)
class Observer:
    """A ground station.

    Attributes:
        name: Station name.
        latitude_deg: Geodetic latitude in degrees.
        longitude_deg: East longitude in degrees.
        altitude_m: Height above the ellipsoid in meters.
    """

    name: str
    latitude_deg: float
    longitude_deg: float
    altitude_m: float = 0.0


STANDARD_OBSERVERS = frozen({
    "greenwich": Observer("Greenwich", 51.4769, 0.0, 46.0),
    "arecibo": Observer("Arecibo", 18.3464, -66.7528, 497.0),
    "goldstone": Observer("Goldstone", 35.4267, -116.8900, 1036.0),
})


def get_observer(name: str) -> Observer:
    return lookup(STANDARD_OBSERVERS, name.lower(), "observer")


# --- Vectors and transforms ---

@dataclass(frozen=True)
class CoordinateVector:
    """A position in a named frame at an epoch.

    Attributes:
        x, y, z: Components (caller's length unit).
        frame: Frame of the components.
        epoch: Date the frame is realized at.
    """

    x: float
    y: float
    z: float
    frame: CoordinateFrame
    epoch: JulianDate

    @classmethod
    def from_array(cls, values: NDArray[np.float64], frame: CoordinateFrame, epoch: JulianDate) -> CoordinateVector:
        return cls(float(values[0]), float(values[1]), float(values[2]), frame, epoch)

    def as_array(self) -> NDArray[np.float64]:
        return np.array([self.x, self.y, self.z])

    @property
    def magnitude(self) -> float:
        return math.sqrt(self.x * self.x + self.y * self.y + self.z * self.z)


_FRAME_CHAIN = (
    CoordinateFrame.J2000_ECLIPTIC,
    CoordinateFrame.J2000_EQUATORIAL,
    CoordinateFrame.EARTH_FIXED,
    CoordinateFrame.TOPOCENTRIC,
)


def _step_matrix(
    level: int,
    epoch: JulianDate,
    observer: Observer | None,
    polar_motion: tuple[float, float] | None,
) -> NDArray[np.float64]:
    """Matrix from chain level ``level`` to ``level + 1``."""
    if level == 0:
        return ecliptic_to_equatorial_matrix(mean_obliquity(epoch.to_scale(TimeScale.TT).jd))
    if level == 1:
        return equatorial_to_earth_fixed_matrix(
            greenwich_mean_sidereal_time(epoch.to_scale(TimeScale.UTC).jd), polar_motion
        )
    if observer is None:
        raise ValueError("An observer is required for topocentric transforms")
    return earth_fixed_to_topocentric_matrix(
        math.radians(observer.latitude_deg), math.radians(observer.longitude_deg)
    )


def transformation_matrix(
    from_frame: CoordinateFrame,
    to_frame: CoordinateFrame,
    epoch: JulianDate,
    observer: Observer | None = None,
    polar_motion: tuple[float, float] | None = None,
) -> NDArray[np.float64]:
    """Composite rotation between any two supported frames.

    Raises:
        ValueError: If a topocentric leg is needed and no observer is given.
    """
    if from_frame == to_frame:
        return np.eye(3)

    start = _FRAME_CHAIN.index(from_frame)
    end = _FRAME_CHAIN.index(to_frame)
    lo, hi = min(start, end), max(start, end)

    matrix = np.eye(3)
    for level in range(lo, hi):
        matrix = _step_matrix(level, epoch, observer, polar_motion) @ matrix

    return matrix if start < end else matrix.T


def transform(
    vector: CoordinateVector,
    to_frame: CoordinateFrame,
    observer: Observer | None = None,
    polar_motion: tuple[float, float] | None = None,
) -> CoordinateVector:
    """Rotate a vector into another frame at the vector's own epoch."""
    if vector.frame == to_frame:
        return vector
    matrix = transformation_matrix(vector.frame, to_frame, vector.epoch, observer, polar_motion)
    return CoordinateVector.from_array(matrix @ vector.as_array(), to_frame, vector.epoch)


# --- Orbital elements and state vectors ---

@dataclass(frozen=True)
class OrbitalElements:
    """Classical elements of a heliocentric orbit.

    Attributes:
        semi_major_axis_au: Semi-major axis in AU (negative for hyperbolae,
            periapsis distance for parabolae).
        eccentricity: Eccentricity.
        inclination: Inclination in radians.
        raan: Longitude of the ascending node in radians.
        arg_periapsis: Argument of periapsis in radians.
        mean_anomaly: Mean anomaly at epoch in radians.
        epoch: Epoch of the elements.
        frame: Frame the angles refer to.
    """

    semi_major_axis_au: float
    eccentricity: float
    inclination: float
    raan: float
    arg_periapsis: float
    mean_anomaly: float
    epoch: JulianDate
    frame: CoordinateFrame = CoordinateFrame.J2000_ECLIPTIC


@dataclass(frozen=True)
class UncertainOrbitalElements:
    """Orbital elements with one-sigma uncertainties (AU and radians).

    ``covariance``, when given, is the 6×6 covariance of
    (a, e, i, Ω, ω, M) in AU and radians.
    """

    semi_major_axis: UncertaintyValue
    eccentricity: UncertaintyValue
    inclination: UncertaintyValue
    raan: UncertaintyValue
    arg_periapsis: UncertaintyValue
    mean_anomaly: UncertaintyValue
    epoch: JulianDate
    frame: CoordinateFrame = CoordinateFrame.J2000_ECLIPTIC
    covariance: NDArray[np.float64] | None = field(default=None, compare=False, repr=False)

    def nominal(self) -> OrbitalElements:
        return OrbitalElements(
            semi_major_axis_au=self.semi_major_axis.value,
            eccentricity=self.eccentricity.value,
            inclination=self.inclination.value,
            raan=self.raan.value,
            arg_periapsis=self.arg_periapsis.value,
            mean_anomaly=self.mean_anomaly.value,
            epoch=self.epoch,
            frame=self.frame,
        )


@dataclass(frozen=True)
class StateVector:
    """Position and velocity at an epoch.

    Attributes:
        position_m: [x, y, z] in meters.
        velocity_m_s: [vx, vy, vz] in m/s.
        epoch: Time of this state.
        frame: Frame of the components.
    """

    position_m: NDArray[np.float64]
    velocity_m_s: NDArray[np.float64]
    epoch: JulianDate
    frame: CoordinateFrame

    def to_dict(self) -> dict:
        return {
            "position_m": self.position_m.tolist(),
            "velocity_m_s": self.velocity_m_s.tolist(),
            "epoch": self.epoch.jd,
            "time_scale": self.epoch.time_scale.value,
            "frame": self.frame.value,
        }


def perifocal_to_frame_matrix(raan: float, inclination: float, arg_periapsis: float) -> NDArray[np.float64]:
    """Rotation R3(-Ω)·R1(-i)·R3(-ω) from the perifocal plane to the reference frame."""
    cO, sO = math.cos(raan), math.sin(raan)
    ci, si = math.cos(inclination), math.sin(inclination)
    cw, sw = math.cos(arg_periapsis), math.sin(arg_periapsis)
    return np.array([
        [cO * cw - sO * sw * ci, -cO * sw - sO * cw * ci, sO * si],
        [sO * cw + cO * sw * ci, -sO * sw + cO * cw * ci, -cO * si],
        [sw * si, cw * si, ci],
    ])


def state_vector(
    elements: OrbitalElements,
    epoch: JulianDate,
    mu: float = SUN_MU_M3_S2,
) -> StateVector:
    """Position and velocity at ``epoch`` by two-body propagation.

    Args:
        elements: Orbital elements at their own epoch.
        epoch: Target date; converted to the elements' time scale.
        mu: Gravitational parameter of the central body in m³/s².

    Returns:
        StateVector in the elements' frame.

    Raises:
        ValueError: If eccentricity is negative.
    """
    e = elements.eccentricity
    a = elements.semi_major_axis_au * AU_M
    dt = elements.epoch.days_between(epoch.to_scale(elements.epoch.time_scale)) * SECONDS_PER_DAY

    if classify_orbit(e) == OrbitType.PARABOLIC:
        q = a
        n = math.sqrt(mu / (2.0 * q**3))
        p = 2.0 * q
    else:
        n = math.sqrt(mu / abs(a) ** 3)
        p = a * (1.0 - e * e)

    M = elements.mean_anomaly + n * dt
    solution = solve_kepler(M, e)
    nu = solution.true_anomaly

    r = p / (1.0 + e * math.cos(nu))
    position_pf = np.array([r * math.cos(nu), r * math.sin(nu), 0.0])
    speed_scale = math.sqrt(mu / p)
    velocity_pf = np.array([-speed_scale * math.sin(nu), speed_scale * (e + math.cos(nu)), 0.0])

    rotation = perifocal_to_frame_matrix(elements.raan, elements.inclination, elements.arg_periapsis)
    logger.debug("State vector: M=%.6f, nu=%.6f, r=%.6e m", M, nu, r)
    return StateVector(
        position_m=rotation @ position_pf,
        velocity_m_s=rotation @ velocity_pf,
        epoch=epoch,
        frame=elements.frame,
    )


# --- Earth ---

def earth_heliocentric_position(jd: float) -> NDArray[np.float64]:
    """Low-precision heliocentric position of Earth in km, J2000 ecliptic.

    Mean solar longitude and equation of centre after Meeus ch. 25. Earth sits
    opposite the Sun's geocentric longitude. The longitude is referred to the
    mean equinox of date; precession away from J2000 (about 1.4° per century)
    is ignored, which is ample for close-approach screening but not for
    astrometry. ``jd`` is read as TDB.
    """
    T = (jd - J2000_JD) / DAYS_PER_JULIAN_CENTURY
    L = math.radians((280.4664567 + 36000.76982779 * T + 0.0003032028 * T * T) % 360.0)
    M = math.radians((357.5291092 + 35999.0502909 * T - 0.0001536667 * T * T) % 360.0)
    C = math.radians(
        (1.914602 - 0.004817 * T - 0.000014 * T * T) * math.sin(M)
        + (0.019993 - 0.000101 * T) * math.sin(2 * M)
        + 0.000289 * math.sin(3 * M)
    )
    e = 0.016708634 - 0.000042037 * T
    r = 1.000001018 * (1 - e * e) / (1 + e * math.cos(M + C)) * AU_KM
    lon = L + C + math.pi
    return np.array([r * math.cos(lon), r * math.sin(lon), 0.0])


# --- Coordinate utilities ---

def cartesian_to_spherical(x: float, y: float, z: float) -> tuple[float, float, float]:
    """(r, longitude, latitude) with longitude in [0, 2π) and latitude in [-π/2, π/2]."""
    r = math.sqrt(x * x + y * y + z * z)
    if r == 0.0:
        return 0.0, 0.0, 0.0
    lon = math.atan2(y, x) % (2.0 * math.pi)
    lat = math.asin(max(-1.0, min(1.0, z / r)))
    return r, lon, lat


def spherical_to_cartesian(r: float, longitude: float, latitude: float) -> tuple[float, float, float]:
    cl = math.cos(latitude)
    return r * cl * math.cos(longitude), r * cl * math.sin(longitude), r * math.sin(latitude)


def angular_separation(lon1: float, lat1: float, lon2: float, lat2: float) -> float:
    """Great-circle separation in radians (Vincenty form, stable at all angles)."""
    dlon = lon2 - lon1
    num = math.hypot(
        math.cos(lat2) * math.sin(dlon),
        math.cos(lat1) * math.sin(lat2) - math.sin(lat1) * math.cos(lat2) * math.cos(dlon),
    )
    den = math.sin(lat1) * math.sin(lat2) + math.cos(lat1) * math.cos(lat2) * math.cos(dlon)
    return math.atan2(num, den)


def normalize_angle(angle: float) -> float:
    """Wrap to [0, 2π)."""
    return angle % (2.0 * math.pi)


def validate_coordinate_vector(vector: CoordinateVector) -> tuple[bool, list[str], list[str]]:
    """Sanity checks on a heliocentric vector expressed in AU.

    Returns:
        Tuple of (is_valid, errors, warnings).
    """
    errors: list[str] = []
    warnings: list[str] = []

    if not all(math.isfinite(c) for c in (vector.x, vector.y, vector.z)):
        errors.append("Coordinate components must be finite")
    elif vector.magnitude > 1000.0:
        warnings.append(f"Very large distance ({vector.magnitude:.1f}); check units")

    if not 2.0e6 <= vector.epoch.jd <= 3.0e6:
        warnings.append(f"Epoch JD {vector.epoch.jd} is outside the usual range")

    return not errors, errors, warnings

