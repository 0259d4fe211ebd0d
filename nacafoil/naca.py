import logging
from dataclasses import dataclass
from functools import cached_property
from typing import Iterator

import matplotlib.pyplot as plt
import numpy as np
from circle_fit import taubinSVD
from numpy.typing import ArrayLike, NDArray
from scipy.optimize import minimize_scalar

from .geom1d import InvalidResolutionError, linspace

logger = logging.getLogger(__name__)

# NACA 4-digit thickness coefficients; -0.1036 closes the trailing edge.
A0, A1, A2, A3, A4 = 0.2969, -0.1260, -0.3516, 0.2843, -0.1036

# Nose radius of the 4-digit family is RADIUS_LE_COEF * t**2 * chord.
RADIUS_LE_COEF = 1.1019


class ParseError(ValueError):
    """Raised when the thickness digits of a NACA code are not a number."""

    pass


@dataclass
class NacaConfig:
    """
    Defaults used when generating a NACA 4-digit profile.

    Parameters
    ----------
    resolution : int, optional
        Number of chordwise samples used when none is passed explicitly.
        Default is 1000.
    normalise_thickness : bool, optional
        Divide the thickness digits by 100 so that "0015" gives t=0.15. When
        False the digits are used literally and "0015" gives t=15.0.
        Default is False.
    """

    resolution: int = 1000
    normalise_thickness: bool = False


################################################################################
############################ Thickness distribution ############################
################################################################################


def parse_thickness(code: str, normalise: bool = False) -> float:
    """
    Read the thickness value from the last two digits of a NACA 4-digit code.

    The first two digits (camber and camber position) are ignored.

    Parameters
    ----------
    code : str
        NACA code, e.g. "0015".
    normalise : bool, optional
        Divide the parsed value by 100. Default is False.

    Returns
    -------
    float
        Thickness value `t` used in the thickness distribution.
    """
    digits = code[2:]

    # float() is more lenient than a plain decimal literal.
    if not digits.isascii() or any(c.isspace() or c == "_" for c in digits):
        raise ParseError(f"Invalid thickness {digits!r} in NACA code {code!r}")
    try:
        t = float(digits)
    except ValueError as e:
        raise ParseError(f"Invalid thickness {digits!r} in NACA code {code!r}") from e

    if normalise:
        t /= 100.0
    return t


def thickness_distribution(xc: ArrayLike, t: float, chord: float = 1.0) -> NDArray:
    """
    Half-thickness of a symmetric NACA 4-digit section.

    Parameters
    ----------
    xc : ArrayLike
        Normalised chordwise position (0 at leading edge, 1 at trailing edge).
    t : float
        Thickness value as parsed from the NACA code.
    chord : float, optional
        Chord length used to scale the result. Default is 1.

    Returns
    -------
    NDArray
        Surface offset from the chord line at each `xc`.
    """
    xc = np.asarray(xc, dtype=float)
    poly = A0 * np.sqrt(xc) + A1 * xc + A2 * xc**2 + A3 * xc**3 + A4 * xc**4
    return 5 * t * chord * poly


################################################################################
############################### Airfoil profile ################################
################################################################################


@dataclass(frozen=True)
class AirfoilProfile:
    code: str  # NACA code the profile was generated from
    chord: float  # Chord length
    t: float  # Thickness value parsed from the code
    x: NDArray  # Chordwise position
    y_lower: NDArray  # Lower surface offset
    y_upper: NDArray  # Upper surface offset

    def __post_init__(self):
        for name in ("x", "y_lower", "y_upper"):
            arr = np.asarray(getattr(self, name), dtype=float)
            if arr.ndim != 1:
                raise ValueError(f"{name} must be one-dimensional")
            arr.flags.writeable = False
            object.__setattr__(self, name, arr)

        if not len(self.x) == len(self.y_lower) == len(self.y_upper):
            raise ValueError(
                "x, y_lower and y_upper arrays must have the same length. "
                f"Actual lengths: x={len(self.x)}, y_lower={len(self.y_lower)}, "
                f"y_upper={len(self.y_upper)}"
            )

    def __len__(self) -> int:
        return len(self.x)

    def __iter__(self) -> Iterator[tuple[float, float, float]]:
        """Iterate over (x, y_lower, y_upper) triples from leading to trailing edge."""
        return zip(self.x.tolist(), self.y_lower.tolist(), self.y_upper.tolist())

    @property
    def xc(self) -> NDArray:
        """Normalised chordwise position."""
        return self.x / self.chord

    @property
    def coords(self) -> NDArray:
        """(N, 3) array with columns x, y_lower, y_upper."""
        return np.c_[self.x, self.y_lower, self.y_upper]

    @property
    def xy_upper(self) -> NDArray:
        return np.c_[self.x, self.y_upper]

    @property
    def xy_lower(self) -> NDArray:
        return np.c_[self.x, self.y_lower]

    @cached_property
    def xc_max_thickness(self) -> float:
        """Normalised chordwise position of maximum thickness."""
        res = minimize_scalar(
            lambda xc: -thickness_distribution(xc, self.t),
            bounds=(0, 1),
            method="bounded",
        )
        return float(res.x)

    @property
    def x_max_thickness(self) -> float:
        """Chordwise position of maximum thickness."""
        return self.xc_max_thickness * self.chord

    @cached_property
    def max_thickness(self) -> float:
        """Maximum total thickness (upper minus lower surface)."""
        y_max = thickness_distribution(self.xc_max_thickness, self.t, self.chord)
        return float(2 * y_max)

    @property
    def thickness_to_chord(self) -> float:
        """Maximum thickness to chord ratio."""
        return self.max_thickness / self.chord

    @property
    def leading_edge_radius(self) -> float:
        """Analytical leading edge radius."""
        return RADIUS_LE_COEF * self.t**2 * self.chord

    def fit_LE_circle(self, xc_LE_fit: float = 0.0001) -> tuple[float, float]:
        """
        Fit a circle to the leading edge points of the profile.

        Parameters
        ----------
        xc_LE_fit : float
            Normalised chordwise position up to which points are used in the
            fit. Default is 0.0001 (0.01% of chord).

        Returns
        -------
        tuple[float, float]
            (centre x-coordinate, radius)
        """
        mask = self.xc < xc_LE_fit
        n_fit = int(np.count_nonzero(mask))
        if n_fit < 2:
            raise ValueError(
                f"Need at least 2 stations within xc < {xc_LE_fit} to fit the "
                f"leading edge circle, found {n_fit}"
            )
        if n_fit < 10:
            msg = f"Fitting leading edge circle with less than 10 points ({n_fit})."
            logger.warning(msg)

        upper = self.xy_upper[mask]
        lower = self.xy_lower[mask]
        # The leading edge point is shared by both surfaces.
        points = np.r_[upper[::-1], lower[1:]]

        x_centre, y_centre, rad, _ = taubinSVD(points)

        # Check the circle is centred on the chord line within 0.01% of chord.
        if not np.isclose(y_centre / self.chord, 0, atol=1e-4):
            raise RuntimeError(
                "Leading edge circle is not centred. "
                f"Centre at ({x_centre:.4f}, {y_centre:.4f})"
            )

        return float(x_centre), float(rad)

    def plot(self, ax=None, *plot_args, **plot_kwargs):
        """Plot upper and lower surfaces."""
        if ax is None:
            _, ax = plt.subplots()
        x = np.r_[self.x[::-1], self.x[1:]]
        y = np.r_[self.y_upper[::-1], self.y_lower[1:]]
        ax.plot(x, y, *plot_args, **plot_kwargs)
        ax.set_xlabel("x")
        ax.set_ylabel("y")
        ax.set_title(f"NACA {self.code}")
        ax.axis("equal")
        ax.grid(True)
        return ax


################################################################################
############################## Profile generation ##############################
################################################################################


def naca_airfoil_series4(
    code: str,
    chord_length: float,
    resolution: int | None = None,
    config: NacaConfig | None = None,
) -> AirfoilProfile:
    """
    Generate the surface coordinates of a symmetric NACA 4-digit airfoil.

    Parameters
    ----------
    code : str
        NACA 4-digit code. Only the last two digits are used.
    chord_length : float
        Chord length. Zero or negative values are not rejected: a zero chord
        gives NaN offsets and a negative chord gives mirrored geometry.
    resolution : int or None, optional
        Number of chordwise samples. If None, uses `config.resolution`.
    config : NacaConfig or None, optional
        Generation defaults. If None, uses default NacaConfig values.

    Returns
    -------
    AirfoilProfile
        Profile with `resolution` evenly spaced stations from 0 to `chord_length`.
    """
    config = config or NacaConfig()
    if resolution is None:
        resolution = config.resolution

    if resolution < 2:
        raise InvalidResolutionError(
            f"Resolution must be at least 2, got {resolution}"
        )

    t = parse_thickness(code, config.normalise_thickness)
    c = chord_length

    if not c > 0:
        logger.warning(f"Non-positive chord length {c}, profile will be degenerate")

    x = linspace(0.0, c, resolution)
    with np.errstate(divide="ignore", invalid="ignore"):
        xc = x / c

    y_upper = thickness_distribution(xc, t, c)
    y_lower = -y_upper

    logger.debug(f"Generated NACA {code}: chord={c}, resolution={resolution}, t={t}")

    return AirfoilProfile(code, c, t, x, y_lower, y_upper)
