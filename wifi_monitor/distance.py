"""Distance estimation from received signal strength for wifi-monitor.

Two path-loss models are averaged:

* the log-distance model with exponent ``n`` (indoor default 3), and
* the free-space path loss (FSPL) equation solved for distance.

The result carries a fixed ±40 % band.  The accuracy tier is always
``"low"``: nothing here looks at input quality, and multipath or walls are
not modelled beyond the band.
"""

import math

from .constants import (
    _FSPL_CONSTANT, _PATH_LOSS_EXPONENT, _TX_POWER_DBM,
    _UNCERTAINTY_HIGH, _UNCERTAINTY_LOW,
)
from .models import DistanceEstimate


def _pow10(exponent: float) -> float:
    try:
        return 10.0 ** exponent
    except OverflowError:
        return math.inf


def _log10(value: float) -> float:
    if value > 0:
        return math.log10(value)
    return -math.inf if value == 0 else math.nan


def estimate_distance(signal_dbm: float, freq_mhz: float,
                      tx_power_dbm: float = _TX_POWER_DBM,
                      path_loss_exponent: float = _PATH_LOSS_EXPONENT) -> DistanceEstimate:
    """Estimate the distance to a transmitter in metres.

    Parameters
    ----------
    signal_dbm:
        Measured signal strength in dBm (usually negative).
    freq_mhz:
        Channel centre frequency in MHz.
    tx_power_dbm:
        Assumed transmit power.  Default ``20`` dBm (100 mW) is typical for
        consumer access points.
    path_loss_exponent:
        Log-distance exponent ``n``.  ``2`` is free space, ``3`` a typical
        indoor environment.

    Plausibility of the inputs is the caller's concern; any finite input
    yields a result.
    """
    path_loss = tx_power_dbm - signal_dbm

    if path_loss_exponent:
        log_distance = _pow10(path_loss / (10 * path_loss_exponent))
    else:
        log_distance = math.inf
    free_space = _pow10((path_loss - 20 * _log10(freq_mhz) - _FSPL_CONSTANT) / 20)

    estimated = (log_distance + free_space) / 2
    return DistanceEstimate(
        estimated_m=round(estimated, 1),
        min_m=round(estimated * _UNCERTAINTY_LOW, 1),
        max_m=round(estimated * _UNCERTAINTY_HIGH, 1),
        accuracy_tier="low",
    )
