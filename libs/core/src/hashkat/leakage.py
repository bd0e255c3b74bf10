from __future__ import annotations
"""Two-class timing leakage screen.

Uses the pooled standard deviation sqrt((var_l + var_r) / 2) scaled by
sqrt(2 / N), which matches Welch's t for equal sample sizes. There is no
outlier cropping, no adaptive sample growth and no higher-order moments, so a
pass only means no difference showed up at this N for these two classes.
"""

import logging
import math
import statistics
from dataclasses import dataclass

from .errors import InsufficientSamplesError
from .timing import TimingSamples

log = logging.getLogger(__name__)

DEFAULT_THRESHOLD = 5.0


@dataclass(frozen=True)
class LeakageVerdict:
    mean_left: float
    mean_right: float
    std_left: float
    std_right: float
    t_statistic: float
    threshold: float
    passed: bool
    samples: int = 0

    @property
    def difference(self) -> float:
        return abs(self.mean_left - self.mean_right)

    @property
    def difference_pct(self) -> float:
        average = (self.mean_left + self.mean_right) / 2
        if average == 0:
            return 0.0
        return 100.0 * self.difference / average


def t_statistic(mean_left: float, mean_right: float, var_left: float, var_right: float, n: int) -> float:
    diff = abs(mean_left - mean_right)
    pooled_std = math.sqrt((var_left + var_right) / 2)
    scale = pooled_std * math.sqrt(2.0 / n)
    if scale == 0:
        # Both classes constant: identical means are no evidence, any gap is total
        if diff == 0:
            return 0.0
        log.warning("zero variance in both classes with a %.2f ns mean gap", diff)
        return math.inf
    return diff / scale


def analyze(samples: TimingSamples, threshold: float = DEFAULT_THRESHOLD) -> LeakageVerdict:
    n = samples.count
    if n < 2:
        raise InsufficientSamplesError(f"need at least 2 samples per class for a variance, got {n}")
    mean_left = float(statistics.fmean(samples.left))
    mean_right = float(statistics.fmean(samples.right))
    var_left = float(statistics.variance(samples.left, mean_left))
    var_right = float(statistics.variance(samples.right, mean_right))
    t = t_statistic(mean_left, mean_right, var_left, var_right, n)
    return LeakageVerdict(
        mean_left=mean_left,
        mean_right=mean_right,
        std_left=math.sqrt(var_left),
        std_right=math.sqrt(var_right),
        t_statistic=t,
        threshold=threshold,
        passed=t < threshold,
        samples=n,
    )
