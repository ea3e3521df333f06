"""
SoC Matcher

Filters a SoC catalog down to the chips whose capacity covers an aggregate
requirement on every axis, ranks them by total capacity and picks the best fit.
Also holds the per-axis utilization helpers used by the reporting layer.
"""

from dataclasses import dataclass

from models import ResourceVector


# Utilization thresholds (percent) for status labels.
HIGH_THRESHOLD = 75.0
CRITICAL_THRESHOLD = 90.0
OVER_THRESHOLD = 100.0


@dataclass(frozen=True)
class MatchResult:
    suitable: list
    best_fit: object = None  # SoC or None

    @property
    def found(self):
        return self.best_fit is not None


@dataclass(frozen=True)
class AxisUtilization:
    axis: str
    required: float
    available: float
    percent: float
    status: str


def capacity_score(soc):
    """Unweighted sum of all capacity axes. Smaller means a smaller part."""
    return soc.resources.total()


def is_suitable(soc, required):
    return soc.resources.dominates(required)


class SoCMatcher:
    """
    Required ResourceVector + SoC catalog -> suitable SoCs (ascending capacity
    score) and the best fit.

    A SoC is suitable only if it covers every axis; there is no partial credit.
    Equal scores keep catalog order since sorted() is stable.
    """

    def match(self, required, catalog):
        suitable = [soc for soc in catalog if is_suitable(soc, required)]
        if not suitable:
            return MatchResult(suitable=[], best_fit=None)

        ranked = sorted(suitable, key=capacity_score)
        return MatchResult(suitable=ranked, best_fit=ranked[0])


def match_socs(required, catalog):
    """Module-level shortcut for SoCMatcher().match(...)."""
    return SoCMatcher().match(required, catalog)


def utilization(required_axis, available_axis):
    """
    Required/available as a percentage. 0 when nothing is available on that
    axis. Can exceed 100 for SoCs that do not satisfy the requirement.
    """
    if available_axis > 0:
        return (required_axis / available_axis) * 100
    return 0.0


def utilization_status(percent):
    if percent > OVER_THRESHOLD:
        return 'over'
    if percent > CRITICAL_THRESHOLD:
        return 'critical'
    if percent > HIGH_THRESHOLD:
        return 'high'
    return 'ok'


def utilization_breakdown(required, available):
    """One AxisUtilization row per resource axis, in display order."""
    if not isinstance(available, ResourceVector):
        available = available.resources
    rows = []
    for axis in ResourceVector.axes():
        req = getattr(required, axis)
        avail = getattr(available, axis)
        percent = utilization(req, avail)
        rows.append(AxisUtilization(axis, req, avail, percent, utilization_status(percent)))
    return rows


def peak_utilization(required, soc):
    """Highest per-axis utilization of a SoC for the given requirement."""
    return max((row.percent for row in utilization_breakdown(required, soc.resources)), default=0.0)
