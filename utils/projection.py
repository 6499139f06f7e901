"""
Date-range projection of dashboard records.

The dashboard has one stored figure per campaign/metric and no daily history.
When a client asks for a date range, the stored figures are scaled by the
length of that range relative to a 30-day baseline:

    days_diff  = ceil((to - from) / 1 day)
    multiplier = days_diff / 30

Each entity has a rule table mapping a field to a scaler (fixed-point decimal
string or floored integer) and a factor formula in terms of the multiplier.
The formulas are fixed presentation rules, not estimates.
Line and bar chart series are additionally jittered with values drawn from a
caller-supplied numpy random Generator.
"""
import copy
import math
from decimal import Decimal, ROUND_HALF_UP, localcontext
import numpy as np

SECONDS_PER_DAY = 86400
BASELINE_DAYS = 30
TWO_PLACES = Decimal('0.01')
# Significant digits needed to quantize any finite float exactly.
FLOAT_PRECISION = 400

def days_between(start, end):
    """Whole days from `start` to `end`, rounded up (a partial day counts as a day)."""
    return math.ceil((end - start).total_seconds() / SECONDS_PER_DAY)

def range_multiplier(start, end):
    """Scaling factor of a date range against the 30-day baseline."""
    return days_between(start, end) / BASELINE_DAYS

def to_fixed(value, places=TWO_PLACES):
    """
    Formats a float as a fixed-point string with two fraction digits.

    Rounds half away from zero on the exact binary value of the float, which is how
    browsers format numbers with `toFixed(2)`; values stored by the front end and
    values produced here therefore agree digit for digit. Negative zero prints as "0.00".
    """
    with localcontext() as ctx:
        ctx.prec = FLOAT_PRECISION
        return str(Decimal(value + 0.0).quantize(places, rounding=ROUND_HALF_UP))

def scale_decimal(value, factor):
    """Scales a fixed-point decimal string and formats the result with two fraction digits."""
    return to_fixed(float(value) * factor)

def scale_count(value, factor):
    """Scales an integer count and floors the result."""
    return math.floor(value * factor)

# field -> (scaler, factor as a function of the multiplier)
CAMPAIGN_RULES = {
    'spend': (scale_decimal, lambda multiplier: multiplier),
    'conversions': (scale_count, lambda multiplier: multiplier),
    'roi': (scale_decimal, lambda multiplier: 0.8 + multiplier * 0.4),
}

METRICS_RULES = {
    'revenue': (scale_decimal, lambda multiplier: multiplier),
    'users': (scale_count, lambda multiplier: multiplier),
    'conversions': (scale_decimal, lambda multiplier: 0.5 + multiplier * 0.5),
    'growth': (scale_decimal, lambda multiplier: 0.6 + multiplier * 0.8),
}

# chart type -> (jitter base, jitter spread); each point is scaled by
# multiplier * (base + r * spread) with r uniform in [0, 1). Types not listed
# (pie) are never projected.
CHART_JITTER = {
    'line': (0.7, 0.6),
    'bar': (0.8, 0.4),
}

def project_record(record, rules, start, end):
    """
    Returns a range-adjusted copy of `record` using a rule table.

    If either bound is missing the record itself is returned unchanged. Fields not
    named in `rules` are carried over as they are. The original record is never modified.

    Args:
        record: A model instance (Campaign, Metrics, ...).
        rules (dict): field name -> (scaler, factor function), e.g. CAMPAIGN_RULES.
        start (datetime or None): Start of the requested range.
        end (datetime or None): End of the requested range.
    """
    if start is None or end is None:
        return record
    multiplier = range_multiplier(start, end)
    projected = copy.copy(record)
    for field, (scaler, factor) in rules.items():
        setattr(projected, field, scaler(getattr(record, field), factor(multiplier)))
    return projected

def project_campaign(campaign, start=None, end=None):
    return project_record(campaign, CAMPAIGN_RULES, start, end)

def project_campaigns(campaigns, start=None, end=None):
    return [project_campaign(campaign, start, end) for campaign in campaigns]

def project_metrics(metrics, start=None, end=None):
    return project_record(metrics, METRICS_RULES, start, end)

def jitter_series(values, multiplier, base, spread, rng):
    """
    Scales one chart series: floor(value * multiplier * (base + r * spread)) per point,
    with one draw of r per point from `rng`.

    Args:
        values (list): The numeric series.
        multiplier (float): The range multiplier.
        base (float), spread (float): Jitter parameters from CHART_JITTER.
        rng (numpy.random.Generator): Source of the uniform draws (only `random(size)` is used).

    Returns:
        list of int: The projected series, same length as `values`.
    """
    if not values:
        return []
    points = np.asarray(values, dtype=float)
    jitter = base + rng.random(len(points)) * spread
    return np.floor(points * multiplier * jitter).astype(np.int64).tolist()

def project_chart(chart, rng, start=None, end=None):
    """
    Returns a range-adjusted copy of a ChartData record.

    Every series of a line or bar chart is jittered point by point; labels and
    series names are kept, so each series keeps one value per label. Other chart
    types, and requests without a complete range, get the stored chart back.
    """
    if start is None or end is None or chart.type not in CHART_JITTER:
        return chart
    multiplier = range_multiplier(start, end)
    base, spread = CHART_JITTER[chart.type]
    projected = copy.copy(chart)
    projected.data = copy.deepcopy(chart.data)
    for dataset in projected.data['datasets']:
        dataset['data'] = jitter_series(dataset['data'], multiplier, base, spread, rng)
    return projected
