import pytest
import numpy as np
from decimal import Decimal
from datetime import datetime, timezone
from models import Campaign, Metrics, ChartData
from utils.projection import (
    days_between, range_multiplier, to_fixed, project_campaign, project_campaigns,
    project_metrics, project_chart,
)

def utc(*args):
    return datetime(*args, tzinfo=timezone.utc)

JAN_1 = utc(2024, 1, 1)
JAN_31 = utc(2024, 1, 31)  # 30 days after JAN_1: multiplier 1.0
JAN_16 = utc(2024, 1, 16)  # 15 days after JAN_1: multiplier 0.5

class FixedRandom:
    """Stands in for numpy.random.Generator, returning the same draw for every point."""

    def __init__(self, value):
        self.value = value
        self.calls = 0

    def random(self, size):
        self.calls += 1
        return np.full(size, self.value)

@pytest.fixture
def campaign():
    return Campaign(id='cp001', name='Summer Sale 2024', channel='Google Ads', spend='2450.00',
                    conversions=147, roi='285.00', status='active', created_at=utc(2024, 1, 15))

@pytest.fixture
def metrics():
    return Metrics(id='m001', revenue='24567.00', users=12456, conversions='3.20', growth='18.70', date=utc(2024, 2, 1))

def make_chart(chart_type, datasets, labels=None):
    labels = labels or ['Jan', 'Feb', 'Mar']
    return ChartData(f'{chart_type}-test', chart_type, {'labels': labels, 'datasets': datasets})

# --- Day counting ---

def test_days_between_whole_days():
    assert days_between(JAN_1, JAN_31) == 30
    assert range_multiplier(JAN_1, JAN_31) == 1.0
    assert range_multiplier(JAN_1, JAN_16) == 0.5

def test_days_between_rounds_partial_days_up():
    assert days_between(JAN_1, utc(2024, 1, 2, 1, 0)) == 2
    assert days_between(JAN_1, JAN_1) == 0

def test_days_between_reversed_range_is_negative():
    assert days_between(JAN_31, JAN_1) == -30

# --- Fixed-point formatting ---

@pytest.mark.parametrize("value, expected", [
    (342.00000000000006, "342.00"),
    (0.125, "0.13"),    # exact binary tie rounds up
    (1.005, "1.00"),    # 1.005 is slightly below 1.005 in binary
    (-2450.0, "-2450.00"),
    (26.179999999999996, "26.18"),
])
def test_to_fixed(value, expected):
    assert to_fixed(value) == expected

def test_to_fixed_prints_negative_zero_as_zero():
    assert to_fixed(-0.0) == "0.00"
    assert to_fixed(0.0 * -1.5) == "0.00"

def test_to_fixed_large_values_keep_every_digit():
    result = to_fixed(1e30)
    assert result.endswith(".00")
    assert Decimal(result) == Decimal(1e30)
    assert Decimal(to_fixed(-1e30)) == Decimal(-1e30)

# --- Campaigns ---

def test_campaign_without_range_is_returned_unchanged(campaign):
    assert project_campaign(campaign) is campaign
    assert project_campaign(campaign, JAN_1, None) is campaign
    assert project_campaign(campaign, None, JAN_31) is campaign

def test_campaign_thirty_day_window(campaign):
    projected = project_campaign(campaign, JAN_1, JAN_31)
    assert projected.spend == '2450.00'
    assert projected.conversions == 147
    assert projected.roi == '342.00'  # 285 * (0.8 + 1 * 0.4)

def test_campaign_fifteen_day_window(campaign):
    projected = project_campaign(campaign, JAN_1, JAN_16)
    assert projected.spend == '1225.00'
    assert projected.conversions == 73  # floor(147 * 0.5)
    assert projected.roi == '285.00'    # 285 * (0.8 + 0.5 * 0.4)

def test_zero_spend_campaign_over_reversed_range():
    idle = Campaign(id='cp009', name='Idle', channel='Email', spend='0.00', roi='0.00')
    projected = project_campaign(idle, JAN_31, JAN_1)
    assert projected.spend == '0.00'
    assert projected.roi == '0.00'
    assert projected.conversions == 0

def test_campaign_projection_copies_other_fields_and_leaves_original(campaign):
    projected = project_campaign(campaign, JAN_1, JAN_16)
    assert projected is not campaign
    assert (projected.id, projected.name, projected.channel, projected.status, projected.created_at) == \
           (campaign.id, campaign.name, campaign.channel, campaign.status, campaign.created_at)
    assert campaign.spend == '2450.00'
    assert campaign.conversions == 147

def test_campaign_reversed_range_goes_negative(campaign):
    projected = project_campaign(campaign, JAN_31, JAN_1)
    assert projected.spend == '-2450.00'
    assert projected.conversions == -147

def test_project_campaigns_maps_each_entry(campaign):
    second = Campaign(id='cp002', name='Holiday Campaign', channel='Facebook', spend='1890.00',
                      conversions=92, roi='312.00', status='paused')
    projected = project_campaigns([campaign, second], JAN_1, JAN_16)
    assert [c.id for c in projected] == ['cp001', 'cp002']
    assert projected[1].spend == '945.00'
    assert projected[1].conversions == 46

# --- Metrics ---

def test_metrics_without_range_is_returned_unchanged(metrics):
    assert project_metrics(metrics) is metrics

def test_metrics_thirty_day_window(metrics):
    projected = project_metrics(metrics, JAN_1, JAN_31)
    assert projected.revenue == '24567.00'
    assert projected.users == 12456
    assert projected.conversions == '3.20'  # 3.20 * (0.5 + 0.5)
    assert projected.growth == '26.18'      # 18.70 * (0.6 + 0.8)
    assert projected.date == metrics.date

def test_metrics_fifteen_day_window(metrics):
    projected = project_metrics(metrics, JAN_1, JAN_16)
    assert projected.revenue == '12283.50'
    assert projected.users == 6228
    assert projected.conversions == '2.40'  # 3.20 * 0.75
    assert projected.growth == '18.70'      # 18.70 * (0.6 + 0.4)
    assert metrics.revenue == '24567.00'

# --- Charts ---

def test_line_chart_jitter_bounds():
    chart = make_chart('line', [{'label': 'Revenue', 'data': [101, 203, 307]}])
    # r = 0 gives the lowest factor, 0.7.
    assert project_chart(chart, FixedRandom(0.0), JAN_1, JAN_31).data['datasets'][0]['data'] == [70, 142, 214]
    # r = 0.25 gives 0.7 + 0.25 * 0.6 = 0.85.
    assert project_chart(chart, FixedRandom(0.25), JAN_1, JAN_31).data['datasets'][0]['data'] == [85, 172, 260]

def test_bar_chart_jitter_bounds():
    chart = make_chart('bar', [{'label': 'Conversions', 'data': [147, 92, 203]}])
    projected = project_chart(chart, FixedRandom(0.0), JAN_1, JAN_31)
    assert projected.data['datasets'][0]['data'] == [117, 73, 162]  # floor(v * 0.8)
    assert projected.data['datasets'][0]['label'] == 'Conversions'
    assert chart.data['datasets'][0]['data'] == [147, 92, 203]

def test_pie_chart_is_never_projected():
    chart = make_chart('pie', [{'data': [45, 30, 25]}], labels=['Organic', 'Paid', 'Social'])
    rng = FixedRandom(0.0)
    assert project_chart(chart, rng, JAN_1, JAN_31) is chart
    assert rng.calls == 0

def test_chart_without_range_is_returned_unchanged():
    chart = make_chart('line', [{'label': 'Revenue', 'data': [1, 2, 3]}])
    assert project_chart(chart, FixedRandom(0.0)) is chart

def test_every_series_is_projected_and_keeps_its_length():
    chart = make_chart('line', [
        {'label': 'Revenue', 'data': [100, 200, 300]},
        {'label': 'Cost', 'data': [10, 20, 30]},
    ])
    projected = project_chart(chart, np.random.default_rng(3), JAN_1, JAN_16)
    labels = projected.data['labels']
    for dataset in projected.data['datasets']:
        assert len(dataset['data']) == len(labels)
        assert all(isinstance(value, int) for value in dataset['data'])
    # 0.5 * [0.7, 1.3) bounds each projected point.
    for value, base in zip(projected.data['datasets'][1]['data'], [10, 20, 30]):
        assert np.floor(base * 0.5 * 0.7) <= value <= base * 0.5 * 1.3

def test_seeded_generators_give_identical_projections():
    chart = make_chart('line', [{'label': 'Revenue', 'data': [12000, 15000, 18000]}])
    first = project_chart(chart, np.random.default_rng(42), JAN_1, JAN_31)
    second = project_chart(chart, np.random.default_rng(42), JAN_1, JAN_31)
    assert first.data == second.data
