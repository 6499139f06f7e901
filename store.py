import uuid
from datetime import datetime, timezone
import numpy as np
from models import User, Campaign, CampaignStatusEnum, Metrics, ChartData
from utils.helpers import parse_date_param
from utils.projection import project_campaigns, project_metrics, project_chart

# --- Sample data loaded at startup ---
SAMPLE_CAMPAIGNS = [
    {'id': 'cp001', 'name': 'Summer Sale 2024', 'channel': 'Google Ads', 'spend': '2450.00',
     'conversions': 147, 'roi': '285.00', 'status': 'active'},
    {'id': 'cp002', 'name': 'Holiday Campaign', 'channel': 'Facebook', 'spend': '1890.00',
     'conversions': 92, 'roi': '312.00', 'status': 'paused'},
    {'id': 'cp003', 'name': 'Brand Awareness', 'channel': 'Instagram', 'spend': '3200.00',
     'conversions': 203, 'roi': '245.00', 'status': 'active'},
    {'id': 'cp004', 'name': 'Product Launch', 'channel': 'LinkedIn', 'spend': '1560.00',
     'conversions': 78, 'roi': '198.00', 'status': 'completed'},
]

SAMPLE_METRICS = {'id': 'm001', 'revenue': '24567.00', 'users': 12456, 'conversions': '3.20', 'growth': '18.70'}

SAMPLE_CHARTS = [
    {'id': 'line001', 'type': 'line', 'data': {
        'labels': ['Jan', 'Feb', 'Mar', 'Apr', 'May', 'Jun', 'Jul'],
        'datasets': [{'label': 'Revenue', 'data': [12000, 15000, 18000, 22000, 25000, 28000, 32000]}],
    }},
    {'id': 'bar001', 'type': 'bar', 'data': {
        'labels': ['Google Ads', 'Facebook', 'Instagram', 'LinkedIn', 'Twitter'],
        'datasets': [{'label': 'Conversions', 'data': [147, 92, 203, 78, 45]}],
    }},
    {'id': 'pie001', 'type': 'pie', 'data': {
        'labels': ['Organic', 'Paid', 'Social'],
        'datasets': [{'data': [45, 30, 25]}],
    }},
]


def _new_id():
    return str(uuid.uuid4())


class MemStorage:
    """
    In-memory store for users, campaigns, metrics snapshots and chart datasets.

    Collections are plain dicts keyed by id (charts are keyed by chart type), so
    insertion order is preserved: the "latest" metrics snapshot is simply the last
    one inserted. Every method runs to completion without yielding, which keeps
    each call atomic from the point of view of request handlers.

    Reads that receive a date range return projected copies (see utils.projection);
    stored records are only changed by the create/update/delete methods.

    Args:
        rng (numpy.random.Generator, optional): Random source for line/bar chart jitter.
            Pass a seeded generator for reproducible chart projections.
    """

    def __init__(self, rng=None):
        self.rng = rng if rng is not None else np.random.default_rng()
        self.users = {}
        self.campaigns = {}
        self.metrics = {}
        self.chart_data = {}

    def seed_sample_data(self):
        """Loads the fixed sample campaigns, metrics snapshot and chart datasets."""
        for fields in SAMPLE_CAMPAIGNS:
            campaign = Campaign(**fields)
            self.campaigns[campaign.id] = campaign
        metrics = Metrics(**SAMPLE_METRICS)
        self.metrics[metrics.id] = metrics
        for fields in SAMPLE_CHARTS:
            chart = ChartData(fields['id'], fields['type'], _copy_chart_data(fields['data']))
            self.chart_data[chart.type] = chart

    # --- Users ---

    def get_user(self, user_id):
        return self.users.get(user_id)

    def get_user_by_username(self, username):
        return next((user for user in self.users.values() if user.username == username), None)

    def create_user(self, username, password):
        """
        Creates a user with a bcrypt-hashed password.

        Raises:
            ValueError: If the username is already taken.
        """
        if self.get_user_by_username(username) is not None:
            raise ValueError(f"Username '{username}' is already taken.")
        user = User(_new_id(), username, password)
        self.users[user.id] = user
        return user

    # --- Campaigns ---

    def get_campaigns(self, start=None, end=None):
        """All campaigns in insertion order, projected onto [start, end] when both are given."""
        return project_campaigns(list(self.campaigns.values()), start, end)

    def get_campaign(self, campaign_id):
        return self.campaigns.get(campaign_id)

    def create_campaign(self, fields):
        """
        Stores a new campaign built from validated fields.

        A fresh id and creation timestamp are always assigned here; `conversions`
        defaults to 0 and `status` to 'active' when not supplied.
        """
        campaign = Campaign(
            id=_new_id(),
            name=fields['name'],
            channel=fields['channel'],
            spend=fields['spend'],
            roi=fields['roi'],
            conversions=fields.get('conversions') if fields.get('conversions') is not None else 0,
            status=fields.get('status') or CampaignStatusEnum.ACTIVE.value,
            created_at=datetime.now(timezone.utc),
        )
        self.campaigns[campaign.id] = campaign
        return campaign

    def update_campaign(self, campaign_id, patch):
        """
        Merges a patch onto an existing campaign.

        Returns:
            Campaign or None: The updated campaign, or None if no campaign has that id.
        """
        campaign = self.campaigns.get(campaign_id)
        if campaign is None:
            return None
        updated = campaign.apply_patch(patch)
        self.campaigns[campaign_id] = updated
        return updated

    def delete_campaign(self, campaign_id):
        """Returns True if the campaign existed and was removed, False otherwise."""
        return self.campaigns.pop(campaign_id, None) is not None

    # --- Metrics ---

    def get_latest_metrics(self, start=None, end=None):
        """The most recently inserted snapshot (projected when a range is given), or None."""
        if not self.metrics:
            return None
        latest = next(reversed(self.metrics.values()))
        return project_metrics(latest, start, end)

    def create_metrics(self, fields):
        """
        Stores a metrics snapshot. `date` may be a datetime or an ISO-8601 string and
        defaults to now.

        Raises:
            ValueError: If `date` is neither a datetime nor a parseable date string.
        """
        snapshot_date = fields.get('date')
        if isinstance(snapshot_date, str):
            snapshot_date = parse_date_param(snapshot_date)
        elif snapshot_date is not None and not isinstance(snapshot_date, datetime):
            raise ValueError(f"Metrics date must be a datetime or ISO-8601 string, got {snapshot_date!r}.")
        metrics = Metrics(
            id=_new_id(),
            revenue=fields['revenue'],
            users=fields['users'],
            conversions=fields['conversions'],
            growth=fields['growth'],
            date=snapshot_date,
        )
        self.metrics[metrics.id] = metrics
        return metrics

    # --- Charts ---

    def get_chart_data(self, chart_type, start=None, end=None):
        """The dataset stored for `chart_type` (projected when a range is given), or None."""
        chart = self.chart_data.get(chart_type)
        if chart is None:
            return None
        return project_chart(chart, self.rng, start, end)

    def create_chart_data(self, fields):
        """
        Stores a chart dataset. A later dataset of the same type replaces the earlier one.

        Raises:
            ValueError: If a series does not have exactly one value per label.
        """
        chart = ChartData(_new_id(), fields['type'], fields['data'])
        self.chart_data[chart.type] = chart
        return chart


def _copy_chart_data(data):
    """Copies sample chart data so the module-level constants are never shared with the store."""
    return {
        'labels': list(data['labels']),
        'datasets': [dict(dataset, data=list(dataset['data'])) for dataset in data['datasets']],
    }
