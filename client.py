import copy
from datetime import date, datetime
import logging
import requests
from utils import campaign_table

logger = logging.getLogger(__name__)

CAMPAIGNS_PATH = '/api/campaigns'

def format_date_param(value):
    """
    Formats a range bound for the `from`/`to` query parameters.
    Dates and datetimes become YYYY-MM-DD; strings pass through; None stays None.
    """
    if value is None:
        return None
    if isinstance(value, (date, datetime)):
        return value.strftime('%Y-%m-%d')
    return str(value)

class DashboardClient:
    """
    Cache-aware client for the dashboard API.

    Read results are cached per (path, from, to), so asking twice for the same
    endpoint and range only hits the server once. Campaign mutations wait for the
    server to acknowledge them, then drop every cached entry under /api/campaigns
    so the next read refetches. Nothing is retried: a failed request raises
    (requests.HTTPError for error statuses) and leaves the cache as it was.

    Args:
        base_url (str): Server root, e.g. "http://localhost:5000".
        session (requests.Session, optional): Session to send requests with.
        timeout (float, optional): Per-request timeout in seconds. None waits indefinitely.
    """

    def __init__(self, base_url, session=None, timeout=None):
        self.base_url = base_url.rstrip('/')
        self.session = session or requests.Session()
        self.timeout = timeout
        self._cache = {}

    # --- Cache management ---

    def cache_key(self, path, start=None, end=None):
        return (path, format_date_param(start), format_date_param(end))

    def invalidate(self, path_prefix=None):
        """
        Drops cached entries whose path is `path_prefix` or lies below it
        (e.g. "/api/campaigns" also covers "/api/campaigns/cp001"). With no prefix the whole cache is cleared.

        Returns:
            int: Number of entries removed.
        """
        if path_prefix is None:
            removed = len(self._cache)
            self._cache.clear()
            return removed
        stale = [key for key in self._cache
                 if key[0] == path_prefix or key[0].startswith(path_prefix.rstrip('/') + '/')]
        for key in stale:
            del self._cache[key]
        return len(stale)

    def is_cached(self, path, start=None, end=None):
        return self.cache_key(path, start, end) in self._cache

    # --- HTTP helpers ---

    def _request(self, method, path, params=None, json=None):
        response = self.session.request(method, self.base_url + path, params=params, json=json, timeout=self.timeout)
        response.raise_for_status()
        return response

    def _cached_get(self, path, start=None, end=None):
        key = self.cache_key(path, start, end)
        if key not in self._cache:
            params = {name: value for name, value in (('from', key[1]), ('to', key[2])) if value is not None}
            self._cache[key] = self._request('GET', path, params=params or None).json()
        # Callers get their own copy; editing a result never changes the cache.
        return copy.deepcopy(self._cache[key])

    def _after_campaign_mutation(self):
        removed = self.invalidate(CAMPAIGNS_PATH)
        logger.debug(f"Invalidated {removed} cached campaign queries.")

    # --- Queries ---

    def get_metrics(self, start=None, end=None):
        """Latest metrics snapshot for the range (dict), or None if the server has none."""
        return self._cached_get('/api/metrics', start, end)

    def get_campaigns(self, start=None, end=None):
        return self._cached_get(CAMPAIGNS_PATH, start, end)

    def get_campaign(self, campaign_id):
        return self._cached_get(f'{CAMPAIGNS_PATH}/{campaign_id}')

    def get_chart(self, chart_type, start=None, end=None):
        return self._cached_get(f'/api/charts/{chart_type}', start, end)

    def query_campaigns(self, start=None, end=None, **table_options):
        """
        One page of the campaign table, built from the cached campaign list.

        Accepts the options of utils.campaign_table.query_campaigns (search, status,
        channel, sort_field, sort_direction, page, per_page).
        """
        return campaign_table.query_campaigns(self.get_campaigns(start, end), **table_options)

    def export_campaigns_csv(self, start=None, end=None, search='', status=campaign_table.ALL,
                             channel=campaign_table.ALL, sort_field='name', sort_direction='asc'):
        """Every campaign matching the table filters, in table order, as CSV text."""
        campaigns = campaign_table.filter_campaigns(self.get_campaigns(start, end), search, status, channel)
        return campaign_table.campaigns_to_csv(campaign_table.sort_campaigns(campaigns, sort_field, sort_direction))

    # --- Mutations ---

    def create_campaign(self, fields):
        campaign = self._request('POST', CAMPAIGNS_PATH, json=fields).json()
        self._after_campaign_mutation()
        return campaign

    def update_campaign(self, campaign_id, patch):
        campaign = self._request('PUT', f'{CAMPAIGNS_PATH}/{campaign_id}', json=patch).json()
        self._after_campaign_mutation()
        return campaign

    def delete_campaign(self, campaign_id):
        self._request('DELETE', f'{CAMPAIGNS_PATH}/{campaign_id}')
        self._after_campaign_mutation()
