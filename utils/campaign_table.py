"""
Search, filter, sort, page and export campaign lists for the campaign table.

Everything here works on campaign dicts as served by GET /api/campaigns, so a
client can re-query its cached list without another round trip.
"""
import csv
import io
from decimal import Decimal

ITEMS_PER_PAGE = 10
ALL = 'all'  # filter value meaning "no filter"

SORT_FIELDS = ('name', 'channel', 'spend', 'conversions', 'roi')
NUMERIC_SORT_FIELDS = ('spend', 'conversions', 'roi')
SORT_DIRECTIONS = ('asc', 'desc')

CSV_COLUMNS = ['Campaign', 'Channel', 'Spend', 'Conversions', 'ROI', 'Status']

def filter_campaigns(campaigns, search='', status=ALL, channel=ALL):
    """
    Keeps campaigns whose name contains `search` (case-insensitive) and whose
    status and channel match exactly. 'all' (or None) disables a filter.
    """
    term = (search or '').casefold()
    return [
        campaign for campaign in campaigns
        if term in campaign['name'].casefold()
        and status in (None, ALL, campaign['status'])
        and channel in (None, ALL, campaign['channel'])
    ]

def _sort_key(field):
    if field in NUMERIC_SORT_FIELDS:
        # spend and roi arrive as fixed-point strings
        return lambda campaign: Decimal(str(campaign[field]))
    return lambda campaign: campaign[field].casefold()

def sort_campaigns(campaigns, field='name', direction='asc'):
    """
    Returns the campaigns sorted on one column. Text columns compare
    case-insensitively, amounts compare by value. Ties keep their input order.

    Raises:
        ValueError: On an unknown field or direction.
    """
    if field not in SORT_FIELDS:
        raise ValueError(f"Cannot sort campaigns by '{field}'. Choose one of: {', '.join(SORT_FIELDS)}.")
    if direction not in SORT_DIRECTIONS:
        raise ValueError(f"Sort direction must be 'asc' or 'desc', got '{direction}'.")
    return sorted(campaigns, key=_sort_key(field), reverse=direction == 'desc')

def paginate(items, page=1, per_page=ITEMS_PER_PAGE):
    """
    Slices one page out of `items`. Out-of-range page numbers are clamped to the
    first or last page; an empty list still has one (empty) page.

    Returns:
        tuple: (page items, page number actually served, total count, total pages)
    """
    if per_page < 1:
        raise ValueError("per_page must be at least 1.")
    total_count = len(items)
    total_pages = max(1, (total_count + per_page - 1) // per_page)
    page = max(1, min(page, total_pages))
    start_idx = (page - 1) * per_page
    return items[start_idx:start_idx + per_page], page, total_count, total_pages

def query_campaigns(campaigns, search='', status=ALL, channel=ALL, sort_field='name',
                    sort_direction='asc', page=1, per_page=ITEMS_PER_PAGE):
    """
    Runs the full table pipeline: filter, then sort, then paginate.

    Returns:
        dict: {'campaigns': [...], 'page': int, 'total': int, 'total_pages': int}
    """
    matching = sort_campaigns(filter_campaigns(campaigns, search, status, channel), sort_field, sort_direction)
    rows, page, total, total_pages = paginate(matching, page, per_page)
    return {'campaigns': rows, 'page': page, 'total': total, 'total_pages': total_pages}

def campaigns_to_csv(campaigns):
    """
    Renders campaigns as CSV with a header row. Spend is prefixed with '$' and
    ROI suffixed with '%'.
    """
    output = io.StringIO()
    writer = csv.DictWriter(output, fieldnames=CSV_COLUMNS, lineterminator='\n')
    writer.writeheader()
    for campaign in campaigns:
        writer.writerow({
            'Campaign': campaign['name'],
            'Channel': campaign['channel'],
            'Spend': f"${campaign['spend']}",
            'Conversions': campaign['conversions'],
            'ROI': f"{campaign['roi']}%",
            'Status': campaign['status'],
        })
    return output.getvalue()
