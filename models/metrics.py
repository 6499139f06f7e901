from datetime import datetime, timezone
from utils.helpers import format_timestamp

class Metrics:
    """
    A dashboard-wide metrics snapshot (revenue, user count, conversion rate, growth).

    Decimal figures are fixed-point strings; `users` is an integer.
    Only the most recently inserted snapshot is served as "latest".
    """

    def __init__(self, id, revenue, users, conversions, growth, date=None):
        self.id = id
        self.date = date or datetime.now(timezone.utc) # Moment the snapshot describes.
        self.revenue = revenue          # e.g. "24567.00"
        self.users = users              # e.g. 12456
        self.conversions = conversions  # Conversion rate in percent, e.g. "3.20"
        self.growth = growth            # Growth in percent, e.g. "18.70"

    def to_dict(self):
        return {
            'id': self.id,
            'date': format_timestamp(self.date),
            'revenue': self.revenue,
            'users': self.users,
            'conversions': self.conversions,
            'growth': self.growth,
        }

    def __repr__(self):
        return f'<Metrics {self.id} - Revenue: {self.revenue} - Users: {self.users}>'
