import enum
import copy
from datetime import datetime, timezone
from utils.helpers import format_timestamp # Shared wire format for timestamps.

class CampaignStatusEnum(enum.Enum):
    """
    Enumeration for the lifecycle status of a marketing campaign.
    The values are the strings exchanged over the API.
    """
    ACTIVE = 'active'        # Campaign is running and spending.
    PAUSED = 'paused'        # Campaign is temporarily stopped.
    COMPLETED = 'completed'  # Campaign has finished.

class Campaign:
    """
    A marketing campaign held by the in-memory store.

    Monetary and percentage figures (`spend`, `roi`) are kept as fixed-point strings
    with two fraction digits, exactly as they travel over the wire. `id` and
    `created_at` are assigned by the store and never change afterwards.
    """

    # Fields a client may set on create or change through a patch.
    EDITABLE_FIELDS = ('name', 'channel', 'spend', 'conversions', 'roi', 'status')

    def __init__(self, id, name, channel, spend, roi, conversions=0,
                 status=CampaignStatusEnum.ACTIVE.value, created_at=None):
        self.id = id
        self.name = name
        self.channel = channel                # Free text; the UI offers a fixed list but the server does not enforce it.
        self.spend = spend                    # e.g. "2450.00"
        self.conversions = conversions        # Non-negative integer.
        self.roi = roi                        # e.g. "285.00"
        self.status = status                  # One of CampaignStatusEnum values.
        self.created_at = created_at or datetime.now(timezone.utc)

    def apply_patch(self, patch):
        """
        Returns a copy of this campaign with the patch merged in.

        Only editable fields are considered. A field that is missing from the patch,
        or present with a None value, keeps its current value. `id` and `created_at`
        are never touched.
        """
        updated = copy.copy(self)
        for field in self.EDITABLE_FIELDS:
            value = patch.get(field)
            if value is not None:
                setattr(updated, field, value)
        return updated

    def to_dict(self):
        """Serializes the campaign with the camelCase keys used by the API."""
        return {
            'id': self.id,
            'name': self.name,
            'channel': self.channel,
            'spend': self.spend,
            'conversions': self.conversions,
            'roi': self.roi,
            'status': self.status,
            'createdAt': format_timestamp(self.created_at),
        }

    def __repr__(self):
        return f'<Campaign {self.id} - {self.name} ({self.status})>'
