from .user import User
from .campaign import Campaign, CampaignStatusEnum
from .metrics import Metrics
from .chart_data import ChartData, ChartTypeEnum, validate_series_lengths
