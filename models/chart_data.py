import enum
from datetime import datetime, timezone
from utils.helpers import format_timestamp

class ChartTypeEnum(enum.Enum):
    """
    Enumeration for the chart kinds the dashboard renders.
    The store keeps at most one dataset per chart type.
    """
    LINE = 'line'  # Revenue trend over time.
    BAR = 'bar'    # Conversions per channel.
    PIE = 'pie'    # Traffic source split.

class ChartData:
    """
    A chart dataset in the shape expected by the charting front end:

        {"labels": [...], "datasets": [{"label": "Revenue", "data": [...]}, ...]}

    Every series in `datasets` has exactly one value per label.
    """

    def __init__(self, id, type, data, created_at=None):
        validate_series_lengths(data)
        self.id = id
        self.type = type
        self.data = data
        self.created_at = created_at or datetime.now(timezone.utc)

    def to_dict(self):
        return {
            'id': self.id,
            'type': self.type,
            'data': self.data,
            'createdAt': format_timestamp(self.created_at),
        }

    def __repr__(self):
        return f'<ChartData {self.id} - Type: {self.type} - Series: {len(self.data.get("datasets", []))}>'


def validate_series_lengths(data):
    """
    Checks that `data` has a labels list and that each dataset is aligned with it.

    Raises:
        ValueError: If labels or datasets are missing, or a series length differs from the label count.
    """
    labels = data.get('labels') if isinstance(data, dict) else None
    datasets = data.get('datasets') if isinstance(data, dict) else None
    if not isinstance(labels, list) or not isinstance(datasets, list) or not datasets:
        raise ValueError("Chart data requires a 'labels' list and a non-empty 'datasets' list.")
    for index, dataset in enumerate(datasets):
        points = dataset.get('data') if isinstance(dataset, dict) else None
        if not isinstance(points, list):
            raise ValueError(f"Dataset {index} has no 'data' list.")
        if len(points) != len(labels):
            raise ValueError(
                f"Dataset {index} has {len(points)} values but there are {len(labels)} labels."
            )
