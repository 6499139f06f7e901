from datetime import date, datetime, timezone # For date parsing and timestamp formatting.
from flask import current_app # To reach the store registered on the running app.

# Key under which create_app registers the store in `app.extensions`.
STORE_EXTENSION_KEY = 'dashboard_store'

def get_store():
    """
    Returns the store instance registered on the current Flask application.

    The store is created (or injected) once by `create_app`, so every request
    handled by the same app sees the same collections.
    """
    return current_app.extensions[STORE_EXTENSION_KEY]

def format_timestamp(value):
    """
    Formats a datetime the way browsers serialize dates: ISO-8601 in UTC,
    millisecond precision, 'Z' suffix (e.g. "2024-01-15T09:30:00.000Z").
    Naive datetimes are taken to be UTC already.

    Args:
        value (datetime or None): The timestamp to format.

    Returns:
        str or None: The formatted timestamp, or None if `value` is None.
    """
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.isoformat(timespec='milliseconds').replace('+00:00', 'Z')

def parse_date_param(value):
    """
    Parses a date query parameter into a timezone-aware datetime.

    Plain calendar dates ("2024-01-31") are read as midnight UTC. Full ISO-8601
    timestamps are accepted too; a timestamp without an offset is read as UTC.

    Args:
        value (str): The raw parameter value.

    Returns:
        datetime: The parsed, timezone-aware datetime.

    Raises:
        ValueError: If the value is not an ISO-8601 date or timestamp.
    """
    value = value.strip()
    if len(value) == 10:
        parsed_date = date.fromisoformat(value)
        return datetime(parsed_date.year, parsed_date.month, parsed_date.day, tzinfo=timezone.utc)
    # fromisoformat only understands a trailing 'Z' from Python 3.11 onwards.
    if value.endswith('Z'):
        value = value[:-1] + '+00:00'
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed

def parse_range_params(request_args):
    """
    Parses the optional `from` and `to` parameters from Flask request arguments
    (request.args) or any mapping with a `get` method.

    A missing or empty parameter comes back as None; callers treat a range with
    either bound missing as "no range". A present but malformed parameter is an error.

    Args:
        request_args (werkzeug.datastructures.MultiDict or dict): The request arguments.

    Returns:
        tuple: (start, end, error_response_tuple).
               - start (datetime or None): The parsed `from` value.
               - end (datetime or None): The parsed `to` value.
               - error_response_tuple (tuple or None): ({"error": "message"}, 400) if a
                 parameter could not be parsed, otherwise None.
    """
    parsed = {}
    for param in ('from', 'to'):
        raw_value = request_args.get(param)
        if not raw_value:
            parsed[param] = None
            continue
        try:
            parsed[param] = parse_date_param(raw_value)
        except ValueError:
            return None, None, ({"error": f"Invalid '{param}' date. Please use YYYY-MM-DD or an ISO-8601 timestamp."}, 400)
    return parsed['from'], parsed['to'], None
