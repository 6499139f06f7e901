import os # For accessing environment variables.


def _env_flag(name, default):
    """Reads a boolean flag from the environment ('1', 'true', 'yes', 'on' count as true)."""
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


def _env_int(name):
    """Reads an optional integer from the environment. Empty or missing values give None."""
    value = os.environ.get(name, '').strip()
    return int(value) if value else None


class Config:
    """
    Configuration class for the dashboard API.

    Loads settings from environment variables, with sensible defaults for development where applicable.
    There is no database or third-party credential to configure: all data lives in the
    in-memory store created by the application factory.
    """

    # --- General Flask Configuration ---
    # Secret key used by Flask and Flask-WTF. The JSON forms run without CSRF,
    # but Flask still expects a key to be present.
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'a-very-complex-and-unguessable-secret-key-for-dev'

    # --- Logging Configuration ---
    # Level applied to app.logger in create_app (DEBUG, INFO, WARNING, ERROR, CRITICAL).
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO').upper()

    # --- Store Configuration ---
    # Load the fixed sample campaigns, metrics snapshot and chart datasets at startup.
    SEED_SAMPLE_DATA = _env_flag('SEED_SAMPLE_DATA', True)
    # Seed for the random generator that jitters line/bar chart series.
    # None means a fresh, unpredictable seed per process.
    CHART_RANDOM_SEED = _env_int('CHART_RANDOM_SEED')
