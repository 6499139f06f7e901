import pytest
import numpy as np
from app import create_app
from config import Config
from store import MemStorage

class TestConfig(Config):
    TESTING = True
    SECRET_KEY = 'test-secret-key'
    LOG_LEVEL = 'DEBUG'
    SEED_SAMPLE_DATA = True
    CHART_RANDOM_SEED = 1234 # Fixed seed so chart projections are reproducible.

@pytest.fixture
def store():
    """A freshly seeded store with a fixed-seed random generator."""
    store_instance = MemStorage(rng=np.random.default_rng(1234))
    store_instance.seed_sample_data()
    return store_instance

@pytest.fixture
def app(store):
    """
    Function-scoped test Flask application.
    The store is mutable, so every test gets a new app serving a new seeded store.
    """
    return create_app(config_class=TestConfig, store=store)

@pytest.fixture
def app_context(app):
    """
    Function-scoped application context for tests that call helpers relying on
    `current_app` outside of a request.
    """
    with app.app_context():
        yield

@pytest.fixture
def client(app):
    """Test client fixture for making requests to the application."""
    return app.test_client()
