import logging # Standard library logging, used through app.logger.
import time # For measuring request durations.
import numpy as np # Random generator for chart projections.
from flask import Flask, g, jsonify, request # The main Flask class and request helpers.
from werkzeug.exceptions import HTTPException # Base class of Flask's HTTP errors (404, 405, ...).
from config import Config # Import the application's configuration class.
from store import MemStorage # In-memory entity store.
from utils.helpers import STORE_EXTENSION_KEY

# Application Factory Function
def create_app(config_class=Config, store=None):
    """
    Application factory for creating and configuring the Flask app.

    Args:
        config_class: Configuration object loaded with `app.config.from_object`.
        store (MemStorage, optional): Store to serve. When omitted a new store is created,
            with a chart random generator seeded from CHART_RANDOM_SEED and the sample
            data loaded if SEED_SAMPLE_DATA is set. Each app gets its own store; nothing
            is shared between app instances.
    """
    app = Flask(__name__)

    # Load configuration from the Config object (defined in config.py).
    app.config.from_object(config_class)

    # --- Logging ---
    app.logger.setLevel(getattr(logging, app.config.get('LOG_LEVEL', 'INFO'), logging.INFO))

    # --- Store ---
    if store is None:
        store = MemStorage(rng=np.random.default_rng(app.config.get('CHART_RANDOM_SEED')))
        if app.config.get('SEED_SAMPLE_DATA', True):
            store.seed_sample_data()
            app.logger.info(
                f"Loaded sample data: {len(store.campaigns)} campaigns, "
                f"{len(store.metrics)} metrics snapshot(s), {len(store.chart_data)} chart datasets."
            )
    app.extensions[STORE_EXTENSION_KEY] = store

    # --- Import and Register Blueprints ---
    from routes.dashboard import dashboard_bp
    from routes.campaigns import campaigns_bp

    app.register_blueprint(dashboard_bp)  # /api/metrics, /api/charts/<type>
    app.register_blueprint(campaigns_bp)  # /api/campaigns...

    # --- Request logging ---
    @app.before_request
    def start_timer():
        g.request_started_at = time.perf_counter()

    @app.after_request
    def log_api_request(response):
        if request.path.startswith('/api'):
            started_at = g.get('request_started_at')
            duration_ms = (time.perf_counter() - started_at) * 1000 if started_at else 0.0
            app.logger.info(f"{request.method} {request.path} {response.status_code} in {duration_ms:.0f}ms")
        return response

    # --- JSON error handlers ---
    # Errors raised outside the handlers' own try/except blocks (unknown routes,
    # wrong methods, unexpected failures) still answer with {"error": message}.
    @app.errorhandler(HTTPException)
    def handle_http_exception(error):
        messages = {404: "Not found", 405: "Method not allowed"}
        return jsonify({"error": messages.get(error.code, error.name)}), error.code

    @app.errorhandler(Exception)
    def handle_unexpected_exception(error):
        app.logger.error(f"Unhandled error on {request.method} {request.path}: {error}", exc_info=True)
        return jsonify({"error": "Internal server error"}), 500

    return app # Return the configured Flask app instance.

# This block allows running the Flask development server directly using `python app.py`.
if __name__ == '__main__':
    app = create_app() # Create an app instance using the factory.
    app.run(debug=True)
