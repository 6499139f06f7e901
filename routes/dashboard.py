from flask import Blueprint, jsonify, request, current_app
from utils.helpers import get_store, parse_range_params

# Blueprint for dashboard-related routes.
# These endpoints feed the metric cards and the charts of the dashboard.
dashboard_bp = Blueprint('dashboard', __name__, url_prefix='/api')

# API endpoint to fetch the latest metrics snapshot.
@dashboard_bp.route('/metrics')
def get_metrics():
    """
    Returns the latest metrics snapshot (revenue, users, conversion rate, growth).

    Query Parameters:
        from (str, optional): Start of the date range (YYYY-MM-DD or ISO-8601 timestamp).
        to (str, optional): End of the date range.
        When both are given, the figures are scaled to the length of the range.
    Returns:
        JSON: The metrics snapshot, or null if no snapshot has been recorded.
    """
    start, end, error_response = parse_range_params(request.args)
    if error_response: # If date parsing fails, return the error response.
        error_message, status_code = error_response
        current_app.logger.warning(f"Bad request to {request.path}: {error_message.get('error')} (Params: {request.args})")
        return jsonify(error_message), status_code

    try:
        metrics = get_store().get_latest_metrics(start, end)
    except Exception as e:
        current_app.logger.error(f"Error fetching metrics (Params: {request.args}): {e}", exc_info=True)
        return jsonify({"error": "Failed to fetch metrics"}), 500

    return jsonify(metrics.to_dict() if metrics else None)

# API endpoint to fetch chart data for one chart type.
@dashboard_bp.route('/charts/<chart_type>')
def get_chart(chart_type):
    """
    Returns the dataset for a chart type ('line', 'bar' or 'pie'), formatted for Chart.js
    (labels plus one or more datasets).

    Query Parameters:
        from, to: As defined in get_metrics. Line and bar series are scaled to the range
                  with some random variation; pie data is returned as stored.
    Returns:
        JSON: The chart data, or 404 if nothing is stored for the type.
    """
    start, end, error_response = parse_range_params(request.args)
    if error_response:
        error_message, status_code = error_response
        current_app.logger.warning(f"Bad request to {request.path}: {error_message.get('error')} (Params: {request.args})")
        return jsonify(error_message), status_code

    try:
        chart = get_store().get_chart_data(chart_type, start, end)
    except Exception as e:
        current_app.logger.error(f"Error fetching '{chart_type}' chart data (Params: {request.args}): {e}", exc_info=True)
        return jsonify({"error": "Failed to fetch chart data"}), 500

    if chart is None:
        current_app.logger.warning(f"Chart data not found for type '{chart_type}'.")
        return jsonify({"error": "Chart data not found"}), 404
    return jsonify(chart.to_dict())
