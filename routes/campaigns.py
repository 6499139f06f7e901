from flask import Blueprint, jsonify, request, current_app
from forms import CampaignForm, CampaignPatchForm
from utils.helpers import get_store, parse_range_params

# Blueprint for campaign management.
# Listing, reading, creating, updating and deleting campaigns.
campaigns_bp = Blueprint('campaigns', __name__, url_prefix='/api')

def _validated_campaign_fields(form_class):
    """
    Validates the request body with the given form.

    Returns:
        tuple: (fields, error_response). `fields` is the dict of validated values when the
               body is valid; otherwise `error_response` is a (json_response, 400) tuple.
    """
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        current_app.logger.warning(f"Bad request to {request.path}: body is not a JSON object.")
        return None, (jsonify({"error": "Invalid campaign data", "details": {"body": ["Expected a JSON object."]}}), 400)

    form = form_class.from_json(payload)
    if not form.validate():
        current_app.logger.warning(f"Bad request to {request.path}: {form.errors}")
        return None, (jsonify({"error": "Invalid campaign data", "details": form.errors}), 400)
    return form.campaign_fields(), None

@campaigns_bp.route('/campaigns')
def list_campaigns():
    """
    Returns all campaigns.

    Query Parameters:
        from (str, optional), to (str, optional): Date range. When both are given, spend,
        conversions and ROI are scaled to the length of the range.
    """
    start, end, error_response = parse_range_params(request.args)
    if error_response:
        error_message, status_code = error_response
        current_app.logger.warning(f"Bad request to {request.path}: {error_message.get('error')} (Params: {request.args})")
        return jsonify(error_message), status_code

    try:
        campaigns = get_store().get_campaigns(start, end)
    except Exception as e:
        current_app.logger.error(f"Error fetching campaigns (Params: {request.args}): {e}", exc_info=True)
        return jsonify({"error": "Failed to fetch campaigns"}), 500
    return jsonify([campaign.to_dict() for campaign in campaigns])

@campaigns_bp.route('/campaigns/<campaign_id>')
def get_campaign(campaign_id):
    try:
        campaign = get_store().get_campaign(campaign_id)
    except Exception as e:
        current_app.logger.error(f"Error fetching campaign {campaign_id}: {e}", exc_info=True)
        return jsonify({"error": "Failed to fetch campaign"}), 500

    if campaign is None:
        return jsonify({"error": "Campaign not found"}), 404
    return jsonify(campaign.to_dict())

@campaigns_bp.route('/campaigns', methods=['POST'])
def create_campaign():
    """Creates a campaign from the JSON body. Responds 201 with the stored campaign, including its new id."""
    fields, error_response = _validated_campaign_fields(CampaignForm)
    if error_response:
        return error_response

    try:
        campaign = get_store().create_campaign(fields)
    except Exception as e:
        current_app.logger.error(f"Error creating campaign: {e}", exc_info=True)
        return jsonify({"error": "Failed to create campaign"}), 500

    current_app.logger.info(f"Campaign {campaign.id} ('{campaign.name}') created.")
    return jsonify(campaign.to_dict()), 201

@campaigns_bp.route('/campaigns/<campaign_id>', methods=['PUT'])
def update_campaign(campaign_id):
    """
    Applies a partial update. Only the fields present (and not null) in the body change;
    the body is validated before the store is consulted, so an invalid body gets 400
    even for an unknown id.
    """
    patch, error_response = _validated_campaign_fields(CampaignPatchForm)
    if error_response:
        return error_response

    try:
        campaign = get_store().update_campaign(campaign_id, patch)
    except Exception as e:
        current_app.logger.error(f"Error updating campaign {campaign_id}: {e}", exc_info=True)
        return jsonify({"error": "Failed to update campaign"}), 500

    if campaign is None:
        current_app.logger.warning(f"Update requested for unknown campaign {campaign_id}.")
        return jsonify({"error": "Campaign not found"}), 404
    current_app.logger.info(f"Campaign {campaign_id} updated (fields: {', '.join(sorted(patch)) or 'none'}).")
    return jsonify(campaign.to_dict())

@campaigns_bp.route('/campaigns/<campaign_id>', methods=['DELETE'])
def delete_campaign(campaign_id):
    try:
        deleted = get_store().delete_campaign(campaign_id)
    except Exception as e:
        current_app.logger.error(f"Error deleting campaign {campaign_id}: {e}", exc_info=True)
        return jsonify({"error": "Failed to delete campaign"}), 500

    if not deleted:
        current_app.logger.warning(f"Delete requested for unknown campaign {campaign_id}.")
        return jsonify({"error": "Campaign not found"}), 404
    current_app.logger.info(f"Campaign {campaign_id} deleted.")
    return '', 204
