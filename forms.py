from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from flask_wtf import FlaskForm
from werkzeug.datastructures import ImmutableMultiDict
from wtforms import StringField, IntegerField
from wtforms.validators import AnyOf, Length, NumberRange, StopValidation
from models import CampaignStatusEnum

TWO_PLACES = Decimal('0.01')
STATUS_VALUES = [status.value for status in CampaignStatusEnum]

def json_formdata(payload):
    """
    Wraps a decoded JSON object as form data.

    Each key maps to exactly one value, even when that value is a list, so a
    list sent for a scalar field is rejected by the field instead of being
    silently unpacked.
    """
    return ImmutableMultiDict(list(payload.items()))

def _is_present(field):
    """True if the field was sent with a non-null value."""
    return bool(field.raw_data) and field.raw_data[0] is not None

# --- Fields that accept decoded JSON values ---

class JSONStringField(StringField):
    """A string field that rejects non-string JSON values (numbers, lists, objects, booleans)."""

    def process_formdata(self, valuelist):
        if not valuelist or valuelist[0] is None:
            return
        if not isinstance(valuelist[0], str):
            raise ValueError(self.gettext('Not a valid string value.'))
        self.data = valuelist[0]

class FixedPointField(StringField):
    """
    A decimal amount sent as a number or numeric string.
    The value is normalized to a fixed-point string with two fraction digits ("2450" -> "2450.00").
    """

    def process_formdata(self, valuelist):
        if not valuelist or valuelist[0] is None:
            return
        value = valuelist[0]
        # bool is a subclass of int; true/false are not amounts.
        if isinstance(value, bool) or not isinstance(value, (int, float, str)):
            raise ValueError(self.gettext('Not a valid decimal value.'))
        try:
            amount = Decimal(str(value).strip())
            if not amount.is_finite():
                raise ValueError(self.gettext('Not a valid decimal value.'))
            self.data = str(amount.quantize(TWO_PLACES, rounding=ROUND_HALF_UP))
        except InvalidOperation:
            raise ValueError(self.gettext('Not a valid decimal value.'))

class JSONIntegerField(IntegerField):
    """An integer field for JSON numbers. Integral floats (5.0) are accepted; strings and booleans are not."""

    def process_formdata(self, valuelist):
        if not valuelist or valuelist[0] is None:
            return
        value = valuelist[0]
        if isinstance(value, float) and value.is_integer():
            value = int(value)
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValueError(self.gettext('Not a valid integer value.'))
        self.data = value

# --- Validators ---

class Required:
    """
    Requires the field to be sent with a non-null value.
    On a partial form a missing field is skipped instead.
    """

    def __init__(self, message=None):
        self.message = message

    def __call__(self, form, field):
        if _is_present(field):
            return
        if form.partial:
            raise StopValidation()
        raise StopValidation(self.message or field.gettext('This field is required.'))

class Omittable:
    """Stops the validation chain quietly when the field was not sent (or sent as null)."""

    def __call__(self, form, field):
        if not _is_present(field):
            raise StopValidation()

# --- Forms ---

class CampaignForm(FlaskForm):
    """
    Validates the JSON body of a campaign creation request.

    `id` and `createdAt` are assigned by the store, so they are not fields here;
    unknown keys in the payload are ignored.
    """
    class Meta:
        csrf = False # JSON API: no session-bound CSRF token.

    partial = False

    # Campaign name: required, non-empty string.
    name = JSONStringField('Name', validators=[Required(message="Name is required."),
                                              Length(min=1, message="Name must not be empty.")])
    # Channel: required free-text string (e.g. "Google Ads").
    channel = JSONStringField('Channel', validators=[Required(message="Channel is required.")])
    # Spend: required amount, stored as a two-digit fixed-point string.
    spend = FixedPointField('Spend', validators=[Required(message="Spend is required.")])
    # Conversions: optional non-negative integer, defaults to 0.
    conversions = JSONIntegerField('Conversions', default=0,
                                   validators=[Omittable(), NumberRange(min=0, message="Conversions cannot be negative.")])
    # ROI: required percentage, stored as a two-digit fixed-point string.
    roi = FixedPointField('ROI', validators=[Required(message="ROI is required.")])
    # Status: optional, one of the CampaignStatusEnum values, defaults to 'active'.
    status = JSONStringField('Status', default=CampaignStatusEnum.ACTIVE.value,
                             validators=[Omittable(), AnyOf(STATUS_VALUES, message=f"Status must be one of: {', '.join(STATUS_VALUES)}.")])

    @classmethod
    def from_json(cls, payload):
        """Builds the form from a decoded JSON object (dict)."""
        return cls(formdata=json_formdata(payload))

    def campaign_fields(self):
        """
        Returns the validated values as a dict keyed by field name.
        A partial form only returns the fields that were sent with a non-null value.
        """
        if self.partial:
            return {field.name: field.data for field in self if _is_present(field)}
        return {field.name: field.data for field in self}

class CampaignPatchForm(CampaignForm):
    """
    Validates the JSON body of a campaign update.
    Every field is optional; fields that are sent must satisfy the same rules as on creation.
    """
    partial = True
