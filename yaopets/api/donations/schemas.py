# yaopets/api/donations/schemas.py
from marshmallow import Schema, fields, validate, EXCLUDE

from yaopets.models.donation import DonationCategory, DonationCondition

DONATION_CATEGORIES = [c.value for c in DonationCategory]
DONATION_CONDITIONS = [c.value for c in DonationCondition]

class DonationLocationSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    address = fields.Str(required=True, validate=validate.Length(min=1, max=300))

class DonationCreateSchema(Schema):
    """POST /api/donations 요청 본문의 유효성을 검사합니다."""
    class Meta:
        unknown = EXCLUDE

    title = fields.Str(required=True, validate=validate.Length(min=1, max=100))
    description = fields.Str(required=True, validate=validate.Length(min=1, max=2000))
    category = fields.Str(required=True, validate=validate.OneOf(DONATION_CATEGORIES))
    condition = fields.Str(required=True, validate=validate.OneOf(DONATION_CONDITIONS))
    location = fields.Nested(DonationLocationSchema, required=True)
    photos = fields.List(fields.Url(), load_default=list)

class DonationResponseSchema(Schema):
    id = fields.Str(attribute="donation_id", dump_only=True)
    donor_id = fields.Str(data_key="donorId")
    donor_name = fields.Str(data_key="donorName")
    title = fields.Str()
    description = fields.Str()
    category = fields.Str()
    condition = fields.Str()
    location = fields.Dict()
    photos = fields.List(fields.Str())
    available = fields.Bool()
    created_at = fields.DateTime(data_key="createdAt")
