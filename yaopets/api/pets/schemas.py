# yaopets/api/pets/schemas.py
from marshmallow import Schema, fields, validate, EXCLUDE

from yaopets.models.pet import PetStatus

PET_STATUSES = [s.value for s in PetStatus]

class PetListingCreateSchema(Schema):
    """
    POST /api/pets
    실종/발견 신고 및 입양 공고 등록 요청의 유효성을 검사합니다.
    """
    class Meta:
        unknown = EXCLUDE

    name = fields.Str(required=True, validate=validate.Length(min=1, max=50))
    species = fields.Str(required=True, validate=validate.Length(min=1, max=50))
    size = fields.Str(required=True, validate=validate.OneOf(["small", "medium", "large"]))
    age = fields.Str(required=True)
    status = fields.Str(required=True, validate=validate.OneOf(PET_STATUSES, error="status는 lost, found, adoption 중 하나여야 합니다."))
    address = fields.Str(required=True, validate=validate.Length(min=1, max=300))
    description = fields.Str(required=True, validate=validate.Length(min=1, max=2000))
    breed = fields.Str(load_default=None, allow_none=True)
    color = fields.Str(load_default=None, allow_none=True)
    eye_color = fields.Str(data_key="eyeColor", load_default=None, allow_none=True)
    contact_phone = fields.Str(data_key="contactPhone", load_default=None, allow_none=True)
    photos = fields.List(fields.Url(), load_default=list)
    lat = fields.Float(load_default=None, allow_none=True, validate=validate.Range(min=-90, max=90))
    lng = fields.Float(load_default=None, allow_none=True, validate=validate.Range(min=-180, max=180))

class PetListingResponseSchema(Schema):
    """반려동물 게시글 응답 형식."""
    id = fields.Str(attribute="pet_id", dump_only=True)
    owner_id = fields.Str(data_key="ownerId")
    owner_name = fields.Str(data_key="ownerName", allow_none=True)
    name = fields.Str()
    species = fields.Str()
    breed = fields.Str(allow_none=True)
    size = fields.Str()
    age = fields.Str()
    color = fields.Str(allow_none=True)
    eye_color = fields.Str(data_key="eyeColor", allow_none=True)
    status = fields.Str()
    address = fields.Str()
    description = fields.Str()
    contact_phone = fields.Str(data_key="contactPhone", allow_none=True)
    photos = fields.List(fields.Str())
    lat = fields.Float(allow_none=True)
    lng = fields.Float(allow_none=True)
    created_at = fields.DateTime(data_key="createdAt")
