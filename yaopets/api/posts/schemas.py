# yaopets/api/posts/schemas.py
from marshmallow import Schema, fields, validate, validates_schema, ValidationError, EXCLUDE

from yaopets.models.post import MEDIA_TYPES, VISIBILITY_TYPES, POST_TYPES

# --- 재사용을 위한 중첩 스키마 ---
class AuthorSchema(Schema):
    """게시물/댓글 응답에 포함될 작성자 정보 스키마."""
    id = fields.Str(attribute="user_id")
    username = fields.Str(required=True)
    profile_image = fields.Str(data_key="profileImage", allow_none=True)

class LocationSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    address = fields.Str(load_default=None)
    lat = fields.Float(load_default=None)
    lng = fields.Float(load_default=None)

# --- API 요청/응답 스키마 ---

class PostCreateSchema(Schema):
    """POST /api/posts 요청 본문의 유효성을 검사합니다."""
    class Meta:
        unknown = EXCLUDE

    content = fields.Str(load_default="", validate=validate.Length(max=2000))
    media_urls = fields.List(fields.Str(), data_key="mediaUrls", load_default=list)
    media_type = fields.Str(data_key="mediaType", load_default="image", validate=validate.OneOf(MEDIA_TYPES))
    visibility_type = fields.Str(data_key="visibilityType", load_default="public", validate=validate.OneOf(VISIBILITY_TYPES))
    post_type = fields.Str(data_key="postType", load_default="regular", validate=validate.OneOf(POST_TYPES))
    location = fields.Nested(LocationSchema, load_default=None, allow_none=True)

    @validates_schema
    def validate_not_empty(self, data, **kwargs):
        if not data.get('content', '').strip() and not data.get('media_urls'):
            raise ValidationError("내용 또는 미디어 중 하나는 필요합니다.", field_name="content")

class PostResponseSchema(Schema):
    """게시글 정보 응답을 위한 최종 JSON 형식을 정의합니다."""
    id = fields.Str(attribute="post_id", dump_only=True)
    user_id = fields.Str(data_key="userId")
    user = fields.Nested(AuthorSchema, attribute="author")
    content = fields.Str()
    media_urls = fields.List(fields.Str(), data_key="mediaUrls")
    media_type = fields.Str(data_key="mediaType")
    visibility_type = fields.Str(data_key="visibilityType")
    post_type = fields.Str(data_key="postType")
    location = fields.Dict(allow_none=True)
    likes_count = fields.Int(data_key="likesCount")
    comments_count = fields.Int(data_key="commentsCount")
    created_at = fields.DateTime(data_key="createdAt")
    updated_at = fields.DateTime(data_key="updatedAt")

    # 조회한 사용자 기준으로 서비스 로직에서 채워주는 응답 전용 필드
    is_liked = fields.Bool(data_key="isLiked", dump_default=False)
    is_saved = fields.Bool(data_key="isSaved", dump_default=False)
