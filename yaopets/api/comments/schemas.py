# yaopets/api/comments/schemas.py
from marshmallow import Schema, fields, validate, pre_load
from yaopets.api.posts.schemas import AuthorSchema # 작성자 정보는 게시글 스키마의 것을 재사용

class CommentCreateSchema(Schema):
    """
    POST /api/posts/{post_id}/comments
    댓글 생성을 요청할 때의 데이터 형식을 정의하고 유효성을 검사합니다.
    """
    content = fields.Str(required=True, validate=validate.Length(min=1, max=1000, error="댓글은 1~1000자 사이여야 합니다."))

    @pre_load
    def strip_content(self, data, **kwargs):
        if isinstance(data, dict) and isinstance(data.get('content'), str):
            data = dict(data, content=data['content'].strip())
        return data

class CommentResponseSchema(Schema):
    """
    댓글 정보 응답을 위한 최종 JSON 형식을 정의합니다.
    """
    id = fields.Str(attribute="comment_id", dump_only=True)
    post_id = fields.Str(data_key="postId")
    user_id = fields.Str(data_key="userId")
    user = fields.Nested(AuthorSchema, attribute="author")
    content = fields.Str()
    likes_count = fields.Int(data_key="likesCount")
    created_at = fields.DateTime(data_key="createdAt")

    # 서비스 로직에서 채워주는 응답 전용 필드
    is_liked = fields.Bool(data_key="isLiked", dump_default=False)
