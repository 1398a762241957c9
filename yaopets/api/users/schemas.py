# yaopets/api/users/schemas.py
from marshmallow import Schema, fields, validate

class UserSummarySchema(Schema):
    """팔로워/팔로잉 목록, 게시글 작성자 표시 등에 쓰이는 최소 사용자 정보."""
    id = fields.Str(attribute="user_id", dump_only=True)
    username = fields.Str(required=True)
    name = fields.Str(allow_none=True)
    profile_image = fields.Str(data_key="profileImage", allow_none=True)
    user_type = fields.Str(data_key="userType")

class UserPublicResponseSchema(UserSummarySchema):
    """
    GET /api/users/{user_id}
    다른 사용자의 프로필 정보를 응답할 때 사용하는 스키마.
    민감한 정보(email, 비밀번호 해시, 소셜 계정 ID)는 제외합니다.
    """
    city = fields.Str()
    bio = fields.Str()
    website = fields.Str()
    points = fields.Int()
    level = fields.Str()
    verified = fields.Bool()
    achievement_badges = fields.List(fields.Str(), data_key="achievementBadges")
    created_at = fields.DateTime(data_key="createdAt")

    # 서비스 로직에서 채워주는 응답 전용 필드
    followers_count = fields.Int(data_key="followersCount", dump_default=0)
    following_count = fields.Int(data_key="followingCount", dump_default=0)
    posts_count = fields.Int(data_key="postsCount", dump_default=0)
    is_following = fields.Bool(data_key="isFollowing", dump_default=False)

class UserPrivateResponseSchema(UserSummarySchema):
    """본인에게만 반환되는 사용자 정보 (로그인 응답, /api/auth/me)."""
    email = fields.Email()
    city = fields.Str()
    bio = fields.Str()
    website = fields.Str()
    points = fields.Int()
    level = fields.Str()
    verified = fields.Bool()
    achievement_badges = fields.List(fields.Str(), data_key="achievementBadges")
    provider = fields.Str()
    created_at = fields.DateTime(data_key="createdAt")
    updated_at = fields.DateTime(data_key="updatedAt")

class ProfileUpdateSchema(Schema):
    """PATCH /api/users/me 요청. 전달된 필드만 수정합니다."""
    name = fields.Str(validate=validate.Length(max=100))
    bio = fields.Str(validate=validate.Length(max=500))
    city = fields.Str(validate=validate.Length(max=100))
    website = fields.Str(validate=validate.Length(max=200))

class ProfileImageSchema(Schema):
    """PATCH /api/users/me/profile-image 요청. 업로드가 끝난 파일 경로를 받습니다."""
    file_path = fields.Str(required=True, error_messages={"required": "'file_path' 필드가 필요합니다."})
