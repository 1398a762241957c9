# yaopets/api/auth/schemas.py
from marshmallow import Schema, fields, validate, pre_load

from yaopets.api.users.schemas import UserPrivateResponseSchema
from yaopets.models.user import UserType

class RegisterSchema(Schema):
    """POST /api/auth/register 요청 본문의 유효성을 검사합니다."""
    email = fields.Email(required=True)
    password = fields.Str(required=True, load_only=True, validate=validate.Length(min=6, error="비밀번호는 6자 이상이어야 합니다."))
    username = fields.Str(required=True, validate=validate.Regexp(r'^[A-Za-z0-9._]{3,30}$', error="사용자 이름은 영문, 숫자, '.', '_' 3~30자여야 합니다."))
    name = fields.Str(load_default=None, validate=validate.Length(max=100))
    user_type = fields.Str(
        data_key="userType",
        load_default=UserType.TUTOR.value,
        validate=validate.OneOf([t.value for t in UserType if t != UserType.ADMIN])
    )

    @pre_load
    def strip_strings(self, data, **kwargs):
        if isinstance(data, dict):
            return {k: v.strip() if isinstance(v, str) and k != 'password' else v for k, v in data.items()}
        return data

class LoginSchema(Schema):
    """POST /api/auth/login 요청 본문의 유효성을 검사합니다."""
    email = fields.Email(required=True)
    password = fields.Str(required=True, load_only=True)

class ChangePasswordSchema(Schema):
    current_password = fields.Str(required=True, data_key="currentPassword")
    new_password = fields.Str(required=True, data_key="newPassword", validate=validate.Length(min=6))

class AuthResponseSchema(Schema):
    """로그인/회원가입 성공 응답. 토큰과 사용자 정보를 함께 반환합니다."""
    token = fields.Str(required=True)
    user = fields.Nested(UserPrivateResponseSchema, required=True)
