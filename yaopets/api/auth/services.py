# yaopets/api/auth/services.py
import uuid
import logging
from datetime import datetime, timezone
from typing import Dict, Any, Tuple, Optional

from yaopets.core.security import hash_password, verify_password, username_from_email
from yaopets.models.user import User, UserType, AuthProvider, PROVIDER_ID_FIELDS
from yaopets.services.base import BaseFirestoreService, ConflictError
from yaopets.utils.datetime_utils import DateTimeUtils

class AuthService(BaseFirestoreService):
    """
    회원가입/로그인(이메일, 소셜) 및 토큰 무효화(Blocklist)를 담당하는 서비스 클래스.
    """
    def __init__(self, db=None):
        super().__init__(db)
        self.revoked_tokens_ref = self.db.collection('revoked_tokens')

    # --- 조회 헬퍼 ---
    def _find_one(self, field: str, value: Any) -> Optional[User]:
        if not value:
            return None
        query = self.users_ref.where(field, '==', value).limit(1).stream()
        user_doc = next(query, None)
        return User.from_dict(user_doc.to_dict()) if user_doc else None

    def _save(self, user: User) -> None:
        user.updated_at = DateTimeUtils.now()
        self.users_ref.document(user.user_id).set(DateTimeUtils.for_firestore(user.to_dict()))

    def _unique_username(self, base: str) -> str:
        """사용자 이름이 이미 사용 중이면 숫자 접미사를 붙여 사용 가능한 이름을 찾습니다."""
        candidate = base
        suffix = 1
        while self._find_one('username', candidate):
            suffix += 1
            candidate = f"{base}{suffix}"
        return candidate

    def get_user(self, user_id: str) -> Optional[User]:
        data = self._get_user(user_id)
        return User.from_dict(data) if data else None

    # --- 이메일 회원가입 / 로그인 ---
    def register_user(self, data: Dict[str, Any]) -> User:
        """새 로컬 계정을 생성합니다. 이메일/사용자 이름이 중복되면 ConflictError를 발생시킵니다."""
        email = data['email'].strip().lower()
        username = data['username'].strip()

        if self._find_one('email', email):
            raise ConflictError("이미 가입된 이메일입니다.")
        if self._find_one('username', username):
            raise ConflictError("이미 사용 중인 사용자 이름입니다.")

        user = User(
            user_id=str(uuid.uuid4()),
            email=email,
            username=username,
            name=data.get('name') or username,
            password_hash=hash_password(data['password']),
            user_type=UserType(data.get('user_type') or UserType.TUTOR.value),
            provider=AuthProvider.LOCAL
        )
        self._save(user)
        logging.info(f"신규 회원가입 완료 (user_id: {user.user_id})")
        return user

    def authenticate(self, email: str, password: str) -> Optional[User]:
        """이메일/비밀번호가 일치하면 사용자를, 아니면 None을 반환합니다."""
        user = self._find_one('email', (email or '').strip().lower())
        if not user or not verify_password(password, user.password_hash):
            return None
        return user

    def change_password(self, user_id: str, current_password: str, new_password: str) -> None:
        user = self.get_user(user_id)
        if not user:
            raise ValueError("사용자를 찾을 수 없습니다.")
        if not verify_password(current_password, user.password_hash):
            raise PermissionError("현재 비밀번호가 일치하지 않습니다.")
        self.users_ref.document(user_id).update({
            'password_hash': hash_password(new_password),
            'updated_at': DateTimeUtils.now()
        })

    # --- 소셜 로그인 ---
    def get_or_create_user_by_oauth(self, provider: str, profile: Dict[str, Any]) -> Tuple[User, bool]:
        """
        소셜 계정으로 사용자를 찾거나 생성합니다.
        1. 제공자 ID로 조회 → 2. 같은 이메일의 기존 계정에 연결 → 3. 신규 생성
        """
        provider_enum = AuthProvider(provider)
        id_field = PROVIDER_ID_FIELDS[provider_enum]
        provider_id = profile.get('provider_id')
        if not provider_id:
            raise ValueError(f"{provider} 사용자 정보에 ID가 없습니다.")

        user = self._find_one(id_field, provider_id)
        if user:
            return user, False

        email = (profile.get('email') or '').strip().lower()
        user = self._find_one('email', email)
        if user:
            setattr(user, id_field, provider_id)
            user.provider = provider_enum
            user.verified = True
            self._save(user)
            logging.info(f"기존 계정에 {provider} 로그인 연결 (user_id: {user.user_id})")
            return user, False

        if not email:
            raise ValueError(f"{provider} 계정에서 이메일 정보를 가져올 수 없습니다.")

        user = User(
            user_id=str(uuid.uuid4()),
            email=email,
            username=self._unique_username(username_from_email(email)),
            name=profile.get('name'),
            profile_image=profile.get('picture') or "",
            provider=provider_enum,
            verified=True
        )
        setattr(user, id_field, provider_id)
        self._save(user)
        logging.info(f"{provider} 소셜 로그인으로 신규 가입 (user_id: {user.user_id})")
        return user, True

    # --- Blocklist 관련 로직 ---
    def revoke_token(self, jti: str, exp: int) -> None:
        """토큰의 jti를 만료 시간과 함께 저장합니다."""
        token_data = {
            'revoked_at': DateTimeUtils.now(),
            'expires_at': datetime.fromtimestamp(exp, tz=timezone.utc)
        }
        self.revoked_tokens_ref.document(jti).set(token_data)
        logging.info(f"토큰 무효화 완료. JTI: {jti[:8]}...")

    def is_token_revoked(self, jwt_payload: dict) -> bool:
        """jti를 이용해 해당 토큰이 무효화 목록에 있는지 확인합니다."""
        jti = jwt_payload.get('jti')
        if not jti:
            return False
        return self.revoked_tokens_ref.document(jti).get().exists
