# yaopets/core/security.py
import re
import bcrypt

# bcrypt는 72바이트까지만 사용하므로 그 이상은 잘라서 처리합니다.
_BCRYPT_MAX_BYTES = 72
BCRYPT_ROUNDS = 10

def hash_password(password: str) -> str:
    """평문 비밀번호를 bcrypt 해시 문자열로 변환합니다."""
    secret = password.encode('utf-8')[:_BCRYPT_MAX_BYTES]
    return bcrypt.hashpw(secret, bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode('utf-8')

def verify_password(password: str, password_hash: str) -> bool:
    """
    비밀번호가 저장된 해시와 일치하는지 확인합니다.
    소셜 로그인 전용 계정처럼 해시가 없는 경우 항상 False를 반환합니다.
    """
    if not password or not password_hash:
        return False
    secret = password.encode('utf-8')[:_BCRYPT_MAX_BYTES]
    try:
        return bcrypt.checkpw(secret, password_hash.encode('utf-8'))
    except ValueError:
        # 저장된 값이 올바른 bcrypt 해시가 아닌 경우
        return False

def username_from_email(email: str) -> str:
    """이메일의 로컬 파트로 기본 사용자 이름을 만듭니다. (소셜 로그인 가입 시 사용)"""
    local_part = (email or '').split('@')[0].lower()
    cleaned = re.sub(r'[^a-z0-9._]', '', local_part)
    return cleaned or 'user'
