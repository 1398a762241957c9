# yaopets/core/test_security.py
from yaopets.core.security import hash_password, verify_password, username_from_email

def test_hash_and_verify():
    hashed = hash_password("secret1")

    assert hashed != "secret1"
    assert hashed.startswith("$2")
    assert verify_password("secret1", hashed)
    assert not verify_password("secret2", hashed)

def test_accounts_without_password_never_verify():
    """소셜 로그인 전용 계정은 해시가 없습니다."""
    assert verify_password("anything", None) is False
    assert verify_password("", hash_password("secret1")) is False

def test_invalid_hash_is_rejected():
    assert verify_password("secret1", "not-a-bcrypt-hash") is False

def test_long_passwords_are_truncated_consistently():
    long_password = "a" * 100
    assert verify_password(long_password, hash_password(long_password))

def test_username_from_email():
    assert username_from_email("Ana.Souza+pets@example.com") == "ana.souzapets"
    assert username_from_email("@example.com") == "user"
    assert username_from_email(None) == "user"
