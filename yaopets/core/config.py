# yaopets/core/config.py

import os # 환경 변수를 읽기 위해 사용합니다.
from datetime import timedelta

class Config:
    """모든 환경 설정의 기반이 되는 공통 설정 클래스입니다."""
    # JWT 서명 키. 토큰의 위변조를 방지합니다.
    JWT_SECRET_KEY = os.getenv('JWT_SECRET_KEY')
    # 원본 서비스와 동일하게 7일 동안 유효한 단일 Access Token을 사용합니다.
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(days=int(os.getenv('JWT_ACCESS_TOKEN_DAYS', 7)))

    FIREBASE_STORAGE_BUCKET = os.getenv('FIREBASE_STORAGE_BUCKET')

    # --- 소셜 로그인 (OAuth) ---
    # Google OAuth 인증에 필요한 클라이언트 시크릿 파일의 경로
    GOOGLE_CLIENT_SECRETS_PATH = os.getenv('GOOGLE_CLIENT_SECRETS_PATH')
    FACEBOOK_CLIENT_ID = os.getenv('FB_CLIENT_ID')
    FACEBOOK_CLIENT_SECRET = os.getenv('FB_CLIENT_SECRET')
    LINKEDIN_CLIENT_ID = os.getenv('LINKEDIN_CLIENT_ID')
    LINKEDIN_CLIENT_SECRET = os.getenv('LINKEDIN_CLIENT_SECRET')
    # 콜백 URL은 '{OAUTH_REDIRECT_BASE}/api/auth/{provider}/callback' 형태로 만들어집니다.
    OAUTH_REDIRECT_BASE = os.getenv('OAUTH_REDIRECT_BASE', 'http://localhost:5000')

    # 소셜 로그인 완료, 결제 완료 후 돌아갈 클라이언트 주소
    CLIENT_URL = os.getenv('CLIENT_URL', 'http://localhost:5173')

    # --- 결제 (Stripe) ---
    STRIPE_SECRET_KEY = os.getenv('STRIPE_SECRET_KEY')
    PAYMENT_CURRENCY = os.getenv('PAYMENT_CURRENCY', 'brl')
    # 최소 결제 금액 (통화의 최소 단위 기준, 예: 100 = R$1.00)
    PAYMENT_MIN_AMOUNT = 100

class DevelopmentConfig(Config):
    """개발 환경을 위한 설정 클래스입니다."""
    DEBUG = True
    FIREBASE_CREDENTIALS_PATH = os.getenv('DEV_FIREBASE_CREDENTIALS_PATH')

class TestingConfig(Config):
    """테스트 환경을 위한 설정 클래스입니다."""
    TESTING = True
    DEBUG = False
    # 테스트에서는 키가 없어도 토큰을 발급할 수 있도록 기본값을 둡니다.
    JWT_SECRET_KEY = os.getenv('JWT_SECRET_KEY', 'yaopets-testing-secret-key-do-not-use-in-production')
    FIREBASE_CREDENTIALS_PATH = os.getenv('TEST_FIREBASE_CREDENTIALS_PATH')

class ProductionConfig(Config):
    """운영 환경 설정 클래스입니다."""
    DEBUG = False
    FIREBASE_CREDENTIALS_PATH = os.getenv('FIREBASE_CREDENTIALS_PATH')

# FLASK_ENV 값에 따라 create_app에서 적절한 설정 클래스를 선택합니다.
config_by_name = dict(
    development=DevelopmentConfig,
    testing=TestingConfig,
    production=ProductionConfig
)
