# yaopets/__init__.py

# =====================================================================================
# 1. 환경 변수 로드 (가장 먼저 실행)
# =====================================================================================
from dotenv import load_dotenv
load_dotenv()

# =====================================================================================
# 2. 모듈 임포트 (Module Imports)
# =====================================================================================
import os
import logging
from flask import Flask, jsonify
from marshmallow import ValidationError
from werkzeug.exceptions import HTTPException
from flask_jwt_extended import JWTManager
import firebase_admin
from firebase_admin import credentials

# - 설정
from yaopets.core.config import config_by_name

# - API 블루프린트
from yaopets.api.auth.routes import auth_bp
from yaopets.api.uploads.routes import uploads_bp
from yaopets.api.users.routes import users_bp
from yaopets.api.posts.routes import posts_bp
from yaopets.api.comments.routes import comments_bp
from yaopets.api.pets.routes import pets_bp
from yaopets.api.donations.routes import donations_bp
from yaopets.api.payments.routes import payments_bp

# - 서비스 모듈
from yaopets.services.storage_service import StorageService
from yaopets.services.oauth_service import OAuthService
from yaopets.services.payment_service import PaymentService
from yaopets.api.auth.services import AuthService
from yaopets.api.users.services import UserService
from yaopets.api.posts.services import PostService
from yaopets.api.comments.services import CommentService
from yaopets.api.pets.services import PetListingService
from yaopets.api.donations.services import DonationService


def _init_firebase(app: Flask):
    if firebase_admin._apps:
        return
    cred_path = app.config.get('FIREBASE_CREDENTIALS_PATH')
    if not cred_path or not os.path.exists(cred_path):
        raise FileNotFoundError(f"Firebase 인증 파일을 찾을 수 없습니다: {cred_path}")
    cred = credentials.Certificate(cred_path)
    firebase_admin.initialize_app(cred, {
        'storageBucket': app.config['FIREBASE_STORAGE_BUCKET']
    })


def _build_services(app: Flask) -> dict:
    """서비스 인스턴스를 생성합니다. 의존성이 없는 공용 서비스를 먼저 만듭니다."""
    services = {}

    storage_instance = StorageService()
    storage_instance.init_app(app)
    services['storage'] = storage_instance

    payment_instance = PaymentService()
    payment_instance.init_app(app)
    services['payments'] = payment_instance

    services['oauth'] = OAuthService(app.config)

    # 도메인 서비스
    services['auth'] = AuthService()
    services['users'] = UserService(storage_service=services['storage'])
    services['posts'] = PostService(storage_service=services['storage'])
    services['comments'] = CommentService()
    services['pets'] = PetListingService()
    services['donations'] = DonationService()
    return services


def create_app(config_name=None, services=None):
    """
    Flask 애플리케이션 팩토리 함수.

    :param config_name: 'development' | 'testing' | 'production' (기본값: FLASK_ENV)
    :param services: 미리 만들어진 서비스 딕셔너리. 주어지면 Firebase 초기화를 건너뜁니다. (테스트용)
    """
    # =====================================================================================
    # 3. Flask 앱 생성 및 기본 설정
    # =====================================================================================
    config_name = config_name or os.getenv('FLASK_ENV', 'development')
    app = Flask(__name__)
    app.config.from_object(config_by_name[config_name])
    app.json.ensure_ascii = False

    # =====================================================================================
    # 4. 확장 기능 및 외부 서비스 초기화
    # =====================================================================================
    jwt = JWTManager(app)

    if services is None:
        _init_firebase(app)
        services = _build_services(app)

    # =====================================================================================
    # 5. 서비스 인스턴스를 'app.services'에 저장 (의존성 주입)
    # =====================================================================================
    app.services = services

    @jwt.token_in_blocklist_loader
    def check_if_token_revoked(jwt_header, jwt_payload):
        return bool(app.services['auth'].is_token_revoked(jwt_payload))

    # =====================================================================================
    # 6. 블루프린트 등록
    # =====================================================================================
    app.register_blueprint(auth_bp, url_prefix='/api/auth')
    app.register_blueprint(uploads_bp, url_prefix='/api/uploads')
    app.register_blueprint(users_bp, url_prefix='/api/users')
    app.register_blueprint(posts_bp, url_prefix='/api/posts')
    app.register_blueprint(comments_bp, url_prefix='/api')
    app.register_blueprint(pets_bp, url_prefix='/api/pets')
    app.register_blueprint(donations_bp, url_prefix='/api/donations')
    app.register_blueprint(payments_bp, url_prefix='/api/payments')

    # =====================================================================================
    # 7. 전역 에러 핸들러 설정
    # =====================================================================================
    @app.errorhandler(ValidationError)
    def handle_marshmallow_validation(err):
        response = {"error_code": "VALIDATION_ERROR", "details": err.messages}
        return jsonify(response), 400

    @app.errorhandler(HTTPException)
    def handle_http_exception(err):
        response = {"error_code": err.name.upper().replace(' ', '_'), "message": err.description}
        return jsonify(response), err.code

    @app.errorhandler(Exception)
    def handle_generic_exception(err):
        # 다른 핸들러에서 처리되지 않은 모든 예외를 여기서 처리
        logging.error(f"An unhandled exception occurred: {err}", exc_info=True)
        response = {"error_code": "INTERNAL_SERVER_ERROR", "message": "서버 내부에서 예상치 못한 오류가 발생했습니다."}
        return jsonify(response), 500

    # =====================================================================================
    # 8. 로깅 및 앱 반환
    # =====================================================================================
    if not app.debug:
        logging.basicConfig(level=logging.INFO, format='%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]')

    logging.info(f"Flask app created for '{config_name}' environment.")

    return app
