# yaopets/services/storage_service.py
import uuid
import logging
from datetime import timedelta
from flask import Flask
from firebase_admin import storage

# 업로드 목적(upload_type)별 저장 폴더
UPLOAD_PATHS = {
    "user_profile": "user_profiles/{user_id}",
    "post_media": "posts/{user_id}",
    "pet_photo": "pets/{user_id}",
    "donation_photo": "donations/{user_id}",
}

def owns_path(user_id: str, file_path: str, *upload_types: str) -> bool:
    """file_path가 해당 사용자의 업로드 폴더(지정하지 않으면 전체 타입) 안에 있는지 확인합니다."""
    templates = [UPLOAD_PATHS[t] for t in upload_types] if upload_types else UPLOAD_PATHS.values()
    return file_path.startswith(tuple(f"{t.format(user_id=user_id)}/" for t in templates))

class StorageService:
    """
    Firebase Storage 관련 로직을 담당하는 범용 서비스 클래스입니다.
    파일 자체는 서버를 거치지 않고, 클라이언트가 Pre-signed URL로 직접 업로드합니다.
    """

    def __init__(self):
        # 실제 버킷 객체는 init_app 메서드를 통해 주입됩니다.
        self.bucket = None

    def init_app(self, app: Flask):
        """Flask 앱 초기화 과정에서 호출되어 Storage 버킷을 설정합니다."""
        bucket_name = app.config.get('FIREBASE_STORAGE_BUCKET')
        if not bucket_name:
            raise ValueError("FIREBASE_STORAGE_BUCKET 설정이 .env 또는 설정 파일에 필요합니다.")

        self.bucket = storage.bucket(bucket_name)
        logging.info("StorageService: Firebase Storage 서비스가 성공적으로 초기화되었습니다.")

    def _require_bucket(self):
        if not self.bucket:
            raise RuntimeError("StorageService가 초기화되지 않았습니다. init_app을 먼저 호출해주세요.")

    def generate_upload_url(self, user_id: str, upload_type: str, filename: str, content_type: str) -> dict:
        """
        업로드 타입에 맞는 경로로 15분간 유효한 PUT 전용 URL을 생성합니다.

        :param user_id: 현재 로그인된 사용자의 ID
        :param upload_type: "user_profile", "post_media", "pet_photo", "donation_photo" 중 하나
        :param filename: 원본 파일명 (확장자 파악에 사용)
        :param content_type: 업로드할 파일의 MIME 타입
        :return: 업로드 URL과 서버에서 사용할 파일 경로
        """
        self._require_bucket()

        path_template = UPLOAD_PATHS.get(upload_type)
        if not path_template:
            raise ValueError(f"'{upload_type}'은(는) 유효한 업로드 타입이 아닙니다.")

        extension = filename.rsplit('.', 1)[-1] if '.' in filename else ''
        unique_filename = f"{uuid.uuid4()}.{extension}" if extension else str(uuid.uuid4())
        destination_blob_name = f"{path_template.format(user_id=user_id)}/{unique_filename}"

        blob = self.bucket.blob(destination_blob_name)
        upload_url = blob.generate_signed_url(
            version="v4",
            expiration=timedelta(minutes=15),
            method="PUT",
            content_type=content_type
        )

        return {
            "upload_url": upload_url,
            "file_path": destination_blob_name
        }

    def make_public_and_get_url(self, file_path: str) -> str:
        """지정된 파일을 공개로 설정하고 해당 URL을 반환합니다."""
        self._require_bucket()

        blob = self.bucket.blob(file_path)
        if not blob.exists():
            raise FileNotFoundError(f"파일을 찾을 수 없습니다: {file_path}")

        blob.make_public()
        return blob.public_url

    def delete_by_url(self, url: str) -> None:
        """공개 URL로부터 파일 경로를 추출해 삭제합니다. 실패해도 예외를 던지지 않습니다."""
        if not self.bucket or not url:
            return
        try:
            file_path = url.split("?")[0].split(f"{self.bucket.name}/", 1)[-1]
            blob = self.bucket.blob(file_path)
            if blob.exists():
                blob.delete()
        except Exception as e:
            logging.error(f"Storage 파일 삭제 실패 (url: {url}): {e}")
