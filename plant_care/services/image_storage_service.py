# plant_care/services/image_storage_service.py
import os
import time
import logging
from flask import Flask
from werkzeug.datastructures import FileStorage
from werkzeug.utils import secure_filename

from plant_care.core.exceptions import PlantValidationError

ALLOWED_EXTENSIONS = {'.png', '.jpg', '.jpeg', '.gif', '.webp'}


class ImageStorageService:
    """
    식물 사진을 서버 로컬 디스크(UPLOAD_FOLDER)에 저장하는 서비스 클래스입니다.
    저장된 파일은 /uploads/<filename> 경로로 제공됩니다.
    """

    def __init__(self):
        self.upload_folder = None

    def init_app(self, app: Flask):
        """
        Flask 앱 초기화 과정에서 호출되어 업로드 폴더를 준비합니다.

        :param app: Flask 애플리케이션 객체
        """
        upload_folder = app.config.get('UPLOAD_FOLDER')
        if not upload_folder:
            raise ValueError("UPLOAD_FOLDER 설정이 필요합니다.")
        os.makedirs(upload_folder, exist_ok=True)
        self.upload_folder = upload_folder
        logging.info(f"ImageStorageService: 업로드 폴더 준비 완료 ({upload_folder})")

    def save_image(self, file: FileStorage) -> str:
        """
        업로드된 이미지를 '<epoch ms><확장자>' 이름으로 저장하고 공개 URL 경로를 반환합니다.

        :param file: request.files['image']
        :return: '/uploads/1700000000000.jpg' 형태의 경로
        """
        if not self.upload_folder:
            raise RuntimeError("ImageStorageService가 초기화되지 않았습니다. init_app을 먼저 호출해주세요.")

        _, extension = os.path.splitext(secure_filename(file.filename or ''))
        extension = extension.lower()
        if extension not in ALLOWED_EXTENSIONS:
            raise PlantValidationError(f"허용되지 않는 이미지 확장자입니다: '{extension or file.filename}'")

        filename = f"{int(time.time() * 1000)}{extension}"
        file.save(os.path.join(self.upload_folder, filename))
        logging.info(f"Plant image saved: {filename}")
        return f"/uploads/{filename}"

    def delete_image(self, image_url: str) -> None:
        """
        save_image로 저장한 파일을 삭제합니다. 요청 처리가 실패해 저장된 사진이 쓰이지 않게 된 경우 호출됩니다.

        :param image_url: save_image가 반환한 '/uploads/<filename>' 경로
        """
        if not self.upload_folder or not image_url:
            return
        filename = secure_filename(os.path.basename(image_url))
        path = os.path.join(self.upload_folder, filename)
        try:
            os.remove(path)
            logging.info(f"Plant image removed: {filename}")
        except FileNotFoundError:
            logging.warning(f"삭제할 이미지 파일이 없습니다: {filename}")
