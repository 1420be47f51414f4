# plant_care/api/auth/services.py
import uuid
import logging
from dataclasses import asdict
from typing import Dict, Any

from flask_bcrypt import Bcrypt

from plant_care.models.user import User
from plant_care.utils.datetime_utils import DateTimeUtils


class UserAlreadyExistsError(ValueError):
    pass


class UserNotFoundError(LookupError):
    pass


class IncorrectPasswordError(PermissionError):
    pass


class AuthService:
    """이메일/비밀번호 기반 회원가입과 로그인 검증을 담당합니다."""

    def __init__(self, db, bcrypt: Bcrypt):
        self.db = db
        self.users_ref = self.db.collection('users')
        self.bcrypt = bcrypt

    def _find_by_email(self, email: str):
        query = self.users_ref.where('email', '==', email).limit(1).stream()
        return next(iter(query), None)

    def register_user(self, name: str, email: str, password: str) -> User:
        email = email.strip().lower()
        if self._find_by_email(email):
            raise UserAlreadyExistsError("이미 가입된 이메일입니다.")

        password_hash = self.bcrypt.generate_password_hash(password).decode('utf-8')
        new_user = User(
            user_id=str(uuid.uuid4()),
            name=name.strip(),
            email=email,
            password_hash=password_hash
        )
        # Firestore 호환 변환 후 저장
        user_data = DateTimeUtils.for_firestore(asdict(new_user))
        self.users_ref.document(new_user.user_id).set(user_data)
        logging.info(f"새 사용자 가입 완료 (user_id: {new_user.user_id})")
        return new_user

    def authenticate(self, email: str, password: str) -> User:
        """이메일로 사용자를 찾아 비밀번호를 검증합니다."""
        user_doc = self._find_by_email(email.strip().lower())
        if not user_doc:
            raise UserNotFoundError("사용자를 찾을 수 없습니다.")

        user = User(**user_doc.to_dict())
        if not self.bcrypt.check_password_hash(user.password_hash, password):
            raise IncorrectPasswordError("비밀번호가 올바르지 않습니다.")
        return user

    @staticmethod
    def to_public_dict(user: User) -> Dict[str, Any]:
        """응답용 사용자 정보 (비밀번호 해시 제외)."""
        user_dict = asdict(user)
        user_dict.pop('password_hash', None)
        return user_dict
