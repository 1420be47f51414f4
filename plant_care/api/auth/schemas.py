# plant_care/api/auth/schemas.py
from marshmallow import Schema, fields, validate


class RegisterSchema(Schema):
    """회원가입 요청의 유효성을 검사하는 스키마"""
    name = fields.Str(required=True, validate=validate.Length(min=1, max=50))
    email = fields.Email(required=True)
    password = fields.Str(required=True, load_only=True, validate=validate.Length(min=6))


class LoginSchema(Schema):
    """로그인 요청의 유효성을 검사하는 스키마"""
    email = fields.Email(required=True)
    password = fields.Str(required=True, load_only=True)


class UserResponseSchema(Schema):
    user_id = fields.Str(data_key="id")
    name = fields.Str()
    email = fields.Email()
    profile_pic = fields.Str(data_key="profilePic")
    created_at = fields.DateTime(data_key="createdAt", allow_none=True)
