"""
Auth & User API Schemas - Pydantic models for request/response
"""

from typing import List, Optional

from pydantic import BaseModel, EmailStr, Field, SecretStr

from src.service.marketplace.domain.entity.user_entity import UserEntity, UserRole


class SignupRequest(BaseModel):
    user_id: str = Field(..., min_length=1, max_length=50, description='Login id')
    name: str = Field(..., min_length=1, max_length=50)
    nickname: str = Field(..., min_length=2, max_length=10)
    password: SecretStr = Field(
        ...,
        min_length=8,
        max_length=30,
        description='Password must be 8-30 characters (bcrypt limit)',
    )
    password_confirm: SecretStr = Field(..., min_length=8, max_length=30)
    contact: str = Field(..., pattern=r'^\d{9,20}$')
    email: EmailStr
    agreed_terms: bool
    agreed_privacy: bool

    class Config:
        json_schema_extra = {
            'example': {
                'user_id': 'investor01',
                'name': 'Kim Minsu',
                'nickname': 'minsu',
                'password': 'P@ssw0rd1',
                'password_confirm': 'P@ssw0rd1',
                'contact': '01012345678',
                'email': 'minsu@example.com',
                'agreed_terms': True,
                'agreed_privacy': True,
            }
        }


class AdvisorSignupRequest(SignupRequest):
    certificate_name: str = Field(..., min_length=1, max_length=100)
    certificate_file_sn: str = Field(..., min_length=8, max_length=8)
    birth: str = Field(..., pattern=r'^\d{8}$')
    certificate_file_number: str = Field(..., min_length=6, max_length=6)
    profile_image_url: Optional[str] = Field(None, max_length=500)

    class Config:
        json_schema_extra = {
            'example': {
                'user_id': 'advisor01',
                'name': 'Lee Jiwon',
                'nickname': 'jiwon',
                'password': 'P@ssw0rd1',
                'password_confirm': 'P@ssw0rd1',
                'contact': '01098765432',
                'email': 'jiwon@example.com',
                'agreed_terms': True,
                'agreed_privacy': True,
                'certificate_name': 'Investment Advisor',
                'certificate_file_sn': '12345678',
                'birth': '19900101',
                'certificate_file_number': '123456',
            }
        }


class AdvisorSignupResponse(BaseModel):
    user_id: int
    login_id: str
    name: str
    nickname: str
    email: str
    certificate_name: str
    approval_request_id: int
    message: str = 'Advisor signup completed'


class LoginRequest(BaseModel):
    user_id: str = Field(..., min_length=1, max_length=50)
    password: SecretStr = Field(
        ..., min_length=1, max_length=72, description='User password (max 72 chars)'
    )

    class Config:
        json_schema_extra = {'example': {'user_id': 'investor01', 'password': 'P@ssw0rd1'}}


class UserSummaryResponse(BaseModel):
    id: int
    user_id: str
    name: str
    nickname: str
    email: str
    role: UserRole

    @classmethod
    def from_entity(cls, user: UserEntity) -> 'UserSummaryResponse':
        return cls(
            id=user.id or 0,
            user_id=user.login_id,
            name=user.name,
            nickname=user.nickname,
            email=user.email,
            role=user.role,
        )


class DuplicateCheckResponse(BaseModel):
    duplicated: bool


class UserProfileResponse(BaseModel):
    id: int
    user_id: str
    name: str
    nickname: str
    contact: str
    email: str
    profile_image: Optional[str] = None
    role: UserRole

    class Config:
        from_attributes = True
        json_schema_extra = {
            'example': {
                'id': 1,
                'user_id': 'investor01',
                'name': 'Kim Minsu',
                'nickname': 'minsu',
                'contact': '010-1234-5678',
                'email': 'minsu@example.com',
                'profile_image': '/images/default_profile.png',
                'role': 'user',
            }
        }

    @classmethod
    def from_entity(cls, user: UserEntity) -> 'UserProfileResponse':
        return cls(
            id=user.id or 0,
            user_id=user.login_id,
            name=user.name,
            nickname=user.nickname,
            contact=user.contact,
            email=user.email,
            profile_image=user.profile_image,
            role=user.role,
        )


class UpdateProfileRequest(BaseModel):
    name: Optional[str] = Field(None, max_length=50)
    contact: Optional[str] = Field(None, max_length=20)

    class Config:
        json_schema_extra = {'example': {'contact': '01055556666'}}


class UpdateProfileResponse(BaseModel):
    updated_fields: List[str]
    user: UserProfileResponse


class ChangePasswordRequest(BaseModel):
    current_password: SecretStr = Field(..., min_length=1, max_length=72)
    new_password: SecretStr = Field(..., min_length=1, max_length=72)
