from datetime import datetime
from enum import Enum
import re
from typing import Optional

import attrs
from pydantic import SecretStr

from src.platform.exception.exceptions import DomainError, ForbiddenError, LoginError


CONTACT_PATTERN = re.compile(r'^010\d{8}$')
NEW_PASSWORD_PATTERN = re.compile(r'^(?=.*[0-9])(?=.*[a-z])(?=.*[A-Z])(?=.*[@#$%^&+=!])(?=\S+$).{8,20}$')


class UserRole(str, Enum):
    USER = 'user'
    ADVISOR = 'advisor'
    ADMIN = 'admin'


@attrs.define
class UserEntity:
    login_id: str = ''
    name: str = ''
    nickname: str = ''
    email: str = ''
    contact: str = ''
    hashed_password: str = attrs.field(default='', repr=False)  # Hide from repr for security
    id: Optional[int] = None
    role: UserRole = UserRole.USER
    profile_image: Optional[str] = None
    is_active: bool = True
    is_verified: bool = False
    terms_agreed: bool = False
    last_login_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    def validate_active(self) -> None:
        if not self.is_active:
            raise ForbiddenError('User is inactive')

    @staticmethod
    def validate_user_exists(user_entity: Optional['UserEntity']) -> 'UserEntity':
        if not user_entity:
            raise LoginError('LOGIN_BAD_CREDENTIALS')

        return user_entity

    def set_password(self, plain_password: str, password_hasher) -> None:
        """Set password using provided password hasher"""
        from src.service.marketplace.app.interface.i_password_hasher import IPasswordHasher

        if not isinstance(password_hasher, IPasswordHasher):
            raise TypeError('password_hasher must implement IPasswordHasher interface')

        self.hashed_password = password_hasher.hash_password(
            plain_password=SecretStr(plain_password)
        )

    @staticmethod
    def validate_new_password(new_password: str) -> None:
        if not NEW_PASSWORD_PATTERN.match(new_password):
            raise DomainError(
                'Password must be 8-20 characters and include a digit, a lowercase letter, '
                'an uppercase letter and one of @#$%^&+=!'
            )

    def apply_profile_update(
        self, *, name: Optional[str], contact: Optional[str]
    ) -> tuple['UserEntity', list[str]]:
        """
        Validate a name/contact change and return the updated entity.

        Contact arrives as 11 bare digits (01012345678) and is stored hyphenated.

        Raises:
            DomainError: NO_UPDATE_FIELDS, INVALID_PHONE_FORMAT or SAME_DATA_UPDATE
        """
        new_name = name.strip() if name and name.strip() else None
        new_contact = contact.strip() if contact and contact.strip() else None
        if new_name is None and new_contact is None:
            raise DomainError('NO_UPDATE_FIELDS')

        if new_contact is not None:
            if not CONTACT_PATTERN.match(new_contact):
                raise DomainError('INVALID_PHONE_FORMAT')
            new_contact = f'{new_contact[:3]}-{new_contact[3:7]}-{new_contact[7:]}'

        name_unchanged = new_name is None or new_name == self.name
        contact_unchanged = new_contact is None or new_contact == self.contact
        if name_unchanged and contact_unchanged:
            raise DomainError('SAME_DATA_UPDATE')

        updated_fields = []
        if new_name is not None:
            updated_fields.append('name')
        if new_contact is not None:
            updated_fields.append('contact')

        return (
            attrs.evolve(
                self,
                name=new_name if new_name is not None else self.name,
                contact=new_contact if new_contact is not None else self.contact,
            ),
            updated_fields,
        )

    def deactivate(self) -> 'UserEntity':
        if not self.is_active:
            raise DomainError('ALREADY_DEACTIVATED_USER')
        return attrs.evolve(self, is_active=False)
