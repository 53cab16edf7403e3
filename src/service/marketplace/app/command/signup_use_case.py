from typing import Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.core_setting import settings
from src.platform.config.di import Container
from src.platform.exception.exceptions import ConflictError, DomainError
from src.platform.logging.loguru_io import Logger
from src.service.marketplace.app.dto.advisor_dto import AdvisorAccount
from src.service.marketplace.app.interface.i_advisor_repo import IAdvisorRepo
from src.service.marketplace.app.interface.i_password_hasher import IPasswordHasher
from src.service.marketplace.app.interface.i_user_command_repo import IUserCommandRepo
from src.service.marketplace.app.interface.i_user_query_repo import IUserQueryRepo
from src.service.marketplace.domain.entity.advisor_entity import Advisor
from src.service.marketplace.domain.entity.approval_request_entity import ApprovalRequest
from src.service.marketplace.domain.entity.user_entity import UserEntity, UserRole


class SignupUseCase:
    """
    Account registration for users and advisors

    Advisors start unverified and unapproved; their certificate goes into the
    admin approval queue as a PENDING request.
    """

    def __init__(
        self,
        *,
        user_query_repo: IUserQueryRepo,
        user_command_repo: IUserCommandRepo,
        advisor_repo: IAdvisorRepo,
        password_hasher: IPasswordHasher,
    ) -> None:
        self.user_query_repo = user_query_repo
        self.user_command_repo = user_command_repo
        self.advisor_repo = advisor_repo
        self.password_hasher = password_hasher

    @classmethod
    @inject
    def depends(
        cls,
        user_query_repo: IUserQueryRepo = Depends(Provide[Container.user_query_repo]),
        user_command_repo: IUserCommandRepo = Depends(Provide[Container.user_command_repo]),
        advisor_repo: IAdvisorRepo = Depends(Provide[Container.advisor_repo]),
        password_hasher: IPasswordHasher = Depends(Provide[Container.password_hasher]),
    ) -> Self:
        return cls(
            user_query_repo=user_query_repo,
            user_command_repo=user_command_repo,
            advisor_repo=advisor_repo,
            password_hasher=password_hasher,
        )

    async def _build_user(
        self,
        *,
        login_id: str,
        name: str,
        nickname: str,
        password: str,
        password_confirm: str,
        contact: str,
        email: str,
        agreed_terms: bool,
        agreed_privacy: bool,
        role: UserRole,
        profile_image: Optional[str],
    ) -> UserEntity:
        if not (agreed_terms and agreed_privacy):
            raise DomainError('Terms of service and privacy policy must be agreed')
        if password != password_confirm:
            raise DomainError('PASSWORD_MISMATCH')
        if await self.user_query_repo.exists_by_login_id(login_id):
            raise ConflictError('DUPLICATE_USER_ID')
        if await self.user_query_repo.exists_by_nickname(nickname):
            raise ConflictError('DUPLICATE_NICKNAME')

        user = UserEntity(
            login_id=login_id,
            name=name,
            nickname=nickname,
            email=email,
            contact=contact,
            role=role,
            profile_image=profile_image or settings.DEFAULT_PROFILE_IMAGE,
            is_active=True,
            is_verified=role != UserRole.ADVISOR,
            terms_agreed=True,
        )
        user.set_password(password, self.password_hasher)
        return user

    @Logger.io
    async def signup_user(
        self,
        *,
        login_id: str,
        name: str,
        nickname: str,
        password: str,
        password_confirm: str,
        contact: str,
        email: str,
        agreed_terms: bool,
        agreed_privacy: bool,
    ) -> UserEntity:
        user = await self._build_user(
            login_id=login_id,
            name=name,
            nickname=nickname,
            password=password,
            password_confirm=password_confirm,
            contact=contact,
            email=email,
            agreed_terms=agreed_terms,
            agreed_privacy=agreed_privacy,
            role=UserRole.USER,
            profile_image=None,
        )
        created = await self.user_command_repo.create(user)
        Logger.base.info(f'👤 [SIGNUP] User {created.id} ({login_id}) registered')
        return created

    @Logger.io
    async def signup_advisor(
        self,
        *,
        login_id: str,
        name: str,
        nickname: str,
        password: str,
        password_confirm: str,
        contact: str,
        email: str,
        agreed_terms: bool,
        agreed_privacy: bool,
        certificate_name: str,
        certificate_file_sn: str,
        birth: str,
        certificate_file_number: str,
        profile_image_url: Optional[str] = None,
    ) -> AdvisorAccount:
        user = await self._build_user(
            login_id=login_id,
            name=name,
            nickname=nickname,
            password=password,
            password_confirm=password_confirm,
            contact=contact,
            email=email,
            agreed_terms=agreed_terms,
            agreed_privacy=agreed_privacy,
            role=UserRole.ADVISOR,
            profile_image=profile_image_url,
        )
        # user_id is assigned by the repo once the user row exists
        advisor = Advisor(
            user_id=0,
            consultation_fee=settings.DEFAULT_CONSULTATION_FEE,
            profile_image_url=user.profile_image,
        )
        approval_request = ApprovalRequest(
            advisor_id=0,
            certificate_name=certificate_name,
            certificate_file_sn=certificate_file_sn,
            birth=birth,
            certificate_file_number=certificate_file_number,
        )

        created_user, _, created_request = await self.advisor_repo.create_account(
            user=user, advisor=advisor, approval_request=approval_request
        )
        Logger.base.info(
            f'🧑‍💼 [SIGNUP] Advisor {created_user.id} registered, '
            f'approval request {created_request.id} pending'
        )

        return AdvisorAccount(
            user_id=created_user.id or 0,
            login_id=created_user.login_id,
            name=created_user.name,
            nickname=created_user.nickname,
            email=created_user.email,
            certificate_name=created_request.certificate_name,
            approval_request_id=created_request.id or 0,
            requested_at=created_request.requested_at,
        )
