from collections import defaultdict
from datetime import date, time
from typing import Any, AsyncContextManager, Callable, Dict, List, Optional

from sqlalchemy import Select, and_, delete, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.marketplace.app.dto.advisor_dto import AdvisorSortBy, AdvisorSummary
from src.service.marketplace.app.interface.i_advisor_repo import IAdvisorRepo
from src.service.marketplace.domain.entity.advisor_entity import (
    Advisor,
    AdvisorCareer,
    AdvisorCertificate,
    CareerChange,
)
from src.service.marketplace.domain.entity.approval_request_entity import ApprovalRequest
from src.service.marketplace.domain.entity.user_entity import UserEntity
from src.service.marketplace.domain.enum.trade_style import TradeStyle
from src.service.marketplace.driven_adapter.model.advisor_model import (
    AdvisorBlockedTimeModel,
    AdvisorCareerModel,
    AdvisorCertificateModel,
    AdvisorModel,
)
from src.service.marketplace.driven_adapter.model.approval_request_model import (
    ApprovalRequestModel,
)
from src.service.marketplace.driven_adapter.model.review_model import ReviewModel
from src.service.marketplace.driven_adapter.model.user_model import UserModel
from src.service.marketplace.driven_adapter.repo.approval_request_repo_impl import (
    approval_model_to_entity,
)
from src.service.marketplace.driven_adapter.repo.user_command_repo_impl import new_user_model
from src.service.marketplace.driven_adapter.repo.user_query_repo_impl import user_model_to_entity


def advisor_model_to_entity(advisor_model: AdvisorModel, user_model: UserModel) -> Advisor:
    return Advisor(
        user_id=advisor_model.user_id,
        consultation_fee=advisor_model.consultation_fee,
        name=user_model.name,
        nickname=user_model.nickname,
        profile_image_url=advisor_model.profile_image_url,
        short_intro=advisor_model.short_intro,
        long_intro=advisor_model.long_intro,
        preferred_trade_style=TradeStyle(advisor_model.preferred_trade_style)
        if advisor_model.preferred_trade_style
        else None,
        public_contact=advisor_model.public_contact,
        certificate_name=advisor_model.certificate_name,
        certificate_file_sn=advisor_model.certificate_file_sn,
        birth=advisor_model.birth,
        certificate_file_number=advisor_model.certificate_file_number,
        is_approved=advisor_model.is_approved,
        approved_at=advisor_model.approved_at,
        is_profile_completed=advisor_model.is_profile_completed,
        created_at=advisor_model.created_at,
    )


class AdvisorRepoImpl(IAdvisorRepo):
    def __init__(self, session_factory: Callable[..., AsyncContextManager[AsyncSession]]):
        self.session_factory = session_factory

    @staticmethod
    def _review_stats():
        """Average rating and count of live reviews per advisor"""
        return (
            select(
                ReviewModel.advisor_id.label('advisor_id'),
                func.avg(ReviewModel.rating).label('average_rating'),
                func.count(ReviewModel.id).label('review_count'),
            )
            .where(ReviewModel.is_deleted.is_(False))
            .group_by(ReviewModel.advisor_id)
            .subquery()
        )

    def _summary_select(self, stats) -> tuple[Select, Any, Any]:
        average_rating = func.coalesce(stats.c.average_rating, 0.0)
        review_count = func.coalesce(stats.c.review_count, 0)
        stmt = (
            select(AdvisorModel, UserModel, average_rating, review_count)
            .join(UserModel, UserModel.id == AdvisorModel.user_id)
            .outerjoin(stats, stats.c.advisor_id == AdvisorModel.user_id)
        )
        return stmt, average_rating, review_count

    @staticmethod
    def _row_to_summary(advisor_model: AdvisorModel, user_model: UserModel, rating, count) -> AdvisorSummary:
        return AdvisorSummary(
            advisor_id=advisor_model.user_id,
            nickname=user_model.nickname,
            profile_image_url=advisor_model.profile_image_url,
            short_intro=advisor_model.short_intro,
            preferred_trade_style=TradeStyle(advisor_model.preferred_trade_style)
            if advisor_model.preferred_trade_style
            else None,
            consultation_fee=advisor_model.consultation_fee,
            average_rating=round(float(rating or 0), 1),
            review_count=int(count or 0),
        )

    @Logger.io
    async def create_account(
        self, *, user: UserEntity, advisor: Advisor, approval_request: ApprovalRequest
    ) -> tuple[UserEntity, Advisor, ApprovalRequest]:
        async with self.session_factory() as session:
            user_model = new_user_model(user)
            session.add(user_model)
            await session.flush()

            advisor_model = AdvisorModel(
                user_id=user_model.id,
                consultation_fee=advisor.consultation_fee,
                profile_image_url=advisor.profile_image_url,
                is_approved=False,
                is_profile_completed=False,
            )
            request_model = ApprovalRequestModel(
                advisor_id=user_model.id,
                certificate_name=approval_request.certificate_name,
                certificate_file_sn=approval_request.certificate_file_sn,
                birth=approval_request.birth,
                certificate_file_number=approval_request.certificate_file_number,
                status=approval_request.status.value,
            )
            session.add(advisor_model)
            await session.flush()
            session.add(request_model)

            await session.commit()
            await session.refresh(user_model)
            await session.refresh(advisor_model)
            await session.refresh(request_model)

            return (
                user_model_to_entity(user_model),
                advisor_model_to_entity(advisor_model, user_model),
                approval_model_to_entity(request_model),
            )

    @Logger.io
    async def get_by_id(self, advisor_id: int) -> Optional[Advisor]:
        async with self.session_factory() as session:
            result = await session.execute(
                select(AdvisorModel, UserModel)
                .join(UserModel, UserModel.id == AdvisorModel.user_id)
                .where(AdvisorModel.user_id == advisor_id)
            )
            row = result.first()
            return advisor_model_to_entity(row[0], row[1]) if row else None

    @Logger.io
    async def get_summary(self, advisor_id: int) -> Optional[AdvisorSummary]:
        stmt, _, _ = self._summary_select(self._review_stats())
        async with self.session_factory() as session:
            result = await session.execute(stmt.where(AdvisorModel.user_id == advisor_id))
            row = result.first()
            return self._row_to_summary(*row) if row else None

    @Logger.io
    async def list_approved(
        self,
        *,
        trade_styles: List[TradeStyle],
        sort_by: AdvisorSortBy,
        cursor: Optional[int],
        limit: int,
    ) -> List[AdvisorSummary]:
        stats = self._review_stats()
        stmt, average_rating, review_count = self._summary_select(stats)
        metric = average_rating if sort_by == AdvisorSortBy.RATING else review_count

        stmt = stmt.where(AdvisorModel.is_approved.is_(True))
        if trade_styles:
            stmt = stmt.where(
                AdvisorModel.preferred_trade_style.in_([style.value for style in trade_styles])
            )

        async with self.session_factory() as session:
            if cursor is not None:
                # Keyset on (metric, id): resume strictly after the cursor row
                cursor_result = await session.execute(
                    select(metric)
                    .select_from(AdvisorModel)
                    .outerjoin(stats, stats.c.advisor_id == AdvisorModel.user_id)
                    .where(AdvisorModel.user_id == cursor)
                )
                cursor_metric = cursor_result.scalar()
                if cursor_metric is not None:
                    stmt = stmt.where(
                        or_(
                            metric < cursor_metric,
                            and_(metric == cursor_metric, AdvisorModel.user_id < cursor),
                        )
                    )

            result = await session.execute(
                stmt.order_by(metric.desc(), AdvisorModel.user_id.desc()).limit(limit)
            )
            return [self._row_to_summary(*row) for row in result.all()]

    @Logger.io
    async def list_careers(self, advisor_id: int) -> List[AdvisorCareer]:
        async with self.session_factory() as session:
            result = await session.execute(
                select(AdvisorCareerModel)
                .where(AdvisorCareerModel.advisor_id == advisor_id)
                .order_by(AdvisorCareerModel.id)
            )
            return [
                AdvisorCareer(
                    id=career.id,
                    advisor_id=career.advisor_id,
                    title=career.title,
                    description=career.description,
                    started_at=career.started_at,
                    ended_at=career.ended_at,
                    created_at=career.created_at,
                )
                for career in result.scalars().all()
            ]

    @Logger.io
    async def list_certificates(self, advisor_ids: List[int]) -> Dict[int, List[AdvisorCertificate]]:
        if not advisor_ids:
            return {}

        async with self.session_factory() as session:
            result = await session.execute(
                select(AdvisorCertificateModel)
                .where(AdvisorCertificateModel.advisor_id.in_(advisor_ids))
                .order_by(AdvisorCertificateModel.id)
            )
            certificates: Dict[int, List[AdvisorCertificate]] = defaultdict(list)
            for cert in result.scalars().all():
                certificates[cert.advisor_id].append(
                    AdvisorCertificate(
                        id=cert.id,
                        advisor_id=cert.advisor_id,
                        certificate_name=cert.certificate_name,
                        certificate_file_sn=cert.certificate_file_sn,
                        birth=cert.birth,
                        certificate_file_number=cert.certificate_file_number,
                        created_at=cert.created_at,
                    )
                )
            return dict(certificates)

    @Logger.io
    async def save_profile(
        self,
        *,
        advisor: Advisor,
        creates: List[CareerChange],
        updates: List[CareerChange],
        delete_ids: List[int],
    ) -> Advisor:
        async with self.session_factory() as session:
            advisor_model = await session.get(AdvisorModel, advisor.user_id)
            if not advisor_model:
                raise NotFoundError('Advisor not found')

            advisor_model.short_intro = advisor.short_intro
            advisor_model.long_intro = advisor.long_intro
            advisor_model.preferred_trade_style = (
                advisor.preferred_trade_style.value if advisor.preferred_trade_style else None
            )
            advisor_model.public_contact = advisor.public_contact
            advisor_model.profile_image_url = advisor.profile_image_url
            advisor_model.consultation_fee = advisor.consultation_fee
            advisor_model.is_profile_completed = advisor.is_profile_completed

            for change in creates:
                session.add(
                    AdvisorCareerModel(
                        advisor_id=advisor.user_id,
                        title=(change.title or '').strip(),
                        description=(change.description or '').strip(),
                        started_at=change.started_at,
                        ended_at=change.ended_at,
                    )
                )

            for change in updates:
                career = await session.get(AdvisorCareerModel, change.id)
                if career and career.advisor_id == advisor.user_id:
                    career.title = (change.title or '').strip()
                    career.description = (change.description or '').strip()
                    career.started_at = change.started_at
                    career.ended_at = change.ended_at

            if delete_ids:
                await session.execute(
                    delete(AdvisorCareerModel).where(
                        AdvisorCareerModel.advisor_id == advisor.user_id,
                        AdvisorCareerModel.id.in_(delete_ids),
                    )
                )

            await session.commit()

            user_model = await session.get(UserModel, advisor.user_id)
            await session.refresh(advisor_model)
            return advisor_model_to_entity(advisor_model, user_model)  # type: ignore[arg-type]

    @Logger.io
    async def get_blocked_times(self, *, advisor_id: int, day: date) -> List[time]:
        async with self.session_factory() as session:
            result = await session.execute(
                select(AdvisorBlockedTimeModel.blocked_time).where(
                    AdvisorBlockedTimeModel.advisor_id == advisor_id,
                    AdvisorBlockedTimeModel.blocked_date == day,
                )
            )
            return list(result.scalars().all())

    @Logger.io
    async def replace_blocked_times(self, *, advisor_id: int, day: date, times: List[time]) -> None:
        async with self.session_factory() as session:
            await session.execute(
                delete(AdvisorBlockedTimeModel).where(
                    AdvisorBlockedTimeModel.advisor_id == advisor_id,
                    AdvisorBlockedTimeModel.blocked_date == day,
                )
            )
            for slot in sorted(set(times)):
                session.add(
                    AdvisorBlockedTimeModel(
                        advisor_id=advisor_id, blocked_date=day, blocked_time=slot
                    )
                )
            await session.commit()
