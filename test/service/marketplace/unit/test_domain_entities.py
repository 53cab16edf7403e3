from datetime import time, timedelta

import attrs
import pytest

from src.platform.exception.exceptions import (
    ConflictError,
    DomainError,
    ForbiddenError,
    NotFoundError,
)
from src.service.marketplace.domain import consultation_schedule
from src.service.marketplace.domain.entity.advisor_entity import (
    Advisor,
    AdvisorCareer,
    CareerAction,
    CareerChange,
    plan_career_changes,
    validate_initial_career_entries,
)
from src.service.marketplace.domain.entity.approval_request_entity import (
    ApprovalRequest,
    ApprovalStatus,
    RejectionReason,
)
from src.service.marketplace.domain.entity.community_entity import (
    Comment,
    Post,
    writable_categories_for,
)
from src.service.marketplace.domain.entity.reservation_entity import (
    Reservation,
    ReservationStatus,
)
from src.service.marketplace.domain.entity.review_entity import Review
from src.service.marketplace.domain.entity.user_entity import UserEntity, UserRole
from src.service.marketplace.domain.enum.post_category import PostCategory
from src.service.marketplace.domain.enum.trade_style import TradeStyle


def _user(user_id: int, role: UserRole = UserRole.USER) -> UserEntity:
    return UserEntity(
        id=user_id,
        login_id=f'user{user_id}',
        name='Kim Minsu',
        nickname=f'nick{user_id}',
        email=f'user{user_id}@example.com',
        contact='010-1234-5678',
        role=role,
    )


@pytest.mark.unit
class TestUserEntity:
    def test_contact_is_hyphenated(self):
        updated, fields = _user(1).apply_profile_update(name=None, contact='01055556666')

        assert updated.contact == '010-5555-6666'
        assert fields == ['contact']

    def test_nothing_to_update(self):
        with pytest.raises(DomainError) as exc_info:
            _user(1).apply_profile_update(name='  ', contact=None)

        assert exc_info.value.message == 'NO_UPDATE_FIELDS'

    def test_same_data(self):
        with pytest.raises(DomainError) as exc_info:
            _user(1).apply_profile_update(name='Kim Minsu', contact='01012345678')

        assert exc_info.value.message == 'SAME_DATA_UPDATE'

    def test_bad_phone(self):
        with pytest.raises(DomainError) as exc_info:
            _user(1).apply_profile_update(name=None, contact='0212345678')

        assert exc_info.value.message == 'INVALID_PHONE_FORMAT'

    def test_deactivate_once(self):
        inactive = _user(1).deactivate()

        assert inactive.is_active is False
        with pytest.raises(DomainError):
            inactive.deactivate()
        with pytest.raises(ForbiddenError):
            inactive.validate_active()

    @pytest.mark.parametrize('password', ['short1!A', 'N3w-Passw0rd!'])
    def test_valid_new_password(self, password: str):
        UserEntity.validate_new_password(password)

    @pytest.mark.parametrize(
        'password', ['alllowercase1!', 'NoDigits!!', 'NoSpecial123', 'Sp ace1!A']
    )
    def test_weak_new_password(self, password: str):
        with pytest.raises(DomainError):
            UserEntity.validate_new_password(password)


@pytest.mark.unit
class TestAdvisorEntity:
    @pytest.fixture
    def approved(self) -> Advisor:
        return Advisor(user_id=5, consultation_fee=30000, is_approved=True)

    def test_complete_profile(self, approved: Advisor):
        completed = approved.complete_profile(
            short_intro='  Ten years of swing trading ',
            preferred_trade_style=TradeStyle.MID,
            consultation_fee=50000,
        )

        assert completed.is_profile_completed is True
        assert completed.short_intro == 'Ten years of swing trading'
        assert completed.consultation_fee == 50000

    def test_unapproved_cannot_complete_profile(self):
        with pytest.raises(ForbiddenError) as exc_info:
            Advisor(user_id=5, consultation_fee=30000).complete_profile(
                short_intro='Hello', preferred_trade_style=TradeStyle.SHORT
            )

        assert exc_info.value.message == 'ADVISOR_NOT_APPROVED'

    def test_profile_only_once(self, approved: Advisor):
        completed = approved.complete_profile(
            short_intro='Hello', preferred_trade_style=TradeStyle.SHORT
        )

        with pytest.raises(ConflictError):
            completed.complete_profile(short_intro='Again', preferred_trade_style=TradeStyle.SHORT)

    @pytest.mark.parametrize('fee', [9_999, 1_000_001])
    def test_fee_out_of_range(self, approved: Advisor, fee: int):
        with pytest.raises(DomainError):
            approved.complete_profile(
                short_intro='Hello', preferred_trade_style=TradeStyle.LONG, consultation_fee=fee
            )

    def test_update_requires_profile(self, approved: Advisor):
        with pytest.raises(NotFoundError):
            approved.apply_profile_update(short_intro='Hello')

    def test_initial_careers_must_be_creates(self):
        with pytest.raises(DomainError):
            validate_initial_career_entries([])
        with pytest.raises(DomainError):
            validate_initial_career_entries(
                [CareerChange(action=CareerAction.DELETE, title='t', description='d', id=1)]
            )

    def test_plan_career_changes(self):
        existing = [
            AdvisorCareer(title='Analyst', description='Desk', id=1),
            AdvisorCareer(title='Trader', description='Prop', id=2),
        ]

        creates, updates, delete_ids = plan_career_changes(
            existing=existing,
            changes=[
                CareerChange(action=CareerAction.CREATE, title='Mentor', description='Club'),
                CareerChange(action=CareerAction.UPDATE, id=1, title='Analyst', description='Lead'),
                CareerChange(action=CareerAction.DELETE, id=2),
            ],
        )

        assert [c.title for c in creates] == ['Mentor']
        assert [u.id for u in updates] == [1]
        assert delete_ids == [2]

    def test_cannot_touch_foreign_career(self):
        with pytest.raises(ForbiddenError):
            plan_career_changes(
                existing=[AdvisorCareer(title='Analyst', description='Desk', id=1)],
                changes=[CareerChange(action=CareerAction.DELETE, id=99)],
            )

    def test_last_career_cannot_be_deleted(self):
        with pytest.raises(DomainError):
            plan_career_changes(
                existing=[AdvisorCareer(title='Analyst', description='Desk', id=1)],
                changes=[CareerChange(action=CareerAction.DELETE, id=1)],
            )


@pytest.mark.unit
class TestApprovalRequest:
    @pytest.fixture
    def pending(self) -> ApprovalRequest:
        return ApprovalRequest(
            advisor_id=5,
            certificate_name='Investment Advisor',
            certificate_file_sn='12345678',
            birth='19900101',
            certificate_file_number='123456',
            id=1,
        )

    def test_approve(self, pending: ApprovalRequest):
        approved = pending.approve(admin_id=9)

        assert approved.status == ApprovalStatus.APPROVED
        assert approved.processed_by == 9
        assert approved.processed_at is not None

    def test_decision_only_once(self, pending: ApprovalRequest):
        approved = pending.approve(admin_id=9)

        with pytest.raises(ConflictError):
            approved.reject(
                admin_id=9, reason=RejectionReason.INVALID_CERTIFICATE, custom_reason=None
            )

    def test_reject_other_needs_custom_reason(self, pending: ApprovalRequest):
        with pytest.raises(DomainError):
            pending.reject(admin_id=9, reason=RejectionReason.OTHER, custom_reason='   ')

        rejected = pending.reject(
            admin_id=9, reason=RejectionReason.OTHER, custom_reason=' Unreadable scan '
        )
        assert rejected.status == ApprovalStatus.REJECTED
        assert rejected.custom_reason == 'Unreadable scan'


@pytest.mark.unit
class TestCommunityEntities:
    def test_user_writes_questions_only(self):
        assert writable_categories_for(UserRole.USER) == [PostCategory.QUESTION]
        assert PostCategory.ALL not in writable_categories_for(UserRole.ADVISOR)

        with pytest.raises(ForbiddenError):
            Post.create(
                author=_user(1), category=PostCategory.TRADE_RECORD, title='t', content='c'
            )

    def test_all_is_never_writable(self):
        with pytest.raises(DomainError):
            Post.create(
                author=_user(1, UserRole.ADMIN), category=PostCategory.ALL, title='t', content='c'
            )

    def test_title_is_trimmed_and_bounded(self):
        post = Post.create(
            author=_user(1), category=PostCategory.QUESTION, title='  Sizing  ', content='Body'
        )
        assert post.title == 'Sizing'

        with pytest.raises(DomainError):
            Post.create(
                author=_user(1), category=PostCategory.QUESTION, title='x' * 101, content='c'
            )

    def test_admin_edits_any_post(self):
        post = attrs.evolve(
            Post.create(author=_user(1), category=PostCategory.QUESTION, title='t', content='c'),
            id=3,
        )

        edited = post.edit(
            editor=_user(2, UserRole.ADMIN),
            category=PostCategory.MARKET_ANALYSIS,
            title='Moved',
            content='c',
        )
        assert edited.category == PostCategory.MARKET_ANALYSIS

        with pytest.raises(ForbiddenError):
            post.validate_deletable_by(_user(2))

    def test_comment_length(self):
        with pytest.raises(DomainError):
            Comment.create(post_id=1, author_id=1, content='   ')
        with pytest.raises(DomainError):
            Comment.create(post_id=1, author_id=1, content='x' * 1001)


@pytest.mark.unit
class TestReviewEntity:
    @pytest.fixture
    def completed(self) -> Reservation:
        day = consultation_schedule.today() + timedelta(days=2)
        while consultation_schedule.is_weekend(day):
            day += timedelta(days=1)
        booked = Reservation.create(client_id=1, advisor_id=2, date=day, start_time=time(10))
        return attrs.evolve(booked, id=7).complete(advisor_id=2)

    def test_write_for_completed_consultation(self, completed: Reservation):
        review = Review.write_for(
            reservation=completed, user_id=1, rating=5, content='  Clear and practical advice.  '
        )

        assert review.advisor_id == 2
        assert review.reservation_id == 7
        assert review.content == 'Clear and practical advice.'

    def test_only_the_client_reviews(self, completed: Reservation):
        with pytest.raises(ForbiddenError) as exc_info:
            Review.write_for(reservation=completed, user_id=2, rating=5, content='x' * 20)

        assert exc_info.value.message == 'NOT_RESERVATION_OWNER'

    def test_pending_consultation(self, completed: Reservation):
        pending = attrs.evolve(completed, status=ReservationStatus.PENDING)

        with pytest.raises(DomainError) as exc_info:
            Review.write_for(reservation=pending, user_id=1, rating=5, content='x' * 20)

        assert exc_info.value.message == 'CONSULTATION_NOT_COMPLETED'

    @pytest.mark.parametrize('rating', [0, 6])
    def test_rating_bounds(self, completed: Reservation, rating: int):
        with pytest.raises(DomainError):
            Review.write_for(reservation=completed, user_id=1, rating=rating, content='x' * 20)

    def test_edit_by_owner_only(self, completed: Reservation):
        review = Review.write_for(reservation=completed, user_id=1, rating=4, content='x' * 20)

        edited = review.edit(user_id=1, rating=2, content='Changed my mind later.')
        assert edited.rating == 2

        with pytest.raises(ForbiddenError):
            review.edit(user_id=2, rating=2, content='Changed my mind later.')
