#!/usr/bin/env python3
"""
Database Seed Script
Populate demo accounts into the database

Features:
1. Create Admin - operator account for the certificate approval queue
2. Create Users - two investors who can book consultations
3. Create Advisor - signed up, approved by the admin, profile completed

Notes:
- Run after `migrate` (or script/reset_database.py); accounts that already exist are skipped
- Domain events have no listeners here, so no notifications are produced
"""

import asyncio
from dataclasses import dataclass

from sqlalchemy import text

from src.platform.config.di import container
from src.platform.database.orm_db_setting import dispose_engine, get_session_maker
from src.service.marketplace.app.command.advisor_profile_use_case import AdvisorProfileUseCase
from src.service.marketplace.app.command.process_advisor_approval_use_case import (
    ProcessAdvisorApprovalUseCase,
)
from src.service.marketplace.app.command.signup_use_case import SignupUseCase
from src.service.marketplace.domain.entity.advisor_entity import CareerAction, CareerChange
from src.service.marketplace.domain.entity.user_entity import UserEntity, UserRole
from src.service.marketplace.domain.enum.trade_style import TradeStyle


DEFAULT_PASSWORD = 'P@ssw0rd1'


@dataclass
class UserConfig:
    """User seed configuration"""

    login_id: str
    name: str
    nickname: str
    contact: str


ADMIN = UserConfig(
    login_id='admin', name='Operator', nickname='operator', contact='010-0000-0000'
)
TEST_USERS = [
    UserConfig(login_id='investor01', name='Kim Minsu', nickname='minsu', contact='01011112222'),
    UserConfig(login_id='investor02', name='Park Yuna', nickname='yuna', contact='01033334444'),
]
ADVISOR = UserConfig(
    login_id='advisor01', name='Lee Jiwon', nickname='jiwon', contact='01055556666'
)


def _signup_params(user: UserConfig) -> dict:
    return {
        'login_id': user.login_id,
        'name': user.name,
        'nickname': user.nickname,
        'password': DEFAULT_PASSWORD,
        'password_confirm': DEFAULT_PASSWORD,
        'contact': user.contact,
        'email': f'{user.login_id}@example.com',
        'agreed_terms': True,
        'agreed_privacy': True,
    }


async def _exists(login_id: str) -> bool:
    return await container.user_query_repo().exists_by_login_id(login_id)


async def create_admin() -> int:
    """Admins have no signup endpoint; the row is written directly"""
    if await _exists(ADMIN.login_id):
        admin = await container.user_query_repo().get_by_login_id(ADMIN.login_id)
        print(f'   ⏭️  Admin {ADMIN.login_id} already exists (ID={admin.id})')
        return admin.id

    admin = UserEntity(
        login_id=ADMIN.login_id,
        name=ADMIN.name,
        nickname=ADMIN.nickname,
        email=f'{ADMIN.login_id}@example.com',
        contact=ADMIN.contact,
        role=UserRole.ADMIN,
        is_verified=True,
        terms_agreed=True,
    )
    admin.set_password(DEFAULT_PASSWORD, container.password_hasher())
    created = await container.user_command_repo().create(admin)
    print(f'   ✅ Admin created: ID={created.id}, login_id={created.login_id}')
    return created.id


async def create_users(signup: SignupUseCase) -> None:
    for user in TEST_USERS:
        if await _exists(user.login_id):
            print(f'   ⏭️  User {user.login_id} already exists')
            continue
        created = await signup.signup_user(**_signup_params(user))
        print(f'   ✅ User created: ID={created.id}, login_id={created.login_id}')


async def create_advisor(signup: SignupUseCase, admin_id: int) -> None:
    if await _exists(ADVISOR.login_id):
        print(f'   ⏭️  Advisor {ADVISOR.login_id} already exists')
        return

    account = await signup.signup_advisor(
        **_signup_params(ADVISOR),
        certificate_name='Investment Advisor',
        certificate_file_sn='12345678',
        birth='19900101',
        certificate_file_number='123456',
    )
    print(f'   ✅ Advisor signed up: ID={account.user_id}')

    approval = ProcessAdvisorApprovalUseCase(
        approval_request_repo=container.approval_request_repo(),
        advisor_repo=container.advisor_repo(),
        event_publisher=container.event_bus(),
    )
    await approval.approve(request_id=account.approval_request_id, admin_id=admin_id)
    print(f'   ✅ Certificate request {account.approval_request_id} approved')

    profile = AdvisorProfileUseCase(advisor_repo=container.advisor_repo())
    await profile.create_profile(
        advisor_id=account.user_id,
        short_intro='Ten years of swing trading',
        preferred_trade_style=TradeStyle.MID,
        long_intro='Former securities analyst focused on mid-term momentum setups.',
        consultation_fee=50000,
        career_entries=[
            CareerChange(
                action=CareerAction.CREATE,
                title='Securities analyst',
                description='Equity research desk',
            )
        ],
    )
    print('   ✅ Advisor profile completed')


async def verify_data():
    """Verify seeded data"""
    print('🔍 Verifying seeded data...')

    async with get_session_maker()() as session:
        for table in ['users', 'advisors', 'advisor_approval_requests']:
            result = await session.execute(text(f'SELECT COUNT(*) FROM {table}'))
            print(f'   {table} count: {result.scalar()}')

        result = await session.execute(text('SELECT id, login_id, role FROM users ORDER BY id'))
        for user in result.fetchall():
            print(f'      User ID={user[0]}, login_id={user[1]}, Role={user[2]}')

    print('   ✅ Data verification completed!')


async def main():
    print('🌱 Starting data seeding...')
    print('=' * 50)

    signup = SignupUseCase(
        user_query_repo=container.user_query_repo(),
        user_command_repo=container.user_command_repo(),
        advisor_repo=container.advisor_repo(),
        password_hasher=container.password_hasher(),
    )

    try:
        admin_id = await create_admin()
        await create_users(signup)
        await create_advisor(signup, admin_id)
        print()
        await verify_data()

        print()
        print('=' * 50)
        print('🌱 Data seeding completed!')
        print('📋 Test accounts:')
        for user in [ADMIN, *TEST_USERS, ADVISOR]:
            print(f'   {user.login_id} / {DEFAULT_PASSWORD}')

    except Exception as e:
        print(f'❌ Seeding failed: {e}')
        exit(1)

    finally:
        await dispose_engine()


if __name__ == '__main__':
    asyncio.run(main())
