#!/usr/bin/env python3
"""
Database Reset Script
Reset PostgreSQL database structure

Features:
1. Drop & Recreate Database - completely wipe the database
2. Run Alembic Migrations - create the latest schema
3. Flush Redis - clear refresh tokens and notification counters

Notes:
- This script only resets database structure, does not seed demo data
- To seed demo accounts, run `python script/seed_data.py`
"""

import asyncio

import redis.asyncio as aioredis
from redis.exceptions import RedisError
from sqlalchemy import text
from sqlalchemy.ext.asyncio import create_async_engine

from src.platform.alembic.commands import upgrade
from src.platform.config.core_setting import settings


DB_WAIT_SECONDS = 1


def _parse_db_connection(database_url: str) -> tuple[str, str]:
    """Parse database URL and return (server_url, db_name)"""
    db_name = database_url.split('/')[-1]
    server_url = database_url.rsplit('/', 1)[0]
    return server_url, db_name


async def _drop_and_create_db(server_url: str, db_name: str) -> None:
    """Drop and recreate database"""
    admin_engine = create_async_engine(f'{server_url}/postgres', isolation_level='AUTOCOMMIT')

    try:
        async with admin_engine.connect() as conn:
            await conn.execute(
                text(
                    'SELECT pg_terminate_backend(pid) FROM pg_stat_activity '
                    'WHERE datname = :db_name AND pid <> pg_backend_pid()'
                ),
                {'db_name': db_name},
            )

            await conn.execute(text(f'DROP DATABASE IF EXISTS {db_name};'))
            print(f"   ✅ Database '{db_name}' dropped")

            await asyncio.sleep(DB_WAIT_SECONDS)

            await conn.execute(text(f'CREATE DATABASE {db_name};'))
            print(f"   ✅ Database '{db_name}' created")
    finally:
        await admin_engine.dispose()


async def drop_and_recreate_database() -> None:
    if settings.IS_SQLITE:
        raise RuntimeError('reset_database only targets PostgreSQL; delete the sqlite file instead')

    server_url, db_name = _parse_db_connection(settings.DATABASE_URL_ASYNC)
    print(f'Server URL: {server_url}')
    print(f'Database name: {db_name}')

    print('🗑️ Dropping database...')
    await _drop_and_create_db(server_url, db_name)

    print('🏗️ Running database migrations...')
    return_code = upgrade()
    if return_code != 0:
        raise RuntimeError(f'Alembic migration failed with return code {return_code}')
    print('   ✅ Database migrations completed')


async def flush_redis():
    """Flush refresh tokens and notification counters"""
    try:
        print('🗑️  Flushing Redis...')

        client = aioredis.from_url(
            f'redis://{settings.REDIS_HOST}:{settings.REDIS_PORT}/{settings.REDIS_DB}',
            password=settings.REDIS_PASSWORD or None,
            decode_responses=True,
        )
        await client.flushdb()
        await client.aclose()

        print('✅ Redis flushed successfully!')

    except RedisError as e:
        print(f'⚠️  Failed to flush Redis (non-critical): {e}')
        print('    Redis may not be running, continuing anyway...')


async def main():
    print('🔄 Starting database reset...')
    print('=' * 50)

    try:
        await drop_and_recreate_database()
        print()

        await flush_redis()
        print()

        print('=' * 50)
        print('✅ Database reset completed!')
        print('💡 To seed demo accounts, run: python script/seed_data.py')

    except Exception as e:
        print(f'❌ Reset failed: {e}')
        exit(1)


if __name__ == '__main__':
    asyncio.run(main())
