"""
PostgreSQL pool, schema migrations and seed data
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import List, Optional

import asyncpg

from shared.config import settings

logger = logging.getLogger(__name__)

MIGRATIONS_DIR = Path(__file__).parent / "migrations"

_pool: Optional[asyncpg.Pool] = None


async def init_database(dsn: Optional[str] = None) -> None:
    """
    Create the connection pool

    Args:
        dsn: Connection string (defaults to DATABASE_URL)
    """
    global _pool

    if _pool is not None:
        logger.warning("Database pool already initialized")
        return

    try:
        _pool = await asyncpg.create_pool(
            dsn=dsn or settings.DATABASE_URL,
            min_size=1,
            max_size=10,
            command_timeout=60,
            max_inactive_connection_lifetime=300
        )

        async with _pool.acquire() as conn:
            version = await conn.fetchval("SHOW server_version")
            logger.info(f"Connected to PostgreSQL {version}")

    except Exception as e:
        logger.error(f"Failed to initialize database pool: {e}", exc_info=True)
        raise


async def close_database() -> None:
    global _pool

    if _pool is None:
        return

    try:
        await _pool.close()
        logger.info("Database connection pool closed")
    except Exception as e:
        logger.error(f"Error closing database pool: {e}", exc_info=True)
    finally:
        _pool = None


@asynccontextmanager
async def get_db_connection():
    """
    Borrow a connection from the pool, creating the pool on first use

    Usage:
        async with get_db_connection() as conn:
            rows = await conn.fetch("SELECT * FROM transactions WHERE user_id = $1", user_id)
    """
    if _pool is None:
        await init_database()

    async with _pool.acquire() as connection:
        yield connection


def migration_files() -> List[Path]:
    """SQL migrations in the order they must be applied"""
    return sorted(MIGRATIONS_DIR.glob("*.sql"))


async def run_migrations() -> None:
    """
    Apply migrations that have not been applied yet

    Applied file names are recorded in schema_migrations, so running this on
    every start-up is safe.
    """
    async with get_db_connection() as conn:
        await conn.execute(
            """
            CREATE TABLE IF NOT EXISTS schema_migrations (
                name TEXT PRIMARY KEY,
                applied_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
            )
            """
        )
        applied = {row['name'] for row in await conn.fetch("SELECT name FROM schema_migrations")}

        for migration_file in migration_files():
            if migration_file.name in applied:
                continue

            logger.info(f"Applying migration {migration_file.name}")
            try:
                async with conn.transaction():
                    await conn.execute(migration_file.read_text(encoding='utf-8'))
                    await conn.execute(
                        "INSERT INTO schema_migrations (name) VALUES ($1)",
                        migration_file.name
                    )
            except Exception as e:
                logger.error(f"Migration {migration_file.name} failed: {e}", exc_info=True)
                raise


async def seed_default_users() -> None:
    """
    Insert the default profiles when the users table is empty
    """
    from database.repositories.user_repo import UserRepository
    from database.sanitize import sanitize_users
    from shared.constants import MOCK_USERS

    async with get_db_connection() as conn:
        user_repo = UserRepository(conn)

        if await user_repo.count() > 0:
            return

        async with conn.transaction():
            for user in sanitize_users(MOCK_USERS):
                await user_repo.upsert(user)

        logger.info(f"🌱 Seeded {len(MOCK_USERS)} default users")
