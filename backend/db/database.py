import asyncpg
import json
import logging
import ssl
from utils.config import Settings

logger = logging.getLogger(__name__)

CREATE_PRODUCTS_TABLE = """
CREATE TABLE IF NOT EXISTS products (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    brand TEXT NOT NULL,
    category TEXT,
    size TEXT,
    image TEXT,
    alt TEXT,
    featured BOOLEAN NOT NULL DEFAULT FALSE,
    detail JSONB NOT NULL DEFAULT '{"priceOptions": []}'::jsonb,
    created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
)
"""

CREATE_UPDATED_AT_INDEX = (
    "CREATE INDEX IF NOT EXISTS products_updated_at_idx ON products (updated_at DESC)"
)


def build_ssl_option(settings: Settings):
    if not settings.db_ssl:
        return None
    context = ssl.create_default_context()
    if not settings.db_ssl_reject_unauthorized:
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE
    return context


async def init_connection(connection: asyncpg.Connection):
    await connection.set_type_codec(
        "jsonb", encoder=json.dumps, decoder=json.loads, schema="pg_catalog"
    )


async def create_pool(settings: Settings):
    try:
        pool = await asyncpg.create_pool(
            dsn=settings.database_url,
            min_size=settings.db_pool_min_size,
            max_size=settings.db_pool_max_size,
            ssl=build_ssl_option(settings),
            init=init_connection,
        )
        logger.info("Database connection pool created")
        return pool
    except Exception as e:
        logger.error(f"Could not create connection pool: {e}")
        raise


async def ensure_products_table(pool: asyncpg.Pool):
    async with pool.acquire() as connection:
        await connection.execute(CREATE_PRODUCTS_TABLE)
        await connection.execute(CREATE_UPDATED_AT_INDEX)
    logger.info("products table ready")


async def close_pool(pool: asyncpg.Pool):
    if pool:
        await pool.close()
