"""Seed the platform admin account. Usage: python -m rewear.create_admin"""

import asyncio

from rewear.core.config import get_settings
from rewear.core.logging import configure_logging, get_logger
from rewear.db.init import init_db
from rewear.services.users import ensure_platform_admin

log = get_logger(__name__)


async def main() -> None:
    settings = get_settings()
    configure_logging(debug=settings.debug, env=settings.env)
    await init_db()
    admin, created = await ensure_platform_admin()
    if created:
        log.info("admin_seeded", email=admin.email, points=admin.points)
    else:
        log.info("admin_exists", email=admin.email, points=admin.points)


if __name__ == "__main__":
    asyncio.run(main())
