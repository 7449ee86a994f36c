#!/usr/bin/env python3
"""Seed a development database with a project, an event and a few join requests.

Usage:
    python scripts/seed_dev_data.py

Uses NESTED_DATABASE_URL (or the default from app.core.config). Prints a
session token for each seeded user so the API can be exercised directly.
"""

import asyncio
import uuid

import structlog

from app.core.auth import create_jwt
from app.core.database import init_db, session_scope
from app.core.logging import configure_logging
from app.services import requests, resources
from nested_shared.schemas.common import ResourceType
from nested_shared.schemas.resources import ResourceCreate

# Deterministic UUIDs for reproducibility
OWNER_ID = uuid.UUID("00000000-0000-0000-0000-000000000010")
MEMBER_IDS = [uuid.UUID(f"00000000-0000-0000-0000-0000000000{i}") for i in range(11, 14)]

log = structlog.get_logger()


async def seed():
    await init_db()

    async with session_scope() as session:
        project = await resources.create_resource(
            ResourceCreate(type=ResourceType.PROJECT, title="Campus Ride Share", capacity=4),
            OWNER_ID,
            session,
        )
        event = await resources.create_resource(
            ResourceCreate(type=ResourceType.EVENT, title="Hack Night", capacity=2),
            OWNER_ID,
            session,
        )

        for uid in MEMBER_IDS:
            await requests.request_join(
                session,
                project.id,
                uid,
                role="Frontend",
                message="I have built two React apps and would love to help out.",
            )
        for uid in MEMBER_IDS[:2]:
            await requests.request_join(session, event.id, uid)

    log.info("seed.done", project_id=str(project.id), event_id=str(event.id))
    for uid in [OWNER_ID, *MEMBER_IDS]:
        print(f"{uid}  Bearer {create_jwt(uid)}")


if __name__ == "__main__":
    configure_logging(fmt="text")
    asyncio.run(seed())
