"""User service: turns a verified Google identity into a local user row."""

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from toolboard.auth.google import GoogleIdentity
from toolboard.db.models import User

logger = structlog.get_logger()


class UserService:
    """Business logic for users."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_user(self, user_id: int) -> User | None:
        return await self.db.get(User, user_id)

    async def get_by_email(self, email: str) -> User | None:
        result = await self.db.execute(select(User).where(User.email == email))
        return result.scalars().first()

    async def get_by_google_id(self, google_id: str) -> User | None:
        result = await self.db.execute(select(User).where(User.google_id == google_id))
        return result.scalars().first()

    async def upsert_from_google(self, identity: GoogleIdentity) -> User:
        """Find the user by email, creating or refreshing it.

        The first login creates the row. Later logins refresh the display
        name, avatar and Google subject; the id never changes, so session
        tokens issued earlier keep pointing at the same row.

        When the email is unknown but the Google subject is not (the
        account's address changed), that row is kept and its email updated.
        """
        user = await self.get_by_email(identity.email)
        if user is None:
            user = await self.get_by_google_id(identity.subject)
            if user is not None:
                logger.info(
                    "users.email_changed",
                    user_id=user.id,
                    old_email=user.email,
                    email=identity.email,
                )
                user.email = identity.email
        elif user.google_id != identity.subject:
            # The subject may still sit on a row whose old email this one took over.
            stale = await self.get_by_google_id(identity.subject)
            if stale is not None:
                stale.google_id = None
                await self.db.flush()

        if user is None:
            user = User(
                google_id=identity.subject,
                email=identity.email,
                name=identity.name,
                avatar_url=identity.picture,
            )
            self.db.add(user)
            await self.db.commit()
            await self.db.refresh(user)
            logger.info("users.created", user_id=user.id, email=user.email)
            return user

        user.google_id = identity.subject
        user.name = identity.name
        user.avatar_url = identity.picture
        await self.db.commit()
        await self.db.refresh(user)
        logger.info("users.refreshed", user_id=user.id, email=user.email)
        return user
