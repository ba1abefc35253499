"""
PostgreSQL persistence for users.
"""

from psycopg import errors as pg_errors
from psycopg import sql

from memoreel.db.helpers import DatabaseError, execute_query, fetch_one
from memoreel.db.pool import DatabasePoolManager
from memoreel.infrastructure.observability.logging import get_logger
from memoreel.models.domain.errors import (
    DuplicateEmailError,
    UserNotDeletedError,
    UserNotFoundError,
    UserNotUpdatedError,
)
from memoreel.models.domain.user_domain import User
from memoreel.utils.emails import normalize_email
from memoreel.utils.model_helpers import refresh_model

logger = get_logger(__name__)


def is_duplicate_email(error: DatabaseError) -> bool:
    """True when a unique violation was raised by the users.email constraint."""
    cause = error.__cause__
    if not isinstance(cause, pg_errors.UniqueViolation):
        return False

    constraint = cause.diag.constraint_name or ""
    return "email" in constraint or "email" in str(cause)


class PostgresUserRepository:
    """UserRepository backed by the users table."""

    USER_COLUMNS = """
        id, first_name, last_name, email, password, email_verified,
        reset_password_token, email_verification_token,
        reset_password_expires_at, email_verification_expires_at,
        created_at, updated_at, deleted_at
    """

    def __init__(self, db: DatabasePoolManager):
        self.db = db

    async def _fetch_user(self, column: str, value: str) -> User:
        query = sql.SQL(
            "SELECT {columns} FROM users WHERE {column} = %s AND deleted_at IS NULL"
        ).format(columns=sql.SQL(self.USER_COLUMNS), column=sql.Identifier(column))

        row = await fetch_one(self.db, query, (value,))
        if not row:
            raise UserNotFoundError(lookup=column)

        return User.model_validate(row)

    async def get_user_by_id(self, user_id: str) -> User:
        return await self._fetch_user("id", user_id)

    async def get_user_by_email(self, email: str) -> User:
        return await self._fetch_user("email", normalize_email(email))

    async def get_user_by_reset_password_token(self, token: str) -> User:
        return await self._fetch_user("reset_password_token", token)

    async def get_user_by_email_verification_token(self, token: str) -> User:
        return await self._fetch_user("email_verification_token", token)

    async def create_user(self, user: User) -> User:
        """
        Insert a user and refresh it with the stored row (timestamps included).

        Raises:
            DuplicateEmailError: the email is already registered
            DatabaseError: any other storage failure
        """
        query = f"""
            INSERT INTO users (
                id, first_name, last_name, email, password, email_verified,
                reset_password_token, email_verification_token,
                reset_password_expires_at, email_verification_expires_at
            )
            VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
            RETURNING {self.USER_COLUMNS}
        """
        params = (
            user.id,
            user.first_name,
            user.last_name,
            user.email,
            user.password,
            user.email_verified,
            user.reset_password_token,
            user.email_verification_token,
            user.reset_password_expires_at,
            user.email_verification_expires_at,
        )

        try:
            row = await fetch_one(self.db, query, params)
        except DatabaseError as e:
            if is_duplicate_email(e):
                logger.info("User email already registered", user_id=user.id)
                raise DuplicateEmailError() from e
            raise

        logger.info("User created", user_id=user.id)
        return refresh_model(user, User.model_validate(row))

    async def update_user(self, user: User) -> None:
        query = """
            UPDATE users SET
                first_name = %s,
                last_name = %s,
                email = %s,
                password = %s,
                email_verified = %s,
                reset_password_token = %s,
                email_verification_token = %s,
                reset_password_expires_at = %s,
                email_verification_expires_at = %s,
                updated_at = NOW()
            WHERE id = %s AND deleted_at IS NULL
        """
        params = (
            user.first_name,
            user.last_name,
            user.email,
            user.password,
            user.email_verified,
            user.reset_password_token,
            user.email_verification_token,
            user.reset_password_expires_at,
            user.email_verification_expires_at,
            user.id,
        )

        try:
            affected_rows = await execute_query(self.db, query, params)
        except DatabaseError as e:
            if is_duplicate_email(e):
                raise DuplicateEmailError() from e
            raise

        if affected_rows < 1:
            raise UserNotUpdatedError(user_id=user.id)

    async def delete_user(self, user_id: str) -> None:
        query = """
            UPDATE users SET deleted_at = NOW()
            WHERE id = %s AND deleted_at IS NULL
        """
        affected_rows = await execute_query(self.db, query, (user_id,))
        if affected_rows < 1:
            raise UserNotDeletedError(user_id=user_id)

        logger.info("User soft-deleted", user_id=user_id)
