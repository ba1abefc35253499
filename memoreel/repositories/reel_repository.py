"""
PostgreSQL persistence for reels and their recipients.

Recipients live in the reels.recipients JSONB array. Adding recipients is a
storage-side array concatenation and deleting one stamps its deleted_at
inside the array, so neither rewrites the whole document from memory.
"""

from psycopg import sql

from memoreel.db.helpers import execute_query, fetch_all, fetch_one
from memoreel.db.pool import DatabasePoolManager
from memoreel.infrastructure.observability.logging import get_logger
from memoreel.models.domain.errors import (
    RecipientNotDeletedError,
    RecipientNotFoundError,
    RecipientsNotAddedError,
    ReelNotDeletedError,
    ReelNotFoundError,
    ReelNotUpdatedError,
)
from memoreel.models.domain.pagination import Pageable, PaginationData, paginate
from memoreel.models.domain.recipients import decode_recipients, encode_recipients
from memoreel.models.domain.reel_domain import Recipient, Reel, ReelDeliveryStatus, ReelFilter
from memoreel.utils.emails import normalize_email
from memoreel.utils.model_helpers import refresh_model

logger = get_logger(__name__)


class PostgresReelRepository:
    """ReelRepository backed by the reels table."""

    REEL_COLUMNS = """
        id, user_id, video_id, email, title, description, private,
        recipients, email_confirmation_token, delivery_status, delivery_date,
        created_at, updated_at, deleted_at
    """

    def __init__(self, db: DatabasePoolManager):
        self.db = db

    @classmethod
    def _row_to_reel(cls, row: dict) -> Reel:
        data = dict(row)
        data["recipients"] = decode_recipients(row["recipients"])
        return Reel.model_validate(data)

    async def _fetch_reel(self, column: str, value: str) -> Reel:
        query = sql.SQL(
            "SELECT {columns} FROM reels WHERE {column} = %s AND deleted_at IS NULL"
        ).format(columns=sql.SQL(self.REEL_COLUMNS), column=sql.Identifier(column))

        row = await fetch_one(self.db, query, (value,))
        if not row:
            raise ReelNotFoundError(lookup=column)

        return self._row_to_reel(row)

    async def get_reel_by_id(self, reel_id: str) -> Reel:
        return await self._fetch_reel("id", reel_id)

    async def get_reel_by_email_confirmation_token(self, token: str) -> Reel:
        return await self._fetch_reel("email_confirmation_token", token)

    async def get_reels_paged(
        self, user_id: str, reel_filter: ReelFilter, pageable: Pageable
    ) -> tuple[list[Reel], PaginationData]:
        """
        List a user's reels, newest first, one page at a time.

        An unknown delivery_status in the filter is ignored rather than
        rejected. One extra row is fetched to tell whether another page exists.
        """
        conditions = [
            sql.SQL("user_id = %s"),
            sql.SQL("deleted_at IS NULL"),
            sql.SQL("id < %s"),
        ]
        params: list = [user_id, pageable.cursor]

        if ReelDeliveryStatus.is_valid(reel_filter.delivery_status):
            conditions.append(sql.SQL("delivery_status = %s"))
            params.append(ReelDeliveryStatus(reel_filter.delivery_status).value)

        query = sql.SQL(
            "SELECT {columns} FROM reels WHERE {where} ORDER BY id DESC LIMIT %s"
        ).format(
            columns=sql.SQL(self.REEL_COLUMNS),
            where=sql.SQL(" AND ").join(conditions),
        )
        params.append(pageable.limit())

        rows = await fetch_all(self.db, query, tuple(params))
        reels, pagination = paginate(
            [self._row_to_reel(row) for row in rows], pageable, key=lambda reel: reel.id
        )

        logger.debug(
            "Reels page fetched",
            user_id=user_id,
            returned=len(reels),
            has_more_pages=pagination.has_more_pages,
        )
        return reels, pagination

    async def create_reel(self, reel: Reel) -> Reel:
        query = f"""
            INSERT INTO reels (
                id, user_id, video_id, email, title, description, private,
                recipients, email_confirmation_token, delivery_status, delivery_date
            )
            VALUES (%s, %s, %s, %s, %s, %s, %s, %s::jsonb, %s, %s, %s)
            RETURNING {self.REEL_COLUMNS}
        """
        params = (
            reel.id,
            reel.user_id,
            reel.video_id,
            reel.email,
            reel.title,
            reel.description,
            reel.private,
            encode_recipients(reel.recipients).decode("utf-8"),
            reel.email_confirmation_token,
            ReelDeliveryStatus(reel.delivery_status).value,
            reel.delivery_date,
        )

        row = await fetch_one(self.db, query, params)

        logger.info("Reel created", reel_id=reel.id, video_id=reel.video_id)
        return refresh_model(reel, self._row_to_reel(row))

    async def update_reel(self, reel: Reel) -> None:
        """Update the reel's own columns. Recipients change only through the recipient methods."""
        query = """
            UPDATE reels SET
                user_id = %s,
                video_id = %s,
                email = %s,
                title = %s,
                description = %s,
                private = %s,
                delivery_status = %s,
                delivery_date = %s,
                email_confirmation_token = %s,
                updated_at = NOW()
            WHERE id = %s AND deleted_at IS NULL
        """
        params = (
            reel.user_id,
            reel.video_id,
            reel.email,
            reel.title,
            reel.description,
            reel.private,
            ReelDeliveryStatus(reel.delivery_status).value,
            reel.delivery_date,
            reel.email_confirmation_token,
            reel.id,
        )

        affected_rows = await execute_query(self.db, query, params)
        if affected_rows < 1:
            raise ReelNotUpdatedError(reel_id=reel.id)

    async def add_recipients(self, reel: Reel, recipients: list[Recipient]) -> None:
        """Append recipients in storage and on the in-memory reel."""
        query = """
            UPDATE reels SET
                recipients = recipients || %s::jsonb,
                updated_at = NOW()
            WHERE id = %s AND deleted_at IS NULL
        """
        payload = encode_recipients(recipients).decode("utf-8")

        affected_rows = await execute_query(self.db, query, (payload, reel.id))
        if affected_rows < 1:
            raise RecipientsNotAddedError(reel_id=reel.id)

        reel.recipients.extend(recipients)
        logger.info("Reel recipients added", reel_id=reel.id, added=len(recipients))

    async def delete_recipient(self, reel: Reel, recipient_id: str) -> None:
        """
        Soft-delete one recipient inside the stored array.

        Raises:
            RecipientNotFoundError: the recipient is not on the in-memory reel;
                nothing is sent to the database in that case
            RecipientNotDeletedError: the reel row was not updated
        """
        recipient = reel.find_recipient(recipient_id)
        if recipient is None:
            raise RecipientNotFoundError(reel_id=reel.id, recipient_id=recipient_id)

        query = """
            UPDATE reels SET
                recipients = COALESCE(
                    (
                        SELECT jsonb_agg(
                            CASE
                                WHEN r->>'uid' = %s AND r->>'deleted_at' IS NULL
                                    THEN jsonb_set(r, '{deleted_at}', to_jsonb(NOW()))
                                ELSE r
                            END
                            ORDER BY ordinality
                        )
                        FROM jsonb_array_elements(recipients) WITH ORDINALITY AS elems(r, ordinality)
                    ),
                    '[]'::jsonb
                ),
                updated_at = NOW()
            WHERE id = %s AND deleted_at IS NULL
        """

        affected_rows = await execute_query(self.db, query, (recipient_id, reel.id))
        if affected_rows < 1:
            raise RecipientNotDeletedError(reel_id=reel.id, recipient_id=recipient_id)

        # Keep the in-memory reel equal to what the next read returns
        reel.recipients = [r for r in reel.recipients if r.uid != recipient_id]
        logger.info("Reel recipient deleted", reel_id=reel.id, recipient_id=recipient_id)

    async def assign_reels_to_user_by_email(self, email: str, user_id: str) -> int:
        """Give every unowned reel sent from this email to the user. Returns the count."""
        query = """
            UPDATE reels SET
                user_id = %s,
                updated_at = NOW()
            WHERE email = %s AND user_id IS NULL AND deleted_at IS NULL
        """
        claimed = await execute_query(self.db, query, (user_id, normalize_email(email)))

        logger.info("Reels assigned to user", user_id=user_id, claimed=claimed)
        return claimed

    async def delete_reel(self, reel_id: str) -> None:
        query = """
            UPDATE reels SET deleted_at = NOW()
            WHERE id = %s AND deleted_at IS NULL
        """
        affected_rows = await execute_query(self.db, query, (reel_id,))
        if affected_rows < 1:
            raise ReelNotDeletedError(reel_id=reel_id)

        logger.info("Reel soft-deleted", reel_id=reel_id)
