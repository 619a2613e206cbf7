"""Idempotency service for replaying the responses of repeated write requests."""

import hashlib
import json
import logging
from datetime import timedelta
from typing import Any, Awaitable, Callable

from fastapi.responses import JSONResponse
from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.clock import utcnow
from ..core.config import settings
from ..core.exceptions import ApiError
from ..models.idempotency import IdempotencyRecord

logger = logging.getLogger(__name__)


class IdempotencyMismatchError(ApiError):
    """Exception when an idempotency key is reused with a different request body."""

    def __init__(self, scope: str):
        super().__init__(
            status_code=422,
            message="Idempotency key was already used with a different request",
            extensions={"scope": scope},
        )


class IdempotencyService:
    """Service for handling idempotent operations."""

    def __init__(self, db: AsyncSession, ttl_hours: int | None = None):
        self.db = db
        self.ttl_hours = ttl_hours if ttl_hours is not None else settings.idempotency_ttl_hours

    def _compute_request_hash(self, request_body: dict[str, Any]) -> str:
        """Compute SHA-256 hash of normalized request body."""
        normalized = json.dumps(request_body, sort_keys=True, separators=(',', ':'), default=str)
        return hashlib.sha256(normalized.encode('utf-8')).hexdigest()

    async def check_idempotency(
        self,
        idempotency_key: str,
        scope: str,
        request_body: dict[str, Any],
    ) -> tuple[int, dict[str, Any]] | None:
        """
        Return the stored response for a repeated request, if there is one.

        Args:
            idempotency_key: Hashed idempotency key
            scope: Operation name plus calling user
            request_body: Request body to hash and compare

        Returns:
            Tuple of (status_code, response_body) if a response was stored,
            None if this is a new request

        Raises:
            IdempotencyMismatchError: If key exists with different request body
        """
        request_hash = self._compute_request_hash(request_body)

        # An expired record releases its key
        expired = await self.db.execute(
            delete(IdempotencyRecord).where(
                IdempotencyRecord.idempotency_key == idempotency_key,
                IdempotencyRecord.scope == scope,
                IdempotencyRecord.expires_at <= utcnow()
            )
        )
        if expired.rowcount:
            await self.db.commit()
            logger.info("Expired idempotency record released", extra={"scope": scope})

        stmt = select(IdempotencyRecord).where(
            IdempotencyRecord.idempotency_key == idempotency_key,
            IdempotencyRecord.scope == scope,
            IdempotencyRecord.expires_at > utcnow()
        )
        existing_record = (await self.db.execute(stmt)).scalar_one_or_none()

        if existing_record is None:
            return None

        if existing_record.request_body_hash != request_hash:
            logger.warning(
                "Idempotency key mismatch",
                extra={
                    "scope": scope,
                    "existing_hash": existing_record.request_body_hash[:8],
                    "new_hash": request_hash[:8]
                }
            )
            raise IdempotencyMismatchError(scope)

        logger.info(
            "Returning cached idempotent response",
            extra={
                "scope": scope,
                "status_code": existing_record.response_status_code,
                "created_at": existing_record.created_at.isoformat()
            }
        )

        return existing_record.response_status_code, json.loads(existing_record.response_body)

    async def store_response(
        self,
        idempotency_key: str,
        scope: str,
        request_body: dict[str, Any],
        status_code: int,
        response_body: dict[str, Any],
    ) -> None:
        """
        Store the response of an idempotent operation.

        Args:
            idempotency_key: Hashed idempotency key
            scope: Operation name plus calling user
            request_body: Original request body
            status_code: Response status code
            response_body: Response envelope to replay
        """
        expires_at = utcnow() + timedelta(hours=self.ttl_hours)

        record = IdempotencyRecord(
            idempotency_key=idempotency_key,
            scope=scope,
            request_body_hash=self._compute_request_hash(request_body),
            response_status_code=status_code,
            response_body=json.dumps(response_body, sort_keys=True, separators=(',', ':')),
            expires_at=expires_at
        )

        try:
            self.db.add(record)
            await self.db.commit()

            logger.info(
                "Stored idempotency record",
                extra={
                    "scope": scope,
                    "status_code": status_code,
                    "expires_at": expires_at.isoformat()
                }
            )

        except IntegrityError as e:
            # A concurrent request with the same key stored its response first
            await self.db.rollback()
            logger.info(
                "Idempotency record already exists (race condition)",
                extra={"scope": scope, "error": str(e)}
            )

    async def run(
        self,
        idempotency_key: str | None,
        scope: str,
        request_body: dict[str, Any],
        operation: Callable[[], Awaitable[JSONResponse]],
    ) -> JSONResponse:
        """
        Run a write operation at most once per idempotency key.

        Without a key the operation simply runs. With a key, a stored response
        is replayed; otherwise the operation runs and its response, success or
        client error, is stored for the key's lifetime.

        Args:
            idempotency_key: Hashed key from the Idempotency-Key header, or None
            scope: Operation name plus calling user
            request_body: Request body the key is bound to
            operation: Coroutine factory producing the response

        Returns:
            JSONResponse: Fresh or replayed response
        """
        if idempotency_key is None:
            return await operation()

        cached = await self.check_idempotency(idempotency_key, scope, request_body)
        if cached:
            status_code, response_body = cached
            return JSONResponse(
                status_code=status_code,
                content=response_body,
                headers={"Idempotent-Replayed": "true"}
            )

        try:
            response = await operation()
        except ApiError as e:
            if e.status_code < 500:
                await self.store_response(idempotency_key, scope, request_body, e.status_code, e.body)
            raise

        await self.store_response(
            idempotency_key, scope, request_body, response.status_code, json.loads(response.body)
        )
        return response

    async def cleanup_expired_records(self) -> int:
        """
        Delete expired idempotency records.

        Returns:
            Number of records deleted
        """
        result = await self.db.execute(
            delete(IdempotencyRecord).where(IdempotencyRecord.expires_at <= utcnow())
        )
        deleted_count = result.rowcount

        await self.db.commit()

        if deleted_count > 0:
            logger.info(
                "Cleaned up expired idempotency records",
                extra={"deleted_count": deleted_count}
            )

        return deleted_count
