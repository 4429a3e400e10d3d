import json
import logging
import uuid
from typing import Any, Dict, Optional

import redis

from booking_fields.services.field_list_editor import FieldListEditor

logger = logging.getLogger(__name__)

GLOBAL_SCOPE = "global"
CALENDAR_SCOPE_PREFIX = "calendar:"


def calendar_scope(calendar_id: int) -> str:
    return f"{CALENDAR_SCOPE_PREFIX}{calendar_id}"


def scope_calendar_id(scope: str) -> Optional[int]:
    """Calendar id of a calendar scope; None for the global scope"""
    if scope.startswith(CALENDAR_SCOPE_PREFIX):
        return int(scope[len(CALENDAR_SCOPE_PREFIX):])
    return None


class EditorStateManager:
    """
    Keeps in-progress editor sessions in Redis with automatic TTL.

    Each session stores its scope ("global" or "calendar:<id>") and the
    editor items. Every save refreshes the TTL (sliding window), so an
    abandoned session simply expires.
    """

    def __init__(self, redis_client: redis.Redis, ttl_seconds: int = 1800):
        """
        Args:
            redis_client: Redis client instance (from dependency injection)
            ttl_seconds: Time-to-live in seconds (default: 1800 = 30 minutes)
        """
        self.redis_client = redis_client
        self.ttl_seconds = ttl_seconds

    def _state_key(self, session_id: str) -> str:
        return f"field_editor:{session_id}"

    def create_session(self, scope: str, editor: FieldListEditor) -> str:
        session_id = str(uuid.uuid4())
        self.save_session(session_id, scope, editor)
        logger.info(f"Opened field editor session {session_id} for {scope}")
        return session_id

    def save_session(self, session_id: str, scope: str, editor: FieldListEditor) -> None:
        """
        Raises:
            redis.RedisError: If Redis operation fails
        """
        state = {"scope": scope, **editor.to_state()}
        try:
            self.redis_client.setex(
                self._state_key(session_id), self.ttl_seconds, json.dumps(state)
            )
        except redis.RedisError as e:
            logger.error(f"Redis error saving editor session {session_id}: {e}")
            raise

    def get_session(self, session_id: str) -> Optional[Dict[str, Any]]:
        """
        Load a session's raw state.

        Returns:
            State dict with ``scope`` and ``items``; None if expired, unknown
            or corrupted

        Raises:
            redis.RedisError: If Redis operation fails
        """
        try:
            state_json = self.redis_client.get(self._state_key(session_id))
        except redis.RedisError as e:
            logger.error(f"Redis error loading editor session {session_id}: {e}")
            raise

        if not state_json:
            return None
        try:
            state = json.loads(state_json)
        except json.JSONDecodeError:
            logger.error(f"Corrupted editor session {session_id}, discarding")
            return None
        if not isinstance(state, dict) or "scope" not in state:
            return None
        return state

    def clear_session(self, session_id: str) -> None:
        """
        Raises:
            redis.RedisError: If Redis operation fails
        """
        try:
            self.redis_client.delete(self._state_key(session_id))
            logger.info(f"Closed field editor session {session_id}")
        except redis.RedisError as e:
            logger.error(f"Redis error clearing editor session {session_id}: {e}")
            raise
