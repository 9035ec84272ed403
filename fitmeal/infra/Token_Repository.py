import logging
from typing import Any, Dict, Optional

from fitmeal.infra import json_store
from fitmeal.infra.paths import REFRESH_TOKENS_FILE

logger = logging.getLogger(__name__)


class RefreshTokenRepository:
    """Issued refresh tokens; a token is valid only while it is stored here."""

    def add(self, token: str, user_id: str, expires_at: str) -> None:
        with json_store.editing(REFRESH_TOKENS_FILE) as tokens:
            tokens.append({'token': token, 'userId': user_id, 'expiresAt': expires_at})

    def get(self, token: str) -> Optional[Dict[str, Any]]:
        for entry in json_store.load(REFRESH_TOKENS_FILE):
            if entry.get('token') == token:
                return entry
        return None

    def delete(self, token: str) -> bool:
        with json_store.editing(REFRESH_TOKENS_FILE) as tokens:
            before = len(tokens)
            tokens[:] = [t for t in tokens if t.get('token') != token]
            return len(tokens) != before

    def delete_for_user(self, user_id: str) -> int:
        with json_store.editing(REFRESH_TOKENS_FILE) as tokens:
            before = len(tokens)
            tokens[:] = [t for t in tokens if t.get('userId') != user_id]
            removed = before - len(tokens)
        if removed:
            logger.info(f"Revoked {removed} refresh token(s) for user {user_id}")
        return removed
