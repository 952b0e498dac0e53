import json
import logging
from typing import Any, Callable, Optional

from sqlalchemy.orm import Session

from leave_portal.core.security import decrypt_data, encrypt_data
from leave_portal.models.portal_state import PortalState

logger = logging.getLogger(__name__)


class StateRepository:
    """
    Key/value storage for the persisted parts of the application state.
    Each call opens and commits its own session, so a write is durable
    as soon as it returns.
    """

    def __init__(self, session_factory: Callable[[], Session]):
        self.session_factory = session_factory

    def load(self, key: str) -> Optional[Any]:
        with self.session_factory() as db:
            row = db.query(PortalState).filter(PortalState.key == key).first()
            if row is None:
                return None
            raw = decrypt_data(row.value) if row.is_encrypted else row.value
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError:
            logger.warning(f"Discarding unreadable persisted value for '{key}'")
            return None

    def save(self, key: str, value: Any, encrypt: bool = False) -> None:
        raw = json.dumps(value)
        stored = encrypt_data(raw) if encrypt else raw
        with self.session_factory() as db:
            row = db.query(PortalState).filter(PortalState.key == key).first()
            if row is None:
                row = PortalState(key=key, value=stored, is_encrypted=encrypt)
                db.add(row)
            else:
                row.value = stored
                row.is_encrypted = encrypt
            try:
                db.commit()
            except Exception:
                db.rollback()
                raise

    def delete(self, key: str) -> None:
        with self.session_factory() as db:
            db.query(PortalState).filter(PortalState.key == key).delete(synchronize_session=False)
            try:
                db.commit()
            except Exception:
                db.rollback()
                raise
