from contextlib import contextmanager
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from typing import Any, List, Optional, Tuple
import logging
from .db import SessionLocal
from .models import StoreEntryDB
from config.settings import (
    HISTORY_KEY, SETTINGS_KEY, HISTORY_SCHEMA_VERSION, SETTINGS_SCHEMA_VERSION
)
from models.errors import PersistenceError
from models.payroll import SalaryRecord
from models.settings import SalarySettings
from utils import json_codec

logger = logging.getLogger(__name__)


class KeyValueRepository:
    """Key-value access to the store table"""

    def __init__(self, db_session: Session):
        self.db = db_session

    def get(self, key: str) -> Optional[StoreEntryDB]:
        """Get entry by key"""
        return self.db.query(StoreEntryDB).filter_by(key=key).first()

    def get_value(self, key: str) -> Optional[Any]:
        """Get decoded JSON value, None if the key is not set"""
        entry = self.get(key)
        if entry is None:
            return None
        return json_codec.loads(entry.value)

    def set(self, key: str, value: Any, schema_version: int = 1) -> StoreEntryDB:
        """Insert or update a key; the caller commits"""
        entry = self.get(key)
        payload = json_codec.dumps(value)
        if not entry:
            entry = StoreEntryDB(key=key, value=payload, schema_version=schema_version)
            self.db.add(entry)
        else:
            entry.value = payload
            entry.schema_version = schema_version
        return entry

    def delete(self, key: str) -> bool:
        """Remove a key; the caller commits"""
        return self.db.query(StoreEntryDB).filter_by(key=key).delete() > 0


class RecordStore:
    """Persistence for salary history and settings"""

    def __init__(self, session_factory=SessionLocal):
        self.session_factory = session_factory

    @contextmanager
    def _transaction(self, action: str):
        db = self.session_factory()
        try:
            yield KeyValueRepository(db)
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Store {action} failed: {e}")
            raise PersistenceError(f"Could not {action}") from e
        finally:
            db.close()

    # ========== Reads ==========

    def load(self) -> Tuple[List[SalaryRecord], SalarySettings]:
        """Load history and settings; defaults when nothing is stored"""
        with self._transaction("load data") as repo:
            history_entry = repo.get(HISTORY_KEY)
            settings_entry = repo.get(SETTINGS_KEY)
            history_text = history_entry.value if history_entry else None
            settings_text = settings_entry.value if settings_entry else None
            if history_entry and history_entry.schema_version != HISTORY_SCHEMA_VERSION:
                logger.warning(f"History stored with schema v{history_entry.schema_version}")
            if settings_entry and settings_entry.schema_version != SETTINGS_SCHEMA_VERSION:
                logger.warning(f"Settings stored with schema v{settings_entry.schema_version}")

        try:
            history_raw = json_codec.loads(history_text) if history_text else []
            history = [SalaryRecord.from_dict(item) for item in history_raw]
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise PersistenceError("Stored history is unreadable") from e
        try:
            settings = SalarySettings.from_dict(json_codec.loads(settings_text)) if settings_text else SalarySettings()
        except (TypeError, ValueError, AttributeError) as e:
            raise PersistenceError("Stored settings are unreadable") from e
        logger.info(f"Loaded {len(history)} records")
        return history, settings

    # ========== Writes ==========

    def save_history(self, history: List[SalaryRecord]):
        with self._transaction("save history") as repo:
            repo.set(HISTORY_KEY, [r.to_dict() for r in history], HISTORY_SCHEMA_VERSION)
        logger.debug(f"Saved history ({len(history)} records)")

    def save_settings(self, settings: SalarySettings):
        with self._transaction("save settings") as repo:
            repo.set(SETTINGS_KEY, settings.to_dict(), SETTINGS_SCHEMA_VERSION)
        logger.debug("Saved settings")

    def clear_history(self):
        with self._transaction("clear history") as repo:
            repo.delete(HISTORY_KEY)
        logger.info("History cleared")

    def replace_all(self, history: List[SalaryRecord], settings: SalarySettings):
        """Write history and settings in one transaction"""
        with self._transaction("restore data") as repo:
            repo.set(HISTORY_KEY, [r.to_dict() for r in history], HISTORY_SCHEMA_VERSION)
            repo.set(SETTINGS_KEY, settings.to_dict(), SETTINGS_SCHEMA_VERSION)
        logger.info(f"Restored {len(history)} records and settings")
