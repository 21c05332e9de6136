from .db import engine, SessionLocal, Base, get_db, init_db, make_engine
from .models import StoreEntryDB
from .repository import KeyValueRepository, RecordStore

__all__ = [
    'engine',
    'SessionLocal',
    'Base',
    'get_db',
    'init_db',
    'make_engine',
    'StoreEntryDB',
    'KeyValueRepository',
    'RecordStore'
]
