import os
import sys
from pathlib import Path
from decimal import Decimal

os.environ.setdefault("DATABASE_URL", "sqlite://")

# Add src to path
ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT / 'src'))
sys.path.insert(0, str(ROOT))

import pytest
from sqlalchemy.orm import sessionmaker

from controllers import PayrollController
from database.db import init_db, make_engine
from database.repository import RecordStore
from models.settings import SalarySettings


@pytest.fixture
def session_factory():
    """Fresh in-memory database per test"""
    engine = make_engine("sqlite://")
    init_db(bind=engine)
    return sessionmaker(bind=engine)


@pytest.fixture
def store(session_factory):
    return RecordStore(session_factory)


@pytest.fixture
def broken_store():
    """Store whose tables were never created, so every call fails"""
    return RecordStore(sessionmaker(bind=make_engine("sqlite://")))


@pytest.fixture
def settings():
    return SalarySettings(
        daily_rate=Decimal('100000'),
        fixed_allowance=Decimal('250000'),
        cooperative_savings=Decimal('50000'),
        social_insurance_1=Decimal('40000'),
        social_insurance_2=Decimal('30000'),
    )


@pytest.fixture
def controller(store, settings):
    store.save_settings(settings)
    return PayrollController.load(store)
