import os
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()

# Base directory
BASE_DIR = Path(__file__).resolve().parent.parent

# Paths
DATA_DIR = Path(os.getenv("DATA_DIR", BASE_DIR / "data"))
OUTPUT_DIR = Path(os.getenv("OUTPUT_DIR", BASE_DIR / "output"))

# Database
DATABASE_URL = os.getenv("DATABASE_URL", f"sqlite:///{DATA_DIR / 'gaji.db'}")

# Storage keys (kept compatible with the mobile app's AsyncStorage keys)
HISTORY_KEY = "@gaji_master_db_v4"
SETTINGS_KEY = "@setelan_gaji_v1"
HISTORY_SCHEMA_VERSION = 4
SETTINGS_SCHEMA_VERSION = 1

# Application settings
DEBUG = os.getenv("DEBUG", "False").lower() == "true"
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Payroll rules
BASE_PAY_DAYS = int(os.getenv("BASE_PAY_DAYS", "50"))  # fixed working-day assumption
OVERTIME_HOURS_PER_DAY = int(os.getenv("OVERTIME_HOURS_PER_DAY", "7"))
CURRENCY_SYMBOL = "Rp"
THOUSANDS_SEPARATOR = "."

MONTH_NAMES = [
    "Januari", "Februari", "Maret", "April", "Mei", "Juni",
    "Juli", "Agustus", "September", "Oktober", "November", "Desember",
]
YEAR_RANGE = 5  # selectable years either side of the current one

# Secret for Flask app
SECRET_KEY = os.getenv("SECRET_KEY", "3b1f0d1c9e7a4c5f8a2d6e0b7c4f1a93")
