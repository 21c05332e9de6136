import re
from config.settings import MONTH_NAMES

def validate_month_name(month: str) -> bool:
    """Validate Indonesian month name"""
    return month in MONTH_NAMES

def validate_year(year: str) -> bool:
    """Validate 4-digit year"""
    return bool(re.match(r'^\d{4}$', str(year)))

def validate_period_label(label: str) -> bool:
    """Validate '<Month> <Year>' period label format"""
    parts = str(label).split(' ')
    return len(parts) == 2 and validate_month_name(parts[0]) and validate_year(parts[1])
