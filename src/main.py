import logging
from config.settings import LOG_LEVEL
from controllers import PayrollController
from database.db import init_db
from database.repository import RecordStore
from processors.period_comparator import earning_trend
from utils.formatters import format_currency, format_signed

# Configure logging
logging.basicConfig(
    level=getattr(logging, LOG_LEVEL),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

TREND_MARKS = {'improved': '▲', 'worsened': '▼', 'unchanged': '='}

def main():
    """Print the salary history summary"""
    logger.info("Starting Slip Gaji")

    # Initialize database
    logger.info("Initializing database...")
    init_db()
    controller = PayrollController.load(RecordStore())

    print("=" * 60)
    print("Slip Gaji - Rangkuman")
    print("=" * 60)

    rows = controller.history_with_diffs()
    if not rows:
        print("\nBelum ada data.")
    for record, diff in rows:
        line = f"{str(record.period):<20}{format_currency(record.net_total):>20}"
        if diff.has_previous:
            mark = TREND_MARKS[earning_trend(diff.net_delta).value]
            line += f"  {mark} {format_signed(diff.net_delta)}"
        print(line)
    print("=" * 60)

if __name__ == "__main__":
    main()
