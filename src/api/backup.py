import logging
from typing import List, Sequence, Tuple
from models.errors import BackupFormatError
from models.payroll import SalaryRecord
from models.settings import SalarySettings
from utils import json_codec

logger = logging.getLogger(__name__)

HISTORY_FIELD = "listGaji"
SETTINGS_FIELD = "setelanGaji"


def export_backup(history: Sequence[SalaryRecord], settings: SalarySettings) -> str:
    """Serialize history and settings into the backup text"""
    return json_codec.dumps({
        HISTORY_FIELD: [record.to_dict() for record in history],
        SETTINGS_FIELD: settings.to_dict(),
    })


def parse_backup(text: str) -> Tuple[List[SalaryRecord], SalarySettings]:
    """
    Parse backup text into history and settings.

    Both ``listGaji`` and ``setelanGaji`` must be present; any other shape is
    rejected as a whole with BackupFormatError and nothing is returned.
    """
    if not text or not text.strip():
        raise BackupFormatError("Tempel kode backup dulu.")

    try:
        payload = json_codec.loads(text)
    except ValueError as e:
        logger.warning(f"Backup is not valid JSON: {e}")
        raise BackupFormatError() from e

    if not isinstance(payload, dict):
        raise BackupFormatError()

    raw_history = payload.get(HISTORY_FIELD)
    raw_settings = payload.get(SETTINGS_FIELD)
    if raw_history is None or raw_settings is None:
        logger.warning("Backup is missing listGaji or setelanGaji")
        raise BackupFormatError()
    if not isinstance(raw_history, list) or not isinstance(raw_settings, dict):
        raise BackupFormatError()

    try:
        history = [SalaryRecord.from_dict(item) for item in raw_history]
        settings = SalarySettings.from_dict(raw_settings)
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        logger.warning(f"Backup content is malformed: {e}")
        raise BackupFormatError() from e

    return history, settings
