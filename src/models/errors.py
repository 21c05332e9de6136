class PayrollError(Exception):
    """Base class for salary slip errors"""


class PersistenceError(PayrollError):
    """The record store could not complete a read or write"""


class BackupFormatError(PayrollError, ValueError):
    """Backup text is not a valid listGaji/setelanGaji payload"""

    def __init__(self, message: str = "Format kode salah."):
        super().__init__(message)


class RecordNotFoundError(PayrollError, KeyError):
    """No record with the given id exists in history"""

    def __init__(self, record_id: str):
        self.record_id = record_id
        super().__init__(f"Record {record_id} not found")

    def __str__(self):
        return self.args[0]


class DerivedFieldError(PayrollError, ValueError):
    """A computed line item was set directly"""


class DuplicateRecordError(PayrollError, ValueError):
    """A new record reuses an id already in history"""

    def __init__(self, record_id: str):
        self.record_id = record_id
        super().__init__(f"Record {record_id} already exists")
