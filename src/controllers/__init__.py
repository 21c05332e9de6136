from .slip_form import SlipForm
from .payroll_controller import PayrollController

__all__ = [
    'SlipForm',
    'PayrollController'
]
