"""CLI utilities"""

from .interactive import ConsoleConfirmation, ScriptedConfirmation
from .output import (
    console,
    print_error,
    print_stack_error,
    print_warning,
    print_success,
    format_status,
    format_update_results,
    format_next_steps,
    format_backup_result,
    format_health_report,
)

__all__ = [
    'ConsoleConfirmation',
    'ScriptedConfirmation',
    'console',
    'print_error',
    'print_stack_error',
    'print_warning',
    'print_success',
    'format_status',
    'format_update_results',
    'format_next_steps',
    'format_backup_result',
    'format_health_report',
]
