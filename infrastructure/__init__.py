"""
Infrastructure package for request validation, configuration management, and parameter labels.
"""

from .configuration_manager import ColorSpec, ConfigurationError, ConfigurationManager, SummaryConfiguration
from .fail_fast_validator import (
    FailFastValidator,
    InvalidColorSpecError,
    InvalidFillModeError,
    InvalidOutputModeError,
    InvalidParameterError,
    InvalidYearRangeError,
    OutputMode,
    SummaryRequestError
)
from .parameter_labels import PARAMETER_LABELS, get_parameter_label

__all__ = [
    'ColorSpec',
    'ConfigurationError',
    'ConfigurationManager',
    'SummaryConfiguration',
    'FailFastValidator',
    'InvalidColorSpecError',
    'InvalidFillModeError',
    'InvalidOutputModeError',
    'InvalidParameterError',
    'InvalidYearRangeError',
    'OutputMode',
    'SummaryRequestError',
    'PARAMETER_LABELS',
    'get_parameter_label'
]
