#!/usr/bin/env python3
"""
FAIL-FAST Request Validation
Checks every argument of a summary request before any aggregation work starts
"""

from dataclasses import dataclass
from enum import Enum
from numbers import Integral
from typing import Any, List, Optional, Sequence, Tuple
import logging

from matplotlib.colors import is_color_like

logger = logging.getLogger(__name__)


class SummaryRequestError(ValueError):
    """Base class for usage errors in a summary request"""
    def __init__(self, value: Any, reason: str):
        self.value = value
        self.reason = reason
        super().__init__(reason)


class InvalidParameterError(SummaryRequestError):
    """Requested parameter is not declared by the time series table"""
    def __init__(self, parameter: str, available: Sequence[str]):
        self.available = tuple(available)
        super().__init__(
            parameter,
            f"param must be included in the data: '{parameter}' not in {list(self.available)}"
        )


class InvalidYearRangeError(SummaryRequestError):
    """Year range has too many values, non-numeric values, or start after end"""


class InvalidFillModeError(SummaryRequestError):
    """Fill mode outside the enumerated set"""


class InvalidOutputModeError(SummaryRequestError):
    """Output mode outside the enumerated set"""


class InvalidColorSpecError(SummaryRequestError):
    """Colour specification of the wrong shape or with unknown colours"""


class OutputMode(Enum):
    COMBINED = "combined"
    SEPARATE = "separate"
    DATA = "data"

    @classmethod
    def parse(cls, value) -> 'OutputMode':
        if isinstance(value, cls):
            return value
        text = str(value).strip().lower()
        for member in cls:
            if text == member.value:
                return member
        raise InvalidOutputModeError(
            value, f"output_mode must be one of {[m.value for m in cls]}, got {value!r}"
        )


class ValidationLevel(Enum):
    ERROR = "ERROR"
    WARNING = "WARNING"


@dataclass
class ValidationResult:
    level: ValidationLevel
    message: str
    error: Optional[SummaryRequestError] = None


@dataclass(frozen=True)
class ValidatedRequest:
    """Resolved, enum-typed arguments of a summary request"""
    parameter: str
    year_range: Tuple[int, int]
    fill_mode: Any
    output_mode: Any


class FailFastValidator:
    """
    FAIL-FAST validator that checks ALL summary arguments
    before allowing any stage to execute
    """

    def __init__(self):
        self.results: List[ValidationResult] = []

    def validate_request(self, table, parameter: str, years=None, fill_mode='none',
                         output_mode='combined', colors=None, max_gap=None) -> ValidatedRequest:
        """
        Validate a summary request against a time series table

        Parameters:
        -----------
        table : TimeSeriesTable
            Table the request will run against
        parameter : str
            Parameter to summarize
        years : int or sequence of int, optional
            Zero, one or two years
        fill_mode, output_mode : str or enum
            Requested gap-fill policy and output mode
        colors : ColorSpec, optional
            Colour specification for the chart views
        max_gap : int, optional
            Interpolation bound in consecutive missing rows

        Returns:
        --------
        ValidatedRequest
            Parsed arguments

        Raises:
        -------
        SummaryRequestError
            The first failed check, after all checks have run
        """
        resolved = self._run_checks(table, parameter, years, fill_mode, output_mode, colors, max_gap)

        errors = self.errors
        for result in errors:
            logger.error(f"Summary request rejected: {result.message}")
        if errors:
            raise errors[0].error

        return ValidatedRequest(
            parameter=resolved['parameter'],
            year_range=resolved['year_range'],
            fill_mode=resolved['fill_mode'],
            output_mode=resolved['output_mode'],
        )

    def validate_settings(self, parameter: str, years=None, fill_mode='none',
                          output_mode='combined', colors=None, max_gap=None) -> List[ValidationResult]:
        """
        Check the request arguments that do not depend on a table, such as a
        loaded configuration. Returns every result instead of raising.
        """
        self._run_checks(None, parameter, years, fill_mode, output_mode, colors, max_gap)
        return list(self.results)

    @property
    def errors(self) -> List[ValidationResult]:
        return [r for r in self.results if r.level is ValidationLevel.ERROR]

    def _run_checks(self, table, parameter, years, fill_mode, output_mode, colors, max_gap):
        # processors import the error classes defined above
        from processors.gap_filler import FillMode
        from processors.year_range_selector import resolve_year_range

        self.results.clear()
        resolved = {}

        def check(name, func):
            try:
                resolved[name] = func()
            except SummaryRequestError as e:
                self.results.append(ValidationResult(ValidationLevel.ERROR, str(e), e))

        check('parameter', lambda: self.validate_parameter(table, parameter))
        if table is not None:
            check('year_range', lambda: resolve_year_range(years, table.date_range))
        elif years is not None and not (isinstance(years, (list, tuple)) and not years):
            check('year_range', lambda: resolve_year_range(years, None))
        check('fill_mode', lambda: FillMode.parse(fill_mode))
        check('output_mode', lambda: OutputMode.parse(output_mode))
        if colors is not None:
            check('colors', lambda: self.validate_colors(colors))
        check('max_gap', lambda: self.validate_max_gap(max_gap))

        if resolved.get('fill_mode') is FillMode.INTERPOLATE and 'max_gap' in resolved \
                and resolved['max_gap'] is None:
            message = "interpolate fill without max_gap will bridge gaps of any length"
            self.results.append(ValidationResult(ValidationLevel.WARNING, message))
            logger.warning(message)

        return resolved

    @staticmethod
    def validate_parameter(table, parameter: str) -> str:
        if not parameter or not isinstance(parameter, str):
            raise SummaryRequestError(parameter, f"parameter must be a non-empty string, got {parameter!r}")
        if table is not None and parameter not in table.parameters:
            raise InvalidParameterError(parameter, table.parameters)
        return parameter

    @staticmethod
    def validate_colors(colors):
        expected = {'left': 2, 'right': 3}
        for name, length in expected.items():
            values = getattr(colors, name)
            if isinstance(values, str) or len(values) != length:
                raise InvalidColorSpecError(
                    values, f"{name} colours need exactly {length} entries, got {values!r}"
                )
        for color in (*colors.left, colors.mid, *colors.right):
            if not is_color_like(color):
                raise InvalidColorSpecError(color, f"'{color}' is not a recognised colour")
        return colors

    @staticmethod
    def validate_max_gap(max_gap):
        if max_gap is None:
            return None
        if isinstance(max_gap, bool) or not isinstance(max_gap, Integral) or max_gap < 1:
            raise SummaryRequestError(max_gap, f"max_gap must be a positive integer or None, got {max_gap!r}")
        return int(max_gap)
