"""
ConfigurationManager for parameterized and reproducible summary runs.
"""

import json
import yaml
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Any, Union, Optional, Tuple
from dataclasses import dataclass, asdict, field
import logging

from infrastructure.fail_fast_validator import FailFastValidator

logger = logging.getLogger(__name__)


class ConfigurationError(Exception):
    """Raised when a configuration file cannot be read, written or parsed"""
    def __init__(self, path: str, operation: str, reason: str):
        self.path = path
        self.operation = operation
        self.reason = reason
        super().__init__(f"Cannot {operation} '{path}': {reason}")


@dataclass(frozen=True)
class ColorSpec:
    """Colours for the summary views"""
    # Ramp for the monthly mean and median markers
    left: Tuple[str, str] = ('lightblue', 'lightgreen')
    # Histogram outline and facet strip colour
    mid: str = 'lightblue'
    # Low, mid and high anchors of the diverging heatmap and bar scales
    right: Tuple[str, str, str] = ('lightblue', 'lightgreen', 'tomato')

    def to_dict(self) -> Dict[str, Any]:
        return {'left': list(self.left), 'mid': self.mid, 'right': list(self.right)}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ColorSpec':
        data = dict(data)
        if 'left' in data:
            data['left'] = tuple(data['left'])
        if 'right' in data:
            data['right'] = tuple(data['right'])
        return cls(**data)


@dataclass
class SummaryConfiguration:
    """Complete configuration of a summary run"""
    parameter: str
    years: Optional[List[int]] = None
    fill_mode: str = 'none'
    output_mode: str = 'combined'
    max_gap: Optional[int] = None  # None interpolates gaps of any length
    base_size: float = 11
    colors: ColorSpec = field(default_factory=ColorSpec)
    metadata: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary with colour serialization"""
        data = asdict(self)
        data['colors'] = self.colors.to_dict()
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SummaryConfiguration':
        """Create from dictionary with colour deserialization"""
        data = dict(data)
        if 'colors' in data and not isinstance(data['colors'], ColorSpec):
            data['colors'] = ColorSpec.from_dict(data['colors'] or {})
        return cls(**data)

    def validate(self) -> List[str]:
        """Validate configuration values, returning error messages"""
        validator = FailFastValidator()
        validator.validate_settings(
            self.parameter, years=self.years, fill_mode=self.fill_mode,
            output_mode=self.output_mode, colors=self.colors, max_gap=self.max_gap
        )
        errors = [result.message for result in validator.errors]

        if isinstance(self.base_size, bool) or not isinstance(self.base_size, (int, float)) \
                or self.base_size <= 0:
            errors.append("base_size must be positive")

        return errors


class ConfigurationManager:
    """
    Configuration management for reproducible summary runs.
    Handles loading, saving, and validation of summary configurations.
    """

    def __init__(self, config_format: str = 'yaml'):
        """
        Initialize configuration manager.

        Args:
            config_format: Format for configuration files ('yaml' or 'json')
        """
        self.config_format = config_format.lower()

        if self.config_format not in ['yaml', 'json']:
            raise ValueError("config_format must be 'yaml' or 'json'")

        logger.info(f"Initialized ConfigurationManager with format: {self.config_format}")

    @classmethod
    def for_file(cls, config_file: Union[str, Path]) -> 'ConfigurationManager':
        """Pick the format from the file extension"""
        suffix = Path(config_file).suffix.lower()
        return cls('json' if suffix == '.json' else 'yaml')

    def create_default_config(self, parameter: str) -> SummaryConfiguration:
        """
        Create a default summary configuration for a parameter.

        Returns:
            Default SummaryConfiguration object
        """
        return SummaryConfiguration(
            parameter=parameter,
            metadata={
                'created_date': datetime.now().isoformat(),
                'created_by': 'ConfigurationManager',
                'version': '1.0',
                'description': 'Default seasonal and annual summary configuration'
            }
        )

    def load_config(self, config_file: Union[str, Path]) -> SummaryConfiguration:
        """
        Load summary configuration from file.

        Args:
            config_file: Path to configuration file

        Returns:
            SummaryConfiguration object

        Raises:
            ConfigurationError: If the file cannot be read or is not a valid configuration
        """
        config_path = Path(config_file).resolve()
        if not config_path.is_file():
            raise ConfigurationError(str(config_path), "read configuration", "file does not exist")

        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                if self.config_format == 'yaml':
                    config_dict = yaml.safe_load(f)
                else:
                    config_dict = json.load(f)

            if not isinstance(config_dict, dict):
                raise ValueError("configuration must be a mapping")

            config = SummaryConfiguration.from_dict(config_dict)

        except (OSError, yaml.YAMLError, json.JSONDecodeError, TypeError, ValueError) as e:
            raise ConfigurationError(str(config_path), "read configuration", str(e))

        logger.info(f"Loaded configuration from: {config_path}")
        return config

    def save_config(self, config: SummaryConfiguration, config_file: Union[str, Path]) -> Path:
        """
        Save configuration to file.

        Args:
            config: SummaryConfiguration object to save
            config_file: Path to output configuration file

        Returns:
            Absolute path to saved configuration file

        Raises:
            ConfigurationError: If config file cannot be written
        """
        config_path = Path(config_file).resolve()

        # Update metadata
        config.metadata['last_modified'] = datetime.now().isoformat()

        try:
            config_path.parent.mkdir(parents=True, exist_ok=True)
            config_dict = config.to_dict()

            with open(config_path, 'w', encoding='utf-8') as f:
                if self.config_format == 'yaml':
                    yaml.safe_dump(config_dict, f, default_flow_style=False, indent=2)
                else:
                    json.dump(config_dict, f, indent=2, ensure_ascii=False)

        except (OSError, yaml.YAMLError, TypeError) as e:
            raise ConfigurationError(str(config_path), "write configuration", str(e))

        logger.info(f"Saved configuration to: {config_path}")
        return config_path

    def validate_config(self, config: SummaryConfiguration) -> List[str]:
        """
        Validate configuration for completeness and consistency.

        Returns:
            List of validation error messages (empty if valid)
        """
        errors = config.validate()
        for error in errors:
            logger.warning(f"Configuration problem: {error}")
        return errors
