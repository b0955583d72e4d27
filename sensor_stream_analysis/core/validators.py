"""
Configuration Validation

Checks every CONFIG section up front so bad values surface at
construction, never clamped.
"""

from typing import Any, Dict, List, Tuple

from .base import BaseValidator
from .exceptions import InvalidConfiguration


class ConfigValidator(BaseValidator):
    """
    Section-by-section validation of the CONFIG dictionary.
    """

    REQUIRED_SECTIONS = [
        'session', 'moving_average', 'anomaly', 'trend',
        'frequency', 'bridge_safety', 'data_logger'
    ]

    def collect_errors(self, config: Dict[str, Any]) -> List[str]:
        """
        Validate configuration without raising.

        Returns:
            List of error messages (empty when valid)
        """
        errors = []
        if not isinstance(config, dict):
            return [f"Expected dict, got {type(config)}"]

        missing = [key for key in self.REQUIRED_SECTIONS if key not in config]
        if missing:
            errors.append(f"Missing required config sections: {missing}")

        checks = [
            ('session', 'interval_ms', self.validate_positive),
            ('session', 'duration_sec', self.validate_positive),
            ('moving_average', 'capacity', lambda v, n: self.validate_int_at_least(v, 1, n)),
            ('anomaly', 'threshold_multiplier', self.validate_positive),
            ('anomaly', 'absolute_threshold', self.validate_positive),
            ('anomaly', 'min_samples_for_analysis', lambda v, n: self.validate_int_at_least(v, 0, n)),
            ('trend', 'window_size', lambda v, n: self.validate_int_at_least(v, 2, n)),
            ('trend', 'deadband', self.validate_non_negative),
            ('frequency', 'min_samples', lambda v, n: self.validate_int_at_least(v, 3, n)),
            ('bridge_safety', 'min_samples', lambda v, n: self.validate_int_at_least(v, 1, n)),
            ('data_logger', 'buffer_size', lambda v, n: self.validate_int_at_least(v, 1, n)),
            ('data_logger', 'flush_interval_ms', self.validate_positive),
            ('data_logger', 'max_file_size_bytes', self.validate_positive),
        ]
        for section, key, check in checks:
            if section not in config:
                continue
            if key not in config[section]:
                errors.append(f"Missing config key: {section}.{key}")
                continue
            try:
                check(config[section][key], f"{section}.{key}")
            except InvalidConfiguration as exc:
                errors.append(str(exc))

        if 'data_logger' in config and not config['data_logger'].get('base_name'):
            errors.append("data_logger.base_name must be a non-empty string")

        if 'bridge_safety' in config:
            errors.extend(self.tier_errors(config['bridge_safety'], 'bridge_safety'))

        return errors

    @staticmethod
    def tier_errors(section: Dict[str, Any], name: str) -> List[str]:
        """Problems with a tier table: missing keys, non-increasing limits, no fallback."""
        errors = []
        tiers = section.get('tiers', [])
        if not tiers:
            errors.append(f"{name}.tiers must list at least one tier")
        previous = (0.0, 0.0)
        for i, tier in enumerate(tiers):
            for key in ('name', 'max_rms', 'max_peak'):
                if key not in tier:
                    errors.append(f"{name}.tiers[{i}] missing '{key}'")
            if 'max_rms' in tier and 'max_peak' in tier:
                limits = (tier['max_rms'], tier['max_peak'])
                if limits[0] <= previous[0] or limits[1] <= previous[1]:
                    errors.append(f"{name}.tiers[{i}] limits must increase tier over tier")
                previous = limits
        if 'fallback' not in section:
            errors.append(f"{name}.fallback is required")
        elif 'name' not in section['fallback']:
            errors.append(f"{name}.fallback missing 'name'")
        return errors


def validate_config(config: Dict[str, Any]) -> Tuple[bool, List[str]]:
    """Return (is_valid, errors) for a configuration dictionary."""
    errors = ConfigValidator().collect_errors(config)
    return len(errors) == 0, errors


def require_valid_config(config: Dict[str, Any]) -> None:
    """
    Validate configuration and raise on errors.

    Raises:
        InvalidConfiguration: listing every problem found
    """
    is_valid, errors = validate_config(config)
    if not is_valid:
        error_msg = "Configuration errors:\n" + "\n".join(f"  - {e}" for e in errors)
        raise InvalidConfiguration(error_msg)
