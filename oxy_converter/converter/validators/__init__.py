"""
Validators - Post-build structural checks.

Usage:
    from oxy_converter.converter.validators import OutputValidator

    OutputValidator.validate(element_dict)
"""

from .output_validator import OutputValidator, has_path

__all__ = [
    "OutputValidator",
    "has_path",
]
