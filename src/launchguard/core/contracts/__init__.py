"""
Contract Validation Module

Модуль для валидации JSON контрактов launchguard.
"""

from .validators import (
    ContractValidator,
    GuardConfigValidator,
    LaunchConfigValidator,
    PermitRequestValidator,
    SchemaLoader,
    validate_guard_config,
    validate_launch_config,
    validate_permit_request,
)

__all__ = [
    # Classes
    "SchemaLoader",
    "ContractValidator",
    "GuardConfigValidator",
    "LaunchConfigValidator",
    "PermitRequestValidator",
    # Functions
    "validate_guard_config",
    "validate_launch_config",
    "validate_permit_request",
]
