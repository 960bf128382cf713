# Copyright 2026 Overloadable Contributors
# SPDX-License-Identifier: Apache-2.0

"""Advisory checks for overload sets (duplicate identities, ambiguous calls)."""

from overloadable.validation.checks import (
    ValidationResult,
    ValidationWarning,
    check_feature_gates,
    validate,
)

__all__ = [
    "ValidationResult",
    "ValidationWarning",
    "check_feature_gates",
    "validate",
]
