"""
Storage capability string constants for pylinalg.

This module is the SINGLE SOURCE OF TRUTH for capability strings.
Import from here, never use raw strings.

Usage:
    from pylinalg.core.capabilities import CAPABILITY_PERMUTABLE

    if matrix.storage.supports(CAPABILITY_PERMUTABLE):
        matrix.permute_rows(p)
"""

# Every logical element is physically stored
CAPABILITY_DENSE = 'dense'

# Only non-zero elements are stored; traversals may skip zeros
CAPABILITY_SPARSE = 'sparse'

# Only the main diagonal is stored
CAPABILITY_DIAGONAL = 'diagonal'

# Any element may be set to any value
CAPABILITY_FULLY_MUTABLE = 'fully_mutable'

# Rows and columns may be swapped in place
CAPABILITY_PERMUTABLE = 'permutable'

# All capabilities as a frozenset for validation
ALL_CAPABILITIES = frozenset({
    CAPABILITY_DENSE,
    CAPABILITY_SPARSE,
    CAPABILITY_DIAGONAL,
    CAPABILITY_FULLY_MUTABLE,
    CAPABILITY_PERMUTABLE,
})

__all__ = [
    'CAPABILITY_DENSE',
    'CAPABILITY_SPARSE',
    'CAPABILITY_DIAGONAL',
    'CAPABILITY_FULLY_MUTABLE',
    'CAPABILITY_PERMUTABLE',
    'ALL_CAPABILITIES',
]
