# Constants package
from agroguard.constants.collections import (
    DISEASES,
    DISEASE_CATEGORIES,
    CHEMICALS,
    MARKETS,
    PENDING_DISEASES,
    COMMENTS,
    ALL_COLLECTIONS
)

__all__ = [
    'DISEASES',
    'DISEASE_CATEGORIES',
    'CHEMICALS',
    'MARKETS',
    'PENDING_DISEASES',
    'COMMENTS',
    'ALL_COLLECTIONS'
]
