"""
Collection names shared by the primary database and the REST fallback.
"""

DISEASES = 'diseases'
DISEASE_CATEGORIES = 'disease-categories'
CHEMICALS = 'chemicals'
MARKETS = 'markets'
PENDING_DISEASES = 'pendingDiseases'
COMMENTS = 'comments'

ALL_COLLECTIONS = [
    DISEASES,
    DISEASE_CATEGORIES,
    CHEMICALS,
    MARKETS,
    PENDING_DISEASES,
    COMMENTS,
]
