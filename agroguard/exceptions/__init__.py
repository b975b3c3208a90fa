# Custom exceptions package
from agroguard.exceptions.catalog import (
    CatalogError,
    CatalogValidationError,
    InvalidTransitionError,
    PersistenceError,
    CatalogErrorCode
)
from agroguard.exceptions.analysis import (
    ProviderFailure,
    AnalysisError,
    AnalysisInputError,
    ProviderError,
    AnalysisErrorCode
)

__all__ = [
    'CatalogError',
    'CatalogValidationError',
    'InvalidTransitionError',
    'PersistenceError',
    'CatalogErrorCode',
    'ProviderFailure',
    'AnalysisError',
    'AnalysisInputError',
    'ProviderError',
    'AnalysisErrorCode'
]
