"""Error taxonomy for the crawl analysis pipeline.

Only InputError and InternalError ever leave run_pipeline. ProviderError and
StorageError are caught where they happen and turned into degraded data.
"""


class AnalysisError(Exception):
    """Base class for pipeline errors."""


class InputError(AnalysisError):
    """The uploaded crawl is empty or malformed. User-correctable (4xx)."""


class InvalidInputError(InputError):
    """A component was handed input it cannot compute over."""


class ProviderError(AnalysisError):
    """The completion provider failed or returned nothing usable."""


class StorageError(AnalysisError):
    """Persisting crawl rows or results failed."""


class InternalError(AnalysisError):
    """Anything unexpected. Detail stays in the server log (5xx)."""
