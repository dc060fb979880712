"""Exception hierarchy for EcoBrowse."""


class EcoBrowseError(Exception):
    """Base exception for all EcoBrowse errors."""


class StoreError(EcoBrowseError):
    """Reading or writing the persisted score history failed."""


class EmptyReportError(EcoBrowseError):
    """An export was requested for an aggregation with no rows."""

    def __init__(self, message: str = "No data to export"):
        super().__init__(message)


class AnalysisError(EcoBrowseError):
    """The scoring capability could not analyze a website."""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"Could not analyze {url}: {reason}")
