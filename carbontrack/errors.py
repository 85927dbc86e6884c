from __future__ import annotations


class CarbonTrackError(Exception):
    """Base class for errors raised while turning an upload into a report."""


class FileReadError(CarbonTrackError):
    """The uploaded file could not be read or is not an accepted type."""


class AnalysisError(CarbonTrackError):
    """The analysis service did not produce a usable report."""


class EmptyResponse(AnalysisError):
    pass


class MalformedResponse(AnalysisError):
    pass


class TransportError(AnalysisError):
    pass
