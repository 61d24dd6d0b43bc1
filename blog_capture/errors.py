"""
Exception types raised by the capture pipeline.

Item-level problems (bad links, template mismatches, missing artifacts) are
recorded as data on the results and never raised. Only request validation
failures and engine-level failures surface as exceptions.
"""


class BlogCaptureError(Exception):
    """Base class for all blog_capture errors."""


class InvalidRequestError(BlogCaptureError):
    """The caller submitted a request that cannot be processed (e.g. no items)."""


class EngineError(BlogCaptureError):
    """The browser engine failed to start or crashed mid-batch. Fatal for the batch."""


class SessionNotFoundError(BlogCaptureError):
    """No capture session exists under the given id."""


class ArtifactNotFoundError(BlogCaptureError):
    """The requested artifact does not exist in the session directory."""
