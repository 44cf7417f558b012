from __future__ import annotations


class PartLookupError(LookupError):
    """Raised for a body-part name outside the topology table."""


class MalformedInputError(ValueError):
    """Raised for keypoint data the renderer cannot interpret."""
