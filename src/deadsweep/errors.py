from __future__ import annotations


class DeadsweepError(ValueError):
    """Base class for fatal input errors; the run cannot produce a partial result."""


class InvalidGraphDocument(DeadsweepError):
    def __init__(self, source: str, reason: str):
        super().__init__(f"invalid graph document ({source}): {reason}")
        self.source = source
        self.reason = reason


class InvalidEntrypointDocument(DeadsweepError):
    def __init__(self, source: str, reason: str):
        super().__init__(f"invalid entrypoint document ({source}): {reason}")
        self.source = source
        self.reason = reason


class InvalidFindingsDocument(DeadsweepError):
    def __init__(self, source: str, reason: str):
        super().__init__(f"invalid findings document ({source}): {reason}")
        self.source = source
        self.reason = reason
