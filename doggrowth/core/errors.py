"""
Errors raised by the growth prediction pipeline.

Each error carries a stable ``kind`` so the API layer can report it without
leaking exception class names.
"""


class GrowthPredictionError(Exception):
    kind = "GrowthPredictionError"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidQuery(GrowthPredictionError):
    """A required field is missing or out of domain. The oracle is never called."""

    kind = "InvalidQuery"

    def __init__(self, problems: list[str]):
        self.problems = list(problems)
        super().__init__("; ".join(self.problems) or "invalid query")


class DegenerateScaling(GrowthPredictionError):
    """The reference prediction cannot be used to rescale the curve."""

    kind = "DegenerateScaling"


class OracleFailure(GrowthPredictionError):
    """The growth model raised, timed out or returned malformed output."""

    kind = "OracleFailure"
