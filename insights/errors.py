# exceptions raised by the insights engine
# a raised error fails the whole record, no partial insights are returned

class InsightsError(Exception):
    """base class for record insight failures"""

class MissingScoresError(InsightsError, RuntimeError):
    """model returned an empty score vector, nothing to attribute"""

    def __init__(self, message: str = "model does not produce scores for insights"):
        super().__init__(message)

class MetadataError(InsightsError, ValueError):
    """vector metadata is malformed or does not describe the vector"""

class ScoreError(InsightsError, RuntimeError):
    """model output is inconsistent (class index or score vector length)"""
