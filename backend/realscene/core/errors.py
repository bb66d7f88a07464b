class UnknownQuestionError(ValueError):
    """Raised when a question id is not part of the catalog or the current batch"""


class ScenarioAssociationError(ValueError):
    """Raised when a generated scenario cannot be tied back to the question it was requested for"""


class TemplateCatalogError(RuntimeError):
    """Raised when a locale catalog is missing fallback templates"""
