class ScoringError(Exception):
    pass


class ValidationError(ScoringError):
    pass


class InvalidLevelError(ValidationError):
    pass


class NotFoundError(ScoringError):
    pass


class QuestionNotFoundError(NotFoundError):
    pass
