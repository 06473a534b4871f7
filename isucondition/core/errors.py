class ConditionError(ValueError):
    """Base class for condition strings the service refuses to interpret."""


class UnexpectedCountError(ConditionError):
    """The number of ``=true`` flags in a condition string is outside 0-3."""

    def __init__(self, condition: str, count: int) -> None:
        super().__init__(f"unexpected warn count: {count} in {condition!r}")
        self.condition = condition
        self.count = count


class InvalidConditionFormatError(ConditionError):
    """A condition string does not match the fixed three-flag layout."""

    def __init__(self, condition: str) -> None:
        super().__init__(f"invalid condition format: {condition!r}")
        self.condition = condition
