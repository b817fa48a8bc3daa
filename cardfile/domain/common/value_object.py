"""
Base class for Value Objects.

Value Objects are immutable objects that are defined by their attributes
rather than by identity. Two value objects are equal if all their
attributes are equal.

Example:
    @dataclass(frozen=True)
    class Fingerprint(ValueObject):
        value: str

        def __post_init__(self) -> None:
            if len(self.value) != 64:
                raise ValueError("Invalid fingerprint")
"""


class ValueObject:
    """
    Base class for Value Objects in the domain model.

    Value Objects are:
    - Immutable (use frozen=True in dataclass)
    - Compared by value (all attributes must match)
    - Self-validating (validation in __post_init__)
    """

    def to_primitive(self) -> object:
        """
        Convert to primitive Python type for serialization.

        Returns the single attribute value for single-value objects,
        otherwise a dict of all attributes.
        """
        values = list(self.__dict__.values())
        if len(values) == 1:
            return values[0]
        return dict(self.__dict__)
