from __future__ import annotations


class InvalidRelationshipTypeError(ValueError):
    def __init__(self, value: object) -> None:
        super().__init__(f"invalid relationship_type: {value!r}")
        self.value = value


class InvalidDegreeError(ValueError):
    def __init__(self, degree: int, maximum: int) -> None:
        super().__init__(f"degree must be between 1 and {maximum}, got {degree}")
        self.degree = degree
        self.maximum = maximum
