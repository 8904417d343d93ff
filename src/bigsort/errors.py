from __future__ import annotations


class BigSortError(Exception):
    """Base class for errors raised by bigsort."""


class InvalidRangeError(BigSortError, ValueError):
    def __init__(self, size: int, min_value: int, max_value: int):
        self.size = size
        self.min_value = min_value
        self.max_value = max_value
        available = max(0, max_value - min_value + 1)
        if size < 0:
            message = f"Array size ({size}) must not be negative."
        else:
            message = (
                f"Array size ({size}) is greater than the number of unique values "
                f"in the range [{min_value}, {max_value}] ({available})."
            )
        super().__init__(message)


class EmptyInputError(BigSortError, ValueError):
    def __init__(self):
        super().__init__("Cannot sort an empty collection: maximum element is undefined.")


class ValueOutOfRangeError(BigSortError, ValueError):
    def __init__(self, value: int):
        self.value = value
        super().__init__(f"Value {value} is not a positive integer.")


class DuplicateValueError(BigSortError, ValueError):
    def __init__(self, value: int):
        self.value = value
        super().__init__(f"Value {value} appears more than once in the input.")
