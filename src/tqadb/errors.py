from __future__ import annotations


class TqadbError(Exception):
    pass


class StoreAccessError(TqadbError):
    """The store could not be reached or the query could not be executed."""


class MalformedDataError(TqadbError, ValueError):
    """Stored data that cannot be mapped onto the domain model.

    This points at corruption in the store, not at a caller mistake, so it is
    never swallowed: the surrounding read fails as a whole.
    """

    def __init__(self, message: str, *, value: object = None) -> None:
        super().__init__(message)
        self.value = value
