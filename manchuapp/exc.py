class DoesNotExist(Exception):  # noqa: N818
    """Exception raised when a resource does not exist."""

    def __init__(self, resource_type: str, resource_id: int | str):
        self.resource_type = resource_type
        self.resource_id = resource_id
        super().__init__(f'{resource_type} with ID "{resource_id!s}" does not exist')


class AlreadyExists(Exception):  # noqa: N818
    """Exception raised when a resource already exists."""

    def __init__(self, resource_type: str, resource_id: int | str):
        self.resource_type = resource_type
        self.resource_id = resource_id
        super().__init__(f'{resource_type} with ID "{resource_id!s}" already exists')


class CollaboratorFailure(Exception):
    """
    Base class for failures reported by an external collaborator (the corpus
    store or the translation service).  These are never fatal: the caller
    keeps its previous state and shows a notice.
    """


class StorageFailed(CollaboratorFailure):  # noqa: N818
    """Exception raised when a corpus query fails."""

    def __init__(self, operation: str, error: Exception | str):
        self.operation = operation
        self.error = error
        super().__init__(f"Corpus {operation} failed: {error!s}")


class TranslationFailed(CollaboratorFailure):  # noqa: N818
    """Exception raised when the translation service call fails."""

    def __init__(self, reason: str, status_code: int | None = None):
        self.reason = reason
        self.status_code = status_code
        if status_code is not None:
            super().__init__(f"Translation failed (HTTP {status_code}): {reason}")
        else:
            super().__init__(f"Translation failed: {reason}")


class EmptyInput(Exception):  # noqa: N818
    """Exception raised when a translation is requested for blank text."""

    def __init__(self) -> None:
        super().__init__("Please enter text first.")


class MalformedReply(Exception):  # noqa: N818
    """
    Exception raised when the translation reply does not have the expected
    two labelled lines.
    """

    def __init__(self, raw: str, reason: str):
        self.raw = raw
        self.reason = reason
        super().__init__(f"Malformed translation reply: {reason}")
