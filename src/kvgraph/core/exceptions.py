"""Exception hierarchy for the model layer."""


class KvGraphError(Exception):
    """Base class for all kvgraph errors."""


class ValidationError(KvGraphError):
    """A candidate document failed field or uniqueness validation.

    Attributes:
        messages: Human-readable messages, one per failed check.
    """

    def __init__(self, messages: list[str]) -> None:
        self.messages = list(messages)
        super().__init__("; ".join(self.messages))


class NotFoundError(KvGraphError):
    """Raised when a document id does not exist in its collection."""

    def __init__(self, model_name: str, document_id: str) -> None:
        self.model_name = model_name
        self.document_id = document_id
        super().__init__(f"{model_name} not found: {document_id}")


class StoreError(KvGraphError):
    """Raised when the key-value backend rejects or fails a command."""


class HookAbortedError(KvGraphError):
    """Raised when a registered before-hook cancels an operation."""

    def __init__(self, event: str, message: str) -> None:
        self.event = event
        super().__init__(message)
