"""Exceptions raised by calledout."""


class CalledOutError(Exception):
    """Base class for all calledout errors."""


class DocumentNotFound(CalledOutError):
    def __init__(self, doc_id: str):
        super().__init__(f"Document {doc_id} not found")
        self.doc_id = doc_id


class NoActiveEditTarget(CalledOutError):
    """A link was requested with nowhere to put the link text."""

    def __init__(self) -> None:
        super().__init__("No active edit target to receive the link")


class StaleDocumentError(CalledOutError):
    """The document changed between the snapshot read and the write."""

    def __init__(self, doc_id: str, reason: str = "document changed since it was read"):
        super().__init__(f"{doc_id}: {reason}")
        self.doc_id = doc_id


class InvalidTransition(CalledOutError):
    def __init__(self, state: str, event: str):
        super().__init__(f"Cannot {event} while {state}")
        self.state = state
        self.event = event
