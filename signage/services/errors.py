class StoreError(Exception):
    """A read against the record store failed."""


class ResolutionUnavailable(Exception):
    """Schedule rules for a screen could not be fetched.

    The transport decides whether to answer with an error or let the device
    keep playing its last known assignment.
    """

    def __init__(self, screen_id: str, reason: str = "") -> None:
        self.screen_id = screen_id
        self.reason = reason
        message = f"Schedule resolution unavailable for screen {screen_id}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
