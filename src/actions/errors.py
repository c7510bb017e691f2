class ActionError(Exception):
    """User-facing failure of a dashboard action; carries no internal detail."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_payload(self) -> dict[str, str]:
        return {"message": self.message}
