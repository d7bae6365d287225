from agenda.core.errors import ExternalServiceError


class FakeMailer:
    """Records invitation ids instead of calling the mail endpoint."""

    def __init__(self, error: str = None):
        self.sent = []
        self.error = error

    def __call__(self, invitation_id: int) -> str:
        if self.error:
            raise ExternalServiceError(self.error)
        self.sent.append(invitation_id)
        return "Email sent"
