"""Error kinds raised while authenticating, submitting and syncing responses."""


class LunchPollError(Exception):
    message = "Something went wrong."

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)
        if message:
            self.message = message


class MissingCredentials(LunchPollError):
    message = "Enter name and PIN."


class InvalidSecret(LunchPollError):
    message = "Wrong PIN!"


class RemotePersistenceFailure(LunchPollError):
    message = "Could not save response."


class RemoteReadFailure(LunchPollError):
    message = "Could not load responses."
