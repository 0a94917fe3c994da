# messenger/domain/exceptions.py


class MessengerError(Exception):
    default_message = "Request could not be completed"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(MessengerError):
    default_message = "Invalid request data"


class NotFound(MessengerError):
    default_message = "Not found"


class Forbidden(MessengerError):
    default_message = "You are not allowed to do this"


class Conflict(MessengerError):
    default_message = "Already exists"
