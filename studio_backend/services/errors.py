"""Domain errors raised by services and translated to HTTP responses by the routers."""


class SheetNotFoundError(LookupError):
    """The spreadsheet has no worksheet with the requested title."""

    def __init__(self, title: str):
        super().__init__(f'Sheet "{title}" not found.')
        self.title = title


class RowNotFoundError(LookupError):
    """No row matched the given criteria."""


class InvalidRequestError(ValueError):
    """The request is missing fields or names an unknown action."""


class OAuthError(RuntimeError):
    """Google's OAuth endpoints rejected a token operation."""

    def __init__(self, message: str, details=None):
        super().__init__(message)
        self.details = details
