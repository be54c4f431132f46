class HandleLookupError(LookupError):
    """Codeforces could not resolve a handle, or the API call itself failed."""

    def __init__(self, handle, message=''):
        self.handle = handle
        super().__init__(message or f"Could not fetch Codeforces data for {handle}")


class PersistenceError(Exception):
    """A database write for a student record failed."""
