class FilmtivityError(Exception):
    """Base class for every error raised by the application."""


class DatabaseConnectionError(FilmtivityError):
    """The database could not be reached at startup."""


class ValidationError(FilmtivityError):
    """Model input or a user query was rejected."""


class UniquenessError(ValidationError):
    """A unique field collides with an existing record."""


class IntegrityError(FilmtivityError):
    """A stored password hash is malformed."""


class NetworkError(FilmtivityError):
    """The movie catalog API was unreachable or answered with an error."""
