"""Exception types for openfiles."""


class OpenFilesError(Exception):
    """Base class for all openfiles errors."""


class UserInputError(OpenFilesError):
    """The user asked for something that cannot be done with the given input."""


class NoWorkspaceError(UserInputError):
    """A folder is not inside any known workspace root."""

    def __init__(self, path=None):
        self.path = path
        super().__init__("No workspace folder found")


class UnknownCommandError(UserInputError):
    """A command id is not registered with the dispatcher."""


class MalformedStateError(OpenFilesError):
    """The disabled-folder file could not be decoded into a list of paths."""


class OpenFailure(OpenFilesError):
    """A file cannot be opened as a text document."""
