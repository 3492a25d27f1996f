"""
Console Errors
==============

Every failure the console can report. All of them carry a displayable
``message``; calling code tells them apart by class.

- ValidationError / IndexOutOfRange: local, recovered as form field state.
- Unauthenticated: no token, the request is never sent.
- NetworkError / HttpError / ApplicationError: transport outcomes, recorded
  on the owning request lifecycle and never retried.
- NotReady / ExportTimeout: content editor not usable.
- AlreadyPending / LifecycleError: request lifecycle misuse.
"""


class ConsoleError(Exception):
    """Base class for all console errors"""

    default_message = 'Something went wrong'

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(ConsoleError):
    """A field value failed its validation rule"""

    default_message = 'Invalid value'

    def __init__(self, message=None, field=None):
        super().__init__(message)
        self.field = field


class Unauthenticated(ConsoleError):
    default_message = 'You must be logged in to do that'


class ApiError(ConsoleError):
    """Base for errors coming back from the transport layer"""


class NetworkError(ApiError):
    """No response was received"""

    default_message = 'Network error: the server could not be reached'


class HttpError(ApiError):
    """The server answered outside the 2xx range"""

    def __init__(self, status, message=None):
        self.status = status
        super().__init__(message or f'HTTP {status}')


class ApplicationError(ApiError):
    """2xx response whose envelope says success: false"""

    default_message = 'Request failed'


class NotReady(ConsoleError):
    default_message = 'Email editor not ready'


class ExportTimeout(NotReady):
    default_message = 'Email editor did not finish exporting in time'


class IndexOutOfRange(ConsoleError):

    def __init__(self, index, length):
        self.index = index
        self.length = length
        super().__init__(f'Entry {index} does not exist (list has {length})')


class AlreadyPending(ConsoleError):
    default_message = 'A request for this operation is already in progress'


class LifecycleError(ConsoleError):
    """succeed()/fail() called on a lifecycle that is not pending"""
