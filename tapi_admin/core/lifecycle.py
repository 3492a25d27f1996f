"""
Request Lifecycle
=================

Three-state machine (plus Idle) wrapping one outbound operation slot,
e.g. ("products", "create"). Subscribers see every transition synchronously,
before the call that caused it returns.
"""

import enum
import logging

from .errors import AlreadyPending, LifecycleError

logger = logging.getLogger(__name__)


class RequestState(enum.Enum):
    IDLE = 'idle'
    PENDING = 'pending'
    SUCCEEDED = 'succeeded'
    FAILED = 'failed'


class RequestLifecycle:
    """
    Tracks one (resource kind, operation) slot.

    Only one request may be pending per slot. A second ``start()`` while
    pending is rejected with AlreadyPending; the first request keeps its
    context.
    """

    def __init__(self, name):
        self.name = name
        self.state = RequestState.IDLE
        self.result = None
        self.error = None
        self.context = None
        # Bumped by start() and reset() so late completions can be told apart
        self.generation = 0
        self._subscribers = []

    def __repr__(self):
        return f"<RequestLifecycle {self.name} {self.state.value}>"

    # ===== Derived state =====

    @property
    def is_idle(self):
        return self.state is RequestState.IDLE

    @property
    def is_pending(self):
        return self.state is RequestState.PENDING

    @property
    def succeeded(self):
        return self.state is RequestState.SUCCEEDED

    @property
    def failed(self):
        return self.state is RequestState.FAILED

    @property
    def message(self):
        """Displayable error text, or None"""
        if self.error is None:
            return None
        return getattr(self.error, 'message', None) or str(self.error)

    # ===== Transitions =====

    def start(self, context=None):
        if self.is_pending:
            raise AlreadyPending(f"{self.name} is already in progress")
        self.result = None
        self.error = None
        self.context = context
        self.generation += 1
        self._transition(RequestState.PENDING)

    def succeed(self, result=None):
        self._require_pending('succeed')
        self.result = result
        self.error = None
        self._transition(RequestState.SUCCEEDED)

    def fail(self, error):
        self._require_pending('fail')
        self.result = None
        self.error = error
        self._transition(RequestState.FAILED)

    def reset(self):
        self.result = None
        self.error = None
        self.context = None
        self.generation += 1
        self._transition(RequestState.IDLE)

    def _require_pending(self, action):
        if not self.is_pending:
            raise LifecycleError(
                f"Cannot {action} {self.name}: state is {self.state.value}, expected pending"
            )

    def _transition(self, new_state):
        logger.debug("%s: %s -> %s", self.name, self.state.value, new_state.value)
        self.state = new_state
        for callback in list(self._subscribers):
            callback(self)

    # ===== Observation =====

    def subscribe(self, callback):
        """
        Register callback(lifecycle), called on every transition.

        Returns a function that removes the subscription.
        """
        self._subscribers.append(callback)

        def unsubscribe():
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def snapshot(self):
        """Plain dict view, handy for rendering and logging"""
        return {
            'name': self.name,
            'state': self.state.value,
            'result': self.result,
            'error': self.message,
        }
