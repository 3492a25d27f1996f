"""
Auth Store
==========

Admin signup and login against the TAPI server. Both are unauthenticated
JSON calls; a successful response carries ``data.accessToken`` which is
handed to the AuthSession (and so persisted).

Local checks run before anything is sent. They never reach the network:
the failure is kept on ``local_error`` and the call returns None.
"""

import asyncio
import re

from ...core.api_client import ApiClient
from ...core.errors import ApiError, ApplicationError, NetworkError, ValidationError
from ...core.lifecycle import RequestLifecycle
from ...core.logging_service import LoggingService

# Rejects consecutive dots, leading/trailing dots in local part
_VALID_EMAIL = re.compile(r'^[a-zA-Z0-9_%+-]+(\.[a-zA-Z0-9_%+-]+)*@[a-zA-Z0-9-]+(\.[a-zA-Z0-9-]+)*\.[a-zA-Z]{2,}$')
_VALID_PHONE = re.compile(r'^[0-9]{10}$')


def validate_signup(first_name, last_name, email, password, phone):
    if not all([first_name, last_name, email, password, phone]):
        raise ValidationError("All fields are required!")
    if not _VALID_EMAIL.match(email):
        raise ValidationError("Enter a valid email address!", field='email')
    if not _VALID_PHONE.match(phone):
        raise ValidationError("Enter a valid 10-digit phone number!", field='phone')


def validate_login(email, password):
    if not email or not password:
        raise ValidationError("Email and Password are required!")


class AuthStore:

    kind = 'auth'

    def __init__(self, session, client=None):
        self.session = session
        self.client = client or ApiClient()
        self.signup_state = RequestLifecycle('auth.signup')
        self.login_state = RequestLifecycle('auth.login')
        self.local_error = None

    # ===== Derived flags =====

    @property
    def loading(self):
        return self.signup_state.is_pending or self.login_state.is_pending

    @property
    def success(self):
        return self.signup_state.succeeded or self.login_state.succeeded

    @property
    def error(self):
        """The message to show: local validation first, then the last failed call"""
        if self.local_error:
            return self.local_error
        for state in (self.login_state, self.signup_state):
            if state.failed:
                return state.message
        return None

    # ===== Operations =====

    async def signup(self, first_name, last_name, email, password, phone):
        try:
            validate_signup(first_name, last_name, email, password, phone)
        except ValidationError as e:
            self.local_error = e.message
            return None
        self.local_error = None

        body = {
            'firstName': first_name,
            'lastName': last_name,
            'email': email,
            'password': password,
            'phoneNumber': phone,
        }
        return await self._authenticate(self.signup_state, '/admin/signup', body, email, 'Signup failed')

    async def login(self, email, password):
        try:
            validate_login(email, password)
        except ValidationError as e:
            self.local_error = e.message
            return None
        self.local_error = None

        body = {'email': email, 'password': password}
        return await self._authenticate(self.login_state, '/admin/login', body, email, 'Login failed')

    def logout(self):
        self.session.logout()
        self.signup_state.reset()
        self.login_state.reset()
        self.local_error = None
        LoggingService.log_user_action(self.kind, 'logout')

    async def _authenticate(self, lifecycle, path, body, email, failure_message):
        lifecycle.start({'email': email})
        try:
            data = await self.client.send('POST', path, json=body, source=self.kind)
            token = data.get('accessToken') if isinstance(data, dict) else None
            if not token:
                raise ApplicationError(f"{failure_message}: no access token in response")
            self.session.store_token(token)
        except ApiError as e:
            LoggingService.warning(self.kind, f"{failure_message}: {e.message}", {'email': email})
            self._fail(lifecycle, e)
            return None
        except asyncio.CancelledError:
            LoggingService.warning(self.kind, f"{failure_message}: cancelled", {'email': email})
            self._fail(lifecycle, NetworkError("Request cancelled"))
            raise
        except Exception as e:
            LoggingService.log_error_with_traceback(self.kind, e, {'operation': lifecycle.name})
            self._fail(lifecycle, e)
            raise

        if lifecycle.is_pending:
            lifecycle.succeed(data)
        LoggingService.log_user_action(self.kind, path.rsplit('/', 1)[-1], user_id=email)
        return token

    @staticmethod
    def _fail(lifecycle, error):
        # logout() may have reset the slot while the call was in flight
        if lifecycle.is_pending:
            lifecycle.fail(error)
