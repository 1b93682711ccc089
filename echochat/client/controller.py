"""Register -> verify OTP -> dashboard flow for the client.

``AuthFlowController`` is the single owner of the current view. It talks to the
server through ``UserApi``, writes every authentication change through the
``SessionContext`` and reacts when another view clears the session.
"""
import logging
from typing import Callable, List, Optional

from ..core.validators import validate_fullname, validate_otp, validate_phone_number
from .errors import AuthClientError, AuthErrorKind
from .session import SessionContext, SessionEvent, SessionSnapshot, SessionUser, View
from .timer import CountdownTimer
from .transport import UserApi

logger = logging.getLogger(__name__)

RESEND_COOLDOWN_SECONDS = 60

ViewListener = Callable[[View], None]


class AuthFlowController:
    def __init__(
        self,
        api: UserApi,
        session: SessionContext,
        requested_view: Optional[View] = None,
        cooldown: Optional[CountdownTimer] = None,
        resend_cooldown_seconds: int = RESEND_COOLDOWN_SECONDS,
    ):
        self.api = api
        self.session = session
        self.cooldown = cooldown or CountdownTimer()
        self.resend_cooldown_seconds = resend_cooldown_seconds
        self.error: Optional[AuthClientError] = None
        self.busy = False
        self._view_listeners: List[ViewListener] = []
        self.view = self.resolve_initial_view(requested_view)
        self._sync_view_marker(self.view)
        if self.view == View.OTP:
            self.cooldown.start(self.resend_cooldown_seconds)
        self._unsubscribe = self.session.subscribe(self._on_session_change)

    # -- state -----------------------------------------------------------

    def resolve_initial_view(self, requested_view: Optional[View] = None) -> View:
        """Pick the view to show on load.

        An explicit request wins as long as the stored session can back it;
        otherwise the snapshot decides, falling back to login.
        """
        snapshot = self.session.snapshot
        if requested_view is not None:
            if requested_view == View.DASHBOARD and not (snapshot and snapshot.is_authenticated):
                return View.LOGIN
            if requested_view == View.OTP and not (snapshot and snapshot.is_pending_verification):
                return View.REGISTER
            return requested_view
        if snapshot is None:
            return View.LOGIN
        if snapshot.is_authenticated:
            return View.DASHBOARD
        if snapshot.is_pending_verification:
            return View.OTP
        return View.LOGIN

    def on_view_change(self, listener: ViewListener) -> Callable[[], None]:
        self._view_listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._view_listeners:
                self._view_listeners.remove(listener)

        return unsubscribe

    def _set_view(self, view: View) -> None:
        if view == self.view:
            return
        logger.info(f"Auth view {self.view.value} -> {view.value}")
        self.view = view
        self._sync_view_marker(view)
        for listener in list(self._view_listeners):
            listener(view)

    def _sync_view_marker(self, view: View) -> None:
        snapshot = self.session.snapshot
        if snapshot is not None and snapshot.currentView != view:
            self.session.update(snapshot.model_copy(update={"currentView": view}))

    def _fail(self, error: AuthClientError) -> View:
        logger.info(f"Auth step failed in {self.view.value}: {error.kind.value} {error.message}")
        self.error = error
        return self.view

    def dismiss_error(self) -> None:
        self.error = None

    @property
    def snapshot(self) -> Optional[SessionSnapshot]:
        return self.session.snapshot

    @property
    def resend_available_in(self) -> int:
        return self.cooldown.remaining

    def close(self) -> None:
        self.cooldown.cancel()
        self._unsubscribe()

    # -- navigation --------------------------------------------------------

    def go_to_register(self) -> View:
        self.dismiss_error()
        self._set_view(View.REGISTER)
        return self.view

    def go_to_login(self) -> View:
        self.dismiss_error()
        if self.view == View.DASHBOARD:
            return self.view
        self._set_view(View.LOGIN)
        return self.view

    def back_to_register(self) -> View:
        """Leave the OTP step; the pending registration stays on the server."""
        self.cooldown.cancel()
        return self.go_to_register()

    # -- submissions -------------------------------------------------------

    async def _submit(self, step) -> View:
        if self.busy:
            logger.debug("Ignoring submit while another request is in flight")
            return self.view
        self.busy = True
        self.error = None
        try:
            return await step()
        except AuthClientError as e:
            return self._fail(e)
        finally:
            self.busy = False

    async def login(self, phone_number: str) -> View:
        try:
            phone_number = validate_phone_number(phone_number)
        except ValueError as e:
            return self._fail(AuthClientError(AuthErrorKind.VALIDATION, str(e)))

        async def step() -> View:
            payload = await self.api.login(phone_number)
            self._enter_dashboard(payload.user, payload.accessToken)
            return self.view

        return await self._submit(step)

    async def register(self, phone_number: str, fullname: str) -> View:
        try:
            phone_number = validate_phone_number(phone_number)
            fullname = validate_fullname(fullname or "")
        except ValueError as e:
            return self._fail(AuthClientError(AuthErrorKind.VALIDATION, str(e)))

        async def step() -> View:
            pending = await self.api.register(phone_number, fullname)
            self.session.update(SessionSnapshot.pending(pending.phoneNumber, pending.fullname or fullname))
            self.cooldown.start(self.resend_cooldown_seconds)
            self._set_view(View.OTP)
            return self.view

        return await self._submit(step)

    async def verify_otp(self, code: str) -> View:
        snapshot = self.session.snapshot
        if snapshot is None or not snapshot.is_pending_verification:
            self.cooldown.cancel()
            self._set_view(View.REGISTER)
            return self._fail(AuthClientError(AuthErrorKind.VALIDATION, "Registration expired. Please register again."))
        try:
            code = validate_otp(code)
        except ValueError as e:
            return self._fail(AuthClientError(AuthErrorKind.VALIDATION, str(e)))

        async def step() -> View:
            payload = await self.api.verify_otp(snapshot.user.phoneNumber, code)
            user = payload.user
            if not user.fullname:
                user = user.model_copy(update={"fullname": snapshot.user.fullname})
            self._enter_dashboard(user, payload.accessToken)
            return self.view

        return await self._submit(step)

    async def resend_otp(self) -> View:
        if self.cooldown.running:
            return self._fail(AuthClientError(
                AuthErrorKind.COOLDOWN,
                f"Please wait {self.cooldown.remaining}s before requesting a new code.",
            ))
        snapshot = self.session.snapshot
        if snapshot is None or not snapshot.is_pending_verification:
            self._set_view(View.REGISTER)
            return self._fail(AuthClientError(AuthErrorKind.VALIDATION, "Registration expired. Please register again."))

        async def step() -> View:
            await self.api.register(snapshot.user.phoneNumber, snapshot.user.fullname)
            self.cooldown.start(self.resend_cooldown_seconds)
            return self.view

        return await self._submit(step)

    async def refresh_session(self) -> View:
        """Re-validate the stored token against the server."""
        snapshot = self.session.snapshot
        if snapshot is None or not snapshot.is_authenticated:
            if self.view == View.DASHBOARD:
                return self._leave(clear=False)
            return self.view

        async def step() -> View:
            try:
                user = await self.api.current_user(snapshot.accessToken)
            except AuthClientError as e:
                if e.kind == AuthErrorKind.UNAUTHORIZED:
                    self._fail(e)
                    return self._leave(clear=True)
                raise
            self.session.update(SessionSnapshot.authenticated(user, snapshot.accessToken))
            return self.view

        return await self._submit(step)

    async def logout(self) -> View:
        snapshot = self.session.snapshot
        token = snapshot.accessToken if snapshot else None
        try:
            await self.api.logout(token)
        except AuthClientError as e:
            # server acknowledgment is best effort
            logger.info(f"Logout notification failed: {e.kind.value}")
        self.dismiss_error()
        return self._leave(clear=True)

    # -- transitions ---------------------------------------------------------

    def _enter_dashboard(self, user: SessionUser, access_token: str) -> None:
        if not access_token:
            raise AuthClientError(AuthErrorKind.MALFORMED)
        self.cooldown.cancel()
        self.session.update(SessionSnapshot.authenticated(user, access_token))
        self._set_view(View.DASHBOARD)

    def _leave(self, clear: bool) -> View:
        self.cooldown.cancel()
        if clear:
            self.session.clear()
        self._set_view(View.LOGIN)
        return self.view

    def _on_session_change(self, event: SessionEvent, snapshot: Optional[SessionSnapshot]) -> None:
        if snapshot is not None:
            return
        # session gone (logout elsewhere or unreadable); only views that need it react
        if self.view in (View.DASHBOARD, View.OTP):
            self.cooldown.cancel()
            self._set_view(View.LOGIN)
