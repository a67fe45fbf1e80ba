"""
Single-view auth and onboarding state machine.

``AuthFlow`` walks a user through login, signup, OTP entry, forgot/reset
password and the getting-started wizard. Each submit validates its fields
locally before touching the network; a failed call leaves the step unchanged
and shows an inline error banner. The step pointer lives in memory only, so a
new ``AuthFlow`` (a page reload) always starts at ``login``.
"""

import logging
import math
import time
from dataclasses import dataclass
from enum import Enum

from email_validator import EmailNotValidError, validate_email

from ayu.client.api import ApiError
from ayu.client.otp_input import OtpInput
from ayu.client.wizard import GettingStartedWizard
from ayu.config import settings

logger = logging.getLogger(__name__)

BANNER_TTL_SECONDS = 4.0


class AuthStep(str, Enum):
    login = "login"
    signup = "signup"
    otp = "otp"
    forgot_password = "forgot_password"
    reset_password = "reset_password"
    getting_started = "getting_started"
    dashboard = "dashboard"


class InvalidTransition(RuntimeError):
    pass


class ResendCooldown:
    def __init__(self, seconds: int, clock=time.monotonic):
        self.seconds = seconds
        self.clock = clock
        self._started_at: float | None = None

    def start(self) -> None:
        self._started_at = self.clock()

    def remaining(self) -> int:
        if self._started_at is None:
            return 0
        left = self.seconds - (self.clock() - self._started_at)
        return max(0, math.ceil(left))

    @property
    def ready(self) -> bool:
        return self.remaining() == 0


@dataclass
class Banner:
    kind: str  # "error" | "info"
    text: str
    shown_at: float


@dataclass
class AuthForm:
    name: str = ""
    email: str = ""
    password: str = ""
    confirm_password: str = ""
    new_password: str = ""


def _blank(*values) -> bool:
    return any(not (value or "").strip() for value in values)


def is_valid_email(email: str) -> bool:
    try:
        validate_email(email, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


class AuthFlow:
    def __init__(self, api, session, clock=time.monotonic, cooldown_seconds: int | None = None, today=None):
        self.api = api
        self.session = session
        self.clock = clock
        self._today = today
        if cooldown_seconds is None:
            cooldown_seconds = settings.OTP_RESEND_COOLDOWN_SECONDS
        self.cooldown = ResendCooldown(cooldown_seconds, clock)
        self.reset()

    def reset(self) -> None:
        self.step = AuthStep.login
        self.form = AuthForm()
        self.otp_input = OtpInput()
        self.wizard = GettingStartedWizard(today=self._today)
        self.loading = False
        self.pending_user_id: int | None = None
        self.onboarding_return = AuthStep.login
        self._banner: Banner | None = None

    # ---- banners ----

    def _banner_text(self, kind: str) -> str:
        banner = self._banner
        if banner is None or banner.kind != kind:
            return ""
        if self.clock() - banner.shown_at > BANNER_TTL_SECONDS:
            self._banner = None
            return ""
        return banner.text

    @property
    def error(self) -> str:
        return self._banner_text("error")

    @property
    def info(self) -> str:
        return self._banner_text("info")

    def _fail(self, message: str) -> bool:
        self._banner = Banner("error", message, self.clock())
        return False

    def _notify(self, message: str) -> None:
        self._banner = Banner("info", message, self.clock())

    def _call(self, method, *args, **kwargs):
        self.loading = True
        try:
            return method(*args, **kwargs)
        finally:
            self.loading = False

    def _go(self, step: AuthStep, *allowed: AuthStep) -> None:
        if allowed and self.step not in allowed:
            raise InvalidTransition(f"cannot go from {self.step.value} to {step.value}")
        self._banner = None
        self.step = step

    # ---- explicit links ----

    def show_signup(self) -> None:
        self._go(AuthStep.signup, AuthStep.login)

    def show_login(self) -> None:
        self._go(AuthStep.login, AuthStep.signup, AuthStep.forgot_password, AuthStep.reset_password)

    def show_forgot_password(self) -> None:
        self._go(AuthStep.forgot_password, AuthStep.login)

    def back_to_signup(self) -> None:
        self._go(AuthStep.signup, AuthStep.otp)
        self.otp_input.clear()

    # ---- submits ----

    def submit_login(self, email: str | None = None, password: str | None = None) -> bool:
        self._require_step(AuthStep.login)
        if email is not None:
            self.form.email = email
        if password is not None:
            self.form.password = password

        if _blank(self.form.email, self.form.password):
            return self._fail("Please fill required fields.")
        if not is_valid_email(self.form.email):
            return self._fail("Please enter a valid email address.")

        try:
            data = self._call(self.api.signin, self.form.email.strip(), self.form.password)
        except ApiError as exc:
            return self._fail(exc.message)

        self.session.sign_in(data["token"], data["user"])
        self.form.password = ""
        self._go(AuthStep.dashboard)
        logger.info("Signed in as %s", self.form.email)
        return True

    def submit_signup(
        self,
        name: str | None = None,
        email: str | None = None,
        password: str | None = None,
        confirm_password: str | None = None,
    ) -> bool:
        self._require_step(AuthStep.signup)
        for attr, value in (("name", name), ("email", email), ("password", password),
                            ("confirm_password", confirm_password)):
            if value is not None:
                setattr(self.form, attr, value)

        form = self.form
        if _blank(form.name, form.email, form.password, form.confirm_password):
            return self._fail("Please fill required fields.")
        if not is_valid_email(form.email):
            return self._fail("Please enter a valid email address.")
        if form.password != form.confirm_password:
            return self._fail("Passwords do not match.")

        try:
            self._call(self.api.signup, form.name.strip(), form.email.strip(), form.password, form.confirm_password)
        except ApiError as exc:
            return self._fail(exc.message)

        self.otp_input.clear()
        self.cooldown.start()
        self._go(AuthStep.otp)
        self._notify(f"We sent a 6-digit code to {form.email.strip()}.")
        return True

    def submit_otp(self) -> bool:
        self._require_step(AuthStep.otp)
        if not self.otp_input.complete:
            return self._fail("Please enter the 6-digit code.")

        email = self.form.email.strip()
        try:
            self._call(self.api.verify_otp, email, self.otp_input.code)
        except ApiError as exc:
            return self._fail(exc.message)

        self.onboarding_return = AuthStep.login
        self.pending_user_id = None
        self._go(AuthStep.getting_started)
        self._notify("Email verified. Tell us a little about yourself.")
        self._lookup_pending_user()
        return True

    def resend_otp(self) -> bool:
        self._require_step(AuthStep.otp, AuthStep.reset_password)
        if not self.cooldown.ready:
            return self._fail(f"Please wait {self.cooldown.remaining()}s before requesting a new code.")

        email = self.form.email.strip()
        method = self.api.resend_otp if self.step == AuthStep.otp else self.api.forgot_password
        try:
            self._call(method, email)
        except ApiError as exc:
            return self._fail(exc.message)

        self.otp_input.clear()
        self.cooldown.start()
        self._notify("A new code is on its way.")
        return True

    def submit_forgot_password(self, email: str | None = None) -> bool:
        self._require_step(AuthStep.forgot_password)
        if email is not None:
            self.form.email = email
        if _blank(self.form.email):
            return self._fail("Please enter your email.")
        if not is_valid_email(self.form.email):
            return self._fail("Please enter a valid email address.")

        try:
            self._call(self.api.forgot_password, self.form.email.strip())
        except ApiError as exc:
            return self._fail(exc.message)

        self.otp_input.clear()
        self.cooldown.start()
        self._go(AuthStep.reset_password)
        self._notify("Check your email for the reset code.")
        return True

    def submit_reset_password(
        self,
        otp: str | None = None,
        new_password: str | None = None,
        confirm_password: str | None = None,
    ) -> bool:
        self._require_step(AuthStep.reset_password)
        if otp is not None:
            self.otp_input.clear()
            self.otp_input.paste(otp)
        if new_password is not None:
            self.form.new_password = new_password
        if confirm_password is not None:
            self.form.confirm_password = confirm_password

        form = self.form
        if not self.otp_input.complete:
            return self._fail("Please enter the 6-digit code.")
        if _blank(form.new_password, form.confirm_password):
            return self._fail("Please fill required fields.")
        if form.new_password != form.confirm_password:
            return self._fail("Passwords do not match.")

        try:
            self._call(
                self.api.reset_password,
                form.email.strip(),
                self.otp_input.code,
                form.new_password,
                form.confirm_password,
            )
        except ApiError as exc:
            return self._fail(exc.message)

        form.new_password = form.confirm_password = form.password = ""
        self._go(AuthStep.login)
        self._notify("Password reset. Please sign in.")
        return True

    # ---- getting started ----

    def begin_onboarding(self) -> None:
        """Open the wizard for a signed-in user whose profile is incomplete."""
        if not self.session.is_authenticated:
            raise InvalidTransition("onboarding from the dashboard requires a session")
        self.pending_user_id = (self.session.profile or {}).get("id")
        self.onboarding_return = AuthStep.dashboard
        self.wizard = GettingStartedWizard(today=self._today)
        self._go(AuthStep.getting_started)

    def _lookup_pending_user(self) -> bool:
        try:
            user = self._call(self.api.get_user, self.form.email.strip())
        except ApiError as exc:
            return self._fail(exc.message)
        self.pending_user_id = user["id"]
        return True

    def submit_getting_started(self) -> bool:
        self._require_step(AuthStep.getting_started)
        if not self.wizard.complete:
            return self._fail("Please complete all required fields.")
        if self.pending_user_id is None and not self._lookup_pending_user():
            return False

        try:
            user = self._call(self.api.update_profile, self.pending_user_id, **self.wizard.payload())
        except ApiError as exc:
            return self._fail(exc.message)

        if self.onboarding_return == AuthStep.dashboard:
            self.session.update_profile(user)
            self._go(AuthStep.dashboard)
        else:
            self._go(AuthStep.login)
            self._notify("Profile saved. Please sign in.")
        return True

    def _require_step(self, *steps: AuthStep) -> None:
        if self.step not in steps:
            raise InvalidTransition(f"action not available in step {self.step.value}")
