# application/login_orchestrator.py
from __future__ import annotations

import json
import uuid
from typing import Any, Callable, Dict, List, Optional, Sequence, Type

from application.outcome import EmailChallenge, Fido2RegistrationResult, Fido2Status
from application.ports.http_client import HttpResponse
from application.services import page_validator as pages
from application.services.csrf_propagator import csrf_header_for, tokens_from_fields
from application.services.execution_deps import ExecutionDeps
from application.services.field_injector import inject
from application.services.form_composer import FormComposer
from application.services.redactor import filled_field_names, mask_dict, mask_pairs
from application.services.script_response_parser import parse_redirect_url
from application.services.token_extractor import TokenExtractor
from application.services.totp_generator import compute as compute_totp
from application.services.webauthn_credential_builder import WebAuthnCredentialBuilder
from domain.account import Account
from domain.exceptions import (
    AlreadyLoggedIn,
    InvalidEmailPage,
    InvalidEmailSending,
    InvalidMethodSelectionPage,
    InvalidPasswordPage,
    InvalidResourceListPage,
    InvalidTOTPPage,
    InvalidUserNamePage,
    InvalidWaitingPage,
    LoginFailed,
    MissingTOTPSecret,
    ParseError,
    SessionStateError,
)
from domain.fields import FIDO2_RELAY_CSRF, FIDO2_SETTINGS_CSRF, PAGE_CSRF, CsrfSpec, FormField, MetaToken
from domain.request import PortalRequest
from domain.session_state import SessionState

IDENTIFIER_REGION = "div#identifier-field-wrapper"
LOGIN_FORM_REGION = "form#login"
EMAIL_OTP_FORM_REGION = "form#emailotp-form"
TOTP_FORM_REGION = "form#totp-form"

JSON_ACCEPT = "application/json"
SCRIPT_ACCEPT = "text/javascript, application/javascript"
XHR_HEADERS = {"X-Requested-With": "XMLHttpRequest"}

RELAY_ERROR_KEYS = ("error", "errors", "errorCode")


class LoginOrchestrator:
    """
    Sign-in state machine for the portal.

    One instance drives one session. Every step waits for its response, validates it,
    and only then advances the state. Any failure ends the attempt; call start() again
    to retry from the beginning.

        orchestrator.start(account)          # START -> METHOD_SELECTED
        orchestrator.login_totp()            # -> RESOURCE_LIST_REACHED
      or
        challenge = orchestrator.login_email()
        orchestrator.complete_email(otp)     # -> RESOURCE_LIST_REACHED
    """

    def __init__(
        self,
        deps: ExecutionDeps,
        extractor: Optional[TokenExtractor] = None,
        composer: Optional[FormComposer] = None,
        credential_builder: Optional[WebAuthnCredentialBuilder] = None,
    ):
        self._deps = deps
        self._log = deps.logger
        self._extractor = extractor or TokenExtractor()
        self._composer = composer or FormComposer()
        self._credentials = credential_builder or WebAuthnCredentialBuilder(deps.authenticator)

        self._state = SessionState.START
        self._account: Optional[Account] = None
        self._method_selection_page: Optional[str] = None
        self._email_challenge: Optional[EmailChallenge] = None
        self._resource_list_page: Optional[str] = None
        self._failed = False

    # -------------------------
    # public surface
    # -------------------------

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def resource_list_page(self) -> Optional[str]:
        return self._resource_list_page

    def reset(self) -> None:
        self._state = SessionState.START
        self._failed = False
        self._account = None
        self._method_selection_page = None
        self._email_challenge = None
        self._resource_list_page = None
        self._log = self._deps.logger

    def start(self, account: Account) -> str:
        """
        Username and password steps, then the method-selection page.

        Returns the method-selection page body. Raises AlreadyLoggedIn when the
        session is already authenticated.
        """
        self._begin(account)
        return self._run("start", self._start)

    def login_totp(self) -> str:
        """TOTP branch. Returns the resource-list page body."""
        self._require(SessionState.METHOD_SELECTED, "login_totp")
        return self._run("login_totp", self._login_totp)

    def login_with_totp(self, account: Account) -> str:
        self.start(account)
        return self.login_totp()

    def login_email(self) -> EmailChallenge:
        """Ask the portal to email an OTP. Pass the returned challenge to complete_email()."""
        self._require(SessionState.METHOD_SELECTED, "login_email")
        return self._run("login_email", self._login_email)

    def complete_email(self, otp: str, challenge: Optional[EmailChallenge] = None) -> str:
        """Submit the emailed OTP. Returns the resource-list page body."""
        self._require(SessionState.EMAIL_CHALLENGE_ISSUED, "complete_email")
        return self._run("complete_email", self._complete_email, otp, challenge or self._email_challenge)

    def check_credentials(self, username: str, password: str) -> bool:
        """
        Username/password probe. Stops after the password step and reports whether it
        was accepted instead of raising InvalidPasswordPage.
        """
        self._begin(Account(username=username, password=password))
        return self._run("check_credentials", self._check_credentials)

    def register_fido2(self) -> Fido2RegistrationResult:
        """
        FIDO2 registration on an authenticated session.

        Best effort: no page validation happens in this branch, the outcome is reported
        as a Fido2RegistrationResult.
        """
        return self._run("register_fido2", self._register_fido2)

    # -------------------------
    # steps
    # -------------------------

    def _start(self) -> str:
        username_page = self._fetch_username_page()
        self._submit_username(username_page)

        if not self._submit_password(username_page):
            raise self._fail(InvalidPasswordPage, "password submission did not redirect")
        self._advance(SessionState.PASSWORD_ENTERED)

        resp = self._send(
            PortalRequest(method="GET", url=self._deps.endpoint("method_selection_page")),
            step="method_selection_page",
        )
        if not pages.is_method_selection_page(resp.text):
            raise self._fail(InvalidMethodSelectionPage, "method selection marker not found")

        self._method_selection_page = resp.text
        self._advance(SessionState.METHOD_SELECTED)
        return resp.text

    def _check_credentials(self) -> bool:
        username_page = self._fetch_username_page()
        self._submit_username(username_page)
        ok = self._submit_password(username_page)
        if ok:
            self._advance(SessionState.PASSWORD_ENTERED)
        self._log.info("login.credentials_checked", ok=ok)
        return ok

    def _fetch_username_page(self) -> str:
        resp = self._send(
            PortalRequest(method="GET", url=self._deps.endpoint("username_page")),
            step="username_page",
        )
        # ログイン済み判定はユーザー名ページ判定より先
        if pages.is_already_authenticated(resp.text):
            raise AlreadyLoggedIn("session is already authenticated")
        if not pages.is_username_page(resp.text):
            raise self._fail(InvalidUserNamePage, "username page marker not found")
        return resp.text

    def _submit_username(self, username_page: str) -> None:
        account = self._current_account()
        metas = self._extractor.extract_meta(username_page)
        fields = self._extractor.extract_inputs(
            self._extractor.extract_fragment(username_page, IDENTIFIER_REGION)
        )
        fields = inject(fields, account.username, "")

        resp = self._post_form(
            "username_submit",
            fields,
            metas,
            PAGE_CSRF,
            accept=JSON_ACCEPT,
            step="username_submit",
        )
        if not pages.is_username_accepted(resp.text, account.username):
            raise self._fail(InvalidUserNamePage, "identifier was not accepted")
        self._advance(SessionState.USERNAME_ENTERED)

    def _submit_password(self, username_page: str) -> bool:
        account = self._current_account()
        # パスワードformは最初のユーザー名ページから取る（JSONレスポンスではない）
        metas = self._extractor.extract_meta(username_page)
        fields = self._extractor.extract_inputs(
            self._extractor.extract_fragment(username_page, LOGIN_FORM_REGION)
        )
        fields = inject(fields, account.username, account.password)

        resp = self._post_form(
            "password_submit",
            fields,
            metas,
            PAGE_CSRF,
            accept=SCRIPT_ACCEPT,
            step="password_submit",
        )
        return pages.is_redirect_script(resp.text)

    def _login_email(self) -> EmailChallenge:
        method_page = self._method_selection_page or ""
        metas = self._extractor.extract_meta(method_page)

        resp = self._post_form(
            "email_sending",
            [],
            metas,
            PAGE_CSRF,
            accept=JSON_ACCEPT,
            step="email_sending",
        )
        if not pages.is_email_sent(resp.text):
            raise self._fail(InvalidEmailSending, "email dispatch did not report success")

        fields = self._extractor.extract_inputs(
            self._extractor.extract_fragment(method_page, EMAIL_OTP_FORM_REGION)
        )
        challenge = EmailChallenge(fields=fields, metas=metas)
        self._email_challenge = challenge
        self._advance(SessionState.EMAIL_CHALLENGE_ISSUED)
        return challenge

    def _complete_email(self, otp: str, challenge: Optional[EmailChallenge]) -> str:
        if challenge is None:
            raise SessionStateError("no email challenge to complete")

        fields = inject(challenge.fields, otp, "")
        resp = self._post_form(
            "otp_submit",
            fields,
            challenge.metas,
            PAGE_CSRF,
            accept=SCRIPT_ACCEPT,
            step="email_otp_submit",
        )
        if not pages.is_redirect_script(resp.text):
            raise self._fail(InvalidEmailPage, "OTP submission did not redirect")
        return self._finish_second_factor(resp.text)

    def _login_totp(self) -> str:
        account = self._current_account()
        method_page = self._method_selection_page or ""
        metas = self._extractor.extract_meta(method_page)
        fields = self._extractor.extract_inputs(
            self._extractor.extract_fragment(method_page, TOTP_FORM_REGION)
        )

        if not account.has_totp_secret:
            raise self._fail(MissingTOTPSecret, "account has no TOTP secret")
        self._advance(SessionState.TOTP_CHALLENGE_ISSUED)

        code = compute_totp(account.totp_secret or "", for_time=self._deps.clock())
        fields = inject(fields, code, "")

        resp = self._post_form(
            "otp_submit",
            fields,
            metas,
            PAGE_CSRF,
            accept=SCRIPT_ACCEPT,
            step="totp_submit",
        )
        if not pages.is_redirect_script(resp.text):
            raise self._fail(InvalidTOTPPage, "TOTP submission did not redirect")
        return self._finish_second_factor(resp.text)

    def _finish_second_factor(self, script: str) -> str:
        """redirect script -> waiting page -> resource list"""
        waiting_url = self._deps.resolve_url(parse_redirect_url(script))

        waiting = self._send(PortalRequest(method="GET", url=waiting_url), step="waiting_page")
        if not pages.is_waiting_page(waiting.text):
            raise self._fail(InvalidWaitingPage, "waiting page marker not found")
        self._advance(SessionState.WAITING)

        fields = self._extractor.extract_inputs(waiting.text)
        resp = self._send(
            PortalRequest(
                method="POST",
                url=self._deps.endpoint("resource_list"),
                headers={"Referer": waiting_url},
                form_list=self._composer.compose(fields),
            ),
            step="resource_list",
            fields=fields,
        )
        if not pages.is_resource_list_page(resp.text):
            raise self._fail(InvalidResourceListPage, "resource list marker not found")

        self._resource_list_page = resp.text
        self._advance(SessionState.RESOURCE_LIST_REACHED)
        return resp.text

    def _register_fido2(self) -> Fido2RegistrationResult:
        page = self._send(PortalRequest(method="GET", url=self._deps.endpoint("fido2_page")), step="fido2_page")
        fields = self._extractor.extract_inputs(page.text)
        tokens = tokens_from_fields(fields)

        settings = self._post_json("fido2_settings", {}, tokens, FIDO2_SETTINGS_CSRF, step="fido2_settings")
        if settings.is_error:
            return self._fido2_rejected("fido2_settings", settings)

        relay1 = self._post_json("fido2_relay1", {}, tokens, FIDO2_RELAY_CSRF, step="fido2_relay1")
        if relay1.is_error:
            return self._fido2_rejected("fido2_relay1", relay1)

        try:
            credential = self._credentials.build(relay1.text)
        except ParseError as e:
            self._log.warning("fido2.challenge_unreadable", status=relay1.status, error=str(e))
            return Fido2RegistrationResult(Fido2Status.SERVER_REJECTED, http_status=relay1.status, detail=str(e))

        if credential is None:
            self._log.info("fido2.no_credential", authenticator=self._credentials.available)
            return Fido2RegistrationResult(Fido2Status.NO_CREDENTIAL, http_status=relay1.status)

        relay2 = self._post_json("fido2_relay2", credential, tokens, FIDO2_RELAY_CSRF, step="fido2_relay2")
        result = _judge_relay_result(relay2)
        self._log.info("fido2.result", status=result.status.value, http_status=relay2.status)
        return result

    def _fido2_rejected(self, step: str, resp: HttpResponse) -> Fido2RegistrationResult:
        self._log.warning("fido2.rejected", step=step, status=resp.status)
        return Fido2RegistrationResult(Fido2Status.SERVER_REJECTED, http_status=resp.status, detail=resp.text[:200])

    # -------------------------
    # plumbing
    # -------------------------

    def _begin(self, account: Account) -> None:
        self.reset()
        self._account = account
        self._log = self._deps.logger.bind(attempt_id=uuid.uuid4().hex, username=account.username)
        self._log.info("login.start")

    def _run(self, operation: str, fn: Callable[..., Any], *args: Any) -> Any:
        try:
            return fn(*args)
        except AlreadyLoggedIn:
            self._log.info("login.already_authenticated", operation=operation)
            raise
        except Exception as e:
            if isinstance(e, LoginFailed) and e.state is None:
                e.state = self._state
            # 解析失敗・通信失敗も含めて打ち切り、やり直しは start() から
            self._failed = True
            self._log.error(
                "login.failed",
                operation=operation,
                error_type=type(e).__name__,
                error=str(e),
                state=self._state.value,
            )
            raise

    def _require(self, expected: SessionState, operation: str) -> None:
        if self._failed:
            raise SessionStateError(f"{operation}: the attempt has failed, call start() again")
        if self._state != expected:
            raise SessionStateError(
                f"{operation} requires state {expected.value}, current state is {self._state.value}"
            )

    def _advance(self, new_state: SessionState) -> None:
        self._log.info("login.state", from_state=self._state.value, to_state=new_state.value)
        self._state = new_state

    def _fail(self, exc_type: Type[LoginFailed], message: str) -> LoginFailed:
        return exc_type(message, state=self._state)

    def _current_account(self) -> Account:
        if self._account is None:
            raise SessionStateError("no account; call start() first")
        return self._account

    def _post_form(
        self,
        endpoint_name: str,
        fields: Sequence[FormField],
        tokens: Sequence[MetaToken],
        csrf: CsrfSpec,
        accept: str,
        step: str,
    ) -> HttpResponse:
        headers: Dict[str, str] = {"Accept": accept}
        headers.update(XHR_HEADERS)
        headers.update(csrf_header_for(tokens, csrf))
        request = PortalRequest(
            method="POST",
            url=self._deps.endpoint(endpoint_name),
            headers=headers,
            form_list=self._composer.compose(fields),
        )
        return self._send(request, step=step, fields=fields)

    def _post_json(
        self,
        endpoint_name: str,
        body: Dict[str, Any],
        tokens: Sequence[MetaToken],
        csrf: CsrfSpec,
        step: str,
    ) -> HttpResponse:
        headers: Dict[str, str] = {"Accept": JSON_ACCEPT}
        headers.update(XHR_HEADERS)
        headers.update(csrf_header_for(tokens, csrf))
        request = PortalRequest(
            method="POST",
            url=self._deps.endpoint(endpoint_name),
            headers=headers,
            json_body=body,
        )
        return self._send(request, step=step)

    def _send(self, request: PortalRequest, step: str, fields: Sequence[FormField] = ()) -> HttpResponse:
        # DEBUG: form / headers はマスクしてログ
        self._log.debug(
            "http.request",
            step=step,
            method=request.method,
            url=request.url,
            headers=mask_dict(request.headers),
            form=mask_pairs(request.form_list or [], extra_keys=filled_field_names(fields)),
            has_json=request.json_body is not None,
        )
        resp = self._deps.http_client.send(request)
        self._log.info(
            "http.response",
            step=step,
            status=resp.status,
            final_url=resp.url,
            body_len=len(resp.text or ""),
        )
        return resp


def _judge_relay_result(resp: HttpResponse) -> Fido2RegistrationResult:
    if resp.is_error:
        return Fido2RegistrationResult(Fido2Status.SERVER_REJECTED, http_status=resp.status, detail=resp.text[:200])

    try:
        body = json.loads(resp.text)
    except json.JSONDecodeError:
        body = None

    if isinstance(body, dict):
        errors: List[str] = [k for k in RELAY_ERROR_KEYS if body.get(k)]
        if errors:
            detail = json.dumps({k: body[k] for k in errors}, ensure_ascii=False)
            return Fido2RegistrationResult(Fido2Status.SERVER_REJECTED, http_status=resp.status, detail=detail)

    return Fido2RegistrationResult(Fido2Status.SUCCESS, http_status=resp.status)
