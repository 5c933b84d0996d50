"""Integration tests for superadmin registration, email verification and 2FA."""

from datetime import datetime, timedelta, timezone

import pytest
import pytest_asyncio

from schoolbase.core.exceptions import ConflictError, InvalidOrExpiredCodeError
from schoolbase.domain.services import SuperadminVerificationService
from schoolbase.infrastructure.persistence.repositories import UserRepository

EMAIL = "owner@schoolbase.test"


class Clock:
    """Controllable time source."""

    def __init__(self) -> None:
        self.now = datetime(2026, 10, 18, 8, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock() -> Clock:
    return Clock()


@pytest.fixture
def service(db_session, mailer, clock) -> SuperadminVerificationService:
    return SuperadminVerificationService(
        db_session, mailer, clock=clock, two_factor_ttl=timedelta(minutes=10)
    )


def sent_verification_code(mailer) -> str:
    return mailer.send_verification_code.await_args.args[1]


def sent_two_factor_code(mailer) -> str:
    return mailer.send_two_factor_code.await_args.args[1]


class TestRegistration:
    @pytest.mark.asyncio
    async def test_register_mails_code_and_leaves_account_pending(self, service, mailer):
        user = await service.register(EMAIL, "Passw0rd!", "Ada", "Lovelace")

        code = sent_verification_code(mailer)
        assert user.is_email_verified is False
        assert user.verification_code == code
        assert user.role == "SUPERADMIN"

    @pytest.mark.asyncio
    async def test_duplicate_email_is_a_conflict(self, service):
        await service.register(EMAIL, "Passw0rd!")

        with pytest.raises(ConflictError) as exc_info:
            await service.register(EMAIL, "Other-pass1")

        assert exc_info.value.field == "email"
        assert exc_info.value.message == "Email already exists"

    @pytest.mark.asyncio
    async def test_mail_failure_keeps_registration(self, db_session, service, mailer):
        mailer.send_verification_code.return_value = False

        await service.register(EMAIL, "Passw0rd!")

        stored = await UserRepository(db_session).get_by_email(EMAIL)
        assert stored is not None
        assert stored.verification_code is not None


class TestEmailVerification:
    @pytest.mark.asyncio
    async def test_correct_code_verifies_once(self, service, mailer):
        await service.register(EMAIL, "Passw0rd!")
        code = sent_verification_code(mailer)

        user = await service.verify_email(EMAIL, code)

        assert user.is_email_verified is True
        assert user.verification_code is None
        with pytest.raises(InvalidOrExpiredCodeError):
            await service.verify_email(EMAIL, code)

    @pytest.mark.asyncio
    async def test_wrong_code_is_rejected(self, service, mailer):
        await service.register(EMAIL, "Passw0rd!")
        code = sent_verification_code(mailer)
        wrong = "111111" if code != "111111" else "222222"

        with pytest.raises(InvalidOrExpiredCodeError, match="Invalid verification code"):
            await service.verify_email(EMAIL, wrong)

    @pytest.mark.asyncio
    async def test_unknown_email_is_rejected(self, service):
        with pytest.raises(InvalidOrExpiredCodeError):
            await service.verify_email("nobody@schoolbase.test", "123456")


class TestTwoFactor:
    @pytest_asyncio.fixture
    async def verified_user(self, service, mailer):
        await service.register(EMAIL, "Passw0rd!")
        return await service.verify_email(EMAIL, sent_verification_code(mailer))

    @pytest.mark.asyncio
    async def test_code_completes_login_once(self, service, mailer, clock, verified_user):
        challenge = await service.begin_two_factor(verified_user)
        assert sent_two_factor_code(mailer) == challenge.code
        assert challenge.expires_at == clock.now + timedelta(minutes=10)

        clock.advance(minutes=9)
        user = await service.verify_two_factor(EMAIL, challenge.code)

        assert user.two_factor_code is None
        assert user.last_login == clock.now
        with pytest.raises(InvalidOrExpiredCodeError):
            await service.verify_two_factor(EMAIL, challenge.code)

    @pytest.mark.asyncio
    async def test_wrong_code_leaves_challenge_open(self, service, verified_user):
        challenge = await service.begin_two_factor(verified_user)
        wrong = "111111" if challenge.code != "111111" else "222222"

        with pytest.raises(InvalidOrExpiredCodeError):
            await service.verify_two_factor(EMAIL, wrong)

        user = await service.verify_two_factor(EMAIL, challenge.code)
        assert user.two_factor_code is None

    @pytest.mark.asyncio
    async def test_expired_code_is_cleared_and_rejected(self, service, clock, verified_user):
        challenge = await service.begin_two_factor(verified_user)

        clock.advance(minutes=10, seconds=1)
        with pytest.raises(InvalidOrExpiredCodeError, match="Invalid or expired 2FA code"):
            await service.verify_two_factor(EMAIL, challenge.code)

        assert verified_user.two_factor_code is None
        assert verified_user.two_factor_expires is None

    @pytest.mark.asyncio
    async def test_new_challenge_replaces_old_code(self, service, verified_user):
        first = await service.begin_two_factor(verified_user)
        second = await service.begin_two_factor(verified_user)

        if first.code != second.code:
            with pytest.raises(InvalidOrExpiredCodeError):
                await service.verify_two_factor(EMAIL, first.code)
        await service.verify_two_factor(EMAIL, second.code)
