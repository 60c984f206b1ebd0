import pytest

from auth import LoginThrottle, check_password, sign_in, sign_up
from errors import AuthError


def test_sign_up_hashes_password_and_normalizes_email(db):
    user = sign_up(db, "  Someone@Example.COM ", "secret123")
    assert user.email == "someone@example.com"
    assert user.password_hash != "secret123"
    assert check_password("secret123", user.password_hash)


@pytest.mark.parametrize("email, password", [("", "secret123"), ("a@b.c", ""), ("a@b.c", "123")])
def test_sign_up_rejects_bad_input(db, email, password):
    with pytest.raises(AuthError):
        sign_up(db, email, password)


def test_duplicate_email_rejected(db):
    sign_up(db, "a@b.c", "secret123")
    with pytest.raises(AuthError, match="already registered"):
        sign_up(db, "A@B.C", "other-secret")


def test_sign_in(db):
    created = sign_up(db, "a@b.c", "secret123")
    assert sign_in(db, "A@b.c", "secret123").id == created.id

    for email, password in [("a@b.c", "wrong"), ("x@y.z", "secret123"), ("", "")]:
        with pytest.raises(AuthError, match="Invalid login credentials"):
            sign_in(db, email, password)


def test_throttle_locks_after_five_failures():
    throttle = LoginThrottle()
    for i in range(4):
        assert not throttle.record_failure(now=1000 + i)
    assert throttle.record_failure(now=1004)
    assert throttle.is_locked(now=1010)
    assert throttle.seconds_left(now=1010) == 54
    assert not throttle.is_locked(now=1065)

    throttle.reset()
    assert not throttle.is_locked(now=1010)


def test_throttle_forgets_old_failures():
    throttle = LoginThrottle()
    for i in range(4):
        throttle.record_failure(now=i)
    assert not throttle.record_failure(now=400)
    assert len(throttle.failed_attempts) == 1
