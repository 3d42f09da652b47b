import asyncio
from datetime import timedelta

import pytest

from shared.errors import Forbidden, InvalidOrExpiredToken, MissingToken
from shared.security import (
    Role,
    SessionContext,
    authenticate,
    create_access_token,
    require_role,
    verify_access_token,
)
from shared.security.locks import KeyedLocks


def test_token_round_trip_carries_subject_and_role():
    token = create_access_token({"sub": "7", "role": "admin"})
    payload = verify_access_token(token)
    assert payload["sub"] == "7"
    assert payload["role"] == "admin"
    assert "exp" in payload


def test_expired_token_is_rejected():
    token = create_access_token({"sub": "7", "role": "user"}, expires_delta=timedelta(seconds=-5))
    assert verify_access_token(token) is None
    with pytest.raises(InvalidOrExpiredToken):
        authenticate(token)


def test_forged_role_is_rejected():
    header, _, signature = create_access_token({"sub": "7", "role": "user"}).split(".")
    _, admin_payload, _ = create_access_token({"sub": "7", "role": "admin"}).split(".")
    with pytest.raises(InvalidOrExpiredToken):
        authenticate(".".join([header, admin_payload, signature]))


def test_missing_token():
    with pytest.raises(MissingToken):
        authenticate(None)


def test_unknown_role_in_token_is_rejected():
    token = create_access_token({"sub": "7", "role": "superuser"})
    with pytest.raises(InvalidOrExpiredToken):
        authenticate(token)


def test_authenticate_builds_context():
    ctx = authenticate(create_access_token({"sub": "3", "role": "user"}))
    assert ctx == SessionContext(user_id=3, role=Role.USER)
    assert not ctx.is_admin


def test_require_role():
    admin = SessionContext(user_id=1, role=Role.ADMIN)
    user = SessionContext(user_id=2, role=Role.USER)

    require_role(admin, Role.ADMIN)
    require_role(user, Role.USER)
    with pytest.raises(Forbidden):
        require_role(user, Role.ADMIN)
    with pytest.raises(Forbidden):
        require_role(admin, Role.USER)


async def test_keyed_locks_serialize_same_key():
    locks = KeyedLocks()
    events = []

    async def worker(name):
        async with locks.hold("user:1"):
            events.append(f"{name}-in")
            await asyncio.sleep(0.01)
            events.append(f"{name}-out")

    await asyncio.gather(worker("a"), worker("b"))

    assert events in (["a-in", "a-out", "b-in", "b-out"], ["b-in", "b-out", "a-in", "a-out"])
    assert len(locks) == 0


async def test_keyed_locks_do_not_block_other_keys():
    locks = KeyedLocks()
    async with locks.hold("product:1"):
        await asyncio.wait_for(_enter(locks, "product:2"), timeout=1)
    assert len(locks) == 0


async def _enter(locks, key):
    async with locks.hold(key):
        return True
