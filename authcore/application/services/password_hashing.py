"""Password hashing strategies."""

from __future__ import annotations

import base64
import binascii
import re

from argon2 import PasswordHasher as Argon2Hasher
from argon2 import Type
from argon2 import exceptions as argon2_errors

from authcore.domain.users.exceptions import HashingError, MalformedHashError
from authcore.domain.users.repositories import PasswordHasher
from authcore.shared.config import HasherConfig

_DUMMY_PASSWORD = "authcore-timing-equalizer"

_NUM = r"(?:0|[1-9][0-9]{0,9})"
_PHC_RE = re.compile(
    rf"\$argon2(?:id|i|d)\$v=(?P<v>{_NUM})"
    rf"\$m=(?P<m>{_NUM}),t=(?P<t>{_NUM}),p=(?P<p>{_NUM})"
    r"\$(?P<salt>[A-Za-z0-9+/]+)\$(?P<digest>[A-Za-z0-9+/]+)"
)
# libargon2 bounds (argon2.h)
_VERSIONS = (16, 19)
_MIN_SALT_BYTES = 8
_MIN_DIGEST_BYTES = 4
_MAX_U32 = 2**32 - 1
_MAX_LANES = 2**24 - 1


class Argon2PasswordHasher(PasswordHasher):
    """Argon2id hashes in PHC string form.

    The PHC string carries algorithm, version, cost parameters, salt and
    digest, so verification needs nothing but the stored value. A fresh
    random salt is drawn for every ``hash`` call.
    """

    def __init__(self, config: HasherConfig | None = None) -> None:
        overrides: dict[str, int] = {}
        if config is not None:
            for name in ("time_cost", "memory_cost", "parallelism"):
                value = getattr(config, name)
                if value is not None:
                    overrides[name] = value
        self._hasher = Argon2Hasher(type=Type.ID, **overrides)
        self._dummy_hash = self.hash(_DUMMY_PASSWORD)

    def hash(self, password: str) -> str:
        try:
            return self._hasher.hash(password)
        except argon2_errors.HashingError as exc:
            raise HashingError(str(exc)) from exc

    def verify(self, password: str, hashed: str) -> bool:
        self._parse(hashed)
        try:
            return self._hasher.verify(hashed, password)
        except argon2_errors.VerifyMismatchError:
            return False
        except argon2_errors.InvalidHashError as exc:
            raise MalformedHashError(str(exc)) from exc
        except argon2_errors.VerificationError as exc:
            raise HashingError(str(exc)) from exc

    def verify_dummy(self, password: str) -> None:
        """Spend one verification so a missing user costs as much as a wrong password."""
        self.verify(password, self._dummy_hash)

    @staticmethod
    def _parse(hashed: str) -> None:
        """Decode the whole PHC string; anything libargon2 would reject is ``MalformedHashError``."""
        if not isinstance(hashed, str):
            raise MalformedHashError("stored hash is not a string")
        match = _PHC_RE.fullmatch(hashed)
        if match is None:
            raise MalformedHashError("stored hash is not an argon2 PHC string")

        version, memory, time_cost, lanes = (int(match[k]) for k in ("v", "m", "t", "p"))
        if version not in _VERSIONS:
            raise MalformedHashError(f"unsupported argon2 version {version}")
        if not 1 <= lanes <= _MAX_LANES:
            raise MalformedHashError(f"parallelism {lanes} out of range")
        if not 1 <= time_cost <= _MAX_U32:
            raise MalformedHashError(f"time cost {time_cost} out of range")
        if not 8 * lanes <= memory <= _MAX_U32:
            raise MalformedHashError(f"memory cost {memory} out of range for p={lanes}")

        if len(_b64_decode(match["salt"], "salt")) < _MIN_SALT_BYTES:
            raise MalformedHashError("salt too short")
        if len(_b64_decode(match["digest"], "digest")) < _MIN_DIGEST_BYTES:
            raise MalformedHashError("digest too short")


def _b64_decode(value: str, part: str) -> bytes:
    """Unpadded base64 as libargon2 reads it: non-zero trailing bits are an error."""
    try:
        raw = base64.b64decode(value + "=" * (-len(value) % 4), validate=True)
    except binascii.Error as exc:
        raise MalformedHashError(f"{part} is not valid base64") from exc
    if base64.b64encode(raw).decode().rstrip("=") != value:
        raise MalformedHashError(f"{part} is not canonical base64")
    return raw
