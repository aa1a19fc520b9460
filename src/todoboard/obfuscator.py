"""Opaque project identifiers — keeps raw primary keys out of URLs.

A token is Base64 over ``pad + shifted_digits + reversed(pad)``:
each decimal digit is rotated by five and wrapped in four random
alphanumeric characters, so the same id encodes differently on every
call.

This is obfuscation, not encryption. The shift is fixed and anyone
who looks at two tokens can invert it. Never use a token as proof
that the caller may see the resource; authorization always runs
against the decoded integer.
"""

from __future__ import annotations

import base64
import binascii
import random
import secrets
import string

PAD_ALPHABET = string.ascii_letters + string.digits
PAD_LENGTH = 4
DIGIT_SHIFT = 5

_system_random = secrets.SystemRandom()


class DecodeError(ValueError):
    """A token could not be turned back into a positive integer."""

    reason = "invalid token"

    def __init__(self, token: str):
        self.token = token
        super().__init__(self.reason)


class InvalidFormatError(DecodeError):
    reason = "invalid format"


class InvalidLengthError(DecodeError):
    reason = "invalid length"


class NonDigitCoreError(DecodeError):
    reason = "non-digit core"


class NotPositiveIntegerError(DecodeError):
    reason = "not a positive integer"


def _shift(digits: str, offset: int) -> str:
    return "".join(chr((ord(c) - 48 + offset) % 10 + 48) for c in digits)


class IdObfuscator:
    """Encode positive integers to opaque tokens and back.

    strict:  reject tokens whose core holds anything but 0-9. With
             strict off, stray characters are folded into 0-9 by the
             modulo, which is how tokens minted by older clients were
             read. That path can return a wrong id instead of failing.
    urlsafe: emit the URL-safe Base64 alphabet without "=" padding,
             so tokens go into paths and query strings unescaped.
             Decoding accepts both forms regardless.
    rng:     random source for padding. Defaults to the OS source.
    """

    def __init__(
        self,
        *,
        strict: bool = True,
        urlsafe: bool = True,
        rng: random.Random | None = None,
    ):
        self.strict = strict
        self.urlsafe = urlsafe
        self._rng = rng or _system_random

    def _padding(self) -> str:
        return "".join(self._rng.choice(PAD_ALPHABET) for _ in range(PAD_LENGTH))

    def encode(self, value: int) -> str:
        """Map a positive integer id to a token."""
        if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
            raise ValueError(f"expected a positive integer, got {value!r}")

        pad = self._padding()
        payload = f"{pad}{_shift(str(value), DIGIT_SHIFT)}{pad[::-1]}".encode("ascii")
        if self.urlsafe:
            return base64.urlsafe_b64encode(payload).decode("ascii").rstrip("=")
        return base64.b64encode(payload).decode("ascii")

    def decode(self, token: str) -> int:
        """Map a token back to its integer id.

        Raises a DecodeError subclass naming what was wrong.
        """
        normalized = token.strip().replace("-", "+").replace("_", "/")
        normalized += "=" * (-len(normalized) % 4)
        try:
            decoded = base64.b64decode(normalized, validate=True).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError, ValueError):
            raise InvalidFormatError(token) from None

        if len(decoded) < 2 * PAD_LENGTH:
            raise InvalidLengthError(token)

        core = decoded[PAD_LENGTH:-PAD_LENGTH]
        if self.strict and not all("0" <= c <= "9" for c in core):
            raise NonDigitCoreError(token)

        try:
            value = int(_shift(core, 10 - DIGIT_SHIFT))
        except ValueError:
            # empty core, or more digits than int() will parse
            raise NotPositiveIntegerError(token) from None
        if value <= 0:
            raise NotPositiveIntegerError(token)
        return value
