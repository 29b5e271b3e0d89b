import enum
import hashlib
import hmac
import time
from typing import Any

from . import utils
from .errors import InvalidDigits
from .factor import U64_MAX, Counter, Instant, MovingFactor, Timer, counter_value, validate_factor

MIN_DIGITS = 6
MAX_DIGITS = 8


class Algorithm(enum.Enum):
    """
    Hash function used to compute the HMAC a password is derived from.
    Member values are the names used in otpauth URIs.
    """

    SHA1 = "SHA1"
    SHA256 = "SHA256"
    SHA512 = "SHA512"

    @property
    def digest(self) -> Any:
        return _DIGESTS[self]


_DIGESTS = {
    Algorithm.SHA1: hashlib.sha1,
    Algorithm.SHA256: hashlib.sha256,
    Algorithm.SHA512: hashlib.sha512,
}


def validate_digits(digits: int) -> None:
    # RFC 4226 section 5.3: "Implementations MUST extract a 6-digit code at a
    # minimum and possibly 7 and 8-digit codes."
    if isinstance(digits, bool) or not isinstance(digits, int) or not MIN_DIGITS <= digits <= MAX_DIGITS:
        raise InvalidDigits(digits)


class Generator(object):
    """
    Holds everything needed to generate one-time passwords: the moving
    factor, the shared secret, the hash algorithm and the number of digits.

    Generators are values. They cannot be modified after construction;
    ``successor`` returns the generator for the next password instead.
    """

    __slots__ = ("_factor", "_secret", "_algorithm", "_digits")

    def __init__(
        self,
        factor: MovingFactor,
        secret: bytes,
        algorithm: Algorithm = Algorithm.SHA1,
        digits: int = 6,
    ) -> None:
        """
        :param factor: moving factor, ``Counter`` for HOTP or ``Timer`` for TOTP
        :param secret: raw shared secret (already base32-decoded)
        :param algorithm: hash function for the HMAC
        :param digits: number of digits in the password, 6 to 8
        :raises InvalidPeriod: if a timer period is not positive
        :raises InvalidDigits: if ``digits`` is out of range
        """
        validate_factor(factor)
        validate_digits(digits)
        object.__setattr__(self, "_factor", factor)
        object.__setattr__(self, "_secret", bytes(secret))
        object.__setattr__(self, "_algorithm", Algorithm(algorithm))
        object.__setattr__(self, "_digits", digits)

    @property
    def factor(self) -> MovingFactor:
        return self._factor

    @property
    def secret(self) -> bytes:
        return self._secret

    @property
    def algorithm(self) -> Algorithm:
        return self._algorithm

    @property
    def digits(self) -> int:
        return self._digits

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("{} is immutable".format(type(self).__name__))

    def __delattr__(self, name: str) -> None:
        raise AttributeError("{} is immutable".format(type(self).__name__))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Generator):
            return NotImplemented
        return (
            self._factor == other._factor
            and self._secret == other._secret
            and self._algorithm is other._algorithm
            and self._digits == other._digits
        )

    def __hash__(self) -> int:
        return hash((self._factor, self._secret, self._algorithm, self._digits))

    def __repr__(self) -> str:
        # never show the secret
        return "Generator(factor={!r}, algorithm={}, digits={})".format(self._factor, self._algorithm.name, self._digits)

    def password(self, at: Instant) -> str:
        """
        Generates the password for the given point in time.

        :param at: the target time, as a datetime or seconds since the epoch.
            Ignored by counter-based generators.
        :raises InvalidTime: if ``at`` is before the Unix epoch (timer only)
        :raises InvalidPeriod: if the timer period is not positive
        :raises InvalidDigits: if the digit count is out of range
        :returns: the password, exactly ``digits`` decimal characters
        """
        # Implements RFC 4226
        validate_digits(self._digits)
        counter = counter_value(self._factor, at)
        hasher = hmac.new(self._secret, self.int_to_bytestring(counter), self._algorithm.digest)
        hmac_hash = bytearray(hasher.digest())
        # Dynamic truncation: the low nibble of the last byte picks the offset.
        # Every supported digest is at least 20 bytes, so offset + 4 stays in range.
        offset = hmac_hash[-1] & 0xF
        code = (
            (hmac_hash[offset] & 0x7F) << 24
            | (hmac_hash[offset + 1] & 0xFF) << 16
            | (hmac_hash[offset + 2] & 0xFF) << 8
            | (hmac_hash[offset + 3] & 0xFF)
        )
        return str(code % 10**self._digits).rjust(self._digits, "0")

    def now(self) -> str:
        """
        Generates the password for the current time.
        """
        return self.password(time.time())

    def verify(self, otp: str, at: Instant) -> bool:
        """
        Verifies a password against the one generated for ``at``.

        :param otp: the password to check
        :param at: the time (or, for a counter, any value) it was generated for
        """
        return utils.strings_equal(str(otp), self.password(at))

    def successor(self) -> "Generator":
        """
        Returns the generator for the password that follows the one generated
        by this generator.

        A counter-based generator moves to the next counter value, wrapping
        from 2**64 - 1 back to 0. A timer-based generator is returned as is.
        """
        if isinstance(self._factor, Counter):
            return Generator(
                Counter((self._factor.value + 1) & U64_MAX),
                self._secret,
                self._algorithm,
                self._digits,
            )
        if isinstance(self._factor, Timer):
            return self
        raise TypeError("moving factor must be a Counter or a Timer, got {!r}".format(self._factor))

    @staticmethod
    def int_to_bytestring(i: int, padding: int = 8) -> bytes:
        """
        Turns an integer to the OATH specified
        bytestring, which is fed to the HMAC
        along with the secret
        """
        return i.to_bytes(padding, "big")

