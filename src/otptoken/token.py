import logging
import math
import re
from typing import Dict, NamedTuple, Optional, Union
from urllib.parse import unquote, unquote_plus, urlparse

from . import utils
from .errors import (
    DuplicateQueryItem,
    InvalidAlgorithm,
    InvalidCounterValue,
    InvalidDigitsValue,
    InvalidFactor,
    InvalidSecret,
    InvalidTimerPeriod,
    InvalidURLScheme,
    MissingFactor,
    MissingSecret,
)
from .factor import U64_MAX, Counter, MovingFactor, Timer
from .otp import Algorithm, Generator

logger = logging.getLogger(__name__)

DEFAULT_ALGORITHM = Algorithm.SHA1
DEFAULT_DIGITS = 6
DEFAULT_COUNTER = 0
DEFAULT_PERIOD = 30

FACTOR_COUNTER = "hotp"
FACTOR_TIMER = "totp"

QUERY_ALGORITHM = "algorithm"
QUERY_SECRET = "secret"
QUERY_COUNTER = "counter"
QUERY_DIGITS = "digits"
QUERY_PERIOD = "period"
QUERY_ISSUER = "issuer"

QUERY_KEYS = (QUERY_ALGORITHM, QUERY_SECRET, QUERY_COUNTER, QUERY_DIGITS, QUERY_PERIOD, QUERY_ISSUER)

_COUNTER_RE = re.compile(r"\+?[0-9]+")
_DIGITS_RE = re.compile(r"[+-]?[0-9]+")
_PERIOD_RE = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


class Token(NamedTuple):
    """
    A named, provisioned one-time password credential.
    """

    name: str
    issuer: str
    generator: Generator

    def to_url(self) -> str:
        return to_url(self.name, self.issuer, self.generator)

    def provisioning_uri(self) -> str:
        return provisioning_uri(self)

    @classmethod
    def from_url(cls, uri: str, secret: Optional[bytes] = None) -> "Token":
        return from_url(uri, secret=secret)


def to_url(name: str, issuer: str, generator: Generator) -> str:
    """
    Serializes a generator and its account metadata to an otpauth URI.

    The secret is left out. Timer periods are written as whole seconds, so
    a fractional period does not survive the round trip.

    :param name: account name, used as the URI path
    :param issuer: issuer, written verbatim to the ``issuer`` query item
    :param generator: the password generator to describe
    :raises UrlGenerationFailure: if the name or issuer cannot be escaped
    :returns: otpauth URI
    """
    factor = generator.factor
    params: Dict[str, str] = {
        QUERY_ALGORITHM: generator.algorithm.value,
        QUERY_DIGITS: str(generator.digits),
        QUERY_ISSUER: issuer,
    }
    if isinstance(factor, Timer):
        otp_type = FACTOR_TIMER
        params[QUERY_PERIOD] = str(int(factor.period))
    elif isinstance(factor, Counter):
        otp_type = FACTOR_COUNTER
        params[QUERY_COUNTER] = str(factor.value)
    else:
        raise TypeError("moving factor must be a Counter or a Timer, got {!r}".format(factor))

    return utils.build_uri(otp_type, name, params)


def provisioning_uri(token: Token) -> str:
    """
    Returns the otpauth URI for ``token`` with its secret embedded as
    unpadded base32. This can then be encoded in a QR Code and used to
    provision an OTP app like Google Authenticator.
    """
    return utils.append_query_item(token.to_url(), QUERY_SECRET, utils.b32encode(token.generator.secret))


def from_url(uri: str, secret: Optional[bytes] = None) -> Token:
    """
    Parses an otpauth URI into a token; works for either TOTP or HOTP.

    See also:
        https://github.com/google/google-authenticator/wiki/Key-Uri-Format

    :param uri: the hotp/totp URI to parse
    :param secret: raw secret to use instead of the URI's ``secret`` query item
    :raises DeserializationError: if the URI is malformed
    :raises GeneratorError: if the parameters do not make a valid generator
    :returns: Token
    """
    parsed_uri = urlparse(uri)

    if parsed_uri.scheme != utils.OTPAUTH_SCHEME:
        logger.debug("Rejecting URI with scheme %r", parsed_uri.scheme)
        raise InvalidURLScheme(parsed_uri.scheme)

    query = _query_items(parsed_uri.query)

    factor = _parse_factor(_host(parsed_uri.netloc), query)

    algorithm = DEFAULT_ALGORITHM
    if QUERY_ALGORITHM in query:
        algorithm = _parse_algorithm(query[QUERY_ALGORITHM])

    digits = DEFAULT_DIGITS
    if QUERY_DIGITS in query:
        digits = _parse_digits(query[QUERY_DIGITS])

    if secret is None:
        if QUERY_SECRET not in query:
            raise MissingSecret()
        secret = _parse_secret(query[QUERY_SECRET])

    generator = Generator(factor, secret, algorithm, digits)

    path = unquote(parsed_uri.path)
    full_name = path[1:] if path.startswith("/") else path
    name, issuer = utils.split_label(full_name, query.get(QUERY_ISSUER))

    return Token(name, issuer, generator)


def _query_items(query_string: str) -> Dict[str, str]:
    """
    Collects the recognized query items, rejecting repeated keys.

    An item without "=" (as in ``?issuer&...``) has no value and is left
    out, so the default applies; ``issuer=`` is an empty value and is kept.
    """
    items: Dict[str, Optional[str]] = {}
    for item in query_string.split("&"):
        if not item:
            continue
        key, separator, value = item.partition("=")
        key = unquote_plus(key)
        if key not in QUERY_KEYS:
            continue
        if key in items:
            logger.debug("Rejecting URI with repeated %r query item", key)
            raise DuplicateQueryItem(key)
        items[key] = unquote_plus(value) if separator else None
    return {key: value for key, value in items.items() if value is not None}


def _host(netloc: str) -> str:
    # drop userinfo and port, keep the case as written
    host = netloc.rpartition("@")[2]
    if host.startswith("["):
        return host.partition("]")[0] + "]"
    return host.partition(":")[0]


def _parse_factor(otp_type: str, query: Dict[str, str]) -> MovingFactor:
    if otp_type == FACTOR_COUNTER:
        counter = DEFAULT_COUNTER
        if QUERY_COUNTER in query:
            counter = _parse_counter(query[QUERY_COUNTER])
        return Counter(counter)
    if otp_type == FACTOR_TIMER:
        period: Union[int, float] = DEFAULT_PERIOD
        if QUERY_PERIOD in query:
            period = _parse_period(query[QUERY_PERIOD])
        return Timer(period)
    if otp_type:
        logger.debug("Rejecting URI with OTP type %r", otp_type)
        raise InvalidFactor(otp_type)
    raise MissingFactor()


def _parse_counter(value: str) -> int:
    if not _COUNTER_RE.fullmatch(value):
        raise InvalidCounterValue(value)
    counter = int(value)
    if counter > U64_MAX:
        raise InvalidCounterValue(value)
    return counter


def _parse_period(value: str) -> float:
    if not _PERIOD_RE.fullmatch(value):
        raise InvalidTimerPeriod(value)
    period = float(value)
    if not math.isfinite(period):
        raise InvalidTimerPeriod(value)
    return period


def _parse_algorithm(value: str) -> Algorithm:
    # exact, case-sensitive match on the wire names
    for algorithm in Algorithm:
        if algorithm.value == value:
            return algorithm
    raise InvalidAlgorithm(value)


def _parse_digits(value: str) -> int:
    if not _DIGITS_RE.fullmatch(value):
        raise InvalidDigitsValue(value)
    return int(value)


def _parse_secret(value: str) -> bytes:
    try:
        return utils.b32decode(value)
    except ValueError as e:
        logger.debug("Rejecting URI with a secret that is not base32")
        raise InvalidSecret(value) from e
