import base64
import logging
import unicodedata
from hmac import compare_digest
from typing import Dict, Optional, Tuple
from urllib.parse import quote, urlencode

from .errors import UrlGenerationFailure

logger = logging.getLogger(__name__)

OTPAUTH_SCHEME = "otpauth"


def build_uri(otp_type: str, label: str, params: Dict[str, str]) -> str:
    """
    Returns an otpauth URI for the given OTP type (``hotp`` or ``totp``),
    account label and query parameters.

    For module-internal use.

    See also:
        https://github.com/google/google-authenticator/wiki/Key-Uri-Format

    :param otp_type: the URI host, ``hotp`` or ``totp``
    :param label: the account label, placed unescaped in the path
    :param params: query string parameters, emitted in insertion order
    :raises UrlGenerationFailure: if the label or a parameter cannot be escaped
    :returns: otpauth uri
    """
    base_uri = "{0}://{1}/{2}?{3}"
    try:
        path = quote(label, safe="/:@")
        query = urlencode(params, quote_via=quote)
    except UnicodeError as e:
        logger.debug("Cannot escape otpauth URI components for %r", label)
        raise UrlGenerationFailure("cannot build an otpauth URI from label {!r}".format(label)) from e

    return base_uri.format(OTPAUTH_SCHEME, otp_type, path, query)


def append_query_item(uri: str, key: str, value: str) -> str:
    separator = "&" if "?" in uri else "?"
    return uri + separator + urlencode({key: value}, quote_via=quote)


def b32encode(secret: bytes) -> str:
    # Note: the otpauth scheme DOES NOT use base32 padding for secret lengths not divisible by 8.
    return base64.b32encode(secret).decode("ascii").rstrip("=")


def b32decode(secret: str) -> bytes:
    """
    Converts a base32-encoded secret string into raw bytes. Lower case input
    and missing padding are accepted.

    :raises ValueError: if ``secret`` is not valid base32 (``binascii.Error``)
        or not ASCII
    """
    missing_padding = len(secret) % 8
    if missing_padding != 0:
        secret += "=" * (8 - missing_padding)
    return base64.b32decode(secret, casefold=True)


def split_label(full_name: str, issuer: Optional[str]) -> Tuple[str, str]:
    """
    Splits an otpauth label into ``(name, issuer)``.

    An explicit issuer wins. Without one, the text before the first colon
    of the label is the issuer. The name is the label with a leading
    ``"<issuer>:"`` removed and surrounding whitespace trimmed, or the
    whole label if it does not start with that prefix.
    """
    if issuer is None:
        issuer = full_name.split(":", 1)[0] if ":" in full_name else ""

    prefix = issuer + ":"
    if issuer and full_name.startswith(prefix):
        return full_name[len(prefix) :].strip(), issuer
    return full_name, issuer


def strings_equal(s1: str, s2: str) -> bool:
    """
    Timing-attack resistant string comparison.

    Normal comparison using == will short-circuit on the first mismatching
    character. This avoids that by scanning the whole string, though we
    still reveal to a timing attack whether the strings are the same
    length.
    """
    s1 = unicodedata.normalize("NFKC", s1)
    s2 = unicodedata.normalize("NFKC", s2)
    return compare_digest(s1.encode("utf-8"), s2.encode("utf-8"))
