from .errors import DeserializationError as DeserializationError
from .errors import DuplicateQueryItem as DuplicateQueryItem
from .errors import GeneratorError as GeneratorError
from .errors import InvalidAlgorithm as InvalidAlgorithm
from .errors import InvalidCounterValue as InvalidCounterValue
from .errors import InvalidDigits as InvalidDigits
from .errors import InvalidDigitsValue as InvalidDigitsValue
from .errors import InvalidFactor as InvalidFactor
from .errors import InvalidPeriod as InvalidPeriod
from .errors import InvalidSecret as InvalidSecret
from .errors import InvalidTime as InvalidTime
from .errors import InvalidTimerPeriod as InvalidTimerPeriod
from .errors import InvalidURLScheme as InvalidURLScheme
from .errors import MissingFactor as MissingFactor
from .errors import MissingSecret as MissingSecret
from .errors import OTPError as OTPError
from .errors import SerializationError as SerializationError
from .errors import UrlGenerationFailure as UrlGenerationFailure
from .factor import Counter as Counter
from .factor import MovingFactor as MovingFactor
from .factor import Timer as Timer
from .otp import MAX_DIGITS as MAX_DIGITS
from .otp import MIN_DIGITS as MIN_DIGITS
from .otp import Algorithm as Algorithm
from .otp import Generator as Generator
from .token import DEFAULT_ALGORITHM as DEFAULT_ALGORITHM
from .token import DEFAULT_COUNTER as DEFAULT_COUNTER
from .token import DEFAULT_DIGITS as DEFAULT_DIGITS
from .token import DEFAULT_PERIOD as DEFAULT_PERIOD
from .token import Token as Token
from .token import from_url as from_url
from .token import provisioning_uri as provisioning_uri
from .token import to_url as to_url
from .utils import OTPAUTH_SCHEME as OTPAUTH_SCHEME

# The URL looks like this:
# otpauth://totp/FooCorp:alice@example.com?algorithm=SHA256&digits=6&issuer=FooCorp&period=30
# ─────────┬───┬──────┬─────────────────┬──────────────────────────────────────────────────
#          │   │      │                 └── Query parameters (algorithm, digits, issuer,
#          │   │      │                     counter or period, optionally secret)
#          │   │      └── Account name (alice@example.com)
#          │   └── Issuer in path (FooCorp)
#          └── OTP type (totp or hotp)
#
#   token = from_url(uri, secret=b"...")
#   token.generator.now()
