class OTPError(ValueError):
    """
    Base class for every error raised by otptoken.
    """


# Generator errors


class GeneratorError(OTPError):
    """
    A password generator was given parameters it cannot work with.
    """


class InvalidTime(GeneratorError):
    def __init__(self, time_since_epoch: float) -> None:
        super().__init__("time {} is not representable as a counter after the Unix epoch".format(time_since_epoch))
        self.value = time_since_epoch


class InvalidPeriod(GeneratorError):
    def __init__(self, period: float) -> None:
        super().__init__("timer period must be a positive number of seconds, got {!r}".format(period))
        self.value = period


class InvalidDigits(GeneratorError):
    def __init__(self, digits: int) -> None:
        super().__init__("digits may only be 6, 7, or 8, got {!r}".format(digits))
        self.value = digits


# Serialization errors


class SerializationError(OTPError):
    pass


class UrlGenerationFailure(SerializationError):
    pass


# Deserialization errors


class DeserializationError(OTPError):
    """
    An otpauth URL could not be turned into a token.

    Subclasses carrying the offending text keep it on ``value`` (or ``key``
    and ``host`` where that reads better).
    """


class InvalidURLScheme(DeserializationError):
    def __init__(self, scheme: str) -> None:
        super().__init__("Not an otpauth URI (scheme {!r})".format(scheme))
        self.value = scheme


class DuplicateQueryItem(DeserializationError):
    def __init__(self, key: str) -> None:
        super().__init__("query item {!r} is specified more than once".format(key))
        self.key = key


class MissingFactor(DeserializationError):
    def __init__(self) -> None:
        super().__init__("URI has no OTP type, expected hotp or totp")


class InvalidFactor(DeserializationError):
    def __init__(self, host: str) -> None:
        super().__init__("Not a supported OTP type: {!r}".format(host))
        self.host = host


class InvalidCounterValue(DeserializationError):
    def __init__(self, value: str) -> None:
        super().__init__("Invalid value for counter: {!r}".format(value))
        self.value = value


class InvalidTimerPeriod(DeserializationError):
    def __init__(self, value: str) -> None:
        super().__init__("Invalid value for period: {!r}".format(value))
        self.value = value


class MissingSecret(DeserializationError):
    def __init__(self) -> None:
        super().__init__("No secret found in URI")


class InvalidSecret(DeserializationError):
    def __init__(self, value: str) -> None:
        super().__init__("secret is not valid base32: {!r}".format(value))
        self.value = value


class InvalidAlgorithm(DeserializationError):
    def __init__(self, value: str) -> None:
        super().__init__("Invalid value for algorithm, must be SHA1, SHA256 or SHA512: {!r}".format(value))
        self.value = value


class InvalidDigitsValue(DeserializationError):
    def __init__(self, value: str) -> None:
        super().__init__("Invalid value for digits: {!r}".format(value))
        self.value = value
