import datetime
import unittest
from unittest import mock

from otptoken import Algorithm, Counter, Generator, InvalidDigits, InvalidPeriod, InvalidTime, Timer
from otptoken.factor import U64_MAX

RFC4226_SECRET = b"12345678901234567890"

RFC6238_SECRETS = {
    Algorithm.SHA1: b"12345678901234567890",
    Algorithm.SHA256: b"12345678901234567890123456789012",
    Algorithm.SHA512: b"1234567890123456789012345678901234567890123456789012345678901234",
}

RFC6238_VECTORS = [
    (59, {Algorithm.SHA1: "94287082", Algorithm.SHA256: "46119246", Algorithm.SHA512: "90693936"}),
    (1111111109, {Algorithm.SHA1: "07081804", Algorithm.SHA256: "68084774", Algorithm.SHA512: "25091201"}),
    (1111111111, {Algorithm.SHA1: "14050471", Algorithm.SHA256: "67062674", Algorithm.SHA512: "99943326"}),
    (1234567890, {Algorithm.SHA1: "89005924", Algorithm.SHA256: "91819424", Algorithm.SHA512: "93441116"}),
    (2000000000, {Algorithm.SHA1: "69279037", Algorithm.SHA256: "90698825", Algorithm.SHA512: "38618901"}),
    (20000000000, {Algorithm.SHA1: "65353130", Algorithm.SHA256: "77737706", Algorithm.SHA512: "47863826"}),
]


class TestHOTP(unittest.TestCase):

    def test_rfc4226_vectors(self):
        expected = ["755224", "287082", "359152", "969429", "338314", "254676", "287922", "162583", "399871", "520489"]
        for count, otp in enumerate(expected):
            generator = Generator(Counter(count), RFC4226_SECRET, Algorithm.SHA1, 6)
            assert generator.password(0) == otp

    def test_successor_sequence(self):
        generator = Generator(Counter(0), RFC4226_SECRET)
        passwords = []
        for _ in range(3):
            passwords.append(generator.password(0))
            generator = generator.successor()
        assert passwords == ["755224", "287082", "359152"]
        assert generator.factor == Counter(3)

    def test_more_digits(self):
        generator = Generator(Counter(7), RFC4226_SECRET, Algorithm.SHA1, 8)
        assert generator.password(0) == "82162583"
        generator = Generator(Counter(7), RFC4226_SECRET, Algorithm.SHA1, 7)
        assert generator.password(0) == "2162583"

    def test_counter_ignores_time(self):
        generator = Generator(Counter(1), RFC4226_SECRET)
        assert generator.password(-1) == "287082"
        assert generator.password(datetime.datetime(1900, 1, 1)) == "287082"

    def test_verify(self):
        generator = Generator(Counter(0), RFC4226_SECRET)
        assert generator.verify("755224", 0)
        assert generator.verify("７５５２２４", 0)
        assert not generator.verify("755225", 0)
        assert not generator.verify("287082", 0)


class TestTOTP(unittest.TestCase):

    def test_rfc6238_vectors(self):
        for timestamp, codes in RFC6238_VECTORS:
            for algorithm, otp in codes.items():
                generator = Generator(Timer(30), RFC6238_SECRETS[algorithm], algorithm, 8)
                assert generator.password(timestamp) == otp, (timestamp, algorithm)

    def test_datetime(self):
        at = datetime.datetime(1970, 1, 1, 0, 0, 59, tzinfo=datetime.timezone.utc)
        for algorithm, otp in RFC6238_VECTORS[0][1].items():
            generator = Generator(Timer(30), RFC6238_SECRETS[algorithm], algorithm, 8)
            assert generator.password(at) == otp

    def test_now(self):
        generator = Generator(Timer(30), RFC6238_SECRETS[Algorithm.SHA1], Algorithm.SHA1, 8)
        with mock.patch("otptoken.otp.time.time", return_value=1111111109.5):
            assert generator.now() == "07081804"

    def test_before_epoch(self):
        generator = Generator(Timer(30), RFC6238_SECRETS[Algorithm.SHA1])
        with self.assertRaises(InvalidTime):
            generator.password(-1)
        with self.assertRaises(InvalidTime):
            generator.password(datetime.datetime(1969, 12, 31, 23, 59, 59, tzinfo=datetime.timezone.utc))

    def test_successor_is_unchanged(self):
        generator = Generator(Timer(30), RFC6238_SECRETS[Algorithm.SHA256], Algorithm.SHA256, 7)
        assert generator.successor() == generator
        assert generator.successor().password(59) == generator.password(59)


class TestGenerator(unittest.TestCase):

    def test_invalid_digits(self):
        for digits in (5, 9, 0, -6, 10):
            with self.assertRaises(InvalidDigits):
                Generator(Counter(0), RFC4226_SECRET, Algorithm.SHA1, digits)
            with self.assertRaises(InvalidDigits):
                Generator(Timer(30), RFC4226_SECRET, Algorithm.SHA1, digits)

    def test_invalid_period(self):
        for period in (0, -1, -30.5):
            with self.assertRaises(InvalidPeriod):
                Generator(Timer(period), RFC4226_SECRET)

    def test_non_finite_period(self):
        for period in (float("inf"), float("-inf"), float("nan")):
            with self.assertRaises(InvalidPeriod):
                Generator(Timer(period), RFC4226_SECRET)

    def test_digits_checked_again_when_generating(self):
        generator = Generator(Counter(0), RFC4226_SECRET)
        object.__setattr__(generator, "_digits", 9)
        with self.assertRaises(InvalidDigits):
            generator.password(0)

    def test_password_length(self):
        for algorithm in Algorithm:
            for digits in (6, 7, 8):
                generator = Generator(Counter(0), b"secret", algorithm, digits)
                for _ in range(50):
                    otp = generator.password(0)
                    assert len(otp) == digits
                    assert otp.isdigit()
                    generator = generator.successor()

    def test_empty_secret(self):
        otp = Generator(Counter(0), b"").password(0)
        assert len(otp) == 6

    def test_successor_increments_counter(self):
        generator = Generator(Counter(41), RFC4226_SECRET, Algorithm.SHA512, 8)
        successor = generator.successor()
        assert successor.factor == Counter(42)
        assert successor.secret == generator.secret
        assert successor.algorithm is Algorithm.SHA512
        assert successor.digits == 8
        assert generator.factor == Counter(41)

    def test_successor_wraps(self):
        generator = Generator(Counter(U64_MAX), RFC4226_SECRET)
        assert generator.successor().factor == Counter(0)

    def test_immutable(self):
        generator = Generator(Counter(0), RFC4226_SECRET)
        with self.assertRaises(AttributeError):
            generator.digits = 8
        with self.assertRaises(AttributeError):
            generator._digits = 8
        with self.assertRaises(AttributeError):
            del generator._secret

    def test_equality(self):
        a = Generator(Counter(1), b"key", Algorithm.SHA256, 7)
        assert a == Generator(Counter(1), b"key", Algorithm.SHA256, 7)
        assert hash(a) == hash(Generator(Counter(1), b"key", Algorithm.SHA256, 7))
        assert a != Generator(Counter(2), b"key", Algorithm.SHA256, 7)
        assert a != Generator(Counter(1), b"other", Algorithm.SHA256, 7)
        assert a != Generator(Counter(1), b"key", Algorithm.SHA1, 7)
        assert a != Generator(Counter(1), b"key", Algorithm.SHA256, 8)
        assert Generator(Counter(30), b"key") != Generator(Timer(30), b"key")

    def test_repr_hides_secret(self):
        generator = Generator(Timer(30), b"hunter2")
        assert "hunter2" not in repr(generator)
        assert "SHA1" in repr(generator)

    def test_algorithm_by_name(self):
        generator = Generator(Counter(0), RFC4226_SECRET, "SHA256")
        assert generator.algorithm is Algorithm.SHA256


if __name__ == "__main__":
    unittest.main()
