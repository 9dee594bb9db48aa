import pytest
from argon2.exceptions import HashingError as Argon2HashingError

from webforms.auth import passwords
from webforms.auth.passwords import hash_password, verify_password
from webforms.errors import HashingError


def test_hash_is_salted_and_not_plaintext():
    h1 = hash_password("pw123")
    h2 = hash_password("pw123")
    assert h1 != "pw123"
    assert h1 != h2
    assert h1.startswith("$argon2")


def test_verify_accepts_right_password_only():
    h = hash_password("pw123")
    assert verify_password("pw123", h) is True
    assert verify_password("pw124", h) is False
    assert verify_password("", h) is False


@pytest.mark.parametrize("digest", ["", "not-a-hash", "$argon2id$v=19$m=65536,t=3,p=4$broken", "pw123"])
def test_verify_malformed_digest_is_false(digest):
    assert verify_password("pw123", digest) is False


def test_empty_password_is_rejected():
    with pytest.raises(ValueError):
        hash_password("")


def test_hashing_failure_is_internal_error(monkeypatch):
    class Exhausted:
        def hash(self, _plain):
            raise Argon2HashingError("out of memory")

    monkeypatch.setattr(passwords, "_PH", Exhausted())
    with pytest.raises(HashingError):
        hash_password("pw123")


def test_non_ascii_digest_is_false():
    assert verify_password("pw123", "$argon2id$é") is False
