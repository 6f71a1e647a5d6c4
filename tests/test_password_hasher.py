"""Tests for bcrypt password hashing."""

import base64
import hashlib

import bcrypt

from common.auth import PasswordHasher


class TestPasswordHasher:

    def test_round_trip(self, fast_hasher):
        digest = fast_hasher.hash("secret")
        assert fast_hasher.verify("secret", digest) is True

    def test_different_plaintext_rejected(self, fast_hasher):
        digest = fast_hasher.hash("secret")
        assert fast_hasher.verify("Secret", digest) is False
        assert fast_hasher.verify("secret ", digest) is False

    def test_salt_differs_per_call(self, fast_hasher):
        assert fast_hasher.hash("secret") != fast_hasher.hash("secret")

    def test_fixed_cost_factor(self):
        digest = PasswordHasher().hash("secret")
        assert digest.startswith(PasswordHasher.PREHASH_PREFIX + "$2b$10$")

    def test_long_password_supported(self, fast_hasher):
        long_password = "x" * 200
        digest = fast_hasher.hash(long_password)
        assert fast_hasher.verify(long_password, digest) is True
        assert fast_hasher.verify("x" * 199, digest) is False

    def test_legacy_plain_bcrypt_hash_verifies(self, fast_hasher):
        """Hashes written by the old server were bcrypt over the raw password."""
        legacy = bcrypt.hashpw(b"secret", bcrypt.gensalt(rounds=4)).decode()
        assert fast_hasher.verify("secret", legacy) is True
        assert fast_hasher.verify("wrong", legacy) is False

    def test_malformed_digest_returns_false(self, fast_hasher):
        assert fast_hasher.verify("secret", "not-a-bcrypt-hash") is False
        assert fast_hasher.verify("secret", "") is False
        assert fast_hasher.verify("secret", None) is False

    def test_empty_password_returns_false(self, fast_hasher):
        digest = fast_hasher.hash("secret")
        assert fast_hasher.verify("", digest) is False

    def test_sha256_prehash_is_not_a_password(self, fast_hasher):
        digest = fast_hasher.hash("secret")
        prehash = base64.b64encode(hashlib.sha256(b"secret").digest()).decode()
        assert fast_hasher.verify(prehash, digest) is False

    def test_unprefixed_digest_uses_raw_password_only(self, fast_hasher):
        prehash = base64.b64encode(hashlib.sha256(b"secret").digest())
        legacy = bcrypt.hashpw(prehash, bcrypt.gensalt(rounds=4)).decode()
        assert fast_hasher.verify("secret", legacy) is False

    def test_wrong_password_runs_a_single_check(self, fast_hasher, monkeypatch):
        calls = []
        real_checkpw = bcrypt.checkpw

        def counting_checkpw(password, hashed):
            calls.append(hashed)
            return real_checkpw(password, hashed)

        monkeypatch.setattr("common.auth.password.bcrypt_lib.checkpw", counting_checkpw)
        assert fast_hasher.verify("wrong", fast_hasher.hash("secret")) is False
        assert len(calls) == 1
