"""
Bloglist Backend - Password Hasher
===================================

What:  One-way salted password hashing and verification.
How:   passlib CryptContext with the bcrypt scheme. Every hash() call draws a
       fresh salt, so hashing the same password twice gives different digests
       that both verify.
Who:   AccountService (hash on registration), SessionService (verify on login).
"""

from passlib.context import CryptContext


class PasswordHasher:
    """
    Thin wrapper around a bcrypt CryptContext with a fixed cost factor.

    A malformed digest makes verify() raise ValueError. Digests only come from
    hash(), so that is a programming error and is left to propagate.
    """

    def __init__(self, rounds: int = 10):
        self.rounds = rounds
        self._context = CryptContext(
            schemes=["bcrypt"],
            deprecated="auto",
            bcrypt__rounds=rounds,
        )

    def hash(self, plaintext: str) -> str:
        return self._context.hash(plaintext)

    def verify(self, plaintext: str, digest: str) -> bool:
        return self._context.verify(plaintext, digest)

    def dummy_verify(self) -> bool:
        """Burn one verification's worth of CPU; used when no account matched."""
        return self._context.dummy_verify()
