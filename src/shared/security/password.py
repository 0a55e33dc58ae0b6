"""Password hash and verify function pairs.

A pair is a (hash, verify) tuple:
- hash(password) -> encoded hash string
- verify(password, password_hash) -> bool

PBKDF2-SHA512 is the default pair. Hashes use the modular crypt format
``$pbkdf2-sha512$<rounds>$<salt>$<checksum>`` so the rounds and salt travel
with the hash and older hashes keep verifying after the rounds are raised.
"""

import logging
from collections.abc import Callable

from passlib.hash import pbkdf2_sha512
from pwdlib import PasswordHash
from pwdlib.exceptions import UnknownHashError

logger = logging.getLogger(__name__)

HashFn = Callable[[str], str]
VerifyFn = Callable[[str, str], bool]
HashMethods = tuple[HashFn, VerifyFn]

PBKDF2_ROUNDS = 100_000
PBKDF2_SALT_SIZE = 16

_pbkdf2_hasher = pbkdf2_sha512.using(rounds=PBKDF2_ROUNDS, salt_size=PBKDF2_SALT_SIZE)
argon2_hasher = PasswordHash.recommended()


def pbkdf2_hash(password: str) -> str:
    """Hash a password with PBKDF2-SHA512.

    A random salt is generated and embedded in the returned hash.
    """
    return _pbkdf2_hasher.hash(password)


def pbkdf2_verify(password: str, password_hash: str) -> bool:
    """Verify a password against a PBKDF2-SHA512 hash.

    A malformed hash never verifies.
    """
    try:
        return _pbkdf2_hasher.verify(password, password_hash)
    except (TypeError, ValueError):
        logger.warning("Password verification failed: malformed PBKDF2 hash")
        return False


def pbkdf2_hash_methods(rounds: int = PBKDF2_ROUNDS) -> HashMethods:
    """Build a PBKDF2-SHA512 pair hashing with the given number of rounds.

    Verification reads the rounds from the stored hash, so any PBKDF2 hash
    verifies regardless of the rounds configured here.
    """
    if rounds == PBKDF2_ROUNDS:
        return pbkdf2_hash, pbkdf2_verify

    hasher = pbkdf2_sha512.using(rounds=rounds, salt_size=PBKDF2_SALT_SIZE)

    def _hash(password: str) -> str:
        return hasher.hash(password)

    return _hash, pbkdf2_verify


def argon2_hash(password: str) -> str:
    """Hash a password using Argon2.

    Salt is automatically generated and embedded in the returned hash.
    """
    return argon2_hasher.hash(password)


def argon2_verify(password: str, password_hash: str) -> bool:
    """Verify a password against an Argon2 hash.

    Salt is automatically extracted from the hash by pwdlib.
    """
    try:
        return argon2_hasher.verify(password, password_hash)
    except UnknownHashError:
        logger.warning("Password verification failed: unrecognized Argon2 hash")
        return False


PBKDF2_HASH_METHODS: HashMethods = (pbkdf2_hash, pbkdf2_verify)
ARGON2_HASH_METHODS: HashMethods = (argon2_hash, argon2_verify)
DEFAULT_HASH_METHODS = PBKDF2_HASH_METHODS


def hash_methods_for(algorithm: str, pbkdf2_rounds: int = PBKDF2_ROUNDS) -> HashMethods:
    """Resolve a hash method pair by algorithm name.

    Args:
        algorithm: "pbkdf2_sha512" or "argon2"
        pbkdf2_rounds: Rounds used when hashing with PBKDF2

    Raises:
        ValueError: If the algorithm is not supported

    """
    if algorithm == "pbkdf2_sha512":
        return pbkdf2_hash_methods(pbkdf2_rounds)
    if algorithm == "argon2":
        return ARGON2_HASH_METHODS
    raise ValueError(f"Unsupported password hash algorithm: {algorithm}")
