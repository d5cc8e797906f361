"""Password hashing service using bcrypt.

Provides salted password hashing and verification, including a dummy
verification used to keep sign-in timing independent of whether the
account exists.
"""

import bcrypt

from authgate_auth.exceptions import WeakPasswordError


class PasswordHashingService:
    """Service for secure password hashing and verification.

    Uses bcrypt for password hashing with configurable work factor.

    Examples
    --------
    >>> service = PasswordHashingService()
    >>> hash = service.hash("my_secure_password")
    >>> service.verify("my_secure_password", hash)
    True
    >>> service.verify("wrong_password", hash)
    False
    """

    # bcrypt only looks at the first 72 bytes and newer releases reject more
    MAX_BYTES = 72

    def __init__(self, rounds: int = 12):
        """Initialize the password hashing service.

        Parameters
        ----------
        rounds
            The bcrypt work factor (log2 of iterations). Default is 12,
            which is a good balance of security and performance.
            Higher values are more secure but slower.
        """
        self._rounds = rounds
        self._dummy_hash: bytes | None = None

    def hash(self, password: str) -> str:
        """Hash a plaintext password.

        Parameters
        ----------
        password
            The plaintext password to hash

        Returns
        -------
        The bcrypt hash as a string

        Raises
        ------
        WeakPasswordError
            If password is empty or too long for bcrypt
        """
        self.validate(password)
        salt = bcrypt.gensalt(rounds=self._rounds)
        hashed = bcrypt.hashpw(password.encode("utf-8"), salt)
        return hashed.decode("utf-8")

    def verify(self, password: str, password_hash: str) -> bool:
        """Verify a password against a hash.

        Parameters
        ----------
        password
            The plaintext password to check
        password_hash
            The bcrypt hash to verify against

        Returns
        -------
        True if password matches, False otherwise
        """
        try:
            return bcrypt.checkpw(
                password.encode("utf-8"),
                password_hash.encode("utf-8"),
            )
        except (ValueError, TypeError):
            # Invalid hash format or over-long password
            return False

    def needs_rehash(self, password_hash: str) -> bool:
        """Check whether a hash was made with a different work factor.

        Malformed hashes always need rehashing.
        """
        # $2b$<rounds>$<salt+digest>
        parts = password_hash.split("$")
        if len(parts) != 4 or parts[0] or not parts[1].startswith("2"):
            return True
        try:
            return int(parts[2]) != self._rounds
        except ValueError:
            return True

    def dummy_verify(self, password: str) -> bool:
        """Spend the same effort as ``verify`` against a throwaway hash.

        Always returns False.
        """
        if self._dummy_hash is None:
            salt = bcrypt.gensalt(rounds=self._rounds)
            self._dummy_hash = bcrypt.hashpw(b"dummy-password", salt)
        self.verify(password, self._dummy_hash.decode("utf-8"))
        return False

    def validate(self, password: str) -> None:
        """Validate that a password can be hashed.

        Raises
        ------
        WeakPasswordError
            If password is empty or longer than 72 UTF-8 bytes
        """
        if not password:
            msg = "Password cannot be empty"
            raise WeakPasswordError(msg)

        if len(password.encode("utf-8")) > self.MAX_BYTES:
            msg = f"Password cannot exceed {self.MAX_BYTES} bytes"
            raise WeakPasswordError(msg)

