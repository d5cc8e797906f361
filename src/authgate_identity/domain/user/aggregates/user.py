"""User aggregate for identity concerns only."""

from datetime import datetime
from uuid import UUID, uuid4

from authgate_identity.domain.shared.time import utc_now


def default_name(email: str) -> str:
    """Display name used when none is given: the email's local part."""
    return email.split("@", 1)[0]


class User:
    """
    User aggregate root.

    Emails are stored exactly as given (case-sensitive). Users created
    through an OAuth provider have no password hash and cannot sign in
    with credentials.
    """

    def __init__(
        self,
        email: str,
        name: str | None = None,
        hashed_password: str | None = None,
        id: UUID | None = None,
        created_at: datetime | None = None,
        updated_at: datetime | None = None,
    ):
        self._email = email
        self._name = name or default_name(email)
        self._hashed_password = hashed_password
        self._id = id or uuid4()
        self._created_at = created_at or utc_now()
        self._updated_at = updated_at or utc_now()

    @property
    def id(self) -> UUID:
        return self._id

    @property
    def email(self) -> str:
        return self._email

    @property
    def name(self) -> str:
        return self._name

    @property
    def hashed_password(self) -> str | None:
        return self._hashed_password

    @property
    def has_password(self) -> bool:
        return bool(self._hashed_password)

    @property
    def created_at(self) -> datetime:
        return self._created_at

    @property
    def updated_at(self) -> datetime:
        return self._updated_at

    @classmethod
    def create(
        cls,
        email: str,
        name: str | None = None,
        hashed_password: str | None = None,
    ) -> "User":
        return cls(email=email, name=name, hashed_password=hashed_password)

    @classmethod
    def reconstitute(
        cls,
        id: UUID,
        email: str,
        name: str,
        hashed_password: str | None,
        created_at: datetime,
        updated_at: datetime,
    ) -> "User":
        return cls(
            id=id,
            email=email,
            name=name,
            hashed_password=hashed_password,
            created_at=created_at,
            updated_at=updated_at,
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, User):
            return NotImplemented
        return self._id == other._id

    def __hash__(self) -> int:
        return hash(self._id)

    def __repr__(self) -> str:
        # Never include the password hash
        return f"User(id={self._id}, email={self._email})"
