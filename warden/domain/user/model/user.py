"""User aggregate."""

from datetime import datetime

from pydantic import EmailStr, Field, HttpUrl

from warden.domain.auth.model.value import UserId
from warden.domain.shared.model.aggregate import Aggregate
from warden.domain.shared.model.value import utcnow

USERNAME_MAX_LENGTH = 150


class User(Aggregate):
    """A person known to the system. Credentials live with the identity provider."""

    id: UserId
    username: str = Field(min_length=1, max_length=USERNAME_MAX_LENGTH)
    firstname: str = Field(min_length=1)
    lastname: str = Field(min_length=1)
    phone: str = Field(min_length=1)
    email: EmailStr
    image_url: HttpUrl | None = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def create(
        cls,
        *,
        username: str,
        firstname: str,
        lastname: str,
        phone: str,
        email: str,
        image_url: str | None = None,
    ) -> "User":
        now = utcnow()
        return cls(
            id=UserId.generate(),
            username=username,
            firstname=firstname,
            lastname=lastname,
            phone=phone,
            email=email,
            image_url=image_url or None,
            created_at=now,
            updated_at=now,
        )

    def apply(self, changes: dict) -> None:
        """Apply a partial update. Field names are checked by the caller."""
        for field, value in changes.items():
            if field == "image_url" and not value:
                value = None
            setattr(self, field, value)
        self.updated_at = utcnow()
