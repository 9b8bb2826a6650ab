"""Author model identifying who committed a change."""

from functools import total_ordering

from pydantic import BaseModel


@total_ordering
class Author(BaseModel):
    """A person credited with a revision.

    Authors are identified, compared and hashed by ``name`` alone; the email
    address is carried along for display and for name-or-email queries.
    """

    name: str
    email_address: str = ""

    model_config = {"frozen": True}

    def matches(self, name_or_email: str) -> bool:
        """Case-insensitively match the name or the email address."""
        if not name_or_email:
            return False
        needle = name_or_email.casefold()
        return (
            self.name.casefold() == needle
            or self.email_address.casefold() == needle
        )

    def with_email_address(self, email_address: str) -> "Author":
        return self.model_copy(update={"email_address": email_address or ""})

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Author):
            return NotImplemented
        return self.name == other.name

    def __hash__(self) -> int:
        return hash(self.name)

    def __lt__(self, other: "Author") -> bool:
        if not isinstance(other, Author):
            return NotImplemented
        return self.name < other.name

    def __str__(self) -> str:
        return f"{self.name} <{self.email_address}>"
