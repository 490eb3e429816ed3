from pydantic import BaseModel, ConfigDict


class Entity(BaseModel):
    """Base for domain entities: identified by ``id``, validated on assignment."""

    model_config = ConfigDict(validate_assignment=True)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, type(self)):
            return NotImplemented
        return getattr(self, "id") == getattr(other, "id")

    def __hash__(self) -> int:
        return hash(getattr(self, "id"))
