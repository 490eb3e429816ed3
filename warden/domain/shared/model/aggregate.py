from warden.domain.shared.model.entity import Entity


class Aggregate(Entity):
    """Consistency boundary persisted as a unit by its repository."""
