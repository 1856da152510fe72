"""Connection identifier domain model."""

from pydantic import BaseModel, ConfigDict, Field


class ConnectionIdentifier(BaseModel):
    """Re-identifies the exact train behind a delivered departure index.

    Serialized with the ``vehicle``/``departTime`` keys used by the persisted
    connection table.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    vehicle_ref: str = Field(alias="vehicle")
    departure_epoch_seconds: int = Field(alias="departTime")

    def matches(self, vehicle_ref: str | None, departure_epoch_seconds: int | None) -> bool:
        """Exact match on vehicle and scheduled departure time."""
        return (
            vehicle_ref == self.vehicle_ref
            and departure_epoch_seconds == self.departure_epoch_seconds
        )
