"""Models for raw iRail API payloads.

iRail serializes most numbers as strings and omits nested objects freely, so
every field is optional and numeric strings are coerced. Resolution of the
optional fields into display values lives in the record formatter.
"""

from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field


class _RawModel(BaseModel):
    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)


def _blank_to_zero(v: Any) -> Any:
    if v is None or v == "":
        return 0
    return v


# iRail sends "" or omits the value where it means zero
LenientInt = Annotated[int, BeforeValidator(_blank_to_zero)]


class RawStationInfo(_RawModel):
    """Station reference (``stationinfo`` objects and station list entries)."""

    id: str | None = None
    name: str | None = None
    standardname: str | None = None


class RawDirection(_RawModel):
    """Direction (terminus) of a vehicle."""

    name: str | None = None


class RawVehicleInfo(_RawModel):
    """Vehicle details, e.g. ``shortname="IC 2117"`` and ``type="IC"``."""

    name: str | None = None
    shortname: str | None = None
    type: str | None = None
    number: str | None = None


class RawPlatformInfo(_RawModel):
    """Platform details; ``normal == "0"`` marks a changed platform."""

    name: str | None = None
    normal: str | None = None


class RawStopList(_RawModel):
    """Intermediate stops of a vehicle."""

    number: LenientInt = 0


class RawStop(_RawModel):
    """Departure or arrival end of a connection or via."""

    station: str | None = None
    stationinfo: RawStationInfo | None = None
    time: int | None = None
    delay: LenientInt = 0
    platform: str | None = None
    platforminfo: RawPlatformInfo | None = None
    vehicle: str | None = None
    vehicleinfo: RawVehicleInfo | None = None
    direction: RawDirection | None = None
    stops: RawStopList | None = None


class RawVia(_RawModel):
    """A transfer point: arrival of one vehicle and departure of the next."""

    station: str | None = None
    stationinfo: RawStationInfo | None = None
    arrival: RawStop = Field(default_factory=RawStop)
    departure: RawStop = Field(default_factory=RawStop)


class RawVias(_RawModel):
    """Transfer points of a connection."""

    number: LenientInt = 0
    via: list[RawVia] = Field(default_factory=list)


class RawConnection(_RawModel):
    """One journey option between two stations."""

    id: str | None = None
    departure: RawStop = Field(default_factory=RawStop)
    arrival: RawStop = Field(default_factory=RawStop)
    duration: LenientInt = 0
    vias: RawVias | None = None


class RawSearchResponse(_RawModel):
    """Response of the connections endpoint."""

    connection: list[RawConnection] = Field(default_factory=list)


class RawStationListResponse(_RawModel):
    """Response of the stations endpoint."""

    station: list[RawStationInfo] = Field(default_factory=list)
