"""Aircraft snapshot models.

One snapshot entry looks like::

    {"Msg": {"Type": "MSG", "Icao24": "71BE21", "Callsign": "KAL018",
             "Altitude": 17100, "GroundSpeed": 427, "Track": 312,
             "Position": {"Lat": 34.21724, "Long": -119.3715}, ...},
     "Registration": "HL7621", "EquipmentType": "A388",
     "IATA": "", "Number": 0, "Source": "", "X_UrlFA": "...", ...}
"""

from __future__ import annotations

from datetime import datetime

from pydantic import Field, field_validator

from pyairspace.ingestion.normalize import safe_float, safe_int, safe_str
from pyairspace.models._base import AirspaceBaseModel

DEFAULT_COLOR = "#0033ff"
MLAT_COLOR = "#508aff"
FLIGHTAWARE_COLOR = "#ff3300"
FR24_COLOR = "#00ff33"
EXPIRED_COLOR = "#ff0000"

DEFAULT_Z_INDEX = 3000
FR24_Z_INDEX = 2000


class Position(AirspaceBaseModel):
    lat: float
    long: float

    @field_validator("lat", "long", mode="before")
    @classmethod
    def _coerce_floats(cls, value: object) -> float | None:
        return safe_float(value)


class CompositeMsg(AirspaceBaseModel):
    """Latest merged ADS-B/MLAT message for one airframe."""

    msg_type: str | None = Field(default=None, alias="Type")
    icao24: str | None = None
    callsign: str | None = None
    altitude: int | None = None
    ground_speed: int | None = None
    track: int | None = None
    vertical_rate: int | None = None
    squawk: str | None = None
    receiver_name: str | None = None
    generated_timestamp_utc: datetime | None = Field(default=None, alias="GeneratedTimestampUTC")
    position: Position

    @field_validator("altitude", "ground_speed", "track", "vertical_rate", mode="before")
    @classmethod
    def _coerce_ints(cls, value: object) -> int | None:
        return safe_int(value)

    @field_validator("callsign", "squawk", mode="before")
    @classmethod
    def _strip_strings(cls, value: object) -> str | None:
        text = safe_str(value)
        return text.strip() if text else None


class AircraftData(AirspaceBaseModel):
    """One aircraft as served by the airspace snapshot endpoint."""

    msg: CompositeMsg
    icao24: str | None = None
    registration: str | None = None
    equipment_type: str | None = None
    callsign_prefix: str | None = None
    iata: str | None = Field(default=None, alias="IATA")
    icao: str | None = Field(default=None, alias="ICAO")
    number: int = 0
    origin: str | None = None
    destination: str | None = None
    num_messages_seen: int = 0
    source: str | None = None

    x_url_skypi: str | None = Field(default=None, alias="X_UrlSkypi")
    x_url_descent: str | None = Field(default=None, alias="X_UrlDescent")
    x_url_fa: str | None = Field(default=None, alias="X_UrlFA")
    x_url_fr24: str | None = Field(default=None, alias="X_UrlFR24")
    x_data_system: str | None = Field(default=None, alias="X_DataSystem")

    @field_validator("number", "num_messages_seen", mode="before")
    @classmethod
    def _coerce_counts(cls, value: object) -> int:
        return safe_int(value) or 0

    @property
    def flight_number(self) -> str:
        if self.iata and self.number:
            return f"{self.iata}{self.number}"
        return ""

    @property
    def ident(self) -> str:
        """Best display identity: flight number, then callsign, then registration."""
        return self.flight_number or self.msg.callsign or self.registration or ""

    @property
    def data_system(self) -> str:
        if self.x_data_system:
            return self.x_data_system
        return "MLAT" if self.msg.msg_type == "MLAT" else "ADSB"

    @property
    def source_name(self) -> str:
        return self.source or "SkyPi"

    @property
    def color(self) -> str:
        """Marker colour for a live aircraft, keyed on where the data came from."""
        if self.source == "fa":
            return FLIGHTAWARE_COLOR
        if self.source == "fr24":
            return FR24_COLOR
        if self.data_system == "MLAT":
            return MLAT_COLOR
        return DEFAULT_COLOR

    @property
    def z_index(self) -> int:
        return FR24_Z_INDEX if self.source == "fr24" else DEFAULT_Z_INDEX

    @property
    def heading(self) -> int:
        return self.msg.track or 0
