from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, model_validator
from sqlalchemy import Column, Integer, Float, DateTime

from location_api.config import TABLE_NAME
from location_api.database import Base


def utcnow():
    # SQLite has no timezone column type; timestamps are stored as naive UTC
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Location(Base):
    __tablename__ = TABLE_NAME
    __table_args__ = {"sqlite_autoincrement": True}  # ids are never handed out twice

    id = Column(Integer, primary_key=True, index=True)
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    timestamp = Column(DateTime, nullable=False, default=utcnow)

    def __repr__(self):
        return f"<Location id={self.id} lat={self.latitude} lon={self.longitude}>"


class LocationIn(BaseModel):
    """Body of ``POST /api/location``.

    Key names match case-insensitively (``Latitude``, ``latitude``, ``LATITUDE``);
    a later spelling wins over an earlier one. Numbers only, no coercion from strings.
    """

    model_config = ConfigDict(strict=True)

    latitude: float = Field(allow_inf_nan=False)
    longitude: float = Field(allow_inf_nan=False)

    @model_validator(mode="before")
    @classmethod
    def _fold_key_case(cls, data):
        if isinstance(data, dict):
            return {str(k).lower(): v for k, v in data.items()}
        return data


class LocationOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int = Field(alias="ID")
    latitude: float = Field(alias="Latitude")
    longitude: float = Field(alias="Longitude")
    timestamp: datetime = Field(alias="Timestamp")

    @classmethod
    def from_record(cls, record: Location) -> "LocationOut":
        ts = record.timestamp
        if ts.tzinfo is None:
            ts = ts.replace(tzinfo=timezone.utc)
        return cls(id=record.id, latitude=record.latitude, longitude=record.longitude, timestamp=ts)


class SavedMessage(BaseModel):
    message: str = "Location saved successfully"
