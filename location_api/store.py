import logging

from sqlalchemy.exc import SQLAlchemyError

from location_api.database import Base, make_engine, make_session_factory
from location_api.models import Location, utcnow

logger = logging.getLogger("LocationStore")


class StorageError(Exception):
    """The backing database could not be opened, read or written."""


class LocationNotFound(LookupError):
    """The store holds no locations yet."""


class LocationStore:
    """Single-table SQLite persistence for location readings.

    One instance is built at startup and shared by every request; each call
    opens its own short-lived session, and SQLite serializes the writes.
    """

    def __init__(self, url: str):
        self.url = url
        self.engine = None
        self._session = None

    def initialize(self):
        if self.engine is None:
            self.engine = make_engine(self.url)
            self._session = make_session_factory(self.engine)
        try:
            Base.metadata.create_all(bind=self.engine)
        except SQLAlchemyError as e:
            logger.error(f"Failed to open database {self.url}: {e}")
            raise StorageError(str(e)) from e
        logger.info(f"Database ready at {self.url} (table '{Location.__tablename__}')")

    def insert(self, latitude: float, longitude: float) -> Location:
        with self._session() as session:
            record = Location(latitude=latitude, longitude=longitude, timestamp=utcnow())
            session.add(record)
            try:
                session.commit()
            except SQLAlchemyError as e:
                session.rollback()
                raise StorageError(str(e)) from e
            return record

    def fetch_latest(self) -> Location:
        # identity order, not timestamp order, defines "latest"
        with self._session() as session:
            try:
                record = session.query(Location).order_by(Location.id.desc()).first()
            except SQLAlchemyError as e:
                raise StorageError(str(e)) from e
        if record is None:
            raise LocationNotFound("No locations found")
        return record

    def count(self) -> int:
        with self._session() as session:
            try:
                return session.query(Location).count()
            except SQLAlchemyError as e:
                raise StorageError(str(e)) from e

    def close(self):
        if self.engine is not None:
            self.engine.dispose()
