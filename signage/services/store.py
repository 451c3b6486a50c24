from typing import Any, Protocol

from sqlalchemy import and_, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from signage.models.group import ScreenGroup
from signage.models.media import Media
from signage.models.playlist import Playlist, PlaylistItem
from signage.models.schedule import Schedule
from signage.models.screen import Screen
from signage.services.errors import StoreError

COLLECTIONS = {
    "screens": Screen,
    "groups": ScreenGroup,
    "schedules": Schedule,
    "playlists": Playlist,
    "playlist_items": PlaylistItem,
    "media": Media,
}


class RecordStore(Protocol):
    def query(
        self,
        collection: str,
        where: dict[str, Any] | None = None,
        any_of: list[dict[str, Any]] | None = None,
    ) -> list[dict[str, Any]]:
        ...


class SqlRecordStore:
    """Read-only record access over the ORM session of the current request.

    ``where`` fields are ANDed; ``any_of`` holds alternative field sets, at
    least one of which must match. Rows come back in storage order.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def _conditions(self, model, fields: dict[str, Any]) -> list:
        conditions = []
        for name, value in fields.items():
            column = getattr(model, name, None)
            if column is None:
                raise StoreError(f"Unknown field {name!r} on {model.__tablename__}")
            conditions.append(column == value)
        return conditions

    def query(
        self,
        collection: str,
        where: dict[str, Any] | None = None,
        any_of: list[dict[str, Any]] | None = None,
    ) -> list[dict[str, Any]]:
        model = COLLECTIONS.get(collection)
        if model is None:
            raise StoreError(f"Unknown collection {collection!r}")

        query = self._session.query(model)
        if where:
            query = query.filter(*self._conditions(model, where))
        if any_of:
            query = query.filter(or_(*[and_(*self._conditions(model, fields)) for fields in any_of]))
        try:
            rows = query.order_by(model.created_at.asc(), model.id.asc()).all()
        except SQLAlchemyError as exc:
            raise StoreError(str(exc)) from exc
        columns = model.__table__.columns
        return [{column.key: getattr(row, column.key) for column in columns} for row in rows]
