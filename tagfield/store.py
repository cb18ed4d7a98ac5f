"""Record store capability used by tag fields.

A record store answers the questions a tag field asks about its topic model
(does it have a many-to-many relation or a column with the field's name?) and
performs the reads and writes behind suggest and save.
"""

import enum
from collections.abc import Sequence

from flask import current_app
from sqlalchemy import inspect, select, text

from .errors import TagFieldConfigurationError


class StorageMode(enum.Enum):
    RELATION = "relation"
    SCALAR = "scalar"


class RecordStore:
    """Interface between a tag field and the storage of its topic model."""

    model = None

    def has_relation(self, name):
        raise NotImplementedError

    def has_attribute(self, name):
        raise NotImplementedError

    def related_model(self, name):
        raise NotImplementedError

    def search_related(self, name, attribute, query, where=None, order_by=None):
        raise NotImplementedError

    def search_attribute(self, name, query, where=None, order_by=None):
        raise NotImplementedError

    def find_or_create(self, model, attribute, value):
        raise NotImplementedError

    def ensure_persistent(self, record):
        raise NotImplementedError

    def replace_related(self, record, name, entities):
        raise NotImplementedError

    def storage_mode(self, name):
        """Return how ``name`` is stored on the model, checking relations first."""
        if self.has_relation(name):
            return StorageMode.RELATION
        if self.has_attribute(name):
            return StorageMode.SCALAR
        model_name = getattr(self.model, "__name__", self.model)
        raise TagFieldConfigurationError(
            f"Can't find a many-to-many relation or a column named {name!r} on {model_name}"
        )


def _as_clauses(value):
    """Normalise a filter/sort option into a list of SQL clauses.

    Raw strings are treated as SQL fragments.
    """
    if value is None:
        return []
    if isinstance(value, str):
        return [text(value)]
    if isinstance(value, Sequence):
        return [text(v) if isinstance(v, str) else v for v in value]
    return [value]


class SQLAlchemyRecordStore(RecordStore):
    """Record store over a SQLAlchemy declarative model and session."""

    def __init__(self, model, session):
        self.model = model
        self.session = session
        self._mapper = inspect(model)
        self._modes = {}

    def _relationship(self, name):
        return self._mapper.relationships.get(name)

    def has_relation(self, name):
        rel = self._relationship(name)
        return rel is not None and rel.secondary is not None

    def has_attribute(self, name):
        return name in self._mapper.column_attrs

    def storage_mode(self, name):
        if name not in self._modes:
            self._modes[name] = super().storage_mode(name)
        return self._modes[name]

    def related_model(self, name):
        if not self.has_relation(name):
            raise TagFieldConfigurationError(
                f"Can't find a many-to-many relation named {name!r} on {self.model.__name__}"
            )
        return self._relationship(name).mapper.class_

    def _column(self, model, attribute):
        column = getattr(model, attribute, None)
        if column is None or attribute not in inspect(model).column_attrs:
            raise TagFieldConfigurationError(f"{model.__name__} has no column named {attribute!r}")
        return column

    def search_related(self, name, attribute, query, where=None, order_by=None):
        """Values of ``attribute`` on related entities containing ``query``."""
        tag_model = self.related_model(name)
        column = self._column(tag_model, attribute)
        stmt = select(column).where(column.icontains(query or "", autoescape=True))
        stmt = stmt.where(*_as_clauses(where)).order_by(*_as_clauses(order_by))
        return list(self.session.execute(stmt).scalars())

    def search_attribute(self, name, query, where=None, order_by=None):
        """Raw column values of topic records containing ``query``."""
        column = self._column(self.model, name)
        stmt = select(column).where(column.icontains(query or "", autoescape=True))
        stmt = stmt.where(*_as_clauses(where)).order_by(*_as_clauses(order_by))
        return list(self.session.execute(stmt).scalars())

    def find_or_create(self, model, attribute, value):
        column = self._column(model, attribute)
        entity = self.session.execute(select(model).where(column == value)).scalars().first()
        if entity is None:
            entity = model(**{attribute: value})
            self.session.add(entity)
            self.session.flush()
            current_app.logger.info("Created %s with %s=%r", model.__name__, attribute, value)
        return entity

    def ensure_persistent(self, record):
        """Give ``record`` an identity so join rows can reference it."""
        if inspect(record).has_identity:
            return record
        self.session.add(record)
        self.session.flush()
        return record

    def replace_related(self, record, name, entities):
        collection = getattr(record, name)
        collection.clear()
        collection.extend(entities)
        current_app.logger.info(
            "Replaced %s.%s on record %s with %d item(s)",
            type(record).__name__,
            name,
            inspect(record).identity,
            len(entities),
        )
