# src/tiled_tables/store/sql.py
"""
SQLAlchemy Core sink.

One ``Table`` per record type; columns mirror the record dataclasses. Any
engine URL works; the default is a private in-memory SQLite database.
"""

from __future__ import annotations

from typing import List, Optional, Union

import sqlalchemy as sa
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError
from sqlalchemy.pool import StaticPool

from tiled_tables.core.exceptions import DuplicateKeyError
from tiled_tables.logging import get_logger
from tiled_tables.projection.records import (
    LAYER_TABLE,
    MAP_TABLE,
    OBJECT_TABLE,
    PROPERTY_TABLE,
    RECORD_TYPES,
    TABLES,
    TILE_TABLE,
    TILESET_TABLE,
    RecordBatch,
    _Record,
)
from tiled_tables.store.base import check_table

log = get_logger("sql_sink")

DEFAULT_DATABASE_URL = "sqlite:///:memory:"


def _key(name: str) -> sa.Column:
    return sa.Column(name, sa.BigInteger(), primary_key=True, autoincrement=False)


def build_metadata() -> sa.MetaData:
    metadata = sa.MetaData()

    sa.Table(
        MAP_TABLE,
        metadata,
        _key("map_id"),
        sa.Column("name", sa.String(), nullable=False, index=True),
        sa.Column("width", sa.Integer(), nullable=False),
        sa.Column("height", sa.Integer(), nullable=False),
        sa.Column("tile_width", sa.Integer(), nullable=False),
        sa.Column("tile_height", sa.Integer(), nullable=False),
        sa.Column("orientation", sa.String(), nullable=False),
        sa.Column("background_color", sa.String(), nullable=True),
        sa.Column("infinite", sa.Boolean(), nullable=False),
    )
    sa.Table(
        TILESET_TABLE,
        metadata,
        _key("tileset_id"),
        sa.Column("map_id", sa.BigInteger(), sa.ForeignKey(f"{MAP_TABLE}.map_id"), nullable=False),
        sa.Column("tileset_index", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("first_gid", sa.Integer(), nullable=False),
        sa.Column("tile_width", sa.Integer(), nullable=False),
        sa.Column("tile_height", sa.Integer(), nullable=False),
        sa.Column("tile_count", sa.Integer(), nullable=False),
        sa.Column("columns", sa.Integer(), nullable=False),
        sa.Column("image_source", sa.String(), nullable=True),
        sa.Column("image_width", sa.Integer(), nullable=True),
        sa.Column("image_height", sa.Integer(), nullable=True),
        sa.Column("source", sa.String(), nullable=True),
    )
    sa.Table(
        LAYER_TABLE,
        metadata,
        _key("layer_id"),
        sa.Column("map_id", sa.BigInteger(), sa.ForeignKey(f"{MAP_TABLE}.map_id"), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("kind", sa.String(), nullable=False),
        sa.Column("visible", sa.Boolean(), nullable=False),
        sa.Column("opacity", sa.Float(), nullable=False),
        sa.Column("offset_x", sa.Integer(), nullable=False),
        sa.Column("offset_y", sa.Integer(), nullable=False),
        sa.Column("z_order", sa.Integer(), nullable=False),
        sa.Column("parent_layer_id", sa.BigInteger(), nullable=True),
    )
    sa.Table(
        TILE_TABLE,
        metadata,
        _key("tile_id"),
        sa.Column("layer_id", sa.BigInteger(), sa.ForeignKey(f"{LAYER_TABLE}.layer_id"), nullable=False, index=True),
        sa.Column("x", sa.Integer(), nullable=False),
        sa.Column("y", sa.Integer(), nullable=False),
        sa.Column("gid", sa.BigInteger(), nullable=False),
        sa.Column("flip_h", sa.Boolean(), nullable=False),
        sa.Column("flip_v", sa.Boolean(), nullable=False),
        sa.Column("flip_d", sa.Boolean(), nullable=False),
    )
    sa.Table(
        OBJECT_TABLE,
        metadata,
        _key("object_id"),
        sa.Column("layer_id", sa.BigInteger(), sa.ForeignKey(f"{LAYER_TABLE}.layer_id"), nullable=False, index=True),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("obj_type", sa.String(), nullable=False),
        sa.Column("x", sa.Float(), nullable=False),
        sa.Column("y", sa.Float(), nullable=False),
        sa.Column("width", sa.Float(), nullable=False),
        sa.Column("height", sa.Float(), nullable=False),
        sa.Column("rotation", sa.Float(), nullable=False),
        sa.Column("visible", sa.Boolean(), nullable=False),
        sa.Column("shape", sa.String(), nullable=False),
    )
    sa.Table(
        PROPERTY_TABLE,
        metadata,
        _key("property_id"),
        sa.Column("parent_type", sa.String(), nullable=False),
        sa.Column("parent_id", sa.BigInteger(), nullable=False),
        sa.Column("key", sa.String(), nullable=False),
        sa.Column("value", sa.Text(), nullable=False),
        sa.Column("value_type", sa.String(), nullable=False),
        sa.Index("ix_tiled_property_parent", "parent_type", "parent_id"),
    )
    return metadata


def _create_engine(url: str) -> Engine:
    if url.startswith("sqlite") and ":memory:" in url:
        # A single shared connection, otherwise every checkout sees an empty database.
        return sa.create_engine(
            url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    return sa.create_engine(url)


class SqlSink:
    """
    Sink backed by SQLAlchemy Core.

    Args:
        engine: An ``Engine`` or a database URL. Tables are created on
            construction if they do not exist.
    """

    def __init__(self, engine: Union[Engine, str, None] = None):
        if engine is None:
            engine = DEFAULT_DATABASE_URL
        self.engine = _create_engine(engine) if isinstance(engine, str) else engine
        self.metadata = build_metadata()
        self.metadata.create_all(self.engine)

    def table(self, name: str) -> sa.Table:
        check_table(name)
        return self.metadata.tables[name]

    def insert(self, table: str, record: _Record) -> None:
        check_table(table, record)
        try:
            with self.engine.begin() as conn:
                conn.execute(self.table(table).insert(), [record.to_row()])
        except IntegrityError as exc:
            raise DuplicateKeyError(table, record.primary_key) from exc

    def insert_batch(self, batch: RecordBatch) -> None:
        """Insert every table of ``batch`` inside one transaction."""
        current = None
        try:
            with self.engine.begin() as conn:
                for current in TABLES:
                    records = batch.rows[current]
                    if records:
                        conn.execute(self.table(current).insert(), [r.to_row() for r in records])
        except IntegrityError as exc:
            raise DuplicateKeyError(current or "") from exc

        log.debug("Committed batch for map %s: %d record(s)", batch.map_id, len(batch))

    def count(self, table: str) -> int:
        with self.engine.connect() as conn:
            return conn.execute(sa.select(sa.func.count()).select_from(self.table(table))).scalar_one()

    def max_key(self, table: str) -> Optional[int]:
        t = self.table(table)
        key_column = t.c[RECORD_TYPES[table].KEY]
        with self.engine.connect() as conn:
            return conn.execute(sa.select(sa.func.max(key_column))).scalar()

    def rows(self, table: str) -> List[_Record]:
        t = self.table(table)
        record_type = RECORD_TYPES[table]
        stmt = sa.select(t).order_by(t.c[record_type.KEY])
        with self.engine.connect() as conn:
            result = conn.execute(stmt)
            return [record_type(**dict(row._mapping)) for row in result]

    def dispose(self) -> None:
        self.engine.dispose()
