"""
A small indexed, transactional in-memory table store.

Records are immutable objects keyed by a primary key attribute. Each table
may declare extra indexes over other attributes, unique or not.

Writers are serialized by a single lock and work on copy-on-write copies of
the tables they touch; commit swaps the new tables in at once. Readers take
the committed state at the start of their transaction, so they always see a
consistent snapshot.
"""
from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Any, Hashable, Iterable


class MemDBError(RuntimeError):
    """Misuse of the in-memory store."""


class ReadOnlyTransaction(MemDBError):
    """Write attempted through a read transaction."""


class TransactionClosed(MemDBError):
    """Transaction was already committed or aborted."""


class UniqueIndexViolation(MemDBError):
    """Insert would put two records under the same key of a unique index."""

    def __init__(self, table: str, index: str, value: Any) -> None:
        self.table = table
        self.index = index
        self.value = value
        super().__init__(f"{table}.{index} already has a record for {value!r}")


@dataclass(frozen=True)
class IndexSchema:
    name: str
    field: str
    unique: bool = False


@dataclass(frozen=True)
class TableSchema:
    name: str
    primary_key: str = "id"
    indexes: tuple[IndexSchema, ...] = ()

    def index(self, name: str) -> IndexSchema:
        if name == self.primary_key:
            return IndexSchema(name=name, field=self.primary_key, unique=True)
        for index in self.indexes:
            if index.name == name:
                return index
        raise MemDBError(f"table {self.name!r} has no index {name!r}")


@dataclass(frozen=True)
class Schema:
    tables: tuple[TableSchema, ...]

    def validate(self) -> None:
        seen: set[str] = set()
        for table in self.tables:
            if table.name in seen:
                raise MemDBError(f"duplicate table {table.name!r}")
            seen.add(table.name)
            names = [index.name for index in table.indexes]
            if table.primary_key in names or len(names) != len(set(names)):
                raise MemDBError(f"duplicate index names in table {table.name!r}")


@dataclass
class _TableState:
    rows: dict[Hashable, Any] = field(default_factory=dict)
    indexes: dict[str, dict[Hashable, set[Hashable]]] = field(default_factory=dict)

    def copy(self) -> _TableState:
        return _TableState(
            rows=dict(self.rows),
            indexes={
                name: {key: set(pks) for key, pks in entries.items()}
                for name, entries in self.indexes.items()
            },
        )


class MemDB:
    def __init__(self, schema: Schema, *, lock_timeout: float | None = None) -> None:
        schema.validate()
        self._schema = {table.name: table for table in schema.tables}
        self._root: dict[str, _TableState] = {
            table.name: _TableState(indexes={index.name: {} for index in table.indexes})
            for table in schema.tables
        }
        self._writer = threading.Lock()
        self.lock_timeout = lock_timeout

    def txn(self, write: bool = False) -> Txn:
        if write:
            timeout = -1 if self.lock_timeout is None else self.lock_timeout
            if not self._writer.acquire(timeout=timeout):
                raise TimeoutError("timed out waiting for the write transaction lock")
        return Txn(self, write=write, root=self._root)

    def _table_schema(self, name: str) -> TableSchema:
        try:
            return self._schema[name]
        except KeyError:
            raise MemDBError(f"unknown table {name!r}") from None

    def _publish(self, root: dict[str, _TableState]) -> None:
        self._root = root

    def _release(self) -> None:
        self._writer.release()


class Txn:
    """
    A handle on one snapshot of a MemDB.

    Used as a context manager, a write transaction commits on clean exit and
    aborts on exception.
    """

    def __init__(self, db: MemDB, *, write: bool, root: dict[str, _TableState]) -> None:
        self._db = db
        self._write = write
        self._root = root
        self._dirty: dict[str, _TableState] = {}
        self._done = False

    def __enter__(self) -> Txn:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            self.commit()
        else:
            self.abort()

    # ---------- reads ----------

    def first(self, table: str, index: str, value: Hashable) -> Any | None:
        records = self._lookup(table, index, value)
        return records[0] if records else None

    def get(self, table: str, index: str, value: Hashable) -> list[Any]:
        return self._lookup(table, index, value)

    # ---------- writes ----------

    def insert(self, table: str, record: Any) -> None:
        """Insert `record`, replacing any record with the same primary key."""
        schema = self._db._table_schema(table)
        state = self._writable(table)
        pk = getattr(record, schema.primary_key)
        for index in schema.indexes:
            if not index.unique:
                continue
            key = getattr(record, index.field)
            if state.indexes[index.name].get(key, set()) - {pk}:
                raise UniqueIndexViolation(table, index.name, key)
        existing = state.rows.get(pk)
        if existing is not None:
            self._unindex(schema, state, existing)
        state.rows[pk] = record
        for index in schema.indexes:
            state.indexes[index.name].setdefault(getattr(record, index.field), set()).add(pk)

    def delete(self, table: str, record: Any) -> None:
        schema = self._db._table_schema(table)
        state = self._writable(table)
        pk = getattr(record, schema.primary_key)
        existing = state.rows.pop(pk, None)
        if existing is None:
            raise LookupError(f"no record in {table!r} with {schema.primary_key}={pk!r}")
        self._unindex(schema, state, existing)

    # ---------- lifecycle ----------

    def commit(self) -> None:
        if self._done:
            return
        self._done = True
        if not self._write:
            return
        try:
            if self._dirty:
                root = dict(self._root)
                root.update(self._dirty)
                self._db._publish(root)
        finally:
            self._dirty = {}
            self._db._release()

    def abort(self) -> None:
        if self._done:
            return
        self._done = True
        self._dirty = {}
        if self._write:
            self._db._release()

    # ---------- helpers ----------

    def _check_open(self) -> None:
        if self._done:
            raise TransactionClosed("transaction is no longer open")

    def _state(self, table: str) -> _TableState:
        self._db._table_schema(table)
        if table in self._dirty:
            return self._dirty[table]
        return self._root[table]

    def _writable(self, table: str) -> _TableState:
        self._check_open()
        if not self._write:
            raise ReadOnlyTransaction("cannot write in a read transaction")
        if table not in self._dirty:
            self._dirty[table] = self._root[table].copy()
        return self._dirty[table]

    def _lookup(self, table: str, index: str, value: Hashable) -> list[Any]:
        self._check_open()
        schema = self._db._table_schema(table)
        state = self._state(table)
        if index == schema.primary_key:
            record = state.rows.get(value)
            return [] if record is None else [record]
        schema.index(index)
        pks: Iterable[Hashable] = state.indexes[index].get(value, ())
        return [state.rows[pk] for pk in sorted(pks)]

    @staticmethod
    def _unindex(schema: TableSchema, state: _TableState, record: Any) -> None:
        pk = getattr(record, schema.primary_key)
        for index in schema.indexes:
            key = getattr(record, index.field)
            owners = state.indexes[index.name].get(key)
            if owners is None:
                continue
            owners.discard(pk)
            if not owners:
                del state.indexes[index.name][key]
