import copy
import hashlib
from collections import defaultdict
from collections.abc import Iterable
from typing import ClassVar, Optional

import pandas as pd
from pandera import DataFrameModel

from ...logger import WranglerLogger
from ...utils.data import df_hash, fk_in_pk, group_positions, positions_for_keys, to_str_table
from ...utils.models import validate_df_to_model


class RequiredTableError(Exception):
    pass


class ForeignKeyValueError(Exception):
    pass


TablePrimaryKeys = list[str]


"""TableForeignKeys is a dictionary of foreign keys for a single table.

Uses the form:
    {<field>:[<fk_table>,<fk_field>]}

Example:
    {"parent_station": ("stops", "stop_id")}
"""
TableForeignKeys = dict[str, tuple[str, str]]


"""Foreign key fields of a table which are blanked instead of cascade-deleted.

Example:
    ["shape_id"]
"""
TableDetachedKeys = list[str]


"""Dict of each table's foreign keys.

`{ <table>:{<field>:[<fk_table>,<fk_field>]} }`

Example:
    {"stops":
        {"parent_station": ("stops", "stop_id")}
    "stop_times":
        {"stop_id": ("stops", "stop_id")}
        {"trip_id": ("trips", "trip_id")}
    }
"""
DbForeignKeys = dict[str, TableForeignKeys]


"""Mapping of tables that have fields that other tables use as fks.

`{ <table>:{<field>:[(<table using FK>,<field using fk>)]} }`

Example:
    {"stops":
        {"stop_id": [
            ("stops", "parent_station"),
            ("stop_times", "stop_id")
            ]}
    }
"""
DbForeignKeyUsage = dict[str, dict[str, list[tuple[str, str]]]]


"""Row positions keyed by the value of an indexed field: `{<value>: [<row position>]}`."""
FieldIndex = dict[str, list[int]]


class DBModelMixin:
    """An mixin class for interrelated pandera DataFrameModel tables.

    Contains a bunch of convenience methods and overrides the dunder methods
        __deepcopy__ and __eq__.

    Methods:
        hash: hash of tables
        deepcopy: deepcopy of tables which references a custom __deepcopy__
        get_table: retrieve table by name
        table_names_with_field: returns tables in `table_names` with field name
        fk_index: row positions by value of a field
        delete_by_keys: delete rows by key and cascade to every row referencing them

    Attr:
        table_names: list of dataframe table names that are required as part of this "db"
            schema. Ordered so that referenced tables come before referencing tables.
        optional_table_names: list of optional table names that will be added to `table_names` iff
            they are found.
        hash: creates a hash of tables found in `table_names` to track if they change.
        tables: dataframes corresponding to each table_name in `table_names`
        _table_models: mapping of `<table_name>:<DataFrameModel>` to use for validation when
            `__setattr__` is called.

    Where metadata variable _fk = {<table_field>:[<fk table>,<fk field>]}

    e.g.: `_fk = {"parent_station": ["stops", "stop_id"]}`

    and metadata variable _fk_detach = [<table_field>] lists the fk fields that are set to blank
    rather than having their row deleted when the referenced row is deleted.
    """

    # list of optional tables which are added to table_names if they are found.
    optional_table_names: ClassVar[list[str]] = []

    # list of interrelated tables.
    table_names: ClassVar[list[str]] = []

    # mapping of which Pandera DataFrameModel to validate the table to.
    _table_models: ClassVar[dict[str, DataFrameModel]] = {}

    def __setattr__(self, key, value):
        """Override the default setattr behavior to handle DataFrame validation.

        Note: this is NOT called when a dataframe is mutated in place!

        Args:
            key (str): The attribute name.
            value: The value to be assigned to the attribute.

        Raises:
            TableValidationError: If the DataFrame does not conform to the schema.
            ForeignKeyValueError: If doesn't validate to foreign key.
        """
        if isinstance(value, pd.DataFrame) and key in self._table_models:
            WranglerLogger.debug(f"Validating + coercing value to {key}")
            df = self.validate_coerce_table(key, value)
            super().__setattr__(key, df)
        else:
            super().__setattr__(key, value)

    def validate_coerce_table(self, table_name: str, table: pd.DataFrame) -> pd.DataFrame:
        """Coerce all values to strings and validate table against its model and fks."""
        table_model = self._table_models[table_name]
        validated_df = validate_df_to_model(to_str_table(table), table_model)

        # Do this in both directions so that ordering of tables being added doesn't matter.
        self.check_table_fks(table_name, table=validated_df)
        self.check_referenced_fks(table_name, table=validated_df)
        return validated_df

    def initialize_tables(self, **kwargs):
        """Initializes the tables for the database.

        Args:
            **kwargs: Keyword arguments representing the tables to be initialized.

        Raises:
            RequiredTableError: If any required tables are missing in the initialization.
        """
        # Flag missing required tables
        _missing_tables = [t for t in self.table_names if t not in kwargs]
        if _missing_tables:
            msg = f"Missing required tables: {_missing_tables}"
            raise RequiredTableError(msg)

        # Add provided optional tables, keeping referenced tables ahead of referencing tables.
        _opt_tables = [k for k in self.optional_table_names if k in kwargs]
        self.table_names = [t for t in self._table_models if t in self.table_names + _opt_tables]

        # Set tables in order
        for table in self.table_names:
            WranglerLogger.info(f"Initializing {table}")
            self.__setattr__(table, kwargs[table])

    @classmethod
    def fks(cls) -> DbForeignKeys:
        """Return the fk field constraints as `{ <table>:{<field>:[<fk_table>,<fk_field>]} }`."""
        fk_fields = {}
        for table_name, table_model in cls._table_models.items():
            config = table_model.Config
            if not hasattr(config, "_fk"):
                continue
            fk_fields[table_name] = config._fk
        return fk_fields

    @classmethod
    def detached_fks(cls, table_name: str) -> TableDetachedKeys:
        """Return the fk fields of table_name which are blanked when their reference is deleted."""
        return getattr(cls._table_models[table_name].Config, "_fk_detach", [])

    @classmethod
    def fields_as_fks(cls) -> DbForeignKeyUsage:
        """Returns mapping of tables that have fields that other tables use as fks.

        `{ <table>:{<field>:[(<table using FK>,<field using fk>)]} }`

        Useful for knowing if you should check FK validation when changing a field value.
        """
        pks_as_fks: defaultdict = defaultdict(lambda: defaultdict(list))
        for t, field_fk in cls.fks().items():
            for f, fk in field_fk.items():
                fk_table, fk_field = fk
                pks_as_fks[fk_table][fk_field].append((t, f))
        return {k: dict(v) for k, v in pks_as_fks.items()}

    def _set_tables_with_field(self, table_name: str, field: str) -> bool:
        if table_name not in self.table_names:
            return False
        if table_name not in self.__dict__:
            return False
        return field in self.__dict__[table_name]

    def check_referenced_fk(
        self, pk_table_name: str, pk_field: str, pk_table: Optional[pd.DataFrame] = None
    ) -> bool:
        """True if table.field has the values referenced in any table referencing fields as fk.

        For example. If routes.route_id is referenced in trips table, we need to check that
        if a route_id is deleted, it isn't referenced in trips.route_id.
        """
        if pk_table is None:
            pk_table = self.get_table(pk_table_name)

        if pk_field not in pk_table:
            return True

        all_valid = True
        for ref_table_name, ref_field in self.fields_as_fks()[pk_table_name][pk_field]:
            # self references are checked against the new table in check_table_fks
            if ref_table_name == pk_table_name:
                continue
            if not self._set_tables_with_field(ref_table_name, ref_field):
                WranglerLogger.debug(
                    f"Referencing field {ref_table_name}.{ref_field} not set - \
                    skipping fk validation."
                )
                continue
            ref_table = self.get_table(ref_table_name)
            valid, _missing = fk_in_pk(pk_table[pk_field], ref_table[ref_field])
            all_valid = all_valid and valid
            if _missing:
                WranglerLogger.error(
                    f"Following values missing from {pk_table_name}.{pk_field} that \
                      are referenced by {ref_table_name}.{ref_field}: \n{_missing}"
                )
        return all_valid

    def check_referenced_fks(self, table_name: str, table: Optional[pd.DataFrame] = None) -> bool:
        """True if this table has the values referenced in any table referencing fields as fk.

        For example. If routes.route_id is referenced in trips table, we need to check that
        if a route_id is deleted, it isn't referenced in trips.route_id.
        """
        if table is None:
            table = self.get_table(table_name)
        all_valid = True
        for field in self.fields_as_fks().get(table_name, {}):
            valid = self.check_referenced_fk(table_name, field, pk_table=table)
            all_valid = valid and all_valid
        return all_valid

    def check_table_fks(
        self, table_name: str, table: Optional[pd.DataFrame] = None, raise_error: bool = True
    ) -> bool:
        """Return True if the foreign key fields in table have valid references.

        Note: will return true if the specified foreign key table or field isn't set.
        """
        fks = self.fks()
        if table_name not in fks:
            return True
        if table is None:
            table = self.get_table(table_name)
        all_valid = True
        for field, fk in fks[table_name].items():
            pkref_table_name, pkref_field = fk
            if field not in table:
                continue
            if pkref_table_name == table_name:
                pkref_table = table
            elif self._set_tables_with_field(pkref_table_name, pkref_field):
                pkref_table = self.get_table(pkref_table_name)
            else:
                WranglerLogger.debug(
                    f"PK table {pkref_table_name} for specified FK \
                    {table_name}.{field} not set - skipping validation."
                )
                continue
            valid, missing = fk_in_pk(pkref_table[pkref_field], table[field])
            if missing:
                WranglerLogger.error(
                    f"!!! {pkref_table_name}.{pkref_field} missing values used as FK\
                      in {table_name}.{field}: \n{missing}"
                )
            all_valid = valid and all_valid

        if not all_valid:
            if raise_error:
                msg = f"FK fields/ values referenced in {table_name} missing."
                raise ForeignKeyValueError(msg)
            return False
        return True

    def check_fks(self) -> bool:
        """Check all FKs in set of tables."""
        all_valid = True
        for table_name in self.table_names:
            valid = self.check_table_fks(table_name, raise_error=False)
            all_valid = valid and all_valid
        return all_valid

    def fk_index(self, table_name: str, field: str) -> FieldIndex:
        """Map each value of table_name.field to the row positions holding it.

        Blank values are not indexed. Returns an empty index if the field isn't in the table.
        """
        table = self.get_table(table_name)
        if field not in table:
            return {}
        return group_positions(table[field])

    def delete_by_keys(self, table_name: str, field: str, keys: Iterable[str]) -> dict[str, int]:
        """Delete rows where `table_name.field` is in keys, and every row depending on them.

        Rows referencing a deleted row through a foreign key are deleted in turn (transitively),
        except for fk fields listed in the referencing model's `_fk_detach`, which are set to
        blank instead. A key value is only considered gone once no surviving row holds it, so
        composite-key tables (e.g. shapes) only cascade once every row of a key is deleted.

        Dependents are found with one field index per (table, field), built once for the call.
        All deletions are collected first and then applied once per table, leaves first, so
        row order of every surviving table is unchanged.

        Keys not found are ignored.

        Args:
            table_name: table to delete from.
            field: field of table_name to match keys against.
            keys: values of field to delete.

        Returns:
            Number of rows deleted from each table.
        """
        keys = set(keys)
        indexes: dict[tuple[str, str], FieldIndex] = {}
        drop_rows: dict[str, set[int]] = defaultdict(set)
        detach_rows: dict[tuple[str, str], set[int]] = defaultdict(set)

        self._collect_cascade(table_name, field, keys, indexes, drop_rows, detach_rows)

        if not drop_rows[table_name]:
            WranglerLogger.debug(f"No rows in {table_name} with {field} in {sorted(keys)}.")

        return self._apply_deletions(drop_rows, detach_rows)

    def _index(
        self, indexes: dict[tuple[str, str], FieldIndex], table_name: str, field: str
    ) -> FieldIndex:
        if (table_name, field) not in indexes:
            indexes[(table_name, field)] = self.fk_index(table_name, field)
        return indexes[(table_name, field)]

    def _collect_cascade(
        self,
        table_name: str,
        field: str,
        keys: set[str],
        indexes: dict[tuple[str, str], FieldIndex],
        drop_rows: dict[str, set[int]],
        detach_rows: dict[tuple[str, str], set[int]],
    ) -> None:
        new_rows = positions_for_keys(self._index(indexes, table_name, field), keys)
        new_rows -= drop_rows[table_name]
        if not new_rows:
            return
        drop_rows[table_name] |= new_rows

        table = self.get_table(table_name)
        for pk_field, referencing in self.fields_as_fks().get(table_name, {}).items():
            if pk_field not in table:
                continue
            pk_index = self._index(indexes, table_name, pk_field)
            candidate_vals = set(table[pk_field].iloc[sorted(new_rows)]) - {""}
            gone_vals = {
                v for v in candidate_vals if set(pk_index[v]) <= drop_rows[table_name]
            }
            if not gone_vals:
                continue
            for ref_table_name, ref_field in referencing:
                if not self._set_tables_with_field(ref_table_name, ref_field):
                    continue
                if ref_field in self.detached_fks(ref_table_name):
                    ref_index = self._index(indexes, ref_table_name, ref_field)
                    detach_rows[(ref_table_name, ref_field)] |= positions_for_keys(
                        ref_index, gone_vals
                    )
                    continue
                self._collect_cascade(
                    ref_table_name, ref_field, gone_vals, indexes, drop_rows, detach_rows
                )

    def _apply_deletions(
        self,
        drop_rows: dict[str, set[int]],
        detach_rows: dict[tuple[str, str], set[int]],
    ) -> dict[str, int]:
        """Blank detached fks and drop rows, leaves first so fk checks pass at every step."""
        changed_tables = {t for t, rows in drop_rows.items() if rows}
        changed_tables |= {t for (t, _), rows in detach_rows.items() if rows}
        removed: dict[str, int] = {}
        for table_name in reversed(self.table_names):
            if table_name not in changed_tables:
                continue
            table = self.get_table(table_name).copy()
            for (detach_table, detach_field), rows in detach_rows.items():
                if detach_table != table_name or not rows:
                    continue
                rows = sorted(rows - drop_rows.get(table_name, set()))
                WranglerLogger.debug(
                    f"Blanking {table_name}.{detach_field} for {len(rows)} records."
                )
                table.iloc[rows, table.columns.get_loc(detach_field)] = ""
            keep = ~pd.Series(range(len(table)), index=table.index).isin(
                drop_rows.get(table_name, set())
            )
            removed[table_name] = int((~keep).sum())
            self.__setattr__(table_name, table[keep])
        removed = {t: n for t, n in removed.items() if n}
        if removed:
            WranglerLogger.info(f"Deleted records: {removed}")
        return removed

    def set_field_by_rows(self, table_name: str, field: str, rows: Iterable[int], value: str):
        """Set field to value for the given row positions of table_name."""
        rows = sorted(rows)
        if not rows:
            return
        table = self.get_table(table_name).copy()
        if field not in table:
            table[field] = ""
        table.iloc[rows, table.columns.get_loc(field)] = value
        self.__setattr__(table_name, table)

    @property
    def tables(self) -> list[pd.DataFrame]:
        return [self.__dict__[t] for t in self.table_names]

    @property
    def tables_dict(self) -> dict[str, pd.DataFrame]:
        return {t: self.get_table(t) for t in self.table_names}

    @property
    def describe_df(self) -> pd.DataFrame:
        num_records = [len(self.get_table(t)) for t in self.table_names]
        return pd.DataFrame({"Table": self.table_names, "Records": num_records})

    def get_table(self, table_name: str) -> pd.DataFrame:
        """Get table by name."""
        if table_name not in self.table_names:
            msg = f"{table_name} table not in db."
            raise ValueError(msg)
        if table_name not in self.__dict__:
            msg = f"Required table not set yet: {table_name}"
            raise RequiredTableError(msg)
        return self.__dict__[table_name]

    def table_names_with_field(self, field: str) -> list[str]:
        """Returns tables in the class instance which contain the field."""
        return [t for t in self.table_names if field in self.get_table(t).columns]

    @property
    def hash(self) -> str:
        """A hash representing the contents of the tables in self.table_names."""
        _table_hashes = [df_hash(self.get_table(t)) for t in self.table_names]
        _value = str.encode("-".join(_table_hashes))

        _hash = hashlib.sha256(_value).hexdigest()
        return _hash

    def __eq__(self, other):
        """Override the default Equals behavior."""
        if isinstance(other, self.__class__):
            return self.hash == other.hash
        return False

    def __deepcopy__(self, memo):
        """Custom implementation of __deepcopy__ method.

        This method is called by copy.deepcopy() to create a deep copy of the object.

        Args:
            memo (dict): Dictionary to track objects already copied during deepcopy.

        Returns:
            A deep copy of the db object.
        """
        new_instance = self.__class__.__new__(self.__class__)

        # Tables are copied straight into __dict__; they were already validated.
        for attr_name, attr_value in self.__dict__.items():
            new_instance.__dict__[attr_name] = copy.deepcopy(attr_value, memo)

        return new_instance

    def deepcopy(self):
        """Convenience method to exceute deep copy of instance."""
        return copy.deepcopy(self)
