# File: backend/app/repair/catalog.py
# Version: v1.0.0
"""
Static catalog of the Action Scheduler tables.

Each TableSpec carries the logical table name, its primary identifier column and
the CREATE TABLE template. The column lists match the 3.0.x store/logger schema
of the Action Scheduler library and must not drift from it.

Order matters: actions, claims, groups, logs.
"""
from __future__ import annotations

import re
from dataclasses import dataclass

from backend.app.repair.errors import UnknownTableError

ACTIONS_TABLE = "actionscheduler_actions"
CLAIMS_TABLE = "actionscheduler_claims"
GROUPS_TABLE = "actionscheduler_groups"
LOG_TABLE = "actionscheduler_logs"

# @see wp_get_db_schema()
MAX_INDEX_LENGTH = 191

_IDENT_RE = re.compile(r"^[A-Za-z0-9_]+$")


@dataclass(frozen=True)
class TableSpec:
    name: str
    primary_column: str
    ddl: str

    def render(self, *, prefix: str = "", charset_collate: str = "") -> str:
        return self.ddl.format(
            table_name=prefixed(prefix, self.name),
            max_index_length=MAX_INDEX_LENGTH,
            charset_collate=charset_collate,
        ).rstrip()


_ACTIONS_DDL = """CREATE TABLE {table_name} (
    action_id bigint(20) unsigned NOT NULL auto_increment,
    hook varchar(191) NOT NULL,
    status varchar(20) NOT NULL,
    scheduled_date_gmt datetime NOT NULL default '0000-00-00 00:00:00',
    scheduled_date_local datetime NOT NULL default '0000-00-00 00:00:00',
    args varchar({max_index_length}),
    schedule longtext,
    group_id bigint(20) unsigned NOT NULL default '0',
    attempts int(11) NOT NULL default '0',
    last_attempt_gmt datetime NOT NULL default '0000-00-00 00:00:00',
    last_attempt_local datetime NOT NULL default '0000-00-00 00:00:00',
    claim_id bigint(20) unsigned NOT NULL default '0',
    extended_args varchar(8000) DEFAULT NULL,
    PRIMARY KEY  (action_id),
    KEY hook (hook({max_index_length})),
    KEY status (status),
    KEY scheduled_date_gmt (scheduled_date_gmt),
    KEY args (args({max_index_length})),
    KEY group_id (group_id),
    KEY last_attempt_gmt (last_attempt_gmt),
    KEY claim_id (claim_id)
    ) {charset_collate}"""

_CLAIMS_DDL = """CREATE TABLE {table_name} (
    claim_id bigint(20) unsigned NOT NULL auto_increment,
    date_created_gmt datetime NOT NULL default '0000-00-00 00:00:00',
    PRIMARY KEY  (claim_id),
    KEY date_created_gmt (date_created_gmt)
    ) {charset_collate}"""

_GROUPS_DDL = """CREATE TABLE {table_name} (
    group_id bigint(20) unsigned NOT NULL auto_increment,
    slug varchar(255) NOT NULL,
    PRIMARY KEY  (group_id),
    KEY slug (slug({max_index_length}))
    ) {charset_collate}"""

_LOGS_DDL = """CREATE TABLE {table_name} (
    log_id bigint(20) unsigned NOT NULL auto_increment,
    action_id bigint(20) unsigned NOT NULL,
    message text NOT NULL,
    log_date_gmt datetime NOT NULL default '0000-00-00 00:00:00',
    log_date_local datetime NOT NULL default '0000-00-00 00:00:00',
    PRIMARY KEY  (log_id),
    KEY action_id (action_id),
    KEY log_date_gmt (log_date_gmt)
    ) {charset_collate}"""

TABLES: tuple[TableSpec, ...] = (
    TableSpec(ACTIONS_TABLE, "action_id", _ACTIONS_DDL),
    TableSpec(CLAIMS_TABLE, "claim_id", _CLAIMS_DDL),
    TableSpec(GROUPS_TABLE, "group_id", _GROUPS_DDL),
    TableSpec(LOG_TABLE, "log_id", _LOGS_DDL),
)

_BY_NAME = {spec.name: spec for spec in TABLES}


def table_names() -> list[str]:
    return [spec.name for spec in TABLES]


def get_table_spec(table: str) -> TableSpec:
    try:
        return _BY_NAME[table]
    except KeyError:
        raise UnknownTableError(table) from None


def get_schema(table: str, *, prefix: str = "", charset_collate: str = "") -> str:
    """Return the CREATE TABLE statement for `table` with prefix and charset applied."""
    return get_table_spec(table).render(prefix=prefix, charset_collate=charset_collate)


def prefixed(prefix: str, table: str) -> str:
    """Physical table name; both parts are spliced into SQL unquoted so they are validated."""
    name = f"{prefix}{table}"
    if not _IDENT_RE.match(name):
        raise ValueError(f"invalid table identifier: {name!r}")
    return name


def charset_collate(charset: str | None, collate: str | None) -> str:
    """Mirror of WordPress' wpdb::get_charset_collate()."""
    out = ""
    if charset:
        out = f"DEFAULT CHARACTER SET {charset}"
    if collate:
        out += f" COLLATE {collate}"
    return out.strip()
