"""SQLite 增量迁移。

``migrations/sql`` 下每个 ``<版本>_<名称>.sql`` 为一次迁移，按版本号顺序执行且只执行一次，
执行记录写入 ``schema_migrations``。迁移完成后核对成绩状态是否都在规范集合内。
"""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import List, Set

from sqlalchemy import inspect, text
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import OperationalError

from lms.models import GradeStatus

logger = logging.getLogger(__name__)

MIGRATIONS_DIR = Path(__file__).resolve().parents[1] / "migrations" / "sql"


@dataclass(frozen=True)
class Migration:
    version: str
    name: str
    statements: List[str]

    @classmethod
    def from_file(cls, path: Path) -> "Migration":
        version, _, name = path.stem.partition("_")
        return cls(version, name or version, _split_sql(path.read_text(encoding="utf-8")))


def load_migrations(migrations_dir: Path = MIGRATIONS_DIR) -> List[Migration]:
    if not migrations_dir.exists():
        return []
    migrations = [Migration.from_file(path) for path in migrations_dir.glob("*.sql")]
    return sorted(migrations, key=lambda m: m.version)


def pending_migrations(engine: Engine, migrations_dir: Path = MIGRATIONS_DIR) -> List[Migration]:
    with engine.begin() as conn:
        applied = _applied_versions(conn)
    return [m for m in load_migrations(migrations_dir) if m.version not in applied]


def run_migrations(engine: Engine, migrations_dir: Path = MIGRATIONS_DIR) -> List[str]:
    """执行未应用的迁移，返回本次执行的版本号；非 SQLite 数据库跳过。"""
    if engine.url.drivername != "sqlite":
        return []

    pending = pending_migrations(engine, migrations_dir)
    if pending:
        _backup_sqlite_db(engine)

    for migration in pending:
        # 单个迁移与其执行记录在同一事务内
        with engine.begin() as conn:
            for stmt in migration.statements:
                try:
                    conn.execute(text(stmt))
                except OperationalError as exc:
                    if not _is_ignorable_sqlite_error(exc):
                        raise
            conn.execute(
                text("INSERT INTO schema_migrations (version, name) VALUES (:version, :name)"),
                {"version": migration.version, "name": migration.name},
            )
        logger.info("Applied migration %s (%s)", migration.version, migration.name)
    return [m.version for m in pending]


def unknown_grade_statuses(engine: Engine) -> Set[str]:
    """返回 ``grades`` 中不属于规范成绩集合的状态值。"""
    if not inspect(engine).has_table("grades"):
        return set()
    with engine.begin() as conn:
        stored = {row[0] for row in conn.execute(text("SELECT DISTINCT status FROM grades"))}
    return stored - {status.value for status in GradeStatus}


def _applied_versions(conn: Connection) -> Set[str]:
    conn.execute(
        text(
            "CREATE TABLE IF NOT EXISTS schema_migrations ("
            "version TEXT PRIMARY KEY, "
            "name TEXT, "
            "applied_at DATETIME DEFAULT CURRENT_TIMESTAMP"
            ")"
        )
    )
    return {row[0] for row in conn.execute(text("SELECT version FROM schema_migrations"))}


def _split_sql(sql: str) -> List[str]:
    statements = []
    for chunk in sql.split(";"):
        lines = [line for line in chunk.splitlines() if not line.strip().startswith("--")]
        stmt = "\n".join(lines).strip()
        if stmt:
            statements.append(stmt)
    return statements


def _is_ignorable_sqlite_error(exc: OperationalError) -> bool:
    message = str(exc).lower()
    return "duplicate column name" in message or "already exists" in message


def _backup_sqlite_db(engine: Engine) -> None:
    db_path = engine.url.database
    if not db_path or db_path == ":memory:":
        return
    source = Path(db_path)
    if source.exists():
        shutil.copy2(source, source.with_suffix(source.suffix + ".bak"))
