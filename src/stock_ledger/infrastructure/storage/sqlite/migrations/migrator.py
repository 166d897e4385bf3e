"""
Versioned schema migrations for the ledger database.

Migration files live next to this module as vNNN_name.sql and run in
version order. Applied versions and their checksums are recorded in
schema_migrations. An existing database file is copied aside before a
run and put back if the run fails.
"""

import asyncio
import hashlib
import re
import shutil
import time
from dataclasses import dataclass, field
from pathlib import Path

import aiosqlite

from stock_ledger.config import get_logger, get_settings
from stock_ledger.core.entities.inventory import utcnow
from stock_ledger.core.exceptions import DatabaseError

logger = get_logger(__name__)

MIGRATIONS_DIR = Path(__file__).parent
_FILENAME = re.compile(r"v(\d+)_(.+)\.sql")

REQUIRED_TABLES = [
    "items",
    "inventory_movements",
    "recipes",
    "recipe_ingredients",
    "schema_migrations",
]

# Rows whose sign disagrees with their direction; the table CHECK should make this impossible
_SIGN_VIOLATIONS_SQL = """
    SELECT COUNT(*) FROM inventory_movements
    WHERE (movement_type = 'IN' AND quantity <= 0)
       OR (movement_type = 'OUT' AND quantity >= 0)
"""


@dataclass
class MigrationInfo:
    version: str
    name: str
    path: Path
    checksum: str

    @classmethod
    def from_file(cls, path: Path) -> "MigrationInfo":
        match = _FILENAME.fullmatch(path.name)
        if not match:
            raise ValueError(f"Invalid migration filename: {path.name}")
        digest = hashlib.sha256(path.read_bytes()).hexdigest()
        return cls(version=match.group(1), name=match.group(2), path=path, checksum=digest[:16])


@dataclass
class MigrationResult:
    version: str
    name: str
    success: bool
    execution_time_ms: int
    error: str | None = None


@dataclass
class MigrationStatus:
    """Snapshot of which migrations a database file has seen."""

    exists: bool
    current_version: str | None = None
    applied: list[str] = field(default_factory=list)
    pending: list[str] = field(default_factory=list)

    @property
    def up_to_date(self) -> bool:
        return self.exists and not self.pending


def _elapsed_ms(started: float) -> int:
    return int((time.perf_counter() - started) * 1000)


def _resolve(db_path: Path | None) -> Path:
    return Path(db_path or get_settings().storage.db_path)


async def get_applied_migrations(conn: aiosqlite.Connection) -> dict[str, str]:
    """Applied version -> checksum; empty before the first migration."""
    try:
        cursor = await conn.execute("SELECT version, checksum FROM schema_migrations")
    except aiosqlite.OperationalError:
        return {}
    return {version: checksum for version, checksum in await cursor.fetchall()}


async def get_current_version(conn: aiosqlite.Connection) -> str | None:
    applied = await get_applied_migrations(conn)
    return max(applied) if applied else None


def discover_migrations() -> list[MigrationInfo]:
    """Bundled migrations sorted by version. Misnamed files are skipped."""
    found = []
    for path in MIGRATIONS_DIR.glob("v*.sql"):
        try:
            found.append(MigrationInfo.from_file(path))
        except ValueError as e:
            logger.warning("skipping_invalid_migration", path=str(path), error=str(e))
    return sorted(found, key=lambda m: m.version)


async def apply_migration(conn: aiosqlite.Connection, migration: MigrationInfo) -> MigrationResult:
    """Run one migration script and record it. Failures are returned, not raised."""
    logger.info("applying_migration", version=migration.version, name=migration.name)
    started = time.perf_counter()

    try:
        await conn.executescript(migration.path.read_text(encoding="utf-8"))
        await conn.execute(
            """
            INSERT INTO schema_migrations (version, name, checksum, execution_time_ms)
            VALUES (?, ?, ?, ?)
            """,
            (migration.version, migration.name, migration.checksum, _elapsed_ms(started)),
        )
        await conn.commit()
    except (aiosqlite.Error, OSError) as e:
        await conn.rollback()
        logger.error(
            "migration_failed", version=migration.version, name=migration.name, error=str(e)
        )
        return MigrationResult(
            migration.version, migration.name, False, _elapsed_ms(started), error=str(e)
        )

    elapsed = _elapsed_ms(started)
    logger.info(
        "migration_applied",
        version=migration.version,
        name=migration.name,
        execution_time_ms=elapsed,
    )
    return MigrationResult(migration.version, migration.name, True, elapsed)


def create_backup(db_path: Path) -> Path:
    """Copy the database file aside, e.g. ledger.db -> ledger.backup_20250314T153000.db."""
    stamp = utcnow().strftime("%Y%m%dT%H%M%S%f")
    backup_path = db_path.with_name(f"{db_path.stem}.backup_{stamp}{db_path.suffix}")
    shutil.copy2(db_path, backup_path)
    logger.info("database_backup_created", backup_path=str(backup_path))
    return backup_path


def restore_backup(db_path: Path, backup_path: Path) -> None:
    shutil.copy2(backup_path, db_path)
    logger.info("database_restored_from_backup", backup_path=str(backup_path))


async def initialize_database(
    db_path: Path | None = None,
    create_backup_before: bool = True,
    strict: bool = False,
) -> list[MigrationResult]:
    """
    Apply every pending migration.

    Args:
        db_path: Database file; defaults to the configured one
        create_backup_before: Copy an existing file aside first
        strict: Refuse to run when an applied migration file was edited

    Returns:
        Results for the migrations run now; empty when already current.
        When one failed, an existing database is put back as it was.

    Raises:
        DatabaseError: Checksum mismatch in strict mode
    """
    db_path = _resolve(db_path)
    db_path.parent.mkdir(parents=True, exist_ok=True)
    logger.info("initializing_database", db_path=str(db_path))

    backup_path = create_backup(db_path) if create_backup_before and db_path.exists() else None
    results: list[MigrationResult] = []

    try:
        async with aiosqlite.connect(db_path) as conn:
            await conn.execute("PRAGMA journal_mode=WAL")
            await conn.execute("PRAGMA foreign_keys=ON")
            applied = await get_applied_migrations(conn)

            for migration in discover_migrations():
                recorded = applied.get(migration.version)
                if recorded is not None:
                    if recorded != migration.checksum:
                        logger.warning("migration_checksum_changed", version=migration.version)
                        if strict:
                            raise DatabaseError(
                                "migrate", f"applied migration v{migration.version} was modified"
                            )
                    continue

                result = await apply_migration(conn, migration)
                results.append(result)
                if not result.success:
                    break
    except Exception as e:
        logger.error("database_initialization_failed", error=str(e))
        if backup_path is not None:
            restore_backup(db_path, backup_path)
        raise

    if backup_path is not None:
        # executescript commits as it goes, so a failed script can leave DDL behind
        if not all(r.success for r in results):
            restore_backup(db_path, backup_path)
        backup_path.unlink()
        logger.info("backup_cleaned_up", backup_path=str(backup_path))

    return results


async def run_migrations() -> list[MigrationResult]:
    """Migrate the configured database; used at application startup.

    Raises:
        DatabaseError: A migration failed
    """
    results = await initialize_database()
    failed = [r for r in results if not r.success]
    if failed:
        raise DatabaseError("migrate", failed[0].error or f"v{failed[0].version} failed")
    return results


async def get_migration_status(db_path: Path | None = None) -> MigrationStatus:
    db_path = _resolve(db_path)
    if not db_path.exists():
        return MigrationStatus(exists=False)

    async with aiosqlite.connect(db_path) as conn:
        applied = await get_applied_migrations(conn)

    return MigrationStatus(
        exists=True,
        current_version=max(applied) if applied else None,
        applied=sorted(applied),
        pending=[m.version for m in discover_migrations() if m.version not in applied],
    )


async def verify_schema_integrity(db_path: Path | None = None) -> list[dict]:
    """
    Run SQLite and ledger consistency checks.

    Each entry has "check" and "status" ("PASS"/"FAIL") plus check-specific
    fields. Ledger checks are skipped while the movement table is missing.
    """
    async with aiosqlite.connect(_resolve(db_path)) as conn:
        cursor = await conn.execute("PRAGMA integrity_check")
        (integrity,) = await cursor.fetchone()

        cursor = await conn.execute("PRAGMA foreign_key_check")
        fk_violations = len(await cursor.fetchall())

        cursor = await conn.execute("SELECT name FROM sqlite_master WHERE type = 'table'")
        tables = {name for (name,) in await cursor.fetchall()}
        missing = [t for t in REQUIRED_TABLES if t not in tables]

        checks = [
            {
                "check": "integrity",
                "status": "PASS" if integrity == "ok" else "FAIL",
                "result": integrity,
            },
            {
                "check": "foreign_keys",
                "status": "FAIL" if fk_violations else "PASS",
                "violations": fk_violations,
            },
            {
                "check": "required_tables",
                "status": "FAIL" if missing else "PASS",
                "missing": missing,
            },
        ]

        if "inventory_movements" in tables:
            cursor = await conn.execute(_SIGN_VIOLATIONS_SQL)
            (bad_signs,) = await cursor.fetchone()
            checks.append({
                "check": "movement_signs",
                "status": "FAIL" if bad_signs else "PASS",
                "violations": bad_signs,
            })

    return checks


def main() -> None:
    """Command line entry point: migrate, or report status or integrity."""
    import argparse

    parser = argparse.ArgumentParser(description="Stock ledger database migrator")
    parser.add_argument("--db-path", type=Path, help="Database file (default from settings)")
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("--status", action="store_true", help="Show applied and pending migrations")
    mode.add_argument("--verify", action="store_true", help="Run integrity checks")
    parser.add_argument("--no-backup", action="store_true", help="Do not back up before migrating")
    parser.add_argument("--strict", action="store_true", help="Fail on modified migrations")
    args = parser.parse_args()

    async def run() -> int:
        if args.status:
            status = await get_migration_status(args.db_path)
            print(f"Database exists: {status.exists}")
            print(f"Current version: {status.current_version or 'N/A'}")
            print(f"Applied: {', '.join(status.applied) or '-'}")
            print(f"Pending: {', '.join(status.pending) or '-'}")
            return 0

        if args.verify:
            checks = await verify_schema_integrity(args.db_path)
            for check in checks:
                extra = {k: v for k, v in check.items() if k not in ("check", "status")}
                print(f"[{check['status']}] {check['check']} {extra}")
            return 0 if all(c["status"] == "PASS" for c in checks) else 1

        results = await initialize_database(
            args.db_path, create_backup_before=not args.no_backup, strict=args.strict
        )
        if not results:
            print("Schema is up to date")
        for result in results:
            outcome = "OK" if result.success else "FAILED"
            print(f"[{outcome}] v{result.version} {result.name} ({result.execution_time_ms}ms)")
            if result.error:
                print(f"    {result.error}")
        return 0 if all(r.success for r in results) else 1

    raise SystemExit(asyncio.run(run()))


if __name__ == "__main__":
    main()
