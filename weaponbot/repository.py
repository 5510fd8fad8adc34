"""SQLAlchemy-backed storage for weapon eligibility flags."""

from __future__ import annotations

import asyncio
import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Iterator, List, Optional

from sqlalchemy import Boolean, Column, DateTime, Integer, String, create_engine, func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from .catalog import WeaponCatalog
from .errors import UnknownWeaponTypeError, WeaponStoreError
from .models import ToggleResult

logger = logging.getLogger("weaponbot.repository")

Base = declarative_base()


class WeaponRow(Base):
    __tablename__ = "weapons"

    id = Column(Integer, primary_key=True)
    name = Column(String(255), nullable=False, unique=True)
    weapon_type = Column(String(64), nullable=False, index=True)
    enabled = Column(Boolean, nullable=False, default=True, index=True)
    created_at = Column(DateTime, server_default=func.now())

    def __repr__(self) -> str:
        return f"WeaponRow(name={self.name!r}, weapon_type={self.weapon_type!r}, enabled={self.enabled!r})"


def sqlite_url(path: Path) -> str:
    return f"sqlite:///{path}"


class WeaponRepository:
    """Reads and toggles the ``enabled`` flag of catalog weapons.

    The synchronous methods do the actual work; the bot calls the async
    facade, which runs them in a worker thread so the event loop never
    blocks on SQLite.
    """

    def __init__(self, database_url: str, catalog: WeaponCatalog):
        self.database_url = database_url
        self.catalog = catalog
        engine_kwargs: Dict[str, object] = {}
        if database_url.startswith("sqlite"):
            engine_kwargs["connect_args"] = {"check_same_thread": False}
            if database_url in ("sqlite://", "sqlite:///:memory:"):
                engine_kwargs["poolclass"] = StaticPool
        self.engine = create_engine(database_url, **engine_kwargs)
        self._session_factory = sessionmaker(bind=self.engine, autoflush=False, expire_on_commit=False)
        self._initialized = False

    @classmethod
    def from_path(cls, path: Path, catalog: WeaponCatalog) -> "WeaponRepository":
        path = Path(path).expanduser()
        path.parent.mkdir(parents=True, exist_ok=True)
        return cls(sqlite_url(path), catalog)

    @contextmanager
    def _session(self, action: str) -> Iterator[Session]:
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except SQLAlchemyError as exc:
            session.rollback()
            logger.error("Database error while trying to %s: %s", action, exc)
            raise WeaponStoreError(f"Failed to {action}.") from exc
        finally:
            session.close()

    #
    # Schema and seeding
    #
    def initialize(self) -> int:
        """Create the schema and insert catalog weapons missing from the table."""
        try:
            Base.metadata.create_all(self.engine)
        except SQLAlchemyError as exc:
            raise WeaponStoreError("Failed to create the weapons table.") from exc
        with self._session("seed the weapons table") as session:
            existing = set(session.scalars(select(WeaponRow.name)))
            missing = [weapon for weapon in self.catalog.weapons if weapon.name not in existing]
            for weapon in missing:
                session.add(WeaponRow(name=weapon.name, weapon_type=weapon.weapon_type, enabled=True))
        self._initialized = True
        if missing:
            logger.info("Seeded %d weapon(s) into %s", len(missing), self.database_url)
        return len(missing)

    def _ensure_initialized(self) -> None:
        if not self._initialized:
            self.initialize()

    #
    # Queries
    #
    def enabled_weapons(self, weapon_type: Optional[str] = None) -> List[str]:
        self._ensure_initialized()
        if weapon_type and weapon_type not in self.catalog.types:
            raise UnknownWeaponTypeError(weapon_type)
        stmt = select(WeaponRow.name).where(WeaponRow.enabled.is_(True)).order_by(WeaponRow.name)
        if weapon_type:
            stmt = stmt.where(WeaponRow.weapon_type == weapon_type)
        with self._session("list enabled weapons") as session:
            return list(session.scalars(stmt))

    def disabled_weapons(self) -> List[str]:
        self._ensure_initialized()
        stmt = select(WeaponRow.name).where(WeaponRow.enabled.is_(False)).order_by(WeaponRow.name)
        with self._session("list excluded weapons") as session:
            return list(session.scalars(stmt))

    def stats(self) -> Dict[str, int]:
        self._ensure_initialized()
        with self._session("count weapons") as session:
            total = session.scalar(select(func.count(WeaponRow.id))) or 0
            enabled = session.scalar(select(func.count(WeaponRow.id)).where(WeaponRow.enabled.is_(True))) or 0
        return {"total": total, "enabled": enabled, "disabled": total - enabled}

    #
    # Mutations
    #
    def set_enabled(self, name: str, enabled: bool) -> ToggleResult:
        self._ensure_initialized()
        with self._session("update a weapon") as session:
            row = session.scalars(select(WeaponRow).where(WeaponRow.name == name)).one_or_none()
            if row is None:
                return ToggleResult(False, "That weapon doesn't exist.")
            if bool(row.enabled) == enabled:
                if enabled:
                    return ToggleResult(False, "That weapon isn't on the exclusion list.")
                return ToggleResult(False, "That weapon is already excluded.")
            row.enabled = enabled
        action = "enabled" if enabled else "excluded"
        logger.info("Weapon %s %s", name, action)
        return ToggleResult(True, count=1)

    def set_enabled_for_type(self, weapon_type: str, enabled: bool) -> ToggleResult:
        self._ensure_initialized()
        if weapon_type not in self.catalog.types:
            return ToggleResult(False, "That weapon type doesn't exist.")
        stmt = (
            update(WeaponRow)
            .where(WeaponRow.weapon_type == weapon_type, WeaponRow.enabled.is_(not enabled))
            .values(enabled=enabled)
            .execution_options(synchronize_session=False)
        )
        with self._session(f"update {weapon_type} weapons") as session:
            changed = session.execute(stmt).rowcount or 0
        if changed == 0:
            if enabled:
                return ToggleResult(False, f"No {weapon_type} weapons are on the exclusion list.")
            return ToggleResult(False, f"Every {weapon_type} weapon is already excluded.")
        logger.info("%s %d %s weapon(s)", "Enabled" if enabled else "Excluded", changed, weapon_type)
        return ToggleResult(True, count=changed)

    def enable_all(self) -> int:
        self._ensure_initialized()
        stmt = (
            update(WeaponRow)
            .where(WeaponRow.enabled.is_(False))
            .values(enabled=True)
            .execution_options(synchronize_session=False)
        )
        with self._session("clear the exclusion list") as session:
            changed = session.execute(stmt).rowcount or 0
        logger.info("Cleared exclusion list (%d weapon(s) re-enabled)", changed)
        return changed

    #
    # Async facade
    #
    async def list_enabled(self, weapon_type: Optional[str] = None) -> List[str]:
        return await asyncio.to_thread(self.enabled_weapons, weapon_type)

    async def list_disabled(self) -> List[str]:
        return await asyncio.to_thread(self.disabled_weapons)

    async def set_eligible(self, name: str, enabled: bool) -> ToggleResult:
        return await asyncio.to_thread(self.set_enabled, name, enabled)

    async def set_eligible_for_type(self, weapon_type: str, enabled: bool) -> ToggleResult:
        return await asyncio.to_thread(self.set_enabled_for_type, weapon_type, enabled)

    async def reset_all_eligible(self) -> int:
        return await asyncio.to_thread(self.enable_all)

    def dispose(self) -> None:
        self.engine.dispose()


__all__ = ["Base", "WeaponRepository", "WeaponRow", "sqlite_url"]
