from __future__ import annotations

import datetime as dt
from contextlib import contextmanager
from pathlib import Path
from typing import Generator, List, Optional

from sqlalchemy import Column, DateTime, String, Text, create_engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

Base = declarative_base()


def utcnow() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


class StorageItem(Base):
    __tablename__ = "storage_items"

    key = Column(String(100), primary_key=True)
    value = Column(Text, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)


class KeyValueStorage:
    """Per-device string slots backed by a single SQLite file.

    Mirrors a browser's localStorage: every slot holds one opaque string and
    is read or replaced as a whole.
    """

    def __init__(self, path: Path):
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.engine = create_engine(
            f"sqlite:///{self.path}",
            connect_args={"check_same_thread": False},
            future=True,
        )
        Base.metadata.create_all(bind=self.engine)
        self._session_factory = sessionmaker(bind=self.engine, autoflush=False, autocommit=False, future=True)

    @contextmanager
    def session(self) -> Generator[Session, None, None]:
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def get_item(self, key: str) -> Optional[str]:
        with self.session() as session:
            record = session.get(StorageItem, key)
            return record.value if record else None

    def set_item(self, key: str, value: str) -> None:
        with self.session() as session:
            record = session.get(StorageItem, key)
            if record:
                record.value = value
            else:
                session.add(StorageItem(key=key, value=value))

    def remove_item(self, key: str) -> None:
        with self.session() as session:
            record = session.get(StorageItem, key)
            if record:
                session.delete(record)

    def keys(self) -> List[str]:
        with self.session() as session:
            return [row.key for row in session.query(StorageItem).order_by(StorageItem.key).all()]

    def dispose(self) -> None:
        self.engine.dispose()


__all__ = ["KeyValueStorage", "StorageItem"]
