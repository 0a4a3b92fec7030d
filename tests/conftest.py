"""Shared fixtures: a small metadata database with two users and a share."""

from __future__ import annotations

from collections.abc import Generator
from dataclasses import dataclass
from pathlib import Path

import pytest

from cloudfiles.core.permissions import Permission
from cloudfiles.server.database import Database
from cloudfiles.server.sharing import ShareType

REPORT_MTIME = 1700000000  # 2023-11-14 22:13:20 UTC


@dataclass
class Platform:
    """Ids of the records created by the platform fixture."""

    db: Database
    db_path: Path
    data_dir: Path
    alice_storage: int
    bob_storage: int
    report_id: int
    share_mount_id: int


def add_home(db: Database, data_dir: Path, user: str) -> int:
    """Create a home storage with a files folder, mounted at /<user>/."""
    home = data_dir / user
    (home / "files").mkdir(parents=True)
    storage = db.add_storage(f"home::{user}", "home", location=str(home))
    root = db.get_root_entry(storage.numeric_id)
    db.add_folder(storage.numeric_id, "files")
    db.add_mount(user, f"/{user}/", storage.numeric_id, root.fileid, mount_type="home")
    return storage.numeric_id


@pytest.fixture
def platform(tmp_path: Path) -> Generator[Platform, None, None]:
    """Alice owns files/report.txt and shares it with Bob (read + share)."""
    db_path = tmp_path / "cloudfiles.db"
    data_dir = tmp_path / "data"
    db = Database(db_path)

    alice = add_home(db, data_dir, "alice")
    bob = add_home(db, data_dir, "bob")

    (data_dir / "alice" / "files" / "report.txt").write_bytes(b"hello")
    report = db.add_file(
        alice, "files/report.txt", mimetype="text/plain", size=5, mtime=REPORT_MTIME
    )

    share_mount = db.add_mount(
        "bob",
        "/bob/files/report.txt/",
        alice,
        report.fileid,
        mount_type="shared",
        permissions=Permission.READ | Permission.SHARE,
    )
    db.add_share(
        share_mount.id,
        ShareType.USER,
        shared_by="alice",
        shared_with="bob",
        share_owner="alice",
        file_id=report.fileid,
        permissions=Permission.READ | Permission.SHARE,
    )

    yield Platform(
        db=db,
        db_path=db_path,
        data_dir=data_dir,
        alice_storage=alice,
        bob_storage=bob,
        report_id=report.fileid,
        share_mount_id=share_mount.id,
    )
    db.close()
