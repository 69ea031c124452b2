"""Local package discovery from built ``.pkg.tar.*`` archives."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

from aurwatch.errors import PackageReadError
from aurwatch.packages.types import LocalPackageInfo
from aurwatch.providers.base import MetadataReader, VersionOracle

logger = logging.getLogger(__name__)

PACKAGE_SUFFIXES = (".zst", ".xz")


def parse_pkginfo(text: str) -> dict[str, list[str]]:
    """Parse ``.PKGINFO`` ``key = value`` lines; repeated keys accumulate."""
    fields: dict[str, list[str]] = {}
    for raw in text.splitlines():
        line = raw.strip()
        if not line or line.startswith("#") or " = " not in line:
            continue
        key, value = line.split(" = ", 1)
        fields.setdefault(key.strip(), []).append(value.strip())
    return fields


def package_info_from_pkginfo(text: str, path: Path | None = None) -> LocalPackageInfo:
    fields = parse_pkginfo(text)
    name = (fields.get("pkgname") or [""])[0]
    version = (fields.get("pkgver") or [""])[0]
    try:
        return LocalPackageInfo(name=name, version=version, path=path)
    except ValueError as exc:
        raise PackageReadError(f"incomplete .PKGINFO in {path}") from exc


class PkgInfoReader:
    """Read package identity from the archive's ``.PKGINFO`` using bsdtar."""

    def __init__(self, timeout_s: float = 30.0) -> None:
        self._timeout_s = timeout_s

    def read(self, path: Path) -> LocalPackageInfo:
        try:
            proc = subprocess.run(
                ["bsdtar", "-xOf", str(path), ".PKGINFO"],
                capture_output=True,
                text=True,
                timeout=self._timeout_s,
                check=False,
            )
        except (OSError, subprocess.TimeoutExpired) as exc:
            raise PackageReadError(f"cannot read {path}: {exc}") from exc
        if proc.returncode != 0 or not proc.stdout.strip():
            detail = proc.stderr.strip() or "missing .PKGINFO"
            raise PackageReadError(f"{path.name}: {detail}")
        return package_info_from_pkginfo(proc.stdout, path)


def is_package_archive(path: Path) -> bool:
    return path.is_file() and path.name.endswith(PACKAGE_SUFFIXES)


def discover_packages(
    repo_dir: Path,
    reader: MetadataReader,
    oracle: VersionOracle,
) -> list[LocalPackageInfo]:
    """List the newest archive per package name in ``repo_dir``.

    Unreadable archives are logged and skipped. Results are sorted by name.
    """
    latest: dict[str, LocalPackageInfo] = {}
    for path in sorted(repo_dir.iterdir()):
        if not is_package_archive(path):
            continue
        try:
            info = reader.read(path)
        except PackageReadError as exc:
            logger.warning("Skipping %s: %s", path.name, exc)
            continue
        current = latest.get(info.name)
        if current is None or oracle.compare(current.version, info.version) < 0:
            latest[info.name] = info
    return [latest[name] for name in sorted(latest)]
