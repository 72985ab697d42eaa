"""Helpers for building release archives and checksum manifests in tests."""
from __future__ import annotations

import hashlib
import io
import tarfile
import zipfile
from typing import Dict, Optional, Sequence

BINARY_CONTENT = b"#!/bin/sh\necho tool\n"


def make_tar_xz(members: Dict[str, bytes], directories: Sequence[str] = ()) -> bytes:
    """Build a tar.xz archive in memory from name -> content, after any directory entries."""
    buf = io.BytesIO()
    with tarfile.open(fileobj=buf, mode="w:xz") as tar:
        for name in directories:
            info = tarfile.TarInfo(name=name)
            info.type = tarfile.DIRTYPE
            info.mode = 0o755
            tar.addfile(info)
        for name, data in members.items():
            info = tarfile.TarInfo(name=name)
            info.size = len(data)
            info.mode = 0o644
            tar.addfile(info, io.BytesIO(data))
    return buf.getvalue()


def make_zip(members: Dict[str, bytes]) -> bytes:
    """Build a zip archive in memory from name -> content."""
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        for name, data in members.items():
            zf.writestr(name, data)
    return buf.getvalue()


def sha256_hex(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


def checksums_for(assets: Dict[str, bytes], extra: Optional[Dict[str, str]] = None) -> bytes:
    """Render a sha256sum-style manifest for the given assets."""
    lines = [f"{sha256_hex(data)}  {name}" for name, data in assets.items()]
    for name, digest in (extra or {}).items():
        lines.append(f"{digest}  {name}")
    return ("\n".join(lines) + "\n").encode()


def publish(server, bin_name: str = "tool", os_name: str = "linux", arch: str = "amd64",
            content: bytes = BINARY_CONTENT) -> str:
    """
    Publish a well-formed release for one platform on a FakeReleaseServer.

    Returns:
        The archive name that was published
    """
    if os_name == "windows":
        archive_name = f"{bin_name}-{os_name}-{arch}.zip"
        data = make_zip({f"{bin_name}.exe": content})
    else:
        archive_name = f"{bin_name}-{os_name}-{arch}.tar.xz"
        data = make_tar_xz({bin_name: content})
    server.assets[archive_name] = data
    server.assets["checksums.txt"] = checksums_for({archive_name: data})
    return archive_name
