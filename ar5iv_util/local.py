"""Local corpus bookkeeping: id listings and repackaging of downloaded sources."""

from __future__ import annotations

import bz2
import gzip
import io
import lzma
import os
import re
import stat
import tarfile
import time
import zipfile
import zlib
from pathlib import Path
from typing import Callable, Iterator

UNCHECKED_IDS_FILEPATH = "unchecked_ids.txt"
IDS_TO_UPDATE_FILEPATH = "ids_to_update.txt"
CHECKED_IDS_FILEPATH = "checked_ids.csv"
CORPUS_ROOT_PATH = "/data/arxmliv"

_LETTER_DIGIT = re.compile(r"(\D+)(\d.+)")

_COMPRESSION_MAGIC: tuple[tuple[bytes, Callable[[bytes], bytes]], ...] = (
    (b"\x1f\x8b", gzip.decompress),
    (b"BZh", bz2.decompress),
    (b"\xfd7zXZ\x00", lzma.decompress),
)
_DECOMPRESSION_ERRORS = (OSError, EOFError, ValueError, zlib.error, lzma.LZMAError)
_EARLIEST_ZIP_TIME = (1980, 1, 1, 0, 0, 0)


def _sorted_entries(path: str | os.PathLike) -> list[os.DirEntry]:
    try:
        with os.scandir(path) as entries:
            return sorted(entries, key=lambda entry: entry.name)
    except OSError:
        return []


def _depth_two_names(root_path: str | os.PathLike) -> Iterator[str]:
    for first in _sorted_entries(root_path):
        try:
            is_dir = first.is_dir()
        except OSError:
            continue
        if is_dir:
            for second in _sorted_entries(first.path):
                yield second.name


def _as_arxiv_id(name: str) -> str:
    """Turn an old-style directory name such as 'math0607467' into 'math/0607467'."""
    match = _LETTER_DIGIT.fullmatch(name)
    if match:
        return f"{match.group(1)}/{match.group(2)}"
    return name


def _read_lines(path: str | os.PathLike) -> Iterator[str]:
    with open(path, encoding="utf-8", newline="") as handle:
        for line in handle:
            yield line.removesuffix("\n").removesuffix("\r")


def create_list_of_ids(root_path, unchecked_filepath) -> None:
    """Write every article id found two levels below root_path, once only."""
    target = Path(unchecked_filepath)
    if target.exists():
        return
    with target.open("w", encoding="utf-8") as out:
        for name in _depth_two_names(root_path):
            out.write(_as_arxiv_id(name) + "\n")


def filter_list_to_check(unchecked_filepath, checked_filepath) -> list[str]:
    """Return the unchecked ids that do not appear in the checked CSV file."""
    checked_path = Path(checked_filepath)
    checked = (
        {line.split(",", 1)[0] for line in _read_lines(checked_path)}
        if checked_path.exists()
        else set()
    )
    return [
        line for line in _read_lines(unchecked_filepath) if line and line not in checked
    ]


def _strip_compression(payload: bytes) -> bytes:
    data = payload
    while True:
        for magic, decompress in _COMPRESSION_MAGIC:
            if data.startswith(magic):
                data = decompress(data)
                break
        else:
            return data


def _zip_date(mtime: float) -> tuple[int, int, int, int, int, int]:
    try:
        stamp = tuple(time.localtime(mtime)[:6])
    except (OverflowError, OSError, ValueError):
        return _EARLIEST_ZIP_TIME
    return max(stamp, _EARLIEST_ZIP_TIME)


def _copy_tar_member(archive: tarfile.TarFile, member: tarfile.TarInfo, writer: zipfile.ZipFile) -> None:
    permissions = member.mode & 0o7777
    if member.isdir():
        name = member.name if member.name.endswith("/") else member.name + "/"
        info = zipfile.ZipInfo(name, _zip_date(member.mtime))
        info.external_attr = (stat.S_IFDIR | permissions) << 16
        writer.writestr(info, b"")
        return
    info = zipfile.ZipInfo(member.name, _zip_date(member.mtime))
    info.compress_type = zipfile.ZIP_DEFLATED
    if member.issym():
        info.external_attr = (stat.S_IFLNK | 0o777) << 16
        writer.writestr(info, member.linkname.encode("utf-8"))
        return
    extracted = archive.extractfile(member)
    data = extracted.read() if extracted is not None else b""
    info.external_attr = (stat.S_IFREG | permissions) << 16
    writer.writestr(info, data)


def _copy_tar(data: bytes, writer: zipfile.ZipFile) -> int | None:
    try:
        archive = tarfile.open(fileobj=io.BytesIO(data), mode="r:")
    except (tarfile.TarError, EOFError):
        return None
    count = 0
    with archive:
        members = iter(archive)
        while True:
            try:
                member = next(members)
            except StopIteration:
                break
            except (tarfile.TarError, EOFError):
                # A damaged header ends the listing, as with any streaming reader.
                break
            count += 1
            try:
                _copy_tar_member(archive, member, writer)
            except (tarfile.TarError, OSError, EOFError) as err:
                print(f"Header write failed: {err!r}")
    return count


def _copy_zip(data: bytes, writer: zipfile.ZipFile) -> int | None:
    buffer = io.BytesIO(data)
    if not zipfile.is_zipfile(buffer):
        return None
    try:
        source = zipfile.ZipFile(buffer)
    except zipfile.BadZipFile:
        return None
    count = 0
    with source:
        for entry in source.infolist():
            count += 1
            info = zipfile.ZipInfo(entry.filename, entry.date_time)
            info.external_attr = entry.external_attr
            info.compress_type = zipfile.ZIP_STORED if entry.is_dir() else zipfile.ZIP_DEFLATED
            try:
                writer.writestr(info, b"" if entry.is_dir() else source.read(entry))
            except (zipfile.BadZipFile, RuntimeError, NotImplementedError, OSError) as err:
                print(f"Header write failed: {err!r}")
    return count


def _copy_archive_entries(data: bytes, writer: zipfile.ZipFile) -> int | None:
    """Copy every entry of a tar or zip archive; None when data is neither."""
    count = _copy_tar(data, writer)
    if count is None:
        count = _copy_zip(data, writer)
    return count


def repackage_arxiv_download(payload, to_dir, base_name) -> Path:
    """Store a downloaded e-print as '<to_dir>/<base_name>.zip' and return its path.

    Archives are copied entry by entry; anything else (often a compressed or
    plain TeX file) becomes a single '<base_name>.tex' entry.
    """
    target_dir = Path(to_dir)
    try:
        target_dir.mkdir(parents=True, exist_ok=True)
    except OSError as err:
        print(f"Failed to mkdir -p {str(to_dir)!r} because: {err}")
    zip_path = target_dir / f"{base_name}.zip"
    with zipfile.ZipFile(zip_path, "w", zipfile.ZIP_DEFLATED) as writer:
        try:
            data = _strip_compression(bytes(payload))
        except _DECOMPRESSION_ERRORS:
            print(f"Unrecognizeable archive: {str(to_dir)!r}")
            return zip_path
        if _copy_archive_entries(data, writer):
            return zip_path
        if data:
            single_file_transfer(f"{base_name}.tex", data, writer)
        else:
            print(f"No content in archive: {str(to_dir)!r}")
    return zip_path


def single_file_transfer(tex_target, data, writer) -> None:
    """Write data into the zip writer as a single entry named tex_target."""
    try:
        writer.writestr(tex_target, bytes(data))
    except (OSError, ValueError) as err:
        print(f"Failed to write data to {tex_target!r} because {err!r}")