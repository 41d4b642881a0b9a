"""
Export of merged group audio: a ZIP archive or a directory of WAV files.
A group label holding several names (joined by '&') yields one identical
file per name.
"""
from __future__ import annotations
from pathlib import Path
from typing import BinaryIO, Iterable, Iterator, Union
import zipfile

from ..core.config import EXPORT_CONFIG
from ..core.group import Group
from ..core.wav_codec import encode_wav
from ..utils.logger import logger


def iter_export_files(groups: Iterable[Group]) -> Iterator[tuple[str, bytes]]:
    """
    Yield (file name, WAV bytes) for every output file.
    Groups without a single successful segment are skipped.
    """
    for group in groups:
        if not group.has_valid_segments:
            logger.warning(f"Group {group.label!r} has no audio, skipped")
            continue
        data = encode_wav(group.merged())
        for name in group.names:
            yield f"{name}{EXPORT_CONFIG.file_extension}", data


def export_archive(groups: Iterable[Group], destination: Union[str, Path, BinaryIO]) -> list[str]:
    """
    Write a deflated ZIP with one WAV per group name.

    Args:
        groups: Groups to export (merged on demand)
        destination: Archive path or writable binary stream

    Returns:
        Names of the files written into the archive
    """
    if isinstance(destination, (str, Path)):
        Path(destination).parent.mkdir(parents=True, exist_ok=True)

    written = []
    with zipfile.ZipFile(destination, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        for name, data in iter_export_files(groups):
            zf.writestr(name, data)
            written.append(name)

    logger.info(f"Archive written with {len(written)} files")
    return written


def export_directory(groups: Iterable[Group], directory: Union[str, Path]) -> list[Path]:
    """Write one WAV per group name into a directory."""
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)

    paths = []
    for name, data in iter_export_files(groups):
        path = directory / name
        path.write_bytes(data)
        paths.append(path)

    logger.info(f"Exported {len(paths)} files to {directory}")
    return paths
