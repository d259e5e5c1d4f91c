"""
File tree helpers: deleting the output tree, reading a source tree into
`FileRecord` objects and writing records back out.
"""

import fnmatch
import os
import shutil
import stat
from collections import namedtuple
from pathlib import Path
from typing import Iterable, List, Sequence, Union

from .util import debug


#: One file of a tree. ``path`` is POSIX-style & relative to the tree root,
#: ``content`` is bytes and ``mode`` holds the source file's permission bits
#: (or ``None`` when unknown.)
FileRecord = namedtuple("FileRecord", "path content mode")
FileRecord.__new__.__defaults__ = (None,)


def clean(path: Union[str, "os.PathLike[str]"]) -> None:
    """
    Recursively delete ``path`` and everything below it.

    A missing ``path`` is not an error. Refuses to remove the current working
    directory or a filesystem root, raising `ValueError`; any other failure
    (permissions, etc) propagates as `OSError`.
    """
    target = os.path.abspath(os.fspath(path))
    if target == os.path.dirname(target):
        err = "Refusing to delete filesystem root {!r}"
        raise ValueError(err.format(target))
    if target == os.getcwd():
        err = "Refusing to delete the current working directory {!r}"
        raise ValueError(err.format(target))
    if not os.path.lexists(target):
        debug("Nothing to clean at {!r}".format(target))
        return
    debug("Removing {!r}".format(target))
    if os.path.isdir(target) and not os.path.islink(target):
        shutil.rmtree(target)
    else:
        os.remove(target)


def _split_patterns(patterns: Iterable[str]):
    include, exclude = [], []
    for pattern in patterns:
        if pattern.startswith("!"):
            exclude.append(pattern[1:])
        else:
            include.append(pattern)
    return include, exclude


def _excluded(relpath: str, exclude: Sequence[str]) -> bool:
    for pattern in exclude:
        if fnmatch.fnmatchcase(relpath, pattern):
            return True
        # 'dir/**' should also cover everything below 'dir'
        if pattern.endswith("/**") and relpath.startswith(pattern[:-2]):
            return True
    return False


def _hidden(relpath: str) -> bool:
    return any(part.startswith(".") for part in relpath.split("/"))


def read_tree(
    root: Union[str, "os.PathLike[str]"],
    patterns: Iterable[str] = ("**/*",),
    dotfiles: bool = False,
) -> List[FileRecord]:
    """
    Read every regular file under ``root`` matching ``patterns``.

    :param root: Directory to read from.

    :param patterns:
        Glob patterns relative to ``root``; ``**`` recurses into
        subdirectories. Patterns starting with ``!`` exclude whatever they
        match from the result.

    :param bool dotfiles:
        Whether files whose path has a component starting with ``.`` (e.g.
        ``.htaccess`` or ``.git/config``) are read. Default: ``False``, the
        way ``src/**`` globs behave in gulp.

    :returns: A list of `FileRecord`, sorted by path.

    :raises:
        `FileNotFoundError` if ``root`` is not an existing directory; other
        read errors propagate unchanged.
    """
    base = Path(root)
    if not base.is_dir():
        err = "Source directory {!r} not found"
        raise FileNotFoundError(err.format(str(root)))
    include, exclude = _split_patterns(patterns)
    found = {}
    for pattern in include:
        for path in base.glob(pattern):
            if not path.is_file():
                continue
            relpath = path.relative_to(base).as_posix()
            if relpath in found or _excluded(relpath, exclude):
                continue
            if not dotfiles and _hidden(relpath):
                continue
            found[relpath] = path
    records = []
    for relpath in sorted(found):
        path = found[relpath]
        mode = stat.S_IMODE(path.stat().st_mode)
        records.append(FileRecord(relpath, path.read_bytes(), mode))
    debug("Read {} files from {!r}".format(len(records), str(root)))
    return records


def write_tree(
    records: Iterable[FileRecord], dest: Union[str, "os.PathLike[str]"]
) -> List[Path]:
    """
    Write ``records`` below ``dest``, creating directories as needed.

    :returns: The list of paths written.
    """
    base = Path(dest)
    written = []
    for record in records:
        target = base.joinpath(*record.path.split("/"))
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(record.content)
        if record.mode is not None:
            os.chmod(str(target), record.mode)
        written.append(target)
    debug("Wrote {} files to {!r}".format(len(written), str(dest)))
    return written
