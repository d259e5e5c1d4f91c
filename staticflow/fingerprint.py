"""
Content-hash fingerprinting of asset filenames & rewriting of references.

Given ``js/app.js``, `fingerprint` produces ``js/app-<token>.js`` where the
token is derived from the file's bytes, then `rewrite_references` updates any
markup, stylesheet or script that referred to ``js/app.js``.
"""

import hashlib
import json
import posixpath
import re
from typing import Dict, Iterable, List, Optional, Pattern, Tuple

from .files import FileRecord
from .util import debug


def content_token(content: bytes, length: int = 10) -> str:
    """
    Return the first ``length`` hex digits of the MD5 digest of ``content``.
    """
    return hashlib.md5(content).hexdigest()[:length]


def fingerprinted_name(path: str, token: str) -> str:
    """
    Insert ``token`` before the extension of ``path``.

    ``css/site.css`` becomes ``css/site-<token>.css``; paths without an
    extension just get the suffix.
    """
    directory, filename = posixpath.split(path)
    stem, ext = posixpath.splitext(filename)
    return posixpath.join(directory, "{}-{}{}".format(stem, token, ext))


def _has_extension(path: str, extensions: Iterable[str]) -> bool:
    ext = posixpath.splitext(path)[1].lower()
    return ext in {x.lower() for x in extensions}


def fingerprint(
    records: Iterable[FileRecord],
    extensions: Iterable[str] = (".js", ".css"),
    length: int = 10,
) -> Tuple[List[FileRecord], Dict[str, str]]:
    """
    Rename every record whose extension is in ``extensions``.

    Tokens are computed from each record's content as given, i.e. before
    `rewrite_references` runs. A script whose only change is a rewritten
    reference to another renamed file therefore keeps its old name.

    :returns:
        Two-tuple of ``(records, rename_map)``: a new list of records (the
        input is left alone) and a dict mapping each original path to its
        fingerprinted path.
    """
    extensions = list(extensions)
    result = []
    rename_map = {}
    for record in records:
        if _has_extension(record.path, extensions):
            token = content_token(record.content, length)
            new_path = fingerprinted_name(record.path, token)
            debug("Fingerprinting {!r} as {!r}".format(record.path, new_path))
            rename_map[record.path] = new_path
            record = record._replace(path=new_path)
        result.append(record)
    return result, rename_map


def reference_pattern(rename_map: Dict[str, str]) -> Optional[Pattern[str]]:
    """
    Compile a regex matching any original path in ``rename_map``.

    Matches must be whole paths. The original may be preceded by ``/`` (a
    root-relative URL) or by a run of ``./`` and ``../`` segments; either
    prefix is kept in the replacement. Any other path character before it,
    or one after it, means a different file: ``lib/app.js`` is not a
    reference to ``app.js``. Longer paths are tried first so ``lib/app.js``
    wins over ``app.js``.
    """
    if not rename_map:
        return None
    originals = sorted(rename_map, key=lambda x: (-len(x), x))
    alternation = "|".join(re.escape(x) for x in originals)
    return re.compile(
        r"(?<![\w.\-/])(/|(?:\.\.?/)*)({})(?![\w.\-])".format(alternation)
    )


def rewrite_references(
    records: Iterable[FileRecord],
    rename_map: Dict[str, str],
    extensions: Iterable[str] = (".html", ".htm", ".css", ".js", ".hbs"),
) -> List[FileRecord]:
    """
    Replace references to renamed files inside text records.

    Only records whose extension is in ``extensions`` and whose content
    decodes as UTF-8 are touched; everything else is passed through as-is.
    References to files absent from ``rename_map`` are left unchanged.
    """
    pattern = reference_pattern(rename_map)
    extensions = list(extensions)
    result = []
    for record in records:
        if pattern is None or not _has_extension(record.path, extensions):
            result.append(record)
            continue
        try:
            text = record.content.decode("utf-8")
        except UnicodeDecodeError:
            debug("{!r} is not UTF-8, not rewriting".format(record.path))
            result.append(record)
            continue
        new_text, count = pattern.subn(
            lambda m: m.group(1) + rename_map[m.group(2)], text
        )
        if count:
            debug("Rewrote {} references in {!r}".format(count, record.path))
            record = record._replace(content=new_text.encode("utf-8"))
        result.append(record)
    return result


def manifest(rename_map: Dict[str, str], name: str) -> FileRecord:
    """
    Return a JSON `.FileRecord` named ``name`` describing ``rename_map``.
    """
    data = json.dumps(rename_map, indent=2, sort_keys=True) + "\n"
    return FileRecord(name, data.encode("utf-8"), None)
