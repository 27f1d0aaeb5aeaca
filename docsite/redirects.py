"""Redirect table mapping moved pages to their canonical location.

The table is built from the ``redirects`` plugin's ``redirect_maps`` option::

    plugins:
      - redirects:
          redirect_maps:
            "guides/publish.md": "guides/package.md"

Construction validates the whole map eagerly:

* a redirect source equal to a live navigation page is a
  :class:`~docsite.errors.RedirectCollisionError`;
* a chain that revisits a path is a :class:`~docsite.errors.RedirectCycleError`;
* a chain longer than the hop limit is a
  :class:`~docsite.errors.RedirectHopLimitError`;
* a final target that is not a document is reported at the
  ``links.not_found`` level.

Examples
--------
>>> table = RedirectTable.build(
...     {"guides/publish.md": "guides/package.md"},
...     live_paths={"guides/package.md"},
... )
>>> table.lookup("guides/publish.md")
'guides/package.md'
>>> table.resolve("guides/package.md")
'guides/package.md'
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import typing as typ

from .errors import (
    BrokenRedirectTargetError,
    MalformedConfigError,
    RedirectCollisionError,
    RedirectCycleError,
    RedirectHopLimitError,
)
from .nav import escapes_docs_dir, is_external_url, normalize_doc_path, strip_fragment

if typ.TYPE_CHECKING:
    from .validation import ValidationConfig, ValidationReporter


@dc.dataclass(frozen=True, slots=True)
class RedirectEntry:
    """A single ``old_path -> new_path`` redirect."""

    old_path: str
    new_path: str


class RedirectTable:
    """Validated redirect map with one-hop lookups and chain resolution."""

    def __init__(self, targets: cabc.Mapping[str, str], *, hop_limit: int) -> None:
        """Wrap an already validated map; use :meth:`build` to validate one."""
        self._targets = dict(targets)
        self.hop_limit = hop_limit
        self._resolved: dict[str, str] = {}

    @classmethod
    def build(
        cls,
        redirect_maps: cabc.Mapping[str, typ.Any],
        *,
        live_paths: cabc.Collection[str] = (),
        documents: cabc.Collection[str] | None = None,
        hop_limit: int | None = None,
        validation: ValidationConfig | None = None,
        reporter: ValidationReporter | None = None,
    ) -> RedirectTable:
        """Validate ``redirect_maps`` and return the resulting table.

        Parameters
        ----------
        redirect_maps : Mapping[str, Any]
            Declared ``old_path -> new_path`` pairs.
        live_paths : Collection[str], optional
            Document paths reachable from the navigation. Redirect sources
            must not collide with them.
        documents : Collection[str], optional
            Every document in the docs tree. When given, final targets are
            checked against it (and ``live_paths``).
        hop_limit : int, optional
            Maximum number of hops a chain may take. Defaults to the number of
            entries in the table, which no acyclic chain can exceed.
        validation, reporter : optional
            Validation levels and the reporter that receives missing-target
            problems. Without a reporter, missing targets raise.

        Raises
        ------
        MalformedConfigError
            If a key or value is not a non-empty string, or ``hop_limit`` is
            not positive.
        RedirectCollisionError
            If a redirect source is a live navigation page.
        RedirectCycleError
            If a chain revisits a path.
        RedirectHopLimitError
            If a chain is longer than ``hop_limit``.
        BrokenRedirectTargetError
            If a final target is missing and the ``links.not_found`` level is
            ``error`` (or no reporter was given).
        """
        targets = _normalize_maps(redirect_maps)
        limit = len(targets) if hop_limit is None else hop_limit
        if limit < 1 and targets:
            msg = f"Redirect hop limit must be at least 1, got {limit}."
            raise MalformedConfigError(msg)

        live = {strip_fragment(path) for path in live_paths}
        for old_path in targets:
            if old_path in live:
                raise RedirectCollisionError(old_path)

        table = cls(targets, hop_limit=limit)
        for old_path in targets:
            table.resolve(old_path)

        if documents is not None:
            known = live | set(documents)
            for entry in table:
                final = table.resolve(entry.old_path)
                if is_external_url(final) or strip_fragment(final) in known:
                    continue
                error = BrokenRedirectTargetError(entry.old_path, entry.new_path)
                if reporter is None or validation is None:
                    raise error
                reporter.report("links.not_found", validation.links_not_found, error)
        return table

    def __contains__(self, path: object) -> bool:
        return path in self._targets

    def __len__(self) -> int:
        return len(self._targets)

    def __iter__(self) -> cabc.Iterator[RedirectEntry]:
        for old_path, new_path in self._targets.items():
            yield RedirectEntry(old_path=old_path, new_path=new_path)

    def lookup(self, old_path: str) -> str | None:
        """Return the direct target of ``old_path`` (one hop), or None."""
        return self._targets.get(old_path)

    def chain(self, path: str) -> tuple[str, ...]:
        """Return every path visited from ``path`` to its final target.

        Raises
        ------
        RedirectCycleError
            If the walk revisits a path.
        RedirectHopLimitError
            If the walk takes more than :attr:`hop_limit` hops.
        """
        visited: list[str] = [path]
        seen = {path}
        current = path
        while True:
            target = self._targets.get(strip_fragment(current))
            if target is None:
                return tuple(visited)
            visited.append(target)
            if target in seen:
                raise RedirectCycleError(tuple(visited))
            if len(visited) - 1 > self.hop_limit:
                raise RedirectHopLimitError(tuple(visited), self.hop_limit)
            seen.add(target)
            current = target

    def resolve(self, path: str) -> str:
        """Return the final target of ``path``, or ``path`` if not redirected."""
        if path not in self._resolved:
            self._resolved[path] = self.chain(path)[-1]
        return self._resolved[path]

    def as_dict(self) -> dict[str, str]:
        """Return the declared ``old_path -> new_path`` map."""
        return dict(self._targets)


def _normalize_maps(redirect_maps: cabc.Mapping[str, typ.Any]) -> dict[str, str]:
    if not isinstance(redirect_maps, cabc.Mapping):
        msg = (
            "Redirect maps must be a mapping of old paths to new paths, "
            f"got {type(redirect_maps).__name__}."
        )
        raise MalformedConfigError(msg)
    targets: dict[str, str] = {}
    for old_path, new_path in redirect_maps.items():
        if not isinstance(old_path, str) or not old_path.strip():
            msg = f"Redirect sources must be non-empty strings, got {old_path!r}."
            raise MalformedConfigError(msg)
        if not isinstance(new_path, str) or not new_path.strip():
            msg = f"Redirect '{old_path}' must target a non-empty string path."
            raise MalformedConfigError(msg)
        source = normalize_doc_path(old_path.strip())
        if source.startswith("/") or escapes_docs_dir(source):
            msg = (
                f"Redirect source '{old_path}' must be a path inside the docs "
                "directory."
            )
            raise MalformedConfigError(msg)
        if "#" in source:
            msg = (
                f"Redirect source '{old_path}' must not carry an anchor; "
                "anchor redirects are handled client-side."
            )
            raise MalformedConfigError(msg)
        target = new_path.strip()
        if not is_external_url(target):
            target = normalize_doc_path(target)
            if escapes_docs_dir(target):
                msg = (
                    f"Redirect '{old_path}' targets '{new_path}', outside the docs "
                    "directory."
                )
                raise MalformedConfigError(msg)
        targets[source] = target
    return targets


__all__ = ["RedirectEntry", "RedirectTable"]
