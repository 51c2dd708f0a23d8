"""Removal of personal details that must not appear on an EHS CV."""

from __future__ import annotations

from cv_formatter_core.constants import INAPPROPRIATE_FIELDS


def _norm_key(key: str) -> str:
    return "".join(ch for ch in key.lower() if ch not in "_- ")


_DENYLIST = frozenset(_norm_key(f) for f in INAPPROPRIATE_FIELDS)


def is_inappropriate_field(key: str) -> bool:
    """Match a key against the denylist ignoring case, '_', '-' and spaces."""
    return _norm_key(key) in _DENYLIST


def _walk(node: object, path: str, found: list[str], strip: bool) -> object:
    if isinstance(node, dict):
        kept: dict[str, object] = {}
        for key, value in node.items():
            child = f"{path}.{key}" if path else str(key)
            if isinstance(key, str) and is_inappropriate_field(key):
                found.append(child)
                if strip:
                    continue
            kept[key] = _walk(value, child, found, strip)
        return kept
    if isinstance(node, list):
        return [_walk(item, f"{path}.{i}", found, strip) for i, item in enumerate(node)]
    return node


def find_pii_paths(payload: dict[str, object]) -> list[str]:
    """Dotted paths of every denylisted key, at any depth."""
    found: list[str] = []
    _walk(payload, "", found, strip=False)
    return found


def strip_pii(payload: dict[str, object]) -> tuple[dict[str, object], list[str]]:
    """Return a copy of payload without denylisted keys, and the removed paths."""
    removed: list[str] = []
    cleaned = _walk(payload, "", removed, strip=True)
    return cleaned, removed  # type: ignore[return-value]
