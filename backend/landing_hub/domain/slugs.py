"""Slug derivation and collision policy for generated pages."""
import re
import unicodedata
from typing import Callable, NamedTuple, Optional

FALLBACK_SLUG = "page"

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


class SlugHolder(NamedTuple):
    owner_id: int
    is_trashed: bool


HolderLookup = Callable[[str], Optional[SlugHolder]]


def slugify(text: str) -> str:
    """Lowercase ASCII, hyphen separated. ``"José  O'Neil"`` -> ``"jose-o-neil"``."""
    ascii_text = (
        unicodedata.normalize("NFKD", text or "")
        .encode("ascii", "ignore")
        .decode("ascii")
        .lower()
    )
    slug = _NON_ALNUM.sub("-", ascii_text).strip("-")
    return slug or FALLBACK_SLUG


def resolve_slug(
    seed: str,
    owner_id: int,
    find_holder: HolderLookup,
    *,
    allows_multiple: bool = False,
) -> str:
    """
    Pick the slug for a new page.

    - free candidate: used as-is
    - held by the same owner: reused (same logical page)
    - held by another owner: owner id appended (``jane`` -> ``jane99``)

    ``find_holder`` returns the page holding a slug in the template
    namespace, preferring a live one. Only templates that allow several
    pages per owner can meet their own live page here; those get a ``-N``
    suffix. The storage unique index stays the authoritative guard.
    """
    base = slugify(seed)
    holder = find_holder(base)

    if holder is None:
        return base

    if holder.owner_id == owner_id and (holder.is_trashed or not allows_multiple):
        return base

    candidate = f"{base}{owner_id}"
    if not allows_multiple:
        return candidate

    probe, n = candidate, 2
    while _blocks(find_holder(probe)):
        probe = f"{candidate}-{n}"
        n += 1
    return probe


def _blocks(holder: Optional[SlugHolder]) -> bool:
    return holder is not None and not holder.is_trashed
