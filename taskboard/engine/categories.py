"""Category registry for taskboard.

The categories endpoint is the authoritative list, but it can lag behind
categories typed directly onto tasks. The registry therefore only ever
widens from observed tasks; only an authoritative reset narrows it.

A category set is represented as a sorted tuple of unique, trimmed,
non-empty names.
"""

import unicodedata
from typing import Iterable, Tuple

from taskboard.models.task import Task, safe_str

CategorySet = Tuple[str, ...]


def _base_letters(value: str) -> str:
    decomposed = unicodedata.normalize("NFKD", value)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch)).casefold()


def locale_sort_key(value: str) -> Tuple[str, str, str]:
    """Sort key approximating a locale compare.

    Letters compare by base letter first, ignoring accents and case
    ("apple" < "Éclair" < "Zebra"); then accented after plain; then
    lowercase before uppercase ("apple" < "Apple").
    """
    return (_base_letters(value), value.casefold(), value.swapcase())


def _clean(names: Iterable[object]) -> set:
    cleaned = set()
    for name in names:
        text = safe_str(name).strip()
        if text:
            cleaned.add(text)
    return cleaned


def set_authoritative(names: Iterable[object]) -> CategorySet:
    """Build a category set from the authoritative list.

    Trims, drops empty names, de-duplicates and sorts ascending.
    """
    return tuple(sorted(_clean(names), key=locale_sort_key))


def merge_observed(base: Iterable[str], observed: Iterable[object]) -> CategorySet:
    """Union ``base`` with the non-empty categories observed on tasks."""
    return tuple(sorted(_clean(base) | _clean(observed), key=locale_sort_key))


def is_known(category_set: Iterable[str], name: str) -> bool:
    """Return True if ``name`` is a member of ``category_set``."""
    return name in tuple(category_set)


def categories_from_tasks(tasks: Iterable[Task]) -> CategorySet:
    """Non-empty categories present on ``tasks``, as a category set."""
    return set_authoritative(task.category for task in tasks)
