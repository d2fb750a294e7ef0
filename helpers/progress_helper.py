from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional

from helpers.exceptions import InvalidProgressError

Chapter = Dict[str, Any]
Section = Dict[str, Any]


def _index_by_key(
    entries: Iterable[Mapping[str, Any]],
    key: str,
    combine: Callable[[Mapping[str, Any], Mapping[str, Any]], Dict[str, Any]],
) -> Dict[str, Dict[str, Any]]:
    """Map each entry's identity key to a copy of the entry, keeping first-seen order.

    A repeated key keeps its original position and is folded with ``combine``.
    """
    indexed: Dict[str, Dict[str, Any]] = {}
    for entry in entries:
        if not isinstance(entry, Mapping):
            raise InvalidProgressError(f"Expected an object with '{key}', got {type(entry).__name__}", entry)
        identity = entry.get(key)
        if not isinstance(identity, str) or not identity:
            raise InvalidProgressError(f"Progress entry is missing required key '{key}'", entry)
        previous = indexed.get(identity)
        indexed[identity] = combine(previous, entry) if previous is not None else combine({}, entry)
    return indexed


def _combine_chapter(current: Mapping[str, Any], update: Optional[Mapping[str, Any]]) -> Chapter:
    return {**current, **(update or {})}


def _combine_section(current: Mapping[str, Any], update: Optional[Mapping[str, Any]]) -> Section:
    update = update or {}
    chapters = merge_chapters(current.get("chapters") or [], update.get("chapters") or [])
    return {**current, **update, "chapters": chapters}


def merge_chapters(existing: Iterable[Chapter], incoming: Iterable[Chapter]) -> List[Chapter]:
    """Keyed union of two chapter lists; incoming values win per chapter."""
    existing_by_id = _index_by_key(existing, "chapterId", _combine_chapter)
    incoming_by_id = _index_by_key(incoming, "chapterId", _combine_chapter)

    merged = [
        _combine_chapter(chapter, incoming_by_id.get(chapter_id))
        for chapter_id, chapter in existing_by_id.items()
    ]
    merged.extend(
        chapter for chapter_id, chapter in incoming_by_id.items()
        if chapter_id not in existing_by_id
    )
    return merged


def merge_sections(existing: Iterable[Section], incoming: Iterable[Section]) -> List[Section]:
    """
    Merge an incoming (possibly partial) list of section progress into the
    stored one.

    Sections and chapters only present in ``existing`` are carried through
    untouched, entries only present in ``incoming`` are appended in incoming
    order, and for chapters present in both the incoming ``completed`` value
    wins. Neither argument is modified; the result shares no dicts with them.

    Raises:
        InvalidProgressError: if any section lacks ``sectionId`` or any
            chapter lacks ``chapterId``.
    """
    existing_by_id = _index_by_key(existing, "sectionId", _combine_section)
    incoming_by_id = _index_by_key(incoming, "sectionId", _combine_section)

    merged = [
        _combine_section(section, incoming_by_id.get(section_id))
        for section_id, section in existing_by_id.items()
    ]
    merged.extend(
        section for section_id, section in incoming_by_id.items()
        if section_id not in existing_by_id
    )
    return merged


def calculate_overall_progress(sections: Iterable[Section]) -> float:
    """Fraction of completed chapters across all sections, 0.0 when there are none."""
    total = 0
    completed = 0
    for section in sections:
        for chapter in section.get("chapters") or []:
            total += 1
            if chapter.get("completed"):
                completed += 1
    if total == 0:
        return 0.0
    return completed / total


def build_initial_sections(course_sections: Iterable[Mapping[str, Any]]) -> List[Section]:
    """Seed progress sections from a course's structure, every chapter incomplete."""
    return [
        {
            "sectionId": section["sectionId"],
            "chapters": [
                {"chapterId": chapter["chapterId"], "completed": False}
                for chapter in section.get("chapters") or []
            ],
        }
        for section in course_sections
    ]
