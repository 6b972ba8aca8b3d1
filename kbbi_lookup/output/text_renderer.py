"""
Plain-text rendering of search results, in the dictionary's own layout.

Example:
    ru.mah (1)  ru·mah
    1. (n) bangunan untuk tempat tinggal
    2. (n) bangunan pada umumnya (seperti gedung)
"""

from typing import List
import logging

from ..models import Entry, Etymology, SearchResult, Sense

logger = logging.getLogger(__name__)

SUGGESTION_HEADER = "Berikut beberapa saran entri lain yang mirip."

RELATED_HEADINGS = ("Kata Turunan", "Gabungan Kata", "Peribahasa", "Idiom")


def render_result(result: SearchResult) -> str:
    """
    Render a search result as text.

    Args:
        result: Parsed search result

    Returns:
        Entries separated by blank lines, or the suggestion list
    """
    if result.suggestions and not result.entries:
        return f"{SUGGESTION_HEADER}\n{', '.join(result.suggestions)}"

    return "\n\n".join(render_entry(entry) for entry in result.entries)


def render_entry(entry: Entry) -> str:
    """Render one entry: header, forms, etymology, senses, related words."""
    lines = []

    name = entry.headword
    if entry.disambiguation_number:
        name += f" ({entry.disambiguation_number})"
    if entry.base_words:
        name = f"{' » '.join(entry.base_words)} » {name}"
    if entry.pronunciation:
        name += f"  {entry.pronunciation}"
    lines.append(name)

    if entry.nonstandard_forms:
        lines.append(f"bentuk tidak baku: {', '.join(entry.nonstandard_forms)}")
    elif entry.variants:
        lines.append(f"varian: {', '.join(entry.variants)}")

    if entry.etymology is not None:
        lines.append(f"Etimologi: {render_etymology(entry.etymology)}")

    if len(entry.senses) > 1:
        for i, sense in enumerate(entry.senses, 1):
            lines.append(f"{i}. {render_sense(sense)}")
    elif entry.senses:
        lines.append(render_sense(entry.senses[0]))

    lines.extend(_related_sections(entry))

    return "\n".join(lines)


def _related_sections(entry: Entry) -> List[str]:
    plain = entry.plain_headword
    sections = [
        ("Kata Turunan", entry.derived_words),
        ("Gabungan Kata", entry.compound_words),
        (f"Peribahasa (mengandung [{plain}])", entry.proverbs),
        (f"Idiom (mengandung [{plain}])", entry.idioms),
    ]
    return [
        f"\n{title}\n{'; '.join(words)}"
        for title, words in sections
        if words
    ]


def render_sense(sense: Sense) -> str:
    """Render a sense as ``(n) definition; definition  note: example; example``."""
    parts = []

    if sense.word_classes:
        parts.append(" ".join(f"({wc.code})" for wc in sense.word_classes))

    parts.append("; ".join(sense.subsenses))

    if sense.note:
        parts.append(sense.note)

    text = "  ".join(parts)
    if sense.examples:
        return f"{text}: {'; '.join(sense.examples)}"
    return text


def render_etymology(etymology: Etymology) -> str:
    """Render an etymology as ``[language] (class) origin pronunciation: meaning``."""
    parts = []

    if etymology.origin_language:
        parts.append(f"[{etymology.origin_language}]")

    if etymology.word_classes:
        parts.append(" ".join(f"({c})" for c in etymology.word_classes))

    origin = etymology.origin_form
    if etymology.pronunciation:
        origin += f" {etymology.pronunciation}"
    parts.append(origin)

    text = " ".join(p for p in parts if p)
    if etymology.meanings:
        return f"{text}: {'; '.join(etymology.meanings)}"
    return text


def strip_examples(text: str) -> str:
    """
    Remove usage examples from numbered sense lines.

    Args:
        text: Rendered result

    Returns:
        Text with everything after the first ``": "`` of numbered lines removed
    """
    lines = []
    for line in text.split("\n"):
        idx = line.find(": ")
        trimmed = line.strip()
        if idx != -1 and trimmed and trimmed[0] in "123456789":
            lines.append(line[:idx])
        else:
            lines.append(line)
    return "\n".join(lines)


def strip_related(text: str) -> str:
    """
    Remove related-word sections and cross-reference lines.

    A section runs from its heading to the next blank line.

    Args:
        text: Rendered result

    Returns:
        Filtered text
    """
    lines: List[str] = []
    skipping = False

    for line in text.split("\n"):
        trimmed = line.strip()

        if trimmed.startswith(RELATED_HEADINGS):
            skipping = True
            continue

        if skipping:
            if trimmed == "":
                skipping = False
                lines.append(line)
            continue

        if "→" in trimmed:
            continue

        lines.append(line)

    # Collapse blank runs left behind by removed sections
    collapsed: List[str] = []
    for line in lines:
        if line.strip() == "" and (not collapsed or collapsed[-1].strip() == ""):
            continue
        collapsed.append(line)

    return "\n".join(collapsed).rstrip()
