"""
Structural parser turning KBBI Daring pages into entry models.
"""

from typing import Dict, List, Optional, Union
from bs4 import BeautifulSoup, Tag
from bs4.element import NavigableString
import logging

from ..models import Entry, SearchResult, Sense
from .roles import SemanticRoles, direct_text, node_text

logger = logging.getLogger(__name__)

SUGGESTION_MARKER = "Berikut beberapa saran entri lain yang mirip."
ETYMOLOGY_LABEL = "Etimologi:"
NEW_SENSE_PLACEHOLDER = "Usulkan makna baru"
VARIANT_PREFIX = "varian: "
ARROW = "→"

# Heading label -> Entry field, collected per entry
ENTRY_RELATED_HEADINGS = {
    "Kata Turunan": "derived_words",
    "Gabungan Kata": "compound_words",
}

# Heading label -> Entry field, collected once per page and shared
PAGE_RELATED_HEADINGS = {
    "Peribahasa": "proverbs",
    "Idiom": "idioms",
}

RELATED_HEADINGS = {**ENTRY_RELATED_HEADINGS, **PAGE_RELATED_HEADINGS}

# Characters left over around a lone cross-reference link
_LINK_RESIDUE = " \t\n\u00a0" + ARROW + ":;,."


def _markup(node) -> str:
    """Serialize a tag or text node back to markup."""
    if isinstance(node, Tag):
        return node.decode()
    return node.output_ready()


class ParseError(Exception):
    """Markup could not be loaded as a document."""
    pass


class EntryParser:
    """
    Parses a full result page into a SearchResult.

    Irregular markup degrades to empty or partial fields; only input that
    cannot be loaded as a document at all raises ``ParseError``.
    """

    def __init__(self, roles: Optional[SemanticRoles] = None):
        self.roles = roles or SemanticRoles()

    def parse(self, html: Union[str, bytes], authenticated: bool = False) -> SearchResult:
        """
        Parse page markup.

        Args:
            html: Raw page markup
            authenticated: Whether the page was served to a logged-in
                session; gates etymology and related-word extraction

        Returns:
            SearchResult with entries, or with suggestions only
        """
        doc = self._load(html)
        text = html.decode("utf-8", errors="replace") if isinstance(html, bytes) else html

        if SUGGESTION_MARKER in text:
            suggestions = self._parse_suggestions(doc)
            logger.debug(f"Page carries {len(suggestions)} suggestions")
            return SearchResult(suggestions=suggestions)

        shared: Dict[str, Optional[List[str]]] = {
            field: None for field in PAGE_RELATED_HEADINGS.values()
        }
        if authenticated:
            shared = self._related_links(doc, PAGE_RELATED_HEADINGS)

        entries = []
        for fragment in self._segment(doc):
            entry = self._parse_entry(fragment, authenticated, shared)
            if entry is not None:
                entries.append(entry)

        logger.debug(f"Parsed {len(entries)} entries")
        return SearchResult(entries=entries)

    def _load(self, html: Union[str, bytes]) -> BeautifulSoup:
        if not isinstance(html, (str, bytes)):
            raise ParseError(f"Expected markup, got {type(html).__name__}")
        try:
            return BeautifulSoup(html, "html.parser")
        except Exception as e:
            raise ParseError(f"Gagal parsing HTML: {e}") from e

    def _parse_suggestions(self, doc: BeautifulSoup) -> List[str]:
        suggestions = []
        for element in doc.select(self.roles.SUGGESTION):
            text = element.get_text().strip()
            if text:
                suggestions.append(text)
        return suggestions

    def _segment(self, doc: BeautifulSoup) -> List[BeautifulSoup]:
        """
        Split the page into one fragment per entry.

        Entries follow the first ``<hr>``; each ``<h2>`` opens a new entry,
        and an unstyled ``<hr>`` closes the list. Appendix headings and
        whatever follows them up to the next heading are dropped.
        """
        first_rule = doc.find("hr")
        if first_rule is None:
            return []

        groups: List[list] = []
        current: list = []
        skipping = False

        # Text nodes are kept; a prakategorial meaning is bare text
        for element in first_rule.next_siblings:
            if isinstance(element, Tag):
                if element.name == "hr" and not element.get("style"):
                    break

                if element.name == "h2":
                    if current:
                        groups.append(current)
                    current = []
                    skipping = self.roles.is_appendix_heading(element)

            if not skipping:
                current.append(element)

        if current:
            groups.append(current)

        # Each fragment is re-parsed so lookups and edits stay inside it
        return [
            BeautifulSoup("".join(_markup(e) for e in group), "html.parser")
            for group in groups
        ]

    def _parse_entry(
        self,
        fragment: BeautifulSoup,
        authenticated: bool,
        shared: Dict[str, Optional[List[str]]]
    ) -> Optional[Entry]:
        heading = fragment.find("h2")
        if heading is None:
            return None

        headword = self._headword(heading)
        if not headword:
            logger.debug("Dropping fragment without headword")
            return None

        variants, nonstandard = self._variants(heading, authenticated)

        fields = dict(
            headword=headword,
            disambiguation_number=self._number(heading),
            base_words=self._base_words(heading),
            variants=variants,
            nonstandard_forms=nonstandard,
            pronunciation=self._pronunciation(heading),
        )

        if authenticated:
            fields["etymology"] = self._etymology(fragment)
            fields.update(self._related_links(fragment, ENTRY_RELATED_HEADINGS))
            fields.update(shared)

        fields["senses"] = self._senses(fragment, authenticated)

        return Entry(**fields)

    # -- header --------------------------------------------------------------

    def _headword(self, heading: Tag) -> str:
        italics = heading.find_all("i")
        if italics:
            return "".join(i.get_text() for i in italics).strip()
        return direct_text(heading)

    def _number(self, heading: Tag) -> str:
        # Superscripts inside links belong to base words
        for sup in heading.find_all("sup"):
            if sup.find_parent("a") is None:
                return sup.get_text().strip()
        return ""

    def _base_words(self, heading: Tag) -> List[str]:
        words = []
        for root in heading.select(self.roles.ROOT_WORD):
            link = root.find("a")
            if link is None:
                continue
            words.append(self._link_label(link))
        return words

    def _pronunciation(self, heading: Tag) -> str:
        syllable = heading.select_one(self.roles.SYLLABLE)
        return syllable.get_text().strip() if syllable is not None else ""

    def _variants(self, heading: Tag, authenticated: bool):
        """
        Extract variants or nonstandard forms from the header's ``<small>``.

        Returns:
            Tuple of (variants, nonstandard_forms); at most one is non-empty
        """
        smalls = heading.find_all("small")
        if authenticated:
            candidates = [s for s in smalls if not self.roles.is_control_container(s)]
            block = candidates[-1] if candidates else None
        else:
            block = smalls[0] if smalls else None

        if block is None:
            return [], []

        bolds = block.find_all("b")
        if bolds:
            nonstandard = []
            for bold in bolds:
                sup = bold.find("sup")
                name = direct_text(bold) if sup is not None else bold.get_text()
                name = name.strip().lstrip(", ").strip()
                if sup is not None:
                    name = f"{name} ({sup.get_text().strip()})"
                nonstandard.append(name)
            return [], nonstandard

        text = block.get_text().strip()
        if not text.startswith(VARIANT_PREFIX):
            return [], []
        variants = [v.strip() for v in text[len(VARIANT_PREFIX):].split(", ") if v.strip()]
        return variants, []

    def _link_label(self, link: Tag) -> str:
        label = direct_text(link)
        sup = link.find("sup")
        if sup is not None:
            label = f"{label} ({sup.get_text().strip()})"
        return label

    # -- authenticated sections ----------------------------------------------

    def _etymology(self, fragment: BeautifulSoup):
        labelled = [
            element for element in fragment.find_all(True)
            if ETYMOLOGY_LABEL in element.get_text()
        ]
        if not labelled:
            return None

        # Innermost labelled element comes last in document order
        block = labelled[-1].find_next_sibling()
        if block is None:
            return None
        return self.roles.etymology(block)

    def _related_listings(self, doc, headings: Dict[str, str]):
        """
        Yield ``(field, listing)`` for each list following a keyword ``<h4>``.

        Args:
            doc: Document or fragment to scan
            headings: Heading label -> result field name
        """
        for heading in doc.find_all("h4"):
            heading_text = heading.get_text().strip()
            for label, field in headings.items():
                if label not in heading_text:
                    continue
                listing = heading.find_next_sibling()
                if listing is not None:
                    yield field, listing
                break

    def _related_links(self, doc, headings: Dict[str, str]) -> Dict[str, List[str]]:
        """
        Collect link texts listed under keyword ``<h4>`` headings.

        Args:
            doc: Document or fragment to scan
            headings: Heading label -> result field name

        Returns:
            Field name -> list of link texts (empty when absent)
        """
        found: Dict[str, List[str]] = {field: [] for field in headings.values()}

        for field, listing in self._related_listings(doc, headings):
            for link in listing.find_all("a"):
                text = link.get_text().strip()
                if text:
                    found[field].append(text)

        return found

    # -- senses --------------------------------------------------------------

    def _senses(self, fragment: BeautifulSoup, authenticated: bool) -> List[Sense]:
        marker = self.roles.precategorial_marker(fragment)
        if marker is not None:
            return [self._parse_sense(marker)]

        # Related-word lists are never senses, whatever their links look like
        related_items = set()
        for _, listing in self._related_listings(fragment, RELATED_HEADINGS):
            related_items.update(id(li) for li in listing.find_all("li"))
            if listing.name == "li":
                related_items.add(id(listing))

        senses = []
        for item in fragment.find_all("li"):
            if id(item) in related_items:
                continue
            item_text = item.get_text()
            if authenticated and NEW_SENSE_PLACEHOLDER in item_text:
                continue
            if item_text.strip().startswith(ARROW):
                continue

            sense = self._parse_sense(item)
            if not sense.subsenses:
                continue
            if sense.is_cross_reference and not sense.word_classes:
                continue
            senses.append(sense)

        return senses

    def _parse_sense(self, tag: Tag) -> Sense:
        """
        Parse one sense from a list item or prakategorial marker.

        The tag is modified in place (control buttons are removed).
        """
        self.roles.strip_controls(tag)

        word_classes = self.roles.word_classes(tag)
        precategorial = self.roles.is_precategorial(tag)
        if precategorial:
            word_classes.append(self.roles.precategorial_class(tag))

        note = self.roles.note(tag, word_classes)

        link = self._cross_reference_link(tag)
        if link is not None:
            subsenses = [f"{ARROW} {self._link_label(link)}"]
        elif precategorial:
            following = tag.next_sibling
            text = str(following).strip() if isinstance(following, NavigableString) else ""
            subsenses = [text] if text else []
        else:
            text = self._definition_text(tag).strip()
            if text.endswith(":"):
                text = text[:-1].strip()
            subsenses = text.split("; ") if text else []

        examples = []
        full_text = tag.get_text()
        split_at = full_text.find(": ")
        if split_at != -1:
            example_text = full_text[split_at + 2:].strip()
            if example_text:
                examples = [e.strip() for e in example_text.split("; ") if e.strip()]

        return Sense(
            word_classes=word_classes,
            subsenses=[s.strip() for s in subsenses if s.strip()],
            note=note,
            examples=examples,
        )

    def _definition_text(self, tag: Tag) -> str:
        """Text of the item without colour-coded markers."""
        return "".join(
            node_text(child)
            for child in tag.children
            if not self.roles.is_style_carrier(child)
        )

    def _cross_reference_link(self, tag: Tag) -> Optional[Tag]:
        """
        Return the link when the item is nothing but a pointer to another
        entry, e.g. ``v → <a>rumah</a>``.
        """
        links = tag.find_all("a")
        if len(links) != 1:
            return None

        link = links[0]
        if self.roles.is_class_link(link):
            return None

        parent = link.parent
        while parent is not None and parent is not tag:
            if self.roles.is_style_carrier(parent):
                return None
            parent = parent.parent

        residue = self._definition_text(tag).replace(link.get_text(), "", 1)
        if residue.strip(_LINK_RESIDUE):
            return None
        return link


def parse_result(html: Union[str, bytes], authenticated: bool = False) -> SearchResult:
    """
    Parse page markup with the default semantic roles.

    Args:
        html: Raw page markup
        authenticated: Whether the page was served to a logged-in session

    Returns:
        Parsed SearchResult
    """
    return EntryParser().parse(html, authenticated)
