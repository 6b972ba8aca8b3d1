"""
Semantic roles encoded in KBBI Daring's presentation markup.

The source marks word classes, usage notes, prakategorial meanings and
etymology parts with colours and CSS classes rather than semantic tags.
Every such selector lives here; the entry parser only asks for roles.
"""

from typing import List, Optional
from bs4 import BeautifulSoup, Tag
from bs4.element import Comment, NavigableString

from ..models import Etymology, WordClass


def node_text(node) -> str:
    """Text of a node, ignoring comments."""
    if isinstance(node, Comment):
        return ""
    if isinstance(node, NavigableString):
        return str(node)
    if isinstance(node, Tag):
        return node.get_text()
    return ""


def direct_text(tag: Tag) -> str:
    """
    Join the element's own text nodes, skipping nested elements.

    Args:
        tag: Element to read

    Returns:
        Stripped text nodes joined by a single space
    """
    parts = []
    for child in tag.children:
        if isinstance(child, NavigableString) and not isinstance(child, Comment):
            text = child.strip()
            if text:
                parts.append(text)
    return " ".join(parts)


def word_class_from_title(code: str, title: str) -> WordClass:
    """
    Build a word class from a marker's text and ``title`` attribute.

    Titles look like ``"Nomina: kata benda"``.
    """
    parts = title.split(": ")
    name = parts[0].strip() if parts else ""
    description = parts[1].strip() if len(parts) > 1 else ""
    return WordClass(code=code, name=name, description=description)


class SemanticRoles:
    """
    Extracts semantic roles from colour and class coded elements.
    """

    WORD_CLASS = '[color="red"]'
    NOTE = '[color="green"]'
    PRECATEGORIAL = '[color="darkgreen"]'
    CONTROL = "span.entrisButton"
    CONTROL_CLASS = "entrisButton"
    LINK_CLASS_MARKER = 'span[style*="color:red"]'
    APPENDIX_STYLE = "color:gray"
    STYLE_CARRIER = "font"

    ROOT_WORD = ".rootword"
    SYLLABLE = ".syllable"
    SUGGESTION = ".col-md-3"

    ETYMOLOGY_LANGUAGE = 'i[style*="color:darkred"]'
    ETYMOLOGY_CLASS = 'span[style*="color:red"]'
    ETYMOLOGY_PRONUNCIATION = 'span[style*="color:darkgreen"]'
    ETYMOLOGY_ORIGIN = "b"

    # -- headings and controls -------------------------------------------

    def is_appendix_heading(self, tag: Tag) -> bool:
        """Appendix headings are greyed out and carry no headword."""
        return tag.name == "h2" and tag.get("style", "") == self.APPENDIX_STYLE

    def strip_controls(self, tag: Tag) -> None:
        """Remove UI-only buttons (e.g. the "propose edit" control) in place."""
        for control in tag.select(self.CONTROL):
            control.decompose()

    def is_control_container(self, tag: Tag) -> bool:
        """Whether an element's first span is a UI control button."""
        span = tag.find("span")
        return span is not None and self.CONTROL_CLASS in span.get("class", [])

    def is_style_carrier(self, node) -> bool:
        """Colour-carrying wrappers hold markers, not definition text."""
        return isinstance(node, Tag) and node.name == self.STYLE_CARRIER

    # -- senses ------------------------------------------------------------

    def word_classes(self, tag: Tag) -> List[WordClass]:
        """
        Extract word classes from red markers inside an element.

        Each marker wraps spans whose text is the class code and whose
        ``title`` holds ``"name: description"``.
        """
        classes = []
        for marker in tag.select(self.WORD_CLASS):
            for span in marker.find_all("span"):
                code = span.get_text().strip()
                if code:
                    classes.append(word_class_from_title(code, span.get("title", "")))
        return classes

    def precategorial_marker(self, fragment) -> Optional[Tag]:
        """First prakategorial marker in an entry fragment, if any."""
        return fragment.select_one(self.PRECATEGORIAL)

    def is_precategorial(self, tag: Tag) -> bool:
        return tag.get("color", "") == "darkgreen"

    def precategorial_class(self, tag: Tag) -> WordClass:
        return word_class_from_title(tag.get_text().strip(), tag.get("title", ""))

    def note(self, tag: Tag, classes: List[WordClass]) -> str:
        """
        Extract the green usage note, unless it only repeats a class code.
        """
        text = "".join(m.get_text() for m in tag.select(self.NOTE)).strip()
        if not text or any(text == c.code for c in classes):
            return ""
        return text

    def is_class_link(self, link: Tag) -> bool:
        """Links wrapping a red class marker are not cross-references."""
        return link.select_one(self.LINK_CLASS_MARKER) is not None

    # -- etymology -----------------------------------------------------------

    def etymology(self, block: Tag) -> Optional[Etymology]:
        """
        Parse an etymology block such as
        ``[<i>Arab</i> <span>n</span> <b>ḥāḍir</b> 'hadir; ada']``.

        Meanings are whatever text remains once the language, classes,
        origin form and pronunciation are taken out.

        Returns:
            Etymology, or None when the block is empty
        """
        inner = block.decode_contents().strip()
        if inner.startswith("["):
            inner = inner[1:]
        if inner.endswith("]"):
            inner = inner[:-1]

        doc = BeautifulSoup(inner, "html.parser")

        language = doc.select(self.ETYMOLOGY_LANGUAGE)
        classes = doc.select(self.ETYMOLOGY_CLASS)
        origins = doc.select(self.ETYMOLOGY_ORIGIN)
        pronunciations = doc.select(self.ETYMOLOGY_PRONUNCIATION)

        word_classes = [c.get_text().strip() for c in classes if c.get_text().strip()]
        origin_language = language[-1].get_text().strip() if language else ""
        origin_form = origins[-1].get_text().strip() if origins else ""
        pronunciation = pronunciations[-1].get_text().strip() if pronunciations else ""

        for part in language + classes + origins + pronunciations:
            part.extract()

        remaining = " ".join(doc.get_text().split())
        remaining = remaining.strip("[] ").strip("'\"‘’“” ")
        meanings = [m.strip() for m in remaining.split("; ") if m.strip()]

        if not any((word_classes, origin_language, origin_form, pronunciation, meanings)):
            return None

        return Etymology(
            word_classes=word_classes,
            origin_language=origin_language,
            origin_form=origin_form,
            pronunciation=pronunciation,
            meanings=meanings,
        )
