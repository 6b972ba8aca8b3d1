"""
Dictionary entry models produced by the structural parser.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import Any, Dict, List, Optional
from urllib.parse import quote

DEFAULT_HOST = "https://kbbi.kemdikbud.go.id"

# Entry fields that are only present for authenticated sessions
RELATED_FIELDS = ("derivedWords", "compoundWords", "proverbs", "idioms")


class _ValueModel(BaseModel):
    """Immutable model serialized with camelCase field names."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class WordClass(_ValueModel):
    """Grammatical category tag, e.g. ``n`` (Nomina)."""

    code: str = Field(description="Abbreviated class code shown in the entry")
    name: str = Field(default="", description="Class name from the marker title")
    description: str = Field(default="", description="Class description from the marker title")


class Sense(_ValueModel):
    """One distinct meaning within an entry."""

    word_classes: List[WordClass] = Field(default_factory=list)
    subsenses: List[str] = Field(default_factory=list)
    note: str = Field(default="", description="Auxiliary usage note")
    examples: List[str] = Field(default_factory=list)

    @property
    def is_cross_reference(self) -> bool:
        """True when every subsense only points at another entry."""
        return bool(self.subsenses) and all(
            s.strip().startswith("→") for s in self.subsenses
        )


class Etymology(_ValueModel):
    """Word origin, available to authenticated sessions only."""

    word_classes: List[str] = Field(default_factory=list)
    origin_language: str = Field(default="")
    origin_form: str = Field(default="")
    pronunciation: str = Field(default="")
    meanings: List[str] = Field(default_factory=list)


class Entry(_ValueModel):
    """One headword's full dictionary record."""

    headword: str
    disambiguation_number: str = Field(default="", description="Homograph superscript")
    base_words: List[str] = Field(default_factory=list)
    variants: List[str] = Field(default_factory=list)
    nonstandard_forms: List[str] = Field(default_factory=list)
    pronunciation: str = Field(default="")
    senses: List[Sense] = Field(default_factory=list)
    etymology: Optional[Etymology] = Field(default=None)

    # Authenticated-only; None means "not requested"
    derived_words: Optional[List[str]] = Field(default=None)
    compound_words: Optional[List[str]] = Field(default=None)
    proverbs: Optional[List[str]] = Field(default=None)
    idioms: Optional[List[str]] = Field(default=None)

    @property
    def plain_headword(self) -> str:
        """Headword without syllable separators."""
        return self.headword.replace(".", "")


class SearchResult(_ValueModel):
    """Parsed result for one search term."""

    canonical_link: str = Field(default="")
    entries: List[Entry] = Field(default_factory=list)
    suggestions: List[str] = Field(default_factory=list)

    @property
    def found(self) -> bool:
        """Check whether the term produced at least one entry."""
        return len(self.entries) > 0

    def with_link(self, term: str, host: str = DEFAULT_HOST) -> "SearchResult":
        """Return a copy whose canonical link points at the term's entry page."""
        link = f"{host.rstrip('/')}/entri/{quote(term, safe='')}"
        return self.model_copy(update={"canonical_link": link})

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert to the serialized result shape.

        Empty suggestions, missing etymologies and empty related-word lists
        are omitted rather than emitted as empty values.
        """
        data = self.model_dump(mode="json", by_alias=True, exclude_none=True)

        if not data.get("suggestions"):
            data.pop("suggestions", None)

        for entry in data.get("entries", []):
            for key in RELATED_FIELDS:
                if not entry.get(key):
                    entry.pop(key, None)

        return data
