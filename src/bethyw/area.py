"""A single geographic area and the measures recorded for it."""

from dataclasses import dataclass, field
from typing import Any

from .errors import MeasureMismatchError, NotFoundError
from .measure import Measure
from .merge import merge_into

ENGLISH = "eng"
WELSH = "cym"


@dataclass
class Area:
    """An area identified by its local authority code.

    Attributes:
        code: Authority code, kept exactly as given.
        names: Display names keyed by language code (e.g. "eng", "cym").
        measures: Measures keyed by lowercase codename.
    """

    code: str
    names: dict[str, str] = field(default_factory=dict)
    measures: dict[str, Measure] = field(default_factory=dict)

    def set_name(self, lang: str, name: str) -> None:
        """Set the name for a language, replacing any previous one."""
        self.names[lang] = name

    def get_name(self, lang: str) -> str:
        try:
            return self.names[lang]
        except KeyError:
            raise NotFoundError(f"No name found for language {lang} in {self.code}") from None

    def set_measure(self, codename: str, measure: Measure) -> None:
        """Add a measure, merging it into an existing one with the same codename.

        The incoming measure's values win for years both measures hold. A new
        measure is stored as a copy, so the caller's object is never shared.

        Raises:
            MeasureMismatchError: If ``codename`` is not the measure's own codename.
        """
        key = measure.codename
        if codename.lower() != key:
            raise MeasureMismatchError(
                f"Cannot store measure '{key}' under codename '{codename}'"
            )
        existing = self.measures.get(key)
        if existing is None:
            self.measures[key] = measure.copy()
        else:
            existing.merge(measure)

    def get_measure(self, codename: str) -> Measure:
        try:
            return self.measures[codename.lower()]
        except KeyError:
            raise NotFoundError(f"No measure found matching {codename}") from None

    def size(self) -> int:
        return len(self.measures)

    def merge(self, other: "Area") -> None:
        """Merge another area's names and measures into this one.

        ``other`` is treated as the newer data: its names replace ours per
        language and its values replace ours per year. Anything only we hold
        is kept.
        """
        merge_into(self.names, other.names)
        for measure in other.measures.values():
            self.set_measure(measure.codename, measure)

    def copy(self) -> "Area":
        """Independent copy of the names and every measure."""
        return Area(
            self.code,
            names=dict(self.names),
            measures={key: measure.copy() for key, measure in self.measures.items()},
        )

    def display_name(self) -> str:
        """Name line such as ``Swansea / Abertawe (W06000011)``."""
        names = [self.names[lang] for lang in (ENGLISH, WELSH) if self.names.get(lang)]
        if not names:
            names = [name for name in self.names.values() if name][:1]
        if not names:
            return f"({self.code})"
        return f"{' / '.join(names)} ({self.code})"

    def to_table(self) -> str:
        blocks = [self.measures[codename].to_table() for codename in sorted(self.measures)]
        if not blocks:
            return self.display_name()
        return self.display_name() + "\n" + "\n\n".join(blocks)

    def to_json(self) -> dict[str, Any]:
        return {
            "names": dict(self.names),
            "measures": {
                codename: self.measures[codename].to_json() for codename in sorted(self.measures)
            },
        }

    def __str__(self) -> str:
        return self.to_table()
