"""Validated records passed between pipeline stages."""

from dataclasses import dataclass, field

from collectors.base import FetchedArticle


@dataclass
class Cluster:
    """A gate-validated group of fetched articles about one event."""

    topic: str
    region: str
    articles: list[FetchedArticle]
    suggested_headline: str = ""

    @property
    def source_ids(self) -> set[int]:
        return {a.source_id for a in self.articles}


@dataclass
class NarrativeLens:
    source_name: str
    bias_rating: str = ""
    framing: str = ""
    tone: str = ""
    emphasis: str = ""
    omissions: str = ""
    word_choice: str = ""

    def to_json(self) -> dict[str, str]:
        return {
            "sourceName": self.source_name,
            "biasRating": self.bias_rating,
            "framing": self.framing,
            "tone": self.tone,
            "emphasis": self.emphasis,
            "omissions": self.omissions,
            "wordChoice": self.word_choice,
        }


@dataclass
class CoverageGap:
    fact: str
    covered_by: list[str] = field(default_factory=list)
    missed_by: list[str] = field(default_factory=list)
    significance: str = ""

    def to_json(self) -> dict:
        return {
            "fact": self.fact,
            "coveredBy": list(self.covered_by),
            "missedBy": list(self.missed_by),
            "significance": self.significance,
        }


@dataclass
class Synthesis:
    """Model output after coercion. Only headline and summary are mandatory."""

    headline: str
    summary: str
    key_facts: list[str] = field(default_factory=list)
    divergence_summary: str = ""
    consensus_score: int | None = None
    narrative_lens: list[NarrativeLens] = field(default_factory=list)
    coverage_gaps: list[CoverageGap] = field(default_factory=list)

    def framing_for(self, source_name: str) -> str | None:
        for lens in self.narrative_lens:
            if lens.source_name == source_name and lens.framing:
                return lens.framing
        return None


@dataclass
class RunResult:
    message: str
    stories_created: int = 0
    failed: bool = False

    def to_json(self) -> dict:
        return {"message": self.message, "storiesCreated": self.stories_created}
