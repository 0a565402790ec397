"""Tests for core.domain.models — entities and spec collections."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from core.domain.models import (
    Domain,
    DomainSpec,
    Offering,
    Score,
    ScoreSpec,
    Tag,
    TagSet,
    builtin_score_spec,
)
from core.domain.sentiment import Sentiment


class TestDomain:
    def test_offerings_sorted_case_insensitively(self):
        domain = Domain(
            "cloud",
            [Offering(id="b", name="beta"), Offering(id="a", name="Alpha"), Offering(id="c", name="Gamma")],
        )
        assert [o.name for o in domain.get_offerings()] == ["Alpha", "beta", "Gamma"]

    def test_lookups(self):
        domain = Domain("cloud", [Offering(id="o1", name="Compute")])
        assert domain.get_offering_by_id("o1").name == "Compute"
        assert domain.get_offering_by_name("Compute").id == "o1"
        assert domain.get_offering_by_id("missing") is None

    def test_default_name(self):
        assert Domain(None).get_name() == "default"

    def test_offering_requires_name(self):
        with pytest.raises(ValidationError):
            Offering(id="x", name="")

    def test_offerings_are_immutable(self):
        offering = Offering(id="x", name="X")
        with pytest.raises(ValidationError):
            offering.name = "Y"


class TestDomainSpec:
    def test_empty(self):
        spec = DomainSpec()
        assert spec.is_empty()
        assert spec.get_name() == "default"

    def test_add_and_remove(self):
        spec = DomainSpec()
        spec.add_domain(Domain("a", [Offering(id="1", name="One")]))
        spec.add_domain(Domain("b", [Offering(id="2", name="Two")]))
        assert len(spec) == 2
        spec.remove_domain("a")
        assert list(spec.get_domains()) == ["b"]

    def test_same_name_replaces(self):
        spec = DomainSpec()
        spec.add_domain(Domain("a", [Offering(id="1", name="One")]))
        spec.add_domain(Domain("a", [Offering(id="2", name="Two")]))
        assert len(spec) == 1
        assert spec.get_domain("a").get_offering_by_id("2") is not None

    def test_offering_lookup_across_domains(self):
        spec = DomainSpec()
        spec.add_domain(Domain("a", [Offering(id="1", name="One")]))
        spec.add_domain(Domain("b", [Offering(id="2", name="Two")]))
        assert spec.get_offering_by_id("2").name == "Two"
        assert spec.get_offering_by_id("3") is None
        assert spec.get_offering_by_id("") is None

    def test_has_offerings(self):
        spec = DomainSpec()
        spec.add_domain(Domain("empty"))
        assert not spec.has_offerings()
        spec.add_domain(Domain("full", [Offering(id="1", name="One")]))
        assert spec.has_offerings()


class TestTagSet:
    def test_sorted_by_name(self):
        tags = TagSet("s", [Tag(id="2", name="Support"), Tag(id="1", name="Docs")])
        assert [t.name for t in tags.get_tags()] == ["Docs", "Support"]

    def test_lookups(self):
        tags = TagSet("s", [Tag(id="1", name="Docs")])
        assert tags.get_tag_by_id("1").name == "Docs"
        assert tags.get_tag_by_name("Docs").id == "1"
        assert tags.get_tag_by_name("nope") is None


class TestScore:
    def test_coercion(self):
        score = Score(name=None, value="not a number", sentiment="")
        assert score.name == "0"
        assert score.value == 0
        assert score.sentiment is None

    def test_numeric_string(self):
        assert Score(name="7", value="7").value == 7

    def test_sentiment_case_insensitive(self):
        assert Score(name="x", value=1, sentiment="Positive").sentiment is Sentiment.POSITIVE

    def test_unknown_sentiment_rejected(self):
        with pytest.raises(ValidationError):
            Score(name="x", value=1, sentiment="ecstatic")


def _values(spec: ScoreSpec) -> list[float]:
    return [s.value for s in spec.get_scores()]


class TestScoreSpec:
    @pytest.mark.parametrize(
        "values",
        [
            [5, 3, 9, 1],
            [1, 1, 1],
            [10, 0, 10, 0, 5],
            [2.5, -1, 2.5, 7, -1],
            [],
        ],
    )
    def test_sorted_and_unique(self, values):
        spec = ScoreSpec()
        for value in values:
            spec.add_score(Score(name=str(value), value=value))
        result = _values(spec)
        assert result == sorted(set(values))

    def test_last_inserted_wins(self):
        spec = ScoreSpec()
        spec.add_score(Score(name="first", value=3))
        spec.add_score(Score(name="second", value=3))
        assert len(spec) == 1
        assert spec.get_score_by_value(3).name == "second"

    def test_ignores_non_scores(self):
        spec = ScoreSpec()
        spec.add_score({"name": "x", "value": 1})  # type: ignore[arg-type]
        assert spec.is_empty()

    def test_lowest_and_highest(self):
        spec = ScoreSpec()
        assert spec.get_lowest_score() is None
        for value in (4, 0, 9):
            spec.add_score(Score(name=str(value), value=value))
        assert spec.get_lowest_score().value == 0
        assert spec.get_highest_score().value == 9

    def test_remove(self):
        spec = ScoreSpec()
        for value in (0, 1, 2):
            spec.add_score(Score(name=f"s{value}", value=value))
        spec.remove_score_by_name("s1")
        assert _values(spec) == [0, 2]
        spec.remove_score_by_value(0)
        assert _values(spec) == [2]

    def test_zero_value_lookup(self):
        spec = ScoreSpec()
        spec.add_score(Score(name="zero", value=0, sentiment="negative"))
        assert spec.get_score_by_value(0).name == "zero"
        assert spec.get_sentiment_by_value("0") is Sentiment.NEGATIVE

    def test_sentiment_by_value_unknown(self):
        spec = builtin_score_spec()
        assert spec.get_sentiment_by_value(42) is None
        assert spec.get_sentiment_by_value("abc") is None


class TestBuiltinScores:
    def test_eleven_points(self):
        spec = builtin_score_spec()
        assert _values(spec) == list(range(11))
        assert spec.get_lowest_score().name == "0 (worst)"
        assert spec.get_highest_score().name == "10 (best)"

    @pytest.mark.parametrize(
        "value,sentiment",
        [(0, "negative"), (3, "negative"), (4, "neutral"), (7, "neutral"), (8, "positive"), (10, "positive")],
    )
    def test_sentiment_bands(self, value, sentiment):
        assert builtin_score_spec().get_sentiment_by_value(value).value == sentiment
