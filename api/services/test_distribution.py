"""Tests for the distribution aggregators."""

from __future__ import annotations

from typing import Any

from api.services.distribution import (
    affiliation_distribution,
    distribution_percentage,
    event_distribution,
    unique_members,
    year_distribution,
)
from innothon.models import Registration


def make_registration(
    registration_id: str,
    selected_events: list[str],
    members: list[dict[str, Any]],
    status: str = "approved",
) -> Registration:
    return Registration(
        id=registration_id,
        selected_events=selected_events,
        team_members=members,
        status=status,
        created_at="2025-03-01T10:00:00Z",
    )


def as_dict(slices: list[Any]) -> dict[str, int]:
    return {item.name: item.value for item in slices}


class TestEventDistribution:
    def test_fan_out(self) -> None:
        """A registration selecting k events contributes to k buckets."""
        registrations = [
            make_registration("r1", ["code-quest", "design-derby", "pixel-showdown"], []),
            make_registration("r2", ["code-quest"], []),
            make_registration("r3", [], []),
        ]

        result = as_dict(event_distribution(registrations))

        assert result == {"code-quest": 2, "design-derby": 1, "pixel-showdown": 1}
        assert sum(result.values()) == 4

    def test_largest_first(self) -> None:
        registrations = [
            make_registration("r1", ["pixel-showdown"], []),
            make_registration("r2", ["code-quest"], []),
            make_registration("r3", ["code-quest"], []),
        ]

        result = event_distribution(registrations)

        assert [item.name for item in result] == ["code-quest", "pixel-showdown"]
        assert result[0].percentage == 67

    def test_scenario(self) -> None:
        registrations = [
            make_registration("r1", ["code-quest"], [{"id": "1", "college": "Hindustan Institute"}]),
        ]

        result = event_distribution(registrations)

        assert [(item.name, item.value) for item in result] == [("code-quest", 1)]

    def test_empty(self) -> None:
        assert event_distribution([]) == []


class TestAffiliationDistribution:
    def test_participant_counted_once(self) -> None:
        """A member on two rosters counts once."""
        shared = {"id": "m1", "college": "Anna University"}
        registrations = [
            make_registration("r1", ["code-quest"], [shared, {"id": "m2", "college": "HITS"}]),
            make_registration("r2", ["design-derby"], [shared]),
        ]

        result = as_dict(affiliation_distribution(registrations))

        assert result == {"Internal": 1, "External": 1}

    def test_internal_on_any_roster_wins(self) -> None:
        """The same id with conflicting colleges is internal regardless of input order."""
        external = make_registration("r1", ["code-quest"], [{"id": "m1", "college": "Anna University"}])
        internal = make_registration("r2", ["code-quest"], [{"id": "m1", "college": "Hindustan University"}])

        forward = as_dict(affiliation_distribution([external, internal]))
        backward = as_dict(affiliation_distribution([internal, external]))

        assert forward == backward == {"Internal": 1, "External": 0}

    def test_members_without_id_skipped(self) -> None:
        registrations = [make_registration("r1", ["code-quest"], [{"name": "No Id", "college": "HITS"}])]

        assert as_dict(affiliation_distribution(registrations)) == {"Internal": 0, "External": 0}

    def test_percentages(self) -> None:
        registrations = [
            make_registration(
                "r1",
                ["code-quest"],
                [
                    {"id": "a", "college": "HITS"},
                    {"id": "b", "college": "Anna University"},
                    {"id": "c", "college": "IIT Madras"},
                    {"id": "d", "college": "SRM"},
                ],
            )
        ]

        result = {item.name: item.percentage for item in affiliation_distribution(registrations)}

        assert result == {"Internal": 25, "External": 75}

    def test_scenario_internal_count(self) -> None:
        registrations = [
            make_registration("r1", ["code-quest"], [{"id": "1", "college": "Hindustan Institute"}]),
        ]

        assert as_dict(affiliation_distribution(registrations)) == {"Internal": 1, "External": 0}


class TestYearDistribution:
    def test_buckets(self) -> None:
        registrations = [
            make_registration(
                "r1",
                ["code-quest"],
                [
                    {"id": "a", "year": "1"},
                    {"id": "b", "year": "4"},
                    {"id": "c", "year": "PG"},
                    {"id": None, "year": "2"},
                ],
            ),
            make_registration("r2", ["code-quest"], [{"id": "a", "year": "1"}]),
        ]

        result = year_distribution(registrations)

        assert [item.name for item in result] == ["1", "2", "3", "4", "Other"]
        assert as_dict(result) == {"1": 1, "2": 0, "3": 0, "4": 1, "Other": 1}


class TestUniqueMembers:
    def test_keyed_by_id(self) -> None:
        registrations = [
            make_registration("r1", [], [{"id": "a"}, {"id": "b"}]),
            make_registration("r2", [], [{"id": "b"}, {"id": "c"}]),
        ]

        assert sorted(unique_members(registrations)) == ["a", "b", "c"]


class TestDistributionPercentage:
    def test_zero_safe(self) -> None:
        assert distribution_percentage([], "Internal") == 0

    def test_lookup(self) -> None:
        registrations = [
            make_registration("r1", ["code-quest"], []),
            make_registration("r2", ["design-derby"], []),
        ]

        assert distribution_percentage(event_distribution(registrations), "code-quest") == 50
        assert distribution_percentage(event_distribution(registrations), "pixel-showdown") == 0
