"""Tests for carry and economy analytics."""

from tftsight.integrations.names import NameResolver
from tftsight.tracker.analytics import (
    CarryStats,
    calculate_carry_stats,
    calculate_economy_totals,
    damage_frame,
    top_carries,
)
from tftsight.tracker.models import StageSnapshot, UnitDamageRecord
from tftsight.tracker.timeline import EconomyTotals


def _stage(*records: tuple[str, float, int]) -> StageSnapshot:
    return StageSnapshot(
        unit_damage=[UnitDamageRecord(unit_id, damage, stars) for unit_id, damage, stars in records]
    )


class TestCarryStats:
    """Tests for per-unit damage accumulation."""

    def test_accumulates_across_stages(self):
        """A:100 + A:50 and B:50 rank A first with avg 75."""
        stages = [_stage(("A", 100, 1), ("B", 50, 1)), _stage(("A", 50, 1))]
        carries = calculate_carry_stats(stages, NameResolver())

        assert [c.champion for c in carries] == ["A", "B"]
        assert carries[0].total_damage == 150
        assert carries[0].rounds_played == 2
        assert carries[0].avg_damage == 75
        assert carries[1].total_damage == 50
        assert carries[1].avg_damage == 50

    def test_zero_damage_excluded(self):
        """Records without damage never enter the ranking."""
        stages = [_stage(("A", 0, 2), ("B", 10, 1))]
        assert [c.champion for c in calculate_carry_stats(stages, NameResolver())] == ["B"]

    def test_ties_keep_first_seen_order(self):
        """Equal totals rank in the order units first dealt damage."""
        stages = [_stage(("B", 40, 1), ("A", 40, 1)), _stage(("C", 40, 1))]
        carries = calculate_carry_stats(stages, NameResolver())
        assert [c.champion for c in carries] == ["B", "A", "C"]

    def test_max_stars(self):
        stages = [_stage(("A", 10, 1)), _stage(("A", 10, 3)), _stage(("A", 10, 2))]
        assert calculate_carry_stats(stages, NameResolver())[0].max_stars == 3

    def test_grouped_by_display_name(self):
        """Ids that resolve to the same name are one unit."""
        resolver = NameResolver(champions={"TFT16_Kindred": "Kindred", "TFT15_Kindred": "Kindred"})
        stages = [_stage(("TFT16_Kindred", 30, 1)), _stage(("TFT15_Kindred", 20, 2))]
        carries = calculate_carry_stats(stages, resolver)
        assert len(carries) == 1
        assert carries[0].champion == "Kindred"
        assert carries[0].total_damage == 50

    def test_fallback_names(self):
        stages = [_stage(("TFT16_Jinx", 300, 2))]
        assert calculate_carry_stats(stages, NameResolver())[0].champion == "Jinx"

    def test_no_damage(self):
        assert calculate_carry_stats([StageSnapshot()], NameResolver()) == []
        assert calculate_carry_stats([], NameResolver()) == []

    def test_damage_frame_columns(self):
        df = damage_frame([_stage(("A", 5, 1), ("B", 0, 1))], NameResolver())
        assert list(df.columns) == ["stage_index", "champion", "damage", "stars"]
        assert len(df) == 1


class TestCarryEntry:
    """Tests for the result entry shape."""

    def test_to_dict(self):
        carry = CarryStats(champion="A", total_damage=150.0, rounds_played=2, max_stars=2)
        assert carry.to_dict() == {
            "champion": "A",
            "totalDamage": 150,
            "avgDamage": 75,
            "roundsPlayed": 2,
            "maxStars": 2,
        }

    def test_average_rounds_half_up(self):
        carry = CarryStats(champion="A", total_damage=5.0, rounds_played=2, max_stars=1)
        assert carry.to_dict()["avgDamage"] == 3

    def test_fractional_total_kept(self):
        carry = CarryStats(champion="A", total_damage=10.5, rounds_played=1, max_stars=1)
        assert carry.to_dict()["totalDamage"] == 10.5

    def test_top_carries_limit(self):
        stages = [_stage(*[(f"U{i}", 100 - i, 1) for i in range(8)])]
        entries = top_carries(stages, NameResolver(), limit=5)
        assert [e["champion"] for e in entries] == ["U0", "U1", "U2", "U3", "U4"]


class TestEconomyTotals:
    def test_totals(self):
        stages = [
            StageSnapshot(rerolls=3, gold_earned=10),
            StageSnapshot(),
            StageSnapshot(rerolls=1, gold_earned=0),
        ]
        assert calculate_economy_totals(stages) == EconomyTotals(total_rerolls=4, total_income=10)
