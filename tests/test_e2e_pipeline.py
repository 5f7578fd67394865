"""
End-to-end pipeline tests.

Bytes -> envelope -> normalized stages -> assembled result, through
TrackerOrchestrator, exactly as the tool layer calls it.
"""

import gzip
import json

import pytest

from tftsight.core.config import TFTSightConfig
from tftsight.integrations.names import NameResolver
from tftsight.pipeline.contract import validate_error, validate_result
from tftsight.pipeline.orchestrator import (
    TrackerOrchestrator,
    TrackerRequest,
    analyze_tracker,
    render_json,
)

# =============================================================================
# FIXTURES
# =============================================================================


def _stage_record(label: str, health: int, gold: int, board: dict, damage: dict, **extra) -> dict:
    record = {
        "match_info": {
            "round_type": {"stage": label, "type": "PVP", "name": "Player Combat"},
            "round_outcome": {
                "ThePlayer": {"outcome": "loss", "tag_line": "EUW"},
                "Other": {"outcome": "win", "tag_line": "EUW"},
            },
        },
        "me": {"health": str(health), "gold": str(gold), "xp": {"level": 5}},
        "board": {"board_pieces": board},
        "local_player_damage": {"units": damage},
    }
    record.update(extra)
    return record


THREE_STAGES = [
    _stage_record(
        "1-1",
        100,
        2,
        {"p1": {"name": "TFT16_Poppy", "level": "1"}},
        {"d1": {"name": "TFT16_Poppy", "damage": 40, "level": 1}},
        gold_earned=2,
    ),
    _stage_record(
        "2-1",
        88,
        10,
        {"p1": {"name": "TFT16_Kindred", "level": "2", "item_1": "TFT_Item_InfinityEdge"}},
        {"d1": {"name": "TFT16_Kindred", "damage": 400, "level": 2}},
        gold_earned=5,
        rerolls=3,
    ),
    _stage_record(
        "2-2",
        0,
        0,
        {
            "p1": {"name": "TFT16_Kindred", "level": "2", "item_1": "TFT_Item_InfinityEdge"},
            "p2": {"name": "TFT16_Ahri", "level": "1"},
        },
        {
            "d1": {"name": "TFT16_Kindred", "damage": 100, "level": 2},
            "d2": {"name": "TFT16_Ahri", "damage": 300, "level": 1},
        },
        gold_earned=5,
    ),
]


def _snapshot(stages=THREE_STAGES, compress=True, stage_data_as_string=True) -> bytes:
    document = {
        "match_id": "7412345678",
        "server": "EUW1",
        "summoner_name": "ThePlayer#EUW",
        "uuid": "0f5c1e7a-tracker",
        "stage_data": json.dumps(stages) if stage_data_as_string else stages,
        "portal": "Portal_Default",
        "summoner_tier": "DIAMOND",
        "tft_set_core_name": "TFTSet16",
    }
    raw = json.dumps(document).encode("utf-8")
    return gzip.compress(raw) if compress else raw


@pytest.fixture
def orchestrator():
    names = NameResolver(
        champions={"TFT16_Kindred": "Kindred"},
        items={"TFT_Item_InfinityEdge": "Infinity Edge"},
    )
    return TrackerOrchestrator(names=names, config=TFTSightConfig())


# =============================================================================
# TESTS
# =============================================================================


class TestThreeStageMatch:
    """The 1-1 / 2-1 / 2-2 scenario where the player dies on the last stage."""

    def test_summary_output(self, orchestrator):
        result = orchestrator.run(_snapshot(), TrackerRequest(mode="summary"))

        assert validate_result(result) == []
        assert result["mode"] == "summary"
        assert result["totalRounds"] == 3
        # Key stages: first "2-1" and the final stage
        assert [s["stageNumber"] for s in result["stageProgression"]] == [2, 3]
        assert result["finalBoard"] == [
            {"champion": "Kindred", "stars": 2, "items": ["Infinity Edge"]},
            {"champion": "Ahri", "stars": 1, "items": []},
        ]
        assert result["summary"] == {
            "startingHealth": 100,
            "finalHealth": 0,
            "finalGold": 0,
            "totalRerolls": 3,
            "totalIncome": 12,
        }

    def test_carry_ranking(self, orchestrator):
        result = orchestrator.run(_snapshot(), TrackerRequest())
        assert [(c["champion"], c["totalDamage"]) for c in result["topCarries"]] == [
            ("Kindred", 500),
            ("Ahri", 300),
            ("Poppy", 40),
        ]
        assert result["topCarries"][0]["avgDamage"] == 250

    def test_round_outcome_uses_summoner_name(self, orchestrator):
        """Without a requested player, the snapshot's summoner name picks the outcome."""
        result = orchestrator.run(_snapshot(), TrackerRequest())
        assert [r["outcome"] for r in result["roundProgression"]] == ["loss"] * 3

    def test_requested_player_name(self, orchestrator):
        result = orchestrator.run(_snapshot(), TrackerRequest(player_name="other"))
        assert [r["outcome"] for r in result["roundProgression"]] == ["win"] * 3

    def test_complete_output(self, orchestrator):
        result = orchestrator.run(_snapshot(), TrackerRequest(mode="complete"))
        assert validate_result(result) == []
        assert [s["stageNumber"] for s in result["stageProgression"]] == [1, 2, 3]
        assert "roundProgression" not in result

    def test_no_raw_ids_in_output(self, orchestrator):
        """Every unit and item id goes through the resolver."""
        for mode in ("summary", "complete"):
            text = render_json(orchestrator.run(_snapshot(), TrackerRequest(mode=mode)))
            assert "TFT16_" not in text
            assert "TFT_Item_" not in text


class TestPipelineProperties:
    """Properties that hold for any input."""

    def test_idempotent(self, orchestrator):
        """Same bytes in, byte-identical JSON out."""
        raw = _snapshot()
        first = render_json(orchestrator.run(raw, TrackerRequest(mode="complete")))
        second = render_json(orchestrator.run(raw, TrackerRequest(mode="complete")))
        assert first == second

    def test_string_and_array_stage_data_equivalent(self, orchestrator):
        as_string = orchestrator.run(_snapshot(stage_data_as_string=True), TrackerRequest())
        as_array = orchestrator.run(_snapshot(stage_data_as_string=False), TrackerRequest())
        assert as_string == as_array

    def test_compressed_and_plain_equivalent(self, orchestrator):
        packed = orchestrator.run(_snapshot(compress=True), TrackerRequest())
        plain = orchestrator.run(_snapshot(compress=False), TrackerRequest())
        assert packed == plain

    @pytest.mark.parametrize("mode", [None, "", "everything"])
    def test_invalid_mode_equals_summary(self, orchestrator, mode):
        expected = orchestrator.run(_snapshot(), TrackerRequest(mode="summary"))
        assert orchestrator.run(_snapshot(), TrackerRequest(mode=mode)) == expected

    def test_missing_request_equals_default_request(self, orchestrator):
        """No request and an empty request take the same path."""
        raw = _snapshot()
        assert orchestrator.run(raw) == orchestrator.run(raw, TrackerRequest())
        assert orchestrator.run(raw)["mode"] == "summary"

    def test_partial_stages_do_not_fail(self, orchestrator):
        """Stages missing board, bench and me still yield a result."""
        stages = [{}, {"match_info": {"round_type": {"stage": "2-1"}}}, {"me": {"health": "x"}}]
        result = orchestrator.run(_snapshot(stages=stages), TrackerRequest())
        assert validate_result(result) == []
        assert result["finalBoard"] == []
        assert result["topCarries"] == []


class TestPipelineErrors:
    """Failures come back as one structured error object."""

    def test_malformed_envelope(self, orchestrator):
        result = orchestrator.run(b"definitely not json", TrackerRequest())
        assert validate_error(result) == []
        assert result["code"] == "MALFORMED_ENVELOPE"
        assert "stageProgression" not in result

    def test_stage_data_not_array(self, orchestrator):
        raw = json.dumps({"match_id": "1", "stage_data": json.dumps({"a": 1})}).encode()
        result = orchestrator.run(raw, TrackerRequest())
        assert result["code"] == "MALFORMED_ENVELOPE"

    def test_absent_snapshot_is_not_executed(self, orchestrator):
        result = orchestrator.run(None, TrackerRequest(match_identifier="EUW1_1"))
        assert validate_error(result) == []
        assert result["code"] == "TRACKER_NOT_FOUND"
        assert "EUW1_1" in result["error"]

    def test_analyze_raises(self, orchestrator):
        from tftsight.core.errors import MalformedEnvelopeError

        with pytest.raises(MalformedEnvelopeError):
            orchestrator.analyze(b"[]")


class TestTrackerRequest:
    """Tests for request parameter validation."""

    def test_defaults(self):
        request = TrackerRequest()
        assert request.mode == "summary"
        assert request.match_identifier == ""

    def test_aliases(self):
        request = TrackerRequest.model_validate(
            {"matchIdentifier": "EUW1_42", "mode": "complete", "playerName": "Me"}
        )
        assert request.match_identifier == "EUW1_42"
        assert request.mode == "complete"
        assert request.player_name == "Me"

    def test_match_id_in_result(self, orchestrator):
        result = orchestrator.run(_snapshot(), TrackerRequest(match_identifier="EUW1_7412345678"))
        assert result["matchId"] == "EUW1_7412345678"


def test_analyze_tracker_convenience():
    result = analyze_tracker(_snapshot(), mode="complete", names=NameResolver())
    assert result["mode"] == "complete"
    assert result["finalBoard"][0]["champion"] == "Kindred"
