"""Tests for agentboard data contracts."""

from __future__ import annotations

import orjson
import pytest
from pydantic import ValidationError

from agentboard.contracts import (
    AgentStatus,
    Entity,
    FeedItem,
    FeedKind,
    LeaderboardRow,
    Position,
    PositionSide,
    Snapshot,
    SnapshotEntry,
    SortKey,
)
from agentboard.errors import SourceUnavailable, UnknownEntityError


class TestEntity:
    """Entity validation."""

    def test_id_lowercased(self) -> None:
        entity = Entity(id="DeepSeek", name="DeepSeek V3.1", style="x", color="#ffffff")

        assert entity.id == "deepseek"

    def test_color_must_be_hex(self) -> None:
        with pytest.raises(ValidationError):
            Entity(id="a", name="A", style="x", color="red")

    def test_extra_fields_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Entity(id="a", name="A", style="x", color="#000000", rank=1)  # type: ignore[call-arg]

    def test_frozen(self) -> None:
        entity = Entity(id="a", name="A", style="x", color="#000000")

        with pytest.raises(ValidationError):
            entity.name = "B"  # type: ignore[misc]


class TestFeedItem:
    """FeedItem validation."""

    def test_empty_text_rejected(self) -> None:
        with pytest.raises(ValidationError):
            FeedItem(kind=FeedKind.NOTE, text="", ts=0)

    def test_negative_ts_rejected(self) -> None:
        with pytest.raises(ValidationError):
            FeedItem(kind=FeedKind.SIGNAL, text="x", ts=-1)

    def test_kind_serialized_as_value(self) -> None:
        item = FeedItem(kind=FeedKind.NOTE, text="hi", ts=5)

        assert item.model_dump(mode="json") == {"kind": "note", "text": "hi", "ts": 5}


class TestPosition:
    """Position validation."""

    def test_valid(self) -> None:
        p = Position(
            symbol="BTC-PERP",
            side=PositionSide.LONG,
            entry=60000.0,
            stop=59000.0,
            tp=62000.0,
            leverage=3.5,
            size=0.4,
        )

        assert p.side == "LONG"

    @pytest.mark.parametrize(
        ("field", "value"),
        [("entry", 0.0), ("stop", -1.0), ("leverage", 0.5), ("size", -0.1)],
    )
    def test_out_of_range(self, field: str, value: float) -> None:
        data = {
            "symbol": "ETH-PERP",
            "side": "SHORT",
            "entry": 2000.0,
            "stop": 2020.0,
            "tp": 1970.0,
            "leverage": 1.0,
            "size": 0.2,
        }
        data[field] = value

        with pytest.raises(ValidationError):
            Position.model_validate(data)


class TestSnapshot:
    """Snapshot serialization."""

    def make(self) -> Snapshot:
        return Snapshot(
            ts=2000,
            agents=(
                SnapshotEntry(id="grok", name="Grok-4", value=10050.5),
                SnapshotEntry(id="gpt", name="GPT", value=9800.0),
            ),
        )

    def test_json_roundtrip(self) -> None:
        snap = self.make()

        assert Snapshot.from_json(snap.to_json()) == snap
        assert Snapshot.from_json(snap.to_json().decode()) == snap

    def test_json_shape(self) -> None:
        data = orjson.loads(self.make().to_json())

        assert data == {
            "ts": 2000,
            "agents": [
                {"id": "grok", "name": "Grok-4", "value": 10050.5},
                {"id": "gpt", "name": "GPT", "value": 9800.0},
            ],
        }

    def test_agents_in_order(self) -> None:
        snap = self.make()

        assert [a.id for a in snap.agents] == ["grok", "gpt"]
        assert snap.agents[1].value == 9800.0

    def test_non_positive_value_rejected(self) -> None:
        with pytest.raises(ValidationError):
            SnapshotEntry(id="gpt", name="GPT", value=0.0)

    def test_malformed_json(self) -> None:
        with pytest.raises(ValueError):
            Snapshot.from_json(b"[1, 2")


class TestEnums:
    """Enum behavior."""

    def test_sort_direction(self) -> None:
        assert SortKey.VALUE.descending
        assert SortKey.PNL.descending
        assert not SortKey.DD.descending
        assert not SortKey.TURNOVER.descending

    def test_sort_key_from_string(self) -> None:
        assert SortKey("dd") is SortKey.DD
        with pytest.raises(ValueError):
            SortKey("sharpe")

    def test_status_values(self) -> None:
        assert [s.value for s in AgentStatus] == ["Risk", "Hot", "OK"]

    def test_leaderboard_row_bounds(self) -> None:
        with pytest.raises(ValidationError):
            LeaderboardRow(
                id="a",
                name="A",
                style="x",
                value=1.0,
                pnl=0.0,
                drawdown=1.5,
                turnover=0.0,
                status=AgentStatus.OK,
            )


class TestErrors:
    """Exception types."""

    def test_unknown_entity_is_key_error(self) -> None:
        err = UnknownEntityError("nobody")

        assert isinstance(err, KeyError)
        assert err.entity_id == "nobody"
        assert str(err) == "Unknown agent: 'nobody'"

    def test_source_unavailable_status(self) -> None:
        assert SourceUnavailable("down").status is None
        assert SourceUnavailable("bad gateway", status=502).status == 502
