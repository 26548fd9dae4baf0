"""
Match history tracking.
Captures round-by-round events of a match for summaries and the UI.
"""

from dataclasses import dataclass, asdict
from typing import Optional


@dataclass
class MatchEvent:
    """Single event in a match."""
    round_number: int
    event_type: str  # "round_start", "round_result", "match_end"
    data: dict
    timestamp: int = 0  # event sequence number


class MatchHistory:
    """Ordered log of what happened in a match."""

    def __init__(self, preset_name: str = "standard"):
        self.events: list[MatchEvent] = []
        self.metadata = {"preset": preset_name}
        self._event_counter = 0

    def add_event(self, round_number: int, event_type: str, data: dict):
        self.events.append(MatchEvent(
            round_number=round_number,
            event_type=event_type,
            data=data,
            timestamp=self._event_counter
        ))
        self._event_counter += 1

    def add_round_start(self, round_number: int, target: int, bet: int,
                        player_hand: str, ai_hand: str):
        self.add_event(
            round_number=round_number,
            event_type="round_start",
            data={
                "target": target,
                "bet": bet,
                "player_hand": player_hand,
                "ai_hand": ai_hand,
            }
        )

    def add_round_result(self, round_number: int, result: dict):
        """Log a scored round (RoundResult.to_dict())."""
        self.add_event(round_number=round_number, event_type="round_result", data=result)

    def add_match_end(self, round_number: int, winner: Optional[str],
                      player_credits: int, ai_credits: int):
        self.add_event(
            round_number=round_number,
            event_type="match_end",
            data={
                "winner": winner,
                "player_credits": player_credits,
                "ai_credits": ai_credits,
            }
        )

    def get_events_by_type(self, event_type: str) -> list[MatchEvent]:
        return [e for e in self.events if e.event_type == event_type]

    def to_dict(self) -> dict:
        return {
            "metadata": self.metadata,
            "events": [asdict(e) for e in self.events],
            "summary": self._generate_summary(),
        }

    def _generate_summary(self) -> dict:
        results = self.get_events_by_type("round_result")
        match_end = next(iter(self.get_events_by_type("match_end")), None)

        return {
            "rounds_played": len(results),
            "player_wins": sum(1 for e in results if e.data.get("winner") == "PLAYER"),
            "ai_wins": sum(1 for e in results if e.data.get("winner") == "AI"),
            "draws": sum(1 for e in results if e.data.get("winner") == "DRAW"),
            "invalid_rounds": sum(1 for e in results if e.data.get("winner") == "INVALID"),
            "exact_hits": sum(1 for e in results
                              if e.data.get("player_distance") == 0 or e.data.get("ai_distance") == 0),
            "match_winner": match_end.data.get("winner") if match_end else None,
        }
