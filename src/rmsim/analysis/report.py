"""
Event counting and delivery statistics.

EventCounter listens to application events and derives how much of the
traffic made it through:

- request delivery:   GotRequest / SentRequest
- response delivery:  GotResponse / SentResponse
- round-trip success: GotResponse / SentRequest

The same three ratios are computed for resource hog traffic, plus the
delivery ratio of unidirectional messages. A ratio is 0 when nothing of
that kind was sent.
"""

from __future__ import annotations
from collections import Counter, defaultdict
from typing import Any

from rmsim.core.events import AppEvent


def _ratio(numerator: int, denominator: int) -> float:
    if denominator <= 0:
        return 0.0
    return numerator / denominator


class EventCounter:
    """Event listener that tallies events overall and per origin node."""

    def __init__(self):
        self.counts: Counter[AppEvent] = Counter()
        self.by_node: defaultdict[int, Counter[AppEvent]] = defaultdict(Counter)

    def on_event(self, event: AppEvent, payload: Any, origin: int) -> None:
        self.counts[event] += 1
        self.by_node[origin][event] += 1

    def __getitem__(self, event: AppEvent) -> int:
        return self.counts[event]

    def summary(self) -> dict[str, float]:
        """All counters and delivery ratios as a flat dict."""
        c = self.counts
        E = AppEvent
        result: dict[str, float] = {event.value: c[event] for event in AppEvent}

        result["request_delivery_prob"] = _ratio(c[E.GOT_REQUEST], c[E.SENT_REQUEST])
        result["response_delivery_prob"] = _ratio(c[E.GOT_RESPONSE], c[E.SENT_RESPONSE])
        result["success_prob"] = _ratio(c[E.GOT_RESPONSE], c[E.SENT_REQUEST])

        result["request_reshog_delivery_prob"] = _ratio(
            c[E.GOT_REQUEST_RESHOG], c[E.SENT_REQUEST_RESHOG]
        )
        result["response_reshog_delivery_prob"] = _ratio(
            c[E.GOT_RESPONSE_RESHOG], c[E.SENT_RESPONSE_RESHOG]
        )
        result["success_reshog_prob"] = _ratio(
            c[E.GOT_RESPONSE_RESHOG], c[E.SENT_REQUEST_RESHOG]
        )

        result["unidirectional_delivery_prob"] = _ratio(
            c[E.GOT_UNIDIRECTIONAL], c[E.SENT_UNIDIRECTIONAL]
        )
        return result

    def format_summary(self, sim_time: float | None = None) -> str:
        """Human readable report, one value per line."""
        s = self.summary()
        lines = []
        if sim_time is not None:
            lines.append(f"sim_time: {sim_time:.4f}")
        lines += [
            f"requests sent: {s['SentRequest']}",
            f"requests received: {s['GotRequest']}",
            f"responses sent: {s['SentResponse']}",
            f"responses received: {s['GotResponse']}",
            f"requests reshog sent: {s['SentRequestResHog']}",
            f"requests reshog received: {s['GotRequestResHog']}",
            f"responses reshog sent: {s['SentResponseResHog']}",
            f"responses reshog received: {s['GotResponseResHog']}",
            f"unidirectional sent: {s['SentUnidirectional']}",
            f"unidirectional received: {s['GotUnidirectional']}",
            f"request delivery prob: {s['request_delivery_prob']:.4f}",
            f"response delivery prob: {s['response_delivery_prob']:.4f}",
            f"request/response success prob: {s['success_prob']:.4f}",
            f"request reshog delivery prob: {s['request_reshog_delivery_prob']:.4f}",
            f"response reshog delivery prob: {s['response_reshog_delivery_prob']:.4f}",
            f"request/response reshog success prob: {s['success_reshog_prob']:.4f}",
        ]
        return "\n".join(lines)
