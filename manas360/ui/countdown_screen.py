"""Console rendering of the live countdown and the actor's view-state."""

import logging
import threading
from typing import Optional

from pubsub import pub
from rich.align import Align
from rich.console import Console, Group
from rich.live import Live
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ..events import LIFECYCLE_TRANSITION, LIVE_JOIN_PENDING, LIVE_JOINED, LIVE_TICK
from ..live.tiers import DIRECTIVES
from ..models.events import JoinEvent, SessionContext, TierSnapshot

logger = logging.getLogger(__name__)


def render_snapshot(snapshot: TierSnapshot, title: str, emoji: str = "🧠") -> Panel:
    """Build the countdown card for one snapshot."""
    directive = DIRECTIVES[snapshot.tier]
    color = directive.color
    style = "dim" if not snapshot.join_enabled else f"bold {color}"

    table = Table.grid(padding=(0, 2))
    table.add_column(justify="right")
    table.add_column()
    table.add_row("⏱️", Text(snapshot.countdown, style=style))
    table.add_row("", Text(snapshot.urgency, style="grey50"))
    waiting_label = "WAS RECENTLY JOINED" if not snapshot.join_enabled else "PEOPLE WAITING TO JOIN"
    table.add_row("👥", Text(f"{snapshot.waiting_count} {waiting_label}", style="grey70"))

    cta = Text(f"[ {snapshot.cta} ]", style=style)
    body = Group(
        Align.center(Text(snapshot.label, style=style)),
        Align.center(Text(f"{emoji} {title}", style="bold" if snapshot.join_enabled else "dim")),
        Align.center(table),
        Align.center(cta),
    )
    return Panel(body, border_style=color if snapshot.join_enabled else "grey37", width=48)


class CountdownScreen:
    """Subscribes to engine topics and keeps a rich Live display up to date."""

    def __init__(self, title: str, emoji: str = "🧠", console: Optional[Console] = None):
        self.title = title
        self.emoji = emoji
        self.console = console or Console()
        self.latest: Optional[TierSnapshot] = None
        self.context: Optional[SessionContext] = None
        self.status_line = ""
        self.lock = threading.RLock()
        self._live: Optional[Live] = None

        pub.subscribe(self._on_tick, LIVE_TICK)
        pub.subscribe(self._on_transition, LIFECYCLE_TRANSITION)
        pub.subscribe(self._on_join_pending, LIVE_JOIN_PENDING)
        pub.subscribe(self._on_joined, LIVE_JOINED)
        logger.info(f"CountdownScreen initialized for {title}")

    def _on_tick(self, event: TierSnapshot) -> None:
        with self.lock:
            self.latest = event
        self.refresh()

    def _on_transition(self, event: SessionContext) -> None:
        with self.lock:
            self.context = event
        self.refresh()

    def _on_join_pending(self, event: JoinEvent) -> None:
        with self.lock:
            self.status_line = "⏳ Confirming your spot..."
        self.refresh()

    def _on_joined(self, event: JoinEvent) -> None:
        with self.lock:
            self.status_line = "✅ JOINED!"
        self.refresh()

    def render(self):
        with self.lock:
            parts = []
            if self.latest is not None:
                parts.append(render_snapshot(self.latest, self.title, self.emoji))
            if self.context is not None:
                parts.append(Text(f"View: {self.context.view_state.name}  Role: {self.context.role.value}",
                                  style="bold blue"))
            if self.status_line:
                parts.append(Text(self.status_line, style="green"))
            return Group(*parts)

    def refresh(self) -> None:
        if self._live is not None:
            self._live.update(self.render())

    def __enter__(self) -> "CountdownScreen":
        self._live = Live(self.render(), console=self.console, refresh_per_second=4)
        self._live.__enter__()
        return self

    def __exit__(self, *args) -> None:
        live, self._live = self._live, None
        if live is not None:
            live.__exit__(*args)

    def close(self) -> None:
        """Unsubscribe from every topic."""
        for listener, topic in ((self._on_tick, LIVE_TICK),
                                (self._on_transition, LIFECYCLE_TRANSITION),
                                (self._on_join_pending, LIVE_JOIN_PENDING),
                                (self._on_joined, LIVE_JOINED)):
            try:
                pub.unsubscribe(listener, topic)
            except Exception as e:
                logger.warning(f"Error during unsubscribe from {topic}: {e}")
