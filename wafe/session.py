"""Authoritative single-player session: state machine and the tick loop."""

from __future__ import annotations

import logging
import random
from collections.abc import Callable
from dataclasses import replace
from functools import partial
from math import isfinite

from . import config
from .collision import Interaction, resolve_collisions
from .config import WorldConfig
from .effects import EffectSystem
from .errors import InvalidPlayerName, SessionNotStarted
from .models import Bot, Element, Entity, Player
from .movement import move_bot, move_player
from .population import PopulationManager, has_won
from .scores import HighScore, HighScoreBoard, now_ms
from .snapshot import EntityView, MatchSummary, Outcome, RankingRow, SessionStatus, Snapshot
from .spawn import SCATTER, SpawnPolicy

logger = logging.getLogger(__name__)

PLAYER_ID = "player"


def clean_player_name(raw: object) -> str:
    name = str(raw or "").strip()[: config.MAX_PLAYER_NAME_LENGTH].strip()
    if not name:
        raise InvalidPlayerName(raw)
    return name


class GameSession:
    def __init__(
        self,
        world: WorldConfig | None = None,
        *,
        seed: int | None = None,
        scores: HighScoreBoard | None = None,
        spawn_policy: SpawnPolicy = SCATTER,
    ) -> None:
        self.world = (world or WorldConfig()).validate()
        self.rng = random.Random(seed)
        self.effects = EffectSystem(seed=None if seed is None else seed + 1)
        self.scores = scores if scores is not None else HighScoreBoard()
        self.population = PopulationManager(self.world, self.rng, policy=spawn_policy)

        self.status = SessionStatus.NOT_STARTED
        self.outcome: Outcome | None = None
        self.player: Player | None = None
        self.bots: dict[str, Bot] = {}
        self.ticks = 0
        self.ended_tick: int | None = None
        self.last_entry: HighScore | None = None
        self._pending_target: tuple[float, float] | None = None
        self._last_snapshot: Snapshot | None = None

    @property
    def started(self) -> bool:
        return self.status is not SessionStatus.NOT_STARTED

    @property
    def entities(self) -> dict[str, Entity]:
        found: dict[str, Entity] = {}
        if self.player is not None:
            found[self.player.id] = self.player
        found.update(self.bots)
        return found

    @property
    def elapsed_ms(self) -> float:
        ticks = self.ended_tick if self.ended_tick is not None else self.ticks
        return ticks * self.world.tick_ms

    @property
    def invulnerable(self) -> bool:
        return (
            self.status is SessionStatus.PLAYING
            and self.player is not None
            and self.player.is_invulnerable(self.ticks)
        )

    def start(self, player_name: str) -> GameSession:
        name = clean_player_name(player_name)

        cx, cy = self.world.center
        self.ticks = 0
        self.ended_tick = None
        self.outcome = None
        self.last_entry = None
        self._pending_target = None
        self._last_snapshot = None
        self.effects.clear()

        self.player = Player(
            id=PLAYER_ID,
            name=name,
            element=self.rng.choice(list(Element)),
            size=config.PLAYER_START_SIZE,
            x=cx,
            y=cy,
            speed=config.PLAYER_SPEED,
            target_x=cx,
            target_y=cy,
            invulnerable_until=self.world.ms_to_ticks(self.world.invulnerability_ms),
        )
        self.bots = self.population.populate((cx, cy), self.ticks)
        self.status = SessionStatus.PLAYING

        logger.info(
            "Session started for %r as %s with %d bots",
            name,
            self.player.element.label,
            len(self.bots),
        )
        return self

    def restart(self) -> GameSession:
        if self.player is None:
            raise SessionNotStarted("Cannot restart before a session was started")
        logger.info("Restarting session for %r", self.player.name)
        return self.start(self.player.name)

    def set_player_target(self, x: float, y: float) -> None:
        try:
            tx = float(x)
            ty = float(y)
        except (TypeError, ValueError):
            return
        if not (isfinite(tx) and isfinite(ty)):
            return
        self._pending_target = (tx, ty)

    def high_scores(self) -> list[HighScore]:
        return self.scores.top()

    def tick(self) -> Snapshot:
        if self.status is SessionStatus.NOT_STARTED:
            return self.snapshot()

        self.ticks += 1
        self._run_phase("input", self._apply_input)
        self._run_phase("movement", self._move_entities)
        self._run_phase("collision", self._resolve_collisions)
        self._run_phase("population", self._update_population)
        self._run_phase("effects", self.effects.advance)

        try:
            self._last_snapshot = self.snapshot()
        except Exception:
            logger.exception("Tick %d: snapshot failed; reusing the last good one", self.ticks)
            return self._fallback_snapshot()
        return self._last_snapshot

    def _run_phase(self, name: str, phase: Callable[[], object]) -> None:
        try:
            phase()
        except Exception:
            logger.exception("Tick %d: %s phase failed; continuing", self.ticks, name)

    def _apply_input(self) -> None:
        target, self._pending_target = self._pending_target, None
        if target is None or self.player is None or self.status is not SessionStatus.PLAYING:
            return
        self.player.target_x, self.player.target_y = target

    def _move_entities(self) -> None:
        interval = self.world.ms_to_ticks(self.world.bot_waypoint_interval_ms)
        for bot in self.bots.values():
            move_bot(bot, self.world, self.ticks, self.rng, waypoint_interval=interval)

        if self.status is SessionStatus.PLAYING and self.player is not None:
            move_player(self.player, self.world)

    def _resolve_collisions(self) -> None:
        playing = self.status is SessionStatus.PLAYING and self.player is not None
        interactions = resolve_collisions(
            self.player if playing else None,
            list(self.bots.values()),
            player_vulnerable=playing and not self.invulnerable,
        )
        for interaction in interactions:
            self._apply_interaction(interaction)

    def _apply_interaction(self, interaction: Interaction) -> None:
        winner, loser = interaction.winner, interaction.loser
        player = self.player

        if loser.is_player:
            # The death sequence is emitted by the end-of-session transition.
            if player is not None:
                player.defeated_by[winner.element] += 1
            return

        self.effects.defeat(
            interaction.x,
            interaction.y,
            interaction.loser_size,
            loser.color,
            loser.element.label,
        )
        if winner.is_player and player is not None:
            player.bots_defeated += 1
            player.defeated_elements[loser.element] += 1
            self.effects.growth(player)

    def _update_population(self) -> None:
        self.population.remove_defeated(self.bots)

        player = self.player
        try:
            if self.status is SessionStatus.PLAYING and player is not None:
                if player.defeated:
                    self._end(Outcome.LOSS)
                elif has_won(player, self.world):
                    self._end(Outcome.WIN)
        finally:
            anchor = (player.x, player.y) if player is not None else None
            self.population.replenish(self.bots, anchor, self.ticks)

    def _end(self, outcome: Outcome) -> None:
        player = self.player
        if player is None:
            return

        self.status = SessionStatus.OVER
        self.outcome = outcome
        self.ended_tick = self.ticks
        self._pending_target = None
        player.vx = 0.0
        player.vy = 0.0

        if outcome is Outcome.LOSS:
            self.effects.player_death(player, ms_to_ticks=self.world.ms_to_ticks)

        entry = HighScore(
            name=player.name,
            element=player.element,
            score=player.score,
            size=player.size,
            timestamp=now_ms(),
        )
        self.last_entry = entry
        self._run_phase("high score", partial(self.scores.record, entry))

        logger.info(
            "Session over for %r: %s with score %d after %.1fs (%d bots defeated)",
            player.name,
            outcome.value,
            player.score,
            self.elapsed_ms / 1000.0,
            player.bots_defeated,
        )

    def snapshot(self) -> Snapshot:
        return Snapshot(
            tick=self.ticks,
            status=self.status,
            outcome=self.outcome,
            elapsed_ms=self.elapsed_ms,
            score=self.player.score if self.player is not None else 0,
            invulnerable=self.invulnerable,
            world_width=self.world.width,
            world_height=self.world.height,
            player=EntityView.of(self.player) if self.player is not None else None,
            bots=tuple(EntityView.of(bot) for bot in self.bots.values()),
            effects=tuple(effect.payload() for effect in self.effects.active()),
        )

    def _fallback_snapshot(self) -> Snapshot:
        last = self._last_snapshot
        if last is None:
            last = Snapshot(
                tick=self.ticks,
                status=self.status,
                outcome=self.outcome,
                elapsed_ms=self.elapsed_ms,
                score=0,
                invulnerable=False,
                world_width=self.world.width,
                world_height=self.world.height,
                player=None,
                bots=(),
                effects=(),
            )
        return replace(
            last,
            tick=self.ticks,
            status=self.status,
            outcome=self.outcome,
            elapsed_ms=self.elapsed_ms,
        )

    def ranking(self) -> list[RankingRow]:
        ordered = sorted(self.entities.values(), key=lambda entity: entity.score, reverse=True)
        return [
            RankingRow(
                rank=index + 1,
                id=entity.id,
                name=entity.name,
                element=entity.element.value,
                score=entity.score,
                is_player=entity.is_player,
            )
            for index, entity in enumerate(ordered)
        ]

    def summary(self) -> MatchSummary:
        player = self.player
        if player is None:
            raise SessionNotStarted("No session has been started yet")

        rows = self.ranking()
        rank = next(row.rank for row in rows if row.id == player.id)
        return MatchSummary(
            name=player.name,
            element=player.element.value,
            status=self.status,
            outcome=self.outcome,
            score=player.score,
            size=player.size,
            bots_defeated=player.bots_defeated,
            time_survived_s=int(self.elapsed_ms // 1000),
            rank=rank,
            total_entities=len(rows),
            defeated={element.value: n for element, n in player.defeated_elements.items()},
            defeated_by={element.value: n for element, n in player.defeated_by.items()},
        )


def start_session(
    player_name: str,
    world: WorldConfig | None = None,
    *,
    seed: int | None = None,
    scores: HighScoreBoard | None = None,
) -> GameSession:
    return GameSession(world, seed=seed, scores=scores).start(player_name)
