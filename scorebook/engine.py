from configparser import ConfigParser
from typing import Optional

from scorebook.context import Context
from scorebook.definitions.match import (
    DEFAULT_TOTAL_OVERS,
    MAX_INNINGS,
    TEAM_A,
    TEAM_B,
    other_team,
)
from scorebook.delivery import (
    add_no_ball,
    add_runs,
    add_runs_with_wicket,
    add_wicket,
    add_wide,
)
from scorebook.error import (
    AbstractScorebookError,
    EngineError,
    RejectReason,
    StoreError,
)
from scorebook.event import EventType, record_command
from scorebook.innings import InningsSnapshot, innings_state, is_innings_complete
from scorebook.match import (
    MatchConfig,
    MatchInnings,
    first_batting_team,
    match_result,
    runs_to_win,
    start_innings,
    target,
)
from scorebook.over import end_over, start_new_over
from scorebook.registrar import CommandRegistrar
from scorebook.replay import undo_last_ball
from scorebook.score import score_display
from scorebook.store import MatchRepository, create_store
from scorebook.util import LOGGER
from scorebook.validators import validate_match_setup, validate_toss


class ScoringEngine(Context):
    """
    Receives a stream of scoring commands, applies each one to the active innings
    and replies with a message that listeners (web app, file client) can consume.
    The engine is the only writer of the match state: every accepted command is
    persisted through the repository before it is acknowledged.
    """

    def __init__(
        self,
        repository: MatchRepository,
        default_total_overs: int = DEFAULT_TOTAL_OVERS,
    ):
        super().__init__()
        self.repository = repository
        self.default_total_overs = default_total_overs
        self.message_id = 0
        self.match_config: Optional[MatchConfig] = None
        self.match_innings = MatchInnings()
        self._messages = []
        self._listeners = []
        self.command_registrar = CommandRegistrar()
        self.scorer = InningsScorer(self)

        self.add_handler(EventType.MATCH_STARTED, self.handle_match_started)
        self.add_handler(EventType.INNINGS_STARTED, self.handle_innings_started)
        self.add_handler(EventType.INNINGS_SELECTED, self.handle_innings_selected)
        self.add_handler(EventType.INNINGS_DELETED, self.handle_innings_deleted)

    @classmethod
    def from_config(cls, config: ConfigParser) -> "ScoringEngine":
        store = create_store(config)
        total_overs = config.getint(
            "MATCH", "total_overs", fallback=DEFAULT_TOTAL_OVERS
        )
        engine = cls(MatchRepository(store), total_overs)
        engine.restore()
        return engine

    @property
    def messages(self) -> list:
        return self._messages

    def restore(self):
        match_config, match_innings = self.repository.load()
        self.match_config = match_config
        self.match_innings = match_innings or MatchInnings()
        if self.match_innings.current:
            self._child_context = self.scorer
            LOGGER.info(
                f"restored innings {self.match_innings.current_index + 1}: "
                f"{score_display(self.match_innings.current)}"
            )

    def on_command(self, command: dict) -> dict:
        try:
            message = self.process_command(command)
        except AbstractScorebookError as e:
            message = e.compile()
        message["message_id"] = self.message_id
        self.message_id += 1
        self._messages.append(message)
        self.send_message(message, is_snapshot=False)
        if self.match_innings.current:
            self.send_message(self.scorer.snapshot(), is_snapshot=True)
        return message

    def process_command(self, command: dict) -> dict:
        try:
            event_type_code = command["event"]
            command_id = command["command_id"]
        except (KeyError, TypeError):
            msg = f"no event or command_id specified on incoming command {command}"
            LOGGER.warning(msg)
            raise EngineError(msg, RejectReason.BAD_COMMAND)
        next_sequence = self.message_id
        if command_id != next_sequence:
            msg = (
                f"command_id from client out of sequence with engine client="
                f"{command_id}, engine={next_sequence}"
            )
            LOGGER.warning(msg)
            raise EngineError(msg, RejectReason.BAD_COMMAND)
        try:
            event_type = EventType(event_type_code)
        except ValueError:
            msg = f"invalid event type {event_type_code}"
            LOGGER.warning(msg)
            raise EngineError(msg, RejectReason.BAD_COMMAND)
        body = command.get("body") or {}
        if not isinstance(body, dict):
            msg = f"command body must be an object, got {body}"
            LOGGER.warning(msg)
            raise EngineError(msg, RejectReason.BAD_COMMAND)

        checkpoint = self.checkpoint()
        resp = self.handle_event(event_type, body)
        try:
            self.persist()
        except StoreError:
            self.rollback(checkpoint)
            self.command_registrar.pop()
            raise
        LOGGER.info(f"accepted command {command_id}: {event_type.name}")
        return self.create_message(event_type, resp)

    def checkpoint(self) -> tuple:
        return (
            self.match_config,
            list(self.match_innings.innings),
            self.match_innings.current_index,
            self._child_context,
        )

    def rollback(self, checkpoint: tuple):
        match_config, innings, current_index, child_context = checkpoint
        self.match_config = match_config
        self.match_innings = MatchInnings(innings, current_index)
        self._child_context = child_context

    def persist(self):
        if self.match_config:
            self.repository.save_config(self.match_config)
        self.repository.save_innings(self.match_innings)

    def snapshot(self) -> dict:
        if not self.match_config:
            return {}
        output = {
            "match_id": self.match_config.match_id,
            "result": self.result(),
            "innings": None,
        }
        if self.match_innings.current:
            output["innings"] = self.scorer.snapshot()
        return output

    def send_message(self, message: dict, is_snapshot=False):
        message["is_snapshot"] = is_snapshot
        for listener in self._listeners:
            listener.on_message(message)

    def register_client(self, client: "EngineClient"):
        self._listeners.append(client)

    def create_message(self, event_type: EventType, message: dict) -> dict:
        message = {
            "event": event_type.value,
            "body": message,
        }
        return message

    def result(self) -> Optional[str]:
        if len(self.match_innings) < MAX_INNINGS:
            return None
        chase = self.match_innings[1]
        runs_target = target(self.match_innings[0])
        if chase.total_runs < runs_target and not is_innings_complete(
            chase, self.match_config.total_overs
        ):
            return None
        return match_result(self.match_config, self.match_innings)

    def is_match_in_progress(self) -> bool:
        if not len(self.match_innings):
            return False
        return self.result() is None

    @record_command(EventType.MATCH_STARTED)
    def handle_match_started(self, payload: dict) -> dict:
        if self.is_match_in_progress() and not payload.get("reset"):
            msg = (
                f"match {self.match_config.match_id} is still in progress, "
                f"send reset to abandon it"
            )
            LOGGER.warning(msg)
            raise EngineError(msg, RejectReason.ILLEGAL_OPERATION)
        settings = dict(payload.get("config") or {})
        settings.setdefault("totalOvers", self.default_total_overs)
        match_config = MatchConfig.from_dict(dict(payload, config=settings))
        validation = validate_match_setup(match_config)
        if not validation:
            LOGGER.warning(validation.error)
            raise EngineError(validation.error, RejectReason.BAD_COMMAND)
        self.match_config = match_config
        self.match_innings = MatchInnings()
        self._child_context = None
        LOGGER.info(
            f"match {match_config.match_id} started: "
            f"{match_config.team_name(TEAM_A)} v {match_config.team_name(TEAM_B)}"
        )
        return match_config.to_dict()

    @record_command(EventType.INNINGS_STARTED)
    def handle_innings_started(self, payload: dict) -> dict:
        if not self.match_config:
            msg = "cannot start an innings before the match is set up"
            LOGGER.warning(msg)
            raise EngineError(msg, RejectReason.ILLEGAL_OPERATION)
        if len(self.match_innings) >= MAX_INNINGS:
            msg = f"match already has {MAX_INNINGS} innings"
            LOGGER.warning(msg)
            raise EngineError(msg, RejectReason.ILLEGAL_OPERATION)
        current = self.match_innings.current
        if current and not self.scorer.is_finished(current):
            msg = "the current innings is still in progress"
            LOGGER.warning(msg)
            raise EngineError(msg, RejectReason.ILLEGAL_OPERATION)
        try:
            on_strike = payload["on_strike"]
            off_strike = payload["off_strike"]
            bowler = payload["bowler"]
        except KeyError as e:
            msg = f"must specify {e.args[0]} when starting an innings"
            LOGGER.warning(msg)
            raise EngineError(msg, RejectReason.BAD_COMMAND)
        batting_team = payload.get("batting_team") or self.next_batting_team()
        snapshot = start_innings(
            self.match_config, batting_team, on_strike, off_strike, bowler
        )
        self.match_innings.add(snapshot)
        self._child_context = self.scorer
        LOGGER.info(
            f"innings {len(self.match_innings)} started: "
            f"{self.match_config.team_name(batting_team)} batting"
        )
        return self.scorer.snapshot()

    @record_command(EventType.INNINGS_SELECTED)
    def handle_innings_selected(self, payload: dict) -> dict:
        self.match_innings.select(self.innings_index(payload))
        self._child_context = self.scorer
        return self.scorer.snapshot()

    @record_command(EventType.INNINGS_DELETED)
    def handle_innings_deleted(self, payload: dict) -> dict:
        index = self.innings_index(payload)
        self.match_innings.delete(index)
        LOGGER.info(f"innings {index + 1} deleted")
        if self.match_innings.current is None:
            self._child_context = None
            innings = None
        else:
            innings = self.scorer.snapshot()
        return {
            "innings_count": len(self.match_innings),
            "current_index": self.match_innings.current_index,
            "innings": innings,
        }

    @staticmethod
    def innings_index(payload: dict) -> int:
        index = payload.get("index")
        if not isinstance(index, int) or isinstance(index, bool):
            msg = f"innings index must be an integer, got {index}"
            LOGGER.warning(msg)
            raise EngineError(msg, RejectReason.BAD_COMMAND)
        return index

    def next_batting_team(self) -> str:
        if len(self.match_innings):
            return other_team(self.match_innings[-1].batting_team)
        validation = validate_toss(self.match_config)
        if not validation:
            LOGGER.warning(validation.error)
            raise EngineError(validation.error, RejectReason.ILLEGAL_OPERATION)
        return first_batting_team(self.match_config)


class InningsScorer(Context):
    """Applies delivery, over and undo commands to the engine's active innings."""

    def __init__(self, engine: ScoringEngine):
        super().__init__()
        self.engine = engine
        self.command_registrar = engine.command_registrar

        self.add_handler(EventType.RUNS, self.handle_runs)
        self.add_handler(EventType.WIDE, self.handle_wide)
        self.add_handler(EventType.NO_BALL, self.handle_no_ball)
        self.add_handler(EventType.WICKET, self.handle_wicket)
        self.add_handler(EventType.RUNS_WITH_WICKET, self.handle_runs_with_wicket)
        self.add_handler(EventType.OVER_STARTED, self.handle_over_started)
        self.add_handler(EventType.OVER_COMPLETED, self.handle_over_completed)
        self.add_handler(EventType.UNDO, self.handle_undo)

    @property
    def innings(self) -> InningsSnapshot:
        return self.engine.match_innings.current

    @property
    def total_overs(self) -> int:
        return self.engine.match_config.total_overs

    @property
    def target(self) -> Optional[int]:
        match_innings = self.engine.match_innings
        if match_innings.current_index < 1:
            return None
        return target(match_innings[match_innings.current_index - 1])

    def is_finished(self, snapshot: InningsSnapshot) -> bool:
        if is_innings_complete(snapshot, self.total_overs):
            return True
        runs_target = self.target
        return runs_target is not None and snapshot.total_runs >= runs_target

    def snapshot(self) -> dict:
        innings = self.innings
        output = {
            "innings_index": self.engine.match_innings.current_index,
            "batting_team": innings.batting_team,
            "score": score_display(innings),
            "state": innings_state(innings, self.total_overs).value,
            "on_strike": innings.on_strike,
            "off_strike": innings.off_strike,
            "bowler": innings.current_bowler,
            "over": innings.current_over,
            "ball": innings.current_ball,
            "free_hit": innings.is_free_hit_pending,
            "target": self.target,
            "runs_to_win": None,
        }
        if self.target is not None:
            output["runs_to_win"] = runs_to_win(innings, self.target)
        return output

    def commit(self, snapshot: InningsSnapshot) -> dict:
        match_innings = self.engine.match_innings
        match_innings.update(match_innings.current_index, snapshot)
        if self.is_finished(snapshot):
            LOGGER.info(
                f"innings complete: {snapshot.batting_team} {score_display(snapshot)}"
            )
        return self.snapshot()

    def check_in_progress(self):
        if self.is_finished(self.innings):
            msg = "innings is complete, no further deliveries can be recorded"
            LOGGER.warning(msg)
            raise EngineError(msg, RejectReason.ILLEGAL_OPERATION)

    @staticmethod
    def require(payload: dict, key: str):
        if key not in payload:
            msg = f"must specify {key} on this command"
            LOGGER.warning(msg)
            raise EngineError(msg, RejectReason.BAD_COMMAND)
        return payload[key]

    @record_command(EventType.RUNS)
    def handle_runs(self, payload: dict) -> dict:
        runs = self.require(payload, "runs")
        self.check_in_progress()
        return self.commit(add_runs(self.innings, runs, payload.get("batsman")))

    @record_command(EventType.WIDE)
    def handle_wide(self, payload: dict) -> dict:
        self.check_in_progress()
        return self.commit(add_wide(self.innings, payload.get("batsman")))

    @record_command(EventType.NO_BALL)
    def handle_no_ball(self, payload: dict) -> dict:
        self.check_in_progress()
        return self.commit(add_no_ball(self.innings, payload.get("batsman")))

    @record_command(EventType.WICKET)
    def handle_wicket(self, payload: dict) -> dict:
        wicket = self.require(payload, "wicket")
        self.check_in_progress()
        return self.commit(
            add_wicket(self.innings, wicket, payload.get("next_player"))
        )

    @record_command(EventType.RUNS_WITH_WICKET)
    def handle_runs_with_wicket(self, payload: dict) -> dict:
        runs = self.require(payload, "runs")
        wicket = self.require(payload, "wicket")
        self.check_in_progress()
        return self.commit(
            add_runs_with_wicket(
                self.innings, runs, wicket, payload.get("next_player")
            )
        )

    @record_command(EventType.OVER_STARTED)
    def handle_over_started(self, payload: dict) -> dict:
        bowler = self.require(payload, "bowler")
        self.check_in_progress()
        innings = self.innings
        previous = innings.previous_ball
        if innings.over_closed and previous and previous.bowler == bowler:
            msg = f"bowler {bowler} cannot bowl two overs in a row"
            LOGGER.warning(msg)
            raise EngineError(msg, RejectReason.ILLEGAL_OPERATION)
        return self.commit(start_new_over(innings, bowler))

    @record_command(EventType.OVER_COMPLETED)
    def handle_over_completed(self, payload: dict) -> dict:
        return self.commit(end_over(self.innings))

    @record_command(EventType.UNDO)
    def handle_undo(self, payload: dict) -> dict:
        return self.commit(undo_last_ball(self.innings))
