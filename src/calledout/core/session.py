"""
One jump or link interaction, as an explicit state machine.

    IDLE --start--> INDEXING --(index built)--> SEARCHING
    SEARCHING --update_query--> SEARCHING
    SEARCHING --choose--> SELECTED --> DONE | ABORTED
    any non-terminal state --cancel--> ABORTED
"""

import logging
from dataclasses import dataclass
from enum import Enum

from .errors import DocumentNotFound, InvalidTransition, NoActiveEditTarget, StaleDocumentError
from .indexer import build_index, collect_callouts
from .linker import CalloutLinker
from .matcher import DEFAULT_LIMIT, rank
from .model import Callout, JumpTarget, LinkPlan, MatchResult
from .navigator import jump
from .ports import EditSurface
from .vault import Vault

logger = logging.getLogger(__name__)


class Action(Enum):
    JUMP = "open"
    LINK = "link"


class SessionState(Enum):
    IDLE = "idle"
    INDEXING = "indexing"
    SEARCHING = "searching"
    SELECTED = "selected"
    DONE = "done"
    ABORTED = "aborted"


TERMINAL = (SessionState.DONE, SessionState.ABORTED)

PLACEHOLDERS = {
    Action.JUMP: "Jump to named callouts...",
    Action.LINK: "Link to named callouts...",
}


@dataclass(frozen=True)
class Outcome:
    state: SessionState
    callout: Callout | None = None
    jump: JumpTarget | None = None
    link: LinkPlan | None = None
    reason: str | None = None


class CalloutSession:
    def __init__(
        self,
        action: Action,
        vault: Vault,
        linker: CalloutLinker,
        surface: EditSurface | None,
        limit: int = DEFAULT_LIMIT,
    ):
        self.action = action
        self.vault = vault
        self.linker = linker
        self.surface = surface
        if limit < 1:
            raise ValueError(f"limit must be at least 1, got {limit}")
        self.limit = limit

        self.state = SessionState.IDLE
        self.callouts: list[Callout] = []
        self.query = ""
        self.results: list[MatchResult] = []
        self.selected: Callout | None = None

    @property
    def placeholder(self) -> str:
        return PLACEHOLDERS[self.action]

    def _require(self, event: str, *states: SessionState) -> None:
        if self.state not in states:
            raise InvalidTransition(self.state.value, event)

    def start(self) -> list[MatchResult]:
        """Build the index synchronously and start searching."""
        self._require("start", SessionState.IDLE)
        self.state = SessionState.INDEXING
        return self._indexed(collect_callouts(self.vault))

    async def start_async(self) -> list[MatchResult]:
        self._require("start", SessionState.IDLE)
        self.state = SessionState.INDEXING
        return self._indexed(await build_index(self.vault))

    def _indexed(self, callouts: list[Callout]) -> list[MatchResult]:
        if self.state is not SessionState.INDEXING:
            # cancelled while the index was building
            return []
        self.callouts = callouts
        self.state = SessionState.SEARCHING
        logger.debug("%s session ready with %d callouts", self.action.value, len(callouts))
        return self.update_query(self.query)

    def update_query(self, query: str) -> list[MatchResult]:
        self._require("search", SessionState.SEARCHING)
        self.query = query
        self.results = rank(self.callouts, query)[: self.limit]
        return self.results

    def choose(self, index: int = 0) -> Outcome:
        """Confirm the ``index``-th current result and carry out the action."""
        self._require("choose", SessionState.SEARCHING)
        if not 0 <= index < len(self.results):
            raise IndexError(f"No result #{index + 1} for query '{self.query}'")
        self.selected = self.results[index].callout
        self.state = SessionState.SELECTED

        if self.action is Action.JUMP:
            return self._jump(self.selected)
        return self._link(self.selected)

    def cancel(self) -> Outcome:
        if self.state in TERMINAL:
            raise InvalidTransition(self.state.value, "cancel")
        self.state = SessionState.ABORTED
        return Outcome(state=self.state, callout=self.selected, reason="cancelled")

    def _jump(self, callout: Callout) -> Outcome:
        if self.surface is None:
            self.state = SessionState.ABORTED
            return Outcome(state=self.state, callout=callout, reason=str(NoActiveEditTarget()))
        target = jump(callout, self.surface)
        self.state = SessionState.DONE
        return Outcome(state=self.state, callout=callout, jump=target)

    def _link(self, callout: Callout) -> Outcome:
        try:
            plan = self.linker.link(callout, self.surface)
        except NoActiveEditTarget as e:
            logger.info("Link aborted: %s", e)
            self.state = SessionState.ABORTED
            return Outcome(state=self.state, callout=callout, reason=str(e))
        except (StaleDocumentError, DocumentNotFound):
            self.state = SessionState.ABORTED
            raise
        self.state = SessionState.DONE
        return Outcome(state=self.state, callout=callout, link=plan)
