"""View-state machine for one actor's path through a session.

Each transition is a pure function taking the current ``SessionContext`` and
returning the next one. ``LifecycleController`` holds the context for one
actor, applies transitions and publishes every new context.

    DASHBOARD --join(VR)--> VR_LAUNCHER --launch_vr--> VIDEO_ROOM
    DASHBOARD --join(patient)--> VIDEO_ROOM
    DASHBOARD --join(operator)--> WAITING_ROOM --admit--> VIDEO_ROOM
    VR_LAUNCHER --back--> DASHBOARD
    VIDEO_ROOM --leave--> FEEDBACK --acknowledge_feedback--> DASHBOARD
    any --switch_role--> DASHBOARD
"""

import logging
from dataclasses import replace
from typing import Callable, Optional

from ..errors import InvalidTransitionError
from ..events import EventPublisher, LIFECYCLE_TRANSITION
from ..models.events import SessionContext, ViewState
from ..models.session import Role, Session, VRAccessTier

logger = logging.getLogger(__name__)


def _require(context: SessionContext, action: str, *states: ViewState) -> None:
    if context.view_state not in states:
        raise InvalidTransitionError(action, context.view_state)


def join(context: SessionContext, session: Session) -> SessionContext:
    _require(context, "join", ViewState.DASHBOARD)
    if session.is_vr:
        view_state = ViewState.VR_LAUNCHER
    elif context.role is Role.PATIENT:
        view_state = ViewState.VIDEO_ROOM
    else:
        view_state = ViewState.WAITING_ROOM
    return replace(context, view_state=view_state, active_session=session)


def launch_vr(context: SessionContext, tier: VRAccessTier) -> SessionContext:
    _require(context, "launch VR", ViewState.VR_LAUNCHER)
    session = context.active_session
    if session is None:
        raise InvalidTransitionError("launch VR", context.view_state, "no active session")
    if not session.is_vr:
        raise InvalidTransitionError("launch VR", context.view_state, f"session {session.id} is not immersive")
    return replace(context,
                   view_state=ViewState.VIDEO_ROOM,
                   active_session=replace(session, vr_tier=tier))


def back(context: SessionContext) -> SessionContext:
    _require(context, "go back", ViewState.VR_LAUNCHER)
    return replace(context, view_state=ViewState.DASHBOARD, active_session=None)


def admit(context: SessionContext) -> SessionContext:
    _require(context, "admit", ViewState.WAITING_ROOM)
    return replace(context, view_state=ViewState.VIDEO_ROOM)


def leave(context: SessionContext) -> SessionContext:
    _require(context, "leave", ViewState.VIDEO_ROOM)
    return replace(context, view_state=ViewState.FEEDBACK)


def acknowledge_feedback(context: SessionContext) -> SessionContext:
    _require(context, "acknowledge feedback", ViewState.FEEDBACK)
    return replace(context, view_state=ViewState.DASHBOARD, active_session=None)


def switch_role(context: SessionContext, role: Role) -> SessionContext:
    # Hard reset from any state
    return SessionContext(role=role)


class LifecycleController:
    """Owns the view-state and active session for one actor."""

    def __init__(self, role: Role = Role.THERAPIST):
        self.context = SessionContext(role=role)
        self.publisher = EventPublisher(LIFECYCLE_TRANSITION)
        logger.info(f"LifecycleController initialized for role: {role.value}")

    @property
    def view_state(self) -> ViewState:
        return self.context.view_state

    @property
    def active_session(self) -> Optional[Session]:
        return self.context.active_session

    @property
    def role(self) -> Role:
        return self.context.role

    def _apply(self, transition: Callable[..., SessionContext], *args) -> SessionContext:
        previous = self.context
        try:
            new_context = transition(previous, *args)
        except InvalidTransitionError as e:
            logger.warning(f"Rejected transition: {e}")
            raise

        self.context = new_context
        session_id = new_context.active_session.id if new_context.active_session else None
        logger.info(f"{previous.view_state.name} -> {new_context.view_state.name} "
                    f"(role={new_context.role.value}, session={session_id})")
        self.publisher.publish(new_context)
        return new_context

    def join(self, session: Session) -> SessionContext:
        return self._apply(join, session)

    def launch_vr(self, tier: VRAccessTier) -> SessionContext:
        return self._apply(launch_vr, tier)

    def back(self) -> SessionContext:
        return self._apply(back)

    def admit(self) -> SessionContext:
        return self._apply(admit)

    def leave(self) -> SessionContext:
        return self._apply(leave)

    def acknowledge_feedback(self) -> SessionContext:
        return self._apply(acknowledge_feedback)

    def switch_role(self, role: Role) -> SessionContext:
        return self._apply(switch_role, role)
