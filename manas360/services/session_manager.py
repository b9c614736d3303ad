"""Session manager for creating sessions and projecting their yield."""

import logging
import random
import string
from dataclasses import replace
from typing import Any, Dict, Mapping, Optional, Union

from pydantic import ValidationError

from ..catalog import Catalog
from ..config import PortalConfig
from ..errors import SessionValidationError
from ..events import EventPublisher, SESSION_CREATED
from ..models.descriptor import SessionDescriptor
from ..models.events import SessionEvent
from ..models.session import (
    GroupSession,
    IndividualSession,
    Session,
    SessionStatus,
    User,
    VRSession,
)
from ..scheduling import Clock, SystemClock
from .session_registry import SessionRegistry
from .yield_calculator import YieldCalculator, YieldReport

logger = logging.getLogger(__name__)

QUICK_VR_MODULES = ('thought_record', 'exposure', 'grounding')


class SessionManager:
    """Creates sessions into the registry and synthesizes drop-in sessions."""

    def __init__(self,
                 config: PortalConfig,
                 catalog: Catalog,
                 operator: User,
                 registry: Optional[SessionRegistry] = None,
                 clock: Optional[Clock] = None,
                 rng: Optional[random.Random] = None):
        """Initialize session manager.

        Args:
            config: Application configuration
            catalog: Reference catalogs for theme/environment/module lookups
            operator: Acting operator; its name is stamped on created sessions
            registry: Registry to insert into (a new one if None)
            clock: Time source for default start times
            rng: Random source for ids and drop-in participant counts
        """
        self.config = config
        self.catalog = catalog
        self.operator = operator
        self.registry = registry if registry is not None else SessionRegistry()
        self.clock = clock or SystemClock()
        self.rng = rng or random.Random()
        self.yield_calculator = YieldCalculator.from_config(config)
        self.publisher = EventPublisher(SESSION_CREATED)

        self.group_capacity = config.get('sessions.group_capacity', 15)
        self.default_vr_modules = config.get_default_vr_modules()
        logger.info(f"SessionManager initialized for operator: {operator.name}")

    def _generate_id(self, prefix: str = "sess") -> str:
        """Generate a session id not yet in the registry."""
        while True:
            suffix = ''.join(self.rng.choices(string.ascii_lowercase + string.digits, k=9))
            session_id = f"{prefix}-{suffix}"
            if session_id not in self.registry:
                return session_id

    def create_session(self, descriptor: Union[SessionDescriptor, Mapping[str, Any]]) -> Session:
        """Validate a descriptor, build the session and insert it into the registry.

        Args:
            descriptor: SessionDescriptor or a mapping of its fields

        Returns:
            The created session

        Raises:
            SessionValidationError: If the descriptor is malformed; the registry is unchanged
        """
        if not isinstance(descriptor, SessionDescriptor):
            try:
                descriptor = SessionDescriptor.model_validate(dict(descriptor))
            except ValidationError as e:
                messages = [f"{'.'.join(str(p) for p in err['loc']) or 'descriptor'}: {err['msg']}"
                            for err in e.errors()]
                logger.warning(f"Rejected session descriptor: {messages}")
                raise SessionValidationError(messages) from e

        session = self._build_session(descriptor)
        self.registry.insert(session)
        logger.info(f"Created {session.kind.value} session {session.id} at {session.start_time.isoformat()}")
        self.publisher.publish(SessionEvent(session=session, event_type="created", timestamp=self.clock.now()))
        return session

    def _build_session(self, descriptor: SessionDescriptor) -> Session:
        common: Dict[str, Any] = dict(
            id=self._generate_id(),
            therapist_name=self.operator.name,
            start_time=descriptor.start_time or self.clock.now(),
            duration_minutes=descriptor.duration_minutes,
            status=SessionStatus.SCHEDULED,
            notes=descriptor.notes,
        )

        if descriptor.kind == "group":
            theme = self.catalog.theme(descriptor.theme_slug)
            if theme is None:
                raise SessionValidationError([f"theme_slug: unknown theme '{descriptor.theme_slug}'"])
            return GroupSession(
                theme=theme,
                current_participants=1,
                max_participants=self.group_capacity,
                **common,
            )

        if descriptor.kind == "vr":
            environment = self.catalog.environment(descriptor.vr_environment_id)
            if environment is None:
                raise SessionValidationError(
                    [f"vr_environment_id: unknown environment '{descriptor.vr_environment_id}'"])
            modules = descriptor.modules or self.default_vr_modules
            unknown = self.catalog.unknown_modules(modules)
            if unknown:
                raise SessionValidationError([f"modules: unknown module(s) {', '.join(unknown)}"])
            return VRSession(
                patient_name=descriptor.patient_name,
                vr_environment=environment,
                modules_planned=frozenset(modules),
                **common,
            )

        return IndividualSession(patient_name=descriptor.patient_name, **common)

    def create_drop_in_session(self, theme_slug: str) -> GroupSession:
        """Synthesize a live drop-in group session for a patient.

        The session is not added to the registry.
        """
        theme = self.catalog.theme(theme_slug)
        if theme is None:
            raise SessionValidationError([f"theme_slug: unknown theme '{theme_slug}'"])
        now = self.clock.now()
        live_theme = replace(theme, social_proof_stat="Active Session", social_proof_icon="🔥")
        capacity = self.group_capacity
        session = GroupSession(
            id=f"dropin-{theme.slug}-{int(now.timestamp() * 1000)}",
            therapist_name=self.config.get('sessions.drop_in_moderator', 'Certified Moderator'),
            start_time=now,
            duration_minutes=90,
            status=SessionStatus.LIVE,
            theme=live_theme,
            current_participants=min(capacity, self.rng.randint(4, 11)),
            max_participants=capacity,
        )
        logger.info(f"Synthesized drop-in session {session.id} "
                    f"({session.current_participants}/{session.max_participants})")
        return session

    def create_quick_vr_session(self, environment_id: str, patient: User) -> VRSession:
        """Synthesize a live immersive session in the given environment.

        Unknown environments fall back to the first catalog entry. The session
        is not added to the registry.
        """
        environment = self.catalog.environment(environment_id)
        if environment is None:
            if not self.catalog.environments:
                raise SessionValidationError(["vr_environment_id: catalog has no environments"])
            environment = self.catalog.environments[0]
            logger.warning(f"Unknown VR environment '{environment_id}', falling back to {environment.id}")
        now = self.clock.now()
        session = VRSession(
            id=f"vr-session-{environment.id}-{int(now.timestamp() * 1000)}",
            therapist_name=self.operator.name,
            start_time=now,
            duration_minutes=45,
            status=SessionStatus.LIVE,
            patient_name=patient.name,
            vr_environment=environment,
            modules_planned=frozenset(QUICK_VR_MODULES),
        )
        logger.info(f"Synthesized quick VR session {session.id}")
        return session

    def compute_yield(self) -> YieldReport:
        """Project revenue over every registered session, scheduled ones included."""
        return self.yield_calculator.compute(self.registry.all())

    def next_session(self) -> Optional[Session]:
        return self.registry.next_session(self.clock.now())
