"""Service status state machine.

Declarative forward-only transitions for a cleaning appointment:
- start: scheduled -> in_progress
- complete: scheduled/in_progress -> completed

Side effects of completion (ledger posting, client reminder) live in
``src.lifecycle.engine`` because they need the database session.
"""

from typing import TYPE_CHECKING

import structlog
from statemachine import State, StateMachine
from statemachine.exceptions import TransitionNotAllowed

from src.core.errors import TransitionError
from src.models.service import ServiceStatus

if TYPE_CHECKING:
    from src.models.service import Service

logger = structlog.get_logger()


class ServiceStateMachine(StateMachine):
    """State machine for the service lifecycle.

    States match ServiceStatus enum values:
    - scheduled: appointment booked (initial)
    - in_progress: cleaner on site, photos being collected
    - completed: signed off by the client (final)
    """

    scheduled = State(initial=True, value=ServiceStatus.SCHEDULED)
    in_progress = State(value=ServiceStatus.IN_PROGRESS)
    completed = State(final=True, value=ServiceStatus.COMPLETED)

    start = scheduled.to(in_progress)
    complete = in_progress.to(completed) | scheduled.to(completed)

    def __init__(self, service: "Service") -> None:
        """Initialize the machine from the service's current status.

        Args:
            service: Service model instance to manage
        """
        self.service = service
        super().__init__(start_value=service.status or ServiceStatus.SCHEDULED)

    @property
    def current_status(self) -> ServiceStatus:
        """Get current state as ServiceStatus enum."""
        return self.current_state.value

    def on_start(self) -> None:
        """Called when the cleaning starts on site."""
        self.service.status = ServiceStatus.IN_PROGRESS
        logger.info(
            "service_started",
            service_id=self.service.id,
            client_id=self.service.client_id,
        )

    def on_complete(self) -> None:
        """Called when the client signs off the cleaning."""
        self.service.status = ServiceStatus.COMPLETED
        logger.info(
            "service_completed",
            service_id=self.service.id,
            client_id=self.service.client_id,
        )


_EVENT_FOR_STATUS = {
    ServiceStatus.IN_PROGRESS: "start",
    ServiceStatus.COMPLETED: "complete",
}


def advance(service: "Service", target: ServiceStatus) -> bool:
    """Move a service to ``target`` through the state machine.

    Args:
        service: Service model instance
        target: Requested status

    Returns:
        True when a transition fired, False when the service already had
        the requested status.

    Raises:
        TransitionError: If ``target`` is not reachable by a forward edge.
    """
    sm = ServiceStateMachine(service=service)
    current = sm.current_status
    if current == target:
        return False

    event = _EVENT_FOR_STATUS.get(target)
    if event is None:
        raise TransitionError(current.value, target.value)
    try:
        sm.send(event)
    except TransitionNotAllowed as exc:
        raise TransitionError(current.value, target.value) from exc
    return True


__all__ = [
    "ServiceStateMachine",
    "TransitionNotAllowed",
    "advance",
]
