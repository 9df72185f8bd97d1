from fastapi import APIRouter, Depends, status
from opentelemetry import trace

from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.command.cancel_event_use_case import CancelEventUseCase
from src.service.ticketing.app.command.create_event_use_case import CreateEventUseCase
from src.service.ticketing.app.query.get_event_use_case import GetEventUseCase
from src.service.ticketing.app.query.get_inventory_snapshot_use_case import (
    GetInventorySnapshotUseCase,
)
from src.service.ticketing.domain.entity.user_entity import UserEntity
from src.service.ticketing.driving_adapter.http_controller.auth.role_auth import (
    get_current_user,
    require_organizer,
)
from src.service.ticketing.driving_adapter.http_controller.schema.event_schema import (
    EventCreateRequest,
    EventResponse,
    InventoryResponse,
)


router = APIRouter()
tracer = trace.get_tracer(__name__)


@router.post('', status_code=status.HTTP_201_CREATED)
@Logger.io
async def create_event(
    request: EventCreateRequest,
    current_user: UserEntity = Depends(require_organizer),
    use_case: CreateEventUseCase = Depends(CreateEventUseCase.depends),
) -> EventResponse:
    with tracer.start_as_current_span('controller.create_event') as span:
        span.set_attribute('organizer_id', current_user.id)
        event = await use_case.execute(
            organizer=current_user,
            title=request.title,
            description=request.description,
            venue=request.venue,
            start_at=request.start_at,
            end_at=request.end_at,
            total_tickets=request.total_tickets,
            ticket_price=request.ticket_price,
            category=request.category,
        )
        span.set_attribute('event.id', event.id or 0)
        return EventResponse.from_entity(event)


@router.get('/{event_id}')
@Logger.io
async def get_event(
    event_id: int,
    use_case: GetEventUseCase = Depends(GetEventUseCase.depends),
) -> EventResponse:
    return EventResponse.from_entity(await use_case.get_by_id(event_id=event_id))


@router.patch('/{event_id}/cancel')
@Logger.io
async def cancel_event(
    event_id: int,
    current_user: UserEntity = Depends(get_current_user),
    use_case: CancelEventUseCase = Depends(CancelEventUseCase.depends),
) -> EventResponse:
    event = await use_case.execute(event_id=event_id, acting_user=current_user)
    return EventResponse.from_entity(event)


@router.get('/{event_id}/inventory')
@Logger.io
async def get_inventory(
    event_id: int,
    current_user: UserEntity = Depends(get_current_user),
    use_case: GetInventorySnapshotUseCase = Depends(GetInventorySnapshotUseCase.depends),
) -> InventoryResponse:
    snapshot = await use_case.execute(event_id=event_id, acting_user=current_user)
    return InventoryResponse(
        event_id=snapshot.event.id or event_id,
        status=snapshot.event.status,
        total_tickets=snapshot.event.total_tickets,
        tickets_remaining=snapshot.event.tickets_remaining,
        counts_by_status=snapshot.counts_by_status,
        is_consistent=snapshot.is_consistent,
    )
