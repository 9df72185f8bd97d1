from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from opentelemetry import trace

from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.command.book_tickets_use_case import BookTicketsUseCase
from src.service.ticketing.app.command.cancel_ticket_use_case import CancelTicketUseCase
from src.service.ticketing.app.command.mark_ticket_used_use_case import MarkTicketUsedUseCase
from src.service.ticketing.app.dto.page import MAX_PAGE_LIMIT, PageRequest
from src.service.ticketing.app.query.get_ticket_use_case import GetTicketUseCase
from src.service.ticketing.app.query.list_tickets_use_case import ListTicketsUseCase
from src.service.ticketing.domain.entity.user_entity import UserEntity
from src.service.ticketing.domain.enum.ticket_status import TicketStatus
from src.service.ticketing.driving_adapter.http_controller.auth.role_auth import (
    get_current_user,
)
from src.service.ticketing.driving_adapter.http_controller.schema.ticket_schema import (
    BookTicketsRequest,
    BookTicketsResponse,
    EventTicketListResponse,
    TicketListResponse,
    TicketResponse,
    TicketVerificationResponse,
)


router = APIRouter()
tracer = trace.get_tracer(__name__)


@router.post('', status_code=status.HTTP_201_CREATED)
@Logger.io
async def book_tickets(
    request: BookTicketsRequest,
    current_user: UserEntity = Depends(get_current_user),
    use_case: BookTicketsUseCase = Depends(BookTicketsUseCase.depends),
) -> BookTicketsResponse:
    with tracer.start_as_current_span('controller.book_tickets') as span:
        span.set_attribute('event_id', request.event_id)
        span.set_attribute('user_id', current_user.id)
        span.set_attribute('quantity', request.quantity)

        result = await use_case.execute(
            event_id=request.event_id, user_id=current_user.id, quantity=request.quantity
        )
        return BookTicketsResponse(
            ticket_ids=result.ticket_ids,
            ticket_numbers=result.ticket_numbers,
            total_price=result.total_price,
            reservation_expiry=result.reservation_expiry,
        )


@router.get('/my_tickets')
@Logger.io
async def list_my_tickets(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=MAX_PAGE_LIMIT),
    ticket_status: Optional[TicketStatus] = Query(None, alias='status'),
    current_user: UserEntity = Depends(get_current_user),
    use_case: ListTicketsUseCase = Depends(ListTicketsUseCase.depends),
) -> TicketListResponse:
    result = await use_case.list_user_tickets(
        user_id=current_user.id,
        page_request=PageRequest(page=page, limit=limit),
        status=ticket_status,
    )
    return TicketListResponse(
        tickets=[TicketResponse.from_entity(ticket) for ticket in result.items],
        total=result.total,
        page=result.page,
        pages=result.pages,
    )


@router.get('/event/{event_id}')
@Logger.io
async def list_event_tickets(
    event_id: int,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=MAX_PAGE_LIMIT),
    ticket_status: Optional[TicketStatus] = Query(None, alias='status'),
    current_user: UserEntity = Depends(get_current_user),
    use_case: ListTicketsUseCase = Depends(ListTicketsUseCase.depends),
) -> EventTicketListResponse:
    result = await use_case.list_event_tickets(
        event_id=event_id,
        acting_user=current_user,
        page_request=PageRequest(page=page, limit=limit),
        status=ticket_status,
    )
    return EventTicketListResponse(
        tickets=[TicketResponse.from_entity(ticket) for ticket in result.page.items],
        total=result.page.total,
        page=result.page.page,
        pages=result.page.pages,
        counts_by_status=result.counts_by_status,
    )


@router.get('/by_number/{ticket_number}')
@Logger.io
async def get_ticket_by_number(
    ticket_number: str,
    current_user: UserEntity = Depends(get_current_user),
    use_case: GetTicketUseCase = Depends(GetTicketUseCase.depends),
) -> TicketResponse:
    ticket = await use_case.get_by_ticket_number(
        ticket_number=ticket_number, acting_user=current_user
    )
    return TicketResponse.from_entity(ticket)


@router.get('/{ticket_id}')
@Logger.io
async def get_ticket(
    ticket_id: UUID,
    current_user: UserEntity = Depends(get_current_user),
    use_case: GetTicketUseCase = Depends(GetTicketUseCase.depends),
) -> TicketResponse:
    ticket = await use_case.get_by_id(ticket_id=ticket_id, acting_user=current_user)
    return TicketResponse.from_entity(ticket)


@router.patch('/{ticket_id}/cancel')
@Logger.io
async def cancel_ticket(
    ticket_id: UUID,
    current_user: UserEntity = Depends(get_current_user),
    use_case: CancelTicketUseCase = Depends(CancelTicketUseCase.depends),
) -> TicketResponse:
    ticket = await use_case.execute(ticket_id=ticket_id, acting_user=current_user)
    return TicketResponse.from_entity(ticket)


@router.patch('/{ticket_id}/mark_used')
@Logger.io
async def mark_ticket_used(
    ticket_id: UUID,
    current_user: UserEntity = Depends(get_current_user),
    use_case: MarkTicketUsedUseCase = Depends(MarkTicketUsedUseCase.depends),
) -> TicketResponse:
    ticket = await use_case.execute(ticket_id=ticket_id, acting_user=current_user)
    return TicketResponse.from_entity(ticket)


@router.get('/{ticket_id}/verify')
@Logger.io
async def verify_ticket(
    ticket_id: UUID,
    current_user: UserEntity = Depends(get_current_user),
    use_case: GetTicketUseCase = Depends(GetTicketUseCase.depends),
) -> TicketVerificationResponse:
    report = await use_case.verify(ticket_id=ticket_id, acting_user=current_user)
    return TicketVerificationResponse(
        is_valid=report.verification.is_valid,
        message=report.verification.message,
        status=report.verification.status,
        ticket_number=report.ticket.ticket_number,
        event_title=report.event.title,
    )
