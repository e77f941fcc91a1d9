"""
Person endpoints for API v1.

The collection route doubles as the search used by the front end's
person list; ``/persons/all`` returns every person unpaged.  Business
errors raised by the service are rendered by the application's
exception handlers.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status

from ledger_api.app.core.errors import ValidationError
from ledger_api.app.schemas.common import PagedResult
from ledger_api.app.schemas.person import PersonCreate, PersonDetail, PersonRead, PersonUpdate
from ledger_api.app.services.person_service import MAX_PAGE_SIZE, PersonService

ROUTE_CODE_MISMATCH_MESSAGE = "The route code and body code must match."

router = APIRouter()


def get_person_service() -> PersonService:
    return PersonService()


@router.get("", response_model=PagedResult[PersonRead])
async def search_persons(
    id_number: Optional[str] = Query(None, alias="idNumber"),
    surname: Optional[str] = Query(None),
    account_number: Optional[str] = Query(None, alias="accountNumber"),
    page_number: int = Query(1, alias="pageNumber"),
    page_size: int = Query(MAX_PAGE_SIZE, alias="pageSize"),
    service: PersonService = Depends(get_person_service),
) -> PagedResult[PersonRead]:
    """Search persons by ID number, surname (contains) or account number.

    Filters are combined with AND.  ``pageNumber`` must be at least 1;
    ``pageSize`` is capped at 10.
    """
    return await service.search(
        id_number=id_number,
        surname=surname,
        account_number=account_number,
        page_number=page_number,
        page_size=page_size,
    )


@router.get("/all", response_model=List[PersonRead])
async def list_persons(service: PersonService = Depends(get_person_service)) -> List[PersonRead]:
    """Return all persons."""
    return await service.get_all()


@router.get("/{code}", response_model=PersonDetail)
async def get_person(code: int, service: PersonService = Depends(get_person_service)):
    """Retrieve a person and their accounts.  Returns 404 if not found."""
    person = await service.get_by_code(code)
    if person is None:
        return Response(status_code=status.HTTP_404_NOT_FOUND)
    return person


@router.post("", response_model=PersonRead, status_code=status.HTTP_201_CREATED)
async def create_person(
    person_in: PersonCreate,
    service: PersonService = Depends(get_person_service),
) -> PersonRead:
    """Create a person.  The ID number must not be in use."""
    return await service.create(person_in)


@router.put("/{code}", response_model=PersonRead)
async def update_person(
    code: int,
    person_in: PersonUpdate,
    service: PersonService = Depends(get_person_service),
):
    """Update a person's ID number, name and surname."""
    if code != person_in.code:
        raise ValidationError(ROUTE_CODE_MISMATCH_MESSAGE)
    person = await service.update(person_in)
    if person is None:
        return Response(status_code=status.HTTP_404_NOT_FOUND)
    return person


@router.delete("/{code}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_person(code: int, service: PersonService = Depends(get_person_service)) -> Response:
    """Delete a person who has no open accounts."""
    deleted = await service.delete(code)
    if not deleted:
        return Response(status_code=status.HTTP_404_NOT_FOUND)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
