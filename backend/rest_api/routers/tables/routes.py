"""
Table router.
Table reads for staff; creation, renumbering and deletion for admins.
"""

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from rest_api.models import Account
from rest_api.routers._common import current_account, require_admin
from rest_api.services.domain import TableService
from shared.infrastructure.db import get_db
from shared.utils.schemas import TableCreate, TableOutput, TableUpdate


router = APIRouter(tags=["tables"])


@router.get("/tables", response_model=list[TableOutput])
def list_tables(
    db: Session = Depends(get_db),
    _: Account = Depends(current_account),
) -> list[TableOutput]:
    return TableService(db).list_all()


@router.get("/table/{table_id}", response_model=TableOutput)
def get_table(
    table_id: int,
    db: Session = Depends(get_db),
    _: Account = Depends(current_account),
) -> TableOutput:
    return TableService(db).get_by_id(table_id)


@router.post("/table", response_model=TableOutput, status_code=status.HTTP_201_CREATED)
def create_table(
    body: TableCreate,
    db: Session = Depends(get_db),
    _: Account = Depends(require_admin),
) -> TableOutput:
    """Create a table. Numbers are unique (409 on duplicates)."""
    return TableService(db).create_table(body.number)


@router.patch("/table/{table_id}", response_model=TableOutput)
def rename_table(
    table_id: int,
    body: TableUpdate,
    db: Session = Depends(get_db),
    _: Account = Depends(require_admin),
) -> TableOutput:
    return TableService(db).rename_table(table_id, body.number)


@router.delete("/table/{table_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_table(
    table_id: int,
    db: Session = Depends(get_db),
    _: Account = Depends(require_admin),
) -> Response:
    """Delete a table. Orders that reference it keep their tableId."""
    TableService(db).delete_table(table_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
