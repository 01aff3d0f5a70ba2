"""Project Catalog - read-only listing of conservation projects (public)."""

from fastapi import APIRouter, Depends

from carbon_exchange.api.dependencies import get_store
from carbon_exchange.core.enforce_trade import parse_project_id
from carbon_exchange.core.errors import NotFoundError
from carbon_exchange.core.repository_protocols import LedgerStore
from carbon_exchange.schemas.ledger import Project

router = APIRouter(prefix="/api/projects", tags=["projects"])


@router.get("", response_model=list[Project])
async def list_projects(store: LedgerStore = Depends(get_store)):
    return await store.get_projects()


@router.get("/{project_id}", response_model=Project)
async def get_project(project_id: str, store: LedgerStore = Depends(get_store)):
    """Single project; non-numeric ids are simply not found."""
    parsed = parse_project_id(project_id)
    project = await store.get_project(parsed) if parsed is not None else None
    if project is None:
        raise NotFoundError("Project")
    return project
