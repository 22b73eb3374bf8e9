"""
Projects API

Public reads and session-protected writes for portfolio projects.
"""
import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from portfolio.content.api import fetch_projects
from portfolio.content.crud import create_document, delete_document, get_document, update_document
from portfolio.projects.models import Project
from portfolio.projects.schemas import ProjectCreate, ProjectUpdate
from portfolio.shared.auth import AdminSession, require_session
from portfolio.shared.database import get_db

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/projects", tags=["projects"])


# ──────────────────────────────────────────────────────────────────────────────
# Public endpoints (no auth required)
# ──────────────────────────────────────────────────────────────────────────────

@router.get("")
def list_all_projects(db: Session = Depends(get_db)):
    """List all projects, sorted by title (descending)."""
    return {"success": True, "data": fetch_projects(db)}


@router.get("/{project_id}")
def get_project(project_id: str, db: Session = Depends(get_db)):
    """Get a single project by id."""
    return {"success": True, "data": get_document(db, Project, project_id)}


# ──────────────────────────────────────────────────────────────────────────────
# Admin endpoints (session required)
# ──────────────────────────────────────────────────────────────────────────────

@router.post("", status_code=201)
def create_project(
    project_data: ProjectCreate,
    session: AdminSession = Depends(require_session),
    db: Session = Depends(get_db),
):
    """Create a new project."""
    project = create_document(db, Project, project_data.model_dump())
    return {"success": True, "data": project}


@router.api_route("/{project_id}", methods=["PUT", "PATCH"])
def update_project(
    project_id: str,
    project_data: ProjectUpdate,
    session: AdminSession = Depends(require_session),
    db: Session = Depends(get_db),
):
    """Update an existing project. Only provided fields are changed."""
    changes = project_data.model_dump(exclude_unset=True)
    project = update_document(db, Project, project_id, changes)
    return {"success": True, "data": project}


@router.delete("/{project_id}")
def delete_project(
    project_id: str,
    session: AdminSession = Depends(require_session),
    db: Session = Depends(get_db),
):
    """Delete a project."""
    delete_document(db, Project, project_id)
    return {"success": True, "message": "Project deleted successfully"}
