# backend/routes/projects.py
import logging
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from database import get_db
from models.catalog import Project
from models.stock import Inflow, Outflow
from schemas import catalog as schemas
from schemas.user import SessionUser
from utils.audit import snapshot, write_log
from utils.crud import conflict_as_400, ensure_unique_name, get_or_404
from utils.tokenJWT import get_current_user, permission_required

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/projects", tags=["Projects"])

DUPLICATE_NAME = "A project with this name already exists"
NOT_FOUND = "Project not found"


# List active projects
@router.get("", response_model=List[schemas.ProjectResponse])
def list_projects(
    db: Session = Depends(get_db),
    current_user: SessionUser = Depends(get_current_user),
):
    return db.query(Project).filter(Project.is_active.is_(True)).order_by(Project.name).all()


@router.post("", response_model=schemas.ProjectResponse, status_code=status.HTTP_201_CREATED)
def create_project(
    payload: schemas.ProjectCreate,
    db: Session = Depends(get_db),
    current_user: SessionUser = Depends(permission_required("create_project")),
):
    name = payload.name
    ensure_unique_name(db, Project, name, DUPLICATE_NAME)

    project = Project(name=name, description=payload.description)
    with conflict_as_400(db, DUPLICATE_NAME):
        db.add(project)
        db.flush()
        write_log(db, table_name="projects", record_id=project.id, action="CREATE",
                  changed_by=current_user.id, new_values=snapshot(project))
        db.commit()
    db.refresh(project)
    logger.info("Project %s created by %s", project.name, current_user.username)
    return project


@router.get("/{project_id}", response_model=schemas.ProjectResponse)
def get_project(
    project_id: UUID,
    db: Session = Depends(get_db),
    current_user: SessionUser = Depends(get_current_user),
):
    return get_or_404(db, Project, project_id, NOT_FOUND)


@router.put("/{project_id}", response_model=schemas.ProjectResponse)
def update_project(
    project_id: UUID,
    payload: schemas.ProjectUpdate,
    db: Session = Depends(get_db),
    current_user: SessionUser = Depends(permission_required("update_project")),
):
    project = get_or_404(db, Project, project_id, NOT_FOUND)
    before = snapshot(project)

    # Only check for duplicates when the name actually changes
    if payload.name is not None and payload.name != project.name:
        ensure_unique_name(db, Project, payload.name, DUPLICATE_NAME, exclude_id=project.id)
        project.name = payload.name
    if payload.description is not None:
        project.description = payload.description

    with conflict_as_400(db, DUPLICATE_NAME):
        db.flush()
        write_log(db, table_name="projects", record_id=project.id, action="UPDATE",
                  changed_by=current_user.id, old_values=before, new_values=snapshot(project))
        db.commit()
    db.refresh(project)
    return project


# Soft delete; projects with ledger rows stay
@router.delete("/{project_id}")
def delete_project(
    project_id: UUID,
    db: Session = Depends(get_db),
    current_user: SessionUser = Depends(permission_required("delete_project")),
):
    project = get_or_404(db, Project, project_id, NOT_FOUND, active_only=True)

    has_inflows = db.query(Inflow.id).filter(Inflow.project_id == project.id).first() is not None
    has_outflows = db.query(Outflow.id).filter(Outflow.project_id == project.id).first() is not None
    if has_inflows or has_outflows:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Cannot delete project with existing inflow/outflow records",
        )

    before = snapshot(project)
    project.is_active = False
    db.flush()
    write_log(db, table_name="projects", record_id=project.id, action="DELETE",
              changed_by=current_user.id, old_values=before, new_values=snapshot(project))
    db.commit()
    db.refresh(project)

    return {
        "message": "Project deleted successfully",
        "project": schemas.ProjectResponse.model_validate(project).model_dump(by_alias=True, mode="json"),
    }
