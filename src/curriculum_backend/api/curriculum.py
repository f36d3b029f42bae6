import logging
from typing import Annotated, List
from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from curriculum_backend.api.exceptions import (
    InvalidHierarchyException,
    NotFoundException,
    StorageException,
    ValidationFailedException,
)
from curriculum_backend.database import get_db
from curriculum_backend.interface.curriculum_activities import (
    CurriculumActivityCreate,
    CurriculumActivityGet,
    CurriculumActivityUpdate,
)
from curriculum_backend.interface.curriculum_nodes import (
    CurriculumNodeCreate,
    CurriculumNodeGet,
    CurriculumNodeQuery,
    CurriculumNodeUpdate,
)
from curriculum_backend.interface.curriculum_resources import (
    CurriculumResourceCreate,
    CurriculumResourceGet,
    CurriculumResourceUpdate,
)
from curriculum_backend.permissions.auth import get_current_context, require_permission
from curriculum_backend.permissions.principal import Permissions, RequestContext
from curriculum_backend.repositories.base import (
    DuplicateError,
    InvalidContentError,
    InvalidHierarchyError,
    NotFoundError,
    RepositoryError,
)
from curriculum_backend.repositories.curriculum_content import (
    CurriculumActivityRepository,
    CurriculumResourceRepository,
)
from curriculum_backend.repositories.curriculum_node import CurriculumNodeRepository

logger = logging.getLogger(__name__)

curriculum_router = APIRouter()

CanEdit = Annotated[RequestContext, Depends(require_permission(Permissions.CURRICULUM_EDIT))]
Authenticated = Annotated[RequestContext, Depends(get_current_context)]


def repository_exception(e: RepositoryError) -> HTTPException:
    """Translate a repository failure into the matching HTTP exception."""

    if isinstance(e, NotFoundError):
        return NotFoundException(str(e))
    if isinstance(e, InvalidHierarchyError):
        return InvalidHierarchyException(str(e))
    if isinstance(e, InvalidContentError):
        if e.errors:
            return ValidationFailedException({"message": str(e), "errors": e.errors})
        return ValidationFailedException(str(e))
    if isinstance(e, DuplicateError):
        return ValidationFailedException(str(e))

    return StorageException(str(e))


## Nodes

@curriculum_router.get("/nodes", response_model=List[CurriculumNodeGet])
def list_nodes(
    context: Authenticated,
    params: CurriculumNodeQuery = Depends(),
    db: Session = Depends(get_db)
):
    try:
        nodes = CurriculumNodeRepository(db).list_nodes(params.subject_id)
    except RepositoryError as e:
        raise repository_exception(e)

    return [CurriculumNodeGet.model_validate(node) for node in nodes]


@curriculum_router.post("/nodes", response_model=CurriculumNodeGet, status_code=status.HTTP_201_CREATED)
def create_node(context: CanEdit, payload: CurriculumNodeCreate, db: Session = Depends(get_db)):
    try:
        node = CurriculumNodeRepository(db).create_node(payload)
    except RepositoryError as e:
        raise repository_exception(e)

    return CurriculumNodeGet.model_validate(node)


@curriculum_router.patch("/nodes/{node_id}", response_model=CurriculumNodeGet)
def update_node(context: CanEdit, node_id: str, payload: CurriculumNodeUpdate, db: Session = Depends(get_db)):
    try:
        node = CurriculumNodeRepository(db).update_node(node_id, payload)
    except RepositoryError as e:
        raise repository_exception(e)

    logger.info(f"User {context.user_id} updated node {node_id}")
    return CurriculumNodeGet.model_validate(node)


@curriculum_router.delete("/nodes/{node_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_node(context: CanEdit, node_id: str, db: Session = Depends(get_db)):
    try:
        CurriculumNodeRepository(db).delete_node(node_id)
    except RepositoryError as e:
        raise repository_exception(e)

    return Response(status_code=status.HTTP_204_NO_CONTENT)


## Resources

@curriculum_router.post("/resources", response_model=CurriculumResourceGet, status_code=status.HTTP_201_CREATED)
def create_resource(context: CanEdit, payload: CurriculumResourceCreate, db: Session = Depends(get_db)):
    try:
        resource = CurriculumResourceRepository(db).create_resource(payload)
    except RepositoryError as e:
        raise repository_exception(e)

    return CurriculumResourceGet.model_validate(resource)


@curriculum_router.patch("/resources/{resource_id}", response_model=CurriculumResourceGet)
def update_resource(context: CanEdit, resource_id: str, payload: CurriculumResourceUpdate, db: Session = Depends(get_db)):
    try:
        resource = CurriculumResourceRepository(db).update_resource(resource_id, payload)
    except RepositoryError as e:
        raise repository_exception(e)

    return CurriculumResourceGet.model_validate(resource)


@curriculum_router.delete("/resources/{resource_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_resource(context: CanEdit, resource_id: str, db: Session = Depends(get_db)):
    try:
        CurriculumResourceRepository(db).delete_resource(resource_id)
    except RepositoryError as e:
        raise repository_exception(e)

    return Response(status_code=status.HTTP_204_NO_CONTENT)


## Activities

@curriculum_router.get("/nodes/{node_id}/activities", response_model=List[CurriculumActivityGet])
def list_activities(context: Authenticated, node_id: str, db: Session = Depends(get_db)):
    try:
        activities = CurriculumActivityRepository(db).list_activities(node_id)
    except RepositoryError as e:
        raise repository_exception(e)

    return [CurriculumActivityGet.model_validate(activity) for activity in activities]


@curriculum_router.post("/activities", response_model=CurriculumActivityGet, status_code=status.HTTP_201_CREATED)
def create_activity(context: CanEdit, payload: CurriculumActivityCreate, db: Session = Depends(get_db)):
    try:
        activity = CurriculumActivityRepository(db).create_activity(payload)
    except RepositoryError as e:
        raise repository_exception(e)

    return CurriculumActivityGet.model_validate(activity)


@curriculum_router.patch("/activities/{activity_id}", response_model=CurriculumActivityGet)
def update_activity(context: CanEdit, activity_id: str, payload: CurriculumActivityUpdate, db: Session = Depends(get_db)):
    try:
        activity = CurriculumActivityRepository(db).update_activity(activity_id, payload)
    except RepositoryError as e:
        raise repository_exception(e)

    return CurriculumActivityGet.model_validate(activity)


@curriculum_router.delete("/activities/{activity_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_activity(context: CanEdit, activity_id: str, db: Session = Depends(get_db)):
    try:
        CurriculumActivityRepository(db).delete_activity(activity_id)
    except RepositoryError as e:
        raise repository_exception(e)

    return Response(status_code=status.HTTP_204_NO_CONTENT)
