from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from tiri.core.errors import NotFound, ValidationError
from tiri.core.logger import logger
from tiri.core.session import SessionContext
from tiri.db.session import get_db
from tiri.dependencies.auth import get_current_session, require_admin
from tiri.models import Event, Template
from tiri.schemas.templates import (
    TemplateCounts, TemplateCreate, TemplateListItem, TemplateOut, TemplateUpdate
)

router = APIRouter(prefix="/api/studio/templates", tags=["Templates"])


def _get_template(db: Session, template_id: str) -> Template:
    template = db.get(Template, template_id)
    if not template:
        raise NotFound("Template not found")
    return template


@router.get("")
def list_templates(
    include_inactive: bool = Query(False, alias="includeInactive"),
    session: SessionContext = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    event_count = (
        select(func.count(Event.id))
        .where(Event.template_id == Template.id)
        .correlate(Template)
        .scalar_subquery()
    )
    query = select(Template, event_count).order_by(Template.created_at.desc())
    if not include_inactive:
        query = query.where(Template.is_active.is_(True))

    rows = db.execute(query).all()

    return {
        "templates": [
            TemplateListItem(
                **TemplateOut.model_validate(template).model_dump(),
                counts=TemplateCounts(events=count),
            )
            for template, count in rows
        ]
    }


@router.post("", status_code=status.HTTP_201_CREATED)
def create_template(
    payload: TemplateCreate,
    session: SessionContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    template = Template(
        name=payload.name,
        slug=payload.slug,
        category=payload.category,
        preview_image=payload.preview_image,
        is_active=True if payload.is_active is None else payload.is_active,
    )
    db.add(template)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ValidationError("Template slug is already in use")
    db.refresh(template)

    logger.info(f"TEMPLATE CREATED | template_id={template.id} | by={session.user_id}")
    return {"template": TemplateOut.model_validate(template)}


@router.get("/{template_id}")
def get_template(
    template_id: str,
    session: SessionContext = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    return {"template": TemplateOut.model_validate(_get_template(db, template_id))}


@router.patch("/{template_id}")
def update_template(
    template_id: str,
    payload: TemplateUpdate,
    session: SessionContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    template = _get_template(db, template_id)

    for field, value in payload.model_dump(exclude_unset=True).items():
        setattr(template, field, value)

    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ValidationError("Template slug is already in use")
    db.refresh(template)

    return {"template": TemplateOut.model_validate(template)}


@router.delete("/{template_id}")
def delete_template(
    template_id: str,
    session: SessionContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    template = _get_template(db, template_id)

    db.delete(template)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ValidationError("Template is used by existing events")

    logger.info(f"TEMPLATE DELETED | template_id={template_id} | by={session.user_id}")
    return {"ok": True}
