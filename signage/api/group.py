from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from signage.api.deps import normalize_entity_id, require_account
from signage.db import get_db
from signage.models.group import ScreenGroup
from signage.models.schedule import Schedule
from signage.models.screen import Screen
from signage.schemas.group import GroupIn, GroupOut, GroupUpdateIn

router = APIRouter(prefix="/groups", tags=["groups"])


def _get_owned_group(db: Session, group_id: str, account_id: str) -> ScreenGroup:
    group_id = normalize_entity_id(group_id, "group_id")
    group = db.get(ScreenGroup, group_id)
    if not group or group.owner_account != account_id:
        raise HTTPException(status_code=404, detail="Group not found")
    return group


@router.get("", response_model=list[GroupOut])
def list_groups(account_id: str = Depends(require_account), db: Session = Depends(get_db)):
    return (
        db.query(ScreenGroup)
        .filter(ScreenGroup.owner_account == account_id)
        .order_by(ScreenGroup.created_at.asc())
        .all()
    )


@router.post("", response_model=GroupOut)
def create_group(payload: GroupIn, account_id: str = Depends(require_account), db: Session = Depends(get_db)):
    name = payload.name.strip()
    if not name:
        raise HTTPException(status_code=400, detail="Group name cannot be empty")
    group = ScreenGroup(
        owner_account=account_id,
        name=name,
        description=(payload.description or "").strip() or None,
    )
    db.add(group)
    db.commit()
    db.refresh(group)
    return group


@router.put("/{group_id}", response_model=GroupOut)
def update_group(
    group_id: str,
    payload: GroupUpdateIn,
    account_id: str = Depends(require_account),
    db: Session = Depends(get_db),
):
    group = _get_owned_group(db, group_id, account_id)
    if payload.name is not None:
        cleaned = payload.name.strip()
        if not cleaned:
            raise HTTPException(status_code=400, detail="Group name cannot be empty")
        group.name = cleaned
    if payload.description is not None:
        group.description = payload.description.strip() or None
    db.commit()
    db.refresh(group)
    return group


@router.delete("/{group_id}")
def delete_group(group_id: str, account_id: str = Depends(require_account), db: Session = Depends(get_db)):
    group = _get_owned_group(db, group_id, account_id)
    db.query(Screen).filter(Screen.group_id == group.id).update(
        {"group_id": None},
        synchronize_session=False,
    )
    db.query(Schedule).filter(Schedule.group_id == group.id).delete(synchronize_session=False)
    db.delete(group)
    db.commit()
    return {"ok": True}
