from fastapi.encoders import jsonable_encoder
from sqlalchemy import inspect
from sqlalchemy.orm import Session
from models.log import AuditLog


def snapshot(record) -> dict:
    """Column values of an ORM object as a JSON-safe dict."""
    mapper = inspect(record).mapper
    return jsonable_encoder({attr.key: getattr(record, attr.key) for attr in mapper.column_attrs})


def write_log(db: Session, *, table_name, record_id, action, changed_by, old_values=None, new_values=None):
    """Stage an audit entry; it is committed together with the change it describes."""
    entry = AuditLog(
        table_name=table_name,
        record_id=record_id,
        action=action,
        changed_by=changed_by,
        old_values=old_values,
        new_values=new_values,
    )
    db.add(entry)
    return entry
