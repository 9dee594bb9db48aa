# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

from typing import Any, Dict, List

from sqlalchemy import delete, select, update

from webforms.errors import FormNotFound
from webforms.infra.db import Database, WebForm

CLONE_SUFFIX = " (Clone)"


def _to_dict(row: WebForm) -> Dict[str, Any]:
    return {
        "id": row.id,
        "title": row.title,
        "fields": row.fields,
        "published": bool(row.published),
        "author_id": row.author_id,
    }


class FormRepository:
    """Form records. Every operation is scoped to ``owner_id``; a form owned by
    someone else behaves exactly like a missing one (FormNotFound).
    """

    def __init__(self, db: Database) -> None:
        self._db = db

    def list_for_owner(self, owner_id: int) -> List[Dict[str, Any]]:
        with self._db.session_scope() as session:
            rows = session.execute(
                select(WebForm).where(WebForm.author_id == owner_id).order_by(WebForm.id)
            ).scalars()
            return [_to_dict(r) for r in rows]

    def get(self, form_id: int, owner_id: int) -> Dict[str, Any]:
        with self._db.session_scope() as session:
            row = session.execute(
                select(WebForm).where(WebForm.id == form_id, WebForm.author_id == owner_id)
            ).scalar_one_or_none()
            if row is None:
                raise FormNotFound(form_id)
            return _to_dict(row)

    def create(self, owner_id: int, *, title: str, fields: str, published: bool = False) -> int:
        with self._db.session_scope() as session:
            row = WebForm(title=title, fields=fields, published=published, author_id=owner_id)
            session.add(row)
            session.flush()
            return row.id

    def update(self, form_id: int, owner_id: int, *, title: str, fields: str, published: bool) -> None:
        self._update(form_id, owner_id, title=title, fields=fields, published=published)

    def set_published(self, form_id: int, owner_id: int, published: bool) -> None:
        self._update(form_id, owner_id, published=published)

    def clone(self, form_id: int, owner_id: int) -> int:
        """Copy an owned form as an unpublished "<title> (Clone)". Returns the new id."""
        with self._db.session_scope() as session:
            src = session.execute(
                select(WebForm).where(WebForm.id == form_id, WebForm.author_id == owner_id)
            ).scalar_one_or_none()
            if src is None:
                raise FormNotFound(form_id)
            row = WebForm(title=src.title + CLONE_SUFFIX, fields=src.fields, published=False, author_id=owner_id)
            session.add(row)
            session.flush()
            return row.id

    def delete(self, form_id: int, owner_id: int) -> None:
        with self._db.session_scope() as session:
            res = session.execute(
                delete(WebForm).where(WebForm.id == form_id, WebForm.author_id == owner_id)
            )
            if res.rowcount == 0:
                raise FormNotFound(form_id)

    def _update(self, form_id: int, owner_id: int, **values: Any) -> None:
        with self._db.session_scope() as session:
            res = session.execute(
                update(WebForm).where(WebForm.id == form_id, WebForm.author_id == owner_id).values(**values)
            )
            if res.rowcount == 0:
                raise FormNotFound(form_id)
