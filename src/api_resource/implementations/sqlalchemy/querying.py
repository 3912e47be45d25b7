import typing

import sqlalchemy as sa  # type: ignore
from sqlalchemy import orm  # type: ignore

from ...pagination import LengthAwarePaginator


def count(session: orm.Session, stmt: sa.sql.Select) -> int:
    subquery = stmt.order_by(None).subquery()
    return session.execute(sa.select(sa.func.count()).select_from(subquery)).scalar_one()


def paginate(
    session: orm.Session,
    stmt: sa.sql.Select,
    page: int = 1,
    per_page: int = 15,
    path: str = "/",
    query: typing.Optional[typing.Mapping[str, typing.Any]] = None,
) -> LengthAwarePaginator:
    """
    Runs ``stmt`` for a single page of results, along with a count of the whole result set.

    :param int page: the 1-based page number; anything lower is taken as the first page.
    :param int per_page: the page size.
    :param str path: the base URL the page links are built from.
    """
    if per_page < 1:
        raise ValueError(f"per_page must be positive: {per_page}")
    page = max(page, 1)
    total = count(session, stmt)
    items = (
        session.execute(stmt.limit(per_page).offset((page - 1) * per_page)).scalars().unique().all()
    )
    return LengthAwarePaginator(items, total, per_page, page, path=path, query=query)
