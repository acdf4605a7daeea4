"""Dependencies shared by the v1 routers."""

from typing import Annotated

from fastapi import Depends, Query
from sqlalchemy.orm import Session

from config.database import get_db
from schemas.employee import VisibilityScope

DbSession = Annotated[Session, Depends(get_db)]


def scope_params(
    lt_id: Annotated[str | None, Query(description="Restrict to this LT's subtree")] = None,
    alt_id: Annotated[str | None, Query(description="Restrict to this ALT's subtree")] = None,
    manager_id: Annotated[str | None, Query(description="Restrict to this manager's subtree")] = None,
    tl_id: Annotated[str | None, Query(description="Restrict to this team lead's subtree")] = None,
    application_name: Annotated[str | None, Query(description="Application tag filter")] = None,
) -> VisibilityScope:
    """Collect visibility filters from the query string.

    Values arrive as raw strings so that empty or non-numeric ids are ignored
    rather than rejected.
    """
    return VisibilityScope(
        lt_id=lt_id,
        alt_id=alt_id,
        manager_id=manager_id,
        tl_id=tl_id,
        application_name=application_name,
    )


Scope = Annotated[VisibilityScope, Depends(scope_params)]
