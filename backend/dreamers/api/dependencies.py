from typing import Iterator

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from dreamers.context import AppContext


def get_context(request: Request) -> AppContext:
    return request.app.state.context


def get_db(context: AppContext = Depends(get_context)) -> Iterator[Session]:
    db = context.session_factory()
    try:
        yield db
    finally:
        db.close()
