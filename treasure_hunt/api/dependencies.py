# treasure_hunt/api/dependencies.py
from typing import Callable, Iterator, Type
from fastapi import Depends, Request
from sqlalchemy.orm import Session

from treasure_hunt.preferences import Preferences


# Dependency to get DB session
def get_db(request: Request) -> Iterator[Session]:
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()


def get_service(service_class: Type) -> Callable:
    """Factory function to create service dependencies with DB injection"""
    def _get_service(db: Session = Depends(get_db)):
        return service_class(db)
    return _get_service


def get_preferences(request: Request) -> Preferences:
    """Preferences owned by the running application"""
    return request.app.state.preferences
