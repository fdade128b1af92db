"""API routers."""

from legalaid.routers.appointments import router as appointments_router
from legalaid.routers.backups import router as backups_router
from legalaid.routers.cases import router as cases_router
from legalaid.routers.internal import router as internal_router
from legalaid.routers.messages import router as messages_router
from legalaid.routers.notifications import router as notifications_router

__all__ = [
    "appointments_router",
    "backups_router",
    "cases_router",
    "internal_router",
    "messages_router",
    "notifications_router",
]
