import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from leave_tracker.config import settings
from leave_tracker.core.exceptions import CollaboratorError, LeaveTrackerError
from leave_tracker.core.logging import setup_logging
from leave_tracker.database.session import engine
from leave_tracker.database.base import Base
from leave_tracker.models.employee import Employee  # noqa: F401
from leave_tracker.models.holiday import Holiday  # noqa: F401
from leave_tracker.models.leave_request import LeaveRequest  # noqa: F401
from leave_tracker.models.leave_type import LeaveType  # noqa: F401
from leave_tracker.models.user import User  # noqa: F401
from leave_tracker.models.user_session import UserSession  # noqa: F401
from leave_tracker.routes import analytics, attachments, auth, credentials, employees
from leave_tracker.routes import holiday, leave_requests, leave_types, users

setup_logging()
logger = logging.getLogger(__name__)

app = FastAPI(title="Leave Tracker")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_origin_regex=r"^https?://(localhost|127\.0\.0\.1)(:\d+)?$",
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.on_event("startup")
def create_tables():
    Base.metadata.create_all(bind=engine)


def _format_validation_messages(exc: RequestValidationError) -> list[str]:
    messages: list[str] = []
    for err in exc.errors():
        loc = [str(v) for v in err.get("loc", []) if str(v) not in {"body", "query", "path"}]
        field = ".".join(loc) if loc else "field"
        err_type = str(err.get("type", ""))
        message = str(err.get("msg", "Invalid value"))

        if err_type in {"missing", "value_error.missing"}:
            messages.append(f"{field} is required")
        elif "string_too_short" in err_type:
            messages.append(f"{field} cannot be empty")
        elif "none.not_allowed" in err_type:
            messages.append(f"{field} cannot be null")
        elif field:
            messages.append(f"{field}: {message}")
        else:
            messages.append(message)

    # Preserve order while de-duplicating.
    return list(dict.fromkeys(messages))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    messages = _format_validation_messages(exc)
    detail = messages[0] if len(messages) == 1 else "Validation failed"
    return JSONResponse(
        status_code=422,
        content={
            "detail": detail,
            "errors": messages,
        },
    )


@app.exception_handler(LeaveTrackerError)
async def leave_tracker_exception_handler(request: Request, exc: LeaveTrackerError):
    if isinstance(exc, CollaboratorError):
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message, exc_info=exc)
    content = {"detail": exc.message}
    if exc.details:
        content["context"] = exc.details
    return JSONResponse(status_code=exc.status_code, content=content)


app.include_router(auth.router)
app.include_router(credentials.router)
app.include_router(users.router)
app.include_router(employees.router)
app.include_router(holiday.router)
app.include_router(leave_types.router)
app.include_router(leave_requests.router)
app.include_router(analytics.router)
app.include_router(attachments.router)


@app.get("/health")
def health():
    return {"status": "ok"}
