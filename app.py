import logging
from typing import Optional

from fastapi import APIRouter, Depends, FastAPI, Query, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.trustedhost import TrustedHostMiddleware
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

import auth
import tasks
from config import settings
from database import Base, engine, get_db
from errors import register_error_handlers
from logging_setup import setup_logging
from models import User
from query import SortOrder, StatusFilter, build_task_query
from schemas import (
    AuthResponse,
    DeleteResponse,
    HealthResponse,
    LoginRequest,
    MeResponse,
    Pagination,
    RegisterRequest,
    TaskCreate,
    TaskListResponse,
    TaskOut,
    TaskResponse,
    TaskUpdate,
    UserOut,
)

setup_logging(settings.log_level)
logger = logging.getLogger(__name__)

if "secret_key" not in settings.model_fields_set:
    logger.warning("SECRET_KEY is not set; tokens will not survive a restart")

# Create tables
Base.metadata.create_all(bind=engine)

app = FastAPI(title="TaskFlow")

# Add security middlewares
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(
    TrustedHostMiddleware,
    allowed_hosts=settings.allowed_hosts
)

register_error_handlers(app)

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)


async def current_user(
    token: Optional[str] = Depends(oauth2_scheme),
    db: Session = Depends(get_db)
) -> User:
    return auth.get_current_user(db, token)


# Authentication endpoints
auth_router = APIRouter(prefix="/api/auth", tags=["auth"])


@auth_router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(payload: RegisterRequest, db: Session = Depends(get_db)):
    user, token = auth.register(db, payload)
    return AuthResponse(user=UserOut.model_validate(user), token=token)


@auth_router.post("/login", response_model=AuthResponse)
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    user, token = auth.login(db, payload)
    return AuthResponse(user=UserOut.model_validate(user), token=token)


@auth_router.get("/me", response_model=MeResponse)
def me(user: User = Depends(current_user)):
    return MeResponse(user=UserOut.model_validate(user))


# Task endpoints, all of them behind the bearer token
task_router = APIRouter(prefix="/api/tasks", tags=["tasks"], dependencies=[Depends(current_user)])


@task_router.get("", response_model=TaskListResponse)
def list_tasks(
    search: Optional[str] = None,
    status: StatusFilter = StatusFilter.ALL,
    sort: SortOrder = SortOrder.NEWEST,
    page: int = 1,
    limit: int = Query(default=settings.default_page_limit),
    user: User = Depends(current_user),
    db: Session = Depends(get_db)
):
    query = build_task_query(user.id, search=search, status=status, sort=sort, page=page, limit=limit)
    result = tasks.list_tasks(db, query)
    return TaskListResponse(
        count=result.count,
        total=result.total,
        pagination=Pagination(page=result.page, limit=result.limit, total_pages=result.total_pages),
        data=[TaskOut.model_validate(task) for task in result.items],
    )


@task_router.get("/{task_id}", response_model=TaskResponse)
def get_task(task_id: int, user: User = Depends(current_user), db: Session = Depends(get_db)):
    task = tasks.get_task(db, user.id, task_id)
    return TaskResponse(data=TaskOut.model_validate(task))


@task_router.post("", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
def create_task(payload: TaskCreate, user: User = Depends(current_user), db: Session = Depends(get_db)):
    task = tasks.create_task(db, user.id, payload)
    return TaskResponse(data=TaskOut.model_validate(task))


@task_router.put("/{task_id}", response_model=TaskResponse)
def update_task(
    task_id: int,
    payload: TaskUpdate,
    user: User = Depends(current_user),
    db: Session = Depends(get_db)
):
    task = tasks.update_task(db, user.id, task_id, payload)
    return TaskResponse(data=TaskOut.model_validate(task))


@task_router.delete("/{task_id}", response_model=DeleteResponse)
def delete_task(task_id: int, user: User = Depends(current_user), db: Session = Depends(get_db)):
    tasks.delete_task(db, user.id, task_id)
    return DeleteResponse()


@app.get("/api/health", response_model=HealthResponse)
def health():
    return HealthResponse()


app.include_router(auth_router)
app.include_router(task_router)

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
