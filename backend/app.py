import logging
from contextlib import asynccontextmanager

from fastapi import APIRouter, BackgroundTasks, Depends, FastAPI, HTTPException, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from aggregator import summarize
from clock import CalendarClock
from config import Settings
from db import build_engine, create_db_and_tables
from errors import LunchPollError, MissingCredentials
from gate import AccessGate
from schemas import (
    DaySummary,
    FormUpdate,
    IntervalsResponse,
    IntervalUpdate,
    PinRequest,
    SessionState,
    SubmitResponse,
)
from sessions import SESSION_COOKIE, SessionRegistry
from store import LocalOnlyStore, ResponseStore, SqlResponseStore
from workflow import SubmissionWorkflow

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

router = APIRouter()


def get_store(request: Request) -> ResponseStore:
    return request.app.state.store


def get_clock(request: Request) -> CalendarClock:
    return request.app.state.clock


def get_workflow(request: Request, response: Response) -> SubmissionWorkflow:
    """Resolve the caller's session from its cookie, starting a new one if needed."""
    registry: SessionRegistry = request.app.state.registry
    session_id, workflow = registry.get_or_create(request.cookies.get(SESSION_COOKIE))
    response.set_cookie(SESSION_COOKIE, session_id, httponly=True, samesite="lax")
    return workflow


def require_authorized(workflow: SubmissionWorkflow = Depends(get_workflow)) -> SubmissionWorkflow:
    if not workflow.authorized:
        raise HTTPException(status_code=403, detail="Confirm your PIN first")
    return workflow


def credentials_error(message: str) -> HTTPException:
    status_code = 400 if message == MissingCredentials.message else 401
    return HTTPException(status_code=status_code, detail=message)


@router.get("/responses/today", response_model=DaySummary)
def get_today_responses(
    store: ResponseStore = Depends(get_store),
    clock: CalendarClock = Depends(get_clock),
):
    """Today's responses straight from the store, split into yes and no."""
    day = clock.today()
    logger.info(f"Responses request for {day}")
    try:
        responses = store.query(day)
    except LunchPollError as e:
        logger.warning(f"Could not load responses for {day}: {e}")
        responses = []
    return summarize(day, responses)


@router.get("/session", response_model=SessionState)
def get_session_state(workflow: SubmissionWorkflow = Depends(get_workflow)):
    """Current form state and the session's view of today's responses."""
    return workflow.state()


@router.post("/session/pin", response_model=SessionState)
def confirm_pin(request: PinRequest, workflow: SubmissionWorkflow = Depends(get_workflow)):
    """Set name and PIN and unlock the form."""
    workflow.set_name(request.name)
    workflow.set_pin(request.pin)
    if not workflow.confirm_pin():
        raise credentials_error(workflow.error)
    return workflow.state()


@router.put("/session/form", response_model=SessionState)
def update_form(request: FormUpdate, workflow: SubmissionWorkflow = Depends(get_workflow)):
    """Update name, PIN or answer. Only the fields present in the body are changed."""
    if request.name is not None:
        workflow.set_name(request.name)
    if request.pin is not None:
        workflow.set_pin(request.pin)
    if request.answer is not None or request.clear_answer:
        if not workflow.authorized:
            raise HTTPException(status_code=403, detail="Confirm your PIN first")
        workflow.choose_answer(None if request.clear_answer else request.answer)
    return workflow.state()


@router.post("/session/intervals", response_model=IntervalsResponse)
def add_interval(workflow: SubmissionWorkflow = Depends(require_authorized)):
    """Append an empty interval. Does nothing once the list is full."""
    return IntervalsResponse(intervals=workflow.add_interval())


@router.patch("/session/intervals/{index}", response_model=IntervalsResponse)
def update_interval(
    index: int,
    request: IntervalUpdate,
    workflow: SubmissionWorkflow = Depends(require_authorized),
):
    try:
        intervals = workflow.set_interval_field(index, request.field, request.value)
    except IndexError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    return IntervalsResponse(intervals=intervals)


@router.post("/session/submit", response_model=SubmitResponse)
def submit(
    background_tasks: BackgroundTasks,
    workflow: SubmissionWorkflow = Depends(get_workflow),
):
    """Submit the form. The response is shown right away and saved in the background."""
    response = workflow.submit(dispatch=background_tasks.add_task)
    if response is None:
        raise credentials_error(workflow.error)
    return SubmitResponse(ok=True, response=response)


@router.get("/")
def root():
    """Root endpoint."""
    return {"message": "Lunch Poll API", "docs": "/docs"}


def create_app(
    settings: Settings | None = None,
    store: ResponseStore | None = None,
    clock: CalendarClock | None = None,
) -> FastAPI:
    """Build the API. `store` and `clock` default to the ones described by `settings`."""
    settings = settings or Settings.from_env()
    clock = clock or CalendarClock(settings.timezone)
    engine = None

    if store is None:
        engine = build_engine(settings)
        store = SqlResponseStore(engine) if engine is not None else LocalOnlyStore()

    gate = AccessGate(settings.pin)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Initialize database on startup."""
        if engine is not None:
            create_db_and_tables(engine)
            logger.info("Database initialized")
        yield

    app = FastAPI(title="Lunch Poll API", version="1.0.0", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Allow all origins in development
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.store = store
    app.state.clock = clock
    app.state.registry = SessionRegistry(
        lambda: SubmissionWorkflow(gate, store, clock),
        max_sessions=settings.max_sessions,
        ttl=settings.session_ttl,
    )
    app.include_router(router)
    return app


app = create_app()
