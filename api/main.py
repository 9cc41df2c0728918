"""FastAPI application - wizard pages and step endpoints"""
import re
import sys
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import HTMLResponse, PlainTextResponse, RedirectResponse
from fastapi.staticfiles import StaticFiles
from pydantic import BaseModel, Field
from starlette.concurrency import run_in_threadpool
from starlette.middleware.gzip import GZipMiddleware

# プロジェクトルートをPythonパスに追加
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from application.executor.wizard_controller import WizardController
from application.outcome import Completed, Continue, EarlyExit, Rejected, WizardOutcome
from application.ports.http_client import HttpClientPort
from application.ports.logger import LoggerPort
from application.ports.notifier import NotifierPort
from application.ports.renderer import PageRendererPort
from application.ports.requests_client import RequestsSessionHttpClient
from application.ports.submission_outbox import SubmissionOutboxPort
from application.ports.token_verifier import TokenVerifierPort
from application.services.answer_accumulator import AnswerAccumulator
from application.services.authoriser import Authoriser
from application.services.field_validator import FieldValidator
from application.services.query_codec import QueryCodec
from application.services.submission_mapper import SubmissionMapper
from application.services.submission_service import (
    SubmissionClient,
    SubmissionService,
    SubmissionSettings,
)
from application.services.transition_resolver import TransitionResolver
from domain.exceptions import UnknownStepError
from domain.steps.base import StepDefinition
from domain.wizard import WizardDefinition
from infrastructure.auth.jwt_token_verifier import JwtTokenVerifier
from infrastructure.config.app_config import AppConfig
from infrastructure.logging.console_logger import ConsoleLogger
from infrastructure.notify.govuk_notify_notifier import GovUkNotifyNotifier
from infrastructure.outbox.file_submission_outbox import FileSubmissionOutbox
from infrastructure.rendering.jinja_page_renderer import JinjaPageRenderer
from infrastructure.wizard.loader_registry import WizardLoaderRegistry

# layout and macro partials start with "_" and never match
_PAGE_ID_RE = re.compile(r"^[a-z0-9-]+$")
COMPLETE_PAGE = "complete"


class HealthResponse(BaseModel):
    """ヘルスチェック"""
    status: str = Field(description="Service status")
    service: str = Field(description="Service name")
    wizard_id: str = Field(description="Loaded wizard id")
    wizard_version: int = Field(description="Loaded wizard version")
    steps: int = Field(description="Number of steps in the wizard")
    outbox_pending: int = Field(description="Submissions waiting for redelivery")


@dataclass(frozen=True)
class WizardComponents:
    config: AppConfig
    wizard: WizardDefinition
    controller: WizardController
    accumulator: AnswerAccumulator
    authoriser: Authoriser
    renderer: PageRendererPort
    outbox: SubmissionOutboxPort
    codec: QueryCodec
    logger: LoggerPort


def _load_wizard(config: AppConfig) -> WizardDefinition:
    return WizardLoaderRegistry().load_by_id(config.wizards_dir, config.wizard_id)


def _build_renderer(config: AppConfig) -> JinjaPageRenderer:
    return JinjaPageRenderer(
        config.templates_dir,
        globals_={
            "GA_UA": config.ga_ua,
            "addresses_api_url": config.addresses_api_url,
            "addresses_api_key": config.addresses_api_key,
        },
    )


def _build_notifier(config: AppConfig) -> Optional[NotifierPort]:
    if not config.send_emails or not config.notify_api_key:
        return None
    return GovUkNotifyNotifier(
        config.notify_api_key,
        config.email_template_id,
        timeout_sec=config.notify_timeout_sec,
    )


def build_components(
    config: AppConfig,
    *,
    wizard: Optional[WizardDefinition] = None,
    http_client: Optional[HttpClientPort] = None,
    notifier: Optional[NotifierPort] = None,
    outbox: Optional[SubmissionOutboxPort] = None,
    token_verifier: Optional[TokenVerifierPort] = None,
    renderer: Optional[PageRendererPort] = None,
    clock: Optional[Callable[[], datetime]] = None,
    logger: Optional[LoggerPort] = None,
) -> WizardComponents:
    wizard = wizard or _load_wizard(config)
    logger = logger or ConsoleLogger(level=config.log_level)
    outbox = outbox if outbox is not None else FileSubmissionOutbox(str(config.outbox_dir), logger=logger)
    renderer = renderer or _build_renderer(config)

    settings = SubmissionSettings(
        api_url=config.submission_api_url,
        api_key=config.submission_api_key,
        send_emails=config.send_emails,
    )
    client = SubmissionClient(
        http_client or RequestsSessionHttpClient(timeout_sec=config.submission_timeout_sec),
        settings,
    )
    submissions = SubmissionService(
        client,
        outbox,
        notifier if notifier is not None else _build_notifier(config),
        settings,
        logger,
    )

    accumulator = AnswerAccumulator(wizard)
    controller = WizardController(
        wizard=wizard,
        validator=FieldValidator(wizard),
        accumulator=accumulator,
        resolver=TransitionResolver(wizard),
        mapper=SubmissionMapper(wizard.submission, clock=clock),
        submissions=submissions,
        logger=logger,
    )
    authoriser = Authoriser(
        token_verifier or JwtTokenVerifier(config.jwt_secret),
        user_group=config.authorised_user_group,
        admin_group=config.authorised_admin_group,
    )
    return WizardComponents(
        config=config,
        wizard=wizard,
        controller=controller,
        accumulator=accumulator,
        authoriser=authoriser,
        renderer=renderer,
        outbox=outbox,
        codec=QueryCodec(),
        logger=logger,
    )


def _multi_dict(items: List[Tuple[str, Any]]) -> Dict[str, Any]:
    """Repeated keys become lists; a single value stays a string."""
    out: Dict[str, Any] = {}
    for key, value in items:
        value = value if isinstance(value, str) else ""
        if key in out:
            current = out[key]
            out[key] = current + [value] if isinstance(current, list) else [current, value]
        else:
            out[key] = value
    return out


def _hidden_pairs(codec: QueryCodec, answers: Dict[str, Any], step: Optional[StepDefinition]) -> List[Tuple[str, str]]:
    owned = set(step.field_names) if step else set()
    carried = {k: v for k, v in answers.items() if k not in owned}
    return codec.expand(carried)


def _page_context(
    c: WizardComponents,
    page: str,
    answers: Dict[str, Any],
    errors: Optional[Dict[str, List[str]]] = None,
    form_error: Optional[str] = None,
) -> Dict[str, Any]:
    step = c.wizard.find_by_template(page)
    return {
        "page": page,
        "step": step,
        "query": answers,
        "errors": errors or {},
        "error": form_error,
        "hidden": _hidden_pairs(c.codec, answers, step) if step else [],
    }


def _render(c: WizardComponents, page: str, context: Dict[str, Any]) -> HTMLResponse:
    return HTMLResponse(c.renderer.render(page, context))


def _respond(c: WizardComponents, outcome: WizardOutcome) -> Any:
    if isinstance(outcome, Rejected):
        template = c.wizard.get_step(outcome.step_id).template
        query = c.codec.encode(outcome.answers, outcome.errors, outcome.form_error)
        return RedirectResponse(f"/{template}?{query}", status_code=302)

    if isinstance(outcome, Continue):
        step = c.wizard.get_step(outcome.next_step)
        answers = c.accumulator.to_form(outcome.record)
        return _render(c, step.template, _page_context(c, step.template, answers))

    if isinstance(outcome, EarlyExit):
        context = _page_context(c, COMPLETE_PAGE, {})
        context.update({"end_journey": True, "message_id": outcome.reason_code})
        return _render(c, COMPLETE_PAGE, context)

    if isinstance(outcome, Completed):
        context = _page_context(c, COMPLETE_PAGE, {})
        context.update(
            {
                "end_journey": False,
                "queued": outcome.delivery.queued,
                "email_sent": outcome.delivery.email_sent,
            }
        )
        return _render(c, COMPLETE_PAGE, context)

    raise TypeError(f"Unexpected wizard outcome: {type(outcome).__name__}")


def _register_step_route(app: FastAPI, c: WizardComponents, step_id: str) -> None:
    async def post_step(request: Request):
        form = await request.form()
        raw = _multi_dict(form.multi_items())
        outcome = await run_in_threadpool(c.controller.submit, step_id, raw)
        return _respond(c, outcome)

    app.add_api_route(f"/{step_id}", post_step, methods=["POST"], name=f"submit_{step_id}")


def _add_https_redirect(app: FastAPI) -> None:
    @app.middleware("http")
    async def https_redirect(request: Request, call_next):
        if request.url.scheme != "https" and request.headers.get("x-forwarded-proto") != "https":
            host = request.headers.get("host", request.url.netloc)
            target = f"https://{host}{request.url.path}"
            if request.url.query:
                target = f"{target}?{request.url.query}"
            return RedirectResponse(target, status_code=302)
        return await call_next(request)


def create_app(config: Optional[AppConfig] = None, **collaborators: Any) -> FastAPI:
    """
    Build the wizard application.

    Collaborators (wizard, http_client, notifier, outbox, token_verifier,
    renderer, clock, logger) default to the real adapters built from config.
    """
    config = config or AppConfig.from_env()
    c = build_components(config, **collaborators)

    app = FastAPI(
        title="Resident Support Requests",
        description="Request support during coronavirus",
        version="1.0.0",
    )
    app.state.components = c

    if config.enforce_https:
        _add_https_redirect(app)
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.mount("/public", StaticFiles(directory=str(config.public_dir), check_dir=False), name="public")

    @app.exception_handler(UnknownStepError)
    async def unknown_step(_request: Request, exc: UnknownStepError):
        return PlainTextResponse(str(exc), status_code=404)

    @app.get("/healthz", response_model=HealthResponse)
    def health() -> HealthResponse:
        return HealthResponse(
            status="ok",
            service="resident-support",
            wizard_id=c.wizard.meta.id,
            wizard_version=c.wizard.meta.version,
            steps=len(c.wizard.steps),
            outbox_pending=len(c.outbox.pending()),
        )

    def landing(request: Request) -> HTMLResponse:
        decoded = c.codec.decode(request.query_params.multi_items())
        page = c.wizard.first_step.template
        context = _page_context(c, page, decoded.answers, decoded.errors, decoded.form_error)

        token = request.cookies.get(config.token_name) if config.token_name else None
        auth = c.authoriser.authorise(token)
        if auth is not None:
            context.update(auth.to_context())
        context["returnURL"] = f"{request.url.scheme}://{request.url.hostname}"
        return _render(c, page, context)

    @app.get("/", response_class=HTMLResponse)
    def index(request: Request) -> HTMLResponse:
        return landing(request)

    for step in c.wizard.steps:
        _register_step_route(app, c, step.id)

    @app.get("/{page}", response_class=HTMLResponse)
    def show_page(page: str, request: Request) -> HTMLResponse:
        if not _PAGE_ID_RE.match(page) or not c.renderer.exists(page):
            raise HTTPException(status_code=404, detail=f"Page not found: {page}")
        if page == c.wizard.first_step.template:
            return landing(request)

        decoded = c.codec.decode(request.query_params.multi_items())
        return _render(c, page, _page_context(c, page, decoded.answers, decoded.errors, decoded.form_error))

    return app


app = create_app()
