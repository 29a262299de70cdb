"""FastAPI application for the scraper monitoring dashboard."""

from datetime import datetime, timezone
from typing import Annotated

import httpx
from fastapi import Depends, FastAPI, Form, HTTPException, Query, Request
from fastapi.responses import HTMLResponse, JSONResponse, Response
from fastapi.staticfiles import StaticFiles

from scrapewatch import __version__
from scrapewatch.config import Settings, get_settings
from scrapewatch.dashboard import STATIC_DIR, get_dashboard_config
from scrapewatch.dashboard.logging import configure_logging, get_logger
from scrapewatch.dashboard.models import DashboardResponse, HealthResponse, ProxyErrorResponse
from scrapewatch.dashboard.pages import (
    render_dashboard,
    render_forgot_password,
    render_sign_in,
    render_sign_up,
)
from scrapewatch.fetcher import JSON_HEADERS, FetchOutcome, RecordFetcher
from scrapewatch.pipeline import ALL_SOURCES, PAGE_SIZE_OPTIONS, DashboardView, build_view
from scrapewatch.session import (
    DASHBOARD_PATH,
    SIGN_IN_PATH,
    Credentials,
    SessionGate,
    SessionGateMiddleware,
    SessionRequired,
    redirect,
)

logger = get_logger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, PUT, DELETE, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
}

INVALID_CREDENTIALS = "Invalid email or password"
MIN_PASSWORD_LENGTH = 8


def create_app(
    settings: Settings | None = None,
    fetcher: RecordFetcher | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Settings to use instead of the environment
        fetcher: Record fetcher to use instead of one built from settings
        transport: httpx transport for upstream calls (fetcher and proxy)
    """
    settings = settings or get_settings()
    if fetcher is None:
        fetcher = RecordFetcher(
            settings.candidate_endpoints,
            timeout=settings.fetch_timeout,
            transport=transport,
        )

    app = FastAPI(
        title="Scrapewatch Dashboard",
        description="Login-gated monitoring dashboard for scraper run records",
        version=__version__,
    )
    app.state.settings = settings
    app.state.snapshot = None

    gate = SessionGate(Credentials(settings.admin_email, settings.admin_password))
    app.state.gate = gate

    app.add_middleware(SessionGateMiddleware, enabled=settings.route_guard)
    app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")

    page_size_options = sorted({*PAGE_SIZE_OPTIONS, settings.default_page_size})

    def upstream_client() -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=transport, timeout=settings.fetch_timeout)

    async def current_records(refresh: bool) -> FetchOutcome:
        """Latest fetch outcome, fetching anew when asked or when none exists."""
        snapshot: FetchOutcome | None = app.state.snapshot
        if refresh or snapshot is None:
            snapshot = await fetcher.fetch()
            app.state.snapshot = snapshot
        return snapshot

    def page_session(request: Request) -> str:
        """Session state for the client script to mirror into localStorage."""
        return gate.state(request.cookies).value

    def require_session(request: Request) -> None:
        gate.require(request)

    async def dashboard_view(
        request: Request,
        source: str,
        page: int,
        page_size: int,
        refresh: bool,
    ) -> tuple[DashboardView, FetchOutcome]:
        # A bare URL is a page load; anything with parameters is navigation.
        outcome = await current_records(refresh or not request.query_params)
        view = build_view(outcome.records, source=source, page=page, page_size=page_size)
        return view, outcome

    @app.exception_handler(SessionRequired)
    async def session_required_handler(request: Request, exc: SessionRequired) -> Response:
        return redirect(SIGN_IN_PATH)

    # ------------------------------------------------------------------
    # Pages
    # ------------------------------------------------------------------

    @app.get("/", include_in_schema=False)
    async def index():
        """Send visitors to the dashboard (the gate decides from there)."""
        return redirect(DASHBOARD_PATH)

    @app.get("/sign-in", response_class=HTMLResponse)
    async def sign_in_page(request: Request):
        return HTMLResponse(render_sign_in(session=page_session(request)))

    @app.post("/sign-in", response_class=HTMLResponse)
    async def sign_in(
        request: Request,
        email: Annotated[str, Form()] = "",
        password: Annotated[str, Form()] = "",
    ):
        """Check the submitted pair; set the session flag on success."""
        if gate.sign_in(email, password):
            logger.info("Sign-in succeeded for %s", email)
            return gate.grant(redirect(DASHBOARD_PATH))

        logger.info("Sign-in rejected for %s", email)
        return HTMLResponse(render_sign_in(error=INVALID_CREDENTIALS, email=email, session=page_session(request)))

    @app.get("/sign-up", response_class=HTMLResponse)
    async def sign_up_page(request: Request):
        return HTMLResponse(render_sign_up(session=page_session(request)))

    @app.post("/sign-up", response_class=HTMLResponse)
    async def sign_up(
        request: Request,
        name: Annotated[str, Form()] = "",
        email: Annotated[str, Form()] = "",
        password: Annotated[str, Form()] = "",
        confirm_password: Annotated[str, Form()] = "",
    ):
        """Validate the registration form. No account is created."""
        errors: dict[str, str] = {}
        if len(password) < MIN_PASSWORD_LENGTH:
            errors["password"] = f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
        elif password != confirm_password:
            errors["confirm_password"] = "Passwords do not match"

        if errors:
            return HTMLResponse(
                render_sign_up(errors, name=name, email=email, session=page_session(request)),
                status_code=422,
            )
        return redirect(SIGN_IN_PATH)

    @app.get("/forgot-password", response_class=HTMLResponse)
    async def forgot_password_page():
        return HTMLResponse(render_forgot_password())

    @app.post("/forgot-password", response_class=HTMLResponse)
    async def forgot_password(email: Annotated[str, Form()] = ""):
        return HTMLResponse(render_forgot_password(submitted=True, email=email))

    @app.api_route("/sign-out", methods=["GET", "POST"], include_in_schema=False)
    async def sign_out():
        """Clear the session flag and return to the sign-in page."""
        return gate.revoke(redirect(SIGN_IN_PATH))

    @app.get("/dashboard", response_class=HTMLResponse, dependencies=[Depends(require_session)])
    async def dashboard(
        request: Request,
        source: Annotated[str, Query()] = ALL_SOURCES,
        page: Annotated[int, Query()] = 1,
        page_size: Annotated[int | None, Query(ge=1, le=100)] = None,
        refresh: Annotated[bool, Query()] = False,
    ):
        """Render the dashboard for the current source and page."""
        view, outcome = await dashboard_view(
            request, source, page, page_size or settings.default_page_size, refresh
        )
        return HTMLResponse(
            render_dashboard(
                view,
                live=not outcome.used_fallback,
                page_size_options=page_size_options,
                now=datetime.now(),
            )
        )

    # ------------------------------------------------------------------
    # JSON API
    # ------------------------------------------------------------------

    @app.get("/api/dashboard", response_model=DashboardResponse)
    async def dashboard_json(
        request: Request,
        source: Annotated[str, Query()] = ALL_SOURCES,
        page: Annotated[int, Query()] = 1,
        page_size: Annotated[int | None, Query(ge=1, le=100)] = None,
        refresh: Annotated[bool, Query()] = False,
    ):
        """The dashboard view as JSON."""
        if not gate.is_authenticated(request.cookies):
            raise HTTPException(status_code=401, detail="Not signed in")

        view, outcome = await dashboard_view(
            request, source, page, page_size or settings.default_page_size, refresh
        )
        return DashboardResponse(
            summary=view.summary,
            sources=view.sources,
            selected_source=view.selected_source,
            page=view.page.info(),
            records=view.page.items,
            live=not outcome.used_fallback,
            endpoint=outcome.endpoint,
            fetched_at=outcome.fetched_at,
        )

    @app.get("/api/v1/scraping-logs", responses={500: {"model": ProxyErrorResponse}})
    async def proxy_scraping_logs():
        """Pass the backend's record list through, with permissive CORS headers."""
        try:
            async with upstream_client() as client:
                response = await client.get(settings.backend_url, headers=JSON_HEADERS)
                response.raise_for_status()
                data = response.json()
        except (httpx.HTTPError, httpx.InvalidURL, ValueError) as e:
            logger.error("API proxy error: %s", e, exc_info=True)
            return JSONResponse(
                {"error": "Failed to fetch data from backend API"},
                status_code=500,
                headers=CORS_HEADERS,
            )
        return JSONResponse(data, status_code=200, headers=CORS_HEADERS)

    @app.options("/api/v1/scraping-logs", include_in_schema=False)
    async def proxy_scraping_logs_preflight():
        """Answer CORS preflight with headers only."""
        return Response(status_code=200, headers=CORS_HEADERS)

    @app.get("/api/scraping-logs", responses={500: {"model": ProxyErrorResponse}})
    async def forward_scraping_logs():
        """Pass the backend's record list through, keeping its error status."""
        try:
            async with upstream_client() as client:
                response = await client.get(settings.backend_url, headers=JSON_HEADERS)
                if not response.is_success:
                    return JSONResponse(
                        {"error": f"API responded with status: {response.status_code}"},
                        status_code=response.status_code,
                    )
                data = response.json()
        except (httpx.HTTPError, httpx.InvalidURL, ValueError) as e:
            logger.error("Error forwarding scraping logs: %s", e, exc_info=True)
            return JSONResponse({"error": "Failed to fetch data from backend API"}, status_code=500)
        return JSONResponse(data)

    @app.get("/api/health", response_model=HealthResponse)
    async def health_check():
        """Service health check, including whether the backend answers."""
        try:
            async with upstream_client() as client:
                response = await client.get(settings.backend_url, headers=JSON_HEADERS)
            backend_status = "reachable" if response.is_success else "unreachable"
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning("Backend health probe failed: %s", e)
            backend_status = "unreachable"

        return HealthResponse(
            status="healthy" if backend_status == "reachable" else "degraded",
            backend=backend_status,
            timestamp=datetime.now(timezone.utc),
        )

    @app.get("/api/config")
    async def dashboard_config():
        """Client-side configuration (palette, clock, particles)."""
        return get_dashboard_config()

    return app


# Default app instance
app = create_app()


def main() -> None:
    """Run the dashboard with uvicorn."""
    import uvicorn

    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.log_json)
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    main()
