"""HTML builders for the dashboard and the sign-in pages."""

from __future__ import annotations

import html
import json
from datetime import datetime
from typing import Mapping, Sequence
from urllib.parse import urlencode

from scrapewatch.dashboard import get_dashboard_config
from scrapewatch.pipeline import ALL_SOURCES, DashboardView, format_clock, format_table_datetime

APP_TITLE = "MONITORING DASHBOARD"
SYSTEM_VERSION = "2.4.5"


def _attr(value: object) -> str:
    return html.escape(str(value), quote=True)


def _layout(title: str, content: str, *, session: str, narrow: bool = False) -> str:
    """Wrap page content in the shared document shell."""
    config_json = json.dumps(get_dashboard_config(), separators=(",", ":"))
    container = "container narrow" if narrow else "container"
    return "\n".join(
        [
            "<!DOCTYPE html>",
            '<html lang="en">',
            "<head>",
            '<meta charset="utf-8" />',
            '<meta name="viewport" content="width=device-width, initial-scale=1" />',
            f"<title>{html.escape(title)} | {APP_TITLE.title()}</title>",
            '<link rel="stylesheet" href="/static/design-tokens.css" />',
            "</head>",
            f'<body data-session="{_attr(session)}" data-config="{_attr(config_json)}">',
            '<canvas id="particles"></canvas>',
            f'<div class="{container}">',
            content,
            "</div>",
            '<script src="/static/dashboard.js"></script>',
            "</body>",
            "</html>",
        ]
    )


def _footer(year: int) -> str:
    return (
        "<footer>"
        f"<div>&copy; {year} {APP_TITLE}. All rights reserved.</div>"
        f"<div>SYSTEM VERSION {SYSTEM_VERSION}</div>"
        "</footer>"
    )


def _auth_header(subtitle: str) -> str:
    return (
        '<div style="text-align:center;margin-bottom:2rem">'
        f'<h1 class="brand">{APP_TITLE}</h1>'
        f'<p class="label">{html.escape(subtitle)}</p>'
        "</div>"
    )


def render_sign_in(error: str | None = None, email: str = "", session: str = "anonymous") -> str:
    """Sign-in form, with an inline error after a rejected attempt.

    Args:
        error: Message shown above the fields
        email: Value kept in the email field
        session: Session state the client script mirrors ("authenticated" or "anonymous")
    """
    parts = [
        _auth_header("Access your monitoring dashboard"),
        '<div class="card">',
        '<h2 class="brand" style="text-align:center">Sign In</h2>',
        '<p class="label" style="text-align:center">Enter your credentials to access the system</p>',
        '<form method="post" action="/sign-in">',
    ]
    if error:
        parts.append(f'<div class="form-error" role="alert">{html.escape(error)}</div>')
    parts += [
        '<div class="field"><label for="email">EMAIL</label>',
        f'<input id="email" name="email" type="email" placeholder="name@example.com" required value="{_attr(email)}" /></div>',
        '<div class="field"><label for="password">PASSWORD</label>',
        '<input id="password" name="password" type="password" required /></div>',
        '<div class="field"><label><input type="checkbox" name="remember_me" value="true" /> Remember me</label></div>',
        '<button class="button primary" type="submit">Sign In</button>',
        "</form>",
        '<p class="notice"><a class="brand" href="/forgot-password">Forgot password?</a> &middot; '
        '<a class="brand" href="/sign-up">Sign up</a></p>',
        "</div>",
        _footer(datetime.now().year),
    ]
    return _layout("Sign In", "\n".join(parts), session=session, narrow=True)


def render_sign_up(
    errors: Mapping[str, str] | None = None,
    name: str = "",
    email: str = "",
    session: str = "anonymous",
) -> str:
    """Registration form with per-field password errors."""
    errors = errors or {}

    def field_error(key: str) -> str:
        message = errors.get(key)
        return f'<div class="field-error">{html.escape(message)}</div>' if message else ""

    parts = [
        _auth_header("Create your monitoring account"),
        '<div class="card">',
        '<h2 class="brand" style="text-align:center">Sign Up</h2>',
        '<form method="post" action="/sign-up">',
        '<div class="field"><label for="name">NAME</label>',
        f'<input id="name" name="name" type="text" required value="{_attr(name)}" /></div>',
        '<div class="field"><label for="email">EMAIL</label>',
        f'<input id="email" name="email" type="email" required value="{_attr(email)}" /></div>',
        '<div class="field"><label for="password">PASSWORD</label>',
        '<input id="password" name="password" type="password" required />',
        field_error("password"),
        "</div>",
        '<div class="field"><label for="confirm_password">CONFIRM PASSWORD</label>',
        '<input id="confirm_password" name="confirm_password" type="password" required />',
        field_error("confirm_password"),
        "</div>",
        '<button class="button primary" type="submit">Create Account</button>',
        "</form>",
        '<p class="notice">Already have an account? <a class="brand" href="/sign-in">Sign in</a></p>',
        "</div>",
        _footer(datetime.now().year),
    ]
    return _layout("Sign Up", "\n".join(parts), session=session, narrow=True)


def render_forgot_password(submitted: bool = False, email: str = "") -> str:
    """Password reset request form, or its confirmation."""
    parts = [_auth_header("Reset your password"), '<div class="card">']
    if submitted:
        parts += [
            '<h2 class="brand" style="text-align:center">Check your email for reset instructions</h2>',
            f"<p class=\"notice\">We've sent a password reset link to <strong>{html.escape(email)}</strong></p>",
        ]
    else:
        parts += [
            '<h2 class="brand" style="text-align:center">Forgot Password</h2>',
            '<form method="post" action="/forgot-password">',
            '<div class="field"><label for="email">EMAIL</label>',
            f'<input id="email" name="email" type="email" required value="{_attr(email)}" /></div>',
            '<button class="button primary" type="submit">Send Reset Link</button>',
            "</form>",
        ]
    parts += [
        '<p class="notice"><a class="brand" href="/sign-in">Back to sign in</a></p>',
        "</div>",
        _footer(datetime.now().year),
    ]
    # The reset page stays reachable while signed in, so the flag is left alone.
    return _layout("Forgot Password", "\n".join(parts), session="unchanged", narrow=True)


def dashboard_url(source: str = ALL_SOURCES, page: int | None = None, page_size: int | None = None, **extra: object) -> str:
    """Build a dashboard link; omitting `page` lands on page 1."""
    params: dict[str, object] = {}
    if source != ALL_SOURCES:
        params["source"] = source
    if page is not None and page > 1:
        params["page"] = page
    if page_size is not None:
        params["page_size"] = page_size
    params.update(extra)
    query = urlencode(params)
    return f"/dashboard?{query}" if query else "/dashboard"


def _select(name: str, options: Sequence[object], selected: object) -> str:
    rendered = []
    for option in options:
        marker = " selected" if option == selected else ""
        rendered.append(f'<option value="{_attr(option)}"{marker}>{html.escape(str(option))}</option>')
    return f'<select name="{name}" onchange="this.form.submit()">{"".join(rendered)}</select>'


def _records_rows(view: DashboardView) -> list[str]:
    if not view.page.items:
        return ['<tr><td class="empty" colspan="5">No records found</td></tr>']
    rows = []
    for record in view.page.items:
        badge = '<span class="badge ok">True</span>' if record.success_status else '<span class="badge fail">False</span>'
        rows.append(
            f'<tr data-record-id="{_attr(record.id)}">'
            f"<td>{format_table_datetime(record.timestamp)}</td>"
            f"<td>{html.escape(record.source)}</td>"
            f'<td class="count">{record.total_records}</td>'
            f"<td>{badge}</td>"
            f'<td class="error">{html.escape(record.error_message)}</td>'
            "</tr>"
        )
    return rows


def _pager_button(label: str, href: str, enabled: bool, aria: str) -> str:
    if enabled:
        return f'<a class="button" href="{_attr(href)}" aria-label="{aria}">{label}</a>'
    return f'<span class="button" aria-disabled="true" aria-label="{aria}">{label}</span>'


def render_dashboard(
    view: DashboardView,
    *,
    live: bool,
    page_size_options: Sequence[int],
    now: datetime,
) -> str:
    """The dashboard: summary cards, source selector and the records table."""
    page = view.page
    summary = view.summary
    source = view.selected_source

    prev_href = dashboard_url(source, page.number - 1, page.page_size)
    next_href = dashboard_url(source, page.number + 1, page.page_size)
    refresh_href = dashboard_url(source, None, page.page_size, refresh="true")
    status_badge = (
        '<span class="badge live">LIVE</span>' if live else '<span class="badge sample">SAMPLE DATA</span>'
    )

    parts = [
        '<header class="top">',
        f'<span class="brand" style="font-size:1.25rem">{APP_TITLE}</span>',
        "<div>",
        f'<a class="button" href="{_attr(refresh_href)}">Refresh</a>',
        '<form method="post" action="/sign-out" style="display:inline">'
        '<button class="button danger" type="submit">Sign Out</button></form>',
        "</div>",
        "</header>",
        '<div class="grid three">',
        '<div class="card"><div class="label">Last Run Success</div>'
        f'<div class="value" id="last-run-success">{"True" if summary.last_run_success else "False"}</div></div>',
        '<div class="card"><div class="label">Last Run Date</div>'
        f'<div class="value" id="last-run-date">{html.escape(summary.last_run_date)}</div></div>',
        '<div class="card"><div class="label">Total Records Fetched</div>'
        f'<div class="value" id="total-records">{summary.total_records}</div></div>',
        "</div>",
        '<div class="grid two">',
        '<div class="card"><div class="label">Date/Time</div>'
        f'<div class="value" id="clock">{html.escape(format_clock(now))}</div></div>',
        '<div class="card"><div class="label">Source</div>',
        '<form method="get" action="/dashboard">',
        _select("source", view.sources, source),
        f'<input type="hidden" name="page_size" value="{page.page_size}" />',
        "</form></div>",
        "</div>",
        '<div class="card">',
        f'<div class="pager" style="padding-top:0"><strong>Monitoring Records</strong>{status_badge}</div>',
        "<table>",
        "<thead><tr><th>Date/Time</th><th>Source</th><th>Total Records</th>"
        "<th>Success Status</th><th>Error Messages</th></tr></thead>",
        "<tbody>",
        *_records_rows(view),
        "</tbody>",
        "</table>",
        '<div class="pager">',
        '<form method="get" action="/dashboard"><span class="label">Rows per page:</span> ',
        f'<input type="hidden" name="source" value="{_attr(source)}" />',
        _select("page_size", list(page_size_options), page.page_size),
        "</form>",
        "<div>",
        f'<span class="label" id="page-label">{page.label}</span> ',
        _pager_button("&lsaquo;", prev_href, page.has_previous, "Previous page"),
        _pager_button("&rsaquo;", next_href, page.has_next, "Next page"),
        "</div>",
        "</div>",
        "</div>",
    ]
    return _layout("Dashboard", "\n".join(parts), session="authenticated")


__all__ = [
    "dashboard_url",
    "render_dashboard",
    "render_forgot_password",
    "render_sign_in",
    "render_sign_up",
]
