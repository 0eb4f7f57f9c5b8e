"""HTML page routes: login, role home pages, and the root redirect.

# ─── PAGE ARCHITECTURE ──────────────────────────────────────────────
#
# Pages are served as inline HTML (no template files) to keep the
# front end self-contained.  The login page talks to the JSON API in
# routes.py with fetch(); home pages are rendered server-side from the
# session cookie.
#
# Endpoints:
#   GET /           : 303 to /login
#   GET /login      : instructor / EM login with forgot-PIN flow
#   GET /instructor : instructor home (gated to INSTRUCTOR)
#   GET /em         : EM home with the login-change form (gated to EM)
#
# AccessGateMiddleware has already redirected unauthorised visitors by
# the time a home handler runs; the handlers still re-check the cookie
# and send strays back to /login.
# ─────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

from html import escape

from fastapi import APIRouter, Request
from starlette.responses import HTMLResponse, RedirectResponse, Response

from src.api.session_cookie import SessionCookie
from src.models.auth import AuthUser, UserRole
from src.utils.errors import ConfigurationError

pages_router = APIRouter(include_in_schema=False)


# ─── Shared styling ──────────────────────────────────────────────────

_STYLE = """\
  <style>
    *, *::before, *::after { margin: 0; padding: 0; box-sizing: border-box; }
    body {
      font-family: system-ui, -apple-system, sans-serif;
      background: #f4f5f7;
      color: #1f2430;
      min-height: 100vh;
      display: flex;
      align-items: center;
      justify-content: center;
    }
    .card {
      background: #fff;
      border: 1px solid #dde1e7;
      border-radius: 12px;
      padding: 2.5rem 2rem;
      width: 100%;
      max-width: 400px;
    }
    h1 { font-size: 1.4rem; margin-bottom: 1.25rem; text-align: center; }
    .tabs { display: flex; gap: 0.5rem; margin-bottom: 1.25rem; }
    .tab {
      flex: 1;
      padding: 0.6rem;
      border: 1px solid #dde1e7;
      border-radius: 8px;
      background: #f4f5f7;
      cursor: pointer;
      font: inherit;
    }
    .tab.active { background: #2563eb; border-color: #2563eb; color: #fff; }
    input {
      width: 100%;
      padding: 0.7rem 0.9rem;
      margin-bottom: 0.75rem;
      border: 1px solid #cfd4dc;
      border-radius: 8px;
      font: inherit;
    }
    button.primary {
      width: 100%;
      padding: 0.7rem;
      background: #2563eb;
      color: #fff;
      border: none;
      border-radius: 8px;
      font: inherit;
      cursor: pointer;
    }
    button.primary:disabled { opacity: 0.5; cursor: not-allowed; }
    .link { display: block; margin-top: 1rem; text-align: center; color: #2563eb; cursor: pointer; font-size: 0.9rem; }
    .message { margin-top: 1rem; min-height: 1.2em; font-size: 0.9rem; text-align: center; }
    .message.error { color: #b42318; }
    .message.ok { color: #067647; }
    .hidden { display: none; }
    dl { display: grid; grid-template-columns: max-content 1fr; gap: 0.4rem 1rem; margin-bottom: 1.5rem; }
    dt { color: #667085; }
  </style>
"""


# ─── Login page (inline HTML) ────────────────────────────────────────

_LOGIN_HTML = (
    """\
<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>Instructor Hub: Sign in</title>
"""
    + _STYLE
    + """\
</head>
<body>
  <div class="card">
    <h1>Instructor Hub</h1>

    <section id="login-panel">
      <div class="tabs">
        <button type="button" class="tab active" data-role="INSTRUCTOR">Instructor</button>
        <button type="button" class="tab" data-role="EM">EM</button>
      </div>
      <form id="login-form">
        <input id="login-name" placeholder="Name" autocomplete="name" class="hidden">
        <input id="login-email" type="email" placeholder="Email" autocomplete="email">
        <input id="login-pin" type="password" placeholder="PIN" autocomplete="current-password">
        <button type="submit" class="primary" id="login-btn">Sign in</button>
      </form>
      <a class="link" id="forgot-link">Forgot your PIN?</a>
    </section>

    <section id="recovery-panel" class="hidden">
      <form id="request-form">
        <input id="recovery-email" type="email" placeholder="Account email">
        <button type="submit" class="primary">Send verification code</button>
      </form>
      <form id="reset-form" class="hidden">
        <input id="recovery-code" inputmode="numeric" placeholder="6-digit code">
        <input id="recovery-pin" type="password" placeholder="New PIN">
        <button type="submit" class="primary">Change PIN</button>
      </form>
      <a class="link" id="back-link">Back to sign in</a>
    </section>

    <div class="message" id="message"></div>
  </div>
  <script>
    const $ = (id) => document.getElementById(id);
    const prefix = window.location.pathname.replace(/\\/login\\/?$/, '');
    let role = 'INSTRUCTOR';

    function show(text, ok) {
      $('message').textContent = text || '';
      $('message').className = 'message ' + (ok ? 'ok' : 'error');
    }

    async function post(path, body) {
      const resp = await fetch(prefix + path, {
        method: 'POST',
        headers: { 'Content-Type': 'application/json' },
        body: JSON.stringify(body),
      });
      const data = await resp.json().catch(() => ({}));
      return { ok: resp.ok, data };
    }

    document.querySelectorAll('.tab').forEach((tab) => {
      tab.addEventListener('click', () => {
        document.querySelectorAll('.tab').forEach((t) => t.classList.remove('active'));
        tab.classList.add('active');
        role = tab.dataset.role;
        $('login-name').classList.toggle('hidden', role !== 'EM');
        $('login-email').classList.toggle('hidden', role === 'EM');
        $('forgot-link').classList.toggle('hidden', role === 'EM');
        show('');
      });
    });

    $('login-form').addEventListener('submit', async (e) => {
      e.preventDefault();
      show('');
      $('login-btn').disabled = true;
      try {
        const { ok, data } = await post('/api/auth/login', {
          role,
          name: $('login-name').value,
          email: $('login-email').value,
          pinCode: $('login-pin').value,
        });
        if (ok && data.success) {
          window.location.href = prefix + (data.role === 'EM' ? '/em' : '/instructor');
        } else {
          show(data.error || 'Sign in failed');
        }
      } catch (err) {
        show('Connection error');
      } finally {
        $('login-btn').disabled = false;
      }
    });

    $('forgot-link').addEventListener('click', () => {
      $('login-panel').classList.add('hidden');
      $('recovery-panel').classList.remove('hidden');
      $('recovery-email').value = $('login-email').value;
      show('');
    });

    $('back-link').addEventListener('click', () => {
      $('recovery-panel').classList.add('hidden');
      $('reset-form').classList.add('hidden');
      $('login-panel').classList.remove('hidden');
      show('');
    });

    $('request-form').addEventListener('submit', async (e) => {
      e.preventDefault();
      const { ok, data } = await post('/api/instructor/request-pin-reset', {
        email: $('recovery-email').value,
      });
      show(ok ? data.message : data.error, ok);
      if (ok) $('reset-form').classList.remove('hidden');
    });

    $('reset-form').addEventListener('submit', async (e) => {
      e.preventDefault();
      const { ok, data } = await post('/api/instructor/reset-pin', {
        email: $('recovery-email').value,
        verificationCode: $('recovery-code').value,
        newPinCode: $('recovery-pin').value,
      });
      if (ok) $('back-link').click();
      show(ok ? data.message : data.error, ok);
    });
  </script>
</body>
</html>
"""
)


# ─── Home pages ──────────────────────────────────────────────────────

_LABELS = {"name": "Name", "email": "Email", "mobile": "Mobile", "fee": "Fee"}

_HOME_TEMPLATE = (
    """\
<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>Instructor Hub: {title}</title>
"""
    + _STYLE.replace("{", "{{").replace("}", "}}")
    + """\
</head>
<body>
  <div class="card">
    <h1>{title}</h1>
    <dl>
{rows}
    </dl>
{extra}
    <button type="button" class="primary" id="logout-btn">Sign out</button>
  </div>
  <script>
    const prefix = window.location.pathname.replace(/\\/(instructor|em)\\/?$/, '');
    document.getElementById('logout-btn').addEventListener('click', async () => {{
      await fetch(prefix + '/api/auth/logout', {{ method: 'POST' }});
      window.location.href = prefix + '/login';
    }});
  </script>
</body>
</html>
"""
)


# Inserted into the EM home as a format value, so braces need no escaping.
_EM_CREDENTIALS_FORM = """\
    <form id="em-credentials-form">
      <input id="em-current-pin" type="password" placeholder="Current PIN" autocomplete="current-password">
      <input id="em-new-name" placeholder="New login name" autocomplete="username">
      <input id="em-new-pin" type="password" placeholder="New PIN" autocomplete="new-password">
      <input id="em-new-pin-confirm" type="password" placeholder="Confirm new PIN" autocomplete="new-password">
      <button type="submit" class="primary">Change login</button>
    </form>
    <div class="message" id="em-message"></div>
    <br>
    <script>
      document.getElementById('em-credentials-form').addEventListener('submit', async (event) => {
        event.preventDefault();
        const field = (id) => document.getElementById(id).value.trim();
        const message = document.getElementById('em-message');
        const show = (text, ok) => {
          message.textContent = text || '';
          message.className = 'message ' + (ok ? 'ok' : 'error');
        };
        if (field('em-new-pin') !== field('em-new-pin-confirm')) {
          show('The new PINs do not match.', false);
          return;
        }
        const base = window.location.pathname.replace(/\\/em\\/?$/, '');
        const resp = await fetch(base + '/api/em/update-credentials', {
          method: 'POST',
          headers: { 'Content-Type': 'application/json' },
          body: JSON.stringify({
            currentPassword: field('em-current-pin'),
            newId: field('em-new-name'),
            newPassword: field('em-new-pin'),
          }),
        });
        const data = await resp.json();
        show(resp.ok ? data.message : data.error, resp.ok);
        if (resp.ok) event.target.reset();
      });
    </script>
"""


def _render_home(title: str, user: AuthUser, extra: str = "") -> str:
    rows = "\n".join(
        f"      <dt>{_LABELS.get(key, key)}</dt><dd>{escape(value)}</dd>"
        for key, value in user.public_profile().items()
    )
    return _HOME_TEMPLATE.format(title=escape(title), rows=rows, extra=extra)


def _current_user(request: Request) -> AuthUser | None:
    session_cookie: SessionCookie | None = getattr(request.app.state, "session_cookie", None)
    if session_cookie is None:
        raise ConfigurationError("session_cookie is not initialised")
    return session_cookie.current_user(request)


def _home(request: Request, role: UserRole, title: str, extra: str = "") -> Response:
    user = _current_user(request)
    if user is None or user.role is not role:
        return RedirectResponse(url="/login", status_code=303)
    return HTMLResponse(content=_render_home(title, user, extra))


# ─── Routes ──────────────────────────────────────────────────────────


@pages_router.get("/")
async def root() -> RedirectResponse:
    return RedirectResponse(url="/login", status_code=303)


@pages_router.get("/login", response_class=HTMLResponse)
async def login_page() -> HTMLResponse:
    """Serve the inline HTML login page."""
    return HTMLResponse(content=_LOGIN_HTML)


@pages_router.get("/instructor")
async def instructor_home(request: Request) -> Response:
    return _home(request, UserRole.INSTRUCTOR, "Instructor home")


@pages_router.get("/em")
async def em_home(request: Request) -> Response:
    return _home(request, UserRole.EM, "EM home", _EM_CREDENTIALS_FORM)
