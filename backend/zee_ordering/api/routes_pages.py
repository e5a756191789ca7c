from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse

from zee_ordering.config import VERSION, Settings, get_settings

router = APIRouter(tags=["pages"])

LOGIN_PAGE = """<!doctype html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <title>{brand} | Admin login</title>
  <style>
    body {{ font-family: Helvetica, Arial, sans-serif; background: #f8fafc; color: #0f172a; }}
    form {{ max-width: 320px; margin: 64px auto 16px; display: grid; gap: 8px; }}
    input, button {{ padding: 8px; font-size: 14px; }}
    button {{ background: #0f172a; color: #fff; border: 0; }}
    p {{ max-width: 320px; margin: 0 auto; font-size: 12px; color: #475569; }}
  </style>
</head>
<body>
  <form id="login">
    <h1>{brand}</h1>
    <input name="email" type="email" placeholder="Admin email" autocomplete="username" required>
    <input name="password" type="password" placeholder="Password" autocomplete="current-password" required>
    <button type="submit">Sign in</button>
  </form>
  <form id="forgot">
    <input name="email" type="email" placeholder="Owner email" required>
    <button type="submit">Send reminder to owner</button>
  </form>
  <p id="status"></p>
  <script>
    const status = document.getElementById("status");
    async function post(url, body) {{
      const res = await fetch(url, {{
        method: "POST",
        headers: {{"content-type": "application/json"}},
        body: JSON.stringify(body),
      }});
      const data = await res.json().catch(() => ({{}}));
      return [res.ok, data];
    }}
    document.getElementById("login").addEventListener("submit", async (e) => {{
      e.preventDefault();
      const f = new FormData(e.target);
      const [ok, data] = await post("/api/auth/login", {{email: f.get("email"), password: f.get("password")}});
      if (ok) {{
        const next = new URLSearchParams(location.search).get("next") || "/";
        location.assign(next.startsWith("/") ? next : "/");
      }} else {{
        status.textContent = data.detail || "Login failed.";
      }}
    }});
    document.getElementById("forgot").addEventListener("submit", async (e) => {{
      e.preventDefault();
      const f = new FormData(e.target);
      const [ok, data] = await post("/api/auth/forgot", {{email: f.get("email")}});
      status.textContent = ok ? "Reminder sent to the owner." : (data.detail || "Request failed.");
    }});
  </script>
</body>
</html>
"""


@router.get("/login", response_class=HTMLResponse, include_in_schema=False)
def login_page(settings: Settings = Depends(get_settings)):
    return LOGIN_PAGE.format(brand=settings.BRAND_NAME)


@router.get("/", summary="Service index")
def index(settings: Settings = Depends(get_settings)):
    return {"name": settings.BRAND_NAME, "version": VERSION, "status": "ok"}
