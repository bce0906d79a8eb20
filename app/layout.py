"""
Shared HTML layout and styling helpers.
"""
import html

from fastapi.responses import HTMLResponse


def esc(value) -> str:
    """Escape anything headed for HTML text or a quoted attribute."""
    return html.escape("" if value is None else str(value), quote=True)


def render_page(title: str, body: str, user: dict | None = None, status_code: int = 200) -> HTMLResponse:
    """
    Shared layout: dark background, nav bar, and the 'signed in as' line.
    """
    if user:
        nav_links = """
          <a href="/">🍵 Collection</a>
          <a href="/teas/new">＋ Add tea</a>
          <a href="/api/teas/export">⬇ Export</a>
          <a href="/logout">Logout</a>
        """
        signed_in_text = f"Signed in as <strong>{esc(user.get('username'))}</strong>"
    else:
        nav_links = """
          <a href="/login">Login</a>
        """
        signed_in_text = "Not signed in"

    page = f"""
    <!DOCTYPE html>
    <html>
      <head>
        <meta charset="utf-8" />
        <meta name="viewport" content="width=device-width, initial-scale=1" />
        <title>{esc(title)}</title>
        <style>
          :root {{
            color-scheme: dark;
          }}
          * {{
            box-sizing: border-box;
          }}
          body {{
            font-family: system-ui, -apple-system, BlinkMacSystemFont, "Segoe UI", sans-serif;
            margin: 0;
            padding: 0;
            background: #0c0f0a;
            color: #e7e5e4;
          }}
          .page {{
            max-width: 1200px;
            margin: 0 auto;
            padding: 1.5rem 1rem 3rem;
          }}
          header {{
            display: flex;
            justify-content: space-between;
            align-items: center;
            flex-wrap: wrap;
            gap: 0.75rem;
            margin-bottom: 1.5rem;
            padding: 0.75rem 1rem;
            background: linear-gradient(90deg, rgba(132,204,22,0.10), rgba(217,119,6,0.08));
            border: 1px solid #292524;
            border-radius: 0.75rem;
          }}
          header h1 {{
            font-size: 1.4rem;
            margin: 0;
          }}
          nav {{
            display: flex;
            gap: 0.6rem;
            align-items: center;
          }}
          nav a {{
            text-decoration: none;
            color: #e7e5e4;
            font-size: 0.95rem;
            padding: 6px 10px;
            border-radius: 8px;
            background: rgba(255,255,255,0.04);
            border: 1px solid transparent;
          }}
          nav a:hover {{
            color: #a3e635;
            border-color: #292524;
          }}
          .signed-in {{
            font-size: 0.8rem;
            color: #a8a29e;
            margin-top: 0.25rem;
          }}
          a {{
            color: #a3e635;
          }}
          .card {{
            border-radius: 0.75rem;
            border: 1px solid #292524;
            padding: 1rem 1.25rem;
            background: #11150e;
          }}
          .form-card {{
            max-width: 720px;
            margin: 0 auto;
          }}
          label {{
            display: block;
            margin-top: 1rem;
            font-size: 0.95rem;
          }}
          input, select {{
            width: 100%;
            padding: 0.5rem;
            margin-top: 0.25rem;
            border-radius: 0.375rem;
            border: 1px solid #44403c;
            background: #0c0f0a;
            color: #e7e5e4;
          }}
          button, .btn {{
            padding: 0.5rem 1rem;
            border-radius: 0.5rem;
            border: none;
            background: #84cc16;
            color: #1a2e05;
            font-weight: 600;
            cursor: pointer;
            text-decoration: none;
            display: inline-block;
          }}
          button:hover, .btn:hover {{
            background: #65a30d;
          }}
          button.secondary {{
            background: #292524;
            color: #e7e5e4;
          }}
          button.danger {{
            background: #f87171;
            color: #1c1917;
          }}
          .muted {{
            color: #a8a29e;
            font-size: 0.85rem;
          }}
          .error {{
            color: #f87171;
          }}
          .toolbar {{
            display: flex;
            gap: 0.5rem;
            flex-wrap: wrap;
            align-items: center;
            margin-bottom: 0.75rem;
          }}
          .toolbar input[type="search"] {{
            max-width: 320px;
            margin-top: 0;
          }}
          .toolbar select {{
            max-width: 240px;
            margin-top: 0;
          }}
          .chip {{
            display: inline-block;
            padding: 4px 10px;
            border-radius: 999px;
            border: 1px solid #44403c;
            color: #e7e5e4;
            text-decoration: none;
            font-size: 0.85rem;
          }}
          .chip.active {{
            background: #84cc16;
            color: #1a2e05;
            border-color: #84cc16;
          }}
          .main-layout {{
            display: flex;
            gap: 1rem;
            align-items: flex-start;
          }}
          .tea-grid {{
            flex: 1;
            display: grid;
            grid-template-columns: repeat(auto-fill, minmax(220px, 1fr));
            gap: 1rem;
          }}
          .tea-card {{
            border: 1px solid #292524;
            border-radius: 0.75rem;
            overflow: hidden;
            background: #11150e;
            color: inherit;
            text-decoration: none;
            display: block;
          }}
          .tea-card.selected {{
            border-color: #84cc16;
          }}
          .tea-card img {{
            width: 100%;
            height: 160px;
            object-fit: cover;
            background: #1c1917;
          }}
          .tea-content {{
            padding: 0.6rem 0.8rem 0.8rem;
          }}
          .tea-content h2 {{
            font-size: 1rem;
            margin: 0 0 0.35rem;
          }}
          .tea-meta span, .tea-brewing-info span {{
            font-size: 0.75rem;
            margin-right: 0.35rem;
          }}
          .tea-caffeine.low {{ color: #a3e635; }}
          .tea-caffeine.medium {{ color: #fbbf24; }}
          .tea-caffeine.high {{ color: #f87171; }}
          .side-panel {{
            width: 340px;
            flex-shrink: 0;
            position: sticky;
            top: 1rem;
          }}
          .side-panel img {{
            width: 100%;
            border-radius: 0.5rem;
          }}
          .info-row {{
            display: flex;
            justify-content: space-between;
            font-size: 0.9rem;
            padding: 0.2rem 0;
          }}
          .stars {{
            display: flex;
            gap: 0.25rem;
            flex-wrap: wrap;
          }}
          .stars button {{
            padding: 0.25rem 0.5rem;
            background: #292524;
            color: #e7e5e4;
          }}
          .stars button.filled {{
            background: #fbbf24;
            color: #1c1917;
          }}
          .steep-times {{
            display: flex;
            gap: 0.4rem;
            flex-wrap: wrap;
            margin-top: 0.5rem;
          }}
          .steep-time-btn.used {{
            background: #44403c;
            color: #a8a29e;
          }}
          .empty-state {{
            flex: 1;
            text-align: center;
            padding: 3rem 1rem;
          }}
          .timer-overlay {{
            position: fixed;
            bottom: 1.25rem;
            left: 50%;
            transform: translateX(-50%);
            display: flex;
            gap: 1rem;
            align-items: center;
            padding: 0.75rem 1.25rem;
            border-radius: 999px;
            background: #1c1917;
            border: 1px solid #84cc16;
            box-shadow: 0 10px 30px rgba(0,0,0,0.5);
            font-size: 1.1rem;
          }}
          .timer-overlay[hidden] {{
            display: none;
          }}
          .timer-clock {{
            font-variant-numeric: tabular-nums;
            font-weight: 700;
          }}
          @media (max-width: 800px) {{
            .main-layout {{ flex-direction: column; }}
            .side-panel {{ width: 100%; position: static; }}
          }}
        </style>
      </head>
      <body>
        <div class="page">
          <header>
            <div>
              <h1>{esc(title)}</h1>
              <div class="signed-in">{signed_in_text}</div>
            </div>
            <nav>
              {nav_links}
            </nav>
          </header>
          <main>
            {body}
          </main>
        </div>
      </body>
    </html>
    """
    return HTMLResponse(content=page, status_code=status_code)
