# Quick reference commands (run from repo root). These are comments only; copy/paste as needed.

# Install dependencies (test extra includes httpx for TestClient)
# python -m pip install -e ".[test]"

# Optional: headless browser backend for JavaScript-heavy shops (SCRAPER_BACKEND=browser)
# python -m playwright install chromium

# Run the full test suite
# python -m pytest

# Run focused test files
# python -m pytest tests/test_api_teas.py
# python -m pytest tests/test_auth.py
# python -m pytest tests/test_security_headers.py
# python -m pytest tests/test_extract.py tests/test_url_guard.py tests/test_fetch.py
# python -m pytest tests/test_store.py tests/test_schema.py
# python -m pytest tests/test_dashboard.py tests/test_add_tea.py

# Create the admin password hash for .env (ADMIN_PASSWORD_HASH=...)
# python scripts/hash_password.py
# python scripts/hash_password.py "my secret password"

# Start the app locally (with env vars loaded)
# python main.py
# python -m dotenv run -- python -m uvicorn app.api:app --reload --port 3001

# Inspect the tea collection file
# python scripts/teas_shell.py               # list teas
# python scripts/teas_shell.py --check       # validate every record
# python scripts/teas_shell.py 1700000000000 # show one tea as YAML

# Log in and call the API
# curl -s -X POST localhost:3001/api/auth/login -H "Content-Type: application/json" -d '{"username":"admin","password":"..."}'
# curl -s localhost:3001/api/teas -H "Authorization: Bearer $TOKEN"
# curl -s localhost:3001/api/teas/export -H "Authorization: Bearer $TOKEN" -o teas-backup.yaml
