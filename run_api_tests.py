"""Manual smoke run against a live server (uvicorn src.main:app --port 8000).

Prints every response; nothing is asserted.
"""

import json
import urllib.error
import urllib.request
import uuid

BASE = "http://localhost:8000/api/v1"


def call(method, path, body=None):
    data = json.dumps(body).encode() if body is not None else None
    req = urllib.request.Request(
        f"{BASE}{path}",
        data=data,
        method=method,
        headers={"Content-Type": "application/json"},
    )
    try:
        with urllib.request.urlopen(req) as r:
            raw = r.read()
            return {"status": r.status, "body": json.loads(raw) if raw else None}
    except urllib.error.HTTPError as e:
        return {"status": e.code, "body": json.loads(e.read())}


def section(title):
    print(f"\n{'='*60}")
    print(f"### {title} ###")
    print('='*60)


def label(name):
    print(f"\n--- {name} ---")


def out(data):
    print(json.dumps(data, indent=2, ensure_ascii=False))


tag = uuid.uuid4().hex[:6]
ann = {"name": "Ann", "email": f"ann_{tag}@x.com", "password": "secret123"}

# ── U1 Create ──────────────────────────────────────────────────
section("U1 — CREATE")

label("U1-1: List users (warms users:all)")
out(call("GET", "/users"))

label("U1-2: Create Ann")
r = call("POST", "/users", ann)
out(r)
ann_id = (r["body"].get("data") or {}).get("id")

label("U1-3: Create duplicate email (expect 422)")
out(call("POST", "/users", {**ann, "name": "Other"}))

label("U1-4: Create with short password (expect 422)")
out(call("POST", "/users", {**ann, "email": f"short_{tag}@x.com", "password": "short"}))

label("U1-5: List users (must include Ann)")
out(call("GET", "/users"))

# ── U2 Read ────────────────────────────────────────────────────
section("U2 — READ")

label("U2-1: Get Ann")
out(call("GET", f"/users/{ann_id}"))

label("U2-2: Get non-existent user (expect 404)")
out(call("GET", "/users/999999999"))

# ── U3 Update ──────────────────────────────────────────────────
section("U3 — UPDATE")

label("U3-1: Change Ann's email")
out(call("PUT", f"/users/{ann_id}", {"email": f"ann2_{tag}@x.com"}))

label("U3-2: Patch Ann's name")
out(call("PATCH", f"/users/{ann_id}", {"name": "Annie"}))

label("U3-3: Update non-existent user (expect 404)")
out(call("PUT", "/users/999999999", {"name": "Ghost"}))

label("U3-4: Delete (declared no-op, expect 204)")
out(call("DELETE", f"/users/{ann_id}"))

print("\n\n=== SMOKE RUN COMPLETE ===\n")
