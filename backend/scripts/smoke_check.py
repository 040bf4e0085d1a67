import os
import sys
import httpx

base_url = sys.argv[1] if len(sys.argv) > 1 else "http://localhost:4000"
admin_user = os.getenv("ADMIN_USER", "admin@example.com")
admin_pass = os.getenv("ADMIN_PASS", "445")

resp = httpx.get(f"{base_url}/health", timeout=5)
resp.raise_for_status()
print("health:", resp.json())

resp = httpx.get(f"{base_url}/tables/books", timeout=5)
resp.raise_for_status()
print("books:", len(resp.json()["data"]))

resp = httpx.post(f"{base_url}/auth/login", json={"username": admin_user, "password": admin_pass}, timeout=5)
if resp.status_code != 200:
    print("login:", resp.status_code, resp.json())
    sys.exit(1)
token = resp.json()["token"]
resp = httpx.get(f"{base_url}/auth/me", headers={"Authorization": f"Bearer {token}"}, timeout=5)
resp.raise_for_status()
print("me:", resp.json())
