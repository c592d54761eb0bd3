"""
Locust Load Test Suite

Run scenarios:
  locust -f locustfile.py --tags browse    # Catalog and category reads
  locust -f locustfile.py --tags booking   # Customers booking products
  locust -f locustfile.py --tags edge      # Bad input handling
  locust -f locustfile.py                  # All tests

Expects a seeded database (python -m marketplace.seed).
"""

import random
import string
from datetime import datetime, timezone, timedelta

from locust import HttpUser, task, between, tag, events

# Shared state
PRODUCT_IDS = []
CATEGORY_NAMES = []
SEEDED_VENDOR = {"email": "vendor@example.com", "password": "password123"}


def random_email():
    return f"load_{random.randint(10000, 99999)}_{''.join(random.choices(string.ascii_lowercase, k=4))}@test.com"


def random_phone():
    return "".join(random.choices(string.digits, k=10))


def future_date():
    return (datetime.now(timezone.utc) + timedelta(days=random.randint(7, 120))).isoformat()


def register(client, role):
    """Register a throwaway account and return bearer headers."""
    resp = client.post("/register", json={
        "name": f"Load {role}",
        "email": random_email(),
        "password": "test123",
        "phone": random_phone(),
        "role": role,
    })
    client.cookies.clear()
    if resp.status_code == 201:
        return {"Authorization": f"Bearer {resp.json()['token']}"}
    return {}


@events.test_start.add_listener
def on_test_start(environment, **kwargs):
    print("\n" + "=" * 60)
    print("Marketplace load test: make sure the database is seeded")
    print("=" * 60)


class BrowsingUser(HttpUser):
    """
    TEST 1: Browse - catalog listing and cached categories

    Run: locust -f locustfile.py --tags browse -u 100 -r 20 --run-time 60s

    Compare with REDIS_ENABLED=false to see the category cache effect.
    """
    wait_time = between(0.1, 0.5)

    @tag("browse")
    @task(10)
    def list_products(self):
        params = {"page": random.randint(1, 3), "sort": random.choice(["rating", "price_asc", "price_desc", "newest"])}
        if CATEGORY_NAMES and random.random() < 0.5:
            params["category"] = random.choice(CATEGORY_NAMES)
        resp = self.client.get("/products", params=params, name="/products")
        if resp.status_code == 200:
            for product in resp.json().get("products", []):
                if product["id"] not in PRODUCT_IDS:
                    PRODUCT_IDS.append(product["id"])

    @tag("browse")
    @task(5)
    def list_categories(self):
        resp = self.client.get("/categories", name="/categories [cached]")
        if resp.status_code == 200 and not CATEGORY_NAMES:
            CATEGORY_NAMES.extend(c["name"] for c in resp.json())

    @tag("browse")
    @task(3)
    def search_products(self):
        self.client.get("/products", params={"search": random.choice(["package", "premium", "basic"])},
                        name="/products?search")

    @tag("browse")
    @task(2)
    def list_vendors(self):
        self.client.get("/vendors")

    @tag("browse")
    @task(1)
    def health_check(self):
        self.client.get("/health")


class BookingCustomer(HttpUser):
    """
    TEST 2: Booking - customers book seeded products

    Run: locust -f locustfile.py --tags booking -u 50 -r 10 --run-time 60s
    """
    wait_time = between(0.5, 2)

    def on_start(self):
        self.headers = register(self.client, "customer")
        self.booking_ids = []

    @tag("booking")
    @task(5)
    def book_product(self):
        if not PRODUCT_IDS or not self.headers:
            self.client.get("/products", name="/products")
            return

        with self.client.post("/bookings",
            json={
                "product_id": random.choice(PRODUCT_IDS),
                "date": future_date(),
                "event_type": random.choice(["Wedding", "Birthday", "Corporate"]),
                "guest_count": random.randint(10, 200),
            },
            headers=self.headers,
            catch_response=True,
        ) as resp:
            if resp.status_code == 201:
                self.booking_ids.append(resp.json()["id"])
                resp.success()
            else:
                resp.failure(f"Unexpected: {resp.status_code}")

    @tag("booking")
    @task(3)
    def my_bookings(self):
        if self.headers:
            self.client.get("/bookings", headers=self.headers)

    @tag("booking")
    @task(1)
    def cancel_booking(self):
        if self.booking_ids:
            booking_id = self.booking_ids.pop()
            self.client.put(f"/bookings/{booking_id}/status",
                json={"status": "cancelled", "reason": "Plans changed"},
                headers=self.headers,
                name="/bookings/{id}/status [cancel]")


class ConfirmingVendor(HttpUser):
    """
    TEST 3: Vendor - seeded vendor confirms pending bookings

    Run together with BookingCustomer:
      locust -f locustfile.py --tags booking -u 60 -r 10 --run-time 60s
    """
    wait_time = between(1, 3)
    weight = 1

    def on_start(self):
        resp = self.client.post("/login", json=SEEDED_VENDOR)
        self.client.cookies.clear()
        if resp.status_code == 200:
            self.headers = {"Authorization": f"Bearer {resp.json()['token']}"}
        else:
            self.headers = {}

    @tag("booking")
    @task
    def confirm_pending(self):
        if not self.headers:
            return
        resp = self.client.get("/bookings", headers=self.headers, name="/bookings [vendor]")
        if resp.status_code != 200:
            return
        pending = [b for b in resp.json() if b["status"] == "pending"]
        for booking in pending[:5]:
            self.client.put(f"/bookings/{booking['id']}/status",
                json={"status": "confirmed"},
                headers=self.headers,
                name="/bookings/{id}/status [confirm]")


class EdgeCaseUser(HttpUser):
    """
    TEST 4: Edge cases - Bad input handling

    Run: locust -f locustfile.py --tags edge -u 20 -r 5 --run-time 30s

    System should NOT crash, return proper error codes.
    """
    wait_time = between(0.5, 1.5)

    def on_start(self):
        self.headers = register(self.client, "customer")

    @tag("edge")
    @task
    def unknown_product(self):
        with self.client.post("/bookings",
            json={"product_id": 999999, "date": future_date()},
            headers=self.headers,
            catch_response=True,
        ) as resp:
            if resp.status_code == 404:
                resp.success()
            else:
                resp.failure(f"Expected 404, got {resp.status_code}")

    @tag("edge")
    @task
    def zero_guests(self):
        with self.client.post("/bookings",
            json={"product_id": 1, "date": future_date(), "guest_count": 0},
            headers=self.headers,
            catch_response=True,
        ) as resp:
            if resp.status_code == 400:
                resp.success()
            else:
                resp.failure(f"Expected 400, got {resp.status_code}")

    @tag("edge")
    @task
    def malformed_json(self):
        with self.client.post("/bookings",
            data="not json at all",
            headers={**self.headers, "Content-Type": "application/json"},
            catch_response=True,
        ) as resp:
            if resp.status_code == 400:
                resp.success()
            else:
                resp.failure(f"Expected 400, got {resp.status_code}")

    @tag("edge")
    @task
    def customer_confirms(self):
        """Customers may not confirm; expect 403 or 404 for a foreign booking."""
        with self.client.put("/bookings/1/status",
            json={"status": "confirmed"},
            headers=self.headers,
            catch_response=True,
        ) as resp:
            if resp.status_code in [403, 404]:
                resp.success()
            else:
                resp.failure(f"Expected 403/404, got {resp.status_code}")

    @tag("edge")
    @task
    def missing_auth(self):
        with self.client.post("/bookings",
            json={"product_id": 1, "date": future_date()},
            catch_response=True,
        ) as resp:
            if resp.status_code == 401:
                resp.success()
            else:
                resp.failure(f"Expected 401, got {resp.status_code}")

    @tag("edge")
    @task
    def admin_without_role(self):
        with self.client.get("/admin/stats", headers=self.headers, catch_response=True) as resp:
            if resp.status_code == 403:
                resp.success()
            else:
                resp.failure(f"Expected 403, got {resp.status_code}")
