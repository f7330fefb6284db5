"""Stress test scenarios for the provider fan-out and token signing.

QuoteFloodUser hammers the options endpoint, which fans out one availability
check per provider. PickupScanUser issues and scans pickup codes back to back.
"""

from locust import HttpUser, constant_pacing, task

from loadtests.data_generators import options_request, order_id, order_total


class QuoteFloodUser(HttpUser):
    """Maximum quote throughput.

    Monitor: p95 of POST /delivery/options should stay near the provider
    timeout even when a provider is slow.
    """

    wait_time = constant_pacing(0.1)  # ~10 requests/sec per user

    @task(5)
    def options(self):
        self.client.post("/delivery/options", json=options_request(), name="[STRESS] POST /delivery/options")

    @task(2)
    def estimates(self):
        payload = options_request()
        payload.pop("sortByFee")
        self.client.post("/delivery/estimates", json=payload, name="[STRESS] POST /delivery/estimates")


class PickupScanUser(HttpUser):
    """Issue a pickup code and scan it immediately, plus forged scans."""

    wait_time = constant_pacing(0.2)

    @task(4)
    def issue_and_scan(self):
        order, total = order_id(), order_total()
        resp = self.client.post(
            "/delivery/pickup-qr",
            json={"orderId": order, "orderTotal": total},
            name="[STRESS] POST /delivery/pickup-qr",
        )
        if resp.status_code == 200:
            self.client.post(
                "/delivery/pickup/verify",
                json={"qrData": resp.json()["payload"], "orderId": order},
                name="[STRESS] POST /delivery/pickup/verify",
            )

    @task(1)
    def forged_scan(self):
        forged = '{"orderId":1,"orderTotal":1,"timestamp":1,"hash":"00"}'
        self.client.post(
            "/delivery/pickup/verify",
            json={"qrData": forged, "orderId": 1},
            name="[STRESS] POST /delivery/pickup/verify (forged)",
        )
