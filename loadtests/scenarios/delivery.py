"""Checkout delivery load test scenarios.

A stateful SequentialTaskSet journey: quote -> choose -> dispatch, plus the
pickup handoff when the buyer chose Farm Pickup.
"""

import random

from locust import HttpUser, SequentialTaskSet, between, task

from loadtests.data_generators import farm_location, options_request, order_context, order_id, order_total
from loadtests.helpers.response import extract_error_detail
from loadtests.helpers.state import CheckoutState


class CheckoutDeliveryJourney(SequentialTaskSet):
    """Options -> Estimates -> Dispatch -> (Pickup QR -> Verify).

    About 40% of buyers choose Farm Pickup; the rest pick any available
    delivery option.
    """

    def on_start(self):
        self.state = CheckoutState(order_id=order_id(), order_total=order_total(), farm_location=farm_location())

    @task
    def get_options(self):
        payload = options_request(farm=self.state.farm_location)
        self.state.zip_code = payload["zipCode"]
        with self.client.post(
            "/delivery/options",
            json=payload,
            catch_response=True,
            name="POST /delivery/options",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Options failed: {resp.status_code}: {extract_error_detail(resp)}")
                self.interrupt()
                return
            options = resp.json()
            if not options or options[0]["id"] != "pickup":
                resp.failure("Farm Pickup missing from the top of the options")
                self.interrupt()
                return
            self.state.option_ids = [o["id"] for o in options if o["isAvailable"]]

    @task
    def get_estimates(self):
        self.client.post(
            "/delivery/estimates",
            json={"zipCode": self.state.zip_code, "farmLocation": self.state.farm_location},
            name="POST /delivery/estimates",
        )

    @task
    def dispatch(self):
        if random.random() < 0.4:
            self.state.chosen_provider = "pickup"
        else:
            self.state.chosen_provider = random.choice(self.state.option_ids)

        with self.client.post(
            "/delivery/dispatch",
            json={
                "providerId": self.state.chosen_provider,
                "orderContext": order_context(self.state.order_id, self.state.order_total),
            },
            catch_response=True,
            name="POST /delivery/dispatch",
        ) as resp:
            body = resp.json() if resp.status_code == 200 else {}
            if not body.get("success"):
                resp.failure(f"Dispatch failed: {resp.status_code}: {extract_error_detail(resp)}")
                self.interrupt()
                return
            self.state.tracking_id = body["trackingId"]

    @task
    def issue_pickup_qr(self):
        if self.state.chosen_provider != "pickup":
            self.interrupt()
            return
        with self.client.post(
            "/delivery/pickup-qr",
            json={"orderId": self.state.order_id, "orderTotal": self.state.order_total},
            catch_response=True,
            name="POST /delivery/pickup-qr",
        ) as resp:
            if resp.status_code == 200:
                self.state.pickup_payload = resp.json()["payload"]
            else:
                resp.failure(f"Pickup QR failed: {resp.status_code}: {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def verify_pickup(self):
        with self.client.post(
            "/delivery/pickup/verify",
            json={"qrData": self.state.pickup_payload, "orderId": self.state.order_id},
            catch_response=True,
            name="POST /delivery/pickup/verify",
        ) as resp:
            if resp.status_code != 200 or not resp.json()["success"]:
                resp.failure(f"Pickup verification failed: {resp.status_code}: {extract_error_detail(resp)}")
        self.interrupt()


class CheckoutDeliveryUser(HttpUser):
    """Buyers checking out; the baseline scenario."""

    wait_time = between(1, 3)
    tasks = [CheckoutDeliveryJourney]
