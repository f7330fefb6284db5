"""Shared BDD fixtures and step definitions for the Delivery domain."""

import pytest
from pytest_bdd import given, parsers, then


@pytest.fixture()
def outcome():
    """Container for the result of the When step."""
    return {"value": None}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given("a farm in San Francisco", target_fixture="farm")
def farm_in_san_francisco():
    return {"lat": 37.7749, "lng": -122.4194}


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then("the pickup is verified")
def pickup_verified(outcome):
    assert outcome["value"] is True


@then("the pickup is rejected")
def pickup_rejected(outcome):
    assert outcome["value"] is False


@then(parsers.cfparse('the options are "{ids}"'))
def options_are(outcome, ids):
    assert [option.id for option in outcome["value"]] == [i.strip() for i in ids.split(",")]


def _option(options, option_id):
    return next(option for option in options if option.id == option_id)


@then(parsers.cfparse('the "{option_id}" option is available'))
def option_available(outcome, option_id):
    assert _option(outcome["value"], option_id).is_available is True


@then(parsers.cfparse('the "{option_id}" option is not available'))
def option_not_available(outcome, option_id):
    assert _option(outcome["value"], option_id).is_available is False


@then(parsers.cfparse('the "{option_id}" option costs {fee:f}'))
def option_costs(outcome, option_id, fee):
    assert _option(outcome["value"], option_id).fee == pytest.approx(fee)
