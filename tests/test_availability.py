"""Test availability resolution."""
from datetime import date

import pytest
from core.availability.resolver import AvailabilityResolver
from core.contracts import resolve_availability
from core.models.holdings import Campus, ItemRecord, SerialLocation
from patterns.domain_config import AvailabilityConfig, StatusVerdict


def _record(**kwargs):
    return ItemRecord(bib_id="vtls000123", **kwargs)


@pytest.mark.parametrize("status_code", [None, "4700", "3100", "9999"])
def test_due_date_always_unavailable(status_code):
    resolver = AvailabilityResolver()
    holding = resolver.resolve(_record(due_date=date(2024, 3, 1), status_code=status_code))
    assert holding.available is False


def test_unparseable_due_date_still_on_loan():
    resolver = AvailabilityResolver()
    holding = resolver.resolve(_record(due_date="sometime soon"))
    assert holding.available is False


@pytest.mark.parametrize("status_code", ["4401", "5700", "4700", "4705", "7700", "4600", "5401", "2101"])
def test_unavailable_statuses(status_code):
    resolver = AvailabilityResolver()
    assert resolver.resolve(_record(status_code=status_code)).available is False


@pytest.mark.parametrize("status_code", [None, "", "3100", "2700", "2701", "2100", "7200"])
def test_available_statuses(status_code):
    resolver = AvailabilityResolver()
    assert resolver.resolve(_record(status_code=status_code)).available is True


def test_unknown_status_defaults_available():
    resolver = AvailabilityResolver()
    assert resolver.resolve(_record(status_code="0001")).available is True

    strict = AvailabilityResolver(AvailabilityConfig(unknown_status_available=False))
    assert strict.resolve(_record(status_code="0001")).available is False


def test_configured_verdicts_replace_defaults():
    config = AvailabilityConfig(status_verdicts={"3100": StatusVerdict.UNAVAILABLE})
    resolver = AvailabilityResolver(config)
    assert resolver.resolve(_record(status_code="3100")).available is False
    assert resolver.resolve(_record(status_code="4700")).available is True


def test_queued_requests_block_only_when_enabled():
    record = _record(item_requests=1, title_requests=2)
    assert AvailabilityResolver().resolve(record).available is True

    blocking = AvailabilityResolver(AvailabilityConfig(requests_block_availability=True))
    assert blocking.resolve(record).available is False


@pytest.mark.parametrize(
    "location_code, campus",
    [
        ("4FCMAIN", Campus.FRASER_COAST),
        ("5SPR", Campus.SPRINGFIELD),
        ("1TWB", Campus.TOOWOOMBA),
        ("9XYZ", Campus.TOOWOOMBA),
        (None, Campus.TOOWOOMBA),
        ("", Campus.TOOWOOMBA),
    ],
)
def test_campus_from_location_prefix(location_code, campus):
    resolver = AvailabilityResolver()
    assert resolver.campus_for(location_code) == campus
    assert resolver.resolve(_record(location_code=location_code)).campus == campus


def test_status_label_prefers_vendor_label():
    resolver = AvailabilityResolver()
    assert resolver.resolve(_record(status_code="4700")).status == "MISSING"
    assert resolver.resolve(_record(status_code="4700", status="Lost")).status == "Lost"
    assert resolver.resolve(_record()).status is None


def test_item_call_number_preferred():
    resolver = AvailabilityResolver()
    holding = resolver.resolve(_record(call_number="QA76 .S6", bib_call_number="QA76"))
    assert holding.call_number == "QA76 .S6"
    holding = resolver.resolve(_record(bib_call_number="QA76"))
    assert holding.call_number == "QA76"


def test_resolve_leaves_request_allowed_unset():
    holding = AvailabilityResolver().resolve(_record(barcode="0123", item_id="77"))
    assert holding.request_allowed is None
    assert holding.barcode == "0123"
    assert holding.item_id == "77"


def test_resolve_many_keeps_order():
    resolver = AvailabilityResolver()
    holdings = resolver.resolve_many([_record(item_id=str(i)) for i in range(3)])
    assert [h.item_id for h in holdings] == ["0", "1", "2"]


def test_bib_only_electronic_resource():
    holdings = AvailabilityResolver().resolve_bib_only("vtls1", "ELECTRONIC RESOURCE")
    assert len(holdings) == 1
    assert holdings[0].available is True
    assert holdings[0].location == "Online"
    assert holdings[0].status is None


@pytest.mark.parametrize(
    "call_number, status, location",
    [
        ("ON ORDER", "ON ORDER", "Pending..."),
        ("ORDER CANCELLED", "ORDER CANCELLED", "None"),
        ("MISSING", "MISSING", "Unknown"),
    ],
)
def test_bib_only_placeholders(call_number, status, location):
    holdings = AvailabilityResolver().resolve_bib_only("vtls1", call_number)
    assert len(holdings) == 1
    assert holdings[0].available is False
    assert holdings[0].status == status
    assert holdings[0].location == location
    assert holdings[0].campus == Campus.TOOWOOMBA


def test_bib_only_serial_locations():
    locations = [
        SerialLocation(name="Fraser Coast Serials", location_code="4SER"),
        SerialLocation(name="Toowoomba Serials", location_code="1SER"),
    ]
    holdings = AvailabilityResolver().resolve_bib_only("vtls1", "050.5 JOU", locations)
    assert [h.location for h in holdings] == ["Fraser Coast Serials", "Toowoomba Serials"]
    assert [h.campus for h in holdings] == [Campus.FRASER_COAST, Campus.TOOWOOMBA]
    assert all(h.status == "Not For Loan" and not h.available for h in holdings)
    assert all(h.call_number == "050.5 JOU" for h in holdings)


def test_bib_only_without_locations_is_empty():
    assert AvailabilityResolver().resolve_bib_only("vtls1", "050.5 JOU") == []


@pytest.mark.parametrize("due_date", ["", "   "])
def test_blank_due_date_is_not_on_loan(due_date):
    record = _record(due_date=due_date)
    assert record.due_date is None
    assert not record.on_loan
    assert resolve_availability(record).available is True
