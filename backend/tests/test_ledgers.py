"""
Production ledger tests.

Verifies:
- Submissions start PENDING and are validated before anything is stored
- PENDING -> APPROVED / REJECTED are the only transitions, each happens once
- Pending queue and approved reports filter, join and order correctly
- Every ledger type follows the same lifecycle
"""

import dataclasses
from datetime import date

import pytest
from sqlalchemy.exc import DataError

from denimtrack.errors import NotFoundError, ValidationError
from denimtrack.models import BulkInput, DryProcessEntry, SubContractEntry, WashingEntry
from denimtrack.services import get_ledger
from denimtrack.services.ledger_service import Ledger, OUTCOME_APPROVE
from denimtrack.extensions import db

from conftest import bulk_input_payload


SAMPLE_PAYLOADS = {
    "bulk-inputs": bulk_input_payload(),
    "dry-process": {"date": "2024-01-10", "styleNumber": "S100", "processName": "HAND_SHINE", "quantity": 40},
    "washing": {"date": "2024-01-10", "styleNumber": "S100", "washCategory": "FINISH", "quantity": 75},
    "sub-contracts": {
        "date": "2024-01-10",
        "subContractorName": "Perera Stitching",
        "styleNumber": "S100",
        "processName": "Button Attach",
        "quantity": 200,
        "unitPriceUsed": "1.25",
        "calculatedSalary": 250,
    },
    "gate-pass": {"date": "2024-01-10", "styleNumber": "S100", "destination": "Colombo Port", "quantity": 300},
}


def _submit(client, headers, resource="bulk-inputs", **overrides):
    payload = dict(SAMPLE_PAYLOADS[resource], **overrides)
    return client.post(f"/api/{resource}/", json=payload, headers=headers)


# =============================================================================
# LIFECYCLE
# =============================================================================


class TestBulkInputLifecycle:

    def test_submit_approve_then_second_approve_is_404(self, client, clerk_headers, admin_headers, admin_user, clerk_user):
        created = client.post("/api/bulk-inputs/", json=bulk_input_payload(), headers=clerk_headers)

        assert created.status_code == 201
        row = created.json
        assert row["status"] == "PENDING"
        assert row["entry_date"] == "2024-01-10"
        assert row["style_number"] == "S100"
        assert row["quantity"] == 500
        assert row["supplier"] == "CIB"
        assert row["entered_by_user_id"] == clerk_user.id
        assert row["approved_by_user_id"] is None
        assert row["approval_timestamp"] is None
        assert row["entry_timestamp"].endswith("Z")

        approved = client.put(f"/api/bulk-inputs/approve/{row['id']}", headers=admin_headers)
        assert approved.status_code == 200
        assert approved.json["status"] == "APPROVED"
        assert approved.json["approved_by_user_id"] == admin_user.id
        assert approved.json["approval_timestamp"] is not None

        again = client.put(f"/api/bulk-inputs/approve/{row['id']}", headers=admin_headers)
        assert again.status_code == 404
        assert again.json == {"message": "Pending bulk input entry not found or already processed."}

    def test_reject(self, client, clerk_headers, admin_headers, admin_user):
        entry_id = _submit(client, clerk_headers).json["id"]

        resp = client.put(f"/api/bulk-inputs/reject/{entry_id}", headers=admin_headers)

        assert resp.status_code == 200
        assert resp.json["status"] == "REJECTED"
        assert resp.json["approved_by_user_id"] == admin_user.id

    @pytest.mark.parametrize(
        "first,second",
        [("approve", "reject"), ("reject", "approve"), ("reject", "reject")],
    )
    def test_terminal_states_never_change(self, client, clerk_headers, admin_headers, second_admin_headers, db_session, first, second):
        entry_id = _submit(client, clerk_headers).json["id"]
        first_resp = client.put(f"/api/bulk-inputs/{first}/{entry_id}", headers=admin_headers)
        snapshot = first_resp.json

        resp = client.put(f"/api/bulk-inputs/{second}/{entry_id}", headers=second_admin_headers)

        assert resp.status_code == 404
        db_session.expire_all()
        entry = db_session.get(BulkInput, entry_id)
        assert entry.to_dict() == snapshot

    def test_resolve_unknown_entry(self, client, admin_headers):
        resp = client.put("/api/bulk-inputs/approve/999", headers=admin_headers)
        assert resp.status_code == 404


class TestResolveService:

    def test_resolve_guard_leaves_row_untouched(self, app, clerk_user, admin_user, second_admin):
        ledger = get_ledger("washing")
        entry = ledger.submit(SAMPLE_PAYLOADS["washing"], clerk_user.id)

        ledger.approve(entry.id, admin_user.id)
        with pytest.raises(NotFoundError):
            ledger.reject(entry.id, second_admin.id)

        db.session.expire_all()
        stored = db.session.get(WashingEntry, entry.id)
        assert stored.status == "APPROVED"
        assert stored.approved_by_user_id == admin_user.id

    def test_unknown_outcome(self, app, clerk_user, admin_user):
        ledger = get_ledger("washing")
        entry = ledger.submit(SAMPLE_PAYLOADS["washing"], clerk_user.id)
        with pytest.raises(ValueError):
            ledger.resolve(entry.id, admin_user.id, "REOPEN")


@pytest.mark.parametrize("resource", sorted(SAMPLE_PAYLOADS))
def test_every_ledger_follows_the_same_lifecycle(client, clerk_headers, admin_headers, resource):
    created = _submit(client, clerk_headers, resource)
    assert created.status_code == 201, created.json
    entry_id = created.json["id"]
    assert created.json["status"] == "PENDING"

    pending = client.get(f"/api/{resource}/pending", headers=admin_headers)
    assert [row["id"] for row in pending.json] == [entry_id]
    assert pending.json[0]["entered_by_username"] == "clerk_one"

    approved = client.put(f"/api/{resource}/approve/{entry_id}", headers=admin_headers)
    assert approved.status_code == 200
    assert approved.json["status"] == "APPROVED"

    assert client.get(f"/api/{resource}/pending", headers=admin_headers).json == []

    report = client.get(f"/api/{resource}/report?startDate=2024-01-10&endDate=2024-01-10", headers=admin_headers)
    assert report.status_code == 200
    assert [row["id"] for row in report.json] == [entry_id]
    assert report.json[0]["approved_by_username"] == "admin_alpha"


# =============================================================================
# VALIDATION
# =============================================================================


class TestSubmissionValidation:

    @pytest.mark.parametrize(
        "resource,overrides,message",
        [
            ("bulk-inputs", {"quantity": 0}, "Quantity must be a positive number."),
            ("bulk-inputs", {"quantity": -5}, "Quantity must be a positive number."),
            ("bulk-inputs", {"quantity": "abc"}, "Quantity must be an integer"),
            ("bulk-inputs", {"quantity": 2.5}, "Quantity must be an integer, not a decimal"),
            ("bulk-inputs", {"supplier": "ACME"}, "Invalid Supplier specified. Must be one of: CIB, G_FLOCK."),
            ("bulk-inputs", {"date": "10/01/2024"}, "Date must be a valid date (YYYY-MM-DD)"),
            ("dry-process", {"processName": "SANDBLAST"}, None),
            ("washing", {"washCategory": "RINSE"}, None),
            ("washing", {"quantity": 0}, "Quantity must be a positive number."),
            ("sub-contracts", {"unitPriceUsed": -1}, "Unit Price must be a non-negative number."),
            ("sub-contracts", {"calculatedSalary": "-0.01"}, "Calculated Salary must be a non-negative number."),
            ("sub-contracts", {"unitPriceUsed": "cheap"}, "Unit Price must be a number"),
            ("gate-pass", {"quantity": -1}, "Quantity must be a positive number."),
            ("bulk-inputs", {"quantity": 10**30}, "Quantity must not exceed 2147483647."),
            ("gate-pass", {"quantity": 2147483648}, "Quantity must not exceed 2147483647."),
            ("sub-contracts", {"unitPriceUsed": "100000000"}, "Unit Price must not exceed 99999999.99."),
            ("sub-contracts", {"calculatedSalary": 1e12}, "Calculated Salary must not exceed 9999999999.99."),
        ],
    )
    def test_rejected_and_nothing_stored(self, client, clerk_headers, admin_headers, resource, overrides, message):
        resp = _submit(client, clerk_headers, resource, **overrides)

        assert resp.status_code == 400
        if message:
            assert resp.json["message"] == message
        assert client.get(f"/api/{resource}/pending", headers=admin_headers).json == []

    def test_missing_fields_listed_together(self, client, clerk_headers):
        resp = client.post("/api/bulk-inputs/", json={"date": "2024-01-10", "quantity": 5}, headers=clerk_headers)
        assert resp.status_code == 400
        assert resp.json["message"] == "Style Number and Supplier are required."

    def test_empty_body(self, client, clerk_headers):
        resp = client.post("/api/gate-pass/", headers=clerk_headers)
        assert resp.status_code == 400
        assert resp.json["message"] == "Date, Style Number, Destination, and Quantity are required."

    def test_zero_price_allowed_for_sub_contract(self, client, clerk_headers):
        resp = _submit(client, clerk_headers, "sub-contracts", unitPriceUsed=0, calculatedSalary="0")
        assert resp.status_code == 201
        assert resp.json["unit_price_used"] == "0.00"
        assert resp.json["calculated_salary"] == "0.00"

    def test_sub_contract_decimals_serialized_as_strings(self, client, clerk_headers):
        resp = _submit(client, clerk_headers, "sub-contracts")
        assert resp.json["unit_price_used"] == "1.25"
        assert resp.json["calculated_salary"] == "250.00"
        assert resp.json["sub_contractor_name"] == "Perera Stitching"

    def test_quantity_string_digits_accepted(self, client, clerk_headers):
        resp = _submit(client, clerk_headers, quantity="120")
        assert resp.status_code == 201
        assert resp.json["quantity"] == 120

    def test_largest_storable_values_accepted(self, client, clerk_headers):
        resp = _submit(client, clerk_headers, "sub-contracts", quantity=2147483647,
                       unitPriceUsed="99999999.99", calculatedSalary="9999999999.99")
        assert resp.status_code == 201
        assert resp.json["quantity"] == 2147483647


class TestStoreConstraints:

    def test_check_constraint_surfaces_as_validation(self, app, clerk_user, db_session):
        """With the enumeration check removed from the rules, the table's CHECK still rejects the row."""
        definition = get_ledger("washing").definition
        relaxed_fields = tuple(dataclasses.replace(rule, choices=None) for rule in definition.fields)
        relaxed = Ledger(dataclasses.replace(definition, fields=relaxed_fields), db)

        with pytest.raises(ValidationError) as exc:
            relaxed.submit(dict(SAMPLE_PAYLOADS["washing"], washCategory="RINSE"), clerk_user.id)

        assert exc.value.message.startswith("Invalid data provided. Error:")
        assert db_session.query(WashingEntry).count() == 0

    def test_dry_process_enumeration_enforced_by_store(self, app, clerk_user, db_session):
        definition = get_ledger("dry-process").definition
        relaxed_fields = tuple(dataclasses.replace(rule, choices=None) for rule in definition.fields)
        relaxed = Ledger(dataclasses.replace(definition, fields=relaxed_fields), db)

        with pytest.raises(ValidationError):
            relaxed.submit(dict(SAMPLE_PAYLOADS["dry-process"], processName="SANDBLAST"), clerk_user.id)
        assert db_session.query(DryProcessEntry).count() == 0

    def test_out_of_range_value_surfaces_as_validation(self, app, clerk_user, db_session, monkeypatch):
        """A numeric overflow reported by the store is a 400, not a server error."""
        def overflow():
            raise DataError("INSERT INTO bulk_inputs", {}, Exception("numeric field overflow"))

        monkeypatch.setattr(db.session, "commit", overflow)

        with pytest.raises(ValidationError) as exc:
            get_ledger("bulk-inputs").submit(bulk_input_payload(), clerk_user.id)

        assert exc.value.message == "Invalid data provided. Error: numeric field overflow"
        monkeypatch.undo()
        assert db_session.query(BulkInput).count() == 0


# =============================================================================
# PENDING QUEUE AND REPORTS
# =============================================================================


class TestPendingQueue:

    def test_newest_submission_first_and_resolved_excluded(self, client, clerk_headers, admin_headers):
        first = _submit(client, clerk_headers, styleNumber="S1").json["id"]
        second = _submit(client, clerk_headers, styleNumber="S2").json["id"]
        third = _submit(client, clerk_headers, styleNumber="S3").json["id"]
        client.put(f"/api/bulk-inputs/reject/{second}", headers=admin_headers)

        resp = client.get("/api/bulk-inputs/pending", headers=admin_headers)

        assert resp.status_code == 200
        assert [row["id"] for row in resp.json] == [third, first]
        assert {row["entered_by_username"] for row in resp.json} == {"clerk_one"}


class TestApprovedReport:

    @pytest.fixture
    def entries(self, app, clerk_user, admin_user):
        ledger = get_ledger("bulk-inputs")
        ids = {}
        for label, entry_date, approve in [
            ("before", "2024-01-04", True),
            ("start", "2024-01-05", True),
            ("middle_a", "2024-01-07", True),
            ("middle_b", "2024-01-07", True),
            ("end", "2024-01-09", True),
            ("after", "2024-01-10", True),
            ("pending", "2024-01-06", False),
            ("rejected", "2024-01-06", None),
        ]:
            entry = ledger.submit(bulk_input_payload(date=entry_date, styleNumber=label), clerk_user.id)
            if approve:
                ledger.approve(entry.id, admin_user.id)
            elif approve is None:
                ledger.reject(entry.id, admin_user.id)
            ids[label] = entry.id
        return ids

    def test_inclusive_range_approved_only(self, client, admin_headers, entries):
        resp = client.get("/api/bulk-inputs/report?startDate=2024-01-05&endDate=2024-01-09", headers=admin_headers)

        assert resp.status_code == 200
        # entry_date desc, then id desc for same-day rows
        assert [row["id"] for row in resp.json] == [
            entries["end"], entries["middle_b"], entries["middle_a"], entries["start"],
        ]
        for row in resp.json:
            assert row["status"] == "APPROVED"
            assert "2024-01-05" <= row["entry_date"] <= "2024-01-09"
            assert row["entered_by_username"] == "clerk_one"
            assert row["approved_by_username"] == "admin_alpha"

    def test_service_accepts_date_objects(self, app, entries):
        rows = get_ledger("bulk-inputs").report_approved(date(2024, 1, 10), date(2024, 1, 10))
        assert [row["id"] for row in rows] == [entries["after"]]

    def test_reversed_range_rejected(self, client, admin_headers):
        resp = client.get("/api/bulk-inputs/report?startDate=2024-01-09&endDate=2024-01-05", headers=admin_headers)
        assert resp.status_code == 400
        assert resp.json == {"message": "Start date cannot be after end date."}

    @pytest.mark.parametrize(
        "query",
        ["", "?startDate=2024-01-01", "?endDate=2024-01-01", "?startDate=&endDate=2024-01-01"],
    )
    def test_missing_dates(self, client, admin_headers, query):
        resp = client.get(f"/api/washing/report{query}", headers=admin_headers)
        assert resp.status_code == 400
        assert resp.json == {"message": "Both startDate and endDate are required for the report."}

    def test_unparsable_dates(self, client, admin_headers):
        resp = client.get("/api/washing/report?startDate=yesterday&endDate=2024-01-01", headers=admin_headers)
        assert resp.status_code == 400

    def test_service_raises_validation(self, app):
        with pytest.raises(ValidationError):
            get_ledger("gate-pass").report_approved("2024-02-01", "2024-01-01")


def test_sub_contract_row_round_trip(app, clerk_user, admin_user):
    ledger = get_ledger("sub-contracts")
    entry = ledger.submit(SAMPLE_PAYLOADS["sub-contracts"], clerk_user.id)
    ledger.resolve(entry.id, admin_user.id, OUTCOME_APPROVE)

    stored = db.session.get(SubContractEntry, entry.id)
    assert stored.status == "APPROVED"
    assert stored.to_dict()["process_name"] == "Button Attach"
