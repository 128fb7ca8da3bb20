"""
BizTime Backend — /invoices Endpoint Tests
===========================================

What:  End-to-end tests through the FastAPI app against in-memory SQLite,
       including the full Unpaid → Paid → Unpaid → Paid cycle.
"""

from datetime import datetime, timedelta, timezone

import pytest


def parse_ts(value: str) -> datetime:
    """SQLite hands timestamps back naive; compare everything naive."""
    return datetime.fromisoformat(value).replace(tzinfo=None)


async def create_invoice(client, comp_code="acme-corp", amt=100):
    response = await client.post("/invoices", json={"comp_code": comp_code, "amt": amt})
    assert response.status_code == 200
    return response.json()["invoice"]


class TestCreateAndRead:

    @pytest.mark.asyncio
    async def test_new_invoice_is_unpaid(self, test_client, acme):
        before = datetime.now(timezone.utc).replace(tzinfo=None) - timedelta(seconds=1)

        invoice = await create_invoice(test_client)

        assert set(invoice) == {"id", "comp_code", "amt", "paid", "add_date", "paid_date"}
        assert invoice["comp_code"] == "acme-corp"
        assert invoice["amt"] == 100
        assert invoice["paid"] is False
        assert invoice["paid_date"] is None
        assert parse_ts(invoice["add_date"]) >= before

    @pytest.mark.asyncio
    async def test_detail_joins_company(self, test_client, acme):
        created = await create_invoice(test_client)

        response = await test_client.get(f"/invoices/{created['id']}")

        assert response.status_code == 200
        invoice = response.json()["invoice"]
        assert invoice["company"] == {
            "code": "acme-corp",
            "name": "Acme Corp",
            "description": "Maker of everything",
        }
        assert "comp_code" not in invoice
        assert invoice["paid"] is False
        assert invoice["paid_date"] is None
        assert invoice["add_date"] is not None

    @pytest.mark.asyncio
    async def test_list_ordered_by_id(self, test_client, acme):
        first = await create_invoice(test_client, amt=1)
        second = await create_invoice(test_client, amt=2)

        response = await test_client.get("/invoices")

        assert response.json() == {
            "invoices": [
                {"id": first["id"], "comp_code": "acme-corp"},
                {"id": second["id"], "comp_code": "acme-corp"},
            ]
        }

    @pytest.mark.asyncio
    async def test_create_for_unknown_company_is_404(self, test_client):
        response = await test_client.post("/invoices", json={"comp_code": "ghost", "amt": 10})

        assert response.status_code == 404
        assert response.json()["error"]["message"] == "No such company: ghost"

    @pytest.mark.asyncio
    async def test_create_without_amt_is_400(self, test_client, acme):
        response = await test_client.post("/invoices", json={"comp_code": "acme-corp"})

        assert response.status_code == 400
        assert "amt" in response.json()["error"]["message"]

    @pytest.mark.asyncio
    async def test_detail_not_found(self, test_client):
        response = await test_client.get("/invoices/999")

        assert response.status_code == 404
        assert response.json() == {"error": {"message": "No such invoice: 999", "status": 404}}

    @pytest.mark.asyncio
    async def test_non_numeric_id_is_400(self, test_client):
        response = await test_client.get("/invoices/abc")

        assert response.status_code == 400


class TestPaidTransitions:

    @pytest.mark.asyncio
    async def test_pay_unpay_pay_cycle(self, test_client, acme):
        invoice = await create_invoice(test_client)
        url = f"/invoices/{invoice['id']}"
        before = datetime.now(timezone.utc).replace(tzinfo=None) - timedelta(seconds=1)

        paid = (await test_client.put(url, json={"amt": 150, "paid": True})).json()["invoice"]
        assert paid["paid"] is True
        assert paid["amt"] == 150
        assert paid["paid_date"] is not None
        first_stamp = parse_ts(paid["paid_date"])
        assert first_stamp >= before

        unpaid = (await test_client.put(url, json={"amt": 150, "paid": False})).json()["invoice"]
        assert unpaid["paid"] is False
        assert unpaid["paid_date"] is None

        repaid = (await test_client.put(url, json={"amt": 150, "paid": True})).json()["invoice"]
        assert repaid["paid_date"] is not None
        assert parse_ts(repaid["paid_date"]) >= first_stamp

    @pytest.mark.asyncio
    async def test_staying_paid_keeps_paid_date(self, test_client, acme):
        invoice = await create_invoice(test_client)
        url = f"/invoices/{invoice['id']}"

        first = (await test_client.put(url, json={"amt": 100, "paid": True})).json()["invoice"]
        again = (await test_client.put(url, json={"amt": 200, "paid": True})).json()["invoice"]

        assert again["amt"] == 200
        assert again["paid_date"] == first["paid_date"]

    @pytest.mark.asyncio
    async def test_update_preserves_identity_fields(self, test_client, acme):
        invoice = await create_invoice(test_client)

        response = await test_client.put(
            f"/invoices/{invoice['id']}", json={"amt": 75, "paid": False}
        )

        updated = response.json()["invoice"]
        assert updated["id"] == invoice["id"]
        assert updated["comp_code"] == "acme-corp"
        assert updated["add_date"] == invoice["add_date"]

    @pytest.mark.asyncio
    async def test_update_missing_invoice_is_404(self, test_client):
        response = await test_client.put("/invoices/999", json={"amt": 10, "paid": True})

        assert response.status_code == 404
        error = response.json()["error"]
        assert error["status"] == 404
        assert "999" in error["message"]

    @pytest.mark.asyncio
    async def test_update_missing_invoice_is_404_whatever_the_body(self, test_client):
        response = await test_client.put("/invoices/999", json={})

        assert response.status_code == 404
        assert response.json() == {"error": {"message": "No such invoice: 999", "status": 404}}

    @pytest.mark.asyncio
    async def test_update_without_paid_is_400(self, test_client, acme):
        invoice = await create_invoice(test_client)

        response = await test_client.put(f"/invoices/{invoice['id']}", json={"amt": 10})

        assert response.status_code == 400


class TestDeleteInvoice:

    @pytest.mark.asyncio
    async def test_delete(self, test_client, acme):
        invoice = await create_invoice(test_client)

        response = await test_client.delete(f"/invoices/{invoice['id']}")

        assert response.json() == {"status": "deleted"}
        assert (await test_client.get(f"/invoices/{invoice['id']}")).status_code == 404
        company = (await test_client.get("/companies/acme-corp")).json()["company"]
        assert company["invoices"] == []

    @pytest.mark.asyncio
    async def test_delete_missing_is_404(self, test_client):
        response = await test_client.delete("/invoices/999")

        assert response.status_code == 404
        assert response.json()["error"]["message"] == "No such invoice: 999"


class TestOutOfRangeIds:
    """Ids too large for the id column are simply missing invoices."""

    HUGE = 99999999999999999999

    @pytest.mark.asyncio
    async def test_get(self, test_client):
        response = await test_client.get(f"/invoices/{self.HUGE}")

        assert response.status_code == 404
        assert response.json()["error"]["message"] == f"No such invoice: {self.HUGE}"

    @pytest.mark.asyncio
    async def test_get_just_past_bigint(self, test_client):
        response = await test_client.get("/invoices/9223372036854775808")

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_put(self, test_client):
        response = await test_client.put(
            f"/invoices/{self.HUGE}", json={"amt": 10, "paid": True}
        )

        assert response.status_code == 404
        assert response.json()["error"]["status"] == 404

    @pytest.mark.asyncio
    async def test_delete(self, test_client):
        response = await test_client.delete(f"/invoices/{self.HUGE}")

        assert response.status_code == 404
        assert response.json()["error"]["message"] == f"No such invoice: {self.HUGE}"

    @pytest.mark.asyncio
    async def test_zero_and_negative(self, test_client):
        assert (await test_client.get("/invoices/0")).status_code == 404
        assert (await test_client.delete("/invoices/-1")).status_code == 404
