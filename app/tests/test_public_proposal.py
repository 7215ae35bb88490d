def _send(client, owner, q):
    r = client.post(f"/api/quotations/{q['id']}/send", headers=owner["headers"])
    assert r.status_code == 200, r.text


def test_public_view_needs_no_auth_and_strips_owner(client, make_quotation):
    q = make_quotation()
    r = client.get(f"/proposal/{q['proposalId']}")
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["success"] is True
    data = body["data"]
    assert data["proposalId"] == q["proposalId"]
    assert data["customerName"] == q["customerName"]
    assert data["scopeTable"] == q["scopeTable"]
    assert "createdBy" not in data
    assert "version" not in data
    assert "updatedAt" not in data


def test_public_view_of_draft_keeps_draft(client, make_quotation):
    q = make_quotation()
    r = client.get(f"/proposal/{q['proposalId']}")
    assert r.json()["data"]["status"] == "draft"


def test_first_view_of_sent_marks_viewed_once(client, owner, make_quotation):
    q = make_quotation()
    _send(client, owner, q)

    first = client.get(f"/proposal/{q['proposalId']}")
    assert first.status_code == 200
    assert first.json()["data"]["status"] == "viewed"

    second = client.get(f"/proposal/{q['proposalId']}")
    assert second.status_code == 200
    assert second.json() == first.json()

    owned = client.get(f"/api/quotations/{q['id']}", headers=owner["headers"]).json()
    assert owned["data"]["status"] == "viewed"
    assert owned["data"]["createdBy"] == owner["id"]


def test_unknown_proposal_is_404(client):
    for pid in ("abcdefghij", "NOT-A-TOKEN", "x"):
        r = client.get(f"/proposal/{pid}")
        assert r.status_code == 404
        assert r.json() == {
            "success": False,
            "message": "Quotation not found or link has expired",
        }
