import pytest


@pytest.fixture
def created_order(client, staff_headers, order_payload):
    response = client.post("/api/v1/orders", json=order_payload, headers=staff_headers)
    assert response.status_code == 201
    return response.json()
