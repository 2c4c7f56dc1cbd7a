from __future__ import annotations

import pytest

from inspector.app.server import create_app

OCTET = "application/octet-stream"


@pytest.fixture
def client():
    app = create_app()
    app.config["TESTING"] = True
    return app.test_client()


def test_histogram_endpoint(client, sample):
    resp = client.post("/histogram?counter=uint64", data=sample, content_type=OCTET)
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["size"] == 10
    assert body["counter"] == "uint64"
    assert len(body["histogram"]) == 256
    assert body["histogram"][ord("A")] == 4
    assert body["histogram"][ord("C")] == 2


def test_histogram_endpoint_sub_range(client, sample):
    resp = client.post("/histogram?start=8&end=10", data=sample, content_type=OCTET)
    assert resp.status_code == 200
    assert resp.get_json()["histogram"][ord("C")] == 2
    assert sum(resp.get_json()["histogram"]) == 2


def test_histogram_endpoint_rejects_bad_range(client, sample):
    resp = client.post("/histogram?end=11", data=sample, content_type=OCTET)
    assert resp.status_code == 400
    assert "invalid byte range" in resp.get_json()["error"]


def test_histogram_endpoint_rejects_bad_counter(client, sample):
    resp = client.post("/histogram?counter=float32", data=sample, content_type=OCTET)
    assert resp.status_code == 400


def test_wrong_content_type(client, sample):
    resp = client.post("/histogram", data=sample, content_type="text/plain")
    assert resp.status_code == 400


def test_delta_endpoint(client, sample):
    resp = client.post("/delta?accuracy=5", data=sample, content_type=OCTET)
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["count"] == 2
    assert body["chunk_size"] == 5
    assert body["histograms"][0][ord("A")] == 4
    assert body["histograms"][1][ord("B")] == 3
    assert len(body["entropy"]) == 2
    assert body["regions"][0]["start"] == 0
    assert body["regions"][-1]["end"] == 10


def test_delta_endpoint_empty_body(client):
    resp = client.post("/delta?accuracy=5", data=b"", content_type=OCTET)
    assert resp.status_code == 200
    assert resp.get_json()["count"] == 0
    assert resp.get_json()["histograms"] == []


def test_delta_endpoint_bad_accuracy(client, sample):
    assert client.post("/delta?accuracy=-3", data=sample, content_type=OCTET).status_code == 400
    assert client.post("/delta?accuracy=abc", data=sample, content_type=OCTET).status_code == 400


def test_info(client):
    resp = client.get("/info")
    assert resp.status_code == 200
    assert resp.get_json()["buckets"] == 256
