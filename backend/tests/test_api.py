"""
test_api.py — HTTP routes of the estimator API.
"""

import logging

import pytest
from fastapi.testclient import TestClient


@pytest.fixture(scope="module")
def client():
    from tablayeso.main import app
    with TestClient(app) as c:
        yield c


class TestHealth:

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "active"
        assert "X-Request-ID" in response.headers


class TestCalculations:

    def test_calculation(self, client, simple_wall, simple_wall_bill):
        response = client.post(
            "/api/v1/calculations", json={"work_area": "Oficina", "items": [simple_wall]}
        )
        assert response.status_code == 200
        body = response.json()
        assert body["work_area"] == "Oficina"
        assert body["errors"] == []
        assert {m["material"]: m["quantity"] for m in body["materials"]} == simple_wall_bill
        assert body["item_summaries"][0]["lines"][0] == "Tipo: Muro"
        assert "X-Process-Time" in response.headers

    def test_item_errors_returned_with_partial_bill(self, client, simple_wall, horizontal_trim):
        broken = dict(horizontal_trim, orientation="diagonal")
        response = client.post("/api/v1/calculations", json={"items": [simple_wall, broken]})
        assert response.status_code == 200
        body = response.json()
        assert body["errors"] == ["Error en Cenefa #3: Orientación Principal de Cenefa inválida."]
        assert len(body["item_specs"]) == 1

    def test_no_items(self, client):
        response = client.post("/api/v1/calculations", json={"items": []})
        assert response.status_code == 200
        assert response.json()["errors"] == ["No hay ítems agregados para calcular."]

    def test_malformed_item_keeps_valid_items(self, client, simple_wall, simple_wall_bill):
        broken = dict(simple_wall, number=2, double_structure="maybe")
        response = client.post("/api/v1/calculations", json={"items": [simple_wall, broken]})
        assert response.status_code == 200
        body = response.json()
        assert {m["material"]: m["quantity"] for m in body["materials"]} == simple_wall_bill
        assert len(body["errors"]) == 1
        assert body["errors"][0].startswith("Error en Muro #2: Datos inválidos (")

    def test_unknown_kind_reported_as_item_error(self, client):
        response = client.post("/api/v1/calculations", json={"items": [{"kind": "escalera"}]})
        assert response.status_code == 200
        assert response.json()["errors"][0].startswith("Error en escalera #1: ")

    def test_non_object_item_rejected(self, client):
        response = client.post("/api/v1/calculations", json={"items": ["muro"]})
        assert response.status_code == 422


class TestSegmentImport:

    def test_import_csv(self, client):
        files = {"file": ("muro.csv", b"Ancho,Alto\n3,2.4\n0,1\n", "text/csv")}
        response = client.post("/api/v1/segments/import", params={"kind": "wall"}, files=files)
        assert response.status_code == 200
        body = response.json()
        assert body["segments"] == [{"width": 3.0, "height": 2.4}]
        assert body["skipped_rows"] == ["Fila 3: Ancho debe ser un número > 0"]

    def test_missing_header(self, client):
        files = {"file": ("cielo.csv", b"Ancho\n3\n", "text/csv")}
        response = client.post("/api/v1/segments/import", params={"kind": "ceiling"}, files=files)
        assert response.status_code == 400
        assert "Largo" in response.json()["detail"]

    def test_unsupported_extension(self, client):
        files = {"file": ("muro.pdf", b"%PDF-1.4", "application/pdf")}
        response = client.post("/api/v1/segments/import", params={"kind": "wall"}, files=files)
        assert response.status_code == 400


class TestReports:

    def test_pdf_download(self, client, report_dir, simple_wall):
        response = client.post("/api/v1/reports/pdf", json={"items": [simple_wall]})
        assert response.status_code == 200
        assert response.headers["content-type"] == "application/pdf"
        assert response.content[:5] == b"%PDF-"

    def test_excel_download(self, client, report_dir, simple_wall):
        response = client.post("/api/v1/reports/excel", json={"items": [simple_wall]})
        assert response.status_code == 200
        assert response.headers["content-type"].startswith(
            "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
        )
        assert response.content[:2] == b"PK"

    def test_nothing_to_render(self, client, report_dir, simple_wall):
        broken = dict(simple_wall, faces=0)
        response = client.post("/api/v1/reports/pdf", json={"items": [broken]})
        assert response.status_code == 422
        assert response.json()["detail"]["errors"] == [
            "Error en Muro #1: Nº Caras inválido (debe ser 1 o 2)"
        ]

    def test_unknown_format(self, client, simple_wall):
        response = client.post("/api/v1/reports/docx", json={"items": [simple_wall]})
        assert response.status_code == 404


class TestRequestLogging:

    def test_incoming_request_id_reused(self, client, simple_wall):
        response = client.post(
            "/api/v1/calculations", json={"items": [simple_wall]}, headers={"X-Request-ID": "obra-17"}
        )
        assert response.headers["X-Request-ID"] == "obra-17"

    def test_request_line_carries_calculation_outline(self, client, simple_wall, simple_wall_bill, caplog):
        broken = dict(simple_wall, number=2, faces=0)
        with caplog.at_level(logging.INFO, logger="tablayeso-api.middleware"):
            client.post(
                "/api/v1/calculations", json={"work_area": "Oficina", "items": [simple_wall, broken]}
            )
        records = [r for r in caplog.records if r.name == "tablayeso-api.middleware"]
        assert records
        record = records[-1]
        assert record.getMessage() == "POST /api/v1/calculations -> 200 (2 items, 1 errors)"
        assert record.work_area == "Oficina"
        assert record.item_count == 2
        assert record.error_count == 1
        assert record.material_count == len(simple_wall_bill)

    def test_health_not_logged(self, client, caplog):
        with caplog.at_level(logging.INFO, logger="tablayeso-api.middleware"):
            client.get("/health")
        assert not [r for r in caplog.records if r.name == "tablayeso-api.middleware"]
