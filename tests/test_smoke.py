import pytest
from fastapi.testclient import TestClient

from salesboard.config import get_settings
from salesboard.main import app

client = TestClient(app)

SAMPLE = (
    "fecha,franja,producto,familia,unidades,precio_unitario\n"
    "2024-01-01,Desayuno,Cafe,Bebida,2,1.50\n"
    "2024-01-01,Desayuno,Cafe,Bebida,2,1.50\n"
    "2024-01-02,Comida,Lentejas,Principal,2,9.50\n"
    "not-a-date,desayuno,cafe,bebida,2,1.5\n"
)


@pytest.fixture()
def source_file(tmp_path, monkeypatch):
    path = tmp_path / "ventas_raw.csv"
    monkeypatch.setenv("SALESBOARD_SOURCE_PATH", str(path))
    get_settings.cache_clear()
    yield path
    get_settings.cache_clear()


def test_health():
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"ok": True}


def test_analyze_upload():
    files = {"file": ("ventas.csv", SAMPLE.encode("utf-8"), "text/csv")}
    r = client.post("/analyze", files=files)
    assert r.status_code == 200

    data = r.json()
    assert data["counts"] == {"raw": 4, "clean": 2}
    assert data["summary"]["total_revenue"] == pytest.approx(22.0)
    assert data["summary"]["total_units"] == 4
    assert data["summary"]["by_time_slot"] == {"Breakfast": 3.0, "Lunch": 19.0}
    assert [p["product"] for p in data["top_products"]] == ["lentejas", "cafe"]
    assert data["clean_preview"][0] == {
        "date": "2024-01-01",
        "time_slot": "Breakfast",
        "product": "cafe",
        "category": "Beverage",
        "units": 2,
        "unit_price": 1.5,
        "amount": 3.0,
    }
    assert len(data["raw_preview"]) == 4


def test_analyze_rejects_non_csv():
    files = {"file": ("ventas.txt", SAMPLE.encode("utf-8"), "text/plain")}
    r = client.post("/analyze", files=files)
    assert r.status_code == 422


def test_analyze_rejects_empty_upload():
    files = {"file": ("ventas.csv", b"  \n\n", "text/csv")}
    r = client.post("/analyze", files=files)
    assert r.status_code == 422


def test_analyze_with_utf8_bom():
    raw = ("\ufeff" + SAMPLE).encode("utf-8")
    files = {"file": ("ventas.csv", raw, "text/csv")}
    r = client.post("/analyze", files=files)
    assert r.status_code == 200
    assert r.json()["counts"]["clean"] == 2


def test_export_upload():
    files = {"file": ("ventas.csv", SAMPLE.encode("utf-8"), "text/csv")}
    r = client.post("/export", files=files)
    assert r.status_code == 200
    assert r.headers["content-type"].startswith("text/csv")
    assert r.text.splitlines() == [
        "date,timeSlot,product,category,units,unitPrice,amount",
        "2024-01-01,Breakfast,cafe,Beverage,2,1.50,3.00",
        "2024-01-02,Lunch,lentejas,Main,2,9.50,19.00",
    ]


def test_report_reads_configured_source(source_file):
    source_file.write_text(SAMPLE, encoding="utf-8")
    r = client.get("/report")
    assert r.status_code == 200
    assert r.json()["counts"] == {"raw": 4, "clean": 2}


def test_report_missing_source(source_file):
    r = client.get("/report")
    assert r.status_code == 404


def test_analyze_oversized_price_is_dropped():
    raw = (SAMPLE + "2024-01-03,Comida,Flan,Postre,1,1e1000000\n").encode("utf-8")
    files = {"file": ("ventas.csv", raw, "text/csv")}
    r = client.post("/analyze", files=files)
    assert r.status_code == 200
    assert r.json()["counts"] == {"raw": 5, "clean": 2}
