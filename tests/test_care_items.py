from carecycle.domain.care_items.service import validate_care_item_input
from carecycle.models import CareItem


def test_validation_collects_every_error():
    is_valid, errors = validate_care_item_input("", "surgery", 0)
    assert not is_valid
    assert errors == [
        "항목 이름을 입력해주세요.",
        "유효한 항목 유형을 선택해주세요.",
        "주기는 1주 이상이어야 합니다.",
    ]

    is_valid, errors = validate_care_item_input("백신", "medication", 521)
    assert errors == ["주기는 10년(520주) 이하여야 합니다."]

    assert validate_care_item_input("백신", "medication", 520) == (True, [])


def test_list_by_type_ordered_by_name(client, care_items):
    response = client.get("/api/care-items", params={"type": "procedure"})
    assert response.status_code == 200
    names = [c["name"] for c in response.json()]
    assert len(names) == 6
    assert names == sorted(names)
    assert all(c["interval_display"] is None for c in response.json())

    assert len(client.get("/api/care-items").json()) == 12
    assert client.get("/api/care-items", params={"type": "bogus"}).status_code == 400


def test_list_with_display(client, care_items):
    items = client.get("/api/care-items", params={"type": "medication", "display": True}).json()
    display = {c["name"]: c["interval_display"] for c in items}
    assert display["인슐린 주사"] == "매주"
    assert display["폐렴구균 백신"] == "5년마다"
    assert display["B형간염 백신"] == "10년마다"


def test_create_and_get(client):
    response = client.post(
        "/api/care-items",
        json={"name": " 골밀도검사 ", "type": "procedure", "interval_weeks": 104, "description": "뼈 건강"},
    )
    assert response.status_code == 201
    created = response.json()
    assert created["name"] == "골밀도검사"
    assert created["interval_display"] == "2년마다"
    assert created["is_active"] is True

    fetched = client.get(f"/api/care-items/{created['id']}")
    assert fetched.json()["description"] == "뼈 건강"
    assert client.get("/api/care-items/missing").status_code == 404


def test_create_invalid_returns_all_errors(client):
    response = client.post(
        "/api/care-items", json={"name": "", "type": "other", "interval_weeks": 0}
    )
    assert response.status_code == 400
    assert len(response.json()["detail"]["errors"]) == 3


def test_duplicate_name_and_type_conflicts(client, care_items):
    response = client.post(
        "/api/care-items", json={"name": "혈액검사", "type": "procedure", "interval_weeks": 4}
    )
    assert response.status_code == 409

    # Same name as a different type is allowed
    response = client.post(
        "/api/care-items", json={"name": "혈액검사", "type": "medication", "interval_weeks": 4}
    )
    assert response.status_code == 201


def test_partial_update(client, db, care_items):
    item = care_items["체중측정"]
    response = client.patch(f"/api/care-items/{item.id}", json={"interval_weeks": 4})
    assert response.status_code == 200
    assert response.json()["interval_weeks"] == 4
    assert response.json()["name"] == "체중측정"

    response = client.patch(f"/api/care-items/{item.id}", json={"interval_weeks": 600})
    assert response.status_code == 400

    response = client.patch(f"/api/care-items/{item.id}", json={"name": "혈압측정"})
    assert response.status_code == 409


def test_soft_delete(client, db, care_items):
    item = care_items["소변검사"]
    response = client.delete(f"/api/care-items/{item.id}")
    assert response.status_code == 200

    names = [c["name"] for c in client.get("/api/care-items").json()]
    assert "소변검사" not in names
    assert db.get(CareItem, item.id) is not None


def test_search(client, care_items):
    results = client.get("/api/care-items/search", params={"q": "백신"}).json()
    assert {c["name"] for c in results} == {"독감 백신", "COVID-19 백신", "폐렴구균 백신", "B형간염 백신"}
    assert all(c["interval_display"] for c in results)

    procedures = client.get("/api/care-items/search", params={"q": "검사", "type": "procedure"}).json()
    assert {c["name"] for c in procedures} == {"혈액검사", "소변검사", "심전도검사"}
