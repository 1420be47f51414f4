# plant_care/api/plants/test_routes.py
import io
import os

import pytest

PLANT_PAYLOAD = {
    "plantName": "Monstera",
    "species": "Monstera deliciosa",
    "wateringFrequency": 5,
    "lastWateredDate": "2024-01-01",
}


@pytest.fixture
def created_plant(client, auth_headers):
    response = client.post('/api/plants/', json=PLANT_PAYLOAD, headers=auth_headers)
    assert response.status_code == 201
    return response.get_json()['plant']


def test_plant_routes_require_token(client):
    assert client.get('/api/plants/').status_code == 401
    assert client.post('/api/plants/', json=PLANT_PAYLOAD).status_code == 401


def test_create_plant_computes_next_watering_date(created_plant):
    assert created_plant['userId'] == 'user-1'
    assert created_plant['lastWateredDate'] == '2024-01-01'
    assert created_plant['nextWateringDate'] == '2024-01-06'
    assert created_plant['isIndoor'] is True
    assert created_plant['imageUrl'] is None


def test_create_plant_ignores_client_supplied_next_watering_date(client, auth_headers):
    payload = dict(PLANT_PAYLOAD, nextWateringDate="2099-01-01")
    response = client.post('/api/plants/', json=payload, headers=auth_headers)
    assert response.get_json()['plant']['nextWateringDate'] == '2024-01-06'


@pytest.mark.parametrize("field", ["plantName", "species", "wateringFrequency", "lastWateredDate"])
def test_create_plant_requires_fields(client, auth_headers, field):
    payload = {k: v for k, v in PLANT_PAYLOAD.items() if k != field}

    response = client.post('/api/plants/', json=payload, headers=auth_headers)

    assert response.status_code == 400
    body = response.get_json()
    assert body['error_code'] == 'VALIDATION_ERROR'
    assert field in body['details']


@pytest.mark.parametrize("field, value", [
    ("lastWateredDate", "yesterday-ish"),
    ("wateringFrequency", "often"),
    ("wateringFrequency", 0),
])
def test_create_plant_rejects_unparsable_schedule(client, auth_headers, fake_db, field, value):
    payload = dict(PLANT_PAYLOAD, **{field: value})

    response = client.post('/api/plants/', json=payload, headers=auth_headers)

    assert response.status_code == 400
    assert fake_db.collection('plants').docs == {}


def test_create_plant_with_multipart_image(client, auth_headers, app):
    data = dict(PLANT_PAYLOAD, wateringFrequency="10", lastWateredDate="2024-02-20", isIndoor="false")
    data['image'] = (io.BytesIO(b'fake image bytes'), 'leaf.JPG')

    response = client.post('/api/plants/', data=data, headers=auth_headers,
                           content_type='multipart/form-data')

    assert response.status_code == 201
    plant = response.get_json()['plant']
    assert plant['nextWateringDate'] == '2024-03-01'
    assert plant['isIndoor'] is False
    assert plant['imageUrl'].startswith('/uploads/') and plant['imageUrl'].endswith('.jpg')

    served = client.get(plant['imageUrl'])
    assert served.status_code == 200
    assert served.data == b'fake image bytes'
    served.close()


def test_create_plant_rejects_non_image_upload(client, auth_headers, fake_db):
    data = dict(PLANT_PAYLOAD, wateringFrequency="5", image=(io.BytesIO(b"#!/bin/sh"), "script.sh"))

    response = client.post('/api/plants/', data=data, headers=auth_headers,
                           content_type='multipart/form-data')

    assert response.status_code == 400
    assert fake_db.collection('plants').docs == {}


def test_update_frequency_only(client, auth_headers, created_plant):
    response = client.put(f"/api/plants/{created_plant['id']}", json={"wateringFrequency": 10},
                          headers=auth_headers)

    assert response.status_code == 200
    body = response.get_json()
    assert body['lastWateredDate'] == '2024-01-01'
    assert body['wateringFrequency'] == 10
    assert body['nextWateringDate'] == '2024-01-11'


def test_patch_last_watered_date_only(client, auth_headers, created_plant):
    response = client.patch(f"/api/plants/{created_plant['id']}", json={"lastWateredDate": "2024-02-01"},
                            headers=auth_headers)

    assert response.status_code == 200
    assert response.get_json()['nextWateringDate'] == '2024-02-06'


def test_update_descriptive_fields_only(client, auth_headers, created_plant):
    response = client.patch(f"/api/plants/{created_plant['id']}",
                            json={"plantName": "Big Monstera", "location": "balcony"},
                            headers=auth_headers)

    body = response.get_json()
    assert body['plantName'] == 'Big Monstera'
    assert body['location'] == 'balcony'
    assert body['nextWateringDate'] == created_plant['nextWateringDate']


def test_update_with_bad_date_is_rejected_wholesale(client, auth_headers, created_plant):
    plant_url = f"/api/plants/{created_plant['id']}"

    response = client.patch(plant_url, json={"lastWateredDate": "not a date", "wateringFrequency": 9},
                            headers=auth_headers)

    assert response.status_code == 400
    current = client.get(plant_url, headers=auth_headers).get_json()
    assert current['wateringFrequency'] == 5
    assert current['nextWateringDate'] == '2024-01-06'


def test_update_unknown_plant_returns_404(client, auth_headers, fake_db):
    response = client.put('/api/plants/does-not-exist', json={"wateringFrequency": 3}, headers=auth_headers)

    assert response.status_code == 404
    assert response.get_json()['error_code'] == 'PLANT_NOT_FOUND'
    assert fake_db.collection('plants').docs == {}


def test_other_user_gets_403(client, make_auth_headers, created_plant):
    response = client.patch(f"/api/plants/{created_plant['id']}", json={"wateringFrequency": 3},
                            headers=make_auth_headers('user-2'))
    assert response.status_code == 403


def test_list_and_get_plants(client, auth_headers, created_plant):
    all_plants = client.get('/api/plants/', headers=auth_headers).get_json()['plants']
    user_plants = client.get('/api/plants/user/user-1', headers=auth_headers).get_json()
    single = client.get(f"/api/plants/{created_plant['id']}", headers=auth_headers).get_json()

    assert [p['id'] for p in all_plants] == [created_plant['id']]
    assert [p['id'] for p in user_plants] == [created_plant['id']]
    assert single == created_plant
    assert client.get('/api/plants/user/someone-else', headers=auth_headers).get_json() == []


def test_delete_plant(client, auth_headers, created_plant):
    plant_url = f"/api/plants/{created_plant['id']}"

    assert client.delete(plant_url, headers=auth_headers).status_code == 200
    assert client.get(plant_url, headers=auth_headers).status_code == 404
    assert client.delete(plant_url, headers=auth_headers).status_code == 404


def test_storage_failure_returns_500(client, auth_headers, fake_db, created_plant):
    fake_db.unavailable = True

    response = client.get('/api/plants/', headers=auth_headers)

    assert response.status_code == 500
    assert response.get_json()['error_code'] == 'STORAGE_ERROR'


def test_create_plant_with_frequency_beyond_calendar_returns_400(client, auth_headers, fake_db):
    payload = dict(PLANT_PAYLOAD, wateringFrequency=10 ** 12)

    response = client.post('/api/plants/', json=payload, headers=auth_headers)

    assert response.status_code == 400
    assert response.get_json()['error_code'] == 'INVALID_FREQUENCY'
    assert fake_db.collection('plants').docs == {}


def test_create_plant_with_next_date_past_year_9999_returns_400(client, auth_headers, fake_db):
    payload = dict(PLANT_PAYLOAD, lastWateredDate="9999-12-25", wateringFrequency=10)

    response = client.post('/api/plants/', json=payload, headers=auth_headers)

    assert response.status_code == 400
    assert response.get_json()['error_code'] == 'INVALID_DATE'
    assert fake_db.collection('plants').docs == {}


def test_update_with_frequency_beyond_calendar_keeps_stored_plant(client, auth_headers, created_plant):
    plant_url = f"/api/plants/{created_plant['id']}"

    response = client.patch(plant_url, json={"wateringFrequency": 10 ** 12}, headers=auth_headers)

    assert response.status_code == 400
    assert response.get_json()['error_code'] == 'INVALID_FREQUENCY'
    assert client.get(plant_url, headers=auth_headers).get_json() == created_plant


def test_failed_create_removes_uploaded_image(client, auth_headers, app, fake_db):
    data = dict(PLANT_PAYLOAD, wateringFrequency=str(10 ** 12),
                image=(io.BytesIO(b'fake image bytes'), 'leaf.png'))

    response = client.post('/api/plants/', data=data, headers=auth_headers,
                           content_type='multipart/form-data')

    assert response.status_code == 400
    assert os.listdir(app.config['UPLOAD_FOLDER']) == []
    assert fake_db.collection('plants').docs == {}


def test_update_unknown_plant_with_image_leaves_no_file(client, auth_headers, app):
    data = {"plantName": "Ghost", "image": (io.BytesIO(b'fake image bytes'), 'ghost.png')}

    response = client.put('/api/plants/does-not-exist', data=data, headers=auth_headers,
                          content_type='multipart/form-data')

    assert response.status_code == 404
    assert os.listdir(app.config['UPLOAD_FOLDER']) == []


def test_other_users_image_update_leaves_no_file(client, make_auth_headers, created_plant, app):
    data = {"image": (io.BytesIO(b'fake image bytes'), 'intruder.png')}

    response = client.patch(f"/api/plants/{created_plant['id']}", data=data,
                            headers=make_auth_headers('user-2'), content_type='multipart/form-data')

    assert response.status_code == 403
    assert os.listdir(app.config['UPLOAD_FOLDER']) == []


def test_owner_image_update_keeps_file(client, auth_headers, created_plant, app):
    data = {"image": (io.BytesIO(b'new leaf'), 'leaf.webp')}

    response = client.patch(f"/api/plants/{created_plant['id']}", data=data,
                            headers=auth_headers, content_type='multipart/form-data')

    assert response.status_code == 200
    image_url = response.get_json()['imageUrl']
    assert os.listdir(app.config['UPLOAD_FOLDER']) == [image_url.rsplit('/', 1)[1]]
    assert response.get_json()['nextWateringDate'] == created_plant['nextWateringDate']


def test_corrupt_stored_frequency_returns_500(client, auth_headers, fake_db, created_plant):
    fake_db.collection('plants').docs[created_plant['id']]['watering_frequency'] = 2.5

    response = client.get(f"/api/plants/{created_plant['id']}", headers=auth_headers)

    assert response.status_code == 500
    assert response.get_json()['error_code'] == 'STORAGE_ERROR'


def test_health(client):
    response = client.get('/health')
    assert response.status_code == 200
    assert response.data == b'OK'
