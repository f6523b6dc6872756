import pytest

from registry.exceptions import ConflictError
from registry.extensions import db
from registry.models import Patient
from registry.services import patient_service


def register(client, **fields):
    body = {'name': 'Ada Lovelace', 'category': 'infant', 'gender': 'female'}
    body.update(fields)
    return client.post('/api/patients', json=body)


def test_create_requires_authentication(client):
    resp = register(client)
    assert resp.status_code == 401


def test_create_assigns_identifier_and_qr_token(worker_client, worker_user):
    resp = register(worker_client, date_of_birth='2026-01-15', guardian_name='Mary')

    assert resp.status_code == 201
    data = resp.get_json()['data']
    assert data['patient_id'] == 'RH000001'
    assert data['qr_code']
    assert data['date_of_birth'] == '2026-01-15'
    assert data['created_by'] == worker_user.id


def test_client_supplied_identifiers_are_ignored(worker_client):
    data = register(worker_client, patient_id='RH999999', qr_code='mine').get_json()['data']

    assert data['patient_id'] == 'RH000001'
    assert data['qr_code'] != 'mine'


def test_two_patients_distinct_and_stable(worker_client):
    first = register(worker_client, name='Ada').get_json()['data']
    second = register(worker_client, name='Grace').get_json()['data']

    assert first['patient_id'] != second['patient_id']
    assert first['qr_code'] != second['qr_code']

    fetched = [worker_client.get(f"/api/patients/{first['id']}").get_json()['data'] for _ in range(2)]
    for data in fetched:
        assert data['patient_id'] == first['patient_id']
        assert data['qr_code'] == first['qr_code']


def test_update_cannot_change_identifiers(worker_client):
    created = register(worker_client).get_json()['data']

    resp = worker_client.put(f"/api/patients/{created['id']}", json={
        'phone': '555-0100',
        'patient_id': 'RH000777',
        'qr_code': 'replacement',
    })

    assert resp.status_code == 200
    data = resp.get_json()['data']
    assert data['phone'] == '555-0100'
    assert data['patient_id'] == created['patient_id']
    assert data['qr_code'] == created['qr_code']


def test_lookup_by_qr_code(worker_client):
    created = register(worker_client).get_json()['data']

    resp = worker_client.get(f"/api/patients/qr/{created['qr_code']}")
    assert resp.status_code == 200
    assert resp.get_json()['data']['id'] == created['id']

    assert worker_client.get('/api/patients/qr/unknown-token').status_code == 404


def test_qr_payload(worker_client):
    created = register(worker_client, name='Ada').get_json()['data']

    resp = worker_client.get(f"/api/patients/{created['id']}/qr")
    assert resp.get_json()['data'] == {'id': created['patient_id'], 'name': 'Ada', 'qr': created['qr_code']}


def test_list_and_search(worker_client):
    register(worker_client, name='Ada Lovelace', phone='555-0001')
    register(worker_client, name='Grace Hopper', phone='555-0002')

    listed = worker_client.get('/api/patients?limit=1').get_json()
    assert len(listed['data']) == 1

    found = worker_client.get('/api/patients/search?q=grace').get_json()['data']
    assert [p['name'] for p in found] == ['Grace Hopper']

    by_id = worker_client.get('/api/patients/search?q=RH000001').get_json()['data']
    assert [p['name'] for p in by_id] == ['Ada Lovelace']

    assert worker_client.get('/api/patients/search').status_code == 400


def test_missing_patient_is_404(worker_client):
    assert worker_client.get('/api/patients/999').status_code == 404
    assert worker_client.put('/api/patients/999', json={'phone': '1'}).status_code == 404


@pytest.mark.parametrize('fields', [
    {'name': ''},
    {'category': 'teenager'},
    {'gender': 'unknown'},
    {'date_of_birth': '15/01/2026'},
])
def test_invalid_patient_fields(worker_client, fields):
    assert register(worker_client, **fields).status_code == 400


def test_identifier_collision_is_conflict(app, worker_client, monkeypatch):
    db.session.add(Patient(name='Existing', patient_id='RH000001'))
    db.session.commit()
    monkeypatch.setattr(patient_service, 'issue_patient_identifier', lambda sequence: 'RH000001')

    resp = register(worker_client, name='Newcomer')

    assert resp.status_code == 409
    assert resp.get_json()['error'] == 'Patient identifier already exists'
    assert [p.name for p in Patient.query.all()] == ['Existing']


def test_qr_token_collision_rolls_back(app, monkeypatch):
    db.session.add(Patient(name='Existing', patient_id='RH000099', qr_code='shared-token'))
    db.session.commit()
    monkeypatch.setattr(patient_service, 'issue_qr_token', lambda patient: 'shared-token')

    with pytest.raises(ConflictError):
        patient_service.create_patient({'name': 'Newcomer'})

    assert patient_service.count_patients() == 1
    # The session is usable again after the rollback
    monkeypatch.undo()
    patient = patient_service.create_patient({'name': 'Newcomer'})
    assert patient.qr_code != 'shared-token'
    assert patient_service.count_patients() == 2


@pytest.mark.parametrize('name', [7, ['Ada'], None])
def test_patient_name_must_be_a_string(worker_client, name):
    resp = register(worker_client, name=name)
    assert resp.status_code == 400
