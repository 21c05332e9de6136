import json

import pytest

from app import create_app


@pytest.fixture
def client(controller, tmp_path):
    app = create_app(controller=controller, output_dir=tmp_path)
    app.config['TESTING'] = True
    return app.test_client()


def post_slip(client, periode, **fields):
    body = {'periode': periode}
    body.update(fields)
    return client.post('/api/records', json=body)


def test_create_record_computes_total(client):
    response = post_slip(client, "Januari 2025",
                         detailMasuk={'transport': "200.000", 'koreksi_plus': 999},
                         detailAbsensi={'sakit': 1})
    assert response.status_code == 201
    record = response.get_json()['record']
    assert record['periode'] == "Januari 2025"
    assert record['detailMasuk']['koreksi_plus'] == 0
    assert record['detailPotong']['koreksi_minus'] == 100000
    assert record['total'] == 5230000


def test_history_lists_most_recent_first_with_diffs(client):
    post_slip(client, "Januari 2025", detailMasuk={'transport': 200000}, detailAbsensi={'sakit': 1})
    post_slip(client, "Februari 2025")

    records = client.get('/api/records').get_json()['records']
    assert [r['periode'] for r in records] == ["Februari 2025", "Januari 2025"]
    latest, oldest = records
    assert latest['diff']['net_delta'] == -100000
    assert latest['diff']['earnings_delta']['transport'] == -200000
    assert latest['trends']['net'] == "worsened"
    assert latest['trends']['deductions']['koreksi_minus'] == "improved"
    assert oldest['diff'] is None


def test_update_record_in_place(client):
    first = post_slip(client, "Januari 2025").get_json()['record']
    post_slip(client, "Februari 2025")

    response = client.put(f"/api/records/{first['id']}", json={'detailMasuk': {'makan': 100000}})
    assert response.status_code == 200
    assert response.get_json()['record']['total'] == 5230000

    records = client.get('/api/records').get_json()['records']
    assert len(records) == 2
    assert records[1]['id'] == first['id']


def test_unknown_record_is_404(client):
    assert client.get('/api/records/nope').status_code == 404
    assert client.put('/api/records/nope', json={}).status_code == 404


def test_unknown_line_item_is_400(client):
    response = post_slip(client, "Januari 2025", detailMasuk={'bonus': 1})
    assert response.status_code == 400
    assert response.get_json()['success'] is False


def test_malformed_sections_are_400(client):
    assert post_slip(client, "Januari 2025", detailMasuk="200.000").status_code == 400
    assert post_slip(client, "Januari 2025", detailAbsensi=[1]).status_code == 400
    assert client.get('/api/records').get_json()['records'] == []


def test_preview_does_not_save(client):
    response = client.post('/api/preview', json={'detailAbsensi': {'overtime': 7}})
    form = response.get_json()['form']
    assert form['detailMasuk']['koreksi_plus'] == 150000
    assert client.get('/api/records').get_json()['records'] == []


def test_settings_patch(client):
    response = client.patch('/api/settings', json={'harian': "120.000", 'persen': {'sakit': 2}})
    settings = response.get_json()['settings']
    assert settings['harian'] == 120000
    assert settings['persen']['sakit'] == 2

    response = client.patch('/api/settings/multipliers', json={'overtime': 2})
    assert response.get_json()['settings']['persen']['overtime'] == 2
    assert client.patch('/api/settings', json={'gaji': 1}).status_code == 400


def test_settings_patch_is_all_or_nothing(client):
    response = client.patch('/api/settings', json={'harian': 120000, 'gaji': 1})
    assert response.status_code == 400
    response = client.patch('/api/settings', json={'premi': 300000, 'persen': {'libur': 2}})
    assert response.status_code == 400
    settings = client.get('/api/settings').get_json()['settings']
    assert settings['harian'] == 100000
    assert settings['premi'] == 250000


def test_backup_round_trip_requires_confirm(client):
    post_slip(client, "Januari 2025")
    backup = client.get('/api/backup').get_json()['backup']
    assert set(json.loads(backup)) == {'listGaji', 'setelanGaji'}

    client.delete('/api/records?confirm=true')
    assert client.post('/api/backup', json={'backup': backup}).status_code == 409

    response = client.post('/api/backup', json={'backup': backup, 'confirm': True})
    assert response.status_code == 200
    assert len(client.get('/api/records').get_json()['records']) == 1


def test_bad_backup_is_rejected(client):
    post_slip(client, "Januari 2025")
    response = client.post('/api/backup', json={'backup': '{"listGaji": []}', 'confirm': True})
    assert response.status_code == 400
    assert response.get_json()['message'] == "Format kode salah."
    assert len(client.get('/api/records').get_json()['records']) == 1


def test_clear_requires_confirm(client):
    post_slip(client, "Januari 2025")
    assert client.delete('/api/records').status_code == 409
    assert client.delete('/api/records?confirm=true').status_code == 200
    assert client.get('/api/records').get_json()['records'] == []


def test_downloads(client):
    assert client.get('/api/report/history').status_code == 404
    record = post_slip(client, "Januari 2025").get_json()['record']

    response = client.get(f"/api/records/{record['id']}/payslip")
    assert response.status_code == 200
    assert response.data[:2] == b'PK'

    response = client.get('/api/report/history')
    assert response.status_code == 200
    assert response.data[:2] == b'PK'


def test_store_failure_is_503(broken_store, settings, tmp_path):
    from controllers import PayrollController
    app = create_app(controller=PayrollController(broken_store, settings=settings), output_dir=tmp_path)
    response = app.test_client().post('/api/records', json={'periode': "Januari 2025"})
    assert response.status_code == 503
    assert response.get_json()['success'] is False
