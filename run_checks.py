import os

# Walk the pages against the in-memory backends unless told otherwise
os.environ.setdefault('USE_MOCK_DB', 'true')
os.environ.setdefault('USE_MOCK_AUTH', 'true')

from fastapi.testclient import TestClient
from app.main import app

EMAIL = 'smoke@example.com'
PASSWORD = 'smoke-pass-123'

with TestClient(app) as client:
    print('HEALTH:')
    print(client.get('/health').json())
    resp = client.get('/health/db')
    print(resp.status_code, resp.json())

    print('\nSIGN UP / SIGN IN:')
    resp = client.post('/auth/signup', json={
        'email': EMAIL,
        'password': PASSWORD,
        'confirm_password': PASSWORD,
        'state_code': 'LA/23A/0001',
        'batch': '2023 Batch A',
    })
    print(resp.status_code, resp.json().get('message', resp.text))
    resp = client.post('/auth/signin', json={'email': EMAIL, 'password': PASSWORD})
    print(resp.status_code)
    headers = {'Authorization': f"Bearer {resp.json()['token']}"}

    print('\nDASHBOARD:')
    print(client.get('/dashboard', headers=headers).json()['welcome'])

    print('\nCOMMUNITY:')
    client.post('/community/posts', json={'content': 'Smoke check post'}, headers=headers)
    print([p['content'] for p in client.get('/community/posts', headers=headers).json()['posts']])

    print('\nREMINDERS:')
    client.post('/reminders', json={'title': 'Monthly clearance', 'date': '2024-05-20T09:00:00'}, headers=headers)
    print([r['title'] for r in client.get('/reminders', headers=headers).json()['reminders']])

    print('\nPPA SEARCH:')
    print(client.get('/ppas', params={'state': 'Lagos'}, headers=headers).json()['count'])

    print('\nRESOURCES:')
    print([r['title'] for r in client.get('/resources').json()])

    print('\nSIGN OUT:')
    print(client.post('/auth/signout', headers=headers).status_code)
