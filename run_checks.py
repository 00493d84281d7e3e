from fastapi.testclient import TestClient
from civiclens.main import app

client = TestClient(app)

print('ROOT:')
print(client.get('/').json())

print('\nHEALTH:')
print(client.get('/health').json())

print('\nAI HEALTH:')
print(client.get('/health/ai').json())

print('\nWORKSPACE:')
try:
    resp = client.post('/workspaces')
    print(resp.status_code)
    workspace_id = resp.json()['workspace_id']
    print(client.get(f'/workspaces/{workspace_id}').json())
except Exception as e:
    print('Workspace call raised exception:', e)
