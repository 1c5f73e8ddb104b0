"""Unit tests for the HTTP API."""

import pytest
from fastapi.testclient import TestClient

from gitcms.server import create_app


DRAFT = 'content/hello-md-1700000000000'


@pytest.fixture
def client(test_config, fake_gateway):
    return TestClient(create_app(test_config, gateway=fake_gateway))


def assert_error(response, status_code, message=None):
    assert response.status_code == status_code
    body = response.json()
    assert body['success'] is False
    if message:
        assert message in body['error']


class TestHealth:

    def test_health(self, client):
        response = client.get('/health')

        assert response.status_code == 200
        assert response.json()['status'] == 'healthy'
        assert 'version' in response.json()


class TestBranchEndpoints:
    """Test /api/branches."""

    def test_list(self, client):
        response = client.get('/api/branches')

        assert response.status_code == 200
        assert [b['name'] for b in response.json()] == ['main', DRAFT]
        assert response.json()[0]['commit']['sha'] == 'head-main'

    def test_create(self, client, fake_gateway):
        response = client.post('/api/branches', json={'branchName': 'content/manual-1'})

        assert response.status_code == 200
        assert response.json() == {'success': True}
        assert 'content/manual-1' in fake_gateway.files

    def test_create_requires_name(self, client, fake_gateway):
        response = client.post('/api/branches', json={'baseBranch': 'main'})

        assert_error(response, 400, 'branchName is required')
        assert 'create_branch' not in fake_gateway.calls

    def test_create_existing_is_upstream_failure(self, client):
        response = client.post('/api/branches', json={'branchName': DRAFT})

        assert_error(response, 500)

    def test_delete(self, client, fake_gateway):
        response = client.request('DELETE', '/api/branches', json={'branchName': DRAFT})

        assert response.status_code == 200
        assert DRAFT not in fake_gateway.files

    def test_delete_published_branch_refused(self, client, fake_gateway):
        response = client.request('DELETE', '/api/branches', json={'branchName': 'main'})

        assert_error(response, 500)
        assert 'main' in fake_gateway.files


class TestContentEndpoints:
    """Test /api/contents."""

    def test_single_branch_listing(self, client):
        response = client.get('/api/contents', params={'path': 'content', 'branch': DRAFT})

        names = {e['name'] for e in response.json()}
        assert names == {'hello.md', 'draft-only.md', 'posts'}
        assert all(e['branch'] == DRAFT for e in response.json())

    def test_placeholder_branch_means_default(self, client):
        response = client.get('/api/contents', params={'path': 'content', 'branch': 'undefined'})

        assert all(e['branch'] == 'main' and e['published'] for e in response.json())

    def test_repository_root_is_listable(self, client):
        response = client.get('/api/contents')

        assert {e['name'] for e in response.json()} == {'content', 'README.md'}

    def test_merged_listing(self, client):
        response = client.get('/api/contents/merged')

        entries = response.json()
        assert [e['name'] for e in entries] == ['posts', 'draft-only.md', 'hello.md']
        assert entries[1]['published'] is False
        assert entries[1]['branch'] == DRAFT
        assert entries[2]['published'] is True

    def test_default_branch_resolved_once_per_request(self, client, fake_gateway):
        client.get('/api/contents/merged')

        assert fake_gateway.calls.count('get_default_branch') == 1


class TestFileEndpoints:
    """Test /api/files and /api/file-versions."""

    def test_get_file(self, client):
        response = client.get('/api/files', params={'path': 'content/hello.md'})

        assert response.status_code == 200
        assert response.json()['content'] == '# Hello\n\nPublished'
        assert response.json()['published'] is True

    def test_get_file_requires_path(self, client):
        assert_error(client.get('/api/files'), 400, 'path is required')

    def test_get_missing_file(self, client):
        assert_error(client.get('/api/files', params={'path': 'content/nope.md'}), 404)

    def test_save_new_file(self, client, fake_gateway):
        response = client.post('/api/files', json={
            'path': 'content/new.md',
            'content': '# New',
            'message': 'Add new',
            'isNewFile': True
        })

        assert response.status_code == 200
        body = response.json()
        assert body['success'] is True
        assert body['branch'].startswith('content/new-md-')
        assert body['pullRequest']['head']['ref'] == body['branch']
        assert body['pullRequest']['base']['ref'] == 'main'
        assert fake_gateway.files[body['branch']]['content/new.md'][0] == b'# New'

    def test_update_file(self, client, fake_gateway):
        sha = fake_gateway.files[DRAFT]['content/hello.md'][1]

        response = client.post('/api/files', json={
            'path': 'content/hello.md',
            'content': '# Edited',
            'message': 'Edit',
            'sha': sha,
            'branch': DRAFT
        })

        assert response.status_code == 200
        assert 'pullRequest' not in response.json()
        assert response.json()['sha'] == fake_gateway.files[DRAFT]['content/hello.md'][1]

    @pytest.mark.parametrize('missing', ['path', 'content', 'message'])
    def test_save_requires_fields(self, client, fake_gateway, missing):
        payload = {'path': 'content/a.md', 'content': 'x', 'message': 'Add'}
        del payload[missing]

        assert_error(client.post('/api/files', json=payload), 400, f'{missing} is required')
        assert 'create_or_update_file' not in fake_gateway.calls

    def test_save_stale_revision(self, client):
        response = client.post('/api/files', json={
            'path': 'content/hello.md',
            'content': '# Edited',
            'message': 'Edit',
            'sha': 'stale',
            'branch': 'main'
        })

        assert_error(response, 500)

    def test_malformed_body(self, client):
        response = client.post(
            '/api/files',
            content='{not json',
            headers={'Content-Type': 'application/json'}
        )

        assert_error(response, 400)

    def test_delete_file(self, client, fake_gateway):
        sha = fake_gateway.files[DRAFT]['content/draft-only.md'][1]

        response = client.request('DELETE', '/api/files', json={
            'path': 'content/draft-only.md',
            'sha': sha,
            'message': 'Remove',
            'branch': DRAFT
        })

        assert response.status_code == 200
        assert 'content/draft-only.md' not in fake_gateway.files[DRAFT]

    def test_delete_without_sha_makes_no_gateway_call(self, client, fake_gateway):
        response = client.request('DELETE', '/api/files', json={
            'path': 'content/hello.md',
            'message': 'Remove'
        })

        assert_error(response, 400, 'sha is required')
        assert 'delete_file' not in fake_gateway.calls

    def test_file_versions(self, client):
        response = client.get('/api/file-versions', params={'path': 'content/hello.md'})

        versions = response.json()
        assert [v['branch'] for v in versions] == ['main', DRAFT]
        assert versions[0]['isPublished'] is True
        assert versions[1]['author'] == 'Bob'
        assert versions[1]['commitMessage'] == 'Edit hello'
        assert versions[1]['lastModified'].startswith('2024-02-01')

    def test_file_versions_requires_path(self, client):
        assert_error(client.get('/api/file-versions'), 400)


class TestPullRequestEndpoints:
    """Test /api/pull-requests."""

    def test_create_and_list(self, client):
        response = client.post('/api/pull-requests', json={'title': 'Edit hello', 'head': DRAFT})

        assert response.status_code == 200
        assert response.json()['number'] == 1
        assert response.json()['base']['ref'] == 'main'

        listed = client.get('/api/pull-requests').json()
        assert [pr['head']['ref'] for pr in listed] == [DRAFT]

    @pytest.mark.parametrize('payload,message', [
        ({'head': DRAFT}, 'title is required'),
        ({'title': 'Edit'}, 'head is required'),
    ])
    def test_create_requires_fields(self, client, payload, message):
        assert_error(client.post('/api/pull-requests', json=payload), 400, message)

    def test_merge(self, client, fake_gateway):
        client.post('/api/pull-requests', json={'title': 'Edit hello', 'head': DRAFT})

        response = client.post('/api/pull-requests/1/merge', json={'commitTitle': 'Publish hello'})

        assert response.status_code == 200
        assert fake_gateway.files['main']['content/hello.md'][0] == b'# Hello\n\nDraft'

    def test_merge_without_body(self, client):
        client.post('/api/pull-requests', json={'title': 'Edit hello', 'head': DRAFT})

        assert client.post('/api/pull-requests/1/merge').status_code == 200

    def test_merge_non_numeric_id(self, client, fake_gateway):
        assert_error(client.post('/api/pull-requests/abc/merge'), 400)
        assert 'merge_pull_request' not in fake_gateway.calls

    def test_merge_unknown_pull_request(self, client):
        assert_error(client.post('/api/pull-requests/99/merge'), 500)
