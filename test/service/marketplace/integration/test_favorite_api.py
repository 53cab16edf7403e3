from fastapi.testclient import TestClient
import pytest

from test.shared.utils import login_user, signup_advisor
from test.util_constant import (
    FAVORITE_BASE,
    TEST_ADVISOR_LOGIN_ID,
    TEST_ADVISOR_NICKNAME,
    TEST_PROFILE,
    TEST_USER_LOGIN_ID,
)


@pytest.mark.integration
class TestFavoriteAPI:
    def test_add_and_list(self, client: TestClient, approved_advisor, test_user):
        login_user(client, TEST_USER_LOGIN_ID)

        response = client.post(f'{FAVORITE_BASE}/{approved_advisor["user_id"]}')

        assert response.status_code == 200
        assert response.json() == {
            'advisor_id': approved_advisor['user_id'],
            'favorited': True,
            'message': 'favorited',
        }

        favorites = client.get(FAVORITE_BASE).json()
        assert favorites['has_next'] is False
        assert len(favorites['content']) == 1
        item = favorites['content'][0]
        assert item['advisor_id'] == approved_advisor['user_id']
        assert item['nickname'] == TEST_ADVISOR_NICKNAME
        assert item['consultation_fee'] == TEST_PROFILE['consultation_fee']

    def test_add_twice_is_idempotent(self, client: TestClient, approved_advisor, test_user):
        login_user(client, TEST_USER_LOGIN_ID)
        url = f'{FAVORITE_BASE}/{approved_advisor["user_id"]}'
        client.post(url)

        response = client.post(url)

        assert response.status_code == 200
        assert response.json()['message'] == 'already favorited'
        assert len(client.get(FAVORITE_BASE).json()['content']) == 1

    def test_remove(self, client: TestClient, approved_advisor, test_user):
        login_user(client, TEST_USER_LOGIN_ID)
        url = f'{FAVORITE_BASE}/{approved_advisor["user_id"]}'
        client.post(url)

        removed = client.delete(url)
        removed_again = client.delete(url)

        assert removed.json() == {
            'advisor_id': approved_advisor['user_id'],
            'favorited': False,
            'message': 'unfavorited',
        }
        assert removed_again.json()['message'] == 'not favorited'
        assert client.get(FAVORITE_BASE).json()['content'] == []

    def test_unapproved_advisor_cannot_be_favorited(self, client: TestClient, test_user):
        pending = signup_advisor(client)
        login_user(client, TEST_USER_LOGIN_ID)

        response = client.post(f'{FAVORITE_BASE}/{pending["user_id"]}')

        assert response.status_code == 404

    def test_advisor_cannot_favorite(self, client: TestClient, approved_advisor):
        login_user(client, TEST_ADVISOR_LOGIN_ID)

        response = client.post(f'{FAVORITE_BASE}/{approved_advisor["user_id"]}')

        assert response.status_code == 403
        assert response.json()['detail'] == 'Only users can perform this action'
