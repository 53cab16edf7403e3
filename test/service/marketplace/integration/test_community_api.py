from fastapi.testclient import TestClient
import pytest

from test.shared.utils import create_admin, login_user
from test.util_constant import (
    ANOTHER_USER_LOGIN_ID,
    COMMUNITY_COMMENTS,
    COMMUNITY_POSTS,
    NOTIFICATION_BASE,
    TEST_ADMIN_LOGIN_ID,
    TEST_ADVISOR_LOGIN_ID,
    TEST_USER_LOGIN_ID,
    TEST_USER_NICKNAME,
)


QUESTION_POST = {
    'category': 'QUESTION',
    'title': 'How do you size positions?',
    'content': 'Looking for a rule of thumb for swing trades.',
}


@pytest.fixture
def question_post(client: TestClient, test_user) -> dict:
    login_user(client, TEST_USER_LOGIN_ID)
    response = client.post(COMMUNITY_POSTS, json=QUESTION_POST)
    assert response.status_code == 201, response.text
    return response.json()


@pytest.mark.integration
class TestPostAPI:
    def test_user_writes_question(self, client: TestClient, question_post, test_user):
        assert question_post['post_id'] > 0
        assert question_post['author_id'] == test_user['id']
        assert question_post['category_display_name'] == 'Q&A'
        assert question_post['view_count'] == 0

    def test_user_cannot_write_other_categories(self, client: TestClient, test_user):
        login_user(client, TEST_USER_LOGIN_ID)

        response = client.post(COMMUNITY_POSTS, json={**QUESTION_POST, 'category': 'TRADE_RECORD'})

        assert response.status_code == 403
        assert response.json()['detail'] == 'Users can only write QUESTION posts'

    def test_all_is_not_writable(self, client: TestClient, test_user):
        login_user(client, TEST_USER_LOGIN_ID)

        response = client.post(COMMUNITY_POSTS, json={**QUESTION_POST, 'category': 'ALL'})

        assert response.status_code == 400

    def test_advisor_writes_market_analysis(self, client: TestClient, approved_advisor):
        login_user(client, TEST_ADVISOR_LOGIN_ID)

        response = client.post(
            COMMUNITY_POSTS, json={**QUESTION_POST, 'category': 'MARKET_ANALYSIS'}
        )

        assert response.status_code == 201
        assert response.json()['category_display_name'] == 'Market Analysis'

    def test_write_permission(self, client: TestClient, test_user):
        login_user(client, TEST_USER_LOGIN_ID)

        response = client.get(f'{COMMUNITY_POSTS}/write-permission')

        assert response.status_code == 200
        assert response.json() == {
            'can_write': True,
            'role': 'user',
            'available_categories': ['QUESTION'],
        }

    def test_list_with_category_filter(self, client: TestClient, question_post):
        everything = client.get(COMMUNITY_POSTS, params={'category': 'ALL'}).json()
        questions = client.get(COMMUNITY_POSTS, params={'category': 'QUESTION'}).json()
        trades = client.get(COMMUNITY_POSTS, params={'category': 'TRADE_RECORD'}).json()

        assert [p['post_id'] for p in everything['content']] == [question_post['post_id']]
        assert questions['content'][0]['author_nickname'] == TEST_USER_NICKNAME
        assert questions['content'][0]['comment_count'] == 0
        assert trades['content'] == []

    def test_detail_counts_views(self, client: TestClient, question_post):
        url = f'{COMMUNITY_POSTS}/{question_post["post_id"]}'

        client.get(url)
        response = client.get(url)

        assert response.status_code == 200
        data = response.json()
        assert data['view_count'] == 2
        assert data['author_nickname'] == TEST_USER_NICKNAME
        assert data['comments']['content'] == []

    def test_update_own_post(self, client: TestClient, question_post):
        response = client.put(
            f'{COMMUNITY_POSTS}/{question_post["post_id"]}',
            json={**QUESTION_POST, 'title': 'Position sizing for beginners'},
        )

        assert response.status_code == 200
        assert response.json()['title'] == 'Position sizing for beginners'

    def test_other_user_cannot_update(self, client: TestClient, question_post, another_user):
        login_user(client, ANOTHER_USER_LOGIN_ID)

        response = client.put(f'{COMMUNITY_POSTS}/{question_post["post_id"]}', json=QUESTION_POST)

        assert response.status_code == 403

    def test_admin_can_delete_any_post(
        self, client: TestClient, question_post, execute_sql_statement
    ):
        create_admin(client, execute_sql_statement)
        login_user(client, TEST_ADMIN_LOGIN_ID)

        response = client.delete(f'{COMMUNITY_POSTS}/{question_post["post_id"]}')

        assert response.status_code == 200
        assert response.json()['message'] == 'Post deleted'
        assert client.get(f'{COMMUNITY_POSTS}/{question_post["post_id"]}').status_code == 404
        assert client.get(COMMUNITY_POSTS).json()['content'] == []


@pytest.mark.integration
class TestCommentAPI:
    def test_comment_notifies_post_author(
        self, client: TestClient, question_post, another_user
    ):
        login_user(client, ANOTHER_USER_LOGIN_ID)

        response = client.post(
            f'{COMMUNITY_POSTS}/{question_post["post_id"]}/comments',
            json={'content': 'Never risk more than 2% per trade.'},
        )

        assert response.status_code == 201
        assert response.json()['author_id'] == another_user['id']

        login_user(client, TEST_USER_LOGIN_ID)
        notifications = client.get(NOTIFICATION_BASE).json()['content']
        assert [n['type'] for n in notifications] == ['COMMENT_CREATED']
        assert notifications[0]['related_id'] == question_post['post_id']
        assert question_post['title'] in notifications[0]['message']

    def test_own_comment_does_not_notify(self, client: TestClient, question_post):
        client.post(
            f'{COMMUNITY_POSTS}/{question_post["post_id"]}/comments',
            json={'content': 'Answering my own question.'},
        )

        assert client.get(NOTIFICATION_BASE).json()['content'] == []

    def test_comments_show_in_detail_and_list(self, client: TestClient, question_post):
        post_url = f'{COMMUNITY_POSTS}/{question_post["post_id"]}'
        client.post(f'{post_url}/comments', json={'content': 'First'})
        client.post(f'{post_url}/comments', json={'content': 'Second'})

        detail = client.get(post_url).json()
        listed = client.get(COMMUNITY_POSTS).json()['content'][0]

        assert [c['content'] for c in detail['comments']['content']] == ['First', 'Second']
        assert detail['comments']['content'][0]['author_nickname'] == TEST_USER_NICKNAME
        assert listed['comment_count'] == 2

    def test_edit_and_delete_comment(self, client: TestClient, question_post):
        created = client.post(
            f'{COMMUNITY_POSTS}/{question_post["post_id"]}/comments', json={'content': 'Typo'}
        ).json()
        comment_url = f'{COMMUNITY_COMMENTS}/{created["comment_id"]}'

        edited = client.put(comment_url, json={'content': 'Fixed'})
        deleted = client.delete(comment_url)

        assert edited.status_code == 200
        assert edited.json()['content'] == 'Fixed'
        assert deleted.json()['message'] == 'Comment deleted'
        comments = client.get(f'{COMMUNITY_POSTS}/{question_post["post_id"]}/comments').json()
        assert comments['content'] == []

    def test_other_user_cannot_delete_comment(
        self, client: TestClient, question_post, another_user
    ):
        created = client.post(
            f'{COMMUNITY_POSTS}/{question_post["post_id"]}/comments', json={'content': 'Mine'}
        ).json()
        login_user(client, ANOTHER_USER_LOGIN_ID)

        response = client.delete(f'{COMMUNITY_COMMENTS}/{created["comment_id"]}')

        assert response.status_code == 403

    def test_comment_on_missing_post(self, client: TestClient, test_user):
        login_user(client, TEST_USER_LOGIN_ID)

        response = client.post(f'{COMMUNITY_POSTS}/9999/comments', json={'content': 'Hello'})

        assert response.status_code == 404
