from fastapi.testclient import TestClient
import pytest

from test.shared.utils import login_user, next_weekday
from test.util_constant import (
    ADVISOR_BASE,
    ANOTHER_USER_LOGIN_ID,
    NOTIFICATION_BASE,
    REVIEW_BASE,
    TEST_ADVISOR_LOGIN_ID,
    TEST_ADVISOR_NICKNAME,
    TEST_USER_LOGIN_ID,
    TEST_USER_NICKNAME,
)


REVIEW_CONTENT = 'Clear explanations and a concrete plan.'


@pytest.fixture
def written_review(client: TestClient, completed_reservation) -> dict:
    login_user(client, TEST_USER_LOGIN_ID)
    response = client.post(
        REVIEW_BASE,
        json={
            'reservation_id': completed_reservation['reservation_id'],
            'rating': 4,
            'content': REVIEW_CONTENT,
        },
    )
    assert response.status_code == 201, response.text
    return response.json()


@pytest.mark.integration
class TestCreateReviewAPI:
    def test_review_completed_consultation(
        self, client: TestClient, approved_advisor, completed_reservation, written_review
    ):
        assert written_review['reservation_id'] == completed_reservation['reservation_id']
        assert written_review['advisor_id'] == approved_advisor['user_id']
        assert written_review['rating'] == 4

        login_user(client, TEST_ADVISOR_LOGIN_ID)
        notifications = client.get(NOTIFICATION_BASE).json()['content']
        review_notes = [n for n in notifications if n['type'] == 'REVIEW_CREATED']
        assert len(review_notes) == 1
        assert review_notes[0]['related_id'] == written_review['review_id']
        assert TEST_USER_NICKNAME in review_notes[0]['message']

    def test_pending_consultation_cannot_be_reviewed(self, client: TestClient, book_reservation):
        booked = book_reservation(next_weekday())

        response = client.post(
            REVIEW_BASE,
            json={
                'reservation_id': booked['reservation_id'],
                'rating': 5,
                'content': REVIEW_CONTENT,
            },
        )

        assert response.status_code == 400
        assert response.json()['detail'] == 'CONSULTATION_NOT_COMPLETED'

    def test_second_review_is_conflict(
        self, client: TestClient, completed_reservation, written_review
    ):
        response = client.post(
            REVIEW_BASE,
            json={
                'reservation_id': completed_reservation['reservation_id'],
                'rating': 5,
                'content': REVIEW_CONTENT,
            },
        )

        assert response.status_code == 409
        assert response.json()['detail'] == 'REVIEW_ALREADY_EXISTS'

    def test_only_the_client_can_review(
        self, client: TestClient, completed_reservation, another_user
    ):
        login_user(client, ANOTHER_USER_LOGIN_ID)

        response = client.post(
            REVIEW_BASE,
            json={
                'reservation_id': completed_reservation['reservation_id'],
                'rating': 5,
                'content': REVIEW_CONTENT,
            },
        )

        assert response.status_code == 403
        assert response.json()['detail'] == 'NOT_RESERVATION_OWNER'

    def test_short_content_is_rejected(self, client: TestClient, completed_reservation):
        login_user(client, TEST_USER_LOGIN_ID)

        response = client.post(
            REVIEW_BASE,
            json={
                'reservation_id': completed_reservation['reservation_id'],
                'rating': 5,
                'content': 'Great',
            },
        )

        assert response.status_code == 400


@pytest.mark.integration
class TestReviewListingAPI:
    def test_my_reviews(self, client: TestClient, written_review):
        response = client.get(f'{REVIEW_BASE}/me')

        assert response.status_code == 200
        content = response.json()['content']
        assert [r['review_id'] for r in content] == [written_review['review_id']]
        assert content[0]['advisor_nickname'] == TEST_ADVISOR_NICKNAME

    def test_advisor_reviews_and_rating(
        self, client: TestClient, approved_advisor, written_review
    ):
        advisor_id = approved_advisor['user_id']

        reviews = client.get(f'{ADVISOR_BASE}/{advisor_id}/reviews').json()['content']
        detail = client.get(f'{ADVISOR_BASE}/{advisor_id}').json()

        assert reviews[0]['reviewer_nickname'] == TEST_USER_NICKNAME
        assert reviews[0]['content'] == REVIEW_CONTENT
        assert detail['review_count'] == 1
        assert detail['average_rating'] == 4.0
        assert detail['reviews'][0]['review_id'] == written_review['review_id']


@pytest.mark.integration
class TestEditReviewAPI:
    def test_update_review(self, client: TestClient, written_review):
        response = client.put(
            f'{REVIEW_BASE}/{written_review["review_id"]}',
            json={'rating': 5, 'content': 'Even better on a second look.'},
        )

        assert response.status_code == 200
        assert response.json()['rating'] == 5
        assert response.json()['content'] == 'Even better on a second look.'

    def test_other_user_cannot_update(self, client: TestClient, written_review, another_user):
        login_user(client, ANOTHER_USER_LOGIN_ID)

        response = client.put(
            f'{REVIEW_BASE}/{written_review["review_id"]}',
            json={'rating': 1, 'content': 'Trying to edit a stranger review.'},
        )

        assert response.status_code == 403
        assert response.json()['detail'] == 'NOT_REVIEW_OWNER'

    def test_delete_review_hides_it(self, client: TestClient, approved_advisor, written_review):
        response = client.delete(f'{REVIEW_BASE}/{written_review["review_id"]}')

        assert response.status_code == 200
        assert response.json()['message'] == 'Review deleted'
        assert client.get(f'{REVIEW_BASE}/me').json()['content'] == []
        detail = client.get(f'{ADVISOR_BASE}/{approved_advisor["user_id"]}').json()
        assert detail['review_count'] == 0
