# Test Utility Constants

# Routes
AUTH_SIGNUP = '/api/auth/signup'
AUTH_SIGNUP_ADVISOR = '/api/auth/signup/advisor'
AUTH_LOGIN = '/api/auth/login'
AUTH_REFRESH = '/api/auth/refresh'
AUTH_LOGOUT = '/api/auth/logout'
AUTH_CHECK_DUPLICATE = '/api/auth/check-duplicate'
USER_ME = '/api/users/me'
USER_ME_PASSWORD = '/api/users/me/password'
ADVISOR_BASE = '/api/advisors'
ADVISOR_PROFILE = '/api/advisors/profile'
ADVISOR_BLOCKED_TIMES = '/api/advisors/blocked-times'
ADVISOR_CERTIFICATE_APPROVAL = '/api/advisors/certificate-approval'
ADMIN_ADVISOR_REQUESTS = '/api/admin/advisor-requests'
RESERVATION_BASE = '/api/reservations'
PAYMENT_PREPARE = '/api/payments/prepare'
PAYMENT_CONFIRM = '/api/payments/confirm'
NOTIFICATION_BASE = '/api/notifications'
COMMUNITY_POSTS = '/api/community/posts'
COMMUNITY_COMMENTS = '/api/community/comments'
FAVORITE_BASE = '/api/favorites'
REVIEW_BASE = '/api/reviews'

# Test Passwords
DEFAULT_PASSWORD = 'P@ssw0rd1'

# Test Users
TEST_USER_LOGIN_ID = 'investor01'
TEST_USER_NAME = 'Kim Minsu'
TEST_USER_NICKNAME = 'minsu'
ANOTHER_USER_LOGIN_ID = 'investor02'
ANOTHER_USER_NAME = 'Park Yuna'
ANOTHER_USER_NICKNAME = 'yuna'
TEST_ADVISOR_LOGIN_ID = 'advisor01'
TEST_ADVISOR_NAME = 'Lee Jiwon'
TEST_ADVISOR_NICKNAME = 'jiwon'
TEST_ADMIN_LOGIN_ID = 'admin01'
TEST_ADMIN_NAME = 'Operator'
TEST_ADMIN_NICKNAME = 'operator'

# Advisor certificate
TEST_CERTIFICATE = {
    'certificate_name': 'Investment Advisor',
    'certificate_file_sn': '12345678',
    'birth': '19900101',
    'certificate_file_number': '123456',
}

TEST_PROFILE = {
    'short_intro': 'Ten years of swing trading',
    'preferred_trade_style': 'MID',
    'long_intro': 'Former securities analyst covering semiconductors.',
    'career_entries': [
        {
            'action': 'CREATE',
            'title': 'Securities analyst',
            'description': 'Covered semiconductors',
            'started_at': '2015-03-01',
            'ended_at': '2020-12-31',
        }
    ],
    'consultation_fee': 50000,
}
