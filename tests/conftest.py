import pytest

from library_api import create_app
from library_api.extensions import db
from library_api.models.book import Book
from library_api.models.borrowing import Borrowing
from library_api.models.user import User
from library_api.services.auth_service import AuthService

PASSWORD = "Str0ng!Pass"


@pytest.fixture
def app():
    app = create_app("testing")
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_user(app):
    def _make_user(name, email, admin=False, password=PASSWORD):
        user = User(
            name=name,
            email=email,
            password_hash=AuthService.hash_password(password),
            admin=admin,
        )
        db.session.add(user)
        db.session.commit()
        return user

    return _make_user


@pytest.fixture
def make_book(app):
    def _make_book(category="Fiction", author="Author Name", title="Test Book", copies=5):
        book = Book(category=category, author=author, title=title, copies=copies)
        db.session.add(book)
        db.session.commit()
        return book

    return _make_book


@pytest.fixture
def make_borrowing(app):
    def _make_borrowing(user, book, returned=False):
        borrowing = Borrowing(title=book.title, borrowed_by=user.id, book_id=book.id, returned=returned)
        db.session.add(borrowing)
        db.session.commit()
        return borrowing

    return _make_borrowing


@pytest.fixture
def headers_for(app):
    def _headers_for(user):
        return {"Authorization": f"Bearer {AuthService.issue_token(user)}"}

    return _headers_for


@pytest.fixture
def user(make_user):
    return make_user("Regular User", "user@example.com")


@pytest.fixture
def other_user(make_user):
    return make_user("Other User", "other@example.com")


@pytest.fixture
def admin(make_user):
    return make_user("Admin User", "admin@example.com", admin=True)


@pytest.fixture
def book(make_book):
    return make_book()


@pytest.fixture
def user_headers(user, headers_for):
    return headers_for(user)


@pytest.fixture
def other_headers(other_user, headers_for):
    return headers_for(other_user)


@pytest.fixture
def admin_headers(admin, headers_for):
    return headers_for(admin)
