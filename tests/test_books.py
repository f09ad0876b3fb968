from sqlalchemy.exc import SQLAlchemyError

from library_api.extensions import db
from library_api.models.book import Book
from library_api.repositories.book_repo import BookRepo


NEW_BOOK = {"category": "Science", "author": "New Author", "title": "New Book", "copies": 3}


def test_create_book_as_admin(client, admin_headers):
    resp = client.post("/books", json=NEW_BOOK, headers=admin_headers)
    assert resp.status_code == 201
    data = resp.get_json()["data"]
    for key, value in NEW_BOOK.items():
        assert data[key] == value
    assert db.session.get(Book, data["id"]).copies == 3


def test_create_book_title_is_optional(client, admin_headers):
    payload = {"category": "Science", "author": "Anon", "copies": 1}
    resp = client.post("/books", json=payload, headers=admin_headers)
    assert resp.status_code == 201
    assert resp.get_json()["data"]["title"] is None


def test_create_book_rejects_non_admin(client, user_headers):
    resp = client.post("/books", json=NEW_BOOK, headers=user_headers)
    assert resp.status_code == 401
    assert resp.get_json()["message"] == "Invalid adding credentials"
    assert Book.query.count() == 0


def test_create_book_requires_token(client):
    assert client.post("/books", json=NEW_BOOK).status_code == 401


def test_create_book_validates_fields(client, admin_headers):
    missing_category = {k: v for k, v in NEW_BOOK.items() if k != "category"}
    assert client.post("/books", json=missing_category, headers=admin_headers).status_code == 400

    missing_copies = {k: v for k, v in NEW_BOOK.items() if k != "copies"}
    assert client.post("/books", json=missing_copies, headers=admin_headers).status_code == 400

    negative = dict(NEW_BOOK, copies=-1)
    assert client.post("/books", json=negative, headers=admin_headers).status_code == 400

    not_a_number = dict(NEW_BOOK, copies="many")
    assert client.post("/books", json=not_a_number, headers=admin_headers).status_code == 400

    assert Book.query.count() == 0


def test_list_books_is_public(client, make_book):
    make_book(title="One")
    make_book(title="Two")
    resp = client.get("/books")
    assert resp.status_code == 200
    assert [b["title"] for b in resp.get_json()["data"]] == ["One", "Two"]


def test_search_without_filters_returns_catalog(client, make_book):
    for i in range(3):
        make_book(title=f"Book {i}")
    resp = client.get("/books/search")
    assert resp.status_code == 200
    assert len(resp.get_json()["data"]) == 3


def test_search_min_copies(client, make_book):
    make_book(title="None left", copies=0)
    make_book(title="Two left", copies=2)
    make_book(title="Five left", copies=5)

    resp = client.get("/books/search?minCopies=2")
    titles = [b["title"] for b in resp.get_json()["data"]]
    assert titles == ["Two left", "Five left"]
    assert all(b["copies"] >= 2 for b in resp.get_json()["data"])


def test_search_author_and_title_are_case_insensitive_substrings(client, make_book):
    make_book(author="Ursula K. Le Guin", title="The Dispossessed")
    make_book(author="Iain M. Banks", title="The Player of Games")

    by_author = client.get("/books/search?author=le guin").get_json()["data"]
    assert [b["title"] for b in by_author] == ["The Dispossessed"]

    by_title = client.get("/books/search?title=GAMES").get_json()["data"]
    assert [b["author"] for b in by_title] == ["Iain M. Banks"]


def test_search_category_is_exact(client, make_book):
    make_book(category="Fiction", title="Novel")
    make_book(category="Science Fiction", title="Space")

    resp = client.get("/books/search?category=Fiction")
    assert [b["title"] for b in resp.get_json()["data"]] == ["Novel"]


def test_search_combines_filters(client, make_book):
    make_book(category="Fiction", author="Alpha", copies=1)
    make_book(category="Fiction", author="Alpha", copies=4)
    make_book(category="History", author="Alpha", copies=4)

    resp = client.get("/books/search?category=Fiction&author=alp&minCopies=2")
    data = resp.get_json()["data"]
    assert len(data) == 1
    assert data[0]["copies"] == 4


def test_search_treats_wildcards_literally(client, make_book):
    make_book(title="100% Real")
    make_book(title="Other")
    resp = client.get("/books/search?title=%25")
    assert [b["title"] for b in resp.get_json()["data"]] == ["100% Real"]


def test_search_rejects_non_integer_min_copies(client):
    resp = client.get("/books/search?minCopies=lots")
    assert resp.status_code == 400


def test_search_no_match_is_empty(client, book):
    resp = client.get("/books/search?author=nobody")
    assert resp.status_code == 200
    assert resp.get_json()["data"] == []


def test_get_book_by_id(client, book):
    for path in (f"/books/{book.id}", f"/books/get/{book.id}"):
        resp = client.get(path)
        assert resp.status_code == 200
        assert resp.get_json()["data"]["title"] == "Test Book"


def test_get_book_missing(client):
    resp = client.get("/books/999")
    assert resp.status_code == 404
    assert resp.get_json()["message"] == "No book found"

    resp = client.get("/books/invalidId")
    assert resp.status_code == 404
    assert resp.get_json()["message"] == "No book found"


def test_update_book_partial(client, book, admin_headers):
    resp = client.put(f"/books/{book.id}", json={"title": "Updated Title"}, headers=admin_headers)
    assert resp.status_code == 200
    data = resp.get_json()["data"]
    assert data["title"] == "Updated Title"
    assert data["author"] == "Author Name"
    assert data["copies"] == 5


def test_update_book_validates(client, book, admin_headers):
    assert client.put(f"/books/{book.id}", json={"copies": -2}, headers=admin_headers).status_code == 400
    assert client.put(f"/books/{book.id}", json={"author": ""}, headers=admin_headers).status_code == 400
    assert db.session.get(Book, book.id).copies == 5


def test_update_book_rejects_non_admin(client, book, user_headers):
    resp = client.put(f"/books/{book.id}", json={"title": "Nope"}, headers=user_headers)
    assert resp.status_code == 401
    assert resp.get_json()["message"] == "Invalid credentials"


def test_update_book_missing(client, admin_headers):
    resp = client.put("/books/999", json={"title": "x"}, headers=admin_headers)
    assert resp.status_code == 404


def test_delete_book_without_borrowings(client, book, admin_headers):
    book_id = book.id
    resp = client.delete(f"/books/{book_id}", headers=admin_headers)
    assert resp.status_code == 204
    assert resp.data == b""
    assert db.session.get(Book, book_id) is None


def test_delete_book_with_borrowings_is_rejected(client, book, user, admin_headers, make_borrowing):
    make_borrowing(user, book, returned=True)
    resp = client.delete(f"/books/{book.id}", headers=admin_headers)
    assert resp.status_code == 409
    assert db.session.get(Book, book.id) is not None


def test_delete_book_missing(client, admin_headers):
    assert client.delete("/books/999", headers=admin_headers).status_code == 404
    assert client.delete("/books/invalidId", headers=admin_headers).status_code == 404


def test_delete_book_rejects_non_admin(client, book, user_headers):
    resp = client.delete(f"/books/{book.id}", headers=user_headers)
    assert resp.status_code == 401
    assert resp.get_json()["message"] == "Invalid credentials"


def test_oversized_ids_are_not_found(client, admin_headers):
    huge = "99999999999999999999999"
    assert client.get(f"/books/{huge}").status_code == 404
    assert client.get(f"/books/get/{huge}").status_code == 404
    assert client.put(f"/books/{huge}", json={"title": "x"}, headers=admin_headers).status_code == 404
    assert client.delete(f"/books/{huge}", headers=admin_headers).status_code == 404
    assert client.get(f"/books/-{huge}").get_json()["message"] == "No book found"


def test_oversized_integers_are_rejected(client, book, admin_headers):
    resp = client.get("/books/search?minCopies=99999999999999999999999")
    assert resp.status_code == 400
    assert resp.get_json()["message"] == "minCopies is out of range"

    resp = client.post("/books", json={**NEW_BOOK, "copies": 10**30}, headers=admin_headers)
    assert resp.status_code == 400
    assert resp.get_json()["message"] == "copies is out of range"

    resp = client.put(f"/books/{book.id}", json={"copies": 2**63}, headers=admin_headers)
    assert resp.status_code == 400
    assert db.session.get(Book, book.id).copies == 5


def test_largest_storable_min_copies_is_accepted(client, book):
    resp = client.get(f"/books/search?minCopies={2**63 - 1}")
    assert resp.status_code == 200
    assert resp.get_json()["data"] == []


def test_failed_insert_is_rolled_back(client, admin_headers, monkeypatch):
    def fail(book):
        raise SQLAlchemyError("disk full")

    monkeypatch.setattr(BookRepo, "create", staticmethod(fail))
    resp = client.post("/books", json=NEW_BOOK, headers=admin_headers)
    assert resp.status_code == 500
    body = resp.get_json()
    assert body["success"] is False
    assert body["message"] == "Server error"

    monkeypatch.undo()
    assert client.get("/books").status_code == 200
    assert Book.query.count() == 0


def test_unhandled_database_error_is_json_500(client, book, monkeypatch):
    def fail():
        raise SQLAlchemyError("connection lost")

    monkeypatch.setattr(BookRepo, "list_all", staticmethod(fail))
    resp = client.get("/books")
    assert resp.status_code == 500
    assert resp.get_json() == {"success": False, "message": "Server error"}

    # the session was rolled back and still serves queries
    monkeypatch.undo()
    resp = client.get("/books")
    assert resp.status_code == 200
    assert [b["id"] for b in resp.get_json()["data"]] == [book.id]
