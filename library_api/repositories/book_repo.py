from sqlalchemy import update

from library_api.models.book import Book
from library_api.extensions import db

class BookRepo:
    @staticmethod
    def list_all():
        return Book.query.order_by(Book.id).all()

    @staticmethod
    def get(book_id: int):
        return db.session.get(Book, book_id)

    @staticmethod
    def search(category=None, author=None, title=None, min_copies=None):
        query = Book.query
        if category is not None:
            query = query.filter(Book.category == category)
        if author is not None:
            query = query.filter(Book.author.icontains(author, autoescape=True))
        if title is not None:
            query = query.filter(Book.title.icontains(title, autoescape=True))
        if min_copies is not None:
            query = query.filter(Book.copies >= min_copies)
        return query.order_by(Book.id).all()

    @staticmethod
    def create(book: Book):
        db.session.add(book)
        db.session.commit()
        return book

    @staticmethod
    def update():
        db.session.commit()

    @staticmethod
    def delete(book: Book):
        db.session.delete(book)
        db.session.commit()

    @staticmethod
    def take_copy(book_id: int) -> bool:
        """Decrement copies in one statement, only while copies > 0.

        Does not commit. Returns False when no copy was available.
        """
        result = db.session.execute(
            update(Book)
            .where(Book.id == book_id, Book.copies > 0)
            .values(copies=Book.copies - 1)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    @staticmethod
    def put_back_copy(book_id: int) -> bool:
        result = db.session.execute(
            update(Book)
            .where(Book.id == book_id)
            .values(copies=Book.copies + 1)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1
