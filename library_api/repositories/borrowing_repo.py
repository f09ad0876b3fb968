from sqlalchemy import func, update

from library_api.models.book import Book
from library_api.models.borrowing import Borrowing
from library_api.models.user import User
from library_api.extensions import db

class BorrowingRepo:
    @staticmethod
    def get(borrowing_id: int):
        return db.session.get(Borrowing, borrowing_id)

    @staticmethod
    def list_by_user(user_id: int):
        return Borrowing.query.filter_by(borrowed_by=user_id).order_by(Borrowing.id).all()

    @staticmethod
    def list_active_by_user(user_id: int):
        return (
            db.session.query(Borrowing, Book)
            .select_from(Borrowing)
            .outerjoin(Book, Borrowing.book_id == Book.id)
            .filter(Borrowing.borrowed_by == user_id, Borrowing.returned.is_(False))
            .order_by(Borrowing.id)
            .all()
        )

    @staticmethod
    def list_active():
        return (
            db.session.query(Borrowing, Book, User)
            .select_from(Borrowing)
            .outerjoin(Book, Borrowing.book_id == Book.id)
            .outerjoin(User, Borrowing.borrowed_by == User.id)
            .filter(Borrowing.returned.is_(False))
            .order_by(Borrowing.id)
            .all()
        )

    @staticmethod
    def exists_for_book(book_id: int) -> bool:
        return db.session.query(Borrowing.id).filter_by(book_id=book_id).first() is not None

    @staticmethod
    def most_borrowed(limit: int):
        """Rows of (book_id, borrow_count, Book or None), most borrowed first.

        Equal counts keep the order in which the books were first borrowed.
        """
        counts = (
            db.session.query(
                Borrowing.book_id.label("book_id"),
                func.count(Borrowing.id).label("borrow_count"),
                func.min(Borrowing.id).label("first_seen"),
            )
            .group_by(Borrowing.book_id)
            .subquery()
        )
        return (
            db.session.query(counts.c.book_id, counts.c.borrow_count, Book)
            .select_from(counts)
            .outerjoin(Book, Book.id == counts.c.book_id)
            .order_by(counts.c.borrow_count.desc(), counts.c.first_seen.asc())
            .limit(limit)
            .all()
        )

    @staticmethod
    def close(borrowing_id: int, end) -> bool:
        """Mark an open borrowing returned. Does not commit.

        Returns False if the borrowing was already closed.
        """
        result = db.session.execute(
            update(Borrowing)
            .where(Borrowing.id == borrowing_id, Borrowing.returned.is_(False))
            .values(returned=True, end=end)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    @staticmethod
    def add(borrowing: Borrowing):
        db.session.add(borrowing)
        return borrowing

    @staticmethod
    def commit():
        db.session.commit()
