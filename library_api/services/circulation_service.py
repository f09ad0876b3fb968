from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from library_api.errors import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    InsufficientCopiesError,
    InternalError,
    NotFoundError,
)
from library_api.extensions import db
from library_api.models.book import utcnow
from library_api.models.borrowing import Borrowing
from library_api.models.user import User
from library_api.repositories.book_repo import BookRepo
from library_api.repositories.borrowing_repo import BorrowingRepo


class CirculationService:
    """Borrow/return workflow.

    ``Book.copies`` only changes through single conditional UPDATE statements,
    so two requests racing for the last copy cannot both succeed. The
    borrowing row and the counter change are committed together.
    """

    @staticmethod
    def _require_user(user):
        if user is None:
            raise AuthenticationError("User Not found")
        return user

    @staticmethod
    def borrow_book(user: User, book_id: int) -> Borrowing:
        CirculationService._require_user(user)

        book = BookRepo.get(book_id)
        if not book:
            raise NotFoundError("book not found")

        try:
            if not BookRepo.take_copy(book.id):
                db.session.rollback()
                raise InsufficientCopiesError()

            borrowing = Borrowing(
                title=book.title,
                borrowed_by=user.id,
                book_id=book.id,
                start=utcnow(),
                returned=False,
            )
            BorrowingRepo.add(borrowing)
            BorrowingRepo.commit()
        except SQLAlchemyError as exc:
            db.session.rollback()
            current_app.logger.exception(f"[circulation] Borrow failed for book id={book_id}: {exc}")
            raise InternalError() from exc

        current_app.logger.info(
            f"[circulation] User id={user.id} borrowed book id={book_id} (borrowing id={borrowing.id})"
        )
        return borrowing

    @staticmethod
    def return_book(user: User, borrowing_id: int) -> Borrowing:
        CirculationService._require_user(user)

        borrowing = BorrowingRepo.get(borrowing_id)
        if not borrowing:
            raise NotFoundError("borrowing not found")

        # admin may close someone else's loan
        if borrowing.borrowed_by != user.id and not user.admin:
            raise AuthorizationError("You can only return your own borrowings")

        if borrowing.returned:
            raise ConflictError("Book already returned")

        book = BookRepo.get(borrowing.book_id)
        if not book:
            raise NotFoundError("book not found")

        try:
            # a concurrent return of the same loan finds nothing left to close
            if not BorrowingRepo.close(borrowing.id, utcnow()):
                db.session.rollback()
                raise ConflictError("Book already returned")
            BookRepo.put_back_copy(book.id)
            BorrowingRepo.commit()
        except SQLAlchemyError as exc:
            db.session.rollback()
            current_app.logger.exception(f"[circulation] Return failed for borrowing id={borrowing_id}: {exc}")
            raise InternalError() from exc

        current_app.logger.info(
            f"[circulation] User id={user.id} returned borrowing id={borrowing_id} (book id={book.id})"
        )
        return borrowing

    @staticmethod
    def history(user: User):
        CirculationService._require_user(user)
        return BorrowingRepo.list_by_user(user.id)

    @staticmethod
    def active_loans(user: User):
        CirculationService._require_user(user)
        rows = BorrowingRepo.list_active_by_user(user.id)
        return [
            {**borrowing.to_dict(), "book": book.summary() if book else None}
            for borrowing, book in rows
        ]
