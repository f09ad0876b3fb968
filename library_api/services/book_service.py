from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from library_api.errors import ConflictError, InternalError, NotFoundError
from library_api.extensions import db
from library_api.models.book import Book
from library_api.repositories.book_repo import BookRepo
from library_api.repositories.borrowing_repo import BorrowingRepo
from library_api.utils.validators import book_fields, optional_text, parse_int

class BookService:
    @staticmethod
    def list_books():
        return BookRepo.list_all()

    @staticmethod
    def search_books(params):
        """Filter the catalog; every filter is optional.

        ``category`` must match exactly, ``author`` and ``title`` match
        case-insensitive substrings, ``minCopies`` is a lower bound on copies.
        """
        min_copies = params.get("minCopies")
        if min_copies is not None and str(min_copies).strip() != "":
            min_copies = parse_int(min_copies, "minCopies")
        else:
            min_copies = None

        return BookRepo.search(
            category=optional_text(params, "category"),
            author=optional_text(params, "author"),
            title=optional_text(params, "title"),
            min_copies=min_copies,
        )

    @staticmethod
    def get_book(book_id: int):
        book = BookRepo.get(book_id)
        if not book:
            raise NotFoundError("No book found")
        return book

    @staticmethod
    def create_book(data: dict):
        book = Book(**book_fields(data))
        try:
            BookRepo.create(book)
        except SQLAlchemyError as exc:
            db.session.rollback()
            current_app.logger.exception(f"[books] Create failed: {exc}")
            raise InternalError() from exc
        current_app.logger.info(f"[books] Created book id={book.id} copies={book.copies}")
        return book

    @staticmethod
    def update_book(book_id: int, data: dict):
        book = BookService.get_book(book_id)
        for k, v in book_fields(data, partial=True).items():
            setattr(book, k, v)

        try:
            BookRepo.update()
        except SQLAlchemyError as exc:
            db.session.rollback()
            current_app.logger.exception(f"[books] Update failed for id={book_id}: {exc}")
            raise InternalError("Update failed") from exc
        current_app.logger.info(f"[books] Updated book id={book.id}")
        return book

    @staticmethod
    def delete_book(book_id: int):
        book = BookService.get_book(book_id)

        # borrowing history keeps pointing at the book
        if BorrowingRepo.exists_for_book(book_id):
            raise ConflictError("Book has borrowing records and cannot be deleted")

        try:
            BookRepo.delete(book)
        except SQLAlchemyError as exc:
            db.session.rollback()
            current_app.logger.exception(f"[books] Delete failed for id={book_id}: {exc}")
            raise InternalError() from exc
        current_app.logger.info(f"[books] Deleted book id={book_id}")
