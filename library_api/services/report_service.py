from library_api.repositories.borrowing_repo import BorrowingRepo
from library_api.utils.validators import MAX_DB_INT, parse_int


class ReportService:
    @staticmethod
    def currently_borrowed():
        rows = BorrowingRepo.list_active()
        return [
            {
                **borrowing.to_dict(),
                "book": book.summary() if book else None,
                "user": user.summary() if user else None,
            }
            for borrowing, book, user in rows
        ]

    @staticmethod
    def popular_books(n):
        """Top ``n`` books by number of borrowings.

        Ties go to the book that was borrowed first. ``n`` must be a whole
        integer, so "2abc" is rejected rather than read as 2. ``n <= 0``
        gives an empty list and any larger ``n`` just returns every book.
        """
        limit = parse_int(n, "n", bounded=False)
        if limit <= 0:
            return []
        limit = min(limit, MAX_DB_INT)

        return [
            {
                "bookId": book_id,
                "borrowCount": count,
                "bookDetails": book.to_dict() if book else None,
            }
            for book_id, count, book in BorrowingRepo.most_borrowed(limit)
        ]
