from library_api.extensions import db
from library_api.models.book import utcnow


class Borrowing(db.Model):
    __tablename__ = "borrowings"

    id = db.Column(db.Integer, primary_key=True)

    # snapshot of the book title when the loan was made
    title = db.Column(db.String(200), nullable=True)

    borrowed_by = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    book_id = db.Column(db.Integer, db.ForeignKey("books.id"), nullable=False, index=True)

    start = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)
    end = db.Column(db.DateTime(timezone=True), nullable=True)
    returned = db.Column(db.Boolean, nullable=False, default=False, index=True)

    user = db.relationship("User", backref=db.backref("borrowings", lazy=True))
    book = db.relationship("Book", backref=db.backref("borrowings", lazy=True))

    def to_dict(self):
        return {
            "id": self.id,
            "title": self.title,
            "borrowedBy": self.borrowed_by,
            "bookId": self.book_id,
            "start": self.start.isoformat() if self.start else None,
            "end": self.end.isoformat() if self.end else None,
            "returned": bool(self.returned),
        }
