from datetime import datetime, timezone

from library_api.extensions import db


def utcnow():
    return datetime.now(timezone.utc)


class Book(db.Model):
    __tablename__ = "books"
    __table_args__ = (
        db.CheckConstraint("copies >= 0", name="ck_books_copies_non_negative"),
    )

    id = db.Column(db.Integer, primary_key=True)
    category = db.Column(db.String(120), nullable=False, index=True)
    author = db.Column(db.String(200), nullable=False, index=True)
    title = db.Column(db.String(200), nullable=True, index=True)

    copies = db.Column(db.Integer, nullable=False, default=0)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "category": self.category,
            "author": self.author,
            "title": self.title,
            "copies": self.copies,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }

    def summary(self):
        return {"id": self.id, "title": self.title, "author": self.author}
