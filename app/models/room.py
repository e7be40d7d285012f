from app.extensions import db

class Room(db.Model):
    __tablename__ = 'rooms'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(64), unique=True, nullable=False)
    capacity = db.Column(db.Integer, nullable=False)
    amenities = db.Column(db.JSON, default=list) # e.g. ["Projector", "Whiteboard"]
    is_active = db.Column(db.Boolean, default=True)

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'capacity': self.capacity,
            'amenities': self.amenities or [],
            'is_active': self.is_active
        }
