from app.models.user import User
from app.models.room import Room
from app.models.booking import Booking
from app.models.room_day import RoomDay
