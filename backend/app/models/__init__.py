from app.models.itinerary import Itinerary, ItineraryBooking

__all__ = [
    "Itinerary",
    "ItineraryBooking",
]
