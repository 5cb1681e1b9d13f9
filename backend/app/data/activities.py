"""City-level example activities, used when a race has no curated experienceOptions.

Keyed by normalized city name, then by experience provider label.
"""

CITY_ACTIVITIES_FALLBACK: dict[str, dict[str, list[dict]]] = {
    "melbourne": {
        "GetYourGuide": [
            {"title": "Melbourne City Highlights Tour", "href": "https://www.getyourguide.com/melbourne-l123/", "description": "Discover top sights and hidden gems"},
            {"title": "Yarra Valley Wine Tour", "href": "https://www.getyourguide.com/melbourne-l123/", "description": "Wine tasting and scenic day trip"},
        ],
        "Viator": [
            {"title": "Phillip Island & Penguin Parade", "href": "https://www.viator.com/Melbourne/d384-ttd", "description": "Wildlife and coastal scenery"},
        ],
        "TripAdvisor": [
            {"title": "Things to Do in Melbourne", "href": "https://www.tripadvisor.com/Attractions-g255100-Activities-Melbourne_Victoria.html", "description": "Tours, food & culture"},
        ],
    },
    "barcelona": {
        "GetYourGuide": [
            {"title": "Sagrada Familia & Park Güell Tour", "href": "https://www.getyourguide.com/barcelona-l45/", "description": "Gaudí masterpieces"},
            {"title": "Tapas and Wine Experience", "href": "https://www.getyourguide.com/barcelona-l45/", "description": "Food tour in the Gothic Quarter"},
        ],
        "Viator": [
            {"title": "Montserrat Half-Day Trip", "href": "https://www.viator.com/Barcelona/d562-ttd", "description": "Monastery and mountain views"},
        ],
        "TripAdvisor": [
            {"title": "Things to Do in Barcelona", "href": "https://www.tripadvisor.com/Attractions-g187497-Activities-Barcelona_Catalonia.html", "description": "Tours and attractions"},
        ],
    },
    "monte carlo": {
        "GetYourGuide": [
            {"title": "Monaco & Monte Carlo Tour", "href": "https://www.getyourguide.com/monaco-l395/", "description": "Principality highlights"},
            {"title": "French Riviera Day Trip", "href": "https://www.getyourguide.com/monaco-l395/", "description": "Nice, Eze, and coastal views"},
        ],
        "Viator": [
            {"title": "Monaco Grand Prix Circuit Walk", "href": "https://www.viator.com/Monaco/d802-ttd", "description": "Walk the famous track"},
        ],
        "TripAdvisor": [
            {"title": "Things to Do in Monaco", "href": "https://www.tripadvisor.com/Attractions-g190410-Activities-Monaco.html", "description": "Tours and experiences"},
        ],
    },
    "miami": {
        "GetYourGuide": [
            {"title": "Everglades Airboat Adventure", "href": "https://www.getyourguide.com/miami-l358/", "description": "Wildlife and wetlands"},
            {"title": "South Beach Food & Art Walk", "href": "https://www.getyourguide.com/miami-l358/", "description": "Food and culture tour"},
        ],
        "Viator": [
            {"title": "Miami Boat Tour", "href": "https://www.viator.com/Miami/d662-ttd", "description": "Harbor and celebrity homes"},
        ],
        "TripAdvisor": [
            {"title": "Things to Do in Miami", "href": "https://www.tripadvisor.com/Attractions-g34438-Activities-Miami_Beach_Florida.html", "description": "Tours and activities"},
        ],
    },
    "montreal": {
        "GetYourGuide": [
            {"title": "Old Montreal Walking Tour", "href": "https://www.getyourguide.com/montreal-l359/", "description": "History and architecture"},
            {"title": "Food Tour of Mile End", "href": "https://www.getyourguide.com/montreal-l359/", "description": "Local eats and culture"},
        ],
        "Viator": [
            {"title": "Montreal City Sightseeing", "href": "https://www.viator.com/Montreal/d625-ttd", "description": "Top attractions by bus or foot"},
        ],
        "TripAdvisor": [
            {"title": "Things to Do in Montreal", "href": "https://www.tripadvisor.com/Attractions-g155032-Activities-Montreal_Quebec.html", "description": "Tours and experiences"},
        ],
    },
}

MAX_ACTIVITIES_PER_PROVIDER = 2

# Budget-tier copy shown under the flights and stays sections
FLIGHT_NOTES_BY_BUDGET: dict[str, list[str]] = {
    "$": [
        "Book early for best prices",
        "Consider flexible dates for cheaper options",
        "Check budget airlines for additional savings",
    ],
    "$$": [
        "Compare multiple airlines for best deals",
        "Consider direct flights to save time",
        "Book 2-3 months in advance for optimal pricing",
    ],
    "$$$": [
        "Premium economy or business class available",
        "Direct flights recommended for convenience",
        "Flexible booking options recommended",
    ],
}

NEIGHBORHOOD_TIPS_BY_BUDGET: dict[str, list[str]] = {
    "$": [
        "Look for hostels or budget hotels near public transport",
        "Consider staying slightly outside the city center for better prices",
        "Book early for the best deals",
    ],
    "$$": [
        "Mid-range hotels in city center offer good value",
        "Check for hotels with breakfast included",
        "Look for properties near the circuit for convenience",
    ],
    "$$$": [
        "Luxury hotels near the circuit or city center",
        "Consider boutique hotels for a unique experience",
        "Book premium accommodations with race weekend packages",
    ],
}
