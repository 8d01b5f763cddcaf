"""Static reference data for the trip: courses, fine schedule, activities and golf days.

Nothing here changes at runtime; the scoring code reads holes by course id.
"""
from typing import NamedTuple, Optional


class CourseHole(NamedTuple):
    number: int
    par: int
    yardage: int
    stroke_index: int


class Course(NamedTuple):
    id: str
    name: str
    par: int
    holes: list
    description: str = ""
    website: Optional[str] = None
    signature_hole: Optional[str] = None


def _holes(rows):
    # rows: (par, yardage, stroke_index) for holes 1..18
    return [CourseHole(i, par, yards, si) for i, (par, yards, si) in enumerate(rows, start=1)]


COURSES = {
    "nau": Course(
        id="nau",
        name="NAU Morgado Course",
        par=73,
        description="Traditional Portuguese golf course with rolling hills and strategic bunkers.",
        website="https://www.naumorgado.com/",
        holes=_holes([
            (4, 342, 10), (4, 373, 15), (5, 535, 1), (4, 385, 7), (3, 156, 17), (4, 412, 3),
            (5, 492, 11), (4, 380, 9), (4, 335, 13), (4, 365, 6), (3, 175, 16), (4, 302, 18),
            (5, 510, 2), (4, 390, 8), (3, 145, 14), (4, 375, 4), (4, 410, 12), (5, 525, 5),
        ]),
    ),
    "amendoeira": Course(
        id="amendoeira",
        name="Amendoeira Golf Resort (Faldo Course)",
        par=72,
        description="Par-72 championship design by Sir Nick Faldo, demanding strategic play and careful positioning.",
        website="https://www.amendoeiraresort.com/golf/",
        holes=_holes([
            (4, 415, 7), (3, 174, 17), (4, 342, 13), (5, 486, 3), (4, 375, 9), (3, 165, 15),
            (4, 385, 5), (4, 396, 1), (5, 512, 11), (4, 368, 8), (3, 152, 18), (4, 355, 12),
            (5, 495, 2), (4, 385, 6), (4, 365, 14), (3, 135, 16), (4, 410, 4), (5, 528, 10),
        ]),
    ),
    "quinta": Course(
        id="quinta",
        name="Quinta do Lago South Course",
        par=71,
        description="Premium championship course with lake views and signature holes.",
        website="https://www.quintadolago.com/golf/",
        signature_hole="15th Hole (Par 3) - 200m shot over a lake",
        holes=_holes([
            (4, 390, 11), (5, 500, 15), (4, 385, 7), (3, 175, 17), (5, 505, 1), (4, 410, 3),
            (3, 165, 13), (4, 395, 5), (4, 380, 9), (4, 365, 12), (3, 185, 16), (4, 375, 8),
            (5, 485, 2), (4, 390, 6), (3, 200, 14), (4, 372, 18), (4, 385, 4), (4, 405, 10),
        ]),
    ),
}

# Trip day -> label used by fines
GOLF_DAYS = {
    1: "July 2, 2025",
    2: "July 3, 2025",
    3: "July 5, 2025",
}

STANDARD_FINES = [
    {"type": "3-putt", "name": "3 Putt", "amount": 1, "description": "Taking three putts on any green"},
    {"type": "woody", "name": "Woody", "amount": 1, "description": "Hitting any tree during play"},
    {"type": "wetty", "name": "Wetty", "amount": 1, "description": "Ball landing in water hazard"},
    {"type": "sandy", "name": "Sandy", "amount": 1, "description": "Ball landing in bunker"},
    {"type": "lost-ball", "name": "Lost Ball", "amount": 2, "description": "Losing a ball during play"},
    {"type": "air-shot", "name": "Air Shot", "amount": 2, "description": "Completely missing the ball"},
    {"type": "ladies-tee", "name": "Not Clearing Ladies Tee", "amount": 5, "description": "Drive failing to pass ladies tee box"},
    {"type": "custom", "name": "Custom Fine", "amount": 0, "description": "Add a custom fine with your own amount"},
]

ACTIVITIES = [
    {"id": "beach-pescadores", "name": "Praia dos Pescadores", "category": "Beach Options"},
    {"id": "beach-oura", "name": "Praia da Oura", "category": "Beach Options"},
    {"id": "beach-alemaes", "name": "Praia dos Alemães", "category": "Beach Options"},
    {"id": "water-dolphins", "name": "Dolphin Watching Tours", "category": "Water Activities"},
    {"id": "water-caves", "name": "Sea Cave Exploration", "category": "Water Activities"},
    {"id": "water-jetski", "name": "Jet Skiing", "category": "Water Activities"},
    {"id": "culture-castle", "name": "Silves Castle", "category": "Cultural Experiences"},
    {"id": "culture-oldtown", "name": "Old Town Albufeira", "category": "Cultural Experiences"},
    {"id": "culture-winery", "name": "Local Winery Tours", "category": "Cultural Experiences"},
    {"id": "adventure-jeep", "name": "Jeep Safari", "category": "Adventure Activities"},
    {"id": "adventure-gokart", "name": "Go-kart Racing", "category": "Adventure Activities"},
    {"id": "adventure-zoomarine", "name": "Zoomarine Theme Park", "category": "Adventure Activities"},
]


def get_course(course_id):
    return COURSES.get(course_id)


def get_hole(course_id, hole_number):
    course = COURSES.get(course_id)
    if course is None:
        return None
    for h in course.holes:
        if h.number == hole_number:
            return h
    return None


def standard_fine_amount(fine_type):
    for f in STANDARD_FINES:
        if f["type"] == fine_type:
            return f["amount"]
    return None
