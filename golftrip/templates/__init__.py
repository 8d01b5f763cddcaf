from pathlib import Path

from fastapi.templating import Jinja2Templates

templates = Jinja2Templates(directory=str(Path(__file__).resolve().parent))


def signed(value):
    """Score-to-par as golfers write it: E, +3, -2."""
    if value is None:
        return "-"
    if value == 0:
        return "E"
    return f"+{value}" if value > 0 else str(value)


templates.env.filters["signed"] = signed
