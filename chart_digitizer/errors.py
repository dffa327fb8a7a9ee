# chart_digitizer/errors.py


class ChartDigitizerError(Exception):
    """Base class for failures of one analysis run."""


class ImageDecodeError(ChartDigitizerError, ValueError):
    """Image is unreadable or corrupt."""


class InsufficientDataError(ChartDigitizerError):
    """Too few trace points were extracted from the image."""

    def __init__(self, found: int, required: int, color: str | None = None):
        self.found = found
        self.required = required
        self.color = color
        hint = f" with color '{color}'" if color else ""
        super().__init__(
            f"Extracted {found} trace points{hint}, need at least {required}. "
            "The line color may be undetected or the line too sparse."
        )


class InsufficientSeriesError(ChartDigitizerError):
    """Series too short for the requested operation."""

    def __init__(self, found: int, required: int = 2):
        self.found = found
        self.required = required
        super().__init__(f"Series has {found} points, need at least {required}.")
