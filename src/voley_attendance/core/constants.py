"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DASHBOARD_WINDOW_DAYS = 30
TREND_WINDOW_DAYS = 90

MIN_PASSWORD_LENGTH = 6
BUSY_TIMEOUT_MS = 5000

NO_REASON_PLACEHOLDER = "Sin motivo"

# Index matches day_of_week (0 = Sunday).
DAYS_OF_WEEK = ["Domingo", "Lunes", "Martes", "Miércoles", "Jueves", "Viernes", "Sábado"]

DEFAULT_TRAININGS = [
    (1, "19:00", "21:00", "Lunes"),
    (3, "21:00", "23:00", "Miércoles"),
    (4, "20:00", "22:00", "Jueves"),
    (5, "20:30", "22:00", "Viernes"),
]

DEFAULT_ADMIN_NAME = "Administrador"
