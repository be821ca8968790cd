# core/constants.py

# --- Participant roles ---
ROLE_STUDENT = "student"
ROLE_FACULTY = "faculty"

ROLE_CHOICES = (
    (ROLE_STUDENT, "Student"),
    (ROLE_FACULTY, "Faculty"),
)

# --- Event niches (category tag picked at registration) ---
NICHE_GAMING = "gaming"
NICHE_SINGING = "singing"
NICHE_DANCING = "dancing"
NICHE_CODING = "coding"

NICHE_CHOICES = (
    (NICHE_GAMING, "Gaming"),
    (NICHE_SINGING, "Singing"),
    (NICHE_DANCING, "Dancing"),
    (NICHE_CODING, "Coding"),
)

# --- Incentives ---
DEFAULT_AWARD_POINTS = 10
MAX_AWARD_POINTS = 10000
LEADERBOARD_MAX_SIZE = 100
