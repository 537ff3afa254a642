"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_SESSION_TTL_SECONDS = 7 * 24 * 3600
DEFAULT_MAX_MEMBERS = 10
MIN_MAX_MEMBERS = 2
MAX_MAX_MEMBERS = 100
MAX_TAGS = 10

REGION_CODE_MAX_LEN = 20
REGION_PATH_MAX_LEN = 200

ATTENDANCE_CODE_LENGTH = 6
ATTENDANCE_CODE_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789"
DEFAULT_ATTENDANCE_CODE_TTL_SECONDS = 300

DEFAULT_CHAT_LIMIT = 200
MAX_CHAT_LIMIT = 500

# Returned by /api/topics/options when the topics table cannot be read.
FALLBACK_SUBJECTS = (
    "어학",
    "IT/프로그래밍",
    "자격증",
    "취업/이직",
    "공무원/고시",
    "대학 전공",
    "독서/글쓰기",
    "경제/금융",
    "마케팅/경영",
    "디자인/영상",
    "외국어 회화",
    "수능/입시",
    "프로젝트",
    "기타",
)
