from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .chat.mysql_chat_repository import MySQLChatRepository
from .chat.repository import ChatRepository
from .chat.service import ChatService
from .core.constants import (
    DEFAULT_ATTENDANCE_CODE_TTL_SECONDS,
    DEFAULT_CHAT_LIMIT,
    DEFAULT_SESSION_TTL_SECONDS,
)
from .database.connection import DBConfig, DatabaseConnection
from .favorites.mysql_favorite_repository import MySQLFavoriteRepository
from .favorites.repository import FavoriteRepository
from .favorites.service import FavoriteService
from .health.mysql_health_repository import MySQLHealthRepository
from .health.repository import HealthRepository
from .progress.mysql_progress_repository import MySQLProgressRepository
from .progress.repository import ProgressRepository
from .progress.service import ProgressService
from .sessions.store import SessionStore
from .studies.mysql_study_repository import MySQLStudyRepository
from .studies.repository import StudyRepository
from .studies.service import StudyService
from .topics.mysql_topic_repository import MySQLTopicRepository
from .topics.repository import TopicRepository
from .topics.service import TopicService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService, ProfileService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]
    session_store: SessionStore

    users_repo: UserRepository
    studies_repo: StudyRepository
    favorites_repo: FavoriteRepository
    topics_repo: TopicRepository
    attendance_repo: AttendanceRepository
    progress_repo: ProgressRepository
    chat_repo: ChatRepository
    health_repo: HealthRepository

    auth_service: AuthService
    profile_service: ProfileService
    study_service: StudyService
    favorite_service: FavoriteService
    topic_service: TopicService
    attendance_service: AttendanceService
    progress_service: ProgressService
    chat_service: ChatService


def assemble(
    *,
    conn: Optional[DatabaseConnection],
    session_store: SessionStore,
    users_repo: UserRepository,
    studies_repo: StudyRepository,
    favorites_repo: FavoriteRepository,
    topics_repo: TopicRepository,
    attendance_repo: AttendanceRepository,
    progress_repo: ProgressRepository,
    chat_repo: ChatRepository,
    health_repo: HealthRepository,
    attendance_code_ttl_seconds: int = DEFAULT_ATTENDANCE_CODE_TTL_SECONDS,
    chat_default_limit: int = DEFAULT_CHAT_LIMIT,
) -> Container:
    """Wire services over the given repositories (MySQL ones or in-memory fakes)."""
    attendance_service = AttendanceService(
        attendance_repo,
        studies_repo,
        code_ttl_seconds=attendance_code_ttl_seconds,
    )
    return Container(
        conn=conn,
        session_store=session_store,
        users_repo=users_repo,
        studies_repo=studies_repo,
        favorites_repo=favorites_repo,
        topics_repo=topics_repo,
        attendance_repo=attendance_repo,
        progress_repo=progress_repo,
        chat_repo=chat_repo,
        health_repo=health_repo,
        auth_service=AuthService(users_repo, session_store),
        profile_service=ProfileService(users_repo, session_store, studies_repo, attendance_service),
        study_service=StudyService(studies_repo),
        favorite_service=FavoriteService(favorites_repo, studies_repo),
        topic_service=TopicService(topics_repo),
        attendance_service=attendance_service,
        progress_service=ProgressService(progress_repo, studies_repo),
        chat_service=ChatService(chat_repo, studies_repo, default_limit=chat_default_limit),
    )


def build_container(
    *,
    db_config: dict,
    session_ttl_seconds: int = DEFAULT_SESSION_TTL_SECONDS,
    attendance_code_ttl_seconds: int = DEFAULT_ATTENDANCE_CODE_TTL_SECONDS,
    chat_default_limit: int = DEFAULT_CHAT_LIMIT,
) -> Container:
    config = DBConfig(
        host=str(db_config["host"]),
        port=int(db_config.get("port", 3306)),
        user=str(db_config["user"]),
        password=str(db_config["password"]),
        database=str(db_config["database"]),
        pool_size=int(db_config.get("pool_size", 5)),
    )
    conn = DatabaseConnection.get_instance(config)

    return assemble(
        conn=conn,
        session_store=SessionStore(ttl_seconds=session_ttl_seconds),
        users_repo=MySQLUserRepository(conn),
        studies_repo=MySQLStudyRepository(conn),
        favorites_repo=MySQLFavoriteRepository(conn),
        topics_repo=MySQLTopicRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        progress_repo=MySQLProgressRepository(conn),
        chat_repo=MySQLChatRepository(conn),
        health_repo=MySQLHealthRepository(conn),
        attendance_code_ttl_seconds=attendance_code_ttl_seconds,
        chat_default_limit=chat_default_limit,
    )
