from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from .common.datetime_utils import now_local
from .common.logger import get_logger
from .common.security import pin_digest
from .database.connection import DBConfig, DatabaseConnection
from .database.fixtures import DEMO_WORKERS
from .notifications.email import EmailSender
from .passkeys.challenge_store import ChallengeStore
from .passkeys.memory_passkey_repository import InMemoryPasskeyRepository
from .passkeys.mysql_passkey_repository import MySQLPasskeyRepository
from .passkeys.repository import PasskeyRepository
from .passkeys.service import PasskeyService, RelyingParty
from .production.memory_production_repository import InMemoryProductionRepository
from .production.mysql_production_repository import MySQLProductionRepository
from .production.repository import ProductionRepository
from .production.service import ProductionService
from .punches.memory_punch_repository import InMemoryPunchRepository
from .punches.mysql_punch_repository import MySQLPunchRepository
from .punches.repository import PunchRepository
from .punches.service import PunchService
from .timeoff.memory_timeoff_repository import InMemoryTimeOffRepository
from .timeoff.mysql_timeoff_repository import MySQLTimeOffRepository
from .timeoff.repository import TimeOffRepository
from .timeoff.service import TimeOffService
from .verification.memory_verification_repository import InMemoryVerificationCodeRepository
from .verification.mysql_verification_repository import MySQLVerificationCodeRepository
from .verification.repository import VerificationCodeRepository
from .verification.service import VerificationService
from .workers.memory_worker_repository import InMemoryWorkerRepository
from .workers.mysql_worker_repository import MySQLWorkerRepository
from .workers.repository import WorkerRepository
from .workers.service import AuthService, WorkerService

logger = get_logger(__name__)


@dataclass(frozen=True)
class Container:
    demo_mode: bool
    clock: Callable[[], datetime]

    workers_repo: WorkerRepository
    punches_repo: PunchRepository
    production_repo: ProductionRepository
    timeoff_repo: TimeOffRepository
    codes_repo: VerificationCodeRepository
    passkeys_repo: PasskeyRepository

    email_sender: EmailSender
    challenges: ChallengeStore

    auth_service: AuthService
    worker_service: WorkerService
    punch_service: PunchService
    production_service: ProductionService
    timeoff_service: TimeOffService
    verification_service: VerificationService
    passkey_service: PasskeyService


def _seed_demo_workers(workers: WorkerRepository, *, pepper: str) -> None:
    for w in DEMO_WORKERS:
        workers.create_worker(
            pin_digest=pin_digest(w.pin, pepper=pepper),
            full_name=w.full_name,
            role=w.role,
            email=w.email,
            phone=w.phone,
        )


def build_container(
    *,
    db_config: Optional[dict],
    pin_pepper: str,
    relying_party: RelyingParty,
    kiosk_admin_pin: Optional[str] = None,
    resend_api_key: Optional[str] = None,
    from_email: Optional[str] = None,
    clock: Callable[[], datetime] = now_local,
) -> Container:
    """Wire repositories and services.

    `db_config=None` selects demo mode: every repository is in-memory and the
    demo workers are loaded. The choice is made once here, never per request.
    """
    demo_mode = db_config is None
    if demo_mode:
        workers_repo = InMemoryWorkerRepository()
        punches_repo = InMemoryPunchRepository()
        production_repo = InMemoryProductionRepository()
        timeoff_repo = InMemoryTimeOffRepository(workers_repo)
        codes_repo = InMemoryVerificationCodeRepository()
        passkeys_repo = InMemoryPasskeyRepository()
        _seed_demo_workers(workers_repo, pepper=pin_pepper)
        logger.warning("No database configured - running in demo mode with in-memory data")
    else:
        conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
        workers_repo = MySQLWorkerRepository(conn)
        punches_repo = MySQLPunchRepository(conn)
        production_repo = MySQLProductionRepository(conn)
        timeoff_repo = MySQLTimeOffRepository(conn)
        codes_repo = MySQLVerificationCodeRepository(conn)
        passkeys_repo = MySQLPasskeyRepository(conn)

    email_sender = EmailSender(api_key=resend_api_key, from_email=from_email)
    challenges = ChallengeStore(clock=clock)

    return Container(
        demo_mode=demo_mode,
        clock=clock,
        workers_repo=workers_repo,
        punches_repo=punches_repo,
        production_repo=production_repo,
        timeoff_repo=timeoff_repo,
        codes_repo=codes_repo,
        passkeys_repo=passkeys_repo,
        email_sender=email_sender,
        challenges=challenges,
        auth_service=AuthService(
            workers_repo,
            passkeys_repo,
            pin_pepper=pin_pepper,
            kiosk_admin_pin=kiosk_admin_pin,
        ),
        worker_service=WorkerService(workers_repo, pin_pepper=pin_pepper, kiosk_admin_pin=kiosk_admin_pin),
        punch_service=PunchService(punches_repo, clock=clock),
        production_service=ProductionService(production_repo, clock=clock),
        timeoff_service=TimeOffService(timeoff_repo, workers_repo, email_sender, clock=clock),
        verification_service=VerificationService(codes_repo, email_sender, clock=clock),
        passkey_service=PasskeyService(passkeys_repo, challenges, relying_party, clock=clock),
    )
