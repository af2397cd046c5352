from dataclasses import dataclass

from src.storefront.core.backend import StoreBackend
from src.storefront.core.services import SubmissionGuard, UserSessionService


@dataclass
class ApplicationDependencies:
    backend: StoreBackend
    user_session_service: UserSessionService
    submission_guard: SubmissionGuard
