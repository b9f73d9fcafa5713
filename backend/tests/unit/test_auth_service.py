"""Unit tests for the AuthService."""

import pytest

from atelier.application.interfaces import RecordSyncGateway
from atelier.application.schemas.auth import SignupRequest, StaffCreateRequest
from atelier.application.services import AuthService
from atelier.domain.entities import Brief, User, UserRole
from atelier.domain.exceptions import (
    DuplicateEntityError,
    EntityNotFoundError,
    ExternalServiceError,
    InvalidCredentialsError,
    UnauthorizedActionError,
    WorkflowValidationError,
)
from atelier.infrastructure.memory import InMemoryStore
from atelier.infrastructure.security.passwords import hash_password, verify_password


@pytest.fixture
def memory(superadmin, worker) -> InMemoryStore:
    memory = InMemoryStore()
    superadmin.password = hash_password("password123", rounds=4)
    for user in (superadmin, worker):
        memory.users[user.id] = user
    return memory


@pytest.fixture
def service(memory) -> AuthService:
    return AuthService(memory.entity_store().users)


def _signup(email="Ada@Example.com", password="s3cret"):
    return SignupRequest(name="Ada Obi", email=email, password=password, phone=" 555-0100 ")


@pytest.mark.asyncio
async def test_signup_creates_client_with_hashed_password(service):
    user = await service.signup(_signup())

    assert user.role is UserRole.CLIENT
    assert user.email == "ada@example.com"
    assert user.phone == "555-0100"
    assert user.password != "s3cret"
    assert verify_password("s3cret", user.password)


@pytest.mark.asyncio
async def test_signup_rejects_duplicate_email_case_insensitively(service):
    await service.signup(_signup())
    with pytest.raises(DuplicateEntityError):
        await service.signup(_signup(email="ADA@example.com "))


@pytest.mark.asyncio
@pytest.mark.parametrize("email", ["", "not-an-email", "a@b"])
async def test_signup_rejects_malformed_email(service, email):
    with pytest.raises(WorkflowValidationError):
        await service.signup(_signup(email=email))


@pytest.mark.asyncio
async def test_signup_rejects_blank_password(service):
    with pytest.raises(WorkflowValidationError):
        await service.signup(_signup(password=""))


@pytest.mark.asyncio
async def test_login_with_role_groups(service):
    admin = await service.login("anjola@example.com", "password123", "admin")
    assert admin.role is UserRole.SUPERADMIN

    with pytest.raises(InvalidCredentialsError):
        await service.login("anjola@example.com", "password123", "client")


@pytest.mark.asyncio
async def test_login_rejects_wrong_password_and_unknown_email(service):
    with pytest.raises(InvalidCredentialsError):
        await service.login("anjola@example.com", "wrong", "admin")
    with pytest.raises(InvalidCredentialsError):
        await service.login("nobody@example.com", "password123", "admin")


@pytest.mark.asyncio
async def test_reset_password_then_login(service):
    await service.signup(_signup())
    await service.reset_password("ada@example.com", "n3w")

    user = await service.login("ada@example.com", "n3w", "client")
    assert user.name == "Ada Obi"


@pytest.mark.asyncio
async def test_reset_password_for_unknown_email(service):
    with pytest.raises(EntityNotFoundError):
        await service.reset_password("ghost@example.com", "x")


@pytest.mark.asyncio
async def test_superadmin_onboards_staff(service, superadmin):
    data = StaffCreateRequest(name="Ife", email="ife@example.com", password="pw", role=UserRole.INSPECTOR)
    staff = await service.create_staff(superadmin, data)

    assert staff.role is UserRole.INSPECTOR
    listed = await service.list_staff(superadmin)
    assert staff.id in {u.id for u in listed}


@pytest.mark.asyncio
async def test_cannot_onboard_another_superadmin(service, superadmin):
    data = StaffCreateRequest(name="X", email="x@example.com", password="pw", role=UserRole.SUPERADMIN)
    with pytest.raises(WorkflowValidationError):
        await service.create_staff(superadmin, data)


@pytest.mark.asyncio
async def test_worker_cannot_onboard_staff(service, worker):
    data = StaffCreateRequest(name="Y", email="y@example.com", password="pw")
    with pytest.raises(UnauthorizedActionError):
        await service.create_staff(worker, data)


def test_hash_password_uses_bcrypt():
    hashed = hash_password("s3cret", rounds=4)

    assert hashed.startswith("$2b$04$")
    assert hashed != hash_password("s3cret", rounds=4)
    assert verify_password("s3cret", hashed)
    assert not verify_password("S3cret", hashed)


def test_verify_password_rejects_malformed_hash():
    assert not verify_password("anything", "plaintext")
    assert not verify_password("anything", "pbkdf2_sha256$abc$zz$zz")
    assert not verify_password("anything", "$2b$12$garbage")


@pytest.mark.asyncio
async def test_signup_rejects_password_longer_than_bcrypt_accepts(service):
    with pytest.raises(WorkflowValidationError):
        await service.signup(_signup(password="x" * 73))


class DownRecordSync(RecordSyncGateway):
    @property
    def target_name(self) -> str:
        return "down"

    async def sync_client(self, user: User) -> None:
        raise ExternalServiceError(self.target_name, "timeout")

    async def sync_project_brief(self, user: User, brief: Brief) -> None:
        raise ExternalServiceError(self.target_name, "timeout")


@pytest.mark.asyncio
async def test_signup_survives_record_sync_failure(memory, caplog):
    service = AuthService(memory.entity_store().users, record_sync=DownRecordSync())
    user = await service.signup(_signup())

    assert user.id in memory.users
    assert "Record sync failed" in caplog.text
